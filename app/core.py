# app/core.py
import asyncio
from typing import Awaitable, Iterable, List, Type, TypeVar

from .errors import AdminPanelError
from .models import Product

T = TypeVar("T")


def products_path(app_id: str) -> str:
    return f"artifacts/{app_id}/public/data/products"


def sort_products(products: Iterable[Product]) -> List[Product]:
    # stable; independent of the order the store hands documents back
    return sorted(products, key=lambda p: (p.category, p.name))


async def with_deadline(
    awaitable: Awaitable[T],
    timeout: float,
    error_cls: Type[AdminPanelError],
    action: str,
) -> T:
    """Await `awaitable`, raising `error_cls` if it has not finished within `timeout`."""
    try:
        return await asyncio.wait_for(awaitable, timeout=timeout)
    except asyncio.TimeoutError:
        raise error_cls(f"{action} timed out after {timeout:g}s") from None
