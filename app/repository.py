# app/repository.py
import logging
from datetime import datetime, timezone
from typing import Callable, List, Optional

from pydantic import ValidationError

from .core import products_path, sort_products, with_deadline
from .errors import StoreError, SubscriptionFailed, WriteFailed
from .interfaces import DocumentSnapshot, DocumentStore, Unsubscribe
from .models import PLACEHOLDER_IMAGE_URL, Product, ProductIn, _make_product_document

logger = logging.getLogger(__name__)

ProductsListener = Callable[[List[Product]], None]
SubscriptionErrorListener = Callable[[SubscriptionFailed], None]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ProductRepository:
    """CRUD over `artifacts/{app_id}/public/data/products`.

    Writes wait for the store to acknowledge them; nothing is cached or
    applied optimistically, so the list only changes when the next snapshot
    arrives.
    """

    def __init__(
        self,
        store: DocumentStore,
        app_id: str,
        placeholder_image_url: str = PLACEHOLDER_IMAGE_URL,
        timeout: float = 10.0,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.store = store
        self.app_id = app_id
        self.placeholder_image_url = placeholder_image_url
        self.timeout = timeout
        self.clock = clock

    @property
    def collection_path(self) -> str:
        return products_path(self.app_id)

    def subscribe_to_products(
        self,
        callback: ProductsListener,
        on_error: Optional[SubscriptionErrorListener] = None,
    ) -> Unsubscribe:
        def on_snapshot(docs: List[DocumentSnapshot]) -> None:
            callback(sort_products(self._to_products(docs)))

        def on_store_error(exc: Exception) -> None:
            logger.error("Error fetching products: %s", exc)
            if on_error is not None:
                on_error(SubscriptionFailed(getattr(exc, "message", str(exc))))

        return self.store.watch(self.collection_path, on_snapshot, on_store_error)

    def _to_products(self, docs: List[DocumentSnapshot]) -> List[Product]:
        out = []
        for doc in docs:
            try:
                # the store-assigned id wins over any "id" field inside the document
                product = Product(**{**doc.data, "id": doc.id})
            except ValidationError as e:
                logger.warning("skipping malformed product %s: %s", doc.id, e)
                continue
            if not product.has_known_category:
                # shown as-is; only the form restricts categories
                logger.warning("product %s has unknown category %r", doc.id, product.category)
            out.append(product)
        return out

    async def create(self, product: ProductIn) -> str:
        now = self.clock()
        data = _make_product_document(product, self.placeholder_image_url)
        data["createdAt"] = now
        data["updatedAt"] = now
        try:
            product_id = await with_deadline(
                self.store.add(self.collection_path, data),
                self.timeout, WriteFailed, "create product",
            )
        except StoreError as e:
            raise WriteFailed(e.message) from e
        logger.info("created product %s (%s)", product_id, product.name)
        return product_id

    async def update(self, product_id: str, product: ProductIn) -> None:
        # createdAt is left out of the payload so the stored value survives the merge
        data = _make_product_document(product, self.placeholder_image_url)
        data["updatedAt"] = self.clock()
        try:
            await with_deadline(
                self.store.update(self.collection_path, product_id, data),
                self.timeout, WriteFailed, "update product",
            )
        except StoreError as e:
            raise WriteFailed(e.message) from e
        logger.info("updated product %s", product_id)

    async def delete(self, product_id: str) -> None:
        try:
            await with_deadline(
                self.store.delete(self.collection_path, product_id),
                self.timeout, WriteFailed, "delete product",
            )
        except StoreError as e:
            raise WriteFailed(e.message) from e
        logger.info("deleted product %s", product_id)
