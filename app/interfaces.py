# app/interfaces.py
"""Contracts for the external auth service and document store.

The components only ever talk to these protocols, so the in-memory backend,
the Firebase adapter and test fakes are interchangeable.
"""
from typing import Any, Callable, Dict, List, Optional, Protocol, runtime_checkable

from pydantic import BaseModel, Field

from .models import Identity

Unsubscribe = Callable[[], None]
IdentityListener = Callable[[Optional[Identity]], None]


class DocumentSnapshot(BaseModel):
    id: str
    data: Dict[str, Any] = Field(default_factory=dict)


SnapshotListener = Callable[[List[DocumentSnapshot]], None]
ErrorListener = Callable[[Exception], None]


@runtime_checkable
class AuthService(Protocol):
    @property
    def current_identity(self) -> Optional[Identity]:
        ...

    async def sign_in_with_password(self, email: str, password: str) -> Identity:
        ...

    async def sign_in_anonymously(self) -> Identity:
        ...

    async def sign_in_with_custom_token(self, token: str) -> Identity:
        ...

    async def sign_out(self) -> None:
        ...

    def on_identity_changed(self, callback: IdentityListener) -> Unsubscribe:
        """Register `callback`; it is called at once with the current identity."""
        ...


@runtime_checkable
class DocumentStore(Protocol):
    async def add(self, path: str, data: Dict[str, Any]) -> str:
        ...

    async def update(self, path: str, doc_id: str, data: Dict[str, Any]) -> None:
        """Merge `data` into an existing document; StoreError('not-found') if absent."""
        ...

    async def delete(self, path: str, doc_id: str) -> None:
        ...

    def watch(
        self,
        path: str,
        on_snapshot: SnapshotListener,
        on_error: Optional[ErrorListener] = None,
    ) -> Unsubscribe:
        """Deliver the full collection to `on_snapshot` now and after every change."""
        ...
