# app/database.py
# In-process auth service and realtime document store. They stand in for the
# hosted backend in the HTTP app, the demos and the tests.
import asyncio
import logging
import uuid
from typing import Any, Callable, Dict, List, Optional, Tuple

from .errors import AuthProviderError, StoreError
from .interfaces import (
    AuthService, DocumentSnapshot, ErrorListener, IdentityListener,
    SnapshotListener, Unsubscribe,
)
from .models import Identity

logger = logging.getLogger(__name__)

AccessPolicy = Callable[[Optional[Identity], str], bool]


def public_read_admin_write(identity: Optional[Identity], operation: str) -> bool:
    """Anyone may read; only email-authenticated identities may write."""
    if operation == "read":
        return True
    return identity is not None and identity.is_admin


def allow_all(identity: Optional[Identity], operation: str) -> bool:
    return True


def _unsubscriber(listeners: List[Any], entry: Any) -> Unsubscribe:
    def unsubscribe() -> None:
        # safe to call more than once
        if entry in listeners:
            listeners.remove(entry)
    return unsubscribe


# ---------------------------
# Auth
# ---------------------------
class InMemoryAuthService:
    def __init__(self, latency: float = 0.0):
        self.latency = latency
        self._accounts: Dict[str, str] = {}
        self._uids: Dict[str, str] = {}
        self._custom_tokens: Dict[str, str] = {}
        self._current: Optional[Identity] = None
        self._listeners: List[IdentityListener] = []

    @property
    def current_identity(self) -> Optional[Identity]:
        return self._current

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def add_account(self, email: str, password: str) -> str:
        self._accounts[email] = password
        return self._uids.setdefault(email, uuid.uuid4().hex)

    def add_custom_token(self, token: str, uid: Optional[str] = None) -> str:
        uid = uid or uuid.uuid4().hex
        self._custom_tokens[token] = uid
        return uid

    async def sign_in_with_password(self, email: str, password: str) -> Identity:
        await asyncio.sleep(self.latency)
        if email not in self._accounts:
            raise AuthProviderError("auth/user-not-found", "Error (auth/user-not-found).")
        if self._accounts[email] != password:
            raise AuthProviderError("auth/wrong-password", "Error (auth/wrong-password).")
        self._set_current(Identity(id=self._uids[email], email=email))
        return self._current

    async def sign_in_anonymously(self) -> Identity:
        await asyncio.sleep(self.latency)
        self._set_current(Identity(id=uuid.uuid4().hex, is_anonymous=True))
        return self._current

    async def sign_in_with_custom_token(self, token: str) -> Identity:
        await asyncio.sleep(self.latency)
        uid = self._custom_tokens.get(token)
        if uid is None:
            raise AuthProviderError("auth/invalid-custom-token", "Error (auth/invalid-custom-token).")
        self._set_current(Identity(id=uid))
        return self._current

    async def sign_out(self) -> None:
        await asyncio.sleep(self.latency)
        self._set_current(None)

    def on_identity_changed(self, callback: IdentityListener) -> Unsubscribe:
        self._listeners.append(callback)
        callback(self._current)
        return _unsubscriber(self._listeners, callback)

    def _set_current(self, identity: Optional[Identity]) -> None:
        self._current = identity
        for listener in list(self._listeners):
            listener(identity)


# ---------------------------
# Document store
# ---------------------------
class InMemoryDocumentStore:
    def __init__(
        self,
        auth: Optional[AuthService] = None,
        policy: AccessPolicy = public_read_admin_write,
        latency: float = 0.0,
    ):
        self.auth = auth
        self.policy = policy
        self.latency = latency
        self.offline = False
        self._collections: Dict[str, Dict[str, Dict[str, Any]]] = {}
        self._watchers: Dict[str, List[Tuple[SnapshotListener, Optional[ErrorListener]]]] = {}
        self._locks: Dict[str, asyncio.Lock] = {}

    def _get_lock(self, key: str) -> asyncio.Lock:
        if key not in self._locks:
            self._locks[key] = asyncio.Lock()
        return self._locks[key]

    def _check(self, path: str, operation: str) -> None:
        if self.offline:
            raise StoreError("unavailable", "Failed to get document because the client is offline.")
        identity = self.auth.current_identity if self.auth is not None else None
        if not self.policy(identity, operation):
            raise StoreError("permission-denied", "Missing or insufficient permissions.")

    def documents(self, path: str) -> Dict[str, Dict[str, Any]]:
        return {doc_id: dict(data) for doc_id, data in self._collections.get(path, {}).items()}

    def watcher_count(self, path: str) -> int:
        return len(self._watchers.get(path, []))

    async def add(self, path: str, data: Dict[str, Any]) -> str:
        # permissions are evaluated when the request is issued, not when it lands
        self._check(path, "write")
        await asyncio.sleep(self.latency)
        doc_id = uuid.uuid4().hex
        self._collections.setdefault(path, {})[doc_id] = dict(data)
        self._notify(path)
        return doc_id

    async def update(self, path: str, doc_id: str, data: Dict[str, Any]) -> None:
        self._check(path, "write")
        await asyncio.sleep(self.latency)
        async with self._get_lock(f"{path}/{doc_id}"):
            docs = self._collections.get(path, {})
            if doc_id not in docs:
                raise StoreError("not-found", f"No document to update: {path}/{doc_id}")
            docs[doc_id].update(data)
        self._notify(path)

    async def delete(self, path: str, doc_id: str) -> None:
        self._check(path, "write")
        await asyncio.sleep(self.latency)
        async with self._get_lock(f"{path}/{doc_id}"):
            self._collections.get(path, {}).pop(doc_id, None)
        self._notify(path)

    def watch(
        self,
        path: str,
        on_snapshot: SnapshotListener,
        on_error: Optional[ErrorListener] = None,
    ) -> Unsubscribe:
        try:
            self._check(path, "read")
        except StoreError as e:
            if on_error is not None:
                on_error(e)
            return lambda: None
        watchers = self._watchers.setdefault(path, [])
        entry = (on_snapshot, on_error)
        watchers.append(entry)
        on_snapshot(self._snapshot(path))
        return _unsubscriber(watchers, entry)

    def fail_watchers(self, path: str, code: str, message: str) -> None:
        """Terminate every listener on `path` with a StoreError, as a revoked rule would."""
        watchers = self._watchers.pop(path, [])
        for _, on_error in watchers:
            if on_error is not None:
                on_error(StoreError(code, message))

    def _snapshot(self, path: str) -> List[DocumentSnapshot]:
        return [
            DocumentSnapshot(id=doc_id, data=dict(data))
            for doc_id, data in self._collections.get(path, {}).items()
        ]

    def _notify(self, path: str) -> None:
        watchers = list(self._watchers.get(path, []))
        if not watchers:
            return
        snapshot = self._snapshot(path)
        logger.debug("delivering %d documents to %d watchers on %s", len(snapshot), len(watchers), path)
        for on_snapshot, _ in watchers:
            # a failing reader must not fail the write that triggered it
            try:
                on_snapshot(list(snapshot))
            except Exception:
                logger.exception("snapshot listener on %s failed", path)
