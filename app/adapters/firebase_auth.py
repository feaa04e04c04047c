# app/adapters/firebase_auth.py
"""Firebase Authentication over the Identity Toolkit REST API.

Only the identity itself is kept; ID/refresh tokens are never inspected.
Sign-out is local, since the REST API has no session to end.
"""
import logging
from typing import Any, Dict, List, Optional

import httpx

from ..errors import AuthProviderError
from ..interfaces import IdentityListener, Unsubscribe
from ..models import Identity

logger = logging.getLogger(__name__)


class FirebaseAuthService:
    def __init__(
        self,
        api_key: str,
        base_url: str = "https://identitytoolkit.googleapis.com/v1",
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = 10.0,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.client = client or httpx.AsyncClient(timeout=timeout)
        self._current: Optional[Identity] = None
        self._listeners: List[IdentityListener] = []

    @property
    def current_identity(self) -> Optional[Identity]:
        return self._current

    async def aclose(self) -> None:
        await self.client.aclose()

    async def _post(self, method: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        try:
            r = await self.client.post(
                f"{self.base_url}/accounts:{method}",
                params={"key": self.api_key},
                json={**payload, "returnSecureToken": True},
            )
        except httpx.HTTPError as e:
            raise AuthProviderError("auth/network-request-failed", str(e)) from e
        try:
            body = r.json() if r.content else {}
        except ValueError:
            # proxies and gateways answer with HTML
            body = {}
        if r.status_code >= 400:
            # {"error": {"code": 400, "message": "INVALID_PASSWORD"}}
            message = body.get("error", {}).get("message", f"HTTP {r.status_code}")
            raise AuthProviderError(message.split(" ")[0], message)
        return body

    async def sign_in_with_password(self, email: str, password: str) -> Identity:
        body = await self._post("signInWithPassword", {"email": email, "password": password})
        return self._set_current(self._identity_from(body))

    async def sign_in_anonymously(self) -> Identity:
        # signUp with no email/password creates an anonymous account
        body = await self._post("signUp", {})
        return self._set_current(self._identity_from(body, anonymous=True))

    async def sign_in_with_custom_token(self, token: str) -> Identity:
        body = await self._post("signInWithCustomToken", {"token": token})
        return self._set_current(self._identity_from(body))

    async def sign_out(self) -> None:
        self._set_current(None)

    def on_identity_changed(self, callback: IdentityListener) -> Unsubscribe:
        self._listeners.append(callback)
        callback(self._current)

        def unsubscribe() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)
        return unsubscribe

    @staticmethod
    def _identity_from(body: Dict[str, Any], anonymous: bool = False) -> Identity:
        return Identity(id=body["localId"], email=body.get("email") or None, is_anonymous=anonymous)

    def _set_current(self, identity: Optional[Identity]) -> Optional[Identity]:
        self._current = identity
        logger.info("firebase identity changed: %s", identity.id if identity else None)
        for listener in list(self._listeners):
            listener(identity)
        return identity
