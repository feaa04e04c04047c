# app/session.py
import logging
from typing import List, Optional

from .core import with_deadline
from .errors import AdminPanelError, AuthProviderError, InvalidCredentials, LogoutFailed
from .interfaces import AuthService, IdentityListener, Unsubscribe
from .models import Identity

logger = logging.getLogger(__name__)


class SessionManager:
    """Tracks the current identity and fans it out to local listeners.

    Holds a single subscription to the auth service from construction until
    `close()`.
    """

    def __init__(
        self,
        auth: AuthService,
        timeout: float = 10.0,
        initial_auth_token: Optional[str] = None,
    ):
        self.auth = auth
        self.timeout = timeout
        self.initial_auth_token = initial_auth_token
        self._identity: Optional[Identity] = None
        self._listeners: List[IdentityListener] = []
        self._unsubscribe: Optional[Unsubscribe] = auth.on_identity_changed(self._on_identity)

    @property
    def current_identity(self) -> Optional[Identity]:
        return self._identity

    @property
    def closed(self) -> bool:
        return self._unsubscribe is None

    def _on_identity(self, identity: Optional[Identity]) -> None:
        self._identity = identity
        for listener in list(self._listeners):
            listener(identity)

    def subscribe_to_identity(self, callback: IdentityListener) -> Unsubscribe:
        self._listeners.append(callback)
        callback(self._identity)

        def unsubscribe() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)
        return unsubscribe

    async def bootstrap_anonymous(self) -> None:
        if self._identity is not None:
            return
        if self.initial_auth_token:
            try:
                await with_deadline(
                    self.auth.sign_in_with_custom_token(self.initial_auth_token),
                    self.timeout, InvalidCredentials, "custom token sign-in",
                )
                return
            except (AuthProviderError, AdminPanelError) as e:
                logger.error("Error signing in with custom token: %s", e)
        try:
            await with_deadline(
                self.auth.sign_in_anonymously(),
                self.timeout, InvalidCredentials, "anonymous sign-in",
            )
        except (AuthProviderError, AdminPanelError) as e:
            logger.error("Error signing in anonymously: %s", e)

    async def login_with_credentials(self, email: str, password: str) -> Identity:
        try:
            identity = await with_deadline(
                self.auth.sign_in_with_password(email, password),
                self.timeout, InvalidCredentials, "sign-in",
            )
        except AuthProviderError as e:
            raise InvalidCredentials(e.message) from e
        logger.info("signed in as %s", identity.email)
        return identity

    async def logout(self) -> None:
        try:
            await with_deadline(self.auth.sign_out(), self.timeout, LogoutFailed, "sign-out")
        except AuthProviderError as e:
            raise LogoutFailed(e.message) from e
        logger.info("signed out")

    def close(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        self._listeners.clear()
