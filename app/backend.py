# app/backend.py
# Wires the services together; every component gets its collaborators
# passed in, nothing is a module-level singleton.
import logging
from typing import Optional

from .adapters.firebase_auth import FirebaseAuthService
from .config import Settings
from .dashboard import AdminDashboard
from .database import InMemoryAuthService, InMemoryDocumentStore
from .interfaces import AuthService, DocumentStore
from .repository import ProductRepository
from .session import SessionManager

logger = logging.getLogger(__name__)


class Backend:
    def __init__(self, auth: AuthService, store: DocumentStore, settings: Settings):
        self.settings = settings
        self.auth = auth
        self.store = store
        self.session = SessionManager(
            auth,
            timeout=settings.request_timeout_seconds,
            initial_auth_token=settings.initial_auth_token,
        )
        self.repository = ProductRepository(
            store,
            settings.app_id,
            placeholder_image_url=settings.placeholder_image_url,
            timeout=settings.request_timeout_seconds,
        )
        self.dashboard = AdminDashboard(self.session, self.repository)

    async def start(self) -> None:
        await self.dashboard.start()

    def close(self) -> None:
        self.dashboard.close()
        self.session.close()

    async def aclose(self) -> None:
        self.close()
        # only network-backed auth services hold a client
        aclose = getattr(self.auth, "aclose", None)
        if aclose is not None:
            await aclose()


def build_auth(settings: Settings) -> AuthService:
    if settings.firebase_api_key:
        logger.info("using Firebase Auth at %s", settings.firebase_auth_base_url)
        return FirebaseAuthService(
            settings.firebase_api_key,
            base_url=settings.firebase_auth_base_url,
            timeout=settings.request_timeout_seconds,
        )
    auth = InMemoryAuthService()
    auth.add_account(settings.admin_email, settings.admin_password)
    return auth


def build_backend(
    settings: Optional[Settings] = None,
    auth: Optional[AuthService] = None,
    store: Optional[DocumentStore] = None,
) -> Backend:
    settings = settings or Settings()
    auth = auth or build_auth(settings)
    store = store or InMemoryDocumentStore(auth=auth, latency=settings.store_latency_seconds)
    return Backend(auth, store, settings)
