# app/dashboard.py
import logging
from enum import Enum
from typing import Any, List, Optional

from .errors import (
    InvalidCredentials, LogoutFailed, SubscriptionFailed,
    Unauthorized, WriteFailed,
)
from .form import ProductFormController
from .interfaces import Unsubscribe
from .models import Identity, Product
from .repository import ProductRepository
from .session import SessionManager
from .views import (
    DashboardView, LoginView, ProductFormView, ProductRow, ProductTableView, View,
)

logger = logging.getLogger(__name__)


class DashboardState(str, Enum):
    UNAUTHENTICATED = "unauthenticated"
    AUTHENTICATED = "authenticated"


class AdminDashboard:
    """Gates the product table and form behind an email-authenticated identity.

    The product stream is open only while the state is AUTHENTICATED. Each
    user event records a message or error for the next render and re-raises
    failures so the UI layer can react to them.
    """

    def __init__(self, session: SessionManager, repository: ProductRepository):
        self.session = session
        self.repository = repository
        self.form = ProductFormController(repository)
        self.state = DashboardState.UNAUTHENTICATED
        self.products: List[Product] = []
        self.message: Optional[str] = None
        self.error: Optional[str] = None
        self.subscription_error: Optional[SubscriptionFailed] = None
        self._identity_unsub: Optional[Unsubscribe] = None
        self._products_unsub: Optional[Unsubscribe] = None
        self._subscribed_uid: Optional[str] = None

    @property
    def authenticated(self) -> bool:
        return self.state is DashboardState.AUTHENTICATED

    async def start(self) -> None:
        if self._identity_unsub is None:
            self._identity_unsub = self.session.subscribe_to_identity(self._on_identity)
        await self.session.bootstrap_anonymous()

    def close(self) -> None:
        self._close_products()
        if self._identity_unsub is not None:
            self._identity_unsub()
            self._identity_unsub = None

    # ---------------------------
    # Stream handlers
    # ---------------------------
    def _on_identity(self, identity: Optional[Identity]) -> None:
        if identity is not None and identity.is_admin:
            if self._subscribed_uid == identity.id:
                return
            self._close_products()
            self.state = DashboardState.AUTHENTICATED
            self._subscribed_uid = identity.id
            logger.info("dashboard authenticated for %s", identity.email)
            self._products_unsub = self.repository.subscribe_to_products(
                self._on_products, self._on_products_error
            )
            return
        if self.authenticated:
            logger.info("dashboard left authenticated state")
        self._close_products()
        self.state = DashboardState.UNAUTHENTICATED
        self.products = []
        self.form.cancel_edit()

    def _close_products(self) -> None:
        if self._products_unsub is not None:
            self._products_unsub()
            self._products_unsub = None
        self._subscribed_uid = None
        self.subscription_error = None

    def _on_products(self, products: List[Product]) -> None:
        self.products = products

    def _on_products_error(self, err: SubscriptionFailed) -> None:
        # the last delivered list stays on screen; no resubscription
        self.subscription_error = err
        self.error = f"Failed to load products: {err.message}"

    # ---------------------------
    # User events
    # ---------------------------
    def _reset_feedback(self) -> None:
        self.message = None
        self.error = None

    def _fail(self, text: str, err: Exception) -> None:
        self.error = text
        logger.error("%s (%s)", text, type(err).__name__)

    async def submit_login(self, email: str, password: str) -> Identity:
        self._reset_feedback()
        try:
            identity = await self.session.login_with_credentials(email, password)
        except InvalidCredentials as e:
            self._fail(f"Login failed: {e.message}", e)
            raise
        self.message = "Logged in as Admin!"
        return identity

    async def submit_logout(self) -> None:
        self._reset_feedback()
        try:
            await self.session.logout()
        except LogoutFailed as e:
            self._fail(f"Logout failed: {e.message}", e)
            raise
        self.message = "Logged out."

    async def submit_product(self, **fields: Any) -> str:
        self._reset_feedback()
        if not self.authenticated:
            e = Unauthorized("User not authenticated for this action.")
            self._fail(e.message, e)
            raise e
        try:
            self.form.update_draft(**fields)
            message = await self.form.submit()
        except ValueError as e:
            self._fail(str(e), e)
            raise
        except WriteFailed as e:
            self._fail(f"Failed to save product: {e.message}", e)
            raise
        if self.authenticated:
            self.message = message
        return message

    def request_edit(self, product_id: str) -> Product:
        self._reset_feedback()
        for product in self.products:
            if product.id == product_id:
                self.form.edit(product)
                return product
        e = LookupError(f"Unknown product: {product_id}")
        self._fail(str(e), e)
        raise e

    def cancel_edit(self) -> None:
        self._reset_feedback()
        self.form.cancel_edit()

    async def request_delete(self, product_id: str) -> None:
        self._reset_feedback()
        identity = self.session.current_identity
        if identity is None or not identity.is_admin:
            e = Unauthorized("You must be logged in as an admin to delete products.")
            self._fail(e.message, e)
            raise e
        try:
            await self.repository.delete(product_id)
        except WriteFailed as e:
            self._fail(f"Failed to delete product: {e.message}", e)
            raise
        if self.form.current_product is not None and self.form.current_product.id == product_id:
            self.form.cancel_edit()
        self.message = "Product deleted successfully!"

    # ---------------------------
    # Views
    # ---------------------------
    def render(self) -> View:
        identity = self.session.current_identity
        if not self.authenticated or identity is None:
            return LoginView(message=self.message, error=self.error)
        return DashboardView(
            email=identity.email,
            message=self.message,
            error=self.error,
            form=self.render_form(),
            table=self.render_table(),
        )

    def render_form(self) -> ProductFormView:
        if self.form.editing:
            return ProductFormView(
                mode="edit",
                title="Edit Product",
                submit_label="Update Product",
                product_id=self.form.current_product.id,
                draft=self.form.draft.model_copy(),
            )
        return ProductFormView(draft=self.form.draft.model_copy())

    def render_table(self) -> ProductTableView:
        rows = [
            ProductRow(id=p.id, image_url=p.image_url, name=p.name, category=p.category, price=p.price)
            for p in self.products
        ]
        empty = None if rows else "No products added yet. Add some above!"
        return ProductTableView(rows=rows, empty_message=empty)
