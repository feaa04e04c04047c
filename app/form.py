# app/form.py
from typing import Any, Optional

from .models import Category, Product, ProductIn
from .repository import ProductRepository


class ProductFormController:
    """Stages one product for creation, or edits an existing one.

    Submission requires name, category, price and description; a missing
    field or unknown category raises ValueError before anything is written.
    Store failures propagate untouched so the caller can show their message.
    """

    def __init__(self, repository: ProductRepository, current_product: Optional[Product] = None):
        self.repository = repository
        self.current_product: Optional[Product] = None
        self.draft = ProductIn()
        if current_product is not None:
            self.edit(current_product)

    @property
    def editing(self) -> bool:
        return self.current_product is not None

    def edit(self, product: Product) -> None:
        self.current_product = product
        self.draft = product.to_draft()

    def cancel_edit(self) -> None:
        self.current_product = None
        self.draft = ProductIn()

    def update_draft(self, **fields: Any) -> ProductIn:
        for name, value in fields.items():
            setattr(self.draft, name, value)
        return self.draft

    def _check(self) -> None:
        missing = self.draft.missing_fields()
        if missing:
            raise ValueError(f"Missing required fields: {', '.join(missing)}")
        if self.draft.category not in Category.values():
            raise ValueError(f"Unknown category: {self.draft.category}")

    async def submit(self) -> str:
        """Write the draft; returns the success message."""
        self._check()
        if self.current_product is not None:
            await self.repository.update(self.current_product.id, self.draft)
            self.cancel_edit()
            return "Product updated successfully!"
        await self.repository.create(self.draft)
        self.draft = ProductIn()
        return "Product added successfully!"
