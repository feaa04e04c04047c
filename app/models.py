# app/models.py
from datetime import datetime
from enum import Enum
from typing import Optional, Dict, Any

from pydantic import BaseModel, ConfigDict, Field

PLACEHOLDER_IMAGE_URL = "https://placehold.co/400x250/cccccc/333333?text=No+Image"


class Category(str, Enum):
    ALLOPATHIC = "Allopathic Medicines"
    AYURVEDIC = "Ayurvedic Medicines"
    HOMEOPATHIC = "Homeopathic Medicines"
    GENERIC = "Generic Medicines"
    VETERINARY = "Veterinary Medicines"
    UNANI = "Unani Medicines & Maajum"
    SYRUPS = "Syrups"
    EYE_DROPS = "Eye Drops"
    BODY_LOTIONS = "Body Lotions"
    SURGICAL = "Surgical Appliances"
    PROTEIN_POWDER = "Protein Powder"
    HAIR_FALL_SERUM = "Hair Fall Serum"
    INJECTIONS = "Injections"
    HOUSEHOLD = "Household Essentials"
    SNACKS = "Snacks & Beverages"
    SELF_CARE = "Self-care & Grooming Products"
    COSMETICS = "Cosmetic Products"
    BABY_CARE = "Baby Care Products"

    @classmethod
    def values(cls):
        return [c.value for c in cls]


DEFAULT_CATEGORY = Category.ALLOPATHIC.value


class Identity(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    email: Optional[str] = None
    is_anonymous: bool = False

    @property
    def is_admin(self) -> bool:
        # anonymous principals never carry an email
        return bool(self.email)


class ProductIn(BaseModel):
    """Mutable fields of a product, as staged by the form."""

    model_config = ConfigDict(populate_by_name=True, validate_assignment=True)

    name: str = ""
    category: str = DEFAULT_CATEGORY
    price: str = ""
    image_url: str = Field(default="", alias="imageUrl")
    description: str = ""

    def missing_fields(self):
        required = ("name", "category", "price", "description")
        return [f for f in required if not getattr(self, f).strip()]


class Product(ProductIn):
    """A stored product record; `id` comes from the store."""

    # other writers may store price as a number
    model_config = ConfigDict(populate_by_name=True, frozen=True, coerce_numbers_to_str=True)

    id: str
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")
    updated_at: Optional[datetime] = Field(default=None, alias="updatedAt")

    @property
    def has_known_category(self) -> bool:
        return self.category in Category.values()

    def to_draft(self) -> ProductIn:
        return ProductIn(
            name=self.name,
            category=self.category,
            price=self.price,
            image_url=self.image_url,
            description=self.description,
        )


def _make_product_document(p: ProductIn, placeholder: str) -> Dict[str, Any]:
    return {
        "name": p.name,
        "category": p.category,
        "price": p.price,
        "imageUrl": p.image_url or placeholder,
        "description": p.description,
    }
