# app/views.py
from typing import List, Literal, Optional, Union

from pydantic import BaseModel, Field

from .models import Category, ProductIn


class LoginView(BaseModel):
    kind: Literal["login"] = "login"
    title: str = "Admin Login"
    message: Optional[str] = None
    error: Optional[str] = None


class ProductFormView(BaseModel):
    mode: Literal["create", "edit"] = "create"
    title: str = "Add New Product"
    submit_label: str = "Add Product"
    product_id: Optional[str] = None
    draft: ProductIn = Field(default_factory=ProductIn)
    categories: List[str] = Field(default_factory=Category.values)


class ProductRow(BaseModel):
    id: str
    image_url: str
    name: str
    category: str
    price: str


class ProductTableView(BaseModel):
    title: str = "Existing Products"
    rows: List[ProductRow] = Field(default_factory=list)
    empty_message: Optional[str] = None


class DashboardView(BaseModel):
    kind: Literal["dashboard"] = "dashboard"
    title: str = "Admin Dashboard"
    email: str
    message: Optional[str] = None
    error: Optional[str] = None
    form: ProductFormView
    table: ProductTableView


View = Union[LoginView, DashboardView]
