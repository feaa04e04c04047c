# tests/test_form.py
import asyncio

import pytest

from app.database import InMemoryDocumentStore, allow_all
from app.errors import WriteFailed
from app.form import ProductFormController
from app.models import DEFAULT_CATEGORY, Product, ProductIn
from app.repository import ProductRepository


@pytest.fixture
def open_store():
    return InMemoryDocumentStore(policy=allow_all)


@pytest.fixture
def repo(open_store, clock):
    return ProductRepository(open_store, "test-app", clock=clock)


def _fill(form, **overrides):
    fields = dict(name="Eye Lube", category="Eye Drops", price="₹60", description="Lubricating drops")
    fields.update(overrides)
    form.update_draft(**fields)


def _stored_product(store, repo, pid):
    return Product(id=pid, **store_documents(store, repo)[pid])


def store_documents(store, repo):
    return store.documents(repo.collection_path)


def test_create_mode_defaults(repo):
    form = ProductFormController(repo)
    assert not form.editing
    assert form.draft.category == DEFAULT_CATEGORY == "Allopathic Medicines"
    assert form.draft.name == form.draft.price == form.draft.image_url == form.draft.description == ""


def test_create_submit_clears_draft(open_store, repo):
    form = ProductFormController(repo)
    _fill(form)
    message = asyncio.run(form.submit())

    assert message == "Product added successfully!"
    assert form.draft == ProductIn()
    docs = store_documents(open_store, repo)
    assert [d["name"] for d in docs.values()] == ["Eye Lube"]


def test_edit_submit_updates_and_exits_edit_mode(open_store, repo, clock):
    pid = asyncio.run(repo.create(ProductIn(name="Eye Lube", category="Eye Drops",
                                            price="₹60", description="Lubricating drops")))
    existing = _stored_product(open_store, repo, pid)

    form = ProductFormController(repo, current_product=existing)
    assert form.editing
    assert form.draft.name == "Eye Lube"

    clock.advance(30)
    form.update_draft(price="₹65")
    message = asyncio.run(form.submit())

    assert message == "Product updated successfully!"
    assert not form.editing
    updated = _stored_product(open_store, repo, pid)
    assert updated.price == "₹65"
    assert updated.created_at == existing.created_at
    assert updated.updated_at > existing.updated_at


@pytest.mark.parametrize("field", ["name", "category", "price", "description"])
def test_required_fields(open_store, repo, field):
    form = ProductFormController(repo)
    _fill(form, **{field: "  "})
    with pytest.raises(ValueError) as exc:
        asyncio.run(form.submit())
    assert field in str(exc.value)
    assert store_documents(open_store, repo) == {}


def test_image_url_is_optional(open_store, repo):
    form = ProductFormController(repo)
    _fill(form, image_url="")
    asyncio.run(form.submit())
    assert len(store_documents(open_store, repo)) == 1


def test_unknown_category_is_rejected(open_store, repo):
    form = ProductFormController(repo)
    _fill(form, category="Gadgets")
    with pytest.raises(ValueError):
        asyncio.run(form.submit())
    assert store_documents(open_store, repo) == {}


def test_write_failure_propagates_and_keeps_draft(open_store, repo):
    form = ProductFormController(repo)
    _fill(form)
    open_store.offline = True
    with pytest.raises(WriteFailed) as exc:
        asyncio.run(form.submit())
    assert "offline" in exc.value.message
    assert form.draft.name == "Eye Lube"


def test_cancel_edit_restores_create_mode(open_store, repo):
    pid = asyncio.run(repo.create(ProductIn(name="X", category="Syrups", price="₹1", description="x")))
    form = ProductFormController(repo, current_product=_stored_product(open_store, repo, pid))
    form.cancel_edit()
    assert not form.editing
    assert form.draft == ProductIn()
