# tests/test_database.py
import asyncio

import pytest

from app.database import InMemoryDocumentStore, public_read_admin_write
from app.errors import StoreError
from app.models import Identity
from conftest import ADMIN_EMAIL, ADMIN_PASSWORD

PATH = "artifacts/db-test/public/data/products"


def test_policy_allows_public_read_and_admin_write():
    anon = Identity(id="a", is_anonymous=True)
    admin = Identity(id="b", email=ADMIN_EMAIL)
    assert public_read_admin_write(None, "read")
    assert public_read_admin_write(anon, "read")
    assert not public_read_admin_write(None, "write")
    assert not public_read_admin_write(anon, "write")
    assert public_read_admin_write(admin, "write")


def test_denied_watch_reports_error(store):
    store.policy = lambda identity, op: False
    errors = []
    unsubscribe = store.watch(PATH, lambda docs: None, errors.append)
    unsubscribe()
    assert errors[0].code == "permission-denied"
    assert store.watcher_count(PATH) == 0


def test_update_merges_fields(auth, store):
    async def scenario():
        await auth.sign_in_with_password(ADMIN_EMAIL, ADMIN_PASSWORD)
        doc_id = await store.add(PATH, {"name": "A", "createdAt": 1})
        await store.update(PATH, doc_id, {"name": "B"})
        return doc_id

    doc_id = asyncio.run(scenario())
    assert store.documents(PATH)[doc_id] == {"name": "B", "createdAt": 1}


def test_every_write_delivers_full_snapshot(auth, store):
    snapshots = []
    store.watch(PATH, snapshots.append)

    async def scenario():
        await auth.sign_in_with_password(ADMIN_EMAIL, ADMIN_PASSWORD)
        first = await store.add(PATH, {"name": "A"})
        await store.add(PATH, {"name": "B"})
        await store.delete(PATH, first)

    asyncio.run(scenario())
    assert [len(s) for s in snapshots] == [0, 1, 2, 1]
    assert snapshots[-1][0].data == {"name": "B"}


def test_write_denied_for_anonymous(auth, store):
    async def scenario():
        await auth.sign_in_anonymously()
        await store.add(PATH, {"name": "A"})

    with pytest.raises(StoreError) as exc:
        asyncio.run(scenario())
    assert exc.value.code == "permission-denied"


def test_failing_listener_does_not_fail_the_write(auth, store):
    def broken(docs):
        if docs:
            raise RuntimeError("listener bug")

    snapshots = []
    store.watch(PATH, broken)
    store.watch(PATH, snapshots.append)

    async def scenario():
        await auth.sign_in_with_password(ADMIN_EMAIL, ADMIN_PASSWORD)
        return await store.add(PATH, {"name": "A"})

    doc_id = asyncio.run(scenario())
    assert doc_id in store.documents(PATH)
    assert [len(s) for s in snapshots] == [0, 1]
