# tests/test_session.py
import asyncio
import logging

import pytest

from app.database import InMemoryAuthService
from app.errors import AuthProviderError, InvalidCredentials, LogoutFailed
from app.session import SessionManager
from conftest import ADMIN_EMAIL, ADMIN_PASSWORD


class BrokenAuth(InMemoryAuthService):
    async def sign_in_anonymously(self):
        raise AuthProviderError("auth/operation-not-allowed", "Anonymous sign-in is disabled.")

    async def sign_out(self):
        raise AuthProviderError("auth/network-request-failed", "Network error.")


def test_subscribe_fires_immediately_and_on_change(session):
    seen = []
    session.subscribe_to_identity(seen.append)
    assert seen == [None]

    identity = asyncio.run(session.login_with_credentials(ADMIN_EMAIL, ADMIN_PASSWORD))
    assert seen[-1] == identity
    assert identity.email == ADMIN_EMAIL
    assert identity.is_admin

    asyncio.run(session.logout())
    assert seen[-1] is None
    assert session.current_identity is None


def test_wrong_password_raises_and_emits_nothing(session):
    seen = []
    session.subscribe_to_identity(seen.append)
    with pytest.raises(InvalidCredentials) as exc:
        asyncio.run(session.login_with_credentials(ADMIN_EMAIL, "wrong"))
    assert exc.value.message == "Error (auth/wrong-password)."
    assert seen == [None]


def test_bootstrap_signs_in_anonymously(session):
    asyncio.run(session.bootstrap_anonymous())
    identity = session.current_identity
    assert identity.is_anonymous
    assert not identity.is_admin


def test_bootstrap_is_noop_with_active_identity(session):
    admin = asyncio.run(session.login_with_credentials(ADMIN_EMAIL, ADMIN_PASSWORD))
    asyncio.run(session.bootstrap_anonymous())
    assert session.current_identity == admin


def test_bootstrap_prefers_custom_token(auth):
    uid = auth.add_custom_token("tok-1")
    s = SessionManager(auth, initial_auth_token="tok-1")
    asyncio.run(s.bootstrap_anonymous())
    assert s.current_identity.id == uid
    assert not s.current_identity.is_anonymous


def test_bootstrap_falls_back_when_custom_token_fails(auth, caplog):
    s = SessionManager(auth, initial_auth_token="bogus")
    with caplog.at_level(logging.ERROR, logger="app.session"):
        asyncio.run(s.bootstrap_anonymous())
    assert s.current_identity.is_anonymous
    assert "custom token" in caplog.text


def test_bootstrap_failure_is_logged_not_raised(caplog):
    s = SessionManager(BrokenAuth())
    with caplog.at_level(logging.ERROR, logger="app.session"):
        asyncio.run(s.bootstrap_anonymous())
    assert s.current_identity is None
    assert "Anonymous sign-in is disabled." in caplog.text


def test_logout_failure():
    s = SessionManager(BrokenAuth())
    with pytest.raises(LogoutFailed) as exc:
        asyncio.run(s.logout())
    assert exc.value.message == "Network error."


def test_login_times_out():
    slow = InMemoryAuthService(latency=5)
    slow.add_account(ADMIN_EMAIL, ADMIN_PASSWORD)
    s = SessionManager(slow, timeout=0.05)
    with pytest.raises(InvalidCredentials) as exc:
        asyncio.run(s.login_with_credentials(ADMIN_EMAIL, ADMIN_PASSWORD))
    assert "timed out" in exc.value.message
    assert s.current_identity is None


def test_close_releases_the_auth_subscription(auth):
    s = SessionManager(auth)
    assert auth.listener_count == 1
    s.close()
    s.close()
    assert auth.listener_count == 0
    assert s.closed
