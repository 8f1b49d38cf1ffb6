"""Tests for the session store."""

import json

import httpx
import pytest

from shedload.schemas import User
from shedload.services.rest_client import ApiError, RestClient
from shedload.services.session import AUTH_TOKEN_KEY, USER_DATA_KEY, SessionStore


@pytest.fixture
def user():
    return User(id="u-1", email="asha@example.com", first_name="Asha", last_name="Verma")


class TestSessionStore:
    """Test login state and its persistence."""

    async def test_starts_logged_out(self, storage):
        session = SessionStore(storage)
        await session.load()

        assert not session.is_authenticated
        assert not session.is_loading

    async def test_login_survives_restart(self, storage, user):
        session = SessionStore(storage)
        await session.login(user, token="tok")

        restarted = SessionStore(storage)
        await restarted.load()

        assert restarted.is_authenticated
        assert restarted.user == user
        assert restarted.token == "tok"

    async def test_logout_clears_everything(self, storage, user):
        session = SessionStore(storage)
        await session.login(user, token="tok")
        await session.logout()

        assert not session.is_authenticated
        assert session.token is None
        assert await storage.get_item(USER_DATA_KEY) is None
        assert await storage.get_item(AUTH_TOKEN_KEY) is None

    async def test_admin_flag(self, storage, user):
        session = SessionStore(storage)
        assert not session.is_admin

        await session.login(user.model_copy(update={"is_admin": True}))
        assert session.is_admin

    async def test_storage_failure_is_not_fatal(self, broken_storage, user):
        session = SessionStore(broken_storage)
        await session.load()
        await session.login(user)

        assert session.is_authenticated

        await session.logout()
        assert not session.is_authenticated

    async def test_corrupt_record_is_discarded(self, storage):
        await storage.set_item(USER_DATA_KEY, json.dumps({"email": "not-an-email"}))

        session = SessionStore(storage)
        await session.load()

        assert not session.is_authenticated
        assert await storage.get_item(USER_DATA_KEY) is None


class TestCredentialLogin:
    """Test the API-backed login and signup."""

    async def test_login_with_credentials(self, storage):
        seen = {}

        def handler(request):
            seen["body"] = json.loads(request.content)
            return httpx.Response(
                200,
                json={
                    "accessToken": "jwt-token",
                    "user": {
                        "id": 7,
                        "email": "ops@example.com",
                        "firstName": "Ops",
                        "lastName": "Team",
                        "isAdmin": True,
                    },
                },
            )

        client = RestClient("https://api.test", transport=httpx.MockTransport(handler))
        session = SessionStore(storage)

        user = await session.login_with_credentials(client, "ops@example.com", "secret")

        assert seen["body"] == {"email": "ops@example.com", "password": "secret"}
        assert user.id == "7"
        assert session.is_admin
        assert session.token == "jwt-token"
        assert await storage.get_item(AUTH_TOKEN_KEY) == "jwt-token"

    async def test_rejected_credentials_leave_session_empty(self, storage):
        client = RestClient(
            "https://api.test",
            transport=httpx.MockTransport(
                lambda request: httpx.Response(401, json={"error": "Invalid credentials"})
            ),
        )
        session = SessionStore(storage)

        with pytest.raises(ApiError):
            await session.login_with_credentials(client, "ops@example.com", "wrong")

        assert not session.is_authenticated

    async def test_signup_does_not_log_in(self, storage):
        seen = {}

        def handler(request):
            seen["path"] = request.url.path
            seen["body"] = json.loads(request.content)
            return httpx.Response(201, json={"message": "User created"})

        client = RestClient("https://api.test", transport=httpx.MockTransport(handler))
        session = SessionStore(storage)

        await session.signup(client, "Asha", "Verma", "asha@example.com", "secret1")

        assert seen["path"] == "/api/auth/signup"
        assert seen["body"]["firstName"] == "Asha"
        assert not session.is_authenticated
