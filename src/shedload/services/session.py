"""Session store for the logged-in user."""

import logging

from pydantic import ValidationError

from shedload.db.storage import DurableStorage, StorageError
from shedload.schemas import User
from shedload.services.rest_client import RestClient

logger = logging.getLogger(__name__)

USER_DATA_KEY = "swifttrack_user_data"
AUTH_TOKEN_KEY = "swifttrack_auth_token"


class SessionStore:
    """Holds the current user and persists it across restarts.

    The in-memory session is authoritative: storage failures are logged and
    never undo a login or logout.
    """

    def __init__(self, storage: DurableStorage):
        self.storage = storage
        self.user: User | None = None
        self.token: str | None = None
        self.is_loading = True

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    @property
    def is_admin(self) -> bool:
        return self.user is not None and self.user.is_admin

    async def load(self) -> None:
        """Restore a persisted session, if any."""
        try:
            stored_user = await self.storage.get_item(USER_DATA_KEY)
            stored_token = await self.storage.get_item(AUTH_TOKEN_KEY)
        except StorageError as e:
            logger.warning("Failed to load session from storage: %s", e)
            self.is_loading = False
            return

        if stored_user:
            try:
                self.user = User.model_validate_json(stored_user)
                self.token = stored_token
            except ValidationError as e:
                logger.error("Discarding corrupt session record: %s", e)
                await self._clear_persisted()

        self.is_loading = False

    async def login(self, user: User, token: str | None = None) -> None:
        """Hold user as the current session and persist it."""
        self.user = user
        self.token = token
        try:
            await self.storage.set_item(USER_DATA_KEY, user.model_dump_json())
            if token:
                await self.storage.set_item(AUTH_TOKEN_KEY, token)
            else:
                await self.storage.remove_item(AUTH_TOKEN_KEY)
        except StorageError as e:
            logger.warning("Failed to save session to storage: %s", e)
        logger.info("Logged in %s", user.email)

    async def logout(self) -> None:
        """Drop the current session."""
        if self.user:
            logger.info("Logged out %s", self.user.email)
        self.user = None
        self.token = None
        await self._clear_persisted()

    async def login_with_credentials(self, client: RestClient, email: str, password: str) -> User:
        """Exchange credentials for a token via the API and log in."""
        response = await client.post("/api/auth/login", json={"email": email, "password": password})
        user = user_from_api(response["user"])
        await self.login(user, response.get("accessToken"))
        return user

    async def signup(
        self,
        client: RestClient,
        first_name: str,
        last_name: str,
        email: str,
        password: str,
    ) -> None:
        """Register a new account. The user must log in afterwards."""
        await client.post(
            "/api/auth/signup",
            json={
                "firstName": first_name,
                "lastName": last_name,
                "email": email,
                "password": password,
            },
        )
        logger.info("Signed up %s", email)

    async def _clear_persisted(self) -> None:
        try:
            await self.storage.remove_item(USER_DATA_KEY)
            await self.storage.remove_item(AUTH_TOKEN_KEY)
        except StorageError as e:
            logger.warning("Failed to remove session from storage: %s", e)


def user_from_api(data: dict) -> User:
    """Map an API user record (camel or snake case) to User."""
    return User(
        id=str(data["id"]),
        email=data["email"],
        first_name=data.get("firstName") or data.get("first_name"),
        last_name=data.get("lastName") or data.get("last_name"),
        is_admin=bool(data.get("isAdmin", data.get("is_admin", False))),
    )
