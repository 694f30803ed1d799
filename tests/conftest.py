import pytest
from fastapi.testclient import TestClient

from wctips.core.dependencies import get_auth_service, get_store
from wctips.core.errors import NotAuthenticated
from wctips.core.rate_limit import limiter
from wctips.database.memory_store import InMemoryStore
from wctips.main import app


def make_user(user_id, email=None):
    return {
        "id": user_id,
        "email": email or f"{user_id}@example.com",
        "user_metadata": {},
        "app_metadata": {},
    }


@pytest.fixture(autouse=True)
def disable_rate_limits():
    original = limiter.enabled
    limiter.enabled = False
    try:
        yield
    finally:
        limiter.enabled = original


@pytest.fixture
def store():
    return InMemoryStore()


class FakeAuthService:
    """Identity provider that knows the tokens handed out by ApiClient.login_as."""

    def __init__(self):
        self.users = {}
        self.lookups = []

    def get_current_user(self, token):
        self.lookups.append(token)
        if token not in self.users:
            raise NotAuthenticated("Invalid or expired token")
        return self.users[token]

    def logout(self, token):
        self.users.pop(token, None)
        return True


class ApiClient:
    """TestClient whose signed-in user can be switched per call."""

    def __init__(self, client, store, auth):
        self.client = client
        self.store = store
        self.auth = auth

    def login_as(self, user_id):
        token = f"token-{user_id}"
        self.auth.users[token] = make_user(user_id)
        self.client.headers["Authorization"] = f"Bearer {token}"
        return self

    def use_token(self, token):
        self.client.headers["Authorization"] = f"Bearer {token}"
        return self

    def logout(self):
        self.client.headers.pop("Authorization", None)
        return self


@pytest.fixture
def api(store):
    auth = FakeAuthService()
    api_client = ApiClient(TestClient(app), store, auth)
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_auth_service] = lambda: auth
    try:
        yield api_client
    finally:
        app.dependency_overrides.pop(get_store, None)
        app.dependency_overrides.pop(get_auth_service, None)
