# tests/conftest.py

"""
Pytest configuration and shared fixtures for testing.
"""

import pytest
from contextlib import ExitStack
from fastapi.testclient import TestClient
from unittest.mock import Mock, patch
from typing import Generator

from main import create_app
from dependencies.auth import CurrentUser, get_current_user


# Every module that resolves its own Supabase client
SUPABASE_PATCH_TARGETS = (
    "dependencies.auth.get_supabase_client",
    "core.supabase_helpers.get_supabase_client",
    "routers.auth.get_supabase_client",
    "routers.cotizaciones.get_supabase_client",
    "routers.requerimientos.get_supabase_client",
)

# Query-builder methods that return the builder itself
CHAIN_METHODS = (
    "select", "insert", "update", "upsert", "delete",
    "eq", "neq", "ilike", "order", "limit", "in_", "maybe_single",
)


class FakeSupabase:
    """
    Mock Supabase client with one query builder per table.

    respond("profiles", [row], None) makes the next two .execute() calls
    on that table return data=[row] and data=None, in order.
    """

    def __init__(self):
        self.client = Mock()
        self.queries = {}
        self.client.table.side_effect = self.query

    def query(self, name: str) -> Mock:
        if name not in self.queries:
            q = Mock()
            for method in CHAIN_METHODS:
                getattr(q, method).return_value = q
            q.execute.return_value = Mock(data=[])
            self.queries[name] = q
        return self.queries[name]

    def respond(self, name: str, *payloads) -> Mock:
        q = self.query(name)
        q.execute.side_effect = [Mock(data=p) for p in payloads]
        return q

    def fail(self, name: str, error: Exception) -> Mock:
        q = self.query(name)
        q.execute.side_effect = error
        return q


@pytest.fixture(scope="function")
def app():
    """Create a test FastAPI application instance."""
    return create_app()


@pytest.fixture(scope="function")
def client(app) -> Generator[TestClient, None, None]:
    """Create a test client for the FastAPI application."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def fake_supabase() -> Generator[FakeSupabase, None, None]:
    """Patch every get_supabase_client() with one shared fake."""
    fake = FakeSupabase()
    with ExitStack() as stack:
        for target in SUPABASE_PATCH_TARGETS:
            stack.enter_context(patch(target, return_value=fake.client))
        yield fake


@pytest.fixture
def login_as(app):
    """Bypass token validation: login_as(user) sets the session user."""
    def _login(user: CurrentUser):
        app.dependency_overrides[get_current_user] = lambda: user
        return user

    yield _login
    app.dependency_overrides.clear()


def make_user(role, is_active=True, permissions=None, **kwargs) -> CurrentUser:
    data = {
        "id": f"{role or 'none'}-profile-id",
        "auth_user_id": f"{role or 'none'}-auth-id",
        "email": f"{role or 'none'}@example.com",
        "full_name": f"Test {role}",
        "role": role,
        "is_active": is_active,
        "permissions": permissions,
    }
    data.update(kwargs)
    return CurrentUser(**data)


@pytest.fixture
def mock_admin_user():
    return make_user("admin")


@pytest.fixture
def mock_current_user():
    """Regular 'user' role: everything but the admin panel."""
    return make_user("user")


@pytest.fixture
def mock_lector_user():
    return make_user("lector")


@pytest.fixture
def mock_pending_user():
    return make_user("pending", is_active=False)


@pytest.fixture
def mock_blocked_user():
    return make_user("user", is_active=False)
