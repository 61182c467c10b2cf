"""
Shared fixtures.

The Supabase client is never created: routes get fakes through
`app.dependency_overrides`, services get MagicMock collaborators.
"""

import os

os.environ.setdefault("SUPABASE_URL", "http://supabase.test")
os.environ.setdefault("SUPABASE_ANON_KEY", "test-anon-key")

import pytest
from unittest.mock import MagicMock
from fastapi.testclient import TestClient

from config import get_settings
from dependencies import get_auth_provider, get_auth_service, get_user_repository
from models.auth import Session, SessionUser
from services.auth_service import AuthService
from services.supabase_client import SupabaseAuthProvider, UserRepository


@pytest.fixture
def settings():
    return get_settings()


@pytest.fixture
def users():
    """UserRepository stand-in: no existing users unless a test says so"""
    repo = MagicMock(spec=UserRepository)
    repo.find_first.return_value = None
    return repo


@pytest.fixture
def provider():
    provider = MagicMock(spec=SupabaseAuthProvider)
    provider.get_session.return_value = None
    return provider


@pytest.fixture
def auth_service(users, provider):
    return AuthService(users, provider)


@pytest.fixture
def session():
    return Session(
        user=SessionUser(id="user-1", email="user@test.com", name="テスト"),
        access_token="token-123",
    )


@pytest.fixture
def app(users, provider, auth_service):
    from main import app

    app.dependency_overrides[get_user_repository] = lambda: users
    app.dependency_overrides[get_auth_provider] = lambda: provider
    app.dependency_overrides[get_auth_service] = lambda: auth_service
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def client(app, settings):
    with TestClient(app, raise_server_exceptions=False) as client:
        yield client


@pytest.fixture
def signed_in_client(client, provider, session, settings):
    provider.get_session.return_value = session
    client.cookies.set(settings.session_cookie_name, session.access_token)
    return client
