"""Pytest fixtures for restty tests."""

import pytest

from restty.config import Settings
from restty.schemas.auth import Session
from restty.services.credential_store import CredentialStore
from restty.services.history_service import HistoryService
from restty.services.http_executor import RequestExecutor
from restty.services.remote_store import RemoteHistoryStore
from restty.state import AppState

from .fakes import FakeRemote, target_transport


@pytest.fixture
def settings():
    """Settings pointing at the fake remote."""
    return Settings(remote_url="https://remote.test", api_key="test-key")


@pytest.fixture
def remote():
    """Fake auth API and history table with one registered user."""
    fake = FakeRemote()
    fake.add_user("dev@test.com", "password123")
    return fake


@pytest.fixture
def session(remote):
    """Session for the registered user."""
    user = remote.users["dev@test.com"]
    return Session(token=f"token-{user['id']}", user_id=user["id"], email=user["email"])


@pytest.fixture
def executor(settings):
    """Request executor wired to the fake target server."""
    return RequestExecutor(settings, transport=target_transport())


@pytest.fixture
def history(settings, remote):
    """History service wired to the fake remote."""
    return HistoryService(RemoteHistoryStore(settings, transport=remote.transport), settings)


@pytest.fixture
def credentials(tmp_path):
    """Credential store under a temporary config directory."""
    return CredentialStore("restty", config_dir=tmp_path)


@pytest.fixture
def state(settings, remote, credentials):
    """Application state wired to the fakes."""
    return AppState.build(
        settings=settings,
        credentials=credentials,
        transport=target_transport(),
        remote_transport=remote.transport,
    )
