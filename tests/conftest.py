from __future__ import annotations

from pathlib import Path

import pytest

from config import AppConfig
from database import LocalStorage, create_backend
from services import ServiceManager

from fake_supabase import FakeSupabaseClient

REMOTE_ENV = {
    "DOPAMIND_SUPABASE_URL": "https://project.supabase.test",
    "DOPAMIND_SUPABASE_ANON_KEY": "anon-key",
    "DOPAMIND_OAUTH_REDIRECT_URL": "https://app.test/auth/callback",
}


@pytest.fixture()
def local_config(tmp_path: Path) -> AppConfig:
    return AppConfig(env={"DATA_DIR": str(tmp_path / "data"), "ENVIRONMENT": "testing"})


@pytest.fixture()
def remote_config(tmp_path: Path) -> AppConfig:
    return AppConfig(env={**REMOTE_ENV, "DATA_DIR": str(tmp_path / "data"), "ENVIRONMENT": "testing"})


@pytest.fixture()
def storage(local_config) -> LocalStorage:
    return LocalStorage(local_config.local.path)


@pytest.fixture()
def local_backend(local_config, storage):
    return create_backend(local_config, storage=storage)


@pytest.fixture()
def manager(local_config, local_backend) -> ServiceManager:
    manager = ServiceManager(local_config)
    assert manager.initialize_services(local_backend)
    return manager


@pytest.fixture()
def fake_client() -> FakeSupabaseClient:
    return FakeSupabaseClient()


@pytest.fixture()
def remote_manager(remote_config, fake_client) -> ServiceManager:
    manager = ServiceManager(remote_config)
    assert manager.initialize_services(create_backend(remote_config, client=fake_client))
    return manager
