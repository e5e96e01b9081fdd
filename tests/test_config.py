"""Tests for configuration loading and the remote-backend check."""

from __future__ import annotations

import pytest

from config import AppConfig, is_remote_configured


def test_empty_env_is_local():
    cfg = AppConfig(env={})
    assert cfg.is_remote_configured() is False
    assert is_remote_configured(cfg) is False


def test_both_values_enable_remote():
    cfg = AppConfig(env={"DOPAMIND_SUPABASE_URL": "https://x.supabase.co", "DOPAMIND_SUPABASE_ANON_KEY": "k"})
    assert is_remote_configured(cfg) is True


@pytest.mark.parametrize(
    "env",
    [
        {"DOPAMIND_SUPABASE_URL": "https://x.supabase.co"},
        {"DOPAMIND_SUPABASE_ANON_KEY": "k"},
        {"DOPAMIND_SUPABASE_URL": "", "DOPAMIND_SUPABASE_ANON_KEY": "k"},
    ],
)
def test_partial_remote_config_stays_local(env):
    assert is_remote_configured(AppConfig(env=env)) is False


def test_defaults():
    cfg = AppConfig(env={})
    assert cfg.local.mood_history_size == 7
    assert cfg.local.path.name == "local_storage.json"
    assert cfg.log_level.value == "INFO"


def test_invalid_values_are_reported_together():
    with pytest.raises(ValueError) as exc:
        AppConfig(env={"MOOD_HISTORY_SIZE": "0", "DOPAMIND_SUPABASE_URL": "ftp://x", "DOPAMIND_SUPABASE_ANON_KEY": "k"})
    message = str(exc.value)
    assert "MOOD_HISTORY_SIZE" in message
    assert "DOPAMIND_SUPABASE_URL" in message


def test_logging_config_adds_file_handler(tmp_path):
    cfg = AppConfig(env={"LOG_TO_FILE": "true", "LOG_DIR": str(tmp_path)})
    logging_config = cfg.get_logging_config()
    assert "file" in logging_config["handlers"]
    assert logging_config["loggers"][""]["handlers"] == ["console", "file"]


def test_to_dict_hides_key():
    cfg = AppConfig(env={"DOPAMIND_SUPABASE_URL": "https://x.supabase.co", "DOPAMIND_SUPABASE_ANON_KEY": "secret-anon-key"})
    assert "secret-anon-key" not in str(cfg.to_dict())


def test_setup_logging_creates_log_dir(tmp_path):
    from utils.logger import setup_logging

    log_dir = tmp_path / "logs"
    cfg = AppConfig(env={"LOG_TO_FILE": "true", "LOG_DIR": str(log_dir), "LOG_LEVEL": "debug"})
    logger = setup_logging(cfg)
    assert log_dir.is_dir()
    assert logger.name == "dopamind"
