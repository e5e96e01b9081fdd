# database/__init__.py

"""
Модуль хранилищ Dopamind

Хранилище выбирается один раз при старте процесса: удалённый бэкенд,
если заданы адрес и ключ, иначе локальное хранилище.
"""

import logging
from typing import Optional

from config import AppConfig, is_remote_configured
from database.base import StorageBackend
from database.local_backend import LocalBackend
from database.local_store import LocalStorage

logger = logging.getLogger(__name__)


def create_backend(app_config: AppConfig, client=None,
                   storage: Optional[LocalStorage] = None) -> StorageBackend:
    """Создать хранилище по конфигурации.

    client и storage позволяют подставить готовый клиент удалённого
    бэкенда или готовое локальное хранилище (например, в тестах).
    """
    if is_remote_configured(app_config):
        from database.remote_backend import RemoteBackend

        if client is not None:
            logger.info("🌐 Используется удалённый бэкенд (переданный клиент)")
            return RemoteBackend(
                client,
                oauth_redirect_url=app_config.remote.oauth_redirect_url,
                streak_rpc=app_config.remote.streak_rpc,
            )
        return RemoteBackend.from_config(app_config.remote)

    if storage is None:
        storage = LocalStorage(app_config.local.path)
    logger.info(f"📂 Удалённый бэкенд не настроен, используется локальное хранилище {storage.path}")
    return LocalBackend(storage, mood_history_size=app_config.local.mood_history_size)


__all__ = [
    'StorageBackend',
    'LocalBackend',
    'LocalStorage',
    'create_backend'
]
