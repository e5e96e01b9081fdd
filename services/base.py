# services/base.py

import logging
from typing import Optional

from core.errors import ServiceError, ServiceResult
from database.base import StorageBackend
from models import UserIdentity

logger = logging.getLogger(__name__)


class BaseService:
    """Общая часть сервисов: хранилище и определение владельца записей"""

    def __init__(self, backend: StorageBackend, auth_service=None):
        self.backend = backend
        self.auth_service = auth_service

    async def _current_user(self) -> Optional[UserIdentity]:
        if self.auth_service is not None:
            return await self.auth_service.get_current_user()
        return await self.backend.get_current_user()

    async def _owner_id(self) -> str:
        """Ключ записей текущего пользователя; AuthRequiredError без входа в удалённом режиме"""
        return self.backend.owner_id(await self._current_user())

    def _fail(self, operation: str, error: ServiceError) -> ServiceResult:
        logger.warning(f"⚠️ {operation}: {error.message}")
        return ServiceResult.failure(error)
