# services/auth_service.py

import logging
from typing import Optional, Union

from core.errors import ServiceError, ServiceResult, ValidationError
from database.base import StorageBackend
from models import AuthProvider, UserIdentity

logger = logging.getLogger(__name__)


class AuthService:
    """
    Сервис идентификации пользователя

    В удалённом режиме проверку учётных данных выполняет бэкенд;
    в локальном режиме вход всегда успешен (демо-режим).
    """

    def __init__(self, backend: StorageBackend):
        self.backend = backend

    async def sign_up(self, email: str, password: str, display_name: str,
                      username: Optional[str] = None) -> ServiceResult:
        """Регистрация нового пользователя.

        Если бэкенд требует подтверждения email, результат имеет статус
        PENDING_CONFIRMATION: это не ошибка.
        """
        try:
            user, pending = await self.backend.sign_up(email, password, display_name, username)
        except ServiceError as e:
            logger.warning(f"⚠️ Ошибка регистрации {email}: {e.message}")
            return ServiceResult.failure(e)

        if pending:
            logger.info(f"📧 Регистрация {email} ожидает подтверждения email")
            return ServiceResult.pending(user)

        logger.info(f"✅ Пользователь {email} зарегистрирован")
        return ServiceResult.success(user)

    async def sign_in(self, email: str, password: str) -> ServiceResult:
        try:
            user = await self.backend.sign_in(email, password)
        except ServiceError as e:
            logger.warning(f"⚠️ Ошибка входа {email}: {e.message}")
            return ServiceResult.failure(e)

        logger.info(f"🔑 Вход выполнен: {email}")
        return ServiceResult.success(user)

    async def sign_out(self) -> ServiceResult:
        """Выход; без активной сессии тоже успешен"""
        try:
            await self.backend.sign_out()
        except ServiceError as e:
            logger.warning(f"⚠️ Ошибка выхода: {e.message}")
            return ServiceResult.failure(e)

        logger.info("👋 Выход выполнен")
        return ServiceResult.success()

    async def get_current_user(self) -> Optional[UserIdentity]:
        return await self.backend.get_current_user()

    async def sign_in_with_provider(self, provider: Union[str, AuthProvider]) -> ServiceResult:
        """Вход через Google/Apple; в локальном режиме NotAvailableError"""
        try:
            provider = AuthProvider(provider)
        except ValueError:
            return ServiceResult.failure(ValidationError(f"Неизвестный провайдер входа: {provider}"))

        try:
            redirect_url = await self.backend.sign_in_with_provider(provider)
        except ServiceError as e:
            logger.warning(f"⚠️ Вход через провайдера недоступен: {e.message}")
            return ServiceResult.failure(e)

        logger.info(f"🔗 Редирект на провайдера {provider.value}")
        return ServiceResult.success(redirect_url)
