# services/__init__.py

"""
Модуль сервисов Dopamind

Сервисы получают одно общее хранилище, выбранное при старте, и
никогда не обращаются к удалённому бэкенду или локальному хранилищу
напрямую в обход него.
"""

import logging
from typing import Optional

from config import AppConfig, config as default_config
from database import StorageBackend, create_backend

from .auth_service import AuthService
from .session_service import SessionService
from .mood_service import MoodService
from .subscription_service import SubscriptionService, FEATURE_ACCESS
from .tips_service import TipsService, DEFAULT_TIPS
from .analytics_service import AnalyticsService
from .data_export import ExportDocument, export_user_data
from .timer_service import FocusTimer

logger = logging.getLogger(__name__)


class ServiceManager:
    """
    Менеджер для управления всеми сервисами

    Обеспечивает:
    - Выбор хранилища один раз при инициализации
    - Создание сервисов с явными зависимостями
    - Корректное закрытие хранилища
    """

    def __init__(self, app_config: Optional[AppConfig] = None):
        self.config = app_config or default_config
        self.backend: Optional[StorageBackend] = None
        self.auth: Optional[AuthService] = None
        self.sessions: Optional[SessionService] = None
        self.moods: Optional[MoodService] = None
        self.subscriptions: Optional[SubscriptionService] = None
        self.tips: Optional[TipsService] = None
        self.analytics: Optional[AnalyticsService] = None
        self.initialized = False

    def initialize_services(self, backend: Optional[StorageBackend] = None) -> bool:
        """Инициализация всех сервисов"""
        try:
            logger.info("🔧 Инициализация сервисов Dopamind...")

            # 1. Хранилище (базовое)
            self.backend = backend or create_backend(self.config)

            # 2. Идентификация (от неё зависят остальные)
            self.auth = AuthService(self.backend)

            # 3. Сервисы данных
            self.sessions = SessionService(self.backend, self.auth)
            self.moods = MoodService(self.backend, self.auth)
            self.subscriptions = SubscriptionService(self.backend, self.auth)
            self.tips = TipsService(self.backend, self.subscriptions)
            self.analytics = AnalyticsService(self.backend, self.auth)

            self.initialized = True
            logger.info(f"✅ Все сервисы инициализированы (хранилище: {self.backend.mode})")
            return True

        except Exception as e:
            logger.error(f"❌ Ошибка инициализации сервисов: {e}")
            self.backend = None
            self.initialized = False
            return False

    def create_timer(self, duration_minutes: int = 25, **kwargs) -> FocusTimer:
        return FocusTimer(self.sessions, duration_minutes, **kwargs)

    async def export_data(self):
        user = await self.auth.get_current_user()
        return await export_user_data(self.backend, user)

    async def health_check(self) -> dict:
        """Проверка состояния сервисов"""
        if not self.initialized:
            return {"status": "error", "initialized": False}

        user = await self.auth.get_current_user()
        return {
            "status": "healthy",
            "initialized": True,
            "mode": self.backend.mode,
            "remote_configured": self.config.is_remote_configured(),
            "user_signed_in": user is not None,
        }

    async def close_services(self):
        """Закрытие всех сервисов"""
        logger.info("🛑 Закрытие сервисов...")
        if self.backend is not None:
            await self.backend.close()
        self.backend = None
        self.auth = self.sessions = self.moods = None
        self.subscriptions = self.tips = self.analytics = None
        self.initialized = False
        logger.info("✅ Все сервисы закрыты")

    async def __aenter__(self):
        if not self.initialized:
            self.initialize_services()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close_services()


# Глобальный экземпляр менеджера сервисов
_service_manager = None


def get_service_manager() -> ServiceManager:
    """Получить глобальный менеджер сервисов"""
    global _service_manager
    if _service_manager is None:
        _service_manager = ServiceManager()
    return _service_manager


def initialize_all_services(backend: Optional[StorageBackend] = None) -> bool:
    """Инициализация всех сервисов"""
    manager = get_service_manager()
    return manager.initialize_services(backend)


async def close_all_services():
    """Закрытие всех сервисов"""
    global _service_manager
    if _service_manager:
        await _service_manager.close_services()
        _service_manager = None


__all__ = [
    'AuthService',
    'SessionService',
    'MoodService',
    'SubscriptionService',
    'TipsService',
    'AnalyticsService',
    'FocusTimer',
    'ExportDocument',
    'ServiceManager',
    'FEATURE_ACCESS',
    'DEFAULT_TIPS',
    'export_user_data',
    'get_service_manager',
    'initialize_all_services',
    'close_all_services'
]
