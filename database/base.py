#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Dopamind - Storage backend interface
Общий интерфейс хранилища: удалённый бэкенд или локальное хранилище.

Экземпляр выбирается один раз при старте (create_backend) и передаётся
во все сервисы, поэтому чтения и записи никогда не смешиваются между
двумя хранилищами в одном процессе.
"""

from abc import ABC, abstractmethod
from datetime import date, datetime
from typing import List, Optional, Tuple

from models import (
    AnalyticsEvent,
    AuthProvider,
    Entitlement,
    FocusSession,
    MoodEntry,
    Tip,
    UserIdentity,
    UserStats,
)


class StorageBackend(ABC):
    """Базовый класс хранилища"""

    mode: str = "abstract"

    @property
    def is_remote(self) -> bool:
        return self.mode == "remote"

    # ===== IDENTITY =====

    @abstractmethod
    async def get_current_user(self) -> Optional[UserIdentity]:
        """Текущий пользователь или None"""

    @abstractmethod
    async def sign_up(self, email: str, password: str, display_name: str,
                      username: Optional[str] = None) -> Tuple[Optional[UserIdentity], bool]:
        """Регистрация. Возвращает (пользователь, ожидает_подтверждения)"""

    @abstractmethod
    async def sign_in(self, email: str, password: str) -> Optional[UserIdentity]:
        """Вход по email и паролю"""

    @abstractmethod
    async def sign_out(self) -> None:
        """Выход; без активной сессии ничего не делает"""

    @abstractmethod
    async def sign_in_with_provider(self, provider: AuthProvider) -> str:
        """Вход через внешнего провайдера, возвращает URL для редиректа"""

    @abstractmethod
    def owner_id(self, user: Optional[UserIdentity]) -> str:
        """Ключ разбиения записей для пользователя"""

    # ===== SESSIONS =====

    @abstractmethod
    async def insert_session(self, session: FocusSession) -> FocusSession:
        pass

    @abstractmethod
    async def complete_session(self, owner_id: str, session_id: str,
                               actual_duration_minutes: int, when: datetime) -> Optional[FocusSession]:
        """Отметить сессию завершённой; None если идущая сессия не найдена"""

    @abstractmethod
    async def cancel_session(self, owner_id: str, session_id: str,
                             actual_duration_minutes: Optional[int], when: datetime) -> Optional[FocusSession]:
        """Отметить сессию прерванной; None если идущая сессия не найдена"""

    @abstractmethod
    async def list_sessions(self, owner_id: str, limit: Optional[int] = None) -> List[FocusSession]:
        """Сессии пользователя, новые первыми"""

    @abstractmethod
    async def completion_dates(self, owner_id: str) -> List[date]:
        """Даты завершённых сессий"""

    # ===== MOOD =====

    @abstractmethod
    async def insert_mood(self, entry: MoodEntry) -> MoodEntry:
        pass

    @abstractmethod
    async def list_moods(self, owner_id: str, limit: Optional[int] = None) -> List[MoodEntry]:
        """Записи настроения, новые первыми"""

    @abstractmethod
    async def list_moods_since(self, owner_id: str, since: datetime) -> List[MoodEntry]:
        """Записи настроения начиная с since, в хронологическом порядке"""

    @abstractmethod
    async def mood_history(self, owner_id: str, days: int) -> List[int]:
        """Ряд оценок настроения для графика, старые первыми"""

    # ===== STATS =====

    @abstractmethod
    async def get_stats(self, owner_id: str) -> UserStats:
        pass

    @abstractmethod
    async def save_stats(self, owner_id: str, stats: UserStats) -> UserStats:
        pass

    async def server_streak(self, owner_id: str) -> Optional[int]:
        """Стрик от серверной процедуры, если она есть"""
        return None

    # ===== SUBSCRIPTION =====

    @abstractmethod
    async def get_entitlement(self, owner_id: str) -> Optional[Entitlement]:
        pass

    @abstractmethod
    async def save_entitlement(self, owner_id: str, entitlement: Entitlement) -> Entitlement:
        pass

    # ===== TIPS =====

    async def list_tips(self, include_premium: bool, category: Optional[str] = None) -> List[Tip]:
        """Пул советов хранилища; пустой список означает встроенные советы"""
        return []

    # ===== ANALYTICS =====

    @abstractmethod
    async def insert_event(self, owner_id: str, event: AnalyticsEvent) -> None:
        pass

    @abstractmethod
    async def list_events(self, owner_id: str, since: datetime) -> List[AnalyticsEvent]:
        """События начиная с since, новые первыми"""

    # ===== LIFECYCLE =====

    async def close(self) -> None:
        """Освобождение ресурсов хранилища"""
        return None
