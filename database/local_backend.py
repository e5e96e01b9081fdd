#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Dopamind - Local storage backend
Хранилище для режима без удалённого бэкенда (демо-режим)

Аутентификация не проверяется: вход всегда успешен, все записи
хранятся под пользователем "demo".
"""

import logging
import uuid
from datetime import date, datetime
from typing import List, Optional, Tuple

from core.errors import NotAvailableError
from database.base import StorageBackend
from database.local_store import LocalStorage
from models import (
    AnalyticsEvent,
    AuthProvider,
    Entitlement,
    FocusSession,
    MoodEntry,
    UserIdentity,
    UserStats,
)
from utils.datetime_utils import timestamp_ms

logger = logging.getLogger(__name__)

LOCAL_USER_ID = "demo"
DEMO_DISPLAY_NAME = "Demo User"
MAX_LOCAL_EVENTS = 500

# Ключи локального хранилища
USER_KEY = "dopamind_user"
SESSIONS_KEY = "dopamind_sessions"
MOOD_ENTRIES_KEY = "dopamind_mood_entries"
MOOD_HISTORY_KEY = "dopamind_mood_history"
STREAK_KEY = "dopamind_streak"
TOTAL_SESSIONS_KEY = "dopamind_total_sessions"
SUBSCRIPTION_KEY = "dopamind_subscription"
STATS_KEY = "dopamind_stats"
ANALYTICS_KEY = "dopamind_analytics"


def local_record_id() -> str:
    return f"local-{timestamp_ms()}-{uuid.uuid4().hex[:6]}"


class LocalBackend(StorageBackend):
    """Хранилище поверх LocalStorage"""

    mode = "local"

    def __init__(self, storage: LocalStorage, mood_history_size: int = 7):
        self.storage = storage
        self.mood_history_size = mood_history_size

    # ===== IDENTITY =====

    def _write_user(self, email: str, display_name: str) -> UserIdentity:
        user = UserIdentity(
            id=f"demo-{timestamp_ms()}",
            email=email,
            display_name=display_name,
        )
        self.storage.set_json(USER_KEY, user.to_storage())
        return user

    async def get_current_user(self) -> Optional[UserIdentity]:
        data = self.storage.get_json(USER_KEY)
        if not data:
            return None
        return UserIdentity.from_storage(data)

    async def sign_up(self, email: str, password: str, display_name: str,
                      username: Optional[str] = None) -> Tuple[Optional[UserIdentity], bool]:
        user = self._write_user(email, display_name)
        logger.info(f"👤 Локальная регистрация: {user.id}")
        return user, False

    async def sign_in(self, email: str, password: str) -> Optional[UserIdentity]:
        user = self._write_user(email, DEMO_DISPLAY_NAME)
        logger.info(f"🔑 Локальный вход: {user.id}")
        return user

    async def sign_out(self) -> None:
        self.storage.remove_item(USER_KEY)

    async def sign_in_with_provider(self, provider: AuthProvider) -> str:
        raise NotAvailableError(
            f"Вход через {provider.value} требует настроенного удалённого бэкенда"
        )

    def owner_id(self, user: Optional[UserIdentity]) -> str:
        return LOCAL_USER_ID

    # ===== SESSIONS =====

    def _load_sessions(self) -> List[FocusSession]:
        return [FocusSession.from_dict(item) for item in self.storage.get_json(SESSIONS_KEY, [])]

    def _save_sessions(self, sessions: List[FocusSession]) -> None:
        self.storage.set_json(SESSIONS_KEY, [session.to_dict() for session in sessions])

    async def insert_session(self, session: FocusSession) -> FocusSession:
        if not session.id:
            session.id = local_record_id()
        sessions = self._load_sessions()
        sessions.append(session)
        self._save_sessions(sessions)
        return session

    def _update_session(self, owner_id: str, session_id: str, apply) -> Optional[FocusSession]:
        sessions = self._load_sessions()
        updated = None
        for session in sessions:
            if session.id == session_id and session.user_id == owner_id and session.is_running:
                apply(session)
                updated = session
                break

        if updated is None:
            return None

        self._save_sessions(sessions)
        return updated

    async def complete_session(self, owner_id: str, session_id: str,
                               actual_duration_minutes: int, when: datetime) -> Optional[FocusSession]:
        return self._update_session(
            owner_id, session_id,
            lambda session: session.complete(actual_duration_minutes, when)
        )

    async def cancel_session(self, owner_id: str, session_id: str,
                             actual_duration_minutes: Optional[int], when: datetime) -> Optional[FocusSession]:
        return self._update_session(
            owner_id, session_id,
            lambda session: session.cancel(actual_duration_minutes, when)
        )

    async def list_sessions(self, owner_id: str, limit: Optional[int] = None) -> List[FocusSession]:
        sessions = [s for s in reversed(self._load_sessions()) if s.user_id == owner_id]
        sessions.sort(key=lambda s: s.started_at, reverse=True)
        return sessions if limit is None else sessions[:limit]

    async def completion_dates(self, owner_id: str) -> List[date]:
        return [
            s.completed_at.date() for s in self._load_sessions()
            if s.user_id == owner_id and s.completed and s.completed_at
        ]

    # ===== MOOD =====

    def _load_moods(self) -> List[MoodEntry]:
        return [MoodEntry.from_dict(item) for item in self.storage.get_json(MOOD_ENTRIES_KEY, [])]

    async def insert_mood(self, entry: MoodEntry) -> MoodEntry:
        if not entry.id:
            entry.id = local_record_id()

        entries = self.storage.get_json(MOOD_ENTRIES_KEY, [])
        entries.insert(0, entry.to_dict())
        self.storage.set_json(MOOD_ENTRIES_KEY, entries)

        history = self.storage.get_json(MOOD_HISTORY_KEY, [])
        history.append(entry.mood_score)
        if len(history) > self.mood_history_size:
            history = history[-self.mood_history_size:]
        self.storage.set_json(MOOD_HISTORY_KEY, history)

        return entry

    async def list_moods(self, owner_id: str, limit: Optional[int] = None) -> List[MoodEntry]:
        entries = [e for e in self._load_moods() if e.user_id == owner_id]
        return entries if limit is None else entries[:limit]

    async def list_moods_since(self, owner_id: str, since: datetime) -> List[MoodEntry]:
        entries = [
            e for e in self._load_moods()
            if e.user_id == owner_id and e.created_at >= since
        ]
        entries.sort(key=lambda e: e.created_at)
        return entries

    async def mood_history(self, owner_id: str, days: int) -> List[int]:
        # Кольцевой буфер последних оценок, окно в днях не применяется
        return [int(score) for score in self.storage.get_json(MOOD_HISTORY_KEY, [])]

    # ===== STATS =====

    async def get_stats(self, owner_id: str) -> UserStats:
        stats = UserStats.from_dict(self.storage.get_json(STATS_KEY, {}))
        stats.current_streak = self.storage.get_int(STREAK_KEY, stats.current_streak)
        stats.total_sessions = self.storage.get_int(TOTAL_SESSIONS_KEY, stats.total_sessions)
        return stats

    async def save_stats(self, owner_id: str, stats: UserStats) -> UserStats:
        self.storage.set_json(STATS_KEY, stats.to_dict())
        self.storage.set_int(STREAK_KEY, stats.current_streak)
        self.storage.set_int(TOTAL_SESSIONS_KEY, stats.total_sessions)
        return stats

    # ===== SUBSCRIPTION =====

    async def get_entitlement(self, owner_id: str) -> Optional[Entitlement]:
        data = self.storage.get_json(SUBSCRIPTION_KEY)
        return Entitlement.from_dict(data) if data else None

    async def save_entitlement(self, owner_id: str, entitlement: Entitlement) -> Entitlement:
        self.storage.set_json(SUBSCRIPTION_KEY, entitlement.to_dict())
        return entitlement

    # ===== ANALYTICS =====

    async def insert_event(self, owner_id: str, event: AnalyticsEvent) -> None:
        logger.info(f"[Analytics] {event.event_type} {event.event_data} screen={event.screen_name}")
        events = self.storage.get_json(ANALYTICS_KEY, [])
        events.append(event.to_dict())
        self.storage.set_json(ANALYTICS_KEY, events[-MAX_LOCAL_EVENTS:])

    async def list_events(self, owner_id: str, since: datetime) -> List[AnalyticsEvent]:
        events = [AnalyticsEvent.from_dict(item) for item in self.storage.get_json(ANALYTICS_KEY, [])]
        return [e for e in reversed(events) if e.created_at >= since]
