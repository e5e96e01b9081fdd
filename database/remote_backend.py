#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Dopamind - Remote storage backend
Хранилище поверх удалённого бэкенда (Supabase: Postgres + Auth)

Клиент supabase синхронный, поэтому каждый вызов выполняется в
пуле потоков, а наружу отдаётся async API. Все запросы фильтруются
по id текущего пользователя.
"""

import asyncio
import functools
import logging
from datetime import date, datetime
from typing import Any, Dict, List, Optional, Tuple

from supabase import AuthError, Client, PostgrestAPIError, create_client

from core.errors import AuthRequiredError, RemoteError
from database.base import StorageBackend
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
from utils.datetime_utils import days_ago, to_iso

logger = logging.getLogger(__name__)

# Таблицы удалённой базы
PROFILES_TABLE = "user_profiles"
SESSIONS_TABLE = "focus_sessions"
MOODS_TABLE = "mood_entries"
STATS_TABLE = "user_stats"
TIPS_TABLE = "daily_tips"
ANALYTICS_TABLE = "app_analytics"


class RemoteBackend(StorageBackend):
    """Хранилище поверх клиента supabase"""

    mode = "remote"

    def __init__(self, client: Client, oauth_redirect_url: Optional[str] = None,
                 streak_rpc: Optional[str] = None):
        self.client = client
        self.oauth_redirect_url = oauth_redirect_url
        self.streak_rpc = streak_rpc

    @classmethod
    def from_config(cls, remote_config) -> "RemoteBackend":
        client = create_client(remote_config.url, remote_config.anon_key)
        logger.info(f"🌐 Подключение к удалённому бэкенду {remote_config.url}")
        return cls(
            client,
            oauth_redirect_url=remote_config.oauth_redirect_url,
            streak_rpc=remote_config.streak_rpc,
        )

    async def _run(self, func, *args, **kwargs):
        """Выполнить синхронный вызов клиента в пуле потоков.

        Ошибки бэкенда превращаются в RemoteError с исходным текстом;
        сетевые исключения пробрасываются как есть.
        """
        loop = asyncio.get_running_loop()
        try:
            return await loop.run_in_executor(None, functools.partial(func, *args, **kwargs))
        except PostgrestAPIError as e:
            logger.error(f"❌ Ошибка базы данных: {e.message}")
            raise RemoteError(e.message or str(e), code=e.code)
        except AuthError as e:
            logger.error(f"❌ Ошибка аутентификации: {e.message}")
            raise RemoteError(e.message, code=getattr(e, "code", None))

    async def _execute(self, query) -> List[Dict[str, Any]]:
        response = await self._run(query.execute)
        return response.data or []

    # ===== IDENTITY =====

    async def get_current_user(self) -> Optional[UserIdentity]:
        response = await self._run(self.client.auth.get_user)
        if response is None or response.user is None:
            return None
        return UserIdentity.from_remote(response.user)

    async def sign_up(self, email: str, password: str, display_name: str,
                      username: Optional[str] = None) -> Tuple[Optional[UserIdentity], bool]:
        response = await self._run(self.client.auth.sign_up, {
            "email": email,
            "password": password,
            "options": {
                "data": {
                    "username": username,
                    "full_name": display_name,
                },
            },
        })

        if response.user is None:
            return None, True

        try:
            await self._execute(self.client.table(PROFILES_TABLE).insert({
                "id": response.user.id,
                "username": username,
                "email": email,
                "full_name": display_name,
            }))
        except RemoteError as e:
            # Аккаунт уже создан; до подтверждения email политика доступа
            # обычно не пускает запись профиля
            logger.warning(f"⚠️ Профиль {email} не создан: {e.message}")

        user = UserIdentity.from_remote(response.user)
        # Без сессии бэкенд ждёт подтверждения email
        return user, response.session is None

    async def sign_in(self, email: str, password: str) -> Optional[UserIdentity]:
        response = await self._run(self.client.auth.sign_in_with_password, {
            "email": email,
            "password": password,
        })
        return UserIdentity.from_remote(response.user) if response.user else None

    async def sign_out(self) -> None:
        await self._run(self.client.auth.sign_out)

    async def sign_in_with_provider(self, provider: AuthProvider) -> str:
        credentials: Dict[str, Any] = {"provider": provider.value}
        if self.oauth_redirect_url:
            credentials["options"] = {"redirect_to": self.oauth_redirect_url}
        response = await self._run(self.client.auth.sign_in_with_oauth, credentials)
        return response.url

    def owner_id(self, user: Optional[UserIdentity]) -> str:
        if user is None:
            raise AuthRequiredError("Требуется вход в аккаунт")
        return user.id

    # ===== SESSIONS =====

    async def insert_session(self, session: FocusSession) -> FocusSession:
        row = session.to_remote_row()
        if not row.get("id"):
            row.pop("id")
        rows = await self._execute(self.client.table(SESSIONS_TABLE).insert(row))
        return FocusSession.from_dict(rows[0])

    async def _update_session(self, owner_id: str, session_id: str,
                              update: Dict[str, Any]) -> Optional[FocusSession]:
        rows = await self._execute(
            self.client.table(SESSIONS_TABLE)
            .update(update)
            .eq("id", session_id)
            .eq("user_id", owner_id)
            .eq("completed", False)
            .is_("actual_duration", "null")
        )
        return FocusSession.from_dict(rows[0]) if rows else None

    async def complete_session(self, owner_id: str, session_id: str,
                               actual_duration_minutes: int, when: datetime) -> Optional[FocusSession]:
        return await self._update_session(owner_id, session_id, {
            "completed": True,
            "actual_duration": actual_duration_minutes,
            "completed_at": to_iso(when),
        })

    async def cancel_session(self, owner_id: str, session_id: str,
                             actual_duration_minutes: Optional[int], when: datetime) -> Optional[FocusSession]:
        # Прерванная сессия: completed=false и заданная длительность.
        # Время отмены в таблице не хранится
        session = await self._update_session(owner_id, session_id, {
            "actual_duration": actual_duration_minutes or 0,
        })
        if session is not None:
            session.cancelled_at = when
        return session

    async def list_sessions(self, owner_id: str, limit: Optional[int] = None) -> List[FocusSession]:
        query = (
            self.client.table(SESSIONS_TABLE)
            .select("*")
            .eq("user_id", owner_id)
            .order("started_at", desc=True)
        )
        if limit is not None:
            query = query.limit(limit)
        return [FocusSession.from_dict(row) for row in await self._execute(query)]

    async def completion_dates(self, owner_id: str) -> List[date]:
        rows = await self._execute(
            self.client.table(SESSIONS_TABLE)
            .select("completed_at")
            .eq("user_id", owner_id)
            .eq("completed", True)
        )
        return [
            date.fromisoformat(row["completed_at"][:10])
            for row in rows if row.get("completed_at")
        ]

    # ===== MOOD =====

    async def insert_mood(self, entry: MoodEntry) -> MoodEntry:
        row = entry.to_dict()
        for key in ("id", "date", "after_session"):
            row.pop(key)
        if entry.id:
            row["id"] = entry.id
        rows = await self._execute(self.client.table(MOODS_TABLE).insert(row))
        return MoodEntry.from_dict(rows[0])

    async def list_moods(self, owner_id: str, limit: Optional[int] = None) -> List[MoodEntry]:
        query = (
            self.client.table(MOODS_TABLE)
            .select("*")
            .eq("user_id", owner_id)
            .order("created_at", desc=True)
        )
        if limit is not None:
            query = query.limit(limit)
        return [MoodEntry.from_dict(row) for row in await self._execute(query)]

    async def list_moods_since(self, owner_id: str, since: datetime) -> List[MoodEntry]:
        rows = await self._execute(
            self.client.table(MOODS_TABLE)
            .select("*")
            .eq("user_id", owner_id)
            .gte("created_at", to_iso(since))
            .order("created_at")
        )
        return [MoodEntry.from_dict(row) for row in rows]

    async def mood_history(self, owner_id: str, days: int) -> List[int]:
        entries = await self.list_moods_since(owner_id, days_ago(days))
        return [entry.mood_score for entry in entries]

    # ===== STATS =====

    async def get_stats(self, owner_id: str) -> UserStats:
        rows = await self._execute(
            self.client.table(STATS_TABLE)
            .select("*")
            .eq("user_id", owner_id)
            .limit(1)
        )
        if not rows:
            return UserStats()
        row = dict(rows[0])
        row["total_focus_minutes"] = row.get("total_focus_time")
        return UserStats.from_dict(row)

    async def save_stats(self, owner_id: str, stats: UserStats) -> UserStats:
        await self._execute(self.client.table(STATS_TABLE).upsert({
            "user_id": owner_id,
            "current_streak": stats.current_streak,
            "best_streak": stats.best_streak,
            "total_sessions": stats.total_sessions,
            "total_focus_time": stats.total_focus_minutes,
        }, on_conflict="user_id"))
        return stats

    async def server_streak(self, owner_id: str) -> Optional[int]:
        if not self.streak_rpc:
            return None
        response = await self._run(self.client.rpc(self.streak_rpc, {"user_uuid": owner_id}).execute)
        return int(response.data or 0)

    # ===== SUBSCRIPTION =====

    async def get_entitlement(self, owner_id: str) -> Optional[Entitlement]:
        rows = await self._execute(
            self.client.table(PROFILES_TABLE)
            .select("subscription_tier, subscription_status, subscription_ends_at")
            .eq("id", owner_id)
            .limit(1)
        )
        return Entitlement.from_profile_row(rows[0]) if rows else None

    async def save_entitlement(self, owner_id: str, entitlement: Entitlement) -> Entitlement:
        rows = await self._execute(
            self.client.table(PROFILES_TABLE)
            .update(entitlement.to_profile_row())
            .eq("id", owner_id)
        )
        return Entitlement.from_profile_row(rows[0]) if rows else entitlement

    # ===== TIPS =====

    async def list_tips(self, include_premium: bool, category: Optional[str] = None) -> List[Tip]:
        query = self.client.table(TIPS_TABLE).select("*").eq("active", True)
        if not include_premium:
            query = query.eq("is_premium", False)
        if category:
            query = query.eq("tip_category", category)
        rows = await self._execute(query.order("display_order"))
        return [Tip.from_row(row) for row in rows]

    # ===== ANALYTICS =====

    async def insert_event(self, owner_id: str, event: AnalyticsEvent) -> None:
        row = event.to_dict()
        row["user_id"] = owner_id
        await self._execute(self.client.table(ANALYTICS_TABLE).insert(row))

    async def list_events(self, owner_id: str, since: datetime) -> List[AnalyticsEvent]:
        rows = await self._execute(
            self.client.table(ANALYTICS_TABLE)
            .select("*")
            .eq("user_id", owner_id)
            .gte("created_at", to_iso(since))
            .order("created_at", desc=True)
        )
        return [AnalyticsEvent.from_dict(row) for row in rows]

    async def close(self) -> None:
        logger.info("🌐 Отключение от удалённого бэкенда")
