# services/session_service.py

import logging
from datetime import date
from typing import Optional

from core.errors import ServiceError, ServiceResult, ValidationError
from core.streaks import best_streak, calculate_streak
from models import FocusSession, SessionType, UserStats
from services.base import BaseService
from utils.datetime_utils import now_utc

logger = logging.getLogger(__name__)


class SessionService(BaseService):
    """
    Сервис сессий фокуса

    Жизненный цикл сессии: running -> completed | cancelled.
    После завершения обновляются счётчики пользователя: число сессий,
    минуты фокуса и стрик по датам завершённых сессий.
    """

    async def start_session(self, duration_minutes: int, session_type: str = "focus") -> ServiceResult:
        """Создать новую запись сессии (каждый вызов создаёт новую запись)"""
        try:
            kind = SessionType(session_type)
        except ValueError:
            return self._fail("Старт сессии", ValidationError(f"Неизвестный тип сессии: {session_type}"))

        try:
            owner_id = await self._owner_id()
            session = FocusSession(
                id="",
                user_id=owner_id,
                planned_duration_minutes=duration_minutes,
                started_at=now_utc(),
                session_type=kind,
            )
            session = await self.backend.insert_session(session)
        except ServiceError as e:
            return self._fail("Старт сессии", e)

        logger.info(f"⏱️ Сессия {session.id} начата ({duration_minutes} мин, {kind.value})")
        return ServiceResult.success(session)

    async def complete_session(self, session_id: str, actual_duration_minutes: int) -> ServiceResult:
        """Завершить сессию.

        Неизвестный id (или уже не идущая сессия) даёт успешный результат
        с data=None, счётчики при этом не меняются.
        """
        try:
            owner_id = await self._owner_id()
            session = await self.backend.complete_session(
                owner_id, session_id, actual_duration_minutes, now_utc()
            )
        except ServiceError as e:
            return self._fail("Завершение сессии", e)

        if session is None:
            logger.info(f"🔍 Сессия {session_id} не найдена среди идущих")
            return ServiceResult.success(None)

        logger.info(f"✅ Сессия {session_id} завершена ({actual_duration_minutes} мин)")

        try:
            await self._update_counters(owner_id, session)
        except ServiceError as e:
            # Сессия уже сохранена, счётчики пересчитаются при следующем завершении
            logger.error(f"❌ Ошибка обновления счётчиков после сессии {session_id}: {e.message}")

        return ServiceResult.success(session)

    async def cancel_session(self, session_id: str,
                             actual_duration_minutes: Optional[int] = None) -> ServiceResult:
        """Прервать сессию досрочно (остановленный таймер)"""
        try:
            owner_id = await self._owner_id()
            session = await self.backend.cancel_session(
                owner_id, session_id, actual_duration_minutes, now_utc()
            )
        except ServiceError as e:
            return self._fail("Отмена сессии", e)

        if session is None:
            logger.info(f"🔍 Сессия {session_id} не найдена среди идущих")
        else:
            logger.info(f"⏹️ Сессия {session_id} прервана")
        return ServiceResult.success(session)

    async def get_user_sessions(self, limit: int = 50) -> ServiceResult:
        """История сессий, новые первыми"""
        try:
            owner_id = await self._owner_id()
            sessions = await self.backend.list_sessions(owner_id, limit)
        except ServiceError as e:
            return self._fail("История сессий", e)
        return ServiceResult.success(sessions)

    async def get_user_stats(self) -> ServiceResult:
        """Счётчики пользователя с актуальным стриком на сегодня"""
        try:
            owner_id = await self._owner_id()
            stats = await self.backend.get_stats(owner_id)
            stats.current_streak = await self._compute_streak(owner_id, now_utc().date())
        except ServiceError as e:
            return self._fail("Статистика", e)
        return ServiceResult.success(stats)

    async def update_user_streak(self) -> ServiceResult:
        """Пересчитать и сохранить стрик"""
        try:
            owner_id = await self._owner_id()
            stats = await self.backend.get_stats(owner_id)
            streak = await self._compute_streak(owner_id, now_utc().date())
            history_best = best_streak(await self.backend.completion_dates(owner_id))
            stats.current_streak = streak
            stats.best_streak = max(stats.best_streak, streak, history_best)
            stats = await self.backend.save_stats(owner_id, stats)
        except ServiceError as e:
            return self._fail("Пересчёт стрика", e)

        logger.info(f"🔥 Стрик пересчитан: {stats.current_streak}")
        return ServiceResult.success(stats)

    async def _compute_streak(self, owner_id: str, today: date) -> int:
        streak = await self.backend.server_streak(owner_id)
        if streak is not None:
            return streak
        return calculate_streak(await self.backend.completion_dates(owner_id), today=today)

    async def _update_counters(self, owner_id: str, session: FocusSession) -> UserStats:
        stats = await self.backend.get_stats(owner_id)
        completed_on = session.completed_at.date()

        stats.total_sessions += 1
        stats.total_focus_minutes += session.actual_duration_minutes or 0
        stats.last_session_date = completed_on.isoformat()
        stats.current_streak = await self._compute_streak(owner_id, completed_on)
        stats.best_streak = max(stats.best_streak, stats.current_streak)

        stats = await self.backend.save_stats(owner_id, stats)
        logger.debug(
            f"📊 Счётчики: сессий {stats.total_sessions}, стрик {stats.current_streak}"
        )
        return stats
