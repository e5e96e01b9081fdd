# services/mood_service.py

import logging
from statistics import mean
from typing import Any, Dict, Optional, Union

from core.errors import ServiceError, ServiceResult
from models import MoodEntry, MoodInput
from services.base import BaseService
from utils.datetime_utils import days_ago, now_utc

logger = logging.getLogger(__name__)


class MoodService(BaseService):
    """
    Сервис настроения

    Оценка 1..5 проверяется вызывающей стороной (utils.validators),
    сервис её не перепроверяет.
    """

    async def log_mood(self, mood_input: Union[MoodInput, Dict[str, Any]],
                       session_id: Optional[str] = None) -> ServiceResult:
        """Сохранить запись настроения; session_id связывает её с сессией фокуса"""
        if isinstance(mood_input, dict):
            mood_input = MoodInput(**mood_input)

        try:
            owner_id = await self._owner_id()
            created_at = now_utc()
            entry = MoodEntry(
                id="",
                user_id=owner_id,
                mood_score=mood_input.score,
                created_at=created_at,
                date=created_at.date().isoformat(),
                session_id=session_id,
                emoji=mood_input.emoji,
                notes=mood_input.notes,
                energy_level=mood_input.energy,
                stress_level=mood_input.stress,
            )
            entry = await self.backend.insert_mood(entry)
        except ServiceError as e:
            return self._fail("Запись настроения", e)

        logger.info(
            f"😊 Настроение {entry.mood_score} записано"
            + (f" после сессии {session_id}" if session_id else "")
        )
        return ServiceResult.success(entry)

    async def get_mood_entries(self, limit: int = 30) -> ServiceResult:
        """Записи настроения, новые первыми, не больше limit"""
        try:
            owner_id = await self._owner_id()
            entries = await self.backend.list_moods(owner_id, limit)
        except ServiceError as e:
            return self._fail("Записи настроения", e)
        return ServiceResult.success(entries)

    async def get_mood_history(self, days: int = 7) -> ServiceResult:
        """Ряд оценок для графика, старые первыми"""
        try:
            owner_id = await self._owner_id()
            history = await self.backend.mood_history(owner_id, days)
        except ServiceError as e:
            return self._fail("История настроения", e)
        return ServiceResult.success(history)

    async def get_mood_analytics(self, days: int = 30) -> ServiceResult:
        """Записи за последние days дней в хронологическом порядке"""
        try:
            owner_id = await self._owner_id()
            entries = await self.backend.list_moods_since(owner_id, days_ago(days))
        except ServiceError as e:
            return self._fail("Аналитика настроения", e)
        return ServiceResult.success(entries)

    async def get_mood_summary(self, days: int = 30) -> ServiceResult:
        result = await self.get_mood_analytics(days)
        if not result.ok:
            return result

        entries = result.data
        scores = [entry.mood_score for entry in entries]
        summary = {
            "days": days,
            "count": len(scores),
            "average": round(mean(scores), 2) if scores else None,
            "min": min(scores) if scores else None,
            "max": max(scores) if scores else None,
            "after_session": sum(1 for entry in entries if entry.after_session),
        }
        return ServiceResult.success(summary)
