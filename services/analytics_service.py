# services/analytics_service.py

import logging
from typing import Any, Dict, Optional

from core.errors import ServiceError, ServiceResult
from models import AnalyticsEvent
from services.base import BaseService
from utils.datetime_utils import days_ago

logger = logging.getLogger(__name__)


class AnalyticsService(BaseService):
    """Сервис событий использования приложения"""

    async def track_event(self, event_type: str, event_data: Optional[Dict[str, Any]] = None,
                          screen_name: Optional[str] = None) -> ServiceResult:
        event = AnalyticsEvent(
            event_type=event_type,
            event_data=event_data or {},
            screen_name=screen_name,
        )
        try:
            owner_id = await self._owner_id()
            await self.backend.insert_event(owner_id, event)
        except ServiceError as e:
            return self._fail(f"Событие {event_type}", e)
        return ServiceResult.success(event)

    async def track_session_event(self, event_type: str, duration: int, session_type: str,
                                  completed: bool, interruptions: int = 0) -> ServiceResult:
        return await self.track_event(
            event_type,
            {
                "session_duration": duration,
                "session_type": session_type,
                "completed": completed,
                "interruptions": interruptions,
            },
            "FocusTimer",
        )

    async def get_user_analytics(self, days: int = 30) -> ServiceResult:
        try:
            owner_id = await self._owner_id()
            events = await self.backend.list_events(owner_id, days_ago(days))
        except ServiceError as e:
            return self._fail("Аналитика", e)
        return ServiceResult.success(events)
