# models/analytics.py

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional

from utils.datetime_utils import now_utc, to_iso, parse_iso


@dataclass
class UserStats:
    """Счётчики пользователя: стрик и количество сессий"""
    current_streak: int = 0
    best_streak: int = 0
    total_sessions: int = 0
    total_focus_minutes: int = 0
    last_session_date: Optional[str] = None  # YYYY-MM-DD

    def to_dict(self) -> dict:
        return {
            "current_streak": self.current_streak,
            "best_streak": self.best_streak,
            "total_sessions": self.total_sessions,
            "total_focus_minutes": self.total_focus_minutes,
            "last_session_date": self.last_session_date,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "UserStats":
        return cls(
            current_streak=int(data.get("current_streak") or 0),
            best_streak=int(data.get("best_streak") or data.get("longest_streak") or 0),
            total_sessions=int(data.get("total_sessions") or 0),
            total_focus_minutes=int(data.get("total_focus_minutes") or 0),
            last_session_date=data.get("last_session_date") or data.get("last_activity_date"),
        )


@dataclass
class AnalyticsEvent:
    event_type: str
    event_data: Dict[str, Any] = field(default_factory=dict)
    screen_name: Optional[str] = None
    created_at: datetime = field(default_factory=now_utc)

    def to_dict(self) -> dict:
        return {
            "event_type": self.event_type,
            "event_data": self.event_data,
            "screen_name": self.screen_name,
            "created_at": to_iso(self.created_at),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "AnalyticsEvent":
        return cls(
            event_type=data.get("event_type") or "",
            event_data=data.get("event_data") or {},
            screen_name=data.get("screen_name"),
            created_at=parse_iso(data["created_at"]),
        )
