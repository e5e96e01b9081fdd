# models/focus.py

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from models.enums import SessionType, SessionStatus
from utils.datetime_utils import to_iso, parse_iso


# Поля локальной записи, которых нет в удалённой таблице
LOCAL_ONLY_KEYS = ("status", "cancelled_at")


def _parse_optional(value: Optional[str]) -> Optional[datetime]:
    return parse_iso(value) if value else None


@dataclass
class FocusSession:
    """Сессия фокуса: Running -> Completed | Cancelled.

    completed_at задан тогда и только тогда, когда completed=True.
    """
    id: str
    user_id: str
    planned_duration_minutes: int
    started_at: datetime
    session_type: SessionType = SessionType.FOCUS
    actual_duration_minutes: Optional[int] = None
    completed_at: Optional[datetime] = None
    completed: bool = False
    status: SessionStatus = SessionStatus.RUNNING
    cancelled_at: Optional[datetime] = None

    @property
    def is_running(self) -> bool:
        return self.status == SessionStatus.RUNNING

    def complete(self, actual_duration_minutes: int, when: datetime) -> None:
        self.completed = True
        self.status = SessionStatus.COMPLETED
        self.actual_duration_minutes = actual_duration_minutes
        self.completed_at = when

    def cancel(self, actual_duration_minutes: Optional[int], when: datetime) -> None:
        self.status = SessionStatus.CANCELLED
        self.actual_duration_minutes = actual_duration_minutes or 0
        self.cancelled_at = when

    def to_dict(self) -> dict:
        """Сериализация в формат строки хранилища"""
        return {
            "id": self.id,
            "user_id": self.user_id,
            "session_duration": self.planned_duration_minutes,
            "actual_duration": self.actual_duration_minutes,
            "session_type": self.session_type.value,
            "started_at": to_iso(self.started_at),
            "completed_at": to_iso(self.completed_at) if self.completed_at else None,
            "completed": self.completed,
            "status": self.status.value,
            "cancelled_at": to_iso(self.cancelled_at) if self.cancelled_at else None,
        }

    def to_remote_row(self) -> dict:
        """Строка таблицы focus_sessions: статус не хранится, он выводится
        из completed и actual_duration"""
        row = self.to_dict()
        for key in LOCAL_ONLY_KEYS:
            row.pop(key)
        return row

    @staticmethod
    def status_from_row(data: dict) -> SessionStatus:
        if data.get("status"):
            return SessionStatus(data["status"])
        if data.get("completed"):
            return SessionStatus.COMPLETED
        # Незавершённая строка с длительностью: сессия прервана
        if data.get("actual_duration") is not None:
            return SessionStatus.CANCELLED
        return SessionStatus.RUNNING

    @classmethod
    def from_dict(cls, data: dict) -> "FocusSession":
        completed = bool(data.get("completed", False))
        status = cls.status_from_row(data)
        return cls(
            id=str(data["id"]),
            user_id=str(data["user_id"]),
            planned_duration_minutes=int(data["session_duration"]),
            actual_duration_minutes=data.get("actual_duration"),
            session_type=SessionType(data.get("session_type") or SessionType.FOCUS.value),
            started_at=parse_iso(data["started_at"]),
            completed_at=_parse_optional(data.get("completed_at")),
            completed=completed,
            status=status,
            cancelled_at=_parse_optional(data.get("cancelled_at")),
        )
