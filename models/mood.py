# models/mood.py

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from utils.datetime_utils import to_iso, parse_iso


@dataclass
class MoodInput:
    """Данные формы настроения (проверяются вызывающей стороной)"""
    score: int
    emoji: Optional[str] = None
    notes: Optional[str] = None
    energy: Optional[int] = None
    stress: Optional[int] = None


@dataclass
class MoodEntry:
    """Запись настроения, неизменяемая после создания"""
    id: str
    user_id: str
    mood_score: int
    created_at: datetime
    date: str  # YYYY-MM-DD
    session_id: Optional[str] = None
    emoji: Optional[str] = None
    notes: Optional[str] = None
    energy_level: Optional[int] = None
    stress_level: Optional[int] = None

    @property
    def after_session(self) -> bool:
        return self.session_id is not None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "session_id": self.session_id,
            "mood_score": self.mood_score,
            "mood_emoji": self.emoji,
            "energy_level": self.energy_level,
            "stress_level": self.stress_level,
            "notes": self.notes,
            "created_at": to_iso(self.created_at),
            "date": self.date,
            "after_session": self.after_session,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "MoodEntry":
        created_at = parse_iso(data["created_at"])
        return cls(
            id=str(data["id"]),
            user_id=str(data["user_id"]),
            mood_score=int(data["mood_score"]),
            created_at=created_at,
            date=data.get("date") or created_at.date().isoformat(),
            session_id=data.get("session_id"),
            emoji=data.get("mood_emoji"),
            notes=data.get("notes"),
            energy_level=data.get("energy_level"),
            stress_level=data.get("stress_level"),
        )
