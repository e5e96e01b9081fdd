# services/data_export.py

import csv
import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from core.errors import ServiceError, ServiceResult
from database.base import StorageBackend
from models import MoodEntry, UserIdentity
from utils.datetime_utils import now_utc

logger = logging.getLogger(__name__)

MOOD_CSV_FIELDS = [
    "id", "date", "created_at", "mood_score", "mood_emoji",
    "energy_level", "stress_level", "notes", "session_id", "after_session",
]


class ExportDocument(BaseModel):
    """Выгрузка данных пользователя: всегда обе коллекции"""
    model_config = ConfigDict(populate_by_name=True)

    mood_entries: List[Dict[str, Any]] = Field(default_factory=list, alias="moodEntries")
    focus_sessions: List[Dict[str, Any]] = Field(default_factory=list, alias="focusSessions")
    export_date: datetime = Field(default_factory=now_utc, alias="exportDate")

    def to_json_dict(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json")


async def export_user_data(backend: StorageBackend, user: Optional[UserIdentity]) -> ServiceResult:
    """Собрать документ выгрузки из активного хранилища"""
    try:
        owner_id = backend.owner_id(user)
        moods = await backend.list_moods(owner_id)
        sessions = await backend.list_sessions(owner_id)
    except ServiceError as e:
        logger.warning(f"⚠️ Ошибка выгрузки данных: {e.message}")
        return ServiceResult.failure(e)

    document = ExportDocument(
        mood_entries=[entry.to_dict() for entry in moods],
        focus_sessions=[session.to_dict() for session in sessions],
    )
    logger.info(f"📤 Выгрузка подготовлена: {len(moods)} записей настроения, {len(sessions)} сессий")
    return ServiceResult.success(document)


def export_to_json(document: ExportDocument, export_dir: Path, user_id: str) -> Path:
    export_dir.mkdir(parents=True, exist_ok=True)
    stamp = document.export_date.strftime("%Y-%m-%d")
    filename = export_dir / f"dopamind_{user_id}_export_{stamp}.json"
    with open(filename, "w", encoding="utf-8") as f:
        json.dump(document.to_json_dict(), f, ensure_ascii=False, indent=2)
    return filename


def export_mood_entries_csv(entries: List[MoodEntry], export_dir: Path, user_id: str) -> Optional[Path]:
    if not entries:
        return None
    export_dir.mkdir(parents=True, exist_ok=True)
    filename = export_dir / f"dopamind_{user_id}_moods.csv"
    with open(filename, "w", newline="", encoding="utf-8") as f:
        dict_writer = csv.DictWriter(f, MOOD_CSV_FIELDS, extrasaction="ignore")
        dict_writer.writeheader()
        dict_writer.writerows(entry.to_dict() for entry in entries)
    return filename
