"""Tests for the user data export document and file writers."""

from __future__ import annotations

import csv
import json

from core.errors import AuthRequiredError
from models import MoodInput
from services.data_export import ExportDocument, export_mood_entries_csv, export_to_json


async def test_export_contains_both_collections(manager):
    started = await manager.sessions.start_session(25)
    await manager.sessions.complete_session(started.data.id, 25)
    await manager.moods.log_mood(MoodInput(score=4), session_id=started.data.id)

    result = await manager.export_data()
    assert result.ok
    document = result.data.to_json_dict()
    assert set(document) == {"moodEntries", "focusSessions", "exportDate"}
    assert document["focusSessions"][0]["completed"] is True
    assert document["moodEntries"][0]["session_id"] == started.data.id


async def test_export_empty_store(manager):
    document = (await manager.export_data()).data.to_json_dict()
    assert document["moodEntries"] == []
    assert document["focusSessions"] == []


async def test_export_requires_user_remotely(remote_manager):
    result = await remote_manager.export_data()
    assert isinstance(result.error, AuthRequiredError)


def test_document_accepts_field_names_and_aliases():
    by_name = ExportDocument(mood_entries=[{"mood_score": 3}])
    by_alias = ExportDocument(moodEntries=[{"mood_score": 3}])
    assert by_name.mood_entries == by_alias.mood_entries


async def test_export_to_json_file(manager, tmp_path):
    await manager.moods.log_mood(MoodInput(score=5))
    document = (await manager.export_data()).data

    path = export_to_json(document, tmp_path / "exports", "demo")
    assert path.name.startswith("dopamind_demo_export_")
    data = json.loads(path.read_text(encoding="utf-8"))
    assert data["moodEntries"][0]["mood_score"] == 5


async def test_mood_csv(manager, tmp_path):
    await manager.moods.log_mood(MoodInput(score=2, notes="tired"))
    entries = (await manager.moods.get_mood_entries()).data

    path = export_mood_entries_csv(entries, tmp_path, "demo")
    with open(path, encoding="utf-8") as f:
        rows = list(csv.DictReader(f))
    assert rows[0]["mood_score"] == "2"
    assert rows[0]["notes"] == "tired"


def test_mood_csv_skips_empty(tmp_path):
    assert export_mood_entries_csv([], tmp_path, "demo") is None
