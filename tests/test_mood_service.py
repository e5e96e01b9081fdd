"""Tests for MoodService in local mode."""

from __future__ import annotations

from database.local_backend import MOOD_HISTORY_KEY
from models import MoodInput


async def test_history_ring_keeps_last_seven(manager, storage):
    for score in [1, 2, 3, 4, 5, 1, 2, 3, 4]:
        await manager.moods.log_mood(MoodInput(score=score))

    history = (await manager.moods.get_mood_history()).data
    assert history == [3, 4, 5, 1, 2, 3, 4]
    assert history[-1] == 4
    assert storage.get_json(MOOD_HISTORY_KEY) == history


async def test_empty_history_is_empty_list(manager):
    result = await manager.moods.get_mood_history(7)
    assert result.ok
    assert result.data == []


async def test_entries_newest_first_with_session_link(manager):
    await manager.moods.log_mood(MoodInput(score=3, emoji="😐"))
    await manager.moods.log_mood({"score": 5, "notes": "great focus"}, session_id="sess-1")

    entries = (await manager.moods.get_mood_entries()).data
    assert len(entries) == 2
    assert entries[0].mood_score == 5
    assert entries[0].session_id == "sess-1"
    assert entries[0].after_session is True
    assert entries[0].notes == "great focus"
    assert entries[1].emoji == "😐"
    assert entries[1].after_session is False


async def test_entry_date_matches_created_at(manager):
    entry = (await manager.moods.log_mood(MoodInput(score=4))).data
    assert entry.id.startswith("local-")
    assert entry.user_id == "demo"
    assert entry.date == entry.created_at.date().isoformat()


async def test_entries_limit(manager):
    for score in range(1, 6):
        await manager.moods.log_mood(MoodInput(score=score))
    entries = (await manager.moods.get_mood_entries(limit=2)).data
    assert [e.mood_score for e in entries] == [5, 4]


async def test_analytics_chronological(manager):
    for score in (2, 4):
        await manager.moods.log_mood(MoodInput(score=score))
    entries = (await manager.moods.get_mood_analytics(30)).data
    assert [e.mood_score for e in entries] == [2, 4]


async def test_summary(manager):
    await manager.moods.log_mood(MoodInput(score=2))
    await manager.moods.log_mood(MoodInput(score=4), session_id="s")
    summary = (await manager.moods.get_mood_summary(7)).data
    assert summary["count"] == 2
    assert summary["average"] == 3
    assert summary["min"] == 2 and summary["max"] == 4
    assert summary["after_session"] == 1


async def test_summary_without_entries(manager):
    summary = (await manager.moods.get_mood_summary()).data
    assert summary["count"] == 0
    assert summary["average"] is None
