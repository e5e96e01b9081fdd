"""Tests for services running against the remote backend (in-memory client)."""

from __future__ import annotations

import pytest
from supabase import PostgrestAPIError

from core.errors import AuthRequiredError, RemoteError, ResultStatus
from database import create_backend
from database.remote_backend import RemoteBackend
from models import MoodInput, SessionStatus, SubscriptionTier
from services import ServiceManager

from fake_supabase import TABLE_COLUMNS, FakeSupabaseClient


async def _signed_in(remote_manager):
    result = await remote_manager.auth.sign_up("ann@test.io", "secret", "Ann", username="ann")
    assert result.ok
    return result.data


async def test_backend_selected_from_config(remote_config, fake_client):
    backend = create_backend(remote_config, client=fake_client)
    assert isinstance(backend, RemoteBackend)
    assert backend.is_remote
    assert backend.oauth_redirect_url == "https://app.test/auth/callback"


async def test_sign_up_creates_profile(remote_manager, fake_client):
    user = await _signed_in(remote_manager)
    assert user.display_name == "Ann"
    profiles = fake_client.tables["user_profiles"]
    assert profiles[0]["id"] == user.id
    assert profiles[0]["username"] == "ann"


async def test_sign_up_pending_confirmation(remote_config):
    client = FakeSupabaseClient(require_confirmation=True)
    manager = ServiceManager(remote_config)
    manager.initialize_services(create_backend(remote_config, client=client))

    result = await manager.auth.sign_up("bob@test.io", "pw", "Bob")
    assert result.is_pending
    assert result.error is None
    assert await manager.auth.get_current_user() is None


async def test_invalid_credentials_surface_backend_message(remote_manager):
    result = await remote_manager.auth.sign_in("nobody@test.io", "pw")
    assert not result.ok
    assert isinstance(result.error, RemoteError)
    assert result.message == "Invalid login credentials"


async def test_duplicate_sign_up_fails(remote_manager):
    await _signed_in(remote_manager)
    result = await remote_manager.auth.sign_up("ann@test.io", "secret", "Ann")
    assert result.message == "User already registered"


async def test_oauth_returns_redirect_url(remote_manager):
    result = await remote_manager.auth.sign_in_with_provider("apple")
    assert result.ok
    assert "provider=apple" in result.data
    assert "redirect_to=https://app.test/auth/callback" in result.data


async def test_signed_out_operations_require_auth(remote_manager, fake_client):
    result = await remote_manager.sessions.start_session(25)
    assert isinstance(result.error, AuthRequiredError)
    assert "focus_sessions" not in fake_client.tables


async def test_session_flow_updates_stats(remote_manager, fake_client):
    user = await _signed_in(remote_manager)

    started = await remote_manager.sessions.start_session(25, "deep_work")
    assert started.ok
    assert started.data.user_id == user.id

    completed = await remote_manager.sessions.complete_session(started.data.id, 24)
    assert completed.data.completed is True
    assert completed.data.actual_duration_minutes == 24

    stats_row = fake_client.tables["user_stats"][0]
    assert stats_row["user_id"] == user.id
    assert stats_row["total_sessions"] == 1
    assert stats_row["total_focus_time"] == 24
    assert stats_row["current_streak"] == 1

    stats = (await remote_manager.sessions.get_user_stats()).data
    assert stats.total_focus_minutes == 24


async def test_completion_only_matches_own_running_session(remote_manager, fake_client):
    await _signed_in(remote_manager)
    started = await remote_manager.sessions.start_session(25)
    fake_client.tables["focus_sessions"][0]["user_id"] = "someone-else"

    result = await remote_manager.sessions.complete_session(started.data.id, 25)
    assert result.ok and result.data is None
    assert "user_stats" not in fake_client.tables


async def test_server_streak_rpc(remote_config, fake_client):
    remote_config.remote.streak_rpc = "calculate_user_streak"
    fake_client.rpc_results["calculate_user_streak"] = 12
    manager = ServiceManager(remote_config)
    manager.initialize_services(create_backend(remote_config, client=fake_client))

    await manager.auth.sign_up("c@test.io", "pw", "C")
    stats = (await manager.sessions.get_user_stats()).data
    assert stats.current_streak == 12
    assert ("calculate_user_streak", "rpc") in fake_client.calls


async def test_database_error_message_passes_through(remote_manager, fake_client):
    await _signed_in(remote_manager)
    fake_client.fail_tables["mood_entries"] = "new row violates row-level security policy"

    result = await remote_manager.moods.log_mood(MoodInput(score=4))
    assert isinstance(result.error, RemoteError)
    assert result.message == "new row violates row-level security policy"
    assert result.error.code == "42501"


async def test_mood_history_from_remote_rows(remote_manager):
    await _signed_in(remote_manager)
    for score in (2, 5):
        await remote_manager.moods.log_mood(MoodInput(score=score))

    assert (await remote_manager.moods.get_mood_history(7)).data == [2, 5]
    entries = (await remote_manager.moods.get_mood_entries()).data
    assert [e.mood_score for e in entries] == [5, 2]


async def test_entitlement_on_profile(remote_manager, fake_client):
    await _signed_in(remote_manager)
    assert await remote_manager.subscriptions.has_feature_access("advanced_analytics") is False

    await remote_manager.subscriptions.update_subscription("pro", "active")
    assert fake_client.tables["user_profiles"][0]["subscription_tier"] == "pro"
    status = (await remote_manager.subscriptions.check_subscription_status()).data
    assert status.tier == SubscriptionTier.PRO


async def test_tips_from_remote_table(remote_manager, fake_client):
    await _signed_in(remote_manager)
    fake_client.tables["daily_tips"] = [
        {"id": 1, "tip_text": "Walk outside", "tip_category": "mindfulness",
         "is_premium": False, "active": True, "display_order": 1},
        {"id": 2, "tip_text": "Secret", "tip_category": "dopamine",
         "is_premium": True, "active": True, "display_order": 2},
        {"id": 3, "tip_text": "Retired", "tip_category": "dopamine",
         "is_premium": False, "active": False, "display_order": 3},
    ]
    tip = (await remote_manager.tips.get_daily_tip()).data
    assert tip.text == "Walk outside"


async def test_analytics_events_stored_with_owner(remote_manager, fake_client):
    user = await _signed_in(remote_manager)
    await remote_manager.analytics.track_session_event("session_completed", 25, "focus", True)
    row = fake_client.tables["app_analytics"][0]
    assert row["user_id"] == user.id
    assert row["screen_name"] == "FocusTimer"
    assert row["event_data"]["session_duration"] == 25

    events = (await remote_manager.analytics.get_user_analytics(7)).data
    assert events[0].event_type == "session_completed"


async def test_pending_sign_up_survives_rejected_profile_insert(remote_config):
    client = FakeSupabaseClient(require_confirmation=True)
    client.fail_tables["user_profiles"] = "new row violates row-level security policy"
    manager = ServiceManager(remote_config)
    manager.initialize_services(create_backend(remote_config, client=client))

    result = await manager.auth.sign_up("bob@test.io", "pw", "Bob")
    assert result.status == ResultStatus.PENDING_CONFIRMATION
    assert result.error is None
    assert result.data.email == "bob@test.io"
    assert "bob@test.io" in client.auth.accounts


async def test_sign_out_clears_remote_user(remote_manager):
    await _signed_in(remote_manager)
    assert await remote_manager.auth.get_current_user() is not None

    assert (await remote_manager.auth.sign_out()).ok
    assert await remote_manager.auth.get_current_user() is None


def test_fake_rejects_columns_outside_hosted_schema(fake_client):
    with pytest.raises(PostgrestAPIError) as exc:
        fake_client.table("focus_sessions").insert({"user_id": "u", "status": "running"}).execute()
    assert exc.value.code == "42703"


async def test_session_rows_keep_hosted_columns(remote_manager, fake_client):
    await _signed_in(remote_manager)
    started = await remote_manager.sessions.start_session(25)
    assert started.ok
    assert started.data.status == SessionStatus.RUNNING

    row = fake_client.tables["focus_sessions"][0]
    assert set(row) <= TABLE_COLUMNS["focus_sessions"]
    assert row["completed"] is False
    assert row["actual_duration"] is None


async def test_row_from_earlier_client_can_be_completed(remote_manager, fake_client):
    user = await _signed_in(remote_manager)
    fake_client.tables["focus_sessions"] = [{
        "id": "legacy-1", "user_id": user.id, "session_duration": 25,
        "actual_duration": None, "session_type": "focus", "completed": False,
        "started_at": "2026-10-18T08:00:00+00:00", "completed_at": None,
        "created_at": "2026-10-18T08:00:00+00:00",
    }]

    result = await remote_manager.sessions.complete_session("legacy-1", 25)
    assert result.data.status == SessionStatus.COMPLETED
    assert fake_client.tables["user_stats"][0]["total_sessions"] == 1


async def test_cancelled_remote_session_cannot_be_completed(remote_manager, fake_client):
    await _signed_in(remote_manager)
    started = await remote_manager.sessions.start_session(25)

    cancelled = await remote_manager.sessions.cancel_session(started.data.id)
    assert cancelled.data.status == SessionStatus.CANCELLED
    assert cancelled.data.completed is False
    assert cancelled.data.cancelled_at is not None
    assert fake_client.tables["focus_sessions"][0]["actual_duration"] == 0

    completed = await remote_manager.sessions.complete_session(started.data.id, 25)
    assert completed.ok and completed.data is None
    listed = (await remote_manager.sessions.get_user_sessions()).data
    assert listed[0].status == SessionStatus.CANCELLED


async def test_remote_sessions_newest_first_and_capped(remote_manager, fake_client):
    await _signed_in(remote_manager)
    ids = [(await remote_manager.sessions.start_session(5)).data.id for _ in range(4)]
    for day, row in enumerate(fake_client.tables["focus_sessions"], start=10):
        row["started_at"] = f"2026-10-{day}T08:00:00+00:00"

    history = (await remote_manager.sessions.get_user_sessions(3)).data
    assert [s.id for s in history] == list(reversed(ids))[:3]


async def test_remote_mood_entries_capped(remote_manager, fake_client):
    await _signed_in(remote_manager)
    for score in range(1, 6):
        await remote_manager.moods.log_mood(MoodInput(score=score))
    for day, row in enumerate(fake_client.tables["mood_entries"], start=10):
        row["created_at"] = f"2026-10-{day}T08:00:00+00:00"

    entries = (await remote_manager.moods.get_mood_entries(limit=2)).data
    assert [e.mood_score for e in entries] == [5, 4]
