# core/streaks.py

from datetime import date, timedelta
from typing import Iterable, Optional

from utils.datetime_utils import now_utc


def _unique_days(dates: Iterable[date]) -> list:
    return sorted(set(dates), reverse=True)


def calculate_streak(dates: Iterable[date], today: Optional[date] = None) -> int:
    """Текущая серия: подряд идущие дни с завершённой сессией.

    Серия жива, если последняя сессия была сегодня или вчера (по UTC,
    как и даты завершения).
    """
    days = _unique_days(dates)
    if not days:
        return 0

    today = today or now_utc().date()
    if days[0] < today - timedelta(days=1):
        return 0

    streak = 1
    for previous, current in zip(days, days[1:]):
        if previous - current == timedelta(days=1):
            streak += 1
        else:
            break

    return streak


def best_streak(dates: Iterable[date]) -> int:
    """Самая длинная серия за всю историю"""
    days = sorted(set(dates))
    if not days:
        return 0

    best = run = 1
    for previous, current in zip(days, days[1:]):
        if current - previous == timedelta(days=1):
            run += 1
            best = max(best, run)
        else:
            run = 1

    return best
