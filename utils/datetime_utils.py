from datetime import datetime, timedelta
from typing import Optional
import pytz

UTC = pytz.utc


def now_utc() -> datetime:
    return datetime.now(UTC)


def today_str(tz: Optional[str] = None) -> str:
    current = now_utc() if tz is None else datetime.now(pytz.timezone(tz))
    return current.strftime("%Y-%m-%d")


def to_iso(dt: datetime) -> str:
    if dt.tzinfo is None:
        dt = UTC.localize(dt)
    return dt.isoformat()


def parse_iso(value: str) -> datetime:
    # "Z" приходит от удалённого бэкенда
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    dt = datetime.fromisoformat(value)
    if dt.tzinfo is None:
        dt = UTC.localize(dt)
    return dt


def days_ago(days: int, since: Optional[datetime] = None) -> datetime:
    return (since or now_utc()) - timedelta(days=days)


def timestamp_ms(dt: Optional[datetime] = None) -> int:
    return int((dt or now_utc()).timestamp() * 1000)
