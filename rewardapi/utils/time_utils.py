from datetime import datetime, timedelta, timezone
from typing import Optional


def utcnow() -> datetime:
    """현재 UTC 시각 (timezone-aware)"""
    return datetime.now(timezone.utc)


def ensure_utc(value: Optional[datetime]) -> Optional[datetime]:
    """naive datetime은 UTC로 간주하여 tzinfo를 붙인다 (SQLite 등)"""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def next_timestamp(previous: Optional[datetime]) -> datetime:
    """이전 값보다 항상 큰 갱신 시각을 반환

    시계 해상도가 낮아 같은 값이 나오는 경우 1마이크로초를 더한다.
    """
    now = utcnow()
    previous = ensure_utc(previous)
    if previous is not None and now <= previous:
        return previous + timedelta(microseconds=1)
    return now
