import math
from datetime import datetime, timezone
from typing import Optional

from app.schemas.access import TimerState


def to_epoch_ms(moment: datetime) -> int:
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return int(moment.timestamp() * 1000)


def remaining(contest_id: str, start_timestamp: int, limit_minutes: int, now: int) -> TimerState:
    """
    Time left in a contest window. Timestamps are epoch milliseconds.

    Always derived from the start instant, never accumulated, so repeated calls
    cannot drift. A `now` before the start (clock skew) never yields more than
    the full window.
    """
    total_seconds = limit_minutes * 60
    elapsed_seconds = math.floor((now - start_timestamp) / 1000)
    seconds_left = max(0, min(total_seconds, total_seconds - elapsed_seconds))
    return TimerState(contest_id=contest_id, seconds_left=seconds_left, expired=seconds_left <= 0)


def session_timer(
        contest_id: str,
        started_at: datetime,
        limit_minutes: int,
        now: Optional[datetime] = None
) -> TimerState:
    if started_at.tzinfo is None:
        started_at = started_at.replace(tzinfo=timezone.utc)
    now = now or datetime.now(timezone.utc)
    state = remaining(contest_id, to_epoch_ms(started_at), limit_minutes, to_epoch_ms(now))
    state.started_at = started_at
    return state
