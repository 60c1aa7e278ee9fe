from datetime import datetime
from enum import Enum
from typing import Optional

from app.schemas.base import CamelModel


class AccessState(str, Enum):
    IDLE = "idle"
    CHECKING = "checking"
    GRANTED = "granted"
    DENIED = "denied"
    COMPLETED = "completed"
    ERROR = "error"


class TimerState(CamelModel):
    contest_id: str
    seconds_left: int
    expired: bool
    started_at: Optional[datetime] = None


class AccessDecision(CamelModel):
    state: AccessState
    reason: Optional[str] = None
    timer: Optional[TimerState] = None
