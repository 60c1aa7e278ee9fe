import logging
from typing import Optional, Protocol

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from app.core.logging_config import log_wallet_event, log_audit_event
from app.core.wallet import canonical_wallet
from app.crud import crud_participation, crud_session
from app.schemas.access import AccessDecision, AccessState, TimerState
from app.schemas.participation import RecordOutcome
from app.services import contest_service
from app.services.timer_service import remaining, session_timer

logger = logging.getLogger(__name__)

ALREADY_PARTICIPATED = "This wallet has already participated in this contest."
TIME_EXPIRED = "Contest time has expired for this wallet."


class Ledger(Protocol):
    async def has_participated(self, contest_id: str, wallet_address: str) -> bool:
        ...

    async def record_participation(self, contest_id: str, wallet_address: str) -> RecordOutcome:
        ...


class DatabaseLedger:
    def __init__(self, db: Session):
        self.db = db

    async def has_participated(self, contest_id: str, wallet_address: str) -> bool:
        return crud_participation.participation.has_participated(
            self.db, contest_id=contest_id, wallet_address=wallet_address
        )

    async def record_participation(self, contest_id: str, wallet_address: str) -> RecordOutcome:
        return crud_participation.participation.record_participation(
            self.db, contest_id=contest_id, wallet_address=wallet_address
        )


class InvalidTransition(Exception):
    pass


class AccessController:
    """
    Per (wallet, contest) access state machine.

    idle -> checking -> granted | denied | error
    granted -> completed (finish or timer expiry, writes the ledger once)
    granted -> idle (wallet disconnect)

    Being granted does not write the ledger; only completion does.
    """

    def __init__(self, contest_id: str, ledger: Ledger):
        self.contest_id = contest_id
        self.ledger = ledger
        self.state = AccessState.IDLE
        self.wallet_address: Optional[str] = None
        self.reason: Optional[str] = None
        self.record_outcome: Optional[RecordOutcome] = None
        self._participation_posted = False

    def decision(self, timer: Optional[TimerState] = None) -> AccessDecision:
        return AccessDecision(state=self.state, reason=self.reason, timer=timer)

    async def connect(self, wallet_address: str) -> AccessDecision:
        if self.state != AccessState.IDLE:
            raise InvalidTransition(f"Cannot connect a wallet while {self.state.value}.")

        self.wallet_address = canonical_wallet(wallet_address)
        self.state = AccessState.CHECKING
        self.reason = None

        try:
            participated = await self.ledger.has_participated(self.contest_id, self.wallet_address)
        except Exception as e:
            logger.error(f"Access: participation check failed for {self.wallet_address} "
                         f"in {self.contest_id}: {type(e).__name__}: {e}", exc_info=True)
            self.state = AccessState.ERROR
            self.reason = f"Failed to verify participation: {e}"
            return self.decision()

        if participated:
            self.state = AccessState.DENIED
            self.reason = ALREADY_PARTICIPATED
        else:
            self.state = AccessState.GRANTED
        return self.decision()

    def fail(self, reason: str) -> AccessDecision:
        """A later step of the check failed. Never leaves the wallet granted."""
        if self.state not in (AccessState.CHECKING, AccessState.GRANTED):
            raise InvalidTransition(f"Cannot fail a check while {self.state.value}.")
        self.state = AccessState.ERROR
        self.reason = reason
        return self.decision()

    def disconnect(self):
        if self.state != AccessState.GRANTED:
            raise InvalidTransition(f"Cannot disconnect while {self.state.value}.")
        self.state = AccessState.IDLE
        self.wallet_address = None

    @property
    def can_submit(self) -> bool:
        return self.state == AccessState.GRANTED

    async def complete(self) -> Optional[RecordOutcome]:
        """Close out participation. Only the first call writes to the ledger."""
        if self.state == AccessState.COMPLETED or self._participation_posted:
            return None
        if self.state != AccessState.GRANTED:
            raise InvalidTransition(f"Cannot complete while {self.state.value}.")

        self._participation_posted = True
        self.state = AccessState.COMPLETED
        try:
            self.record_outcome = await self.ledger.record_participation(self.contest_id, self.wallet_address)
        except Exception as e:
            logger.error(f"Access: failed to record participation for {self.wallet_address} "
                         f"in {self.contest_id}: {type(e).__name__}: {e}", exc_info=True)
            self.reason = f"Failed to record participation: {e}"
            return None
        return self.record_outcome

    async def tick(self, start_timestamp: int, limit_minutes: int, now: int) -> TimerState:
        timer = remaining(self.contest_id, start_timestamp, limit_minutes, now)
        if timer.expired and self.state == AccessState.GRANTED:
            await self.complete()
        return timer


async def check_access(db: Session, contest_id: str, wallet_address: str) -> AccessDecision:
    contest = contest_service.get_contest_by_id(db, contest_id)
    controller = AccessController(contest.id, DatabaseLedger(db))
    decision = await controller.connect(wallet_address)
    wallet = controller.wallet_address

    if decision.state == AccessState.ERROR:
        log_wallet_event(wallet, contest.id, "access_check_error", details={"reason": decision.reason})
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=decision.reason)

    if decision.state == AccessState.DENIED:
        log_wallet_event(wallet, contest.id, "access_denied", details={"reason": decision.reason})
        return decision

    session = crud_session.contest_session.get_or_start(db, contest_id=contest.id, wallet_address=wallet)
    timer = session_timer(contest.id, session.started_at, contest.time_limit_minutes)

    if timer.expired:
        outcome = await controller.complete()
        log_wallet_event(wallet, contest.id, "access_expired_finalized",
                         details={"outcome": outcome.value if outcome else None})
        return AccessDecision(state=AccessState.DENIED, reason=TIME_EXPIRED, timer=timer)

    log_wallet_event(wallet, contest.id, "access_granted", details={"seconds_left": timer.seconds_left})
    log_audit_event(wallet, contest.id, "access_granted")
    return controller.decision(timer)


def get_timer(db: Session, contest_id: str, wallet_address: str) -> TimerState:
    contest = contest_service.get_contest_by_id(db, contest_id)
    session = crud_session.contest_session.get(db, contest_id=contest.id, wallet_address=wallet_address)
    if not session:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No contest session for this wallet.")
    return session_timer(contest.id, session.started_at, contest.time_limit_minutes)


def ensure_can_submit(db: Session, contest_id: str, wallet_address: str, time_limit_minutes: int):
    """Blocks new submissions from wallets that finished or ran out of time."""
    if crud_participation.participation.has_participated(db, contest_id=contest_id, wallet_address=wallet_address):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=ALREADY_PARTICIPATED)

    session = crud_session.contest_session.get(db, contest_id=contest_id, wallet_address=wallet_address)
    if session and session_timer(contest_id, session.started_at, time_limit_minutes).expired:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=TIME_EXPIRED)
