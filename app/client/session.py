import logging
import time
from typing import Callable, Optional

import httpx
from pydantic import BaseModel

from app.client.api_client import ArenaApiError, ArenaClient
from app.schemas.access import AccessDecision, AccessState, TimerState
from app.schemas.badge import MintResult
from app.schemas.contest import ContestPublic
from app.schemas.execute import Verdict
from app.schemas.participation import RecordOutcome
from app.services.access_service import AccessController
from app.services.badge_service import BadgeIssuer, WalletCapability
from app.services.timer_service import to_epoch_ms

logger = logging.getLogger(__name__)


class SessionClosedError(Exception):
    """New submissions are not accepted in the session's current state."""


class SubmissionOutcome(BaseModel):
    verdict: Verdict
    mint: Optional[MintResult] = None


def _now_ms() -> int:
    return int(time.time() * 1000)


class ParticipantSession:
    """
    Drives one wallet through a contest: connect, submit, mint, finish.

    The timer is re-derived from the server-held start instant on every tick.
    Participation is written at most once per session, on finish or expiry.
    """

    def __init__(
            self,
            client: ArenaClient,
            contest_id: str,
            wallet: WalletCapability,
            badge_issuer: Optional[BadgeIssuer] = None,
            clock: Callable[[], int] = _now_ms
    ):
        self.client = client
        self.contest_id = contest_id
        self.wallet = wallet
        self.badge_issuer = badge_issuer
        self.clock = clock
        self.controller = AccessController(contest_id, client)
        self.contest: Optional[ContestPublic] = None
        self.start_timestamp: Optional[int] = None

    @property
    def state(self) -> AccessState:
        return self.controller.state

    async def connect(self) -> AccessDecision:
        address = await self.wallet.request_accounts()
        self.contest = await self.client.get_contest(self.contest_id)

        decision = await self.controller.connect(address)
        if decision.state != AccessState.GRANTED:
            return decision

        try:
            server_decision = await self.client.check_access(self.contest_id, address)
        except (ArenaApiError, httpx.HTTPError) as e:
            logger.warning(f"Session: server access check failed for {self.controller.wallet_address}: {e}")
            return self.controller.fail(f"Failed to verify participation: {e}")

        if server_decision.state == AccessState.ERROR:
            return self.controller.fail(server_decision.reason or "Failed to verify participation.")

        if server_decision.timer and server_decision.timer.started_at:
            self.start_timestamp = to_epoch_ms(server_decision.timer.started_at)
        else:
            self.start_timestamp = self.clock()

        if server_decision.state != AccessState.GRANTED:
            await self.controller.complete()
            return server_decision
        return decision

    async def tick(self) -> TimerState:
        if self.start_timestamp is None or self.contest is None:
            raise SessionClosedError("Session has not been granted access yet.")
        return await self.controller.tick(self.start_timestamp, self.contest.time_limit_minutes, self.clock())

    async def submit(self, code: str, problem_index: int) -> SubmissionOutcome:
        timer = await self.tick()
        if timer.expired or not self.controller.can_submit:
            raise SessionClosedError(f"Submissions are closed ({self.controller.state.value}).")

        verdict = await self.client.execute(code, self.contest_id, problem_index, self.controller.wallet_address)
        mint = None
        if verdict.all_passed and self.badge_issuer is not None:
            mint = await self.badge_issuer.issue(verdict, self.contest_id, problem_index)
        return SubmissionOutcome(verdict=verdict, mint=mint)

    async def finish(self) -> Optional[RecordOutcome]:
        return await self.controller.complete()

    def disconnect(self):
        self.controller.disconnect()
        self.start_timestamp = None
