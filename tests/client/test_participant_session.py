import time

import pytest
from httpx import AsyncClient

from app.client.api_client import ArenaApiError, ArenaClient
from app.client.session import ParticipantSession, SessionClosedError
from app.schemas.access import AccessState
from app.schemas.badge import MintStatus
from app.schemas.participation import RecordOutcome
from app.services.badge_service import BadgeIssuer
from conftest import FakeWallet, SUM_CODE

pytestmark = pytest.mark.asyncio


class ShiftedClock:
    def __init__(self):
        self.offset_ms = 0

    def __call__(self) -> int:
        return int(time.time() * 1000) + self.offset_ms


def _session(client: AsyncClient, contest_id: str, wallet: FakeWallet, clock=None) -> ParticipantSession:
    issuer = BadgeIssuer(wallet, contract_address="0xbadge", chain_id="0xaa36a7")
    kwargs = {"clock": clock} if clock else {}
    return ParticipantSession(ArenaClient(http_client=client), contest_id, wallet, badge_issuer=issuer, **kwargs)


async def test_full_contest_flow_mints_and_records_once(client: AsyncClient, contest_id: str):
    wallet = FakeWallet()
    session = _session(client, contest_id, wallet)

    decision = await session.connect()
    assert decision.state == AccessState.GRANTED

    outcome = await session.submit(SUM_CODE, 0)
    assert outcome.verdict.all_passed is True
    assert outcome.mint.status == MintStatus.MINTED
    assert wallet.mints[0][3] == f"{contest_id}-0"

    assert await session.finish() == RecordOutcome.RECORDED
    assert await session.finish() is None
    assert session.state == AccessState.COMPLETED

    with pytest.raises(SessionClosedError):
        await session.submit(SUM_CODE, 0)

    again = _session(client, contest_id, FakeWallet(address=wallet.address.upper()))
    assert (await again.connect()).state == AccessState.DENIED


async def test_failed_verdict_does_not_mint(client: AsyncClient, contest_id: str):
    wallet = FakeWallet()
    session = _session(client, contest_id, wallet)
    await session.connect()

    outcome = await session.submit("throw new Error()", 0)

    assert outcome.verdict.all_passed is False
    assert outcome.mint is None
    assert wallet.mints == []


async def test_mint_failure_keeps_the_passing_verdict(client: AsyncClient, contest_id: str):
    wallet = FakeWallet(fail_with=RuntimeError("wrong network"))
    session = _session(client, contest_id, wallet)
    await session.connect()

    outcome = await session.submit(SUM_CODE, 0)

    assert outcome.verdict.all_passed is True
    assert outcome.mint.status == MintStatus.ERROR
    assert "wrong network" in outcome.mint.error


async def test_timer_expiry_closes_submissions_and_records_participation(client: AsyncClient, contest_id: str):
    clock = ShiftedClock()
    session = _session(client, contest_id, FakeWallet(), clock=clock)
    await session.connect()

    clock.offset_ms = 31 * 60 * 1000
    timer = await session.tick()

    assert timer.expired is True
    assert session.state == AccessState.COMPLETED
    assert session.controller.record_outcome == RecordOutcome.RECORDED
    with pytest.raises(SessionClosedError):
        await session.submit(SUM_CODE, 0)


async def test_disconnect_without_finishing_leaves_no_record(client: AsyncClient, contest_id: str):
    wallet = FakeWallet()
    session = _session(client, contest_id, wallet)
    await session.connect()

    session.disconnect()
    assert session.state == AccessState.IDLE

    participation = await client.get(
        "/api/participation", params={"contestId": contest_id, "walletAddress": wallet.address}
    )
    assert participation.json() == {"participated": False}
    assert (await session.connect()).state == AccessState.GRANTED


async def test_api_errors_carry_status_and_detail(client: AsyncClient):
    arena = ArenaClient(http_client=client)

    with pytest.raises(ArenaApiError) as exc_info:
        await arena.get_contest("missing")

    assert exc_info.value.status_code == 404
    assert exc_info.value.detail == "Contest not found."


async def test_server_check_failure_ends_in_error_not_granted(client: AsyncClient, contest_id: str, mocker):
    mocker.patch(
        "app.services.access_service.crud_session.contest_session.get_or_start",
        side_effect=RuntimeError("db down"),
    )
    session = _session(client, contest_id, FakeWallet())

    decision = await session.connect()

    assert decision.state == AccessState.ERROR
    assert "db down" in decision.reason
    assert session.state == AccessState.ERROR
    assert not session.controller.can_submit
    assert session.start_timestamp is None
    with pytest.raises(SessionClosedError):
        await session.submit(SUM_CODE, 0)
