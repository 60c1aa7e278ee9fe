import pytest

from app.schemas.badge import MintStatus
from app.schemas.execute import TestResult, Verdict
from app.services.badge_service import BadgeIssuer, question_hash
from conftest import FakeWallet

pytestmark = pytest.mark.asyncio

PASSED = Verdict(results=[TestResult(index=0, passed=True)], all_passed=True, passed_count=1, total=1)
FAILED = Verdict(results=[TestResult(index=0, passed=False)], all_passed=False, passed_count=0, total=1)


def _issuer(wallet):
    return BadgeIssuer(wallet, contract_address="0xcontract", chain_id="0xaa36a7",
                       uri_template="https://badges.example/{question_hash}?c={contest_id}&p={problem_index}")


def test_question_hash_is_deterministic():
    assert question_hash("abc123", 2) == "abc123-2"
    assert _issuer(FakeWallet()).token_uri("abc123", 2) == "https://badges.example/abc123-2?c=abc123&p=2"


async def test_mint_switches_network_and_waits_for_confirmation():
    wallet = FakeWallet(chain_id="0x1")

    result = await _issuer(wallet).issue(PASSED, "abc123", 0)

    assert result.status == MintStatus.MINTED
    assert result.tx_hash == "0xtx1"
    assert result.question_hash == "abc123-0"
    assert wallet.switched_to == ["0xaa36a7"]
    assert wallet.mints == [("0xcontract", wallet.address, result.token_uri, "abc123-0")]
    assert wallet.confirmed == ["0xtx1"]


async def test_no_switch_when_already_on_the_right_network():
    wallet = FakeWallet(chain_id="0xAA36A7")

    result = await _issuer(wallet).issue(PASSED, "abc123", 1)

    assert result.status == MintStatus.MINTED
    assert wallet.switched_to == []


async def test_mint_failure_is_reported_not_raised():
    wallet = FakeWallet(chain_id="0xaa36a7", fail_with=RuntimeError("user rejected transaction"))

    result = await _issuer(wallet).issue(PASSED, "abc123", 0)

    assert result.status == MintStatus.ERROR
    assert "user rejected" in result.error
    assert wallet.confirmed == []


async def test_refuses_to_mint_for_a_failed_verdict():
    wallet = FakeWallet()
    with pytest.raises(ValueError):
        await _issuer(wallet).issue(FAILED, "abc123", 0)
    assert wallet.mints == []
