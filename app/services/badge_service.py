import abc
import logging
from urllib.parse import quote

from app.core.config import settings
from app.core.logging_config import log_wallet_event
from app.schemas.badge import MintResult, MintStatus
from app.schemas.execute import Verdict

logger = logging.getLogger(__name__)


class WalletCapability(abc.ABC):
    """Signing wallet supplied by the deployment. All calls may suspend on RPC."""

    @abc.abstractmethod
    async def get_address(self) -> str:
        ...

    @abc.abstractmethod
    async def request_accounts(self) -> str:
        """Ask the wallet for account access; returns the granted address."""

    @abc.abstractmethod
    async def get_chain_id(self) -> str:
        ...

    @abc.abstractmethod
    async def switch_network(self, chain_id: str):
        ...

    @abc.abstractmethod
    async def send_mint(self, contract_address: str, to: str, uri: str, question_hash: str) -> str:
        """Send safeMint(to, uri, questionHash); returns the transaction hash."""

    @abc.abstractmethod
    async def wait_for_confirmation(self, tx_hash: str):
        """Block until the transaction is mined. Raises if it reverted."""


def question_hash(contest_id: str, problem_index: int) -> str:
    return f"{contest_id}-{problem_index}"


class BadgeIssuer:
    def __init__(
            self,
            wallet: WalletCapability,
            contract_address: str = None,
            chain_id: str = None,
            uri_template: str = None
    ):
        self.wallet = wallet
        self.contract_address = contract_address if contract_address is not None else settings.BADGE_CONTRACT_ADDRESS
        self.chain_id = chain_id or settings.BADGE_CHAIN_ID
        self.uri_template = uri_template or settings.BADGE_URI_TEMPLATE

    def token_uri(self, contest_id: str, problem_index: int) -> str:
        return self.uri_template.format(
            question_hash=quote(question_hash(contest_id, problem_index), safe=""),
            contest_id=quote(contest_id, safe=""),
            problem_index=problem_index,
        )

    async def issue(self, verdict: Verdict, contest_id: str, problem_index: int) -> MintResult:
        """
        Mint the completion badge for a fully passed problem and wait for the receipt.

        Failures come back as an error result; they never change the verdict and
        are not retried.
        """
        if not verdict.all_passed:
            raise ValueError("A badge can only be issued for a verdict where every test case passed.")

        q_hash = question_hash(contest_id, problem_index)
        uri = self.token_uri(contest_id, problem_index)
        address = None
        try:
            address = await self.wallet.get_address()
            current_chain = await self.wallet.get_chain_id()
            if current_chain.lower() != self.chain_id.lower():
                logger.info(f"Badge: switching wallet {address} from chain {current_chain} to {self.chain_id}.")
                await self.wallet.switch_network(self.chain_id)

            tx_hash = await self.wallet.send_mint(self.contract_address, address, uri, q_hash)
            await self.wallet.wait_for_confirmation(tx_hash)
        except Exception as e:
            logger.warning(f"Badge: mint for {q_hash} failed: {type(e).__name__}: {e}")
            log_wallet_event(address, contest_id, "badge_mint_failed",
                             details={"question_hash": q_hash, "error": str(e)})
            return MintResult(status=MintStatus.ERROR, question_hash=q_hash, token_uri=uri, error=str(e))

        log_wallet_event(address, contest_id, "badge_minted", details={"question_hash": q_hash, "tx_hash": tx_hash})
        return MintResult(status=MintStatus.MINTED, question_hash=q_hash, token_uri=uri, tx_hash=tx_hash)
