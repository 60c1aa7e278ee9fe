import logging
from typing import Any, Dict, List, Optional

import httpx

from app.core.wallet import canonical_wallet
from app.schemas.access import AccessDecision
from app.schemas.contest import ContestPublic, ContestSummary
from app.schemas.execute import Verdict
from app.schemas.participation import RecordOutcome

logger = logging.getLogger(__name__)


class ArenaApiError(Exception):
    def __init__(self, status_code: int, detail: str):
        super().__init__(f"{status_code}: {detail}")
        self.status_code = status_code
        self.detail = detail


class ArenaClient:
    """
    HTTP client for the arena API. Also satisfies the ledger interface used by
    AccessController, so a participant's session can run the same state machine
    the server does.
    """

    def __init__(self, base_url: str = "http://localhost:8000", http_client: Optional[httpx.AsyncClient] = None,
                 timeout_sec: float = 60.0):
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(base_url=base_url, timeout=timeout_sec)

    async def _request(self, method: str, url: str, **kwargs) -> httpx.Response:
        response = await self._client.request(method, url, **kwargs)
        if response.is_error:
            try:
                detail = response.json().get("detail", response.text)
            except ValueError:
                detail = response.text
            raise ArenaApiError(response.status_code, str(detail))
        return response

    async def list_contests(self) -> List[ContestSummary]:
        response = await self._request("GET", "/api/contests")
        return [ContestSummary.model_validate(item) for item in response.json()]

    async def get_contest(self, contest_id: str) -> ContestPublic:
        response = await self._request("GET", f"/api/contests/{contest_id}")
        return ContestPublic.model_validate(response.json()["contest"])

    async def create_contest(self, contest: Dict[str, Any]) -> str:
        response = await self._request("POST", "/api/contests", json=contest)
        return response.json()["id"]

    async def has_participated(self, contest_id: str, wallet_address: str) -> bool:
        response = await self._request(
            "GET", "/api/participation",
            params={"contestId": contest_id, "walletAddress": canonical_wallet(wallet_address)}
        )
        return bool(response.json()["participated"])

    async def record_participation(self, contest_id: str, wallet_address: str) -> RecordOutcome:
        try:
            await self._request(
                "POST", "/api/participation",
                json={"contestId": contest_id, "walletAddress": canonical_wallet(wallet_address)}
            )
        except ArenaApiError as e:
            if e.status_code == 409:
                return RecordOutcome.ALREADY_RECORDED
            raise
        return RecordOutcome.RECORDED

    async def check_access(self, contest_id: str, wallet_address: str) -> AccessDecision:
        response = await self._request(
            "GET", "/api/access",
            params={"contestId": contest_id, "walletAddress": canonical_wallet(wallet_address)}
        )
        return AccessDecision.model_validate(response.json())

    async def execute(self, code: str, contest_id: str, problem_index: int,
                      wallet_address: Optional[str] = None) -> Verdict:
        body = {"code": code, "contestId": contest_id, "problemIndex": problem_index}
        if wallet_address:
            body["walletAddress"] = canonical_wallet(wallet_address)
        response = await self._request("POST", "/api/execute", json=body)
        return Verdict.model_validate(response.json())

    async def aclose(self):
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "ArenaClient":
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.aclose()
