import asyncio
from typing import AsyncGenerator, Callable, Dict, Generator, List, Optional

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from app.api.deps import get_db, get_runner_factory
from app.db import models  # noqa: F401
from app.db.base_class import Base
from app.main import app
from app.runner.jdoodle import ExecutionResult
from app.services.badge_service import WalletCapability

TEST_DATABASE_URL = "sqlite://"

engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False}, poolclass=StaticPool)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

SUM_CODE = (
    "const lines = require('fs').readFileSync('/dev/stdin','utf8').trim().split('\\n');\n"
    "console.log(Number(lines[0]) + Number(lines[1]));"
)


def sum_of_lines(code: str, stdin: str) -> ExecutionResult:
    """Stands in for the provider running SUM_CODE under node."""
    if "throw" in code:
        return ExecutionResult(output="Error: boom", status_code=500)
    numbers = [int(line) for line in stdin.split("\n") if line.strip()]
    return ExecutionResult(output=f"{sum(numbers)}\n", status_code=200)


class FakeRunner:
    def __init__(self, handler: Callable[[str, str], ExecutionResult] = sum_of_lines,
                 delays: Optional[Dict[str, float]] = None):
        self.handler = handler
        self.delays = delays or {}
        self.calls: List[str] = []
        self.closed = False

    async def run(self, code: str, stdin: str) -> ExecutionResult:
        self.calls.append(stdin)
        delay = self.delays.get(stdin)
        if delay:
            await asyncio.sleep(delay)
        return self.handler(code, stdin)

    async def aclose(self):
        self.closed = True


class FakeWallet(WalletCapability):
    def __init__(self, address: str = "0xAbCdEf0000000000000000000000000000000001", chain_id: str = "0x1",
                 fail_with: Optional[Exception] = None):
        self.address = address
        self.chain_id = chain_id
        self.fail_with = fail_with
        self.switched_to: List[str] = []
        self.mints: List[tuple] = []
        self.confirmed: List[str] = []

    async def get_address(self) -> str:
        return self.address

    async def request_accounts(self) -> str:
        return self.address

    async def get_chain_id(self) -> str:
        return self.chain_id

    async def switch_network(self, chain_id: str):
        self.switched_to.append(chain_id)
        self.chain_id = chain_id

    async def send_mint(self, contract_address: str, to: str, uri: str, question_hash: str) -> str:
        if self.fail_with is not None:
            raise self.fail_with
        self.mints.append((contract_address, to, uri, question_hash))
        return f"0xtx{len(self.mints)}"

    async def wait_for_confirmation(self, tx_hash: str):
        self.confirmed.append(tx_hash)


@pytest.fixture
def db() -> Generator[Session, None, None]:
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def fake_runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
async def client(db: Session, fake_runner: FakeRunner) -> AsyncGenerator[AsyncClient, None]:
    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_runner_factory] = lambda: (lambda: fake_runner)
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def contest_payload() -> dict:
    return {
        "name": "Weekly Sprint",
        "timeLimitMinutes": 30,
        "questions": [
            {
                "title": "Add Two",
                "description": "Print the sum of two integers given on separate lines.",
                "testCases": [
                    {"input": "3\n4", "expectedOutput": "7"},
                    {"input": "1\n1", "expectedOutput": "2"},
                ],
            },
            {
                "title": "Draft",
                "description": "Not ready yet.",
                "testCases": [],
            },
        ],
    }


@pytest.fixture
async def contest_id(client: AsyncClient, contest_payload: dict) -> str:
    response = await client.post("/api/contests", json=contest_payload)
    assert response.status_code == 201, response.text
    return response.json()["id"]
