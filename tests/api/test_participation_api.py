import pytest
from httpx import AsyncClient

pytestmark = pytest.mark.asyncio

WALLET = "0xAbC0000000000000000000000000000000000DeF"


async def test_check_requires_both_params(client: AsyncClient):
    response = await client.get("/api/participation", params={"contestId": "c1"})

    assert response.status_code == 400
    assert "walletAddress" in response.json()["detail"]


async def test_check_rejects_blank_wallet(client: AsyncClient):
    response = await client.get("/api/participation", params={"contestId": "c1", "walletAddress": "   "})

    assert response.status_code == 400
    assert response.json() == {"detail": "walletAddress is required."}


async def test_record_then_check(client: AsyncClient):
    before = await client.get("/api/participation", params={"contestId": "c1", "walletAddress": WALLET})
    assert before.json() == {"participated": False}

    created = await client.post("/api/participation", json={"contestId": "c1", "walletAddress": WALLET})
    assert created.status_code == 201
    assert created.json() == {"success": True}

    after = await client.get("/api/participation", params={"contestId": "c1", "walletAddress": WALLET.lower()})
    assert after.json() == {"participated": True}


async def test_second_record_is_conflict_regardless_of_case(client: AsyncClient):
    await client.post("/api/participation", json={"contestId": "c1", "walletAddress": WALLET.lower()})

    response = await client.post("/api/participation", json={"contestId": "c1", "walletAddress": WALLET.upper()})

    assert response.status_code == 409
    assert "already participated" in response.json()["detail"]


@pytest.mark.parametrize("body", [
    {"contestId": "c1"},
    {"walletAddress": WALLET},
    {"contestId": "", "walletAddress": WALLET},
    {"contestId": "c1", "walletAddress": "   "},
])
async def test_record_requires_fields(client: AsyncClient, body: dict):
    response = await client.post("/api/participation", json=body)

    assert response.status_code == 400


async def test_storage_failure_is_500(client: AsyncClient, mocker):
    mocker.patch(
        "app.services.participation_service.crud_participation.participation.has_participated",
        side_effect=RuntimeError("connection reset"),
    )

    response = await client.get("/api/participation", params={"contestId": "c1", "walletAddress": WALLET})

    assert response.status_code == 500
    assert "connection reset" in response.json()["detail"]
