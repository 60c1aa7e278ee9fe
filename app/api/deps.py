from typing import Callable, Generator

from fastapi import HTTPException, Query, status

from app.core.wallet import canonical_wallet
from app.db.session import SessionLocal
from app.runner.jdoodle import JDoodleRunner, create_runner_from_settings


def get_db() -> Generator:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_runner_factory() -> Callable[[], JDoodleRunner]:
    """Runner construction is deferred to the handler so request validation is reported first."""
    return create_runner_from_settings


def get_wallet_address(wallet_address: str = Query(..., alias="walletAddress", min_length=1)) -> str:
    wallet = canonical_wallet(wallet_address)
    if not wallet:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="walletAddress is required.")
    return wallet
