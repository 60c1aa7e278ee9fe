from enum import Enum

from pydantic import field_validator

from app.core.wallet import canonical_wallet
from app.schemas.base import CamelModel


class RecordOutcome(str, Enum):
    RECORDED = "RECORDED"
    ALREADY_RECORDED = "ALREADY_RECORDED"


class ParticipationCreate(CamelModel):
    contest_id: str
    wallet_address: str

    @field_validator("contest_id")
    @classmethod
    def contest_id_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("contestId is required.")
        return v

    @field_validator("wallet_address")
    @classmethod
    def canonicalize_wallet(cls, v: str) -> str:
        v = canonical_wallet(v)
        if not v:
            raise ValueError("walletAddress is required.")
        return v


class ParticipationStatus(CamelModel):
    participated: bool


class ParticipationRecorded(CamelModel):
    success: bool = True
