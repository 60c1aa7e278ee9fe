from typing import List, Optional

from pydantic import Field, field_validator

from app.core.wallet import canonical_wallet
from app.schemas.base import CamelModel


class ExecuteRequest(CamelModel):
    code: str = Field(min_length=1)
    contest_id: str = Field(min_length=1)
    problem_index: int = Field(ge=0)
    wallet_address: Optional[str] = None

    @field_validator("wallet_address")
    @classmethod
    def canonicalize_wallet(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        return canonical_wallet(v) or None


class TestResult(CamelModel):
    __test__ = False

    index: int
    passed: bool
    error: Optional[str] = None


class Verdict(CamelModel):
    results: List[TestResult] = []
    all_passed: bool
    passed_count: int
    total: int
