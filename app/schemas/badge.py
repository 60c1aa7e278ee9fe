from enum import Enum
from typing import Optional

from app.schemas.base import CamelModel


class MintStatus(str, Enum):
    MINTED = "minted"
    ERROR = "error"


class MintResult(CamelModel):
    status: MintStatus
    question_hash: str
    token_uri: str
    tx_hash: Optional[str] = None
    error: Optional[str] = None
