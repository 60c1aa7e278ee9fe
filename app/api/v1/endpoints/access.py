import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from app.api.deps import get_db, get_wallet_address
from app.schemas.access import AccessDecision, TimerState
from app.services import access_service

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/access", response_model=AccessDecision, response_model_exclude_none=True)
async def check_access(
        contest_id: str = Query(..., alias="contestId", min_length=1),
        wallet_address: str = Depends(get_wallet_address),
        db: Session = Depends(get_db)
):
    """Grant or deny a wallet entry to a contest. Granting starts the wallet's timer."""
    try:
        return await access_service.check_access(db, contest_id, wallet_address)
    except HTTPException as e:
        raise e
    except Exception as e:
        logger.error(f"API Error checking access: {type(e).__name__}: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                            detail=f"Failed to verify participation: {e}")


@router.get("/timer", response_model=TimerState)
async def read_timer(
        contest_id: str = Query(..., alias="contestId", min_length=1),
        wallet_address: str = Depends(get_wallet_address),
        db: Session = Depends(get_db)
):
    try:
        return access_service.get_timer(db, contest_id, wallet_address)
    except HTTPException as e:
        raise e
    except Exception as e:
        logger.error(f"API Error reading timer: {type(e).__name__}: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=f"Failed to read timer: {e}")
