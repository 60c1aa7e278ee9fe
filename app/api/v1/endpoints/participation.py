import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from app.api.deps import get_db, get_wallet_address
from app.schemas.participation import ParticipationCreate, ParticipationRecorded, ParticipationStatus
from app.services import participation_service

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("", response_model=ParticipationStatus)
async def check_participation(
        contest_id: str = Query(..., alias="contestId", min_length=1),
        wallet_address: str = Depends(get_wallet_address),
        db: Session = Depends(get_db)
):
    try:
        return participation_service.check_participation(db, contest_id, wallet_address)
    except HTTPException as e:
        raise e
    except Exception as e:
        logger.error(f"API Error checking participation: {type(e).__name__}: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=f"Check failed: {e}")


@router.post("", response_model=ParticipationRecorded, status_code=status.HTTP_201_CREATED)
async def record_participation(participation_in: ParticipationCreate, db: Session = Depends(get_db)):
    try:
        return participation_service.record_participation(db, participation_in)
    except HTTPException as e:
        raise e
    except Exception as e:
        logger.error(f"API Error recording participation: {type(e).__name__}: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                            detail=f"Failed to record participation: {e}")
