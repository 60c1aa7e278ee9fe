import logging
from typing import List

from fastapi import APIRouter, HTTPException, Depends, status
from sqlalchemy.orm import Session

from app.api.deps import get_db
from app.schemas.contest import ContestCreate, ContestCreated, ContestEnvelope, ContestSummary
from app.services import contest_service

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("", response_model=ContestCreated, status_code=status.HTTP_201_CREATED)
async def create_contest(contest_in: ContestCreate, db: Session = Depends(get_db)):
    try:
        return contest_service.create_contest(db, contest_in)
    except HTTPException as e:
        raise e
    except Exception as e:
        logger.error(f"API Error creating contest: {type(e).__name__}: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                            detail=f"Failed to save contest: {e}")


@router.get("", response_model=List[ContestSummary])
async def read_contests(db: Session = Depends(get_db)):
    try:
        return contest_service.get_all_contests(db)
    except Exception as e:
        logger.error(f"API Error listing contests: {type(e).__name__}: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                            detail=f"Failed to list contests: {e}")


@router.get("/{contest_id}", response_model=ContestEnvelope)
async def read_contest(contest_id: str, db: Session = Depends(get_db)):
    try:
        return ContestEnvelope(contest=contest_service.get_public_contest(db, contest_id))
    except HTTPException as e:
        raise e
    except Exception as e:
        logger.error(f"API Error fetching contest {contest_id}: {type(e).__name__}: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                            detail=f"Failed to fetch contest: {e}")
