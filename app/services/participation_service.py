import logging

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from app.core.logging_config import log_wallet_event, log_audit_event
from app.core.wallet import canonical_wallet
from app.crud import crud_participation
from app.schemas.participation import (
    ParticipationCreate, ParticipationRecorded, ParticipationStatus, RecordOutcome
)
from app.services.access_service import ALREADY_PARTICIPATED

logger = logging.getLogger(__name__)


def check_participation(db: Session, contest_id: str, wallet_address: str) -> ParticipationStatus:
    wallet = canonical_wallet(wallet_address)
    participated = crud_participation.participation.has_participated(
        db, contest_id=contest_id, wallet_address=wallet
    )
    return ParticipationStatus(participated=participated)


def record_participation(db: Session, participation_in: ParticipationCreate) -> ParticipationRecorded:
    outcome = crud_participation.participation.record_participation(
        db, contest_id=participation_in.contest_id, wallet_address=participation_in.wallet_address
    )

    if outcome == RecordOutcome.ALREADY_RECORDED:
        log_wallet_event(participation_in.wallet_address, participation_in.contest_id, "participation_conflict")
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=ALREADY_PARTICIPATED)

    log_wallet_event(participation_in.wallet_address, participation_in.contest_id, "participation_recorded")
    log_audit_event(participation_in.wallet_address, participation_in.contest_id, "participation_recorded")
    return ParticipationRecorded(success=True)
