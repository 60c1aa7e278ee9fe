import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.wallet import canonical_wallet
from app.db.models import Participation
from app.schemas.participation import RecordOutcome

logger = logging.getLogger(__name__)


class CRUDParticipation:
    """
    Participation ledger. At most one row per (contest, canonical wallet), enforced
    by the table's unique constraint rather than a read before the insert.
    """

    @staticmethod
    def has_participated(db: Session, *, contest_id: str, wallet_address: str) -> bool:
        wallet = canonical_wallet(wallet_address)
        return (
            db.query(Participation.id)
            .filter(Participation.contest_id == contest_id, Participation.wallet_address == wallet)
            .first()
        ) is not None

    @staticmethod
    def record_participation(db: Session, *, contest_id: str, wallet_address: str) -> RecordOutcome:
        wallet = canonical_wallet(wallet_address)
        db.add(Participation(contest_id=contest_id, wallet_address=wallet))
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            logger.info(f"Ledger: participation for {wallet} in contest {contest_id} already recorded.")
            return RecordOutcome.ALREADY_RECORDED
        except Exception:
            logger.error(f"Ledger: failed to record participation for {wallet} in {contest_id}", exc_info=True)
            db.rollback()
            raise
        return RecordOutcome.RECORDED


participation = CRUDParticipation()
