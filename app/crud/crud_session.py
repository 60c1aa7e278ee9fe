import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.wallet import canonical_wallet
from app.db.models import ContestSession

logger = logging.getLogger(__name__)


class CRUDContestSession:
    @staticmethod
    def get(db: Session, *, contest_id: str, wallet_address: str) -> Optional[ContestSession]:
        wallet = canonical_wallet(wallet_address)
        return (
            db.query(ContestSession)
            .filter(ContestSession.contest_id == contest_id, ContestSession.wallet_address == wallet)
            .first()
        )

    def get_or_start(self, db: Session, *, contest_id: str, wallet_address: str) -> ContestSession:
        existing = self.get(db, contest_id=contest_id, wallet_address=wallet_address)
        if existing:
            return existing

        db_obj = ContestSession(contest_id=contest_id, wallet_address=canonical_wallet(wallet_address))
        db.add(db_obj)
        try:
            db.commit()
            db.refresh(db_obj)
            return db_obj
        except IntegrityError:
            # Lost the insert race; the winner's start instant is authoritative.
            db.rollback()
            winner = self.get(db, contest_id=contest_id, wallet_address=wallet_address)
            if winner is None:
                raise
            return winner


contest_session = CRUDContestSession()
