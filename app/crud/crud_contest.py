import json
import logging
from typing import List, Optional

from sqlalchemy import desc
from sqlalchemy.orm import Session

from app.crud.base import CRUDBase
from app.db.models import Contest
from app.schemas.contest import ContestCreate, Question

logger = logging.getLogger(__name__)


class CRUDContest(CRUDBase[Contest, ContestCreate]):
    def create(self, db: Session, *, obj_in: ContestCreate) -> Contest:
        questions = [q.model_dump(by_alias=True) for q in obj_in.questions]
        db_obj = Contest(
            name=obj_in.name,
            time_limit_minutes=obj_in.time_limit_minutes,
            questions_json=json.dumps(questions),
        )
        db.add(db_obj)

        try:
            db.commit()
            db.refresh(db_obj)
            return db_obj
        except Exception:
            logger.error(f"Failed to create contest '{obj_in.name}'", exc_info=True)
            db.rollback()
            raise

    def get_multi_newest_first(self, db: Session, *, skip: int = 0, limit: int = 100) -> List[Contest]:
        return (
            db.query(self.model)
            .order_by(desc(Contest.created_at))
            .offset(skip)
            .limit(limit)
            .all()
        )

    @staticmethod
    def parse_questions(db_obj: Contest) -> List[Question]:
        raw = json.loads(db_obj.questions_json or "[]")
        return [Question.model_validate(item) for item in raw]

    def get(self, db: Session, id_: str) -> Optional[Contest]:
        if not id_:
            return None
        return db.query(self.model).filter(self.model.id == id_).first()


contest = CRUDContest(Contest)
