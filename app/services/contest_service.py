import logging
from typing import List

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from app.crud import crud_contest
from app.db import models as db_models
from app.schemas.contest import (
    Contest, ContestCreate, ContestCreated, ContestPublic, ContestSummary, Question, QuestionPublic
)

logger = logging.getLogger(__name__)


def _to_schema(db_contest: db_models.Contest) -> Contest:
    return Contest(
        id=db_contest.id,
        name=db_contest.name,
        time_limit_minutes=db_contest.time_limit_minutes,
        questions=crud_contest.contest.parse_questions(db_contest),
        created_at=db_contest.created_at,
    )


def create_contest(db: Session, contest_in: ContestCreate) -> ContestCreated:
    db_contest = crud_contest.contest.create(db, obj_in=contest_in)
    logger.info(f"Service: created contest {db_contest.id} '{db_contest.name}' "
                f"with {len(contest_in.questions)} question(s).")
    return ContestCreated(id=db_contest.id)


def get_contest_by_id(db: Session, contest_id: str) -> Contest:
    db_contest = crud_contest.contest.get(db, contest_id)
    if not db_contest:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Contest not found.")
    return _to_schema(db_contest)


def get_public_contest(db: Session, contest_id: str) -> ContestPublic:
    contest = get_contest_by_id(db, contest_id)
    return ContestPublic(
        id=contest.id,
        name=contest.name,
        time_limit_minutes=contest.time_limit_minutes,
        questions=[QuestionPublic(title=q.title, description=q.description) for q in contest.questions],
        created_at=contest.created_at,
    )


def get_all_contests(db: Session) -> List[ContestSummary]:
    summaries = []
    for db_contest in crud_contest.contest.get_multi_newest_first(db):
        summaries.append(ContestSummary(
            id=db_contest.id,
            name=db_contest.name,
            time_limit_minutes=db_contest.time_limit_minutes,
            question_count=len(crud_contest.contest.parse_questions(db_contest)),
            created_at=db_contest.created_at,
        ))
    return summaries


def get_contest_question(contest: Contest, problem_index: int) -> Question:
    if problem_index < 0 or problem_index >= len(contest.questions):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Problem not found.")
    return contest.questions[problem_index]
