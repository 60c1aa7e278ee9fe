import logging

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from app.core.logging_config import log_wallet_event
from app.schemas.execute import ExecuteRequest, Verdict
from app.services import contest_service
from app.services.access_service import ensure_can_submit
from app.services.grading_service import CodeRunner, GradingError, ProviderUnavailableError, grade

logger = logging.getLogger(__name__)


async def grade_submission(db: Session, submission: ExecuteRequest, runner: CodeRunner) -> Verdict:
    contest = contest_service.get_contest_by_id(db, submission.contest_id)
    question = contest_service.get_contest_question(contest, submission.problem_index)

    if submission.wallet_address:
        ensure_can_submit(db, contest.id, submission.wallet_address, contest.time_limit_minutes)

    try:
        verdict = await grade(submission.code, question.test_cases, runner)
    except GradingError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except ProviderUnavailableError as e:
        log_wallet_event(submission.wallet_address, contest.id, "grading_provider_unavailable",
                         details={"problem_index": submission.problem_index})
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))

    log_wallet_event(submission.wallet_address, contest.id, "submission_graded",
                     details={"problem_index": submission.problem_index, "passed_count": verdict.passed_count,
                              "total": verdict.total, "all_passed": verdict.all_passed})
    return verdict
