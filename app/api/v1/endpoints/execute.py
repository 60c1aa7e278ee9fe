import logging
from typing import Callable

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.api.deps import get_db, get_runner_factory
from app.runner.jdoodle import ExecutionConfigError, JDoodleRunner
from app.schemas.execute import ExecuteRequest, Verdict
from app.services import execute_service

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("", response_model=Verdict, response_model_exclude_none=True)
async def execute_submission(
        submission: ExecuteRequest,
        db: Session = Depends(get_db),
        runner_factory: Callable[[], JDoodleRunner] = Depends(get_runner_factory)
):
    try:
        runner = runner_factory()
    except ExecutionConfigError as e:
        logger.error(f"API Error grading submission for contest {submission.contest_id}: {e}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))

    try:
        return await execute_service.grade_submission(db, submission, runner)
    except HTTPException as e:
        raise e
    except Exception as e:
        logger.error(f"API Error grading submission for contest {submission.contest_id}: "
                     f"{type(e).__name__}: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                            detail=f"Internal server error: {e}")
    finally:
        await runner.aclose()
