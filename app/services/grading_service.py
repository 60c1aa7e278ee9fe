import asyncio
import logging
from typing import List, Optional, Protocol, Sequence, Tuple

from app.core.config import settings
from app.runner.jdoodle import ExecutionResult, ExecutionTransportError
from app.schemas.contest import TestCase
from app.schemas.execute import TestResult, Verdict

logger = logging.getLogger(__name__)

RUNTIME_ERROR = "Runtime error"


class CodeRunner(Protocol):
    async def run(self, code: str, stdin: str) -> ExecutionResult:
        ...


class GradingError(ValueError):
    """The submission cannot be graded as given. Not worth retrying."""


class ProviderUnavailableError(Exception):
    """Every test case failed to reach the execution provider."""


def outputs_match(actual: str, expected: str) -> bool:
    return actual.rstrip() == expected.rstrip()


async def _grade_test_case(
        runner: CodeRunner,
        code: str,
        index: int,
        test_case: TestCase,
        semaphore: asyncio.Semaphore
) -> Tuple[TestResult, bool]:
    """Returns the result and whether the provider was unreachable for this case."""
    async with semaphore:
        try:
            run_result = await runner.run(code, test_case.input)
        except ExecutionTransportError as e:
            logger.warning(f"Grading: test case {index} transport failure: {e}")
            return TestResult(index=index, passed=False, error=str(e)), True
        except Exception as e:
            logger.error(f"Grading: test case {index} failed unexpectedly: {type(e).__name__}: {e}", exc_info=True)
            return TestResult(index=index, passed=False, error=str(e) or type(e).__name__), False

    if run_result.status_code != 200:
        logger.info(f"Grading: test case {index} provider status {run_result.status_code}")
        return TestResult(index=index, passed=False, error=RUNTIME_ERROR), False

    return TestResult(index=index, passed=outputs_match(run_result.output, test_case.expected_output)), False


async def grade(
        code: str,
        test_cases: Sequence[TestCase],
        runner: CodeRunner,
        concurrency: Optional[int] = None
) -> Verdict:
    """
    Run `code` once per test case and compare trimmed stdout with the expected output.

    Test cases are independent: a provider failure on one is recorded on that
    result only. Results are ordered by test case index whatever order the
    provider answers in. Raises GradingError for empty code or an empty test set,
    and ProviderUnavailableError if no test case could reach the provider.
    """
    if not isinstance(code, str) or not code:
        raise GradingError("Missing or invalid 'code' field.")
    if not test_cases:
        raise GradingError("No test cases found for this problem.")

    limit = concurrency if concurrency is not None else settings.GRADING_CONCURRENCY
    semaphore = asyncio.Semaphore(max(1, limit))

    outcomes = await asyncio.gather(*(
        _grade_test_case(runner, code, index, test_case, semaphore)
        for index, test_case in enumerate(test_cases)
    ))

    if all(unreachable for _, unreachable in outcomes):
        raise ProviderUnavailableError("Execution provider unavailable.")

    results: List[TestResult] = [result for result, _ in outcomes]
    passed_count = sum(1 for r in results if r.passed)
    return Verdict(
        results=results,
        all_passed=passed_count == len(results),
        passed_count=passed_count,
        total=len(results),
    )
