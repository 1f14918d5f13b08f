import logging
import re
import threading
from decimal import Decimal
from typing import Optional

from django.db import transaction

from challenges.utils.db_utils import load_challenge
from rewards.utils.reward_utils import RewardGrantFailure, award_reward, claim_first_acceptance
from submissions.models import Submission, SubmissionStatus
from submissions.utils.db_utils import create_submission, has_accepted_submission
from submissions.utils.execution_client import ExecutionClient, ExecutionTimeout, ExecutionUnavailable
from submissions.utils.output_decoder import decode_result
from submissions.utils.status_classifier import classify_submission
from submissions.utils.test_output_parser import parse_test_output
from user_customizable_configs.execution_engine.loader import (
    HIDDEN_TESTS_PLACEHOLDER,
    USER_CODE_PLACEHOLDER,
)


logger = logging.getLogger(__name__)

_PLACEHOLDERS = re.compile(f"{re.escape(USER_CODE_PLACEHOLDER)}|{re.escape(HIDDEN_TESTS_PLACEHOLDER)}")


def build_executable_code(user_code: str, hidden_tests: str, program_template: str) -> str:
    """
    Fill the program template with the user's code followed by the hidden tests.

    Both placeholders are substituted in one pass, so placeholder text inside
    the user's code is left alone.
    """
    return _PLACEHOLDERS.sub(
        lambda m: user_code if m.group(0) == USER_CODE_PLACEHOLDER else hidden_tests,
        program_template,
    )


def parse_execution_time(time: Optional[str]) -> Optional[int]:
    """Convert the engine's decimal seconds ("1.234") to whole milliseconds (1234)."""
    if time is None or not str(time).strip():
        return None
    try:
        return int(Decimal(str(time).strip()) * 1000)
    except (ArithmeticError, ValueError):
        logger.warning(f"Failed to parse execution time: {time}")
        return None


def _record_failed_submission(user_id: int, challenge_id: int, code: str, error_message: str) -> Submission:
    with transaction.atomic():
        return create_submission(
            user_id=user_id,
            challenge_id=challenge_id,
            code=code,
            status=SubmissionStatus.RUNTIME_ERROR,
            stderr=error_message,
        )


def evaluate_submission(
    user_id: int,
    challenge_id: int,
    code: str,
    client: Optional[ExecutionClient] = None,
    cancel_event: Optional[threading.Event] = None,
) -> Submission:
    """
    Run `code` against the challenge's hidden tests and persist the verdict.

    1. Load the challenge (ChallengeNotFound is the only error raised to the caller).
    2. Append the hidden tests to the user's code and execute it remotely.
       Engine failures are stored as a RUNTIME_ERROR submission, not raised.
    3. Decode, parse the PASS/FAIL lines and classify.
    4. In one transaction: check for an earlier acceptance, insert the
       submission, and claim the first acceptance if this is it.
    5. After commit, award XP for a first acceptance. Reward failures are
       logged and leave the stored submission untouched.
    """
    logger.info(f"Evaluating submission for user {user_id} on challenge {challenge_id}")

    challenge = load_challenge(challenge_id)

    try:
        client = client or ExecutionClient()
        program = build_executable_code(code, challenge.hidden_tests, client.config.program_template)
        result = client.execute(program, "", cancel_event=cancel_event)
    except ExecutionUnavailable as e:
        logger.error(f"Code execution failed for user {user_id} on challenge {challenge_id}: {e}")
        return _record_failed_submission(user_id, challenge_id, code, f"Execution service unavailable: {e}")
    except ExecutionTimeout as e:
        logger.error(f"Code execution timed out for user {user_id} on challenge {challenge_id}: {e}")
        return _record_failed_submission(user_id, challenge_id, code, f"Execution timed out: {e}")
    except Exception as e:
        logger.exception(f"Unexpected execution failure for user {user_id} on challenge {challenge_id}")
        return _record_failed_submission(user_id, challenge_id, code, f"Execution failed: {e}")

    if client.encodes_transport:
        result = decode_result(result)

    outcome = parse_test_output(result.stdout)
    status = classify_submission(result.status, outcome)
    logger.info(
        f"Engine status {result.status.id} ({result.status.description}), "
        f"passed={outcome.passed} failed={outcome.failed} -> {status}"
    )

    stderr = result.stderr
    if status == SubmissionStatus.COMPILATION_ERROR and not stderr:
        stderr = result.compile_output

    with transaction.atomic():
        is_first_acceptance = (
            status == SubmissionStatus.ACCEPTED
            and not has_accepted_submission(user_id, challenge_id)
        )
        submission = create_submission(
            user_id=user_id,
            challenge_id=challenge_id,
            code=code,
            status=status,
            stdout=result.stdout,
            stderr=stderr,
            execution_time_ms=parse_execution_time(result.time),
            memory_kb=result.memory,
        )
        first_acceptance = claim_first_acceptance(submission) if is_first_acceptance else None

    if first_acceptance is not None:
        try:
            award_reward(user_id, challenge, first_acceptance)
        except RewardGrantFailure:
            logger.exception(f"Reward grant failed for submission {submission.pk}")

    return submission
