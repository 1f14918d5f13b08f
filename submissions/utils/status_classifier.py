from submissions.models import SubmissionStatus
from submissions.utils.engine_schemas import (
    STATUS_ACCEPTED,
    STATUS_COMPILATION_ERROR,
    STATUS_TIME_LIMIT_EXCEEDED,
    EngineStatus,
)
from submissions.utils.test_output_parser import TestOutcome


def classify_submission(engine_status: EngineStatus, outcome: TestOutcome) -> SubmissionStatus:
    """
    Map the engine's terminal status and the parsed test counts to a SubmissionStatus.

    The engine status filters hard failures first. Only for a run that went to
    completion do the PASS/FAIL counts decide: any failure is a wrong answer,
    otherwise at least one pass is needed for ACCEPTED. A completed run that
    printed no markers at all is treated as a runtime error.
    """
    if engine_status.id == STATUS_COMPILATION_ERROR:
        return SubmissionStatus.COMPILATION_ERROR
    if engine_status.id == STATUS_TIME_LIMIT_EXCEEDED:
        return SubmissionStatus.TIME_LIMIT_EXCEEDED
    if engine_status.id != STATUS_ACCEPTED:
        return SubmissionStatus.RUNTIME_ERROR

    if outcome.failed > 0:
        return SubmissionStatus.WRONG_ANSWER
    if outcome.passed > 0:
        return SubmissionStatus.ACCEPTED
    return SubmissionStatus.RUNTIME_ERROR
