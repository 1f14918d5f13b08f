import logging
from typing import Any, Dict, List, Optional

from submissions.models import Submission, SubmissionStatus


logger = logging.getLogger(__name__)


def _preview(val: Any, limit: int = 30) -> str:
    if val is None:
        return "None"
    s = val if isinstance(val, str) else repr(val)
    return (s[:limit] + f"...(len={len(s)})") if len(s) > limit else s


def create_submission(
    user_id: int,
    challenge_id: int,
    code: str,
    status: SubmissionStatus,
    stdout: Optional[str] = None,
    stderr: Optional[str] = None,
    execution_time_ms: Optional[int] = None,
    memory_kb: Optional[int] = None,
) -> Submission:
    obj = Submission.objects.create(
        user_id=user_id,
        challenge_id=challenge_id,
        code=code,
        status=status,
        stdout=stdout,
        stderr=stderr,
        execution_time_ms=execution_time_ms,
        memory_kb=memory_kb,
    )
    logger.info(
        f"ID: {obj.id} | User ID: {obj.user_id} | Challenge ID: {obj.challenge_id} | "
        f"Status: {obj.status} | Time: {obj.execution_time_ms}ms | Memory: {obj.memory_kb}KB | "
        f"Code: {_preview(obj.code)} | Stderr: {_preview(obj.stderr)}"
    )
    return obj


def has_accepted_submission(user_id: int, challenge_id: int) -> bool:
    return Submission.objects.filter(
        user_id=user_id,
        challenge_id=challenge_id,
        status=SubmissionStatus.ACCEPTED,
    ).exists()


def solved_challenge_ids(user_id: int) -> List[int]:
    return list(
        Submission.objects
        .filter(user_id=user_id, status=SubmissionStatus.ACCEPTED)
        .order_by("challenge_id")
        .values_list("challenge_id", flat=True)
        .distinct()
    )


def list_submissions(user_id: int, challenge_id: Optional[int] = None) -> List[Submission]:
    qs = Submission.objects.filter(user_id=user_id)
    if challenge_id is not None:
        qs = qs.filter(challenge_id=challenge_id)
    return list(qs.order_by("-created_at", "-id"))


def serialize_submission(submission: Submission) -> Dict[str, Any]:
    return {
        "id": submission.id,
        "user_id": submission.user_id,
        "challenge_id": submission.challenge_id,
        "status": submission.status,
        "stdout": submission.stdout,
        "stderr": submission.stderr,
        "execution_time_ms": submission.execution_time_ms,
        "memory_kb": submission.memory_kb,
        "created_at": submission.created_at.isoformat() if submission.created_at else None,
    }
