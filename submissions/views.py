import json
import logging
from typing import Optional

from django.http import JsonResponse, HttpRequest, HttpResponse
from django.views.decorators.csrf import csrf_exempt

from backend_challenges.request_utils import parse_id
from challenges.utils.db_utils import ChallengeNotFound
from submissions.utils.db_utils import list_submissions, serialize_submission, solved_challenge_ids
from submissions.utils.evaluation_utils import evaluate_submission

logger = logging.getLogger(__name__)


@csrf_exempt
def submit_code(request: HttpRequest) -> HttpResponse:
    """
    POST /submissions/submit/
    JSON body:
      {
        "user_id": <int>,
        "challenge_id": <int>,
        "code": "<source>"
      }

    Returns (201):
        {
            "id": <int>,
            "user_id": <int>,
            "challenge_id": <int>,
            "status": "ACCEPTED" | "WRONG_ANSWER" | "RUNTIME_ERROR" | "COMPILATION_ERROR" | "TIME_LIMIT_EXCEEDED",
            "stdout": "<str>",
            "stderr": "<str>",
            "execution_time_ms": <int>,
            "memory_kb": <int>,
            "created_at": "<iso datetime>"
        }
    """
    if request.method != "POST":
        return JsonResponse({"error": "Method not allowed"}, status=405)

    # Parse JSON
    try:
        payload = json.loads(request.body.decode("utf-8") or "{}")
    except (json.JSONDecodeError, UnicodeDecodeError):
        logger.exception("Failed to parse JSON body")
        return JsonResponse({"error": "Invalid JSON body"}, status=400)
    if not isinstance(payload, dict):
        return JsonResponse({"error": "Invalid JSON body"}, status=400)

    try:
        user_id = parse_id(payload.get("user_id"), "user_id")
        challenge_id = parse_id(payload.get("challenge_id"), "challenge_id")
    except ValueError as e:
        logger.warning(str(e))
        return JsonResponse({"error": str(e)}, status=400)

    code = payload.get("code")
    if not isinstance(code, str) or not code.strip():
        logger.warning("Missing field: code")
        return JsonResponse({"error": "Missing field: code"}, status=400)

    try:
        submission = evaluate_submission(user_id=user_id, challenge_id=challenge_id, code=code)
    except ChallengeNotFound as e:
        return JsonResponse(
            {"error": "Challenge not found", "detail": str(e), "challenge_id": challenge_id}, status=404
        )
    except Exception as e:
        logger.exception(f"Failed to evaluate submission for user {user_id} on challenge {challenge_id}")
        return JsonResponse({"error": "Failed to evaluate submission", "detail": str(e)}, status=500)

    logger.info(f"submit_code completed submission={submission.pk} status={submission.status}")
    return JsonResponse(serialize_submission(submission), status=201)


def query_submissions(request: HttpRequest) -> HttpResponse:
    """
    GET /submissions/history/?user_id=<id>[&challenge_id=<id>]

    Returns the user's submissions, newest first.
    """
    if request.method != "GET":
        return JsonResponse({"error": "Method not allowed"}, status=405)

    try:
        user_id = parse_id(request.GET.get("user_id"), "user_id")
        challenge_id: Optional[int] = None
        if request.GET.get("challenge_id"):
            challenge_id = parse_id(request.GET.get("challenge_id"), "challenge_id")
    except ValueError as e:
        logger.warning(str(e))
        return JsonResponse({"error": str(e)}, status=400)

    submissions = [serialize_submission(s) for s in list_submissions(user_id, challenge_id)]
    logger.info(f"Returning {len(submissions)} submissions for user {user_id}")
    return JsonResponse(submissions, safe=False, status=200)


def query_solved_challenges(request: HttpRequest) -> HttpResponse:
    """
    GET /submissions/solved/?user_id=<id>

    Returns:
        {
            "user_id": <int>,
            "challenge_ids": [<int>, ...]
        }
    """
    if request.method != "GET":
        return JsonResponse({"error": "Method not allowed"}, status=405)

    try:
        user_id = parse_id(request.GET.get("user_id"), "user_id")
    except ValueError as e:
        logger.warning(str(e))
        return JsonResponse({"error": str(e)}, status=400)

    return JsonResponse({"user_id": user_id, "challenge_ids": solved_challenge_ids(user_id)}, status=200)
