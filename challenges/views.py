import logging
from typing import Any, Dict, List

from django.http import JsonResponse, HttpRequest, HttpResponse

from backend_challenges.request_utils import parse_id
from challenges.utils.db_utils import (
    ChallengeNotFound,
    load_all_challenges,
    load_challenge,
    serialize_challenge,
)

logger = logging.getLogger(__name__)


def query_challenges(request: HttpRequest) -> HttpResponse:
    """
    GET /challenges/
      Optional query params:
        challenge_id=<id>          Return a single challenge.
    """
    if request.method != "GET":
        return JsonResponse({"error": "Method not allowed"}, status=405)

    challenge_id = request.GET.get("challenge_id")

    # Single challenge path
    if challenge_id:
        try:
            challenge_id = parse_id(challenge_id, "challenge_id")
        except ValueError as e:
            logger.warning(str(e))
            return JsonResponse({"error": str(e)}, status=400)
        try:
            challenge = load_challenge(challenge_id)
        except ChallengeNotFound as e:
            return JsonResponse(
                {"error": "Challenge not found", "detail": str(e), "challenge_id": challenge_id}, status=404
            )
        logger.info(f"Returning single challenge: {challenge_id}")
        return JsonResponse(serialize_challenge(challenge), status=200)

    # Listing path
    listing: List[Dict[str, Any]] = [serialize_challenge(c) for c in load_all_challenges()]
    logger.info(f"Returning {len(listing)} challenges")
    return JsonResponse(listing, safe=False, status=200)
