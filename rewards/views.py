import logging

from django.http import JsonResponse, HttpRequest, HttpResponse

from backend_challenges.request_utils import parse_id
from rewards.utils.reward_utils import get_player_xp

logger = logging.getLogger(__name__)


def query_balance(request: HttpRequest) -> HttpResponse:
    """
    GET /rewards/balance/?user_id=<id>

    Returns:
        {
            "user_id": <int>,
            "xp": <int>
        }
    """
    if request.method != "GET":
        return JsonResponse({"error": "Method not allowed"}, status=405)

    try:
        user_id = parse_id(request.GET.get("user_id"), "user_id")
    except ValueError as e:
        logger.warning(str(e))
        return JsonResponse({"error": str(e)}, status=400)

    return JsonResponse({"user_id": user_id, "xp": get_player_xp(user_id)}, status=200)
