import logging
from typing import Any, Dict, List

from django.db import transaction

from challenges.models import Challenge
from user_customizable_configs.challenges.loader import ChallengeSpec


logger = logging.getLogger(__name__)


class ChallengeNotFound(LookupError):
    """Raised when a challenge id does not resolve to a stored challenge."""


def load_challenge(challenge_id: int) -> Challenge:
    try:
        return Challenge.objects.get(pk=challenge_id)
    except Challenge.DoesNotExist:
        logger.info(f"Challenge not found: {challenge_id}")
        raise ChallengeNotFound(f"Challenge not found with id: {challenge_id}")


def load_all_challenges() -> List[Challenge]:
    return list(Challenge.objects.all())


def serialize_challenge(challenge: Challenge) -> Dict[str, Any]:
    """Public view of a challenge. Hidden tests are never exposed."""
    return {
        "id": challenge.id,
        "title": challenge.title,
        "description": challenge.description,
        "difficulty": challenge.difficulty,
        "starter_code": challenge.starter_code,
        "sample_tests": challenge.sample_tests,
        "tags": challenge.tags,
        "created_at": challenge.created_at.isoformat() if challenge.created_at else None,
    }


def seed_challenges(specs: List[ChallengeSpec]) -> int:
    """
    Insert the given challenges if the table is empty.

    Returns the number of challenges created (0 when challenges already exist).
    """
    with transaction.atomic():
        if Challenge.objects.exists():
            logger.info("Challenges already exist, skipping initialization")
            return 0
        for spec in specs:
            Challenge.objects.create(
                title=spec.title,
                description=spec.description,
                difficulty=spec.difficulty,
                starter_code=spec.starter_code,
                hidden_tests=spec.hidden_tests,
                sample_tests=spec.sample_tests,
                tags=spec.tags,
            )
    logger.info(f"Seeded {len(specs)} challenges")
    return len(specs)


def delete_challenge(challenge_id: int) -> Challenge:
    """Delete a challenge. Submissions and rewards that reference it are kept."""
    challenge = load_challenge(challenge_id)
    challenge.delete()
    logger.info(f"Deleted challenge ID: {challenge_id} | Title: {challenge.title}")
    return challenge
