import logging
from typing import Optional

from django.db import IntegrityError, transaction
from django.db.models import F

from challenges.models import Challenge, Difficulty
from rewards.models import FirstAcceptance, PlayerBalance
from user_customizable_configs.rewards.loader import get_xp_tiers


logger = logging.getLogger(__name__)


class RewardGrantFailure(RuntimeError):
    """Raised when XP could not be credited to a player."""


def reward_for_difficulty(difficulty: str) -> int:
    tiers = get_xp_tiers()
    xp_by_difficulty = {
        Difficulty.EASY: tiers.easy,
        Difficulty.MEDIUM: tiers.medium,
        Difficulty.HARD: tiers.hard,
    }
    try:
        return xp_by_difficulty[difficulty]
    except KeyError:
        raise ValueError(f"Unknown challenge difficulty: {difficulty}")


def claim_first_acceptance(submission) -> Optional[FirstAcceptance]:
    """
    Record `submission` as the first acceptance of its (user, challenge) pair.

    Must run inside the transaction that inserted the submission. Returns None
    when another submission already holds the claim.
    """
    try:
        with transaction.atomic():
            return FirstAcceptance.objects.create(
                user_id=submission.user_id,
                challenge_id=submission.challenge_id,
                submission=submission,
            )
    except IntegrityError:
        logger.info(
            f"First acceptance for user={submission.user_id} challenge={submission.challenge_id} "
            f"already claimed, submission={submission.pk} gets no reward"
        )
        return None


def award_reward(user_id: int, challenge: Challenge, first_acceptance: Optional[FirstAcceptance] = None) -> int:
    """
    Credit the difficulty's XP to the player and return the amount.

    Idempotency is the caller's responsibility; every call adds XP.
    """
    try:
        xp = reward_for_difficulty(challenge.difficulty)
        with transaction.atomic():
            balance, _ = PlayerBalance.objects.get_or_create(user_id=user_id)
            PlayerBalance.objects.filter(pk=balance.pk).update(xp=F("xp") + xp)
            if first_acceptance is not None:
                FirstAcceptance.objects.filter(pk=first_acceptance.pk).update(xp_awarded=xp)
    except Exception as e:
        raise RewardGrantFailure(
            f"Failed to award XP to user {user_id} for challenge {challenge.id}: {e}"
        ) from e

    logger.info(f"Awarded {xp} XP to user {user_id} for solving challenge {challenge.id}")
    return xp


def get_player_xp(user_id: int) -> int:
    balance = PlayerBalance.objects.filter(user_id=user_id).values_list("xp", flat=True).first()
    return balance or 0
