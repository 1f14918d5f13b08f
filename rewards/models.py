from django.db import models


class PlayerBalance(models.Model):
    user_id = models.BigIntegerField(unique=True)
    xp = models.PositiveIntegerField(default=0)

    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"PlayerBalance(user={self.user_id}, xp={self.xp})"


class FirstAcceptance(models.Model):
    """First ACCEPTED submission of a user on a challenge, one row per pair.

    Claimed in the same transaction that inserts the submission.
    """
    user_id = models.BigIntegerField()
    challenge_id = models.BigIntegerField()
    submission = models.OneToOneField(
        "submissions.Submission",
        related_name="first_acceptance",
        on_delete=models.CASCADE,
    )
    xp_awarded = models.PositiveIntegerField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["user_id", "challenge_id"], name="unique_first_acceptance"),
        ]

    def __str__(self):
        return f"FirstAcceptance(user={self.user_id}, challenge={self.challenge_id}, submission={self.submission_id})"
