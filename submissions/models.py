from django.db import models


class SubmissionStatus(models.TextChoices):
    PENDING = "PENDING"
    ACCEPTED = "ACCEPTED"
    WRONG_ANSWER = "WRONG_ANSWER"
    RUNTIME_ERROR = "RUNTIME_ERROR"
    COMPILATION_ERROR = "COMPILATION_ERROR"
    TIME_LIMIT_EXCEEDED = "TIME_LIMIT_EXCEEDED"


class Submission(models.Model):
    """One evaluated attempt. Rows are append-only and never updated."""

    user_id = models.BigIntegerField(db_index=True)
    challenge_id = models.BigIntegerField(db_index=True)
    code = models.TextField()

    status = models.CharField(
        max_length=32,
        choices=SubmissionStatus.choices,
        default=SubmissionStatus.PENDING,
    )
    stdout = models.TextField(null=True, blank=True)
    stderr = models.TextField(null=True, blank=True)
    execution_time_ms = models.IntegerField(null=True, blank=True)
    memory_kb = models.IntegerField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        indexes = [
            models.Index(fields=["user_id", "challenge_id", "status"], name="submissions_user_id_0c5f1e_idx"),
        ]
        ordering = ["-created_at", "-id"]

    def __str__(self) -> str:
        return f"Submission[{self.user_id}:{self.challenge_id}] #{self.pk} {self.status}"
