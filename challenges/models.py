from django.db import models


class Difficulty(models.TextChoices):
    EASY = "EASY"
    MEDIUM = "MEDIUM"
    HARD = "HARD"


class Challenge(models.Model):
    title = models.CharField(max_length=255, unique=True)
    description = models.TextField()
    difficulty = models.CharField(max_length=10, choices=Difficulty.choices)
    starter_code = models.TextField()
    # Appended after the user's code; prints one PASS/FAIL line per check
    hidden_tests = models.TextField()
    sample_tests = models.TextField(null=True, blank=True)
    tags = models.JSONField(default=list, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return f"Challenge(id={self.id}, title={self.title!r}, difficulty={self.difficulty})"
