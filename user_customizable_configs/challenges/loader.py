from functools import lru_cache
from pathlib import Path
from typing import Dict, List, Literal

import yaml
from pydantic import BaseModel, Field, field_validator

from backend_challenges.settings import CHALLENGE_CATALOG_CONFIGS


REQUIRED_CHALLENGE_FIELDS = {
    "description",
    "difficulty",
    "starter_code",
    "hidden_tests",
}


class ChallengeSpec(BaseModel):
    title: str = Field(..., description="Unique challenge title (YAML key).")
    description: str
    difficulty: Literal["EASY", "MEDIUM", "HARD"]
    starter_code: str
    hidden_tests: str
    sample_tests: str | None = None
    tags: List[str] = Field(default_factory=list)

    @field_validator("difficulty", mode="before")
    @classmethod
    def upper_difficulty(cls, v):
        return v.upper() if isinstance(v, str) else v

    @field_validator("hidden_tests")
    @classmethod
    def non_empty_hidden_tests(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("hidden_tests must not be empty")
        return v


class ChallengeCatalogLoadError(RuntimeError):
    pass


def _parse_yaml(path: Path) -> Dict[str, ChallengeSpec]:
    with path.open("r", encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}

    if not isinstance(raw, dict):
        raise ChallengeCatalogLoadError("Root YAML must be a mapping.")

    challenges_section = raw.get("challenges")
    if not isinstance(challenges_section, dict):
        raise ChallengeCatalogLoadError("'challenges' key missing or not a mapping.")

    challenges: Dict[str, ChallengeSpec] = {}
    for title, data in challenges_section.items():
        if not isinstance(data, dict):
            raise ChallengeCatalogLoadError(f"Challenge '{title}' must map to a dict.")

        missing = REQUIRED_CHALLENGE_FIELDS - data.keys()
        if missing:
            raise ChallengeCatalogLoadError(
                f"Challenge '{title}' missing required fields: {', '.join(sorted(missing))}"
            )

        try:
            challenges[title] = ChallengeSpec(title=title, **data)
        except Exception as e:
            raise ChallengeCatalogLoadError(f"Challenge '{title}' is invalid: {e}") from e

    return challenges


@lru_cache(maxsize=1)
def load_challenge_catalog() -> List[ChallengeSpec]:
    path = Path(CHALLENGE_CATALOG_CONFIGS).resolve()
    if not path.is_file():
        raise ChallengeCatalogLoadError(f"Challenge catalog file not found: {path}")
    challenges = _parse_yaml(path)
    # Keep YAML order so seeded ids are stable
    return list(challenges.values())


def reload_challenge_catalog() -> None:
    load_challenge_catalog.cache_clear()


def get_challenge_catalog() -> List[ChallengeSpec]:
    return load_challenge_catalog()
