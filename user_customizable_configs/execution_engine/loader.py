import os
from functools import lru_cache
from typing import Literal, Optional

import yaml
from pydantic import BaseModel, Field, PositiveInt, field_validator

from backend_challenges.settings import EXECUTION_ENGINE_CONFIGS


USER_CODE_PLACEHOLDER = "###{{{ USER_CODE }}}###"
HIDDEN_TESTS_PLACEHOLDER = "###{{{ HIDDEN_TESTS }}}###"

DEFAULT_PROGRAM_TEMPLATE = f"{USER_CODE_PLACEHOLDER}\n\n{HIDDEN_TESTS_PLACEHOLDER}\n"


class EngineConfigLoadError(RuntimeError):
    """Raised when the execution engine configuration cannot be loaded or validated."""


class EngineConfig(BaseModel):
    """Connection and polling settings for the Judge0-compatible engine.

    `timeout_ms` is the hard deadline for one whole execution, retries and
    polling included.
    """
    base_url: str = Field(default="http://localhost:2358")
    auth_token: Optional[str] = Field(default=None, description="Sent as X-Auth-Token when set")
    language_id: PositiveInt = Field(default=71)
    mode: Literal["wait", "poll"] = Field(default="wait")
    base64_encoded: bool = Field(default=True)
    timeout_ms: PositiveInt = Field(default=30000)
    poll_interval_ms: PositiveInt = Field(default=1000)
    max_poll_attempts: PositiveInt = Field(default=30)
    max_attempts: PositiveInt = Field(default=3, description="HTTP attempts on transport errors")
    retry_delay_seconds: float = Field(ge=0.0, default=1.0)
    program_template: str = Field(default=DEFAULT_PROGRAM_TEMPLATE)

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("base_url must not be empty")
        return v.rstrip("/")

    @field_validator("program_template")
    @classmethod
    def check_placeholders(cls, v: str) -> str:
        for placeholder in (USER_CODE_PLACEHOLDER, HIDDEN_TESTS_PLACEHOLDER):
            if placeholder not in v:
                raise ValueError(f"program_template is missing placeholder {placeholder}")
        if v.index(USER_CODE_PLACEHOLDER) > v.index(HIDDEN_TESTS_PLACEHOLDER):
            raise ValueError("Hidden tests must come after the user code in program_template")
        return v


@lru_cache(maxsize=1)
def load_engine_config() -> EngineConfig:
    """Load the engine config from YAML (cached), then apply env overrides."""
    path = EXECUTION_ENGINE_CONFIGS
    if not path.is_file():
        raise EngineConfigLoadError(f"Execution engine config file not found: {path}")
    try:
        with path.open("r", encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}
    except Exception as e:
        raise EngineConfigLoadError(f"Failed to read execution engine config: {e}") from e

    if not isinstance(raw, dict):
        raise EngineConfigLoadError("Root YAML must be a mapping.")

    raw = dict(raw.get("execution_engine") or {})
    if os.getenv("EXECUTION_ENGINE_BASE_URL"):
        raw["base_url"] = os.environ["EXECUTION_ENGINE_BASE_URL"]
    if os.getenv("EXECUTION_ENGINE_AUTH_TOKEN"):
        raw["auth_token"] = os.environ["EXECUTION_ENGINE_AUTH_TOKEN"]

    try:
        return EngineConfig(**raw)
    except Exception as e:
        raise EngineConfigLoadError(f"Invalid execution engine config: {e}") from e


def reload_engine_config() -> None:
    load_engine_config.cache_clear()


def get_engine_config() -> EngineConfig:
    return load_engine_config()
