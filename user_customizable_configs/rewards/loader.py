from functools import lru_cache

import yaml
from pydantic import BaseModel, Field, NonNegativeInt

from backend_challenges.settings import REWARD_CONFIGS


class RewardConfigLoadError(RuntimeError):
	"""Raised when the reward configuration cannot be loaded or validated."""


class XPTiers(BaseModel):
	"""XP granted on the first accepted submission, per challenge difficulty."""
	easy: NonNegativeInt = Field(default=10)
	medium: NonNegativeInt = Field(default=25)
	hard: NonNegativeInt = Field(default=50)


class RewardConfig(BaseModel):
	xp_tiers: XPTiers = XPTiers()


@lru_cache(maxsize=1)
def load_reward_config() -> RewardConfig:
	"""Load and validate the reward configuration from YAML (cached)."""
	path = REWARD_CONFIGS
	if not path.is_file():
		raise RewardConfigLoadError(f"Reward config file not found: {path}")
	try:
		with path.open("r", encoding="utf-8") as f:
			data = yaml.safe_load(f) or {}
	except Exception as e:
		raise RewardConfigLoadError(f"Failed to read reward config: {e}") from e

	try:
		return RewardConfig(**data)
	except Exception as e:
		raise RewardConfigLoadError(f"Invalid reward config: {e}") from e


def reload_reward_config() -> None:
	load_reward_config.cache_clear()


def get_xp_tiers() -> XPTiers:
	"""Convenience accessor for the XP tier section."""
	return load_reward_config().xp_tiers
