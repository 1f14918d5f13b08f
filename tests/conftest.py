import pytest

from user_customizable_configs.challenges.loader import reload_challenge_catalog
from user_customizable_configs.execution_engine.loader import EngineConfig, reload_engine_config
from user_customizable_configs.rewards.loader import reload_reward_config


@pytest.fixture(autouse=True)
def _clear_config_caches():
    yield
    reload_engine_config()
    reload_reward_config()
    reload_challenge_catalog()


@pytest.fixture
def engine_config():
    return EngineConfig(
        base_url="http://judge0.test/",
        language_id=71,
        mode="wait",
        base64_encoded=True,
        timeout_ms=5000,
        poll_interval_ms=1,
        max_poll_attempts=5,
        retry_delay_seconds=0,
    )


@pytest.fixture
def challenge(db):
    from challenges.models import Challenge, Difficulty

    return Challenge.objects.create(
        title="Add Two Numbers",
        description="Return a + b",
        difficulty=Difficulty.EASY,
        starter_code="def add(a, b):\n    pass\n",
        hidden_tests=(
            'print("PASS" if add(1, 2) == 3 else "FAIL")\n'
            'print("PASS" if add(-1, 1) == 0 else "FAIL")\n'
            'print("RESULT:2/2")\n'
        ),
        sample_tests="print(add(1, 2))",
        tags=["math"],
    )


@pytest.fixture
def hard_challenge(db):
    from challenges.models import Challenge, Difficulty

    return Challenge.objects.create(
        title="Longest Increasing Subsequence",
        description="Return the LIS length",
        difficulty=Difficulty.HARD,
        starter_code="def lis_length(nums):\n    pass\n",
        hidden_tests='print("PASS" if lis_length([1, 2]) == 2 else "FAIL")\n',
    )
