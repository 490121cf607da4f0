# pyright: standard
import pytest

from mcmerge.config import PARALLEL_ENV_VAR, default_parallel, parse_worker_count
from mcmerge.exceptions import ConfigurationError


def test_default_parallel_unset_is_sequential(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv(PARALLEL_ENV_VAR, raising=False)

    assert default_parallel() == 0


def test_default_parallel_reads_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv(PARALLEL_ENV_VAR, " 4 ")

    assert default_parallel() == 4


@pytest.mark.parametrize("value", ["-1", "abc", "1.5"])
def test_default_parallel_rejects_invalid_values(monkeypatch: pytest.MonkeyPatch, value: str) -> None:
    # GIVEN an invalid worker count in the environment
    monkeypatch.setenv(PARALLEL_ENV_VAR, value)

    # WHEN it is read
    # THEN a ConfigurationError names the variable
    with pytest.raises(ConfigurationError, match=PARALLEL_ENV_VAR):
        _ = default_parallel()


def test_parse_worker_count_rejects_negative_option() -> None:
    assert parse_worker_count(3) == 3
    with pytest.raises(ConfigurationError, match="--parallel"):
        _ = parse_worker_count(-2)
