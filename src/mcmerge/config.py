import os
from typing import Annotated

from pydantic import Field, TypeAdapter, ValidationError

from mcmerge.exceptions import ConfigurationError

PARALLEL_ENV_VAR = "MCMERGE_PARALLEL"

WorkerCount = Annotated[int, Field(ge=0)]
WorkerCountAdapter = TypeAdapter(WorkerCount)


def parse_worker_count(value: str | int, source: str = "--parallel") -> int:
    try:
        return WorkerCountAdapter.validate_python(value, strict=False)
    except ValidationError as e:
        raise ConfigurationError(f"{source} must be a non-negative integer, got: {value!r}") from e


def default_parallel() -> int:
    """
    Worker count used when --parallel is not given.

    Read from MCMERGE_PARALLEL; 0 (or unset) merges one pair at a time.
    """
    raw = os.getenv(PARALLEL_ENV_VAR)
    if raw is None or not raw.strip():
        return 0
    return parse_worker_count(raw.strip(), source=PARALLEL_ENV_VAR)
