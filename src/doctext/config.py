from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
import os
import tomllib

DEFAULT_FALLBACK_MAX_BYTES = 1024 * 1024  # 1 MiB

# Environment variable takes precedence over the config file when set.
MAX_PARALLELISM_ENV = "DOCTEXT_MAX_PARALLELISM"


class ErrorPolicy(Enum):
    """What the pipeline does when a file fails."""

    FAIL_FAST = "fail_fast"  # Abort the whole batch on the first failure
    CONTINUE_ON_ERROR = "continue_on_error"  # Emit a failed result and keep going


def _default_parallelism() -> int:
    return os.cpu_count() or 1


def _expand(p: str) -> str:
    return os.path.expandvars(os.path.expanduser(p))


def _check_positive_int(name: str, value: object) -> None:
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ValueError(f"Invalid {name}: {value!r}. Must be an integer of at least 1.")


@dataclass(frozen=True)
class ExtractionOptions:
    """Settings for one pipeline instance. Read-only once constructed."""

    max_parallelism: int = field(default_factory=_default_parallelism)
    error_policy: ErrorPolicy = ErrorPolicy.CONTINUE_ON_ERROR
    fallback_max_bytes: int = DEFAULT_FALLBACK_MAX_BYTES

    def __post_init__(self):
        """Coerce string policies and validate numeric bounds."""
        if isinstance(self.error_policy, str):
            try:
                policy = ErrorPolicy(self.error_policy.lower())
            except ValueError:
                valid = tuple(p.value for p in ErrorPolicy)
                raise ValueError(f"Invalid error_policy: {self.error_policy}. Must be one of {valid}.") from None
            object.__setattr__(self, "error_policy", policy)
        elif not isinstance(self.error_policy, ErrorPolicy):
            raise ValueError(f"Invalid error_policy: {self.error_policy!r}.")

        _check_positive_int("max_parallelism", self.max_parallelism)
        _check_positive_int("fallback_max_bytes", self.fallback_max_bytes)

    @property
    def fail_fast(self) -> bool:
        return self.error_policy is ErrorPolicy.FAIL_FAST

    @staticmethod
    def from_toml(path: str | Path) -> "ExtractionOptions":
        data = tomllib.loads(Path(_expand(str(path))).read_text(encoding="utf-8"))
        ext = data.get("extraction", {})

        max_parallelism = ext.get("max_parallelism", _default_parallelism())
        env_value = os.environ.get(MAX_PARALLELISM_ENV)
        if env_value is not None:
            try:
                max_parallelism = int(env_value)
            except ValueError:
                raise ValueError(f"Invalid {MAX_PARALLELISM_ENV}: {env_value!r}. Must be an integer.") from None

        return ExtractionOptions(
            max_parallelism=max_parallelism,
            error_policy=ext.get("error_policy", ErrorPolicy.CONTINUE_ON_ERROR.value),
            fallback_max_bytes=ext.get("fallback_max_bytes", DEFAULT_FALLBACK_MAX_BYTES),
        )


def load_options(path: str | Path | None = None) -> ExtractionOptions:
    """Load options from a TOML file, or defaults when no path is given.

    The DOCTEXT_MAX_PARALLELISM environment variable applies in both cases.
    """
    if path is not None:
        return ExtractionOptions.from_toml(path)

    env_value = os.environ.get(MAX_PARALLELISM_ENV)
    if env_value is None:
        return ExtractionOptions()
    try:
        return ExtractionOptions(max_parallelism=int(env_value))
    except ValueError as e:
        raise ValueError(f"Invalid {MAX_PARALLELISM_ENV}: {env_value!r}. {e}") from None
