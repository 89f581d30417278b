from __future__ import annotations

from dataclasses import dataclass, replace
import os
from pathlib import Path
from typing import Any

from foldertidy.errors import ConfigError

DEFAULT_CLASSIFY_URL = "https://api.cohere.ai/v1/classify"
DEFAULT_BATCH_SIZE = 90
# Upper bound on inputs per classify request accepted by the endpoint.
MAX_BATCH_SIZE = 96
DEFAULT_CONFIDENCE_THRESHOLD = 0.5


@dataclass(frozen=True, slots=True)
class FolderTidyConfig:
    """Settings for one organize run, loaded at process startup."""

    api_key: str
    classify_url: str = DEFAULT_CLASSIFY_URL
    model: str | None = None
    batch_size: int = DEFAULT_BATCH_SIZE
    confidence_threshold: float = DEFAULT_CONFIDENCE_THRESHOLD
    examples_path: Path | None = None
    request_timeout: float | None = None

    def __post_init__(self) -> None:
        if not self.api_key.strip():
            raise ConfigError("COHERE_API_KEY is required to call the classifier")
        if not 1 <= self.batch_size <= MAX_BATCH_SIZE:
            raise ConfigError(
                f"batch size must be between 1 and {MAX_BATCH_SIZE}, "
                f"got {self.batch_size}"
            )
        if not 0.0 <= self.confidence_threshold <= 1.0:
            raise ConfigError(
                "confidence threshold must be between 0 and 1, "
                f"got {self.confidence_threshold}"
            )
        if self.request_timeout is not None and self.request_timeout <= 0:
            raise ConfigError(
                f"request timeout must be positive, got {self.request_timeout}"
            )

    def with_overrides(self, **overrides: Any) -> FolderTidyConfig:
        """Return a copy with every non-None override applied."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        if not changes:
            return self
        return replace(self, **changes)


def _require_env(name: str) -> str:
    value = os.environ.get(name, "").strip()
    if not value:
        raise ConfigError(f"Missing required environment variable: {name}")
    return value


def _optional_env(name: str) -> str | None:
    value = os.environ.get(name, "").strip()
    return value or None


def _int_env(name: str, default: int) -> int:
    raw = _optional_env(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from e


def _float_env(name: str) -> float | None:
    raw = _optional_env(name)
    if raw is None:
        return None
    try:
        return float(raw)
    except ValueError as e:
        raise ConfigError(f"{name} must be a number, got {raw!r}") from e


def load_config_from_env() -> FolderTidyConfig:
    """Load run configuration from env and validate startup requirements.

    Required: COHERE_API_KEY.
    Optional: COHERE_CLASSIFY_URL, COHERE_CLASSIFY_MODEL,
    FOLDERTIDY_BATCH_SIZE, FOLDERTIDY_CONFIDENCE_THRESHOLD,
    FOLDERTIDY_EXAMPLES_PATH, FOLDERTIDY_REQUEST_TIMEOUT.

    Raises:
        ConfigError: If the credential is missing or a value is invalid.
    """
    api_key = _require_env("COHERE_API_KEY")
    examples_path = _optional_env("FOLDERTIDY_EXAMPLES_PATH")
    threshold = _float_env("FOLDERTIDY_CONFIDENCE_THRESHOLD")

    return FolderTidyConfig(
        api_key=api_key,
        classify_url=_optional_env("COHERE_CLASSIFY_URL") or DEFAULT_CLASSIFY_URL,
        model=_optional_env("COHERE_CLASSIFY_MODEL"),
        batch_size=_int_env("FOLDERTIDY_BATCH_SIZE", DEFAULT_BATCH_SIZE),
        confidence_threshold=(
            threshold if threshold is not None else DEFAULT_CONFIDENCE_THRESHOLD
        ),
        examples_path=Path(examples_path).expanduser() if examples_path else None,
        request_timeout=_float_env("FOLDERTIDY_REQUEST_TIMEOUT"),
    )
