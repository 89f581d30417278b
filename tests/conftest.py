"""Shared test fixtures."""

from __future__ import annotations

from collections.abc import Iterator
import sys

from loguru import logger
import pytest

from foldertidy.infra.clients.cohere import ClassificationResult


@pytest.fixture(autouse=True)
def _reset_loguru() -> Iterator[None]:
    """Restore a plain stderr sink after each test.

    The CLI swaps loguru's sinks for one bound to the runner's stderr, which
    is closed once the invocation ends.
    """
    yield
    logger.remove()
    logger.add(sys.stderr, level="WARNING")


@pytest.fixture
def api_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for var in (
        "COHERE_CLASSIFY_URL",
        "COHERE_CLASSIFY_MODEL",
        "FOLDERTIDY_BATCH_SIZE",
        "FOLDERTIDY_CONFIDENCE_THRESHOLD",
        "FOLDERTIDY_EXAMPLES_PATH",
        "FOLDERTIDY_REQUEST_TIMEOUT",
    ):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("COHERE_API_KEY", "test-key")


def _make_result(
    name: str,
    prediction: str,
    confidence: float,
    labels: tuple[str, ...] = ("Finance", "Personal", "Code Projects"),
) -> ClassificationResult:
    return ClassificationResult.model_validate(
        {
            "id": f"id-{name}",
            "input": name,
            "prediction": prediction,
            "confidence": confidence,
            "labels": {
                label: {"confidence": confidence if label == prediction else 0.05}
                for label in labels
            },
        }
    )


@pytest.fixture
def make_result():
    """Factory for ClassificationResult values shaped like classify output."""
    return _make_result

