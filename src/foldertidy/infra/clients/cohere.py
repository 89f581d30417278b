from __future__ import annotations

import asyncio
from collections.abc import Sequence
import http.client
import json
from typing import Any, Literal, Self, cast
import urllib.error
import urllib.request

import loguru
from loguru import logger
from pydantic import BaseModel, ConfigDict, Field

from foldertidy.core.config import MAX_BATCH_SIZE, FolderTidyConfig
from foldertidy.errors import ClassificationError, ConfigError
from foldertidy.seeds.loader import LabeledExample

Truncate = Literal["NONE", "START", "END"]


class CohereBaseModel(BaseModel):
    """Shared base for classify response models with a short parse alias."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    @classmethod
    def parse(cls, data: Any) -> Self:
        return cls.model_validate(data)


class LabelScore(CohereBaseModel):
    confidence: float = Field(..., ge=0.0, le=1.0)


class ClassificationResult(CohereBaseModel):
    """Classifier verdict for one input string."""

    id: str | None = None
    input: str
    prediction: str
    confidence: float = Field(..., ge=0.0, le=1.0)
    labels: dict[str, LabelScore] = Field(default_factory=dict)

    @property
    def label_confidences(self) -> dict[str, float]:
        return {label: score.confidence for label, score in self.labels.items()}


class ClassifyResponse(CohereBaseModel):
    id: str | None = None
    classifications: list[ClassificationResult]


class ClassifyClientLogger:
    """Handles all logging for the classify client."""

    def __init__(self, logger_instance: loguru.Logger = logger) -> None:
        self._logger = logger_instance

    def api_call(self, batch: Sequence[str]) -> None:
        if not batch:
            return
        self._logger.bind(batch_size=len(batch)).debug(
            "Calling classify endpoint for {} inputs ({} .. {})",
            len(batch),
            batch[0],
            batch[-1],
        )

    def api_result(self, response: ClassifyResponse) -> None:
        self._logger.bind(
            response_id=response.id, classified=len(response.classifications)
        ).debug(
            "Classify response {}: {} results",
            response.id,
            len(response.classifications),
        )

    def api_failure(self, batch: Sequence[str], error: BaseException) -> None:
        self._logger.bind(batch_size=len(batch)).error(
            "Classify call failed for {} inputs: {}", len(batch), error
        )


class CohereClassifyClient:
    def __init__(
        self,
        *,
        api_key: str,
        examples: Sequence[LabeledExample],
        url: str,
        model: str | None = None,
        truncate: Truncate = "END",
        timeout: float | None = None,
    ) -> None:
        if not api_key.strip():
            raise ConfigError("COHERE_API_KEY is required to call the classifier")
        self._api_key = api_key
        self._examples = list(examples)
        self._url = url
        self._model = model
        self._truncate = truncate
        self._timeout = timeout
        self._logger = ClassifyClientLogger()

    @classmethod
    def from_config(
        cls, config: FolderTidyConfig, examples: Sequence[LabeledExample]
    ) -> CohereClassifyClient:
        return cls(
            api_key=config.api_key,
            examples=examples,
            url=config.classify_url,
            model=config.model,
            timeout=config.request_timeout,
        )

    def build_payload(self, inputs: Sequence[str]) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "inputs": list(inputs),
            "examples": [example.to_payload() for example in self._examples],
            "truncate": self._truncate,
        }
        if self._model is not None:
            payload["model"] = self._model
        return payload

    def _headers(self) -> dict[str, str]:
        return {
            "accept": "application/json",
            "content-type": "application/json",
            "authorization": f"Bearer {self._api_key}",
        }

    def _parse_json_response(self, body: str) -> dict[str, Any]:
        try:
            return cast(dict[str, Any], json.loads(body))
        except json.JSONDecodeError as e:
            raise ValueError(f"Failed to parse classify response as JSON: {e}") from e

    def _post(self, payload: dict[str, Any]) -> dict[str, Any]:
        """Send one classify request. Blocking; run it off the event loop."""
        data = json.dumps(payload).encode("utf-8")
        req = urllib.request.Request(  # noqa: S310
            self._url,
            data=data,
            headers=self._headers(),
            method="POST",
        )

        try:
            with urllib.request.urlopen(  # noqa: S310 - external HTTPS
                req, timeout=self._timeout
            ) as resp:
                body = resp.read().decode("utf-8")
        except urllib.error.HTTPError as e:
            err_body = e.read().decode("utf-8", "ignore")
            raise ConnectionError(f"Classify API error ({e.code}): {err_body}") from e
        except urllib.error.URLError as e:
            raise ConnectionError(f"Network error calling classify API: {e}") from e
        except http.client.HTTPException as e:
            raise ConnectionError(f"Network error calling classify API: {e!r}") from e

        return self._parse_json_response(body)

    async def classify(self, batch: Sequence[str]) -> list[ClassificationResult]:
        """Classify one batch of filenames.

        Returns one result per input, in input order. Results are matched to
        inputs through the echoed ``input`` field rather than position.

        Raises:
            ClassificationError: On any transport, decoding or matching failure.
        """
        inputs = list(batch)
        if not inputs:
            return []
        if len(inputs) > MAX_BATCH_SIZE:
            raise ClassificationError(
                f"Batch exceeds the {MAX_BATCH_SIZE}-input limit", batch=inputs
            )

        self._logger.api_call(inputs)
        loop = asyncio.get_running_loop()
        try:
            raw = await loop.run_in_executor(
                None, self._post, self.build_payload(inputs)
            )
            response = ClassifyResponse.parse(raw)
        except (OSError, ValueError) as e:
            # pydantic's ValidationError is a ValueError
            self._logger.api_failure(inputs, e)
            raise ClassificationError(
                f"Classification failed: {e}", batch=inputs, cause=e
            ) from e

        self._logger.api_result(response)
        return self._match_to_inputs(inputs, response.classifications)

    def _match_to_inputs(
        self, inputs: list[str], classifications: list[ClassificationResult]
    ) -> list[ClassificationResult]:
        by_input: dict[str, ClassificationResult] = {}
        for result in classifications:
            by_input.setdefault(result.input, result)

        unexpected = sorted(set(by_input) - set(inputs))
        if unexpected:
            raise ClassificationError(
                f"Classify response contains unknown inputs: {', '.join(unexpected)}",
                batch=inputs,
            )

        missing = [name for name in inputs if name not in by_input]
        if missing:
            raise ClassificationError(
                f"Classify response is missing results for: {', '.join(missing)}",
                batch=inputs,
            )

        return [by_input[name] for name in inputs]


__all__ = [
    "ClassificationResult",
    "ClassifyResponse",
    "CohereClassifyClient",
    "LabelScore",
]
