"""EstimateRequester — one structured Gemini call per cost estimate.

Builds the instruction and response schema from ProductionParams, awaits a
single ``generate_content`` call, and validates the JSON payload into an
EstimationResult.  Every failure collapses into EstimateUnavailableError.
"""
from __future__ import annotations

import logging
from typing import Any, Optional

from google import genai
from google.genai import types as genai_types

from backend.services.estimate.constants import DEFAULT_CURRENCY, DEFAULT_MODEL, ERROR_MESSAGE
from backend.services.estimate.prompt import ESTIMATE_RESPONSE_SCHEMA, build_instruction
from backend.services.estimate.types import EstimationResult, ProductionParams
from backend.services.shared.config import Config

logger = logging.getLogger("visionary.estimate.requester")


class EstimateUnavailableError(Exception):
    """The estimate could not be retrieved; the user should retry later."""

    def __init__(self, message: str = ERROR_MESSAGE):
        super().__init__(message)


class EstimateRequester:
    """Sends production parameters to Gemini and returns the parsed estimate.

    No retry, no backoff and no timeout of its own: one user action, one call.

    Usage::

        requester = EstimateRequester(api_key=os.environ["GEMINI_API_KEY"])
        result = await requester.request_estimate(params)
    """

    def __init__(
        self,
        model: str = DEFAULT_MODEL,
        api_key: Optional[str] = None,
        currency: str = DEFAULT_CURRENCY,
        client: Optional[Any] = None,
    ):
        self.model = model
        self.currency = currency
        self._api_key = api_key
        self._client = client

    @classmethod
    def from_config(cls, config: Config) -> "EstimateRequester":
        """Build a requester from the ``gemini`` and ``estimate`` settings."""
        key_env = config.get("gemini.api_key_env", "GEMINI_API_KEY")
        return cls(
            model=config.get("gemini.model", DEFAULT_MODEL),
            api_key=config.get_env(key_env),
            currency=config.get("estimate.currency", DEFAULT_CURRENCY),
        )

    # ── public ────────────────────────────────────────────────────────────────

    async def request_estimate(self, params: ProductionParams) -> EstimationResult:
        """Fetch a cost estimate for ``params``.

        Raises:
            EstimateUnavailableError: On transport failure, an empty or
                non-JSON payload, or a payload that does not match the schema.
        """
        instruction = build_instruction(params, currency=self.currency)
        try:
            raw = await self._call_model(instruction)
            result = self._parse_response(raw)
        except Exception as exc:
            logger.warning("Estimate request failed (%s): %s", type(exc).__name__, exc)
            raise EstimateUnavailableError() from exc

        logger.info(
            "Estimate received: total=%s %s, %d line items",
            result.total_cost, result.currency, len(result.breakdown),
        )
        return result

    # ── internal: inference call ──────────────────────────────────────────────

    def _get_client(self) -> Any:
        if self._client is None:
            if not self._api_key:
                raise RuntimeError("GEMINI_API_KEY is not set")
            self._client = genai.Client(api_key=self._api_key)
        return self._client

    def build_config(self) -> genai_types.GenerateContentConfig:
        return genai_types.GenerateContentConfig(
            response_mime_type="application/json",
            response_schema=ESTIMATE_RESPONSE_SCHEMA,
        )

    async def _call_model(self, instruction: str) -> str:
        """Call Gemini and return the raw JSON text. Overridable for testing."""
        client = self._get_client()
        response = await client.aio.models.generate_content(
            model=self.model,
            contents=instruction,
            config=self.build_config(),
        )
        text = response.text
        if not text:
            raise ValueError("Gemini returned an empty response")
        return text

    # ── internal: response parsing ────────────────────────────────────────────

    @staticmethod
    def _parse_response(raw: str) -> EstimationResult:
        """Validate the JSON payload against EstimationResult.

        Strict mode: numeric strings and booleans are rejected, not coerced.
        """
        return EstimationResult.model_validate_json(raw, strict=True)
