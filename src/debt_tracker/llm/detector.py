"""Second-opinion AI detection via an OpenAI-compatible chat completions API.

The model is forced to answer through a single function call,
``report_ai_detection``, whose arguments are validated into AIVerdict.
"""

from __future__ import annotations

import json
from typing import Optional

import httpx
from pydantic import ValidationError

from ..config import TrackerConfig
from ..exceptions import (
    ConfigurationError,
    QuotaExhaustedError,
    RateLimitedError,
    UpstreamUnavailableError,
)
from ..logging_config import get_logger
from .models import AIVerdict

logger = get_logger(__name__)

SERVICE = "AI gateway"
TOOL_NAME = "report_ai_detection"

SYSTEM_PROMPT = """\
You are an expert code analyst specializing in detecting AI-generated code.
Analyze the given code and report your assessment through the report_ai_detection function.

Signals to look for:
- Overly uniform code structure / repetitive patterns
- Generic variable names (data, result, temp, item, val)
- Excessive or obvious comments that restate code
- Perfect but soulless formatting
- Boilerplate-heavy with little creativity
- Similar function signatures repeated
- Missing edge case handling despite thorough happy-path coverage
- Over-abstraction or under-abstraction inconsistently
- Suspiciously consistent style across very different logic blocks\
"""

DETECTION_TOOL = {
    "type": "function",
    "function": {
        "name": TOOL_NAME,
        "description": "Report AI code detection results",
        "parameters": {
            "type": "object",
            "properties": {
                "aiProbability": {
                    "type": "number",
                    "description": "0-1 probability the code is AI-generated",
                },
                "confidence": {
                    "type": "number",
                    "description": "0-1 confidence in the assessment",
                },
                "signals": {
                    "type": "array",
                    "items": {"type": "string"},
                    "description": "Specific signals detected",
                },
                "verdict": {
                    "type": "string",
                    "enum": ["ai-generated", "human-written", "mixed"],
                },
                "explanation": {"type": "string", "description": "One sentence summary"},
            },
            "required": ["aiProbability", "confidence", "signals", "verdict", "explanation"],
            "additionalProperties": False,
        },
    },
}


class SecondOpinionClient:
    """Asks a hosted LLM whether a piece of code looks machine-generated."""

    def __init__(
        self,
        config: Optional[TrackerConfig] = None,
        client: Optional[httpx.Client] = None,
    ):
        self.config = config or TrackerConfig()
        self._owns_client = client is None
        self._client = client or httpx.Client(
            timeout=httpx.Timeout(self.config.request_timeout_seconds)
        )

    def build_payload(self, code: str, filename: Optional[str] = None) -> dict:
        snippet = code[: self.config.llm_max_chars]
        return {
            "model": self.config.llm_model,
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {
                    "role": "user",
                    "content": f"Filename: {filename or 'unknown'}\n\nCode:\n```\n{snippet}\n```",
                },
            ],
            "tools": [DETECTION_TOOL],
            "tool_choice": {"type": "function", "function": {"name": TOOL_NAME}},
        }

    def detect(self, code: str, filename: Optional[str] = None) -> AIVerdict:
        """Request a verdict for one file's text.

        Raises:
            ValueError: If code is empty
            ConfigurationError: If no API key is configured
            RateLimitedError: On HTTP 429
            QuotaExhaustedError: On HTTP 402
            UpstreamUnavailableError: On any other failure or malformed reply
        """
        if not code:
            raise ValueError("code is required")
        if not self.config.llm_api_key:
            raise ConfigurationError(
                "LLM API key not configured",
                details={"env": "DEBT_TRACKER_LLM_API_KEY or LLM_API_KEY"},
            )

        url = f"{self.config.llm_base_url.rstrip('/')}/chat/completions"
        try:
            response = self._client.post(
                url,
                json=self.build_payload(code, filename),
                headers={"Authorization": f"Bearer {self.config.llm_api_key}"},
            )
        except httpx.HTTPError as e:
            raise UpstreamUnavailableError(SERVICE, str(e)) from e

        if response.status_code == 429:
            raise RateLimitedError()
        if response.status_code == 402:
            raise QuotaExhaustedError()
        if not response.is_success:
            raise UpstreamUnavailableError(
                SERVICE, f"AI gateway error: {response.status_code}", response.status_code
            )

        return self._parse_verdict(response)

    @staticmethod
    def _parse_verdict(response: httpx.Response) -> AIVerdict:
        try:
            body = response.json()
            tool_call = body["choices"][0]["message"]["tool_calls"][0]
            arguments = tool_call["function"]["arguments"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise UpstreamUnavailableError(SERVICE, "No tool call in response") from e

        try:
            if isinstance(arguments, str):
                arguments = json.loads(arguments)
            verdict = AIVerdict.model_validate(arguments)
        except (ValueError, ValidationError) as e:
            raise UpstreamUnavailableError(SERVICE, f"Malformed verdict: {e}") from e

        logger.debug(f"LLM verdict {verdict.verdict} (p={verdict.ai_probability:.2f})")
        return verdict

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
