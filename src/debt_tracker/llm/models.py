"""Structured verdict returned by the LLM second opinion."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

Verdict = Literal["ai-generated", "human-written", "mixed"]


class AIVerdict(BaseModel):
    """Function-call arguments of ``report_ai_detection``.

    Accepts the camelCase field names used on the wire as well as the
    snake_case attribute names.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    ai_probability: float = Field(alias="aiProbability", ge=0.0, le=1.0)
    confidence: float = Field(ge=0.0, le=1.0)
    signals: list[str] = Field(default_factory=list)
    verdict: Verdict
    explanation: str = ""
