from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional, Union

from openai import OpenAI
from pydantic import BaseModel

import ink_insights.insights.prompts.openai_prompts_templates as prompts
from ink_insights.core.config import InsightConfig
from ink_insights.insights.errors import ConfigError, ParseError, classify_error
from ink_insights.insights.parsing import build_insight_result, extract_json
from ink_insights.insights.prompt_builder import build_messages
from ink_insights.insights.schemas import InsightInput, InsightResult, RawInsight

logger = logging.getLogger(__name__)

INSIGHT_JSON_SCHEMA: dict[str, Any] = {
    "name": "journal_insights",
    "strict": True,
    "schema": {
        "type": "object",
        "properties": {
            "howYouFelt": {"type": "string"},
            "weeklySummary": {"type": "string"},
            "moodDrivers": {"type": "array", "items": {"type": "string"}},
            "patterns": {"type": "array", "items": {"type": "string"}},
            "suggestions": {"type": "array", "items": {"type": "string"}},
            "confidence": {"type": "number", "minimum": 0, "maximum": 1},
        },
        "required": ["howYouFelt", "weeklySummary", "moodDrivers", "patterns", "suggestions", "confidence"],
        "additionalProperties": False,
    },
}


@dataclass(frozen=True)
class StructuredOutput:
    """The SDK already decoded the payload."""

    value: Any
    text: str = ""


@dataclass(frozen=True)
class RawTextOutput:
    text: str


GenerationOutput = Union[StructuredOutput, RawTextOutput]


def read_output(response: Any) -> GenerationOutput:
    """
    Picks the pre-parsed payload when the SDK provides one, else the message text.

    ``chat.completions.create`` messages carry only ``content``; ``parsed`` is
    set on messages returned by the SDK's ``chat.completions.parse`` helper.

    Raises:
        ParseError: The response carries neither.
    """
    choices = getattr(response, "choices", None) or []
    message = choices[0].message if choices else None
    parsed = getattr(message, "parsed", None) if message is not None else None
    text = (getattr(message, "content", None) or "").strip() if message is not None else ""

    if parsed is not None:
        if isinstance(parsed, BaseModel):
            parsed = parsed.model_dump()
        return StructuredOutput(value=parsed, text=text)
    if text:
        return RawTextOutput(text=text)
    raise ParseError("Empty OpenAI response text", "", "empty_output_text")


def _opens_with_disclaimer(text: str) -> bool:
    lead = prompts.SMALL_SAMPLE_DISCLAIMER.rstrip("…").lower()
    return text.lower().startswith(lead)


class OpenAIInsightClient:
    """Issues the weekly insight request against OpenAI and reads the answer back."""

    def __init__(self, config: InsightConfig, client_factory: Callable[..., Any] = OpenAI):
        self.config = config
        self._client_factory = client_factory

    @property
    def model_tag(self) -> str:
        return self.config.model

    def _request(self, insight_input: InsightInput, api_key: str) -> Any:
        # The SDK retries by default; this client makes exactly one attempt.
        with self._client_factory(api_key=api_key, max_retries=0) as client:
            return client.chat.completions.create(
                model=self.config.model,
                messages=build_messages(insight_input, self.config),
                max_tokens=self.config.max_output_tokens,
                temperature=self.config.temperature,
                response_format={"type": "json_schema", "json_schema": INSIGHT_JSON_SCHEMA},
            )

    def generate_raw(self, insight_input: InsightInput, api_key: Optional[str]) -> RawInsight:
        """
        Runs one generation request and returns the unvalidated payload.

        Args:
            insight_input (InsightInput): Aggregated values for the prompt.
            api_key (str): OpenAI credential.

        Returns:
            RawInsight: Raw output text and the decoded JSON value.

        Raises:
            ConfigError: No credential was supplied; nothing is sent.
            ParseError: The output was empty or not JSON.
            RateLimitError: OpenAI answered 429.
            NetworkError: OpenAI could not be reached.
        """
        if not api_key:
            raise ConfigError("OPENAI_API_KEY is required")

        logger.info(
            f"Requesting weekly insights from {self.config.model} for {insight_input.entry_count} entries"
        )
        try:
            response = self._request(insight_input, api_key)
            output = read_output(response)
            if isinstance(output, StructuredOutput):
                return RawInsight(raw_text=output.text or json.dumps(output.value), parsed=output.value)
            return RawInsight(raw_text=output.text, parsed=extract_json(output.text))
        except Exception as e:
            classified = classify_error(e)
            if classified is e:
                raise
            raise classified from e

    def generate(self, insight_input: InsightInput, api_key: Optional[str]) -> InsightResult:
        """
        Runs one generation request and returns the normalized insight.

        When the input carries a limited-data note, ``howYouFelt`` always opens
        with the small-sample disclaimer.
        """
        raw = self.generate_raw(insight_input, api_key)
        result = build_insight_result(raw.parsed)

        if insight_input.limited_data_note and not _opens_with_disclaimer(result.howYouFelt):
            how_you_felt = f"{prompts.SMALL_SAMPLE_DISCLAIMER} {result.howYouFelt}".strip()
            result = result.model_copy(update={"howYouFelt": how_you_felt})
        return result
