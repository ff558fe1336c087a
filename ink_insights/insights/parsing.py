import json
import logging
import math
import re
from typing import Any, List

from ink_insights.insights.errors import ParseError
from ink_insights.insights.schemas import InsightResult

logger = logging.getLogger(__name__)

DEFAULT_CONFIDENCE = 0.5

_FENCE_OPEN_RE = re.compile(r"^```(?:json)?\s*\n?")
_FENCE_CLOSE_RE = re.compile(r"\n?```\s*$")
_JSON_OBJECT_RE = re.compile(r"\{[\s\S]*\}")


def strip_code_fence(text: str) -> str:
    clean = text.strip()
    clean = _FENCE_OPEN_RE.sub("", clean)
    clean = _FENCE_CLOSE_RE.sub("", clean)
    return clean.strip()


def extract_json(text: str) -> Any:
    """
    Reads a JSON value out of model output.

    Tries the fence-stripped text first, then the widest ``{...}`` span in it.

    Args:
        text (str): Raw model output.

    Returns:
        Any: The decoded JSON value.

    Raises:
        ParseError: Neither attempt produced JSON. Carries the original text
            and the decoder's message.
    """
    clean = strip_code_fence(text or "")
    try:
        return json.loads(clean)
    except json.JSONDecodeError as direct_err:
        logger.debug(f"Direct JSON parse failed ({direct_err}); searching for an object span")
        match = _JSON_OBJECT_RE.search(clean)
        if not match:
            raise ParseError("No JSON found in response", text, str(direct_err))
        try:
            return json.loads(match.group(0))
        except json.JSONDecodeError as span_err:
            raise ParseError("Failed to parse JSON from response", text, str(span_err))


def _string_list(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    return [x if isinstance(x, str) else str(x) for x in value]


def _confidence(value: Any) -> float:
    # bool is an int subclass but not a usable score
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return DEFAULT_CONFIDENCE
    if not math.isfinite(value):
        return DEFAULT_CONFIDENCE
    return float(value)


def build_insight_result(payload: Any) -> InsightResult:
    """
    Applies defaults to a decoded payload.

    Values are not range-checked: a confidence outside [0, 1] is returned as
    sent.
    """
    data = payload if isinstance(payload, dict) else {}
    weekly_summary = data.get("weeklySummary") or ""

    return InsightResult(
        howYouFelt=str(data.get("howYouFelt") or "").strip(),
        weeklySummary=weekly_summary if isinstance(weekly_summary, str) else str(weekly_summary),
        moodDrivers=_string_list(data.get("moodDrivers")),
        patterns=_string_list(data.get("patterns")),
        suggestions=_string_list(data.get("suggestions")),
        confidence=_confidence(data.get("confidence")),
    )


def parse_insights(text: str) -> InsightResult:
    return build_insight_result(extract_json(text))
