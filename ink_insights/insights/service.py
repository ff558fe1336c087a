import datetime
import logging
from typing import Dict, List, Optional, Sequence, Tuple

from ink_insights.journals.schemas import JournalEntryBase
from ink_insights.insights.aggregation import (
    dominant_mood,
    mood_distribution,
    mood_percentages,
    mood_trends,
    split_windows,
    writing_habits,
)
from ink_insights.insights.ai_providers.openai import OpenAIInsightClient
from ink_insights.insights.prompt_builder import build_insight_input
from ink_insights.insights.schemas import InsightInput, WeeklyInsightReport, WeeklySnapshot
from ink_insights.insights.themes import THEME_KEYWORDS, extract_themes

logger = logging.getLogger(__name__)


def build_weekly_snapshot(
    entries: Sequence[JournalEntryBase],
    now: datetime.datetime,
    theme_keywords: Dict[str, List[str]] = THEME_KEYWORDS,
) -> Tuple[WeeklySnapshot, List[JournalEntryBase]]:
    """
    Aggregates mood, theme and writing-habit signals for the week ending at ``now``.

    Moods, trends and themes cover the current window only; writing habits
    are computed over every entry passed in.

    Args:
        entries (Sequence[JournalEntryBase]): All entries known for the user.
        now (datetime): End of the current window (exclusive).
        theme_keywords (Dict[str, List[str]]): Theme dictionary for extraction.

    Returns:
        Tuple containing:
            - The WeeklySnapshot.
            - The entries of the current window.
    """
    window = split_windows(entries, now)
    current = mood_distribution(window.entries)
    previous = mood_distribution(window.previous_entries)

    snapshot = WeeklySnapshot(
        window_start=window.start,
        window_end=window.end,
        entry_count=len(window.entries),
        previous_entry_count=len(window.previous_entries),
        mood_distribution=current,
        mood_percentages=mood_percentages(current),
        dominant_mood=dominant_mood(current),
        trends=mood_trends(current, previous),
        themes=extract_themes(window.entries, theme_keywords),
        habits=writing_habits(list(entries)),
    )
    return snapshot, window.entries


def prepare_insight_input(
    entries: Sequence[JournalEntryBase],
    now: datetime.datetime,
) -> Tuple[WeeklySnapshot, InsightInput]:
    snapshot, current_entries = build_weekly_snapshot(entries, now)
    return snapshot, build_insight_input(snapshot, current_entries)


def generate_weekly_insight(
    entries: Sequence[JournalEntryBase],
    client: OpenAIInsightClient,
    api_key: Optional[str],
    now: Optional[datetime.datetime] = None,
) -> WeeklyInsightReport:
    """
    Runs the full weekly pipeline: aggregate, build the prompt, call OpenAI once, parse.

    Failures from the generation step (ConfigError, ParseError,
    RateLimitError, NetworkError or the provider's own errors) propagate
    unchanged.

    Args:
        entries (Sequence[JournalEntryBase]): All entries known for the user.
        client (OpenAIInsightClient): Configured insight client.
        api_key (str): OpenAI credential.
        now (datetime): End of the week; defaults to the current UTC time.

    Returns:
        WeeklyInsightReport: Aggregates, the prompt input and the parsed insight.
    """
    now = now or datetime.datetime.now(datetime.timezone.utc)
    snapshot, insight_input = prepare_insight_input(entries, now)
    logger.info(
        f"Weekly insight window {insight_input.window_start_iso} to {insight_input.window_end_iso}: "
        f"{snapshot.entry_count} entries, limited={bool(insight_input.limited_data_note)}"
    )

    insight = client.generate(insight_input, api_key)
    return WeeklyInsightReport(
        snapshot=snapshot,
        insight_input=insight_input,
        insight=insight,
        model=client.model_tag,
    )
