import json
import re
from typing import Any, Dict, List, Optional, Sequence

import textstat

import ink_insights.insights.prompts.openai_prompts_templates as prompts
from ink_insights.core.config import InsightConfig
from ink_insights.insights.aggregation import DAY_NAMES, as_aware
from ink_insights.journals.schemas import JournalEntryBase
from ink_insights.insights.schemas import InsightInput, WeeklySnapshot

_WHITESPACE_RE = re.compile(r"\s+")


def build_user_message(insight_input: InsightInput, template: str = prompts.USER_MESSAGE_TEMPLATE) -> str:
    """
    Fills the user template with aggregated week data.

    Missing values render as fixed placeholders; the limited-data note, when
    present, is appended right after the entry bullets.
    """
    limited_note = (
        prompts.LIMITED_DATA_NOTE_LINE.format(note=insight_input.limited_data_note) if insight_input.limited_data_note else ""
    )
    return template.format(
        window_start_iso=insight_input.window_start_iso,
        window_end_iso=insight_input.window_end_iso,
        entry_count=insight_input.entry_count,
        mood_distribution_json=insight_input.mood_distribution_json,
        most_written=insight_input.most_written or prompts.UNKNOWN_MOST_WRITTEN,
        recent_entries_bullets=(insight_input.recent_entries_bullets or prompts.NO_RECENT_ENTRIES) + limited_note,
    )


def build_messages(insight_input: InsightInput, config: InsightConfig) -> List[Dict[str, Any]]:
    return [
        {"role": "system", "content": config.system_message},
        {"role": "user", "content": build_user_message(insight_input, config.user_message_template)},
    ]


def serialize_mood_distribution(snapshot: WeeklySnapshot) -> str:
    payload = {
        mood.value: {
            "label": mood.label,
            "count": count,
            "percent": snapshot.mood_percentages.get(mood, 0),
        }
        for mood, count in snapshot.mood_distribution.items()
    }
    return json.dumps(payload, ensure_ascii=False)


def most_written_label(snapshot: WeeklySnapshot) -> Optional[str]:
    """Top theme names, with the usual writing day/time when known."""
    habits = snapshot.habits
    when = f"{habits.most_common_day} {habits.time_of_day}s" if habits.most_common_day else None
    theme_names = ", ".join(theme.name for theme in snapshot.themes[:3])

    if theme_names and when:
        return f"{theme_names} (mostly {when})"
    return theme_names or when


def _trim(text: str, limit: int = prompts.MAX_ENTRY_CHARS) -> str:
    collapsed = _WHITESPACE_RE.sub(" ", text).strip()
    if len(collapsed) <= limit:
        return collapsed
    return collapsed[: limit - 1].rstrip() + "…"


def recent_entries_bullets(
    entries: Sequence[JournalEntryBase], limit: int = prompts.MAX_RECENT_ENTRIES
) -> Optional[str]:
    """
    Renders the newest entries with text as a bullet list.

    Args:
        entries (Sequence[JournalEntryBase]): Entries of the current window.
        limit (int): Maximum number of bullets.

    Returns:
        Optional[str]: Newline-separated bullets, or None if no entry has text.
    """
    written = [e for e in entries if (e.content or "").strip()]
    newest_first = sorted(written, key=lambda e: as_aware(e.date), reverse=True)[:limit]
    if not newest_first:
        return None

    lines = []
    for entry in newest_first:
        day = f"{DAY_NAMES[entry.date.weekday()][:3]} {entry.date.date().isoformat()}"
        mood = entry.mood.label if entry.mood else "no mood"
        lines.append(f"- {day} ({mood}): {_trim(entry.content)}")
    return "\n" + "\n".join(lines)


def word_count(entries: Sequence[JournalEntryBase]) -> int:
    return sum(textstat.lexicon_count(e.content or "") for e in entries if (e.content or "").strip())


def limited_data_note(entries: Sequence[JournalEntryBase]) -> Optional[str]:
    """Explains a sparse week to the model, or None when there is enough to go on."""
    words = word_count(entries)
    count = len(entries)
    if count >= prompts.MIN_ENTRIES_FOR_FULL_INSIGHT and words >= prompts.MIN_WORDS_FOR_FULL_INSIGHT:
        return None

    noun = "entry" if count == 1 else "entries"
    return (
        f"Only {count} {noun} with about {words} words of written text this week. "
        "Base insights mostly on mood tags and patterns."
    )


def build_insight_input(snapshot: WeeklySnapshot, entries: Sequence[JournalEntryBase]) -> InsightInput:
    """
    Turns a weekly snapshot into the values substituted into the prompt.

    Args:
        snapshot (WeeklySnapshot): Aggregated signals for the week.
        entries (Sequence[JournalEntryBase]): Entries of the current window.

    Returns:
        InsightInput: Prompt-ready values.
    """
    return InsightInput(
        window_start_iso=snapshot.window_start.isoformat(),
        window_end_iso=snapshot.window_end.isoformat(),
        entry_count=snapshot.entry_count,
        mood_distribution_json=serialize_mood_distribution(snapshot),
        most_written=most_written_label(snapshot),
        recent_entries_bullets=recent_entries_bullets(entries),
        limited_data_note=limited_data_note(entries),
    )
