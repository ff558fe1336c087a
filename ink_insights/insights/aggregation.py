import datetime
import math
from collections import Counter
from typing import Dict, Iterable, List, Optional, Sequence

from ink_insights.journals.schemas import JournalEntryBase, Mood
from ink_insights.insights.schemas import MoodTrend, WeeklyWindow, WritingHabits

WINDOW_DAYS = 7
DAY_NAMES = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")


def as_aware(dt: datetime.datetime) -> datetime.datetime:
    if dt.tzinfo is None:
        return dt.replace(tzinfo=datetime.timezone.utc)
    return dt


def round_half_up(value: float) -> int:
    """Rounds .5 away from zero for positive values (``round`` would pick the even neighbour)."""
    return int(math.floor(value + 0.5))


def split_windows(entries: Iterable[JournalEntryBase], now: datetime.datetime) -> WeeklyWindow:
    """
    Splits entries into the current and previous 7-day windows.

    Current is [now - 7d, now) and previous is [now - 14d, now - 7d); entries
    outside both are ignored.

    Args:
        entries (Iterable[JournalEntryBase]): All known entries for the user.
        now (datetime): Reference instant; naive values are read as UTC.

    Returns:
        WeeklyWindow: Window bounds plus the entries falling in each window.
    """
    end = as_aware(now)
    start = end - datetime.timedelta(days=WINDOW_DAYS)
    previous_start = start - datetime.timedelta(days=WINDOW_DAYS)

    current: List[JournalEntryBase] = []
    previous: List[JournalEntryBase] = []
    for entry in entries:
        when = as_aware(entry.date)
        if start <= when < end:
            current.append(entry)
        elif previous_start <= when < start:
            previous.append(entry)

    return WeeklyWindow(start=start, end=end, entries=current, previous_entries=previous)


def mood_distribution(entries: Iterable[JournalEntryBase]) -> Dict[Mood, int]:
    """Counts entries per mood, in first-encountered order. Entries without a mood are skipped."""
    counts: Dict[Mood, int] = {}
    for entry in entries:
        if entry.mood:
            counts[entry.mood] = counts.get(entry.mood, 0) + 1
    return counts


def mood_percentages(distribution: Dict[Mood, int]) -> Dict[Mood, int]:
    total_with_mood = sum(distribution.values())
    if total_with_mood <= 0:
        return {}
    return {mood: round_half_up(count / total_with_mood * 100) for mood, count in distribution.items()}


def dominant_mood(distribution: Dict[Mood, int]) -> Optional[Mood]:
    # most_common keeps first-encountered order among equal counts
    top = Counter(distribution).most_common(1)
    return top[0][0] if top else None


def mood_trend(mood: Mood, current_count: int, previous_count: int) -> MoodTrend:
    """
    Compares one mood's count against the previous window.

    A mood that never appeared last week has no baseline, so it is reported as
    neutral whatever the current count is.

    Args:
        mood (Mood): Mood being compared.
        current_count (int): Occurrences in the current window.
        previous_count (int): Occurrences in the previous window.

    Returns:
        MoodTrend: Direction and absolute percent change.
    """
    if previous_count == 0:
        return MoodTrend(mood=mood, direction="neutral", percent_change=0)

    percent_change = round_half_up(abs(current_count - previous_count) / previous_count * 100)
    if current_count > previous_count:
        direction = "up"
    elif current_count < previous_count:
        direction = "down"
    else:
        direction = "neutral"
    return MoodTrend(mood=mood, direction=direction, percent_change=percent_change)


def mood_trends(current: Dict[Mood, int], previous: Dict[Mood, int]) -> List[MoodTrend]:
    """One trend per mood seen in either window, in Mood declaration order."""
    return [
        mood_trend(mood, current.get(mood, 0), previous.get(mood, 0))
        for mood in Mood
        if mood in current or mood in previous
    ]


def time_of_day(hour: int) -> str:
    if 5 <= hour < 12:
        return "morning"
    if 12 <= hour < 17:
        return "afternoon"
    if 17 <= hour < 22:
        return "evening"
    return "night"


def writing_habits(entries: Sequence[JournalEntryBase]) -> WritingHabits:
    """
    Finds when the user tends to write, over every entry rather than one window.

    Args:
        entries (Sequence[JournalEntryBase]): All known entries.

    Returns:
        WritingHabits: Most frequent weekday (ties by encounter order), mean
        hour of day rounded half-up, and its time-of-day bucket. Empty when
        there are no entries.
    """
    if not entries:
        return WritingHabits()

    day_frequency = Counter(DAY_NAMES[entry.date.weekday()] for entry in entries)
    most_common_day = day_frequency.most_common(1)[0][0]
    average_hour = round_half_up(sum(entry.date.hour for entry in entries) / len(entries))

    return WritingHabits(
        most_common_day=most_common_day,
        average_hour=average_hour,
        time_of_day=time_of_day(average_hour),
    )
