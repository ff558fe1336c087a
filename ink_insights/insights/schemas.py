# schemas.py
from typing import Any, Dict, List, Literal, Optional
from datetime import datetime
from pydantic import BaseModel, Field

from ink_insights.journals.schemas import JournalEntryBase, Mood


class BaseSchema(BaseModel):
    class Config:
        from_attributes = True
        frozen = True


class MoodTrend(BaseSchema):
    mood: Mood
    direction: Literal["up", "down", "neutral"]
    percent_change: int = Field(ge=0)


class Theme(BaseSchema):
    name: str
    count: int


class WritingHabits(BaseSchema):
    most_common_day: Optional[str] = None
    average_hour: Optional[int] = None
    time_of_day: Optional[str] = None


class WeeklyWindow(BaseSchema):
    start: datetime
    end: datetime
    entries: List[JournalEntryBase]
    previous_entries: List[JournalEntryBase]


class WeeklySnapshot(BaseSchema):
    window_start: datetime
    window_end: datetime
    entry_count: int
    previous_entry_count: int
    mood_distribution: Dict[Mood, int]
    mood_percentages: Dict[Mood, int]
    dominant_mood: Optional[Mood] = None
    trends: List[MoodTrend]
    themes: List[Theme]
    habits: WritingHabits


class InsightInput(BaseSchema):
    window_start_iso: str
    window_end_iso: str
    entry_count: int
    mood_distribution_json: str
    most_written: Optional[str] = None
    recent_entries_bullets: Optional[str] = None
    limited_data_note: Optional[str] = None


class InsightResult(BaseSchema):
    howYouFelt: str = ""
    weeklySummary: str = ""
    moodDrivers: List[str] = []
    patterns: List[str] = []
    suggestions: List[str] = []
    confidence: float = 0.5


class RawInsight(BaseSchema):
    raw_text: str
    parsed: Any = None


class WeeklyInsightReport(BaseSchema):
    snapshot: WeeklySnapshot
    insight_input: InsightInput
    insight: InsightResult
    model: str
