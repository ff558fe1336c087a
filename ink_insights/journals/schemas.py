from enum import Enum
from typing import Optional
from uuid import UUID
from datetime import datetime
from pydantic import BaseModel


class BaseSchema(BaseModel):
    class Config:
        from_attributes = True


class Mood(str, Enum):
    JOY = "joy"
    CALM = "calm"
    SAD = "sad"
    ANXIOUS = "anxious"
    STRESSED = "stressed"
    MOTIVATED = "motivated"
    GRATEFUL = "grateful"

    @property
    def label(self) -> str:
        return MOOD_LABELS[self]


MOOD_LABELS = {
    Mood.JOY: "Content",
    Mood.CALM: "Calm",
    Mood.SAD: "Sad",
    Mood.ANXIOUS: "Anxious",
    Mood.STRESSED: "Stressed",
    Mood.MOTIVATED: "Motivated",
    Mood.GRATEFUL: "Grateful",
}


class JournalEntryBase(BaseSchema):
    id: UUID
    date: datetime
    mood: Optional[Mood] = None
    content: str = ""
