"""
Pytest configuration and shared fixtures for the weekly insight tests.
"""

import datetime
import json
from pathlib import Path
import sys
from types import SimpleNamespace
from unittest.mock import MagicMock
from uuid import uuid4

import pytest


# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from ink_insights.core.config import InsightConfig  # noqa: E402
from ink_insights.journals.schemas import JournalEntryBase  # noqa: E402


NOW = datetime.datetime(2026, 10, 19, 12, 0, tzinfo=datetime.timezone.utc)


@pytest.fixture
def now():
    """Reference instant used as the end of the current window (a Monday)."""
    return NOW


@pytest.fixture
def make_entry():
    """Build a JournalEntryBase a given number of days before NOW."""

    def _make(days_ago=1.0, mood=None, content="", hour=None, when=None):
        date = when or NOW - datetime.timedelta(days=days_ago)
        if hour is not None:
            date = date.replace(hour=hour)
        return JournalEntryBase(id=uuid4(), date=date, mood=mood, content=content)

    return _make


@pytest.fixture
def insight_config():
    return InsightConfig(api_key="sk-test", model="gpt-4o-mini", temperature=0.6, max_output_tokens=350)


@pytest.fixture
def valid_payload():
    """A complete, schema-valid insight payload."""
    return {
        "howYouFelt": "You moved between calm and stressed days, and you kept showing up to write.",
        "weeklySummary": "A busy week at work balanced by quiet evenings.",
        "moodDrivers": ["Deadlines at work", "Evening walks"],
        "patterns": ["You write most on Sunday evenings"],
        "suggestions": ["Try a short walk before big meetings", "Note one win each day"],
        "confidence": 0.72,
    }


def chat_response(content=None, parsed=None, choices=True):
    """Mimic the shape of an OpenAI chat completion."""
    if not choices:
        return SimpleNamespace(choices=[])
    message = SimpleNamespace(content=content, parsed=parsed)
    return SimpleNamespace(choices=[SimpleNamespace(message=message)])


@pytest.fixture
def openai_factory():
    """Return a factory whose client answers with the given response or raises the given error."""

    def _factory(response=None, error=None):
        factory = MagicMock()
        factory.return_value.__enter__.return_value = factory.return_value
        factory.return_value.__exit__.return_value = False
        create = factory.return_value.chat.completions.create
        if error is not None:
            create.side_effect = error
        else:
            create.return_value = response
        return factory

    return _factory


@pytest.fixture
def json_response(valid_payload):
    return chat_response(content=json.dumps(valid_payload))
