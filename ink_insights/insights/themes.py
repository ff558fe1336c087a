from typing import Dict, Iterable, List, Optional

from ink_insights.journals.schemas import JournalEntryBase
from ink_insights.insights.schemas import Theme

MAX_THEMES = 5

# Declaration order breaks ties between equally frequent themes
THEME_KEYWORDS: Dict[str, List[str]] = {
    "Work": ["work", "project", "meeting", "deadline", "presentation", "team", "office", "job"],
    "Family": ["family", "mom", "dad", "parent", "child", "kid", "sibling", "brother", "sister"],
    "Friends": ["friend", "conversation", "hang", "catch up", "connected"],
    "Health": ["health", "exercise", "workout", "run", "walk", "meditation", "yoga"],
    "Mindfulness": ["mindful", "meditation", "grateful", "reflect", "peace", "calm", "present"],
    "Nature": ["park", "sunset", "outdoor", "walk", "nature", "weather", "sky"],
    "Productivity": ["focus", "productive", "prioritize", "organize", "accomplish", "goals"],
    "Growth": ["learn", "growth", "improve", "better", "progress", "develop", "patient"],
    "Stress": ["stress", "overwhelm", "anxious", "worried", "pressure"],
    "Books": ["book", "read", "reading"],
}


def count_theme_hits(
    entries: Iterable[JournalEntryBase],
    theme_keywords: Optional[Dict[str, List[str]]] = None,
) -> Dict[str, int]:
    """
    Counts keyword hits per theme.

    Every matching keyword adds one, so an entry mentioning "meditation" and
    "calm" contributes two to Mindfulness. Matching is a plain substring test
    against the lower-cased content.

    Args:
        entries (Iterable[JournalEntryBase]): Entries to scan.
        theme_keywords (Dict[str, List[str]]): Theme -> keywords, defaults to THEME_KEYWORDS.

    Returns:
        Dict[str, int]: Hit counts for themes with at least one hit, in dictionary order.
    """
    keywords_by_theme = THEME_KEYWORDS if theme_keywords is None else theme_keywords
    hits = {theme: 0 for theme in keywords_by_theme}

    for entry in entries:
        content_lower = (entry.content or "").lower()
        for theme, keywords in keywords_by_theme.items():
            for keyword in keywords:
                if keyword.lower() in content_lower:
                    hits[theme] += 1

    return {theme: count for theme, count in hits.items() if count > 0}


def extract_themes(
    entries: Iterable[JournalEntryBase],
    theme_keywords: Optional[Dict[str, List[str]]] = None,
    limit: int = MAX_THEMES,
) -> List[Theme]:
    """Top themes by hit count, ties kept in dictionary order."""
    hits = count_theme_hits(entries, theme_keywords)
    ranked = sorted(hits.items(), key=lambda item: item[1], reverse=True)
    return [Theme(name=name, count=count) for name, count in ranked[:limit]]
