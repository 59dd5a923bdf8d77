"""Content-type vocabulary shared by prompts, generation, saving and jobs."""

from enum import Enum
from typing import Dict, List


class ContentType(str, Enum):
    MULTIPLE_CHOICE = "multiple-choice"
    TRUE_FALSE = "true-false"
    WHO_AM_I = "who-am-i"
    STATS = "stats"
    MOTIVATIONAL = "motivational"
    GREETINGS = "greetings"
    PENALTY_BOX_PHILOSOPHER = "penalty-box-philosopher"
    WISDOM = "wisdom"


TRIVIA_TYPES = (ContentType.MULTIPLE_CHOICE, ContentType.TRUE_FALSE, ContentType.WHO_AM_I)

# Generated in one bulk run per source; wisdom is only produced through the penalty-box philosopher
BULK_GENERATION_TYPES: List[ContentType] = [
    ContentType.MULTIPLE_CHOICE,
    ContentType.TRUE_FALSE,
    ContentType.WHO_AM_I,
    ContentType.STATS,
    ContentType.MOTIVATIONAL,
    ContentType.GREETINGS,
    ContentType.PENALTY_BOX_PHILOSOPHER,
]

# Short keys stored in ingested.used_for and shown as badges in the CMS
BADGE_KEYS: Dict[ContentType, str] = {
    ContentType.MULTIPLE_CHOICE: "mc",
    ContentType.TRUE_FALSE: "tf",
    ContentType.WHO_AM_I: "whoami",
    ContentType.STATS: "stats",
    ContentType.MOTIVATIONAL: "motivational",
    ContentType.GREETINGS: "greetings",
    ContentType.PENALTY_BOX_PHILOSOPHER: "pbp",
    ContentType.WISDOM: "wisdom",
}

_ALIASES = {
    "statistic": ContentType.STATS,
    "statistics": ContentType.STATS,
    "greeting": ContentType.GREETINGS,
    "pbp": ContentType.PENALTY_BOX_PHILOSOPHER,
    "mc": ContentType.MULTIPLE_CHOICE,
    "tf": ContentType.TRUE_FALSE,
    "whoami": ContentType.WHO_AM_I,
}


def normalize_content_type(raw: str) -> ContentType:
    """Accept canonical names and the legacy spellings found in older rows. Raises ValueError."""
    value = (raw or "").strip().lower()
    if value in _ALIASES:
        return _ALIASES[value]
    return ContentType(value)


def spellings(content_type: ContentType) -> List[str]:
    """Canonical value first, then every alias that normalizes to it"""
    return [content_type.value] + [alias for alias, target in _ALIASES.items() if target == content_type]


def is_trivia(content_type: ContentType) -> bool:
    return content_type in TRIVIA_TYPES


def badge_key(content_type: ContentType) -> str:
    return BADGE_KEYS[content_type]
