"""Topic sanitizer — turns free-text theme labels into valid repository topics.

GitHub topics must be lowercase, at most 50 characters, start with a letter
or digit and contain only letters, digits and hyphens.
"""

from __future__ import annotations

import re
from collections.abc import Iterable

MAX_TOPIC_LENGTH = 50

_INVALID_CHARS_RE = re.compile(r"[^a-z0-9-]")
_VALID_TOPIC_RE = re.compile(r"^[a-z0-9][a-z0-9-]*$")


def sanitize_topic(label: str) -> str:
    """Normalise one label; the result may be empty."""
    topic = _INVALID_CHARS_RE.sub("-", label.lower().strip())
    topic = topic.strip("-")[:MAX_TOPIC_LENGTH]
    # truncation can expose a hyphen at the new end
    return topic.rstrip("-")


def sanitize_topics(labels: Iterable[str] | None) -> list[str]:
    """Normalise *labels*, dropping the ones that end up invalid.

    Surviving labels keep their input order.
    """
    if not labels:
        return []
    topics = (sanitize_topic(label) for label in labels)
    return [topic for topic in topics if _VALID_TOPIC_RE.match(topic)]


def split_topics(text: str | None) -> list[str]:
    """Split a comma-separated theme string and sanitise each part."""
    if not text:
        return []
    return sanitize_topics(text.split(","))
