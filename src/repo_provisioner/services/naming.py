"""Repository naming — unique suffixes for renamed and forked repositories."""

from __future__ import annotations

import time
import uuid

# GitHub caps repository names at 100 characters
MAX_REPO_NAME_LENGTH = 100


def unique_suffix() -> str:
    return uuid.uuid4().hex[:12]


def suffixed_name(name: str, marker: str | None = None) -> str:
    """Append an optional *marker* and a fresh unique suffix to *name*.

    The base is shortened when needed so the result stays a valid length.
    """
    tail = f"-{marker}-{unique_suffix()}" if marker else f"-{unique_suffix()}"
    return f"{name[: MAX_REPO_NAME_LENGTH - len(tail)]}{tail}"


def branch_name(prefix: str = "pr-from-fork") -> str:
    """Time-based branch name, e.g. ``pr-from-fork-1718000000000``."""
    return f"{prefix}-{time.time_ns() // 1_000_000}"
