"""Metadata codec — builds and parses the ``metaData.json`` record."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any

from repo_provisioner.domain.entities import Metadata
from repo_provisioner.domain.exceptions import MissingProjectDataError

DEFAULT_THEME = "default"


def utc_timestamp(now: datetime | None = None) -> str:
    """ISO-8601 UTC with millisecond precision, e.g. ``2024-01-01T00:00:00.000Z``."""
    now = (now or datetime.now(timezone.utc)).astimezone(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def build_metadata(
    hashed_key: str,
    theme: str | None = None,
    *,
    forked_from: str | None = None,
    now: datetime | None = None,
) -> Metadata:
    return Metadata(
        created_at=utc_timestamp(now),
        theme=theme or DEFAULT_THEME,
        hashed_key=hashed_key,
        forked_from=forked_from,
    )


def metadata_to_dict(metadata: Metadata) -> dict[str, Any]:
    record: dict[str, Any] = {
        "createdAt": metadata.created_at,
        "theme": metadata.theme,
        "hashedKey": metadata.hashed_key,
    }
    if metadata.forked_from is not None:
        record["forkedFrom"] = metadata.forked_from
    return record


def encode_metadata(metadata: Metadata, *, indent: int | None = None) -> str:
    """Serialise to JSON; compact unless *indent* is given."""
    record = metadata_to_dict(metadata)
    if indent is None:
        return json.dumps(record, separators=(",", ":"))
    return json.dumps(record, indent=indent)


def decode_metadata(text: str, default_theme: str = DEFAULT_THEME) -> Metadata:
    """Parse ``metaData.json`` content.

    Missing fields are tolerated (older repositories predate some of them);
    only a document that is not a JSON object is rejected.
    """
    record = decode_json(text, "metaData.json")
    if not isinstance(record, dict):
        raise MissingProjectDataError("metaData.json does not hold a JSON object.")
    forked_from = record.get("forkedFrom") or None
    return Metadata(
        created_at=str(record.get("createdAt", "")),
        theme=str(record.get("theme") or default_theme),
        hashed_key=str(record.get("hashedKey", "")),
        forked_from=str(forked_from) if forked_from else None,
    )


def encode_project_data(project_data: Any) -> str:
    return json.dumps(project_data, separators=(",", ":"))


def decode_json(text: str, label: str = "projectData.json") -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise MissingProjectDataError(f"{label} is not valid JSON: {exc}") from exc
