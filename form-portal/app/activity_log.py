"""Append-only JSONL activity trail for the Form Portal.

One JSON object per line, partitioned by UTC day into YYYY-MM-DD.jsonl
files under the configured activity directory. The remote client records
every call to the form service; the form flow records sign-in, form load,
submission and hard logout.
"""

from __future__ import annotations

import json
from collections.abc import Iterator
from datetime import datetime, timezone
from itertools import islice
from pathlib import Path

from app.config import get_settings
from app.schema import ActivityEntry

DATA_DIR: Path = get_settings().activity_dir


def _day_file(now: datetime) -> Path:
    return DATA_DIR / f"{now:%Y-%m-%d}.jsonl"


def log_event(
    action: str,
    roll_number: str = "",
    details: dict | None = None,
) -> ActivityEntry:
    """Record one event and return it.

    The entry is returned even when the write fails, so callers never
    depend on the trail being writable.
    """
    now = datetime.now(timezone.utc)
    entry = ActivityEntry(
        timestamp=now.isoformat(),
        action=action,
        roll_number=roll_number,
        details=details or {},
    )
    line = json.dumps(entry.to_dict(), ensure_ascii=False)

    try:
        DATA_DIR.mkdir(parents=True, exist_ok=True)
        with _day_file(now).open("a", encoding="utf-8") as fh:
            fh.write(line + "\n")
    except OSError:
        pass  # never let the activity trail break the form flow

    return entry


# ── Reading ──────────────────────────────────────────────────────────────────


def _parse_lines(path: Path) -> list[ActivityEntry]:
    parsed: list[ActivityEntry] = []
    for raw in path.read_text(encoding="utf-8").splitlines():
        if not raw.strip():
            continue
        try:
            parsed.append(ActivityEntry.from_dict(json.loads(raw)))
        except (json.JSONDecodeError, TypeError, AttributeError):
            continue  # skip partial or foreign lines
    return parsed


def _newest_first() -> Iterator[ActivityEntry]:
    """Yield entries across all day files, most recent first."""
    if not DATA_DIR.is_dir():
        return
    for path in sorted(DATA_DIR.glob("*.jsonl"), key=lambda p: p.stem, reverse=True):
        yield from reversed(_parse_lines(path))


def get_entries_for_roll_number(
    roll_number: str,
    limit: int = 100,
    action: str | None = None,
) -> list[ActivityEntry]:
    """Entries recorded for one identity, newest first, optionally of one action."""
    matching = (
        e for e in _newest_first()
        if e.roll_number == roll_number and (action is None or e.action == action)
    )
    return list(islice(matching, limit))
