"""
Session resolution for a directory of game logs.

What it does:
- Reads the header of every `*.txt` file until both the `Listener:` and the
  `Session Started:` lines are seen (or the file ends).
- Keeps, per character name, the file whose session started last. Older
  sessions of the same character are ignored regardless of file name order.

Where it is used:
- `bountycounter.tail.engine.TailEngine.rescan` on start and whenever a new
  log file appears in the watched directory.
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, List, Optional

from dateutil import parser as date_parser

from ..parsing.lines import match_listener, match_session_started

log = logging.getLogger("bountycounter.session")

LOG_SUFFIX = ".txt"

# Game client header formats, tried before the lenient parser
SESSION_TIME_FORMATS = (
    "%Y.%m.%d %H:%M:%S",
    "%Y-%m-%d %H:%M:%S",
    "%Y/%m/%d %H:%M:%S",
    "%Y-%m-%dT%H:%M:%S",
)


@dataclass(frozen=True)
class CandidateSession:
    entity_name: str
    file_path: str
    started_at: datetime


def parse_session_time(text: str) -> Optional[datetime]:
    s = (text or "").strip()
    if not s:
        return None
    for fmt in SESSION_TIME_FORMATS:
        try:
            return datetime.strptime(s, fmt)
        except ValueError:
            continue
    try:
        parsed = date_parser.parse(s)
    except (ValueError, OverflowError):
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def read_session_header(path: str, max_lines: Optional[int] = None) -> Optional[CandidateSession]:
    """Return the session described by the header of `path`, or None if incomplete.

    Raises OSError when the file cannot be opened or read.
    """
    listener: Optional[str] = None
    started_at: Optional[datetime] = None
    with open(path, "r", encoding="utf-8-sig", errors="replace") as f:
        for i, line in enumerate(f):
            if max_lines is not None and i >= max_lines:
                break
            name = match_listener(line)
            if name is not None:
                listener = name
            stamp = match_session_started(line)
            if stamp is not None:
                parsed = parse_session_time(stamp)
                if parsed is not None:
                    started_at = parsed
            if listener is not None and started_at is not None:
                break
    if listener is None or started_at is None:
        return None
    return CandidateSession(entity_name=listener, file_path=path, started_at=started_at)


def list_log_files(directory: str) -> List[str]:
    out = []
    with os.scandir(directory) as it:
        for entry in it:
            if entry.name.lower().endswith(LOG_SUFFIX) and entry.is_file():
                out.append(entry.path)
    return sorted(out)


def resolve_sessions(directory: str, max_lines: Optional[int] = None) -> Dict[str, CandidateSession]:
    """Map each character name to the candidate session with the latest start time."""
    latest: Dict[str, CandidateSession] = {}
    for path in list_log_files(directory):
        try:
            cand = read_session_header(path, max_lines=max_lines)
        except OSError as e:
            log.debug("skipping unreadable log %s: %s", path, e)
            continue
        if cand is None:
            continue
        prev = latest.get(cand.entity_name)
        if prev is None or cand.started_at > prev.started_at:
            latest[cand.entity_name] = cand
    return latest
