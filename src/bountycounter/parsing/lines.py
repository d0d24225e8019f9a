from __future__ import annotations

import re
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional, Union

from .amount import parse_amount

UNDOCK_MARKER = "Undocking from"

# <b><color=0xff00aa00>1,500.00 ISK
BOUNTY_RE = re.compile(r"<b><color=0x[0-9a-fA-F]+>\s*([0-9][0-9.,]*)\s*ISK")
LISTENER_RE = re.compile(r"^\s*Listener:\s*(.+)")
SESSION_RE = re.compile(r"^\s*Session Started:\s*(.+)")


@dataclass(frozen=True)
class Undock:
    pass


@dataclass(frozen=True)
class RewardAmount:
    value: Decimal


LineEvent = Union[Undock, RewardAmount]


def classify_line(line: str) -> Optional[LineEvent]:
    """Classify a single log line; most lines (combat, chat) yield None."""
    if UNDOCK_MARKER in line:
        return Undock()
    m = BOUNTY_RE.search(line)
    if not m:
        return None
    value = parse_amount(m.group(1))
    if value > 0:
        return RewardAmount(value)
    return None


def match_listener(line: str) -> Optional[str]:
    m = LISTENER_RE.match(line)
    if not m:
        return None
    name = m.group(1).strip()
    return name or None


def match_session_started(line: str) -> Optional[str]:
    m = SESSION_RE.match(line)
    if not m:
        return None
    return m.group(1).strip()
