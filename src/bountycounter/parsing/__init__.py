"""Parsing package.

Public API:
- parse_amount: ISK amount text -> Decimal, resolving `.`/`,` separator roles.
- classify_line: one game log line -> Undock | RewardAmount | None.
"""

from .amount import parse_amount  # re-export
from .lines import LineEvent, RewardAmount, Undock, classify_line  # re-export
