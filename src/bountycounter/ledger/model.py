from __future__ import annotations

from dataclasses import dataclass, field, replace
from decimal import Decimal


@dataclass
class TrackedEntity:
    name: str
    source_path: str
    read_offset: int
    lifetime_total: Decimal = field(default_factory=Decimal)
    session_total: Decimal = field(default_factory=Decimal)

    def copy(self) -> "TrackedEntity":
        return replace(self)
