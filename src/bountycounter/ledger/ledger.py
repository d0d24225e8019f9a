from __future__ import annotations

import threading
from decimal import Decimal
from typing import Dict, List, Optional

from .model import TrackedEntity
from ..events.metrics import get_bounty_isk_total


class Ledger:
    """Owns the tracked characters. Every read returns a copy; every write holds the lock.

    The lock is held only for the dictionary lookup/update, never across file I/O.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._entities: Dict[str, TrackedEntity] = {}
        self._bounty_counter = get_bounty_isk_total()

    def attribute(self, name: str, source_path: str, offset: int) -> Optional[TrackedEntity]:
        """Point `name` at `source_path`, starting to read at `offset`.

        Returns the new state, or None when the character already tracks that path.
        The session total survives a switch to a newer log file; the lifetime total does not.
        """
        with self._lock:
            current = self._entities.get(name)
            if current is not None and current.source_path == source_path:
                return None
            session_total = current.session_total if current is not None else Decimal(0)
            ent = TrackedEntity(
                name=name,
                source_path=source_path,
                read_offset=int(offset),
                lifetime_total=Decimal(0),
                session_total=session_total,
            )
            self._entities[name] = ent
            return ent.copy()

    def find_by_path(self, source_path: str) -> Optional[TrackedEntity]:
        with self._lock:
            for ent in self._entities.values():
                if ent.source_path == source_path:
                    return ent.copy()
        return None

    def record_reward(self, name: str, source_path: str, amount: Decimal) -> Optional[TrackedEntity]:
        with self._lock:
            ent = self._entities.get(name)
            if ent is None or ent.source_path != source_path:
                return None
            ent.lifetime_total += amount
            ent.session_total += amount
            snap = ent.copy()
        try:
            self._bounty_counter.labels(name).inc(float(amount))
        except Exception:
            pass
        return snap

    def record_undock(self, name: str, source_path: str) -> Optional[TrackedEntity]:
        with self._lock:
            ent = self._entities.get(name)
            if ent is None or ent.source_path != source_path:
                return None
            ent.lifetime_total = Decimal(0)
            return ent.copy()

    def commit_offset(self, name: str, source_path: str, offset: int) -> bool:
        """Advance the read offset. Ignored if the path changed meanwhile or the offset would go back."""
        with self._lock:
            ent = self._entities.get(name)
            if ent is None or ent.source_path != source_path:
                return False
            if offset < ent.read_offset:
                return False
            ent.read_offset = int(offset)
            return True

    def reset_total(self, name: str) -> Optional[TrackedEntity]:
        with self._lock:
            ent = self._entities.get(name)
            if ent is None:
                return None
            ent.lifetime_total = Decimal(0)
            return ent.copy()

    def get(self, name: str) -> Optional[TrackedEntity]:
        with self._lock:
            ent = self._entities.get(name)
            return ent.copy() if ent is not None else None

    def snapshot(self) -> List[TrackedEntity]:
        with self._lock:
            return [ent.copy() for ent in self._entities.values()]

    def names(self) -> List[str]:
        with self._lock:
            return sorted(self._entities.keys())

    def __len__(self) -> int:
        with self._lock:
            return len(self._entities)
