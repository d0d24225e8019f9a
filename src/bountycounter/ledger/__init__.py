"""Ledger package.

Public API:
- Ledger: lock-guarded map of character name -> TrackedEntity (log path, read offset, totals).
- TrackedEntity: per-character tracking state.
"""

from .ledger import Ledger  # re-export
from .model import TrackedEntity  # re-export
