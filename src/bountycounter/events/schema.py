from __future__ import annotations

import time
from decimal import Decimal
from typing import Literal
from pydantic import BaseModel, Field


def _now_ms() -> int:
    return int(time.time() * 1000)


class EntitySnapshot(BaseModel):
    name: str
    source_path: str
    read_offset: int
    lifetime_total: Decimal
    session_total: Decimal

    @classmethod
    def of(cls, entity) -> "EntitySnapshot":
        return cls(
            name=entity.name,
            source_path=entity.source_path,
            read_offset=entity.read_offset,
            lifetime_total=entity.lifetime_total,
            session_total=entity.session_total,
        )


# ---- Base ----

class BaseNotification(BaseModel):
    event_type: str
    ts: int = Field(default_factory=_now_ms)
    entity: EntitySnapshot


# ---- Notification types ----

class TrackingStarted(BaseNotification):
    event_type: Literal["tracking_started"] = "tracking_started"


class Undocking(BaseNotification):
    event_type: Literal["undocking"] = "undocking"


class BountyUpdated(BaseNotification):
    event_type: Literal["bounty_updated"] = "bounty_updated"
    increment: Decimal

