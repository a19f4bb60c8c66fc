"""
Event Schema.

Defines the Event dataclass published for order lifecycle notifications.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, asdict, field
from datetime import datetime, timezone
from typing import Any

from .event_types import ALL_EVENT_TYPES


@dataclass
class Event:
    """
    Notification event.

    The 'entity' field carries the event payload (order id, number, status...).
    The 'actor' field identifies who triggered the event.
    Validated in __post_init__ so malformed events never reach Redis.
    """

    type: str
    shop_id: int
    customer_id: int
    order_id: int | None = None
    entity: dict[str, Any] = field(default_factory=dict)
    actor: dict[str, Any] = field(default_factory=dict)
    ts: str | None = None
    v: int = 1  # Schema version

    def __post_init__(self) -> None:
        if not self.type or not isinstance(self.type, str):
            raise ValueError("Event type must be a non-empty string")

        if self.type not in ALL_EVENT_TYPES:
            raise ValueError(f"Unknown event type: {self.type}")

        if not isinstance(self.shop_id, int) or self.shop_id <= 0:
            raise ValueError("Event shop_id must be a positive integer")

        if not isinstance(self.customer_id, int) or self.customer_id <= 0:
            raise ValueError("Event customer_id must be a positive integer")

        if self.order_id is not None and (not isinstance(self.order_id, int) or self.order_id <= 0):
            raise ValueError("Event order_id must be a positive integer or None")

        if self.entity is not None and not isinstance(self.entity, dict):
            raise ValueError("Event entity must be a dict or None")

        if self.actor is not None and not isinstance(self.actor, dict):
            raise ValueError("Event actor must be a dict or None")

    def to_json(self) -> str:
        """Serialize event to JSON string."""
        data = asdict(self)
        data["entity"] = data["entity"] or {}
        data["actor"] = data["actor"] or {}
        data["ts"] = data["ts"] or datetime.now(timezone.utc).isoformat()
        return json.dumps(data, ensure_ascii=False, default=str)

    @classmethod
    def from_json(cls, json_str: str) -> "Event":
        """Deserialize event from JSON string (validated in __post_init__)."""
        data = json.loads(json_str)
        return cls(**data)
