"""
Normalized lifecycle event signals.

An EventSignal is the pipeline's view of one observed change in the managed
resource tree. Signals arrive from the embedding system as dicts (or JSON
lines); ``EventSignal.from_dict`` accepts both the short vocabulary names and
the repository URIs, plus the ``user_data`` JSON blob the repository attaches
to each event.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Iterable

from .vocabulary import LifecycleKind, ResourceType, parse_attribute

logger = logging.getLogger(__name__)

URN_UUID_PREFIX = "urn:uuid:"


@dataclass(frozen=True)
class EventSignal:
    """One observed change to a resource."""

    event_id: str
    resource_path: str
    timestamp: datetime
    agent_id: str
    lifecycle_kinds: frozenset[LifecycleKind] = field(default_factory=frozenset)
    resource_types: frozenset[ResourceType] = field(default_factory=frozenset)
    changed_attributes: frozenset[str] = field(default_factory=frozenset)
    agent_label: str | None = None
    base_location: str = ""

    def __post_init__(self) -> None:
        if not self.event_id:
            raise ValueError("event_id is required")
        if self.timestamp.tzinfo is None:
            object.__setattr__(self, "timestamp", self.timestamp.replace(tzinfo=timezone.utc))

    @property
    def is_pure_modification(self) -> bool:
        return self.lifecycle_kinds == {LifecycleKind.MODIFICATION}

    @property
    def is_binary(self) -> bool:
        return ResourceType.BINARY_CONTENT in self.resource_types

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-compatible dict using short vocabulary names."""
        d: dict[str, Any] = {
            "event_id": self.event_id,
            "resource_path": self.resource_path,
            "timestamp": self.timestamp.isoformat(),
            "agent_id": self.agent_id,
            "lifecycle_kinds": sorted(k.value for k in self.lifecycle_kinds),
            "resource_types": sorted(t.value for t in self.resource_types),
            "changed_attributes": sorted(self.changed_attributes),
            "base_location": self.base_location,
        }
        if self.agent_label is not None:
            d["agent_label"] = self.agent_label
        return d

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> EventSignal:
        """Build a signal from a raw event dict.

        Raises:
            KeyError: when ``event_id`` is missing
            ValueError: on unknown lifecycle kinds or an unparseable timestamp
        """
        user_data = _parse_user_data(data.get("user_data"))

        agent_label = data.get("agent_label")
        if agent_label is None:
            agent_label = user_data.get("userAgent")

        base_location = data.get("base_location")
        if base_location is None:
            base_location = user_data.get("baseURL", "")

        return cls(
            event_id=str(data["event_id"]),
            resource_path=str(data.get("resource_path", "")),
            timestamp=parse_timestamp(data.get("timestamp")),
            agent_id=str(data.get("agent_id", "")),
            lifecycle_kinds=frozenset(
                LifecycleKind.parse(k) for k in _as_list(data.get("lifecycle_kinds"))
            ),
            resource_types=_parse_resource_types(_as_list(data.get("resource_types"))),
            changed_attributes=frozenset(
                parse_attribute(a) for a in _as_list(data.get("changed_attributes"))
            ),
            agent_label=str(agent_label) if agent_label is not None else None,
            base_location=str(base_location or ""),
        )

    @classmethod
    def from_json(cls, line: str) -> EventSignal:
        return cls.from_dict(json.loads(line))


def event_token(event_id: str) -> str:
    """Strip the ``urn:uuid:`` prefix from an event id, leaving the mintable token."""
    if event_id.lower().startswith(URN_UUID_PREFIX):
        return event_id[len(URN_UUID_PREFIX):]
    return event_id


def parse_timestamp(value: Any) -> datetime:
    """Parse an ISO-8601 string, epoch milliseconds or datetime into an aware UTC datetime.

    Raises:
        ValueError: missing or unsupported value
    """
    if value is None or value == "":
        raise ValueError("timestamp is required")
    if isinstance(value, datetime):
        ts = value
    elif isinstance(value, (int, float)) and not isinstance(value, bool):
        ts = datetime.fromtimestamp(value / 1000, tz=timezone.utc)
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        ts = datetime.fromisoformat(text)
    else:
        raise ValueError(f"Unsupported timestamp: {value!r}")
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts


def _as_list(value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    return [str(v) for v in value]


def _parse_resource_types(values: Iterable[str]) -> frozenset[ResourceType]:
    types: set[ResourceType] = set()
    for raw in values:
        parsed = ResourceType.parse(raw)
        if parsed is None:
            logger.debug("Ignoring unknown resource type: %s", raw)
            continue
        types.add(parsed)
    return frozenset(types)


def _parse_user_data(value: Any) -> dict[str, Any]:
    if not value:
        return {}
    if isinstance(value, dict):
        return value
    try:
        data = json.loads(value)
    except (TypeError, json.JSONDecodeError):
        logger.warning("Ignoring unparseable user data: %r", value)
        return {}
    return data if isinstance(data, dict) else {}
