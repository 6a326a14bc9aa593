"""
Immutable audit records.

An AuditRecord is minted once per accepted event and never modified
afterwards. ``to_triples`` renders it as the statements the audit trail
publishes about the record's own URI.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .vocabulary import (
    PREMIS_AGENT,
    PREMIS_OBJECT,
    PREMIS_TIME,
    PREMIS_TYPE,
    RDF_TYPE,
    RECORD_TYPES,
    XSD_DATETIME,
    XSD_STRING,
    AuditCategory,
)

OCCURRED_AT_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


@dataclass(frozen=True)
class Triple:
    """A single statement. ``datatype`` is None when ``object`` is an IRI."""

    subject: str
    predicate: str
    object: str
    datatype: str | None = None

    @property
    def is_literal(self) -> bool:
        return self.datatype is not None


@dataclass(frozen=True)
class AuditRecord:
    """Provenance record for one audited event."""

    record_path: str
    record_uri: str
    occurred_at: str  # YYYY-MM-DDThh:mm:ssZ
    agents: tuple[str, ...]  # acting identity, then client label when present
    types: tuple[str, ...] = field(default=RECORD_TYPES)
    category: AuditCategory | None = None
    related_resource: str | None = None  # opaque URI, survives deletion of the resource

    def to_triples(self) -> list[Triple]:
        s = self.record_uri
        triples = [Triple(s, RDF_TYPE, t) for t in self.types]
        triples.append(Triple(s, PREMIS_TIME, self.occurred_at, XSD_DATETIME))
        triples.extend(Triple(s, PREMIS_AGENT, agent, XSD_STRING) for agent in self.agents)
        if self.category is not None:
            triples.append(Triple(s, PREMIS_TYPE, self.category.uri))
        if self.related_resource is not None:
            triples.append(Triple(s, PREMIS_OBJECT, self.related_resource))
        return triples

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization, omitting absent fields."""
        d: dict[str, Any] = {
            "record_path": self.record_path,
            "record_uri": self.record_uri,
            "types": list(self.types),
            "occurred_at": self.occurred_at,
            "agents": list(self.agents),
        }
        if self.category is not None:
            d["category"] = self.category.value
        if self.related_resource is not None:
            d["related_resource"] = self.related_resource
        return d

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AuditRecord:
        category = data.get("category")
        return cls(
            record_path=data["record_path"],
            record_uri=data["record_uri"],
            occurred_at=data["occurred_at"],
            agents=tuple(data.get("agents", [])),
            types=tuple(data.get("types", RECORD_TYPES)),
            category=AuditCategory(category) if category else None,
            related_resource=data.get("related_resource"),
        )
