"""
Controlled vocabulary for audit records.

Namespaces, predicates and the closed enumerations the pipeline classifies
with. Raw repository signals arrive either as short names or as vocabulary
URIs; the ``parse`` helpers normalize both to enum members.
"""

from __future__ import annotations

from enum import Enum

# Namespaces
REPOSITORY = "http://fedora.info/definitions/v4/repository#"
EVENT = "http://fedora.info/definitions/v4/event#"
AUDIT = "http://fedora.info/definitions/v4/audit#"
EVENT_TYPE = "http://id.loc.gov/vocabulary/preservation/eventType/"
PREMIS = "http://www.loc.gov/premis/rdf/v1#"
PROV = "http://www.w3.org/ns/prov#"
RDF = "http://www.w3.org/1999/02/22-rdf-syntax-ns#"
XSD = "http://www.w3.org/2001/XMLSchema#"

# Record type tags
INTERNAL_EVENT = AUDIT + "InternalEvent"
PREMIS_EVENT = PREMIS + "Event"
PROV_EVENT = PROV + "InstantaneousEvent"
RECORD_TYPES = (INTERNAL_EVENT, PREMIS_EVENT, PROV_EVENT)

# Predicates
RDF_TYPE = RDF + "type"
PREMIS_TIME = PREMIS + "hasEventDateTime"
PREMIS_AGENT = PREMIS + "hasEventRelatedAgent"
PREMIS_TYPE = PREMIS + "hasEventType"
PREMIS_OBJECT = PREMIS + "hasEventRelatedObject"

# Literal datatypes
XSD_DATETIME = XSD + "dateTime"
XSD_STRING = XSD + "string"

# Attributes touched on a parent container when a child is added or removed
LAST_MODIFIED = "last-modified-timestamp"
LAST_MODIFIED_BY = "last-modified-by"
PARENT_NOISE_ATTRIBUTES = frozenset({LAST_MODIFIED, LAST_MODIFIED_BY})

_ATTRIBUTE_ALIASES = {
    REPOSITORY + "lastModified": LAST_MODIFIED,
    REPOSITORY + "lastModifiedBy": LAST_MODIFIED_BY,
}


class LifecycleKind(str, Enum):
    """Raw lifecycle signals carried by one event occurrence."""

    CREATION = "creation"
    DELETION = "deletion"
    MODIFICATION = "modification"

    @classmethod
    def parse(cls, value: str) -> LifecycleKind:
        """Normalize a short name or vocabulary URI.

        Raises ValueError for anything unrecognized.
        """
        key = value.strip()
        member = _LIFECYCLE_ALIASES.get(key) or _LIFECYCLE_ALIASES.get(key.lower())
        if member is None:
            raise ValueError(f"Unknown lifecycle kind: {value!r}")
        return member


_LIFECYCLE_ALIASES: dict[str, LifecycleKind] = {
    "creation": LifecycleKind.CREATION,
    "deletion": LifecycleKind.DELETION,
    "modification": LifecycleKind.MODIFICATION,
    EVENT + "ResourceCreation": LifecycleKind.CREATION,
    EVENT + "ResourceDeletion": LifecycleKind.DELETION,
    EVENT + "ResourceModification": LifecycleKind.MODIFICATION,
    REPOSITORY + "NODE_ADDED": LifecycleKind.CREATION,
    REPOSITORY + "NODE_REMOVED": LifecycleKind.DELETION,
    REPOSITORY + "PROPERTY_CHANGED": LifecycleKind.MODIFICATION,
    REPOSITORY + "PROPERTY_ADDED": LifecycleKind.MODIFICATION,
    REPOSITORY + "PROPERTY_REMOVED": LifecycleKind.MODIFICATION,
}


class ResourceType(str, Enum):
    """Type tags describing an audited resource."""

    RESOURCE = "resource"
    CONTAINER = "container"
    BINARY_CONTENT = "binary-content"

    @classmethod
    def parse(cls, value: str) -> ResourceType | None:
        """Normalize a short name or vocabulary URI; None when unknown."""
        key = value.strip()
        return _RESOURCE_TYPE_ALIASES.get(key) or _RESOURCE_TYPE_ALIASES.get(key.lower())


_RESOURCE_TYPE_ALIASES: dict[str, ResourceType] = {
    "resource": ResourceType.RESOURCE,
    "container": ResourceType.CONTAINER,
    "binary-content": ResourceType.BINARY_CONTENT,
    "binary": ResourceType.BINARY_CONTENT,
    REPOSITORY + "Resource": ResourceType.RESOURCE,
    REPOSITORY + "Container": ResourceType.CONTAINER,
    REPOSITORY + "Binary": ResourceType.BINARY_CONTENT,
}


def parse_attribute(value: str) -> str:
    """Normalize a changed-attribute name (URIs of known properties map to short names)."""
    key = value.strip()
    return _ATTRIBUTE_ALIASES.get(key, key)


class AuditCategory(str, Enum):
    """Audit event categories.

    Each category is published as a controlled-vocabulary URI in the record's
    event-type triple (see ``uri``).
    """

    CONTENT_ADDED = "content-added"
    CONTENT_MODIFIED = "content-modified"
    CONTENT_REMOVED = "content-removed"
    OBJECT_ADDED = "object-added"
    OBJECT_MODIFIED = "object-modified"
    OBJECT_REMOVED = "object-removed"

    @property
    def uri(self) -> str:
        return _CATEGORY_URIS[self]

    @classmethod
    def from_uri(cls, uri: str) -> AuditCategory:
        for category, candidate in _CATEGORY_URIS.items():
            if candidate == uri:
                return category
        raise ValueError(f"Unknown audit category URI: {uri!r}")


_CATEGORY_URIS: dict[AuditCategory, str] = {
    AuditCategory.CONTENT_ADDED: EVENT_TYPE + "ing",
    AuditCategory.OBJECT_ADDED: EVENT_TYPE + "cre",
    AuditCategory.OBJECT_REMOVED: EVENT_TYPE + "del",
    AuditCategory.CONTENT_REMOVED: AUDIT + "contentRemoval",
    AuditCategory.CONTENT_MODIFIED: AUDIT + "contentModification",
    AuditCategory.OBJECT_MODIFIED: AUDIT + "metadataModification",
}
