"""
Audit event classifier.

Maps the lifecycle kinds reported for an occurrence, together with the type
of the affected resource, onto a single audit category.
"""

from __future__ import annotations

from typing import AbstractSet, Optional

from .vocabulary import AuditCategory, LifecycleKind, ResourceType

# Evaluated in order: an occurrence reporting creation+modification is an addition.
_PRECEDENCE: tuple[tuple[LifecycleKind, AuditCategory, AuditCategory], ...] = (
    (LifecycleKind.CREATION, AuditCategory.CONTENT_ADDED, AuditCategory.OBJECT_ADDED),
    (LifecycleKind.DELETION, AuditCategory.CONTENT_REMOVED, AuditCategory.OBJECT_REMOVED),
    (LifecycleKind.MODIFICATION, AuditCategory.CONTENT_MODIFIED, AuditCategory.OBJECT_MODIFIED),
)


def classify(
    lifecycle_kinds: AbstractSet[LifecycleKind],
    resource_types: Optional[AbstractSet[ResourceType]] = None,
) -> Optional[AuditCategory]:
    """Classify an occurrence.

    Args:
        lifecycle_kinds: Raw lifecycle signals present on the occurrence
        resource_types: Type tags of the affected resource (None = unknown)

    Returns:
        The audit category, or None when no lifecycle kind applies. None is a
        valid outcome: the record is still written, just without a category.
    """
    is_binary = bool(resource_types) and ResourceType.BINARY_CONTENT in resource_types
    for kind, content_category, object_category in _PRECEDENCE:
        if kind in lifecycle_kinds:
            return content_category if is_binary else object_category
    return None
