"""Tests for audit event classification."""

from __future__ import annotations

import pytest

from provtrail.classifier import classify
from provtrail.vocabulary import AuditCategory, LifecycleKind, ResourceType

CREATION = LifecycleKind.CREATION
DELETION = LifecycleKind.DELETION
MODIFICATION = LifecycleKind.MODIFICATION

BINARY = frozenset({ResourceType.RESOURCE, ResourceType.BINARY_CONTENT})
CONTAINER = frozenset({ResourceType.RESOURCE, ResourceType.CONTAINER})


@pytest.mark.parametrize(
    ("kinds", "types", "expected"),
    [
        ({CREATION}, BINARY, AuditCategory.CONTENT_ADDED),
        ({CREATION}, CONTAINER, AuditCategory.OBJECT_ADDED),
        ({DELETION}, BINARY, AuditCategory.CONTENT_REMOVED),
        ({DELETION}, CONTAINER, AuditCategory.OBJECT_REMOVED),
        ({MODIFICATION}, BINARY, AuditCategory.CONTENT_MODIFIED),
        ({MODIFICATION}, CONTAINER, AuditCategory.OBJECT_MODIFIED),
    ],
)
def test_decision_table(kinds, types, expected) -> None:
    assert classify(frozenset(kinds), types) is expected


class TestPrecedence:
    def test_creation_beats_modification(self) -> None:
        assert classify({CREATION, MODIFICATION}, CONTAINER) is AuditCategory.OBJECT_ADDED
        assert classify({CREATION, MODIFICATION}, BINARY) is AuditCategory.CONTENT_ADDED

    def test_creation_beats_deletion(self) -> None:
        assert classify({CREATION, DELETION}, CONTAINER) is AuditCategory.OBJECT_ADDED

    def test_deletion_beats_modification(self) -> None:
        assert classify({DELETION, MODIFICATION}, BINARY) is AuditCategory.CONTENT_REMOVED


class TestNoCategory:
    def test_empty_kinds(self) -> None:
        assert classify(frozenset(), BINARY) is None

    def test_missing_resource_types_means_object(self) -> None:
        assert classify({DELETION}, None) is AuditCategory.OBJECT_REMOVED
        assert classify({DELETION}, frozenset()) is AuditCategory.OBJECT_REMOVED


class TestCategoryUris:
    @pytest.mark.parametrize(
        ("category", "uri"),
        [
            (AuditCategory.CONTENT_ADDED, "http://id.loc.gov/vocabulary/preservation/eventType/ing"),
            (AuditCategory.OBJECT_ADDED, "http://id.loc.gov/vocabulary/preservation/eventType/cre"),
            (AuditCategory.OBJECT_REMOVED, "http://id.loc.gov/vocabulary/preservation/eventType/del"),
            (AuditCategory.CONTENT_REMOVED, "http://fedora.info/definitions/v4/audit#contentRemoval"),
            (AuditCategory.CONTENT_MODIFIED, "http://fedora.info/definitions/v4/audit#contentModification"),
            (AuditCategory.OBJECT_MODIFIED, "http://fedora.info/definitions/v4/audit#metadataModification"),
        ],
    )
    def test_uri(self, category: AuditCategory, uri: str) -> None:
        assert category.uri == uri
        assert AuditCategory.from_uri(uri) is category

    def test_unknown_uri(self) -> None:
        with pytest.raises(ValueError):
            AuditCategory.from_uri("http://example.org/nope")
