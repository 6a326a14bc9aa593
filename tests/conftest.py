"""Pytest configuration and fixtures."""

from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import pytest

from provtrail.config import AuditConfig
from provtrail.signals import EventSignal
from provtrail.vocabulary import LifecycleKind, ResourceType

IDENTIFIER = "27c605e4-98c6-4240-86be-f1bb1971d694"
IDENTIFIER_PATH = "27/c6/05/e4/" + IDENTIFIER
BASE_URL = "http://localhost:8080/rest"
USER_AGENT = "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_9_5) AppleWebKit/537.36"
TIMESTAMP = datetime.fromtimestamp(1428676236521 / 1000, tz=timezone.utc)


def make_signal(**overrides: Any) -> EventSignal:
    """Build a signal with sensible defaults; keyword args replace fields."""
    fields: dict[str, Any] = {
        "event_id": "urn:uuid:" + IDENTIFIER,
        "resource_path": "/non/audit/container/path",
        "timestamp": TIMESTAMP,
        "agent_id": "bypassAdmin",
        "agent_label": USER_AGENT,
        "base_location": BASE_URL,
        "lifecycle_kinds": frozenset({LifecycleKind.CREATION}),
        "resource_types": frozenset({ResourceType.RESOURCE, ResourceType.CONTAINER}),
        "changed_attributes": frozenset(),
    }
    fields.update(overrides)
    return EventSignal(**fields)


@pytest.fixture
def signal_factory():
    return make_signal


@pytest.fixture
def store_dir(tmp_path: Path) -> Path:
    return tmp_path / "store"


@pytest.fixture
def audit_config(store_dir: Path) -> AuditConfig:
    return AuditConfig(audit_root="/audit", store_dir=store_dir)
