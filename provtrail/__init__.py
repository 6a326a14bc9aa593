"""provtrail - provenance audit trail for repository lifecycle events."""

__version__ = "0.3.0"

from .auditor import InternalAuditor, LogAuditor
from .builder import RecordBuilder
from .classifier import classify
from .config import AuditConfig, load_config
from .errors import (
    InvalidTokenError,
    MalformedUriError,
    NotConfiguredError,
    ProvtrailError,
    SinkWriteError,
)
from .filter import EventFilter, SuppressionPolicy
from .minter import PathMinter
from .record import AuditRecord, Triple
from .signals import EventSignal, event_token
from .sink import AuditSink, FileAuditSink
from .vocabulary import AuditCategory, LifecycleKind, ResourceType

__all__ = [
    "__version__",
    "AuditCategory",
    "AuditConfig",
    "AuditRecord",
    "AuditSink",
    "EventFilter",
    "EventSignal",
    "FileAuditSink",
    "InternalAuditor",
    "InvalidTokenError",
    "LifecycleKind",
    "LogAuditor",
    "MalformedUriError",
    "NotConfiguredError",
    "PathMinter",
    "ProvtrailError",
    "RecordBuilder",
    "ResourceType",
    "SinkWriteError",
    "SuppressionPolicy",
    "Triple",
    "classify",
    "event_token",
    "load_config",
]
