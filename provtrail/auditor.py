"""
Auditors: the entry points the embedding system calls for each event.

The dispatcher of the embedding system calls ``on_event`` once per lifecycle
event occurrence, possibly from many threads at once. InternalAuditor holds
no per-event state; everything it needs is fixed when ``start`` succeeds.

    auditor = InternalAuditor(load_config(), FileAuditSink(store_dir))
    auditor.start()
    auditor.on_event(signal)
"""

from __future__ import annotations

import logging
from typing import Protocol

from .builder import RecordBuilder
from .classifier import classify
from .config import AuditConfig
from .errors import InvalidTokenError, NotConfiguredError, SinkWriteError
from .filter import EventFilter
from .minter import PathMinter
from .record import AuditRecord
from .signals import EventSignal, event_token
from .sink import AuditSink

logger = logging.getLogger(__name__)


class Auditor(Protocol):
    def on_event(self, signal: EventSignal) -> AuditRecord | None: ...


class InternalAuditor:
    """Writes one audit record per audit-worthy event into an AuditSink."""

    def __init__(self, config: AuditConfig, sink: AuditSink):
        self.config = config
        self.sink = sink
        self.minter = PathMinter(segments=config.segments, width=config.segment_width)
        self.builder = RecordBuilder(content_suffix=config.content_suffix)
        self._filter: EventFilter | None = None

    @property
    def active(self) -> bool:
        return self._filter is not None

    def start(self) -> bool:
        """
        Ensure the audit root container exists and begin accepting events.

        Returns False (and stays inactive) when no audit root is configured.

        Raises:
            SinkWriteError: the audit root container cannot be created
        """
        root = self.config.audit_root
        if root is None:
            logger.warning("Cannot initialize %s: no audit container configured", type(self).__name__)
            return False

        logger.info("Initializing %s at %s", type(self).__name__, root)
        self.sink.find_or_create_container(root)
        self._filter = EventFilter(audit_root=root, policy=self.config.suppression)
        return True

    def stop(self) -> None:
        logger.debug("Tearing down %s", type(self).__name__)
        self._filter = None

    def record_path(self, event_id: str) -> str:
        """Minted path of the record for ``event_id`` under the audit root.

        Raises:
            NotConfiguredError: no audit root configured
            InvalidTokenError: the event id cannot be minted
        """
        root = self.config.audit_root
        if root is None:
            raise NotConfiguredError("audit container is not configured")
        return f"{root}/{self.minter.mint(event_token(event_id))}"

    def process(self, signal: EventSignal) -> AuditRecord | None:
        """
        Filter, classify, mint, build and persist one signal.

        Returns the written record, or None when the signal is not audit-worthy.

        Raises:
            NotConfiguredError: called before a successful ``start``
            InvalidTokenError: the event id cannot be minted
            SinkWriteError: the sink failed; no retry is attempted
        """
        event_filter = self._filter
        if event_filter is None:
            raise NotConfiguredError(f"{type(self).__name__} has not been started")

        logger.debug("Event detected: %s %s", signal.agent_id, signal.resource_path)
        if not event_filter.should_audit(signal):
            return None

        category = classify(signal.lifecycle_kinds, signal.resource_types)
        path = self.record_path(signal.event_id)
        record = self.builder.build(signal, category, path)

        try:
            handle = self.sink.find_or_create_container(path)
            self.sink.write(handle, path, record)
            if record.related_resource is not None:
                self.sink.set_related_resource_link(handle, record.related_resource)
        except SinkWriteError as e:
            logger.error("Audit record %s for event %s not written: %s", path, signal.event_id, e)
            raise

        logger.debug("Audit record %s created for event %s", path, signal.event_id)
        return record

    def on_event(self, signal: EventSignal) -> AuditRecord | None:
        """
        Record one event.

        Events arriving before ``start`` and events with unmintable ids are
        dropped with a warning. Sink failures propagate to the caller.
        """
        try:
            return self.process(signal)
        except NotConfiguredError as e:
            logger.warning("Dropping event %s: %s", signal.event_id, e)
        except InvalidTokenError as e:
            logger.warning("Dropping event %s: %s", signal.event_id, e)
        return None


class LogAuditor:
    """Auditor that only logs ``<agent> <path>`` for every event."""

    def on_event(self, signal: EventSignal) -> AuditRecord | None:
        logger.info("%s %s", signal.agent_id, signal.resource_path)
        return None
