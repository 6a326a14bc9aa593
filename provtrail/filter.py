"""
Audit-worthiness filter.

Drops signals that must never produce a record: unaddressable resources,
changes inside the audit trail itself, and the last-modified bookkeeping a
container receives whenever a child is added or removed.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from .signals import EventSignal
from .vocabulary import PARENT_NOISE_ATTRIBUTES

logger = logging.getLogger(__name__)


class SuppressionPolicy(str, Enum):
    """How parent last-modified noise is recognized.

    - SUBSET: changed attributes are a non-empty subset of the last-modified pair
    - EXACT: changed attributes are exactly the last-modified pair
    """

    SUBSET = "subset"
    EXACT = "exact"


def is_under(path: str, root: str) -> bool:
    """True when ``path`` is ``root`` or one of its descendants."""
    root = root.rstrip("/")
    if not root:
        return True
    return path == root or path.startswith(root + "/")


def is_parent_noise(
    signal: EventSignal,
    policy: SuppressionPolicy = SuppressionPolicy.SUBSET,
) -> bool:
    """True for a pure modification touching only last-modified bookkeeping."""
    if not signal.is_pure_modification:
        return False
    changed = signal.changed_attributes
    if policy is SuppressionPolicy.EXACT:
        return changed == PARENT_NOISE_ATTRIBUTES
    return bool(changed) and changed <= PARENT_NOISE_ATTRIBUTES


@dataclass(frozen=True)
class EventFilter:
    """Decides whether a signal is audit-worthy."""

    audit_root: str
    policy: SuppressionPolicy = SuppressionPolicy.SUBSET

    def should_audit(self, signal: EventSignal) -> bool:
        path = signal.resource_path
        if not path:
            logger.debug("Skipping %s: resource path is empty", signal.event_id)
            return False
        if is_under(path, self.audit_root):
            logger.debug("Skipping %s: %s is inside the audit trail", signal.event_id, path)
            return False
        if is_parent_noise(signal, self.policy):
            logger.debug(
                "Skipping %s: only %s changed on %s",
                signal.event_id,
                ", ".join(sorted(signal.changed_attributes)),
                path,
            )
            return False
        return True
