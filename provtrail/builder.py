"""
Audit record assembly.

Composes the record URI, the related-resource URI and the descriptive fields
of an AuditRecord from a classified signal and its minted path.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import timezone
from urllib.parse import urlsplit

from .errors import MalformedUriError
from .record import OCCURRED_AT_FORMAT, AuditRecord
from .signals import EventSignal
from .vocabulary import AuditCategory

logger = logging.getLogger(__name__)

CONTENT_STREAM_SUFFIX = "jcr:content"

_ILLEGAL_CHARS = re.compile(r'[\s"<>\\^`{|}\x00-\x1f\x7f]')
_BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")


def validate_uri(uri: str) -> str:
    """
    Check that ``uri`` is a syntactically valid URI reference.

    Relative references such as ``/obj1`` are accepted.

    Returns the URI unchanged.

    Raises:
        MalformedUriError: illegal characters, a broken percent-escape, or an
            unparseable authority
    """
    if not uri:
        raise MalformedUriError(uri, "empty URI")
    match = _ILLEGAL_CHARS.search(uri)
    if match:
        raise MalformedUriError(uri, f"illegal character {match.group()!r} at index {match.start()}")
    if _BAD_ESCAPE.search(uri):
        raise MalformedUriError(uri, "malformed percent-escape")
    try:
        urlsplit(uri).port  # port is parsed lazily
    except ValueError as e:
        raise MalformedUriError(uri, str(e)) from e
    return uri


def owning_resource_path(path: str, content_suffix: str = CONTENT_STREAM_SUFFIX) -> str:
    """Collapse a binary's content-stream path onto the resource that owns it."""
    suffix = "/" + content_suffix
    if content_suffix and path.endswith(suffix):
        return path[: -len(suffix)]
    return path


@dataclass(frozen=True)
class RecordBuilder:
    """Assembles AuditRecords."""

    content_suffix: str = CONTENT_STREAM_SUFFIX

    def related_resource_uri(self, signal: EventSignal) -> str:
        """Compose and validate the URI of the audited resource.

        Raises:
            MalformedUriError: the composed string is not a valid URI
        """
        base = signal.base_location.rstrip("/")
        return validate_uri(base + owning_resource_path(signal.resource_path, self.content_suffix))

    def build(
        self,
        signal: EventSignal,
        category: AuditCategory | None,
        minted_path: str,
    ) -> AuditRecord:
        base = signal.base_location.rstrip("/")
        if not base:
            logger.warning(
                "No base location for %s: record URI %s is relative", signal.event_id, minted_path
            )

        try:
            related: str | None = self.related_resource_uri(signal)
        except MalformedUriError as e:
            logger.warning("Omitting related resource for %s: %s", signal.event_id, e)
            related = None

        occurred_at = signal.timestamp.astimezone(timezone.utc).strftime(OCCURRED_AT_FORMAT)
        agents = tuple(a for a in (signal.agent_id, signal.agent_label) if a)

        return AuditRecord(
            record_path=minted_path,
            record_uri=base + minted_path,
            occurred_at=occurred_at,
            agents=agents,
            category=category,
            related_resource=related,
        )
