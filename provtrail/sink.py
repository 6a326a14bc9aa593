"""
Audit storage collaborators.

The pipeline only depends on the AuditSink protocol. FileAuditSink is the
bundled implementation: each record lives at its minted path below a store
directory,

    store/audit/27/c6/05/e4/27c605e4-.../record.json

so the sharded fan-out of the record paths is also the on-disk layout.
"""

from __future__ import annotations

import json
import logging
import os
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

from .errors import SinkWriteError
from .record import AuditRecord, Triple
from .vocabulary import PREMIS_OBJECT

logger = logging.getLogger(__name__)

RECORD_FILENAME = "record.json"


def _triple_dict(triple: Triple) -> dict[str, Any]:
    return {"s": triple.subject, "p": triple.predicate, "o": triple.object, "datatype": triple.datatype}


@runtime_checkable
class AuditSink(Protocol):
    """
    Storage contract used by the auditor.

    Implementations own any session or connection state and serialize access
    to it. Every call either fully succeeds or raises SinkWriteError.
    """

    def find_or_create_container(self, path: str) -> Any:
        """Ensure a container exists at ``path`` and return a handle to it."""
        ...

    def write(self, handle: Any, path: str, record: AuditRecord) -> None:
        """Persist ``record`` in the container behind ``handle``."""
        ...

    def set_related_resource_link(self, handle: Any, uri: str) -> None:
        """Attach the related-resource URI to the record behind ``handle``."""
        ...


@dataclass(frozen=True)
class ContainerHandle:
    """A container in a FileAuditSink."""

    path: str
    directory: Path

    @property
    def record_file(self) -> Path:
        return self.directory / RECORD_FILENAME


class FileAuditSink:
    """
    File-backed audit sink.

    Writes go to a temp file that is renamed into place, so readers never
    see a partially written record.
    """

    def __init__(self, store_dir: Path):
        """
        Initialize the sink.

        Args:
            store_dir: Root directory of the audit store
        """
        self.store_dir = store_dir

    def _directory_for(self, path: str) -> Path:
        parts = [p for p in path.split("/") if p]
        if any(p in (".", "..") for p in parts):
            raise SinkWriteError(path, "relative path segments are not allowed")
        return self.store_dir.joinpath(*parts)

    def find_or_create_container(self, path: str) -> ContainerHandle:
        directory = self._directory_for(path)
        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise SinkWriteError(path, str(e)) from e
        return ContainerHandle(path=path, directory=directory)

    def write(self, handle: ContainerHandle, path: str, record: AuditRecord) -> None:
        # The related-resource link is attached separately by set_related_resource_link.
        data = record.to_dict()
        data.pop("related_resource", None)
        data["triples"] = [
            _triple_dict(t) for t in record.to_triples() if t.predicate != PREMIS_OBJECT
        ]
        self._write_json(handle.record_file, path, data)
        logger.debug("Wrote audit record %s", path)

    def set_related_resource_link(self, handle: ContainerHandle, uri: str) -> None:
        try:
            data = json.loads(handle.record_file.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise SinkWriteError(handle.path, f"cannot read record: {e}") from e
        data["related_resource"] = uri
        triples = [t for t in data.get("triples", []) if t.get("p") != PREMIS_OBJECT]
        triples.append(_triple_dict(Triple(data.get("record_uri", ""), PREMIS_OBJECT, uri)))
        data["triples"] = triples
        self._write_json(handle.record_file, handle.path, data)

    def _write_json(self, target: Path, path: str, data: dict[str, Any]) -> None:
        temp_path = target.with_name(f".{target.name}.{os.getpid()}.{threading.get_ident()}.tmp")
        try:
            temp_path.write_text(json.dumps(data, indent=2, sort_keys=True), encoding="utf-8")
            os.replace(temp_path, target)
        except OSError as e:
            temp_path.unlink(missing_ok=True)
            raise SinkWriteError(path, str(e)) from e

    def read(self, path: str) -> AuditRecord | None:
        """Load the record stored at ``path``, or None if absent."""
        record_file = self._directory_for(path) / RECORD_FILENAME
        if not record_file.exists():
            return None
        return AuditRecord.from_dict(json.loads(record_file.read_text(encoding="utf-8")))

    def iter_record_files(self, root: str = "/"):
        """Yield every record file below ``root``."""
        directory = self._directory_for(root)
        if not directory.exists():
            return
        yield from sorted(directory.rglob(RECORD_FILENAME))
