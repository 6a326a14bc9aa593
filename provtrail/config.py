"""
Auditor configuration.

Settings come from an optional TOML file with an ``[audit]`` table, then from
the environment:

    [audit]
    container = "/audit"          # audit root; absent = auditing off
    store = ".provtrail/store"    # FileAuditSink directory
    segments = 4
    segment_width = 2
    suppression = "subset"        # or "exact"
    content_suffix = "jcr:content"

``PROVTRAIL_AUDIT_CONTAINER`` and ``PROVTRAIL_STORE`` override the file.
"""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

from .builder import CONTENT_STREAM_SUFFIX
from .filter import SuppressionPolicy
from .minter import DEFAULT_SEGMENTS, DEFAULT_WIDTH

ENV_AUDIT_CONTAINER = "PROVTRAIL_AUDIT_CONTAINER"
ENV_STORE = "PROVTRAIL_STORE"
DEFAULT_STORE = Path(".provtrail") / "store"


def normalize_audit_root(value: str | None) -> str | None:
    """Return ``/``-rooted form without a trailing separator; None when unset."""
    if value is None:
        return None
    root = value.strip()
    if not root:
        return None
    if not root.startswith("/"):
        root = "/" + root
    root = root.rstrip("/")
    if not root:
        raise ValueError("audit container cannot be the repository root")
    return root


@dataclass(frozen=True)
class AuditConfig:
    """Explicit auditor configuration. ``audit_root`` None means unconfigured."""

    audit_root: str | None = None
    store_dir: Path = DEFAULT_STORE
    segments: int = DEFAULT_SEGMENTS
    segment_width: int = DEFAULT_WIDTH
    suppression: SuppressionPolicy = SuppressionPolicy.SUBSET
    content_suffix: str = CONTENT_STREAM_SUFFIX

    @property
    def is_configured(self) -> bool:
        return self.audit_root is not None


def _coerce_int(value: Any, name: str, minimum: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{name} must be an integer")
    if value < minimum:
        raise ValueError(f"{name} must be >= {minimum}")
    return value


def config_from_mapping(data: Mapping[str, Any], *, base_dir: Path | None = None) -> AuditConfig:
    """Build a config from the ``[audit]`` table contents."""
    store_raw = data.get("store")
    store_dir = Path(store_raw) if store_raw else DEFAULT_STORE
    if base_dir is not None and not store_dir.is_absolute():
        store_dir = base_dir / store_dir

    suppression_raw = str(data.get("suppression", SuppressionPolicy.SUBSET.value)).strip().lower()
    try:
        suppression = SuppressionPolicy(suppression_raw)
    except ValueError:
        raise ValueError(f"suppression must be one of: subset, exact (got {suppression_raw!r})") from None

    container = data.get("container")
    return AuditConfig(
        audit_root=normalize_audit_root(str(container) if container is not None else None),
        store_dir=store_dir,
        segments=_coerce_int(data.get("segments", DEFAULT_SEGMENTS), "segments", 0),
        segment_width=_coerce_int(data.get("segment_width", DEFAULT_WIDTH), "segment_width", 1),
        suppression=suppression,
        content_suffix=str(data.get("content_suffix", CONTENT_STREAM_SUFFIX)),
    )


def load_config(
    path: Path | None = None,
    env: Mapping[str, str] | None = None,
) -> AuditConfig:
    """
    Load configuration from a TOML file and the environment.

    Args:
        path: Optional TOML file; relative ``store`` paths resolve against its directory
        env: Environment mapping (defaults to ``os.environ``)

    Raises:
        FileNotFoundError: ``path`` was given but does not exist
        ValueError: invalid TOML or setting
    """
    env = os.environ if env is None else env

    table: dict[str, Any] = {}
    base_dir: Path | None = None
    if path is not None:
        try:
            data = tomllib.loads(path.read_text(encoding="utf-8"))
        except tomllib.TOMLDecodeError as e:
            raise ValueError(f"Invalid config file {path}: {e}") from e
        audit = data.get("audit", {})
        if not isinstance(audit, dict):
            raise ValueError("[audit] must be a table")
        table.update(audit)
        base_dir = path.parent

    if env.get(ENV_AUDIT_CONTAINER):
        table["container"] = env[ENV_AUDIT_CONTAINER]
    if env.get(ENV_STORE):
        table["store"] = env[ENV_STORE]
        base_dir = None

    return config_from_mapping(table, base_dir=base_dir)
