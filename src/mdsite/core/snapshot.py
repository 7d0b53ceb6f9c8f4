"""Content fingerprinting, snapshot persistence, and the cold/warm snapshot cache"""

import logging
import os
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from mdsite.core import pipeline
from mdsite.core.models import SNAPSHOT_SCHEMA_VERSION, DocsVersion, Snapshot, SnapshotMeta


logger = logging.getLogger(__name__)


def compute_version(root: Path) -> DocsVersion:
    """File count and newest mtime (ms) over every file below root; (0, 0) if root is missing."""
    if not root.is_dir():
        return DocsVersion()

    file_count = 0
    max_mtime_ms = 0.0
    stack = [root]
    while stack:
        with os.scandir(stack.pop()) as entries:
            for entry in entries:
                if entry.is_dir(follow_symlinks=False):
                    stack.append(Path(entry.path))
                    continue
                try:
                    mtime_ms = entry.stat().st_mtime_ns / 1_000_000
                except OSError:
                    continue
                file_count += 1
                max_mtime_ms = max(max_mtime_ms, mtime_ms)
    return DocsVersion(file_count=file_count, max_mtime_ms=max_mtime_ms)


def load_persisted_snapshot(path: Path, expected: DocsVersion) -> Optional[Snapshot]:
    """Snapshot from disk if its schema version and fingerprint match; any failure is a miss."""
    if not path.is_file():
        return None
    try:
        snapshot = Snapshot.model_validate_json(path.read_text(encoding='utf-8'))
    except (OSError, ValueError) as e:
        logger.warning("Ignoring unreadable snapshot %s: %s", path, e)
        return None

    meta = snapshot.meta
    if meta is None or meta.schema_version != SNAPSHOT_SCHEMA_VERSION:
        logger.debug("Snapshot %s has an incompatible schema; ignoring", path)
        return None
    if meta.version != expected:
        logger.debug("Snapshot %s is stale (%s != %s)", path, meta.version, expected)
        return None
    return snapshot


def write_persisted_snapshot(path: Path, snapshot: Snapshot, version: DocsVersion) -> bool:
    """Best-effort write of snapshot + meta to path. Returns False instead of raising."""
    meta = SnapshotMeta(
        created_at=datetime.now(timezone.utc).isoformat(timespec='milliseconds').replace('+00:00', 'Z'),
        schema_version=SNAPSHOT_SCHEMA_VERSION,
        version=version,
    )
    payload = snapshot.model_copy(update={'meta': meta})
    tmp = None
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile(
            'w', encoding='utf-8', dir=path.parent, prefix=f"{path.name}.", suffix='.tmp', delete=False,
        ) as f:
            tmp = Path(f.name)
            f.write(payload.model_dump_json(by_alias=True))
        os.replace(tmp, path)
    except (OSError, TypeError, ValueError) as e:
        logger.warning("Could not persist snapshot to %s: %s", path, e)
        if tmp is not None:
            tmp.unlink(missing_ok=True)
        return False
    return True


class SnapshotCache:
    """Holds the current snapshot and the fingerprint it was built from.

    Cold until the first get()/warm_up(). In live mode every get() recomputes
    the fingerprint and rebuilds on change; in frozen mode the warm snapshot is
    served as-is until invalidate().
    """

    def __init__(
        self,
        content_root: Path,
        snapshot_path: Optional[Path] = None,
        live: bool = True,
        persist: bool = True,
        preset: str = 'gfm-like',
        ):
        self.content_root = Path(content_root)
        self.snapshot_path = Path(snapshot_path) if snapshot_path else None
        self.live = live
        self.persist = persist
        self.preset = preset
        self._snapshot: Optional[Snapshot] = None
        self._version: Optional[DocsVersion] = None

    @property
    def is_warm(self) -> bool:
        return self._snapshot is not None

    @property
    def version(self) -> Optional[DocsVersion]:
        return self._version

    def _build(self, version: DocsVersion) -> Snapshot:
        snapshot = pipeline.create_snapshot(self.content_root, self.preset)
        if self.persist and self.snapshot_path and self.content_root.is_dir():
            write_persisted_snapshot(self.snapshot_path, snapshot, version)
        return snapshot

    def warm_up(self) -> Snapshot:
        """Adopt a matching persisted snapshot or run a full build."""
        version = compute_version(self.content_root)
        snapshot = None
        if self.snapshot_path and self.content_root.is_dir():
            snapshot = load_persisted_snapshot(self.snapshot_path, version)
        if snapshot is not None:
            logger.info("Loaded snapshot from %s", self.snapshot_path)
        else:
            snapshot = self._build(version)
        self._snapshot, self._version = snapshot, version
        return snapshot

    def get(self) -> Snapshot:
        if self._snapshot is None:
            return self.warm_up()
        if not self.live:
            return self._snapshot

        version = compute_version(self.content_root)
        if version != self._version:
            logger.info("Content changed (%s -> %s); rebuilding", self._version, version)
            self._snapshot, self._version = self._build(version), version
        return self._snapshot

    def invalidate(self) -> None:
        self._snapshot = None
        self._version = None
