"""Safe lookup of non-document files under a content root for the asset endpoints"""

import os
from dataclasses import dataclass
from email.utils import formatdate
from pathlib import Path


MIME_BY_EXTENSION = {
    '.gif':  'image/gif',
    '.ico':  'image/x-icon',
    '.jpeg': 'image/jpeg',
    '.jpg':  'image/jpeg',
    '.json': 'application/json; charset=utf-8',
    '.pdf':  'application/pdf',
    '.png':  'image/png',
    '.svg':  'image/svg+xml',
    '.txt':  'text/plain; charset=utf-8',
    '.webp': 'image/webp',
}
DEFAULT_MIME = 'application/octet-stream'
ASSET_CACHE_CONTROL = 'public, max-age=86400, stale-while-revalidate=604800'


class AssetPathError(ValueError):
    """Requested asset path is empty or resolves outside the content root."""


@dataclass(frozen=True)
class AssetFile:
    path:          Path
    size:          int
    mtime:         float
    mime_type:     str
    etag:          str
    last_modified: str


def is_path_inside(root: Path, target: Path) -> bool:
    """True if target is strictly below root (root itself does not count)."""
    relative = os.path.relpath(target, root)
    return relative != '.' and not relative.startswith('..') and not os.path.isabs(relative)


def mime_type_for(path: Path) -> str:
    return MIME_BY_EXTENSION.get(path.suffix.lower(), DEFAULT_MIME)


def asset_etag(size: int, mtime_ms: int) -> str:
    """Weak ETag from size and whole-millisecond mtime, both in hex."""
    return f'W/"{size:x}-{mtime_ms:x}"'


def resolve_asset(root: Path, rel_path: str) -> AssetFile:
    """Locate a file for an already URL-decoded path relative to root.

    Raises AssetPathError for empty or escaping paths (textually or through
    symlinks) and FileNotFoundError when the root, the file, or a regular file
    at that location does not exist.
    """
    if not root.is_dir():
        raise FileNotFoundError(f"content root not found: {root}")

    segments = [s for s in rel_path.replace('\\', '/').split('/') if s]
    if not segments:
        raise AssetPathError("invalid path")
    relative = '/'.join(segments)

    root = root.resolve()
    target = Path(os.path.normpath(root / relative))
    if not is_path_inside(root, target):
        raise AssetPathError("path out of content root")

    try:
        stat = target.stat()
    except OSError as e:
        raise FileNotFoundError(f"asset not found: {relative}") from e
    if not target.is_file():
        raise FileNotFoundError(f"asset not found: {relative}")

    if not is_path_inside(root, target.resolve()):
        raise AssetPathError("path out of content root")

    return AssetFile(
        path=target,
        size=stat.st_size,
        mtime=stat.st_mtime,
        mime_type=mime_type_for(target),
        etag=asset_etag(stat.st_size, stat.st_mtime_ns // 1_000_000),
        last_modified=formatdate(stat.st_mtime, usegmt=True),
    )
