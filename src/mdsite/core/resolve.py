"""Relative link and image resolution against a content root, with traversal safety"""

import re
from dataclasses import dataclass
from pathlib import Path
from typing import AbstractSet, Optional
from urllib.parse import unquote

from mdsite.core.utils.paths import DOC_EXTENSIONS, encode_path, split_path_and_suffix


EXTERNAL_HREF_RE = re.compile(r'^(https?:|mailto:|tel:|#|data:|//)', re.IGNORECASE)
EXTERNAL_SRC_RE = re.compile(r'^(https?:|data:|//)', re.IGNORECASE)
OPENS_NEW_TAB_RE = re.compile(r'^(https?:|mailto:|tel:|//)', re.IGNORECASE)


@dataclass(frozen=True)
class Routes:
    """URL prefixes that resolved document and asset paths are mapped onto.

    single_page collapses every document link onto the docs prefix itself,
    which is how the about page treats links to other Markdown files.
    """
    docs: str
    assets: str
    single_page: bool = False

    def doc_href(self, slug: list[str], suffix: str = '') -> str:
        if self.single_page or not slug:
            return f"{self.docs}{suffix}"
        return f"{self.docs}/{encode_path('/'.join(slug))}{suffix}"

    def asset_href(self, resolved_path: str, suffix: str = '') -> str:
        return f"{self.assets}/{encode_path(resolved_path)}{suffix}"


DOCS_ROUTES = Routes(docs='/docs', assets='/api/docs-asset')
ABOUT_ROUTES = Routes(docs='/about', assets='/about-asset', single_page=True)


def resolve_relative_path(current_doc_path: str, raw_path: str) -> Optional[str]:
    """Resolve raw_path against the folder of current_doc_path.

    A leading '/' makes raw_path content-root relative. Returns None when a
    '..' would climb above the root or nothing remains after normalization.
    """
    normalized = raw_path.replace('\\', '/')
    if normalized.startswith('/'):
        parts = normalized[1:].split('/')
    else:
        parts = current_doc_path.split('/')[:-1] + normalized.split('/')

    safe: list[str] = []
    for segment in parts:
        if not segment or segment == '.':
            continue
        if segment == '..':
            if not safe:
                return None
            safe.pop()
            continue
        safe.append(segment)

    return '/'.join(safe) or None


def _resolve_path(raw_url: str, current_doc_path: str) -> tuple[Optional[str], str]:
    pathname, suffix = split_path_and_suffix(raw_url)
    if not pathname:
        return None, suffix
    return resolve_relative_path(current_doc_path, unquote(pathname)), suffix


def resolve_href(
    href: str,
    current_doc_path: str,
    doc_paths: AbstractSet[str] = frozenset(),
    routes: Routes = DOCS_ROUTES,
    ) -> str:
    """Map a Markdown link href to a document route, an asset route, or leave it untouched."""
    if not href or EXTERNAL_HREF_RE.match(href):
        return href

    resolved, suffix = _resolve_path(href, current_doc_path)
    if not resolved:
        return href

    lowered = resolved.lower()
    for ext in DOC_EXTENSIONS:
        if lowered.endswith(ext):
            return routes.doc_href(resolved[:-len(ext)].split('/'), suffix)

    if any(f"{resolved}{ext}" in doc_paths for ext in DOC_EXTENSIONS):
        return routes.doc_href(resolved.split('/'), suffix)

    return routes.asset_href(resolved, suffix)


def resolve_image_src(src: str, current_doc_path: str, routes: Routes = DOCS_ROUTES) -> str:
    """Map an image src to the asset route; external and unresolvable srcs pass through."""
    if not src or EXTERNAL_SRC_RE.match(src):
        return src
    resolved, suffix = _resolve_path(src, current_doc_path)
    if not resolved:
        return src
    return routes.asset_href(resolved, suffix)


def resolve_image_file(src: str, current_doc_path: str, content_root: Path) -> Optional[Path]:
    """Filesystem location of a local image, or None for external/unresolvable srcs."""
    if not src or EXTERNAL_SRC_RE.match(src):
        return None
    resolved, _ = _resolve_path(src, current_doc_path)
    if not resolved:
        return None
    return content_root / resolved


def opens_new_tab(href: str) -> bool:
    return bool(OPENS_NEW_TAB_RE.match(href))
