"""File discovery, front-matter extraction, and title/description fallbacks"""

import logging
import re
from pathlib import Path
from typing import Any

import yaml

from mdsite.core.models import FrontMatter, RawDoc
from mdsite.core.utils.collate import collation_key
from mdsite.core.utils.paths import DOC_EXTENSIONS, strip_doc_extension, to_posix_path


logger = logging.getLogger(__name__)

FRONTMATTER_RE = re.compile(r'^---[ \t]*\r?\n(?:(.*?)\r?\n)??---[ \t]*(?:\r?\n|$)', re.DOTALL)
TITLE_RE = re.compile(r'^#\s+(.+)$', re.MULTILINE)
_DESCRIPTION_SKIP = ('#', '![', '---', '```')
_EMPHASIS_RE = re.compile(r'[*_`>#-]')


def strip_frontmatter(text: str) -> tuple[dict[str, Any], str]:
    """Return (frontmatter_dict, body) with the YAML header removed.

    Invalid or non-mapping YAML is logged and treated as empty front-matter;
    the header block is still stripped from the body.
    """
    m = FRONTMATTER_RE.match(text)
    if not m:
        return {}, text
    body = text[m.end():]
    if m.group(1) is None:
        return {}, body
    try:
        fm = yaml.safe_load(m.group(1)) or {}
    except yaml.YAMLError as e:
        logger.warning("Ignoring invalid YAML front-matter: %s", e)
        return {}, body
    if not isinstance(fm, dict):
        logger.warning("Ignoring front-matter of type %s; expected a mapping", type(fm).__name__)
        return {}, body
    return fm, body


def title_from_content(content: str) -> str:
    """First level-1 ATX heading text, or ''."""
    m = TITLE_RE.search(content)
    return m.group(1).strip() if m else ''


def description_from_content(content: str) -> str:
    """First prose line: skips headings, images, rules and code fences; strips emphasis marks."""
    for line in content.split('\n'):
        line = line.strip()
        if not line or line.startswith(_DESCRIPTION_SKIP):
            continue
        return _EMPHASIS_RE.sub('', line).strip()
    return ''


def is_doc_file(path: Path) -> bool:
    return path.suffix.lower() in DOC_EXTENSIONS


def discover_files(root: Path, current: str = '') -> list[str]:
    """Return POSIX paths (relative to root) of every .md/.mdx file below root."""
    found: list[str] = []
    stack = [current]
    while stack:
        rel_dir = stack.pop()
        entries = sorted((root / rel_dir).iterdir(), key=lambda p: collation_key(p.name))
        subdirs = []
        for entry in entries:
            rel = to_posix_path(f"{rel_dir}/{entry.name}" if rel_dir else entry.name)
            if entry.is_symlink() and entry.is_dir():
                logger.debug("Skipping symlinked directory %s", rel)
                continue
            if entry.is_dir():
                subdirs.append(rel)
            elif is_doc_file(entry):
                found.append(rel)
        stack.extend(reversed(subdirs))
    return found


def parse_doc(rel_path: str, source: str) -> RawDoc:
    """Resolve title/description/date for one document source text."""
    data, content = strip_frontmatter(source)
    meta = FrontMatter.model_validate(data)
    file_name = rel_path.rsplit('/', 1)[-1]
    return RawDoc(
        rel_path=rel_path,
        slug=strip_doc_extension(rel_path).split('/'),
        title=meta.title or title_from_content(content) or strip_doc_extension(file_name),
        description=meta.description or description_from_content(content),
        date=meta.date,
        content=content,
    )


def read_docs(root: Path) -> list[RawDoc]:
    """Read and parse every document under root, sorted by collated rel_path.

    Invalid UTF-8 bytes are replaced; a file that cannot be read is logged and skipped.
    """
    docs = []
    for rel in discover_files(root):
        try:
            source = (root / rel).read_text(encoding='utf-8', errors='replace')
        except OSError as e:
            logger.warning("Skipping unreadable document %s: %s", rel, e)
            continue
        docs.append(parse_doc(rel, source))
    return sorted(docs, key=lambda d: collation_key(d.rel_path))
