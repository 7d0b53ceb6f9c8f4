"""POSIX path, URL and HTML attribute helpers shared by the docs and about pipelines"""

import re
from urllib.parse import quote


DOC_EXTENSIONS = ('.md', '.mdx')

_DOC_EXT_RE = re.compile(r'\.(md|mdx)$', re.IGNORECASE)


def to_posix_path(path: str) -> str:
    return path.replace('\\', '/')


def strip_doc_extension(path: str) -> str:
    """Drop a trailing .md/.mdx (any case) from path."""
    return _DOC_EXT_RE.sub('', path)


def encode_path(pathname: str) -> str:
    """Percent-encode each '/'-separated segment, keeping the separators."""
    return '/'.join(quote(segment, safe="!'()*") for segment in pathname.split('/'))


def split_path_and_suffix(raw_url: str) -> tuple[str, str]:
    """Split raw_url at the first '?' or '#' into (pathname, suffix)."""
    indexes = [i for i in (raw_url.find('?'), raw_url.find('#')) if i != -1]
    if not indexes:
        return raw_url, ''
    split = min(indexes)
    return raw_url[:split], raw_url[split:]


def escape_html_attribute(value: str) -> str:
    return (
        value.replace('&', '&amp;')
        .replace('"', '&quot;')
        .replace('<', '&lt;')
        .replace('>', '&gt;')
    )
