"""Allow-list HTML sanitizer applied to every rendered document"""

import re

from bs4 import BeautifulSoup, Comment


ALLOWED_TAGS = frozenset({
    'h1', 'h2', 'h3', 'h4', 'h5', 'h6',
    'p', 'div', 'span', 'br', 'hr',
    'ul', 'ol', 'li',
    'a', 'strong', 'b', 'em', 'i', 'del', 's', 'mark', 'sub', 'sup', 'small', 'abbr',
    'blockquote', 'pre', 'code',
    'table', 'thead', 'tbody', 'tfoot', 'tr', 'th', 'td', 'caption', 'colgroup', 'col',
    'img', 'figure', 'figcaption',
    'details', 'summary',
    'dl', 'dt', 'dd',
    'input', 'button',
})

ALLOWED_ATTRS = frozenset({
    'href', 'src', 'alt', 'title', 'id', 'class', 'target', 'rel',
    'width', 'height', 'loading', 'type', 'aria-label', 'aria-hidden',
    'colspan', 'rowspan', 'scope', 'checked', 'disabled',
})

# Removed together with everything inside them; other disallowed tags are unwrapped.
DROP_WITH_CONTENT = frozenset({
    'script', 'style', 'iframe', 'object', 'embed', 'template', 'noscript',
    'textarea', 'select', 'svg', 'math', 'frame', 'frameset', 'noembed', 'xmp',
})

URL_ATTRS = frozenset({'href', 'src'})
_UNSAFE_SCHEME_RE = re.compile(r'^\s*(javascript|vbscript|data):', re.IGNORECASE)
_SAFE_DATA_IMAGE_RE = re.compile(r'^\s*data:image/(gif|png|jpeg|webp);', re.IGNORECASE)


def _attr_allowed(tag_name: str, name: str, value) -> bool:
    if name not in ALLOWED_ATTRS:
        return False
    if name in URL_ATTRS and isinstance(value, str) and _UNSAFE_SCHEME_RE.match(value):
        return tag_name == 'img' and name == 'src' and bool(_SAFE_DATA_IMAGE_RE.match(value))
    return True


def sanitize_html(raw_html: str) -> str:
    """Strip every tag and attribute outside the allow-list.

    Dangerous containers (script, style, ...) are removed with their content;
    other unknown tags are replaced by their children. Comments are dropped.
    """
    soup = BeautifulSoup(raw_html, 'html.parser')

    for comment in soup.find_all(string=lambda s: isinstance(s, Comment)):
        comment.extract()

    for tag in soup.find_all(sorted(DROP_WITH_CONTENT)):
        if not tag.decomposed:
            tag.decompose()

    for tag in soup.find_all(True):
        if tag.name not in ALLOWED_TAGS:
            tag.unwrap()
            continue
        tag.attrs = {
            name: value for name, value in tag.attrs.items()
            if _attr_allowed(tag.name, name, value)
        }

    return str(soup)
