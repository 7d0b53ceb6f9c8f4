"""Heading slug generation for in-page anchors"""

import re


_PUNCTUATION_RE = re.compile(r'[`~!@#$%^&*()+={}\[\]|\\:;"\'<>,.?/]')


def slugify(text: str) -> str:
    """Convert heading text to a lowercase, hyphen-separated anchor id.

    Punctuation is deleted rather than replaced, so 'API: v2' becomes 'api-v2'.
    Underscores and non-ASCII letters are kept.
    """
    text = text.lower().strip()
    text = _PUNCTUATION_RE.sub('', text)
    text = re.sub(r'\s+', '-', text)
    return re.sub(r'-+', '-', text)
