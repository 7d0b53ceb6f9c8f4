"""Obsidian embed rewriting: ![[target|alt]] -> ![alt](target)"""

import re


EMBED_RE = re.compile(r'!\[\[([^\]|]+?)(?:\|([^\]]+))?\]\]')


def _normalize_target(raw: str) -> str:
    target = raw.strip().replace('\\', '/')
    target = target.lstrip('/')
    if target.startswith('./'):
        target = target[2:]
    return target


def preprocess_obsidian_markdown(markdown: str, root_relative: bool = False) -> str:
    """Convert Obsidian image embeds into standard Markdown image syntax.

    With root_relative=True the target gains a leading '/' so link resolution
    starts at the content root instead of the embedding document's folder.
    Targets containing whitespace are wrapped in <...> so they remain a valid
    CommonMark link destination.
    """
    def _replace(m: re.Match) -> str:
        target = _normalize_target(m.group(1))
        alt = (m.group(2) or '').strip()
        if root_relative:
            target = f"/{target}"
        if re.search(r'\s', target):
            target = f"<{target}>"
        return f"![{alt}]({target})"

    return EMBED_RE.sub(_replace, markdown)
