"""Markdown -> sanitized HTML with heading ids, code containers, and resolved links/images"""

import logging
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import AbstractSet, Optional

from markdown_it import MarkdownIt
from markdown_it.common.utils import escapeHtml
from PIL import Image

from mdsite.core.embeds import preprocess_obsidian_markdown
from mdsite.core.models import DocHeading
from mdsite.core.resolve import (
    DOCS_ROUTES,
    Routes,
    opens_new_tab,
    resolve_href,
    resolve_image_file,
    resolve_image_src,
)
from mdsite.core.sanitize import sanitize_html
from mdsite.core.utils.paths import escape_html_attribute
from mdsite.core.utils.slug import slugify
from mdsite.core.utils.tokens import heading_level, inline_text


logger = logging.getLogger(__name__)

TOC_LEVELS = (2, 3)


@dataclass
class RenderResult:
    html: str
    headings: list[DocHeading] = field(default_factory=list)


def _attr(token, name: str) -> str:
    value = token.attrGet(name)
    return '' if value is None else str(value)


def _render_heading_open(self, tokens, idx, options, env):
    token = tokens[idx]
    text = inline_text(tokens[idx + 1]).strip()
    base = slugify(text) or 'section'
    count = env['heading_counts'].get(base, 0)
    env['heading_counts'][base] = count + 1
    heading_id = f"{base}-{count}" if count else base

    level = heading_level(token)
    if level in TOC_LEVELS:
        env['headings'].append(DocHeading(id=heading_id, level=level, text=text))
    return f'<{token.tag} id="{escape_html_attribute(heading_id)}">'


def _render_code_block(self, tokens, idx, options, env):
    token = tokens[idx]
    info = token.info.strip() if token.info else ''
    language = info.split(maxsplit=1)[0] if info else ''
    lang_label = (
        f'<span class="docs-code-lang">{escape_html_attribute(language.upper())}</span>'
        if language else ''
    )
    code = token.content[:-1] if token.content.endswith('\n') else token.content
    return ''.join([
        '<div class="docs-code-block">',
        '<div class="docs-code-header">',
        lang_label,
        '<button class="docs-code-copy" type="button" aria-label="Copy code">Copy</button>',
        '</div>',
        f'<pre class="docs-code-pre"><code>{escapeHtml(code)}</code></pre>',
        '</div>',
    ])


def _render_code_inline(self, tokens, idx, options, env):
    return f'<code class="docs-inline-code">{escapeHtml(tokens[idx].content)}</code>'


def _render_link_open(self, tokens, idx, options, env):
    token = tokens[idx]
    href = resolve_href(_attr(token, 'href'), env['rel_path'], env['doc_paths'], env['routes'])
    attrs = [f'href="{escape_html_attribute(href)}"']
    if opens_new_tab(href):
        attrs += ['target="_blank"', 'rel="noreferrer noopener"']
    title = _attr(token, 'title')
    if title:
        attrs.append(f'title="{escape_html_attribute(title)}"')
    return f"<a {' '.join(attrs)}>"


def image_size(path: Optional[Path]) -> Optional[tuple[int, int]]:
    """Pixel (width, height) of an image file, or None if missing or unreadable."""
    if path is None or not path.is_file():
        return None
    try:
        with Image.open(path) as img:
            width, height = img.size
    except (OSError, ValueError, Image.DecompressionBombError) as e:
        logger.debug("Cannot read image size of %s: %s", path, e)
        return None
    return (width, height) if width and height else None


def _render_image(self, tokens, idx, options, env):
    token = tokens[idx]
    raw_src = _attr(token, 'src')
    src = resolve_image_src(raw_src, env['rel_path'], env['routes'])
    alt = self.renderInlineAsText(token.children or [], options, env)

    attrs = [f'src="{escape_html_attribute(src)}"', f'alt="{escape_html_attribute(alt)}"']
    if env['content_root'] is not None:
        size = image_size(resolve_image_file(raw_src, env['rel_path'], env['content_root']))
        if size:
            attrs += [f'width="{size[0]}"', f'height="{size[1]}"']
    attrs.append('loading="lazy"')
    title = _attr(token, 'title')
    if title:
        attrs.append(f'title="{escape_html_attribute(title)}"')
    return f'<img class="docs-image" {" ".join(attrs)} />'


@lru_cache(maxsize=None)
def make_parser(preset: str = 'gfm-like') -> MarkdownIt:
    """MarkdownIt instance with the docs render hooks installed; hooks keep state in env only."""
    md = MarkdownIt(preset, options_update={"linkify": False})
    md.add_render_rule('heading_open', _render_heading_open)
    md.add_render_rule('fence', _render_code_block)
    md.add_render_rule('code_block', _render_code_block)
    md.add_render_rule('code_inline', _render_code_inline)
    md.add_render_rule('link_open', _render_link_open)
    md.add_render_rule('image', _render_image)
    return md


def render_markdown(
    markdown: str,
    rel_path: str,
    content_root: Optional[Path] = None,
    doc_paths: AbstractSet[str] = frozenset(),
    routes: Routes = DOCS_ROUTES,
    root_relative: bool = True,
    preset: str = 'gfm-like',
    ) -> RenderResult:
    """Render one document body to sanitized HTML plus its level-2/3 headings.

    rel_path anchors relative links; doc_paths lets extension-less links reach
    sibling documents; content_root enables width/height on local images.
    """
    env = {
        'rel_path': rel_path,
        'content_root': content_root,
        'doc_paths': doc_paths,
        'routes': routes,
        'heading_counts': {},
        'headings': [],
    }
    source = preprocess_obsidian_markdown(markdown, root_relative)
    raw_html = make_parser(preset).render(source, env)
    return RenderResult(html=sanitize_html(raw_html), headings=env['headings'])
