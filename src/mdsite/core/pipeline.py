"""Pipeline step functions: read -> render -> assemble snapshot, plus route lookups"""

import logging
from pathlib import Path
from typing import Optional, Sequence

from mdsite.core.models import AboutPage, DocRecord, FrontMatter, Snapshot
from mdsite.core.parse import description_from_content, read_docs, strip_frontmatter, title_from_content
from mdsite.core.render import render_markdown
from mdsite.core.resolve import ABOUT_ROUTES, DOCS_ROUTES
from mdsite.core.search import build_search_entries
from mdsite.core.tree import build_docs_tree


logger = logging.getLogger(__name__)

WELCOME_DOC = 'getting-started/welcome.md'
ABOUT_ENTRY = 'about.md'


def create_snapshot(content_root: Path, preset: str = 'gfm-like') -> Snapshot:
    """Read, render and index every document under content_root.

    A missing content_root yields an empty snapshot.
    """
    if not content_root.is_dir():
        logger.info("Content root %s not found; serving an empty snapshot", content_root)
        return Snapshot()

    raw_docs = read_docs(content_root)
    doc_paths = frozenset(d.rel_path for d in raw_docs)

    docs = []
    for raw in raw_docs:
        rendered = render_markdown(
            raw.content, raw.rel_path, content_root, doc_paths, DOCS_ROUTES,
            root_relative=True, preset=preset,
        )
        docs.append(DocRecord(
            rel_path=raw.rel_path,
            slug=raw.slug,
            title=raw.title,
            description=raw.description,
            date=raw.date,
            content_html=rendered.html,
            headings=rendered.headings,
        ))

    logger.info("Rendered %d document(s) from %s", len(docs), content_root)
    return Snapshot(
        docs=docs,
        slugs=[list(d.slug) for d in docs],
        tree=build_docs_tree(docs),
        search_entries=build_search_entries(docs),
    )


def find_doc_by_slug(docs: Sequence[DocRecord], slug: Optional[Sequence[str]] = None) -> Optional[DocRecord]:
    """Document for a route slug; an empty slug picks the landing document.

    Landing preference: getting-started/welcome.md, then any */README.md,
    then the first document.
    """
    if not docs:
        return None

    if slug:
        key = '/'.join(slug)
        return next((d for d in docs if '/'.join(d.slug) == key), None)

    return (
        next((d for d in docs if d.rel_path == WELCOME_DOC), None)
        or next((d for d in docs if d.rel_path.endswith('/README.md')), None)
        or docs[0]
    )


def load_about_page(about_root: Path, preset: str = 'gfm-like') -> Optional[AboutPage]:
    """Render about_root/about.md; links to other Markdown files collapse onto /about."""
    entry = about_root / ABOUT_ENTRY
    if not entry.is_file():
        return None

    data, content = strip_frontmatter(entry.read_text(encoding='utf-8'))
    meta = FrontMatter.model_validate(data)
    rendered = render_markdown(
        content, ABOUT_ENTRY, about_root, routes=ABOUT_ROUTES,
        root_relative=False, preset=preset,
    )
    return AboutPage(
        title=meta.title or title_from_content(content) or 'About',
        description=meta.description or description_from_content(content),
        date=meta.date,
        rel_path=ABOUT_ENTRY,
        content_html=rendered.html,
    )
