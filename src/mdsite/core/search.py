"""Lightweight search index and weighted substring scorer"""

from typing import Iterable

from mdsite.core.models import DocRecord, DocSearchEntry


TITLE_WEIGHT = 3
PATH_WEIGHT = 2
ANYWHERE_WEIGHT = 1


def build_search_entries(docs: Iterable[DocRecord]) -> list[DocSearchEntry]:
    return [
        DocSearchEntry(rel_path=d.rel_path, slug=list(d.slug), title=d.title, description=d.description)
        for d in docs
    ]


def score_entry(entry: DocSearchEntry, query: str) -> int:
    """Additive score for an already trimmed, lowercased query; 0 means no match."""
    haystack = f"{entry.title} {entry.description} {entry.rel_path}".lower()
    score = 0
    if query in entry.title.lower():
        score += TITLE_WEIGHT
    if query in entry.rel_path.lower():
        score += PATH_WEIGHT
    if query in haystack:
        score += ANYWHERE_WEIGHT
    return score


def search_entries(entries: Iterable[DocSearchEntry], query: str) -> list[DocSearchEntry]:
    """Entries matching query, best score first; ties keep index order."""
    query = query.strip().lower()
    if not query:
        return []
    scored = [(score_entry(e, query), e) for e in entries]
    ranked = sorted((item for item in scored if item[0] > 0), key=lambda item: -item[0])
    return [e for _, e in ranked]
