"""Data contracts for rendered documents, navigation tree, search index and snapshots"""

from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


SNAPSHOT_SCHEMA_VERSION = 2


class CamelModel(BaseModel):
    """Base model whose JSON form uses camelCase keys (relPath, contentHtml, ...)."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class FrontMatter(BaseModel):
    """Recognized front-matter keys; anything else in the YAML block is ignored."""
    title:       Optional[str] = None
    description: Optional[str] = None
    date:        str = ''

    @field_validator('title', 'description', mode='before')
    @classmethod
    def _only_strings(cls, value: Any) -> Optional[str]:
        if isinstance(value, str):
            return value.strip() or None
        return None

    @field_validator('date', mode='before')
    @classmethod
    def _normalize_date(cls, value: Any) -> str:
        return normalize_date(value)


def normalize_date(raw: Any) -> str:
    """Return an ISO date for date/datetime values, strings verbatim, else ''."""
    if isinstance(raw, datetime):
        if raw.tzinfo is not None:
            raw = raw.astimezone(timezone.utc)
        return raw.date().isoformat()
    if isinstance(raw, date):
        return raw.isoformat()
    if isinstance(raw, str):
        return raw
    return ''


class DocHeading(CamelModel):
    id:    str
    level: int
    text:  str


class DocRecord(CamelModel):
    """A rendered document; rel_path is the unique key within one content root."""
    rel_path:     str
    slug:         list[str]
    title:        str
    description:  str
    date:         str = ''
    content_html: str
    headings:     list[DocHeading] = []


class DocSearchEntry(CamelModel):
    rel_path:    str
    slug:        list[str]
    title:       str
    description: str


class FileNode(CamelModel):
    type:     Literal['file'] = 'file'
    name:     str
    key:      str
    rel_path: str
    slug:     list[str]
    title:    str


class FolderNode(CamelModel):
    type:     Literal['folder'] = 'folder'
    name:     str
    key:      str
    children: list['DocTreeNode'] = Field(default_factory=list)


DocTreeNode = Annotated[Union[FolderNode, FileNode], Field(discriminator='type')]
FolderNode.model_rebuild()


class DocsVersion(CamelModel):
    """Coarse content fingerprint: file count and newest modification time."""
    model_config = ConfigDict(frozen=True)
    file_count:   int = 0
    max_mtime_ms: float = 0


class SnapshotMeta(CamelModel):
    created_at:     str
    schema_version: int
    version:        DocsVersion


class Snapshot(CamelModel):
    docs:           list[DocRecord] = []
    slugs:          list[list[str]] = []
    tree:           list[DocTreeNode] = []
    search_entries: list[DocSearchEntry] = []
    meta:           Optional[SnapshotMeta] = Field(default=None, alias='__meta')


class AboutPage(CamelModel):
    title:        str
    description:  str
    date:         str
    rel_path:     str
    content_html: str


@dataclass
class RawDoc:
    """Front-matter resolved document before rendering; not persisted."""
    rel_path:    str
    slug:        list[str]
    title:       str
    description: str
    date:        str
    content:     str            # body only (front-matter stripped)
