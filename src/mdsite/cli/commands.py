"""CLI command implementations"""

import json
from pathlib import Path
from typing import Annotated, Optional

import typer

from mdsite.config import Settings, load_config
from mdsite.core.models import FolderNode
from mdsite.core.pipeline import create_snapshot, find_doc_by_slug
from mdsite.core.search import search_entries
from mdsite.core.snapshot import SnapshotCache, compute_version, write_persisted_snapshot
from mdsite.logging_utils import setup_logging


ContentRoot = Annotated[Optional[str], typer.Option("--content-root", help="Docs content directory")]


def _fail(msg: str, cause: Exception = None) -> None:
    """Print a user-friendly error to stderr and exit 1."""
    typer.echo(f"Error: {msg}", err=True)
    if cause:
        typer.echo(f"  {cause}", err=True)
    raise typer.Exit(1)


def _settings(overrides: dict = None) -> Settings:
    """Load config with standard CLI error handling and configure logging."""
    try:
        settings = load_config(overrides=overrides)
    except ValueError as e:
        _fail(str(e))
    setup_logging(settings.log_level)
    return settings


def _cache(settings: Settings) -> SnapshotCache:
    """Read-only cache: reuses a matching snapshot file but never writes one."""
    return SnapshotCache(
        Path(settings.content_root),
        snapshot_path=Path(settings.snapshot_path),
        live=settings.live,
        persist=False,
        preset=settings.parser_config,
    )


def _echo_tree(nodes: list, depth: int = 0) -> None:
    for node in nodes:
        pad = "  " * depth
        if isinstance(node, FolderNode):
            typer.echo(f"{pad}{node.name}/")
            _echo_tree(node.children, depth + 1)
        else:
            typer.echo(f"{pad}{node.name}  ({node.title})")


def build_cmd(
    content_root: ContentRoot = None,
    snapshot: Annotated[Optional[str], typer.Option("--snapshot-path", help="Snapshot file to write")] = None,
    parser: Annotated[Optional[str], typer.Option("--parser-config", help="MarkdownIt preset name")] = None,
    ):
    """Render every document and persist the snapshot for reuse across restarts."""
    settings = _settings(overrides={
        "content_root": content_root, "snapshot_path": snapshot, "parser_config": parser,
    })
    root = Path(settings.content_root)
    snapshot_path = Path(settings.snapshot_path)
    version = compute_version(root)
    try:
        result = create_snapshot(root, settings.parser_config)
    except Exception as e:
        _fail("Build failed", e)
    typer.echo(f"Built {len(result.docs)} document(s) from {root}/")
    typer.echo(f"  fingerprint: files={version.file_count} max_mtime_ms={version.max_mtime_ms:.0f}")
    if not write_persisted_snapshot(snapshot_path, result, version):
        _fail(f"Could not write snapshot to {snapshot_path}")
    typer.echo(f"  snapshot -> {snapshot_path}")


def tree_cmd(content_root: ContentRoot = None):
    """Print the navigation tree."""
    settings = _settings(overrides={"content_root": content_root})
    tree = _cache(settings).get().tree
    if not tree:
        typer.echo("No documents found.")
        raise typer.Exit(1)
    _echo_tree(tree)


def search_cmd(
    query: Annotated[str, typer.Argument(help="Text to look for in titles, descriptions and paths")],
    content_root: ContentRoot = None,
    limit: Annotated[int, typer.Option("--limit", "-n", help="Max results; 0 = unlimited")] = 10,
    ):
    """Search titles, descriptions and paths."""
    settings = _settings(overrides={"content_root": content_root})
    results = search_entries(_cache(settings).get().search_entries, query)
    if not results:
        typer.echo(f"No matches for '{query}'.")
        raise typer.Exit(1)
    for entry in results[:limit or None]:
        typer.echo(f"  {'/'.join(entry.slug)}  {entry.title}")


def show_cmd(
    slug: Annotated[Optional[str], typer.Argument(help="Document slug, e.g. guides/setup")] = None,
    content_root: ContentRoot = None,
    as_json: Annotated[bool, typer.Option("--json", help="Print the full document record as JSON")] = False,
    ):
    """Show one rendered document (the landing document when no slug is given)."""
    settings = _settings(overrides={"content_root": content_root})
    segments = [s for s in (slug or "").split("/") if s]
    doc = find_doc_by_slug(_cache(settings).get().docs, segments)
    if doc is None:
        typer.echo(f"No document found for slug '{slug or ''}'.")
        raise typer.Exit(1)
    if as_json:
        typer.echo(json.dumps(doc.model_dump(mode="json", by_alias=True), indent=2, ensure_ascii=False))
        return
    typer.echo(doc.title)
    if doc.description:
        typer.echo(doc.description)
    for heading in doc.headings:
        typer.echo(f"{'  ' * (heading.level - 2)}- {heading.text} (#{heading.id})")


def serve_cmd(
    content_root: ContentRoot = None,
    host: Annotated[Optional[str], typer.Option("--host", help="Bind address")] = None,
    port: Annotated[Optional[int], typer.Option("--port", help="Bind port")] = None,
    mode: Annotated[Optional[str], typer.Option("--mode", help="live or frozen")] = None,
    ):
    """Serve the docs API with uvicorn."""
    import uvicorn

    from mdsite.api.app import create_app

    settings = _settings(overrides={"content_root": content_root, "host": host, "port": port, "mode": mode})
    app = create_app(settings)
    if not settings.live:
        app.state.cache.warm_up()
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())
