"""
mdsite HTTP layer - thin FastAPI handlers over the snapshot cache and asset lookup
"""

from pathlib import Path
from typing import Optional

from fastapi import Depends, FastAPI, HTTPException, Query, Request, Response
from fastapi.responses import FileResponse, JSONResponse

from mdsite.config import Settings, load_config
from mdsite.core.assets import ASSET_CACHE_CONTROL, AssetPathError, resolve_asset
from mdsite.core.pipeline import find_doc_by_slug, load_about_page
from mdsite.core.search import search_entries
from mdsite.core.snapshot import SnapshotCache


MANIFEST_CACHE_CONTROL = "public, max-age=300, stale-while-revalidate=1800"


def get_cache(request: Request) -> SnapshotCache:
    return request.app.state.cache


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def _dump(model) -> dict:
    return model.model_dump(mode="json", by_alias=True)


def _serve_asset(root: Path, asset_path: str, request: Request) -> Response:
    try:
        asset = resolve_asset(root, asset_path)
    except AssetPathError as e:
        raise HTTPException(400, detail=str(e))
    except FileNotFoundError:
        raise HTTPException(404, detail="asset not found")

    if request.headers.get("if-none-match") == asset.etag:
        return Response(status_code=304)

    return FileResponse(
        asset.path,
        media_type=asset.mime_type,
        headers={
            "Cache-Control": ASSET_CACHE_CONTROL,
            "ETag": asset.etag,
            "Last-Modified": asset.last_modified,
        },
    )


def create_app(settings: Optional[Settings] = None, cache: Optional[SnapshotCache] = None) -> FastAPI:
    """Build the app; the cache is created from settings unless one is injected."""
    settings = settings or load_config()
    app = FastAPI(title=settings.app_name, description="Markdown documentation site", version="0.1.0")
    app.state.settings = settings
    app.state.cache = cache or SnapshotCache(
        Path(settings.content_root),
        snapshot_path=Path(settings.snapshot_path),
        live=settings.live,
        persist=settings.persist_snapshot,
        preset=settings.parser_config,
    )

    @app.get("/api/docs-manifest")
    def docs_manifest(cache: SnapshotCache = Depends(get_cache)):
        """Navigation tree and search index for the client shell"""
        snapshot = cache.get()
        return JSONResponse(
            {
                "searchEntries": [_dump(e) for e in snapshot.search_entries],
                "tree": [_dump(n) for n in snapshot.tree],
            },
            headers={"Cache-Control": MANIFEST_CACHE_CONTROL},
        )

    @app.get("/api/docs")
    @app.get("/api/docs/{slug:path}")
    def get_doc(slug: str = "", cache: SnapshotCache = Depends(get_cache)):
        """Rendered document for a slug; empty slug returns the landing document."""
        segments = [s for s in slug.split("/") if s]
        doc = find_doc_by_slug(cache.get().docs, segments)
        if doc is None:
            raise HTTPException(404, detail="document not found")
        return _dump(doc)

    @app.get("/api/docs-search")
    def search(q: str = Query("", description="Search text"), cache: SnapshotCache = Depends(get_cache)):
        return {"results": [_dump(e) for e in search_entries(cache.get().search_entries, q)]}

    @app.get("/api/docs-asset/{asset_path:path}")
    def docs_asset(asset_path: str, request: Request, settings: Settings = Depends(get_settings)):
        return _serve_asset(Path(settings.content_root), asset_path, request)

    @app.get("/api/about")
    def about(settings: Settings = Depends(get_settings)):
        page = load_about_page(Path(settings.about_root), settings.parser_config)
        if page is None:
            raise HTTPException(404, detail="about page not found")
        return _dump(page)

    @app.get("/about-asset/{asset_path:path}")
    def about_asset(asset_path: str, request: Request, settings: Settings = Depends(get_settings)):
        return _serve_asset(Path(settings.about_root), asset_path, request)

    return app
