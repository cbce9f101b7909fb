"""SiteGraph preview API over built content artifacts."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Form, HTTPException, Request
from fastapi.responses import HTMLResponse

from sitegraph.config import settings
from sitegraph.core.artifacts import ArtifactSet, load_artifacts
from sitegraph.core.backlinks import get_backlinks_for
from sitegraph.core.models import BacklinkEntry, Document
from sitegraph.core.parser import render_markdown, render_markdown_with_toc
from sitegraph.core.routes import DEFAULT_ROUTES
from sitegraph.exceptions import ArtifactError

logger = logging.getLogger(__name__)

_artifacts: ArtifactSet | None = None


def get_artifacts() -> ArtifactSet:
    """Load artifacts from the data directory on first use."""
    global _artifacts
    if _artifacts is None:
        try:
            _artifacts = load_artifacts(settings.data_dir)
        except ArtifactError as e:
            logger.error("Cannot load artifacts from %s: %s", settings.data_dir, e)
            raise HTTPException(status_code=503, detail=str(e)) from e
        logger.info(
            "Loaded %d documents, %d aliases",
            len(_artifacts.documents),
            len(_artifacts.link_index),
        )
    return _artifacts


def reset_artifacts() -> None:
    """Forget cached artifacts so the next request reloads them."""
    global _artifacts
    _artifacts = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: load artifacts up front if they exist."""
    try:
        get_artifacts()
    except HTTPException:
        logger.warning("Starting without artifacts; run `sitegraph build` first")
    yield
    reset_artifacts()


# Initialize app
app = FastAPI(
    title=settings.app_title,
    debug=settings.debug,
    lifespan=lifespan,
)
app.state.routes = DEFAULT_ROUTES


def _normalize_canonical(canonical: str) -> str:
    return "/" + canonical.strip("/")


def _find_document(canonical: str) -> Document | None:
    for doc in get_artifacts().documents:
        if doc.canonical == canonical and doc.is_public:
            return doc
    return None


@app.get("/api/documents")
async def list_documents(collection: str = "") -> list[Document]:
    """List public documents, optionally within one collection."""
    docs = [doc for doc in get_artifacts().documents if doc.is_public]
    if collection:
        docs = [doc for doc in docs if doc.collection == collection]
    return docs


@app.get("/api/documents/{canonical:path}")
async def view_document(canonical: str):
    """A document with its rendered body and backlinks."""
    canonical = _normalize_canonical(canonical)
    doc = _find_document(canonical)
    if doc is None:
        raise HTTPException(status_code=404, detail="Document not found")

    artifacts = get_artifacts()
    html_content, toc_html = render_markdown_with_toc(doc.body_md, artifacts.link_index)
    return {
        "document": doc,
        "html": html_content,
        "toc": toc_html,
        "backlinks": get_backlinks_for(canonical, artifacts.backlinks),
    }


@app.get("/api/backlinks/{canonical:path}")
async def backlinks(canonical: str) -> list[BacklinkEntry]:
    """Backlink entries for a canonical URL."""
    return get_backlinks_for(_normalize_canonical(canonical), get_artifacts().backlinks)


@app.get("/api/sections/{landing}")
async def section(request: Request, landing: str) -> dict[str, list[Document]]:
    """Documents under a landing page, grouped by content type, newest first."""
    landing = _normalize_canonical(landing)
    routes = request.app.state.routes
    if landing not in routes.landing_pages:
        raise HTTPException(status_code=404, detail="Section not found")

    public = [doc for doc in get_artifacts().documents if doc.is_public]
    grouped: dict[str, list[Document]] = {}
    for content_type in routes.content_types_for(landing):
        docs = [doc for doc in public if doc.content_type == content_type]
        if docs:
            grouped[content_type] = sorted(
                docs,
                key=lambda d: d.date.timestamp() if d.date else 0.0,
                reverse=True,
            )
    return grouped


# ========== Editor API ==========


@app.post("/api/preview", response_class=HTMLResponse)
async def api_preview(content: str = Form("")):
    """Render markdown with wiki links resolved against the current index."""
    html = render_markdown(content, get_artifacts().link_index)
    return HTMLResponse(html)


# ========== Graph ==========


@app.get("/api/graph")
async def api_graph():
    """Return the link graph as JSON for visualization."""
    artifacts = get_artifacts()
    nodes = [
        {"id": doc.canonical, "title": doc.title}
        for doc in artifacts.documents
        if doc.is_public
    ]
    links = [
        {"source": entry.canonical, "target": target}
        for target, entries in artifacts.backlinks.items()
        for entry in entries
    ]
    return {"nodes": nodes, "links": links}
