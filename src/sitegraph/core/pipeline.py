"""Content build: fetch, derive routing fields, index links, write artifacts."""

import logging
from collections import Counter
from collections.abc import Iterable
from pathlib import Path

from sitegraph.core.artifacts import ArtifactSet, write_artifacts
from sitegraph.core.backlinks import build_backlinks
from sitegraph.core.links import LinkIndex
from sitegraph.core.models import Document, DocumentRow
from sitegraph.core.routes import DEFAULT_ROUTES, RouteTable
from sitegraph.core.store import DocumentStore

logger = logging.getLogger(__name__)


class BuildResult(ArtifactSet):
    """Artifacts of a fresh build."""

    def counts_by_type(self) -> dict[str, int]:
        return dict(Counter(doc.content_type for doc in self.documents))


def transform_document(row: DocumentRow, routes: RouteTable) -> Document:
    """Add canonical URL and collection to a raw row.

    Raises:
        UnknownContentTypeError: If the row's content type has no route.
    """
    return Document(
        id=row.id,
        title=row.title,
        slug=row.slug,
        content_type=row.content_type,
        collection=routes.collection(row.content_type),
        visibility=row.visibility,
        status=row.status,
        canonical=routes.resolve(row.content_type, row.slug),
        body_md=row.body_md or "",
        summary=row.summary,
        metadata=row.metadata,
        created_at=row.created_at,
        updated_at=row.updated_at,
        published_at=row.published_at,
    )


def build_content(
    rows: Iterable[DocumentRow],
    routes: RouteTable = DEFAULT_ROUTES,
) -> BuildResult:
    """Build documents, link index and backlinks from raw rows, in memory."""
    documents = [transform_document(row, routes) for row in rows]
    link_index = LinkIndex.build(documents)
    backlinks = build_backlinks(documents, link_index)
    return BuildResult(documents=documents, link_index=link_index, backlinks=backlinks)


def run_build(
    store: DocumentStore,
    output_dir: Path,
    routes: RouteTable = DEFAULT_ROUTES,
) -> BuildResult | None:
    """Run a full build and write its artifacts.

    Nothing is written unless every step succeeds. Returns None when the
    store has no documents.
    """
    rows = store.fetch_published()
    if not rows:
        logger.warning("No documents found. Check your store data and filters.")
        return None

    result = build_content(rows, routes)
    write_artifacts(output_dir, result)

    logger.info("Built content: %d documents", len(result.documents))
    for content_type, count in result.counts_by_type().items():
        logger.info("  - %s: %d", content_type, count)
    if result.link_index.collisions:
        logger.warning(
            "%d alias collisions, later documents won",
            len(result.link_index.collisions),
        )
    return result
