"""Backlink graph construction.

For each document, every outbound wiki link that resolves to another
document is recorded on the target as a backlink entry, together with a
short excerpt of the surrounding text.
"""

import logging
from collections.abc import Iterable

from sitegraph.core.links import LinkIndex, iter_wiki_links
from sitegraph.core.models import BacklinkEntry, BacklinkGraph, Document

logger = logging.getLogger(__name__)

EXCERPT_WINDOW = 50


def extract_excerpt(body: str, position: int, window: int = EXCERPT_WINDOW) -> str:
    """Return the text around ``position`` with wiki link brackets removed.

    Args:
        body: Full markdown body.
        position: Character offset of the link.
        window: Characters to keep on each side of ``position``.

    Returns:
        Excerpt, prefixed/suffixed with ``...`` when cut short.
    """
    start = max(0, position - window)
    end = min(len(body), position + window)
    excerpt = body[start:end]

    if start > 0:
        excerpt = "..." + excerpt
    if end < len(body):
        excerpt = excerpt + "..."

    # Removing one pair can join its neighbours into a new pair
    while "[[" in excerpt or "]]" in excerpt:
        excerpt = excerpt.replace("[[", "").replace("]]", "")
    return excerpt.strip()


def build_backlinks(
    documents: Iterable[Document],
    link_index: LinkIndex,
) -> BacklinkGraph:
    """Build the canonical -> backlinks map for all public documents.

    Every public document gets a key, even without backlinks. Unresolved
    targets and self-links are skipped. Entries keep document order, then
    link order within a body; duplicates are kept.
    """
    docs = [doc for doc in documents if doc.is_public and doc.canonical]
    backlinks: BacklinkGraph = {doc.canonical: [] for doc in docs}

    unresolved = 0
    for doc in docs:
        if not doc.body_md:
            continue

        for link in iter_wiki_links(doc.body_md):
            target = link_index.resolve(link.target)
            if target is None:
                unresolved += 1
                continue
            if target == doc.canonical:
                continue

            entry = BacklinkEntry(
                title=doc.title,
                canonical=doc.canonical,
                excerpt=extract_excerpt(doc.body_md, link.position),
            )
            backlinks.setdefault(target, []).append(entry)

    logger.debug(
        "Built backlinks for %d documents (%d unresolved links)",
        len(backlinks),
        unresolved,
    )
    return backlinks


def get_backlinks_for(canonical: str, backlinks: BacklinkGraph) -> list[BacklinkEntry]:
    """Backlinks for a canonical URL, or an empty list."""
    return backlinks.get(canonical, [])
