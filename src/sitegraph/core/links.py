"""Wiki link extraction and the alias index used to resolve link targets."""

import logging
import re
from collections.abc import Iterable, Iterator
from typing import NamedTuple

from sitegraph.core.models import Document

logger = logging.getLogger(__name__)

# Pattern for wiki links: [[Target]] or [[Target|Display Text]]
WIKI_LINK_PATTERN = r"\[\[([^\]|]+)(?:\|([^\]]+))?\]\]"
WIKI_LINK_RE = re.compile(WIKI_LINK_PATTERN)


class WikiLink(NamedTuple):
    """A single [[...]] occurrence in a markdown body."""

    target: str
    display: str | None
    position: int


class AliasCollision(NamedTuple):
    """A key that was re-pointed from one canonical to another."""

    key: str
    previous: str
    current: str


def normalize_key(value: str) -> str:
    """Normalize a title, slug, id or link target for lookup."""
    return value.lower().strip()


def iter_wiki_links(body: str) -> Iterator[WikiLink]:
    """Yield wiki links in ``body`` from left to right.

    Unterminated or stray brackets simply do not match.
    """
    for m in WIKI_LINK_RE.finditer(body):
        yield WikiLink(target=m.group(1), display=m.group(2), position=m.start())


def extract_wiki_links(body: str) -> list[WikiLink]:
    """Extract all wiki links from a markdown body."""
    return list(iter_wiki_links(body))


class LinkIndex:
    """Case-insensitive map from titles, slugs and ids to canonical URLs.

    When two documents share a key, the one registered later wins. Every
    such overwrite is kept in ``collisions``.
    """

    def __init__(self, entries: dict[str, str] | None = None):
        self._entries: dict[str, str] = dict(entries or {})
        self.collisions: list[AliasCollision] = []

    @classmethod
    def build(cls, documents: Iterable[Document]) -> "LinkIndex":
        """Build an index from documents in the given order."""
        index = cls()
        for doc in documents:
            if not doc.canonical or not doc.is_public:
                continue
            for value in (doc.title, doc.slug, doc.id):
                if value:
                    index.add(value, doc.canonical)
        return index

    def add(self, alias: str, canonical: str) -> None:
        """Register an alias, overwriting any previous canonical."""
        key = normalize_key(alias)
        if not key:
            return
        previous = self._entries.get(key)
        if previous is not None and previous != canonical:
            logger.warning(
                "Alias %r re-pointed from %s to %s", key, previous, canonical
            )
            self.collisions.append(AliasCollision(key, previous, canonical))
        self._entries[key] = canonical

    def resolve(self, target: str) -> str | None:
        """Resolve a link target to a canonical URL, or None if not found."""
        return self._entries.get(normalize_key(target))

    def get(self, key: str, default: str | None = None) -> str | None:
        return self._entries.get(key, default)

    def canonicals(self) -> set[str]:
        return set(self._entries.values())

    def to_json(self) -> dict[str, str]:
        """Flat key -> canonical mapping for persistence."""
        return dict(self._entries)

    @classmethod
    def from_json(cls, data: dict[str, str]) -> "LinkIndex":
        """Restore an index written by ``to_json``."""
        return cls({str(k): str(v) for k, v in data.items()})

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, LinkIndex):
            return NotImplemented
        return self._entries == other._entries

    def __repr__(self) -> str:
        return f"LinkIndex({len(self._entries)} entries)"
