"""Route table mapping content types to URL paths."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from sitegraph.exceptions import UnknownContentTypeError


@dataclass(frozen=True)
class RouteTable:
    """Immutable content-type -> base-path table.

    Canonical URLs are ``{base_path}/{slug}``. Slugs are assumed to be
    URL-safe already; nothing is escaped.
    """

    routes: Mapping[str, str]
    landing_pages: tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "routes", MappingProxyType(dict(self.routes)))

    def base_path(self, content_type: str) -> str:
        try:
            return self.routes[content_type]
        except KeyError:
            raise UnknownContentTypeError(content_type) from None

    def resolve(self, content_type: str, slug: str) -> str:
        """Build the canonical URL path for a document."""
        return f"{self.base_path(content_type)}/{slug}"

    def collection(self, content_type: str) -> str:
        """Storage path for a content type, e.g. ``library/principles``."""
        return self.base_path(content_type).lstrip("/")

    def content_types_for(self, landing: str) -> list[str]:
        """Content types whose base path sits under a landing page."""
        prefix = landing.rstrip("/")
        return [
            content_type
            for content_type, path in self.routes.items()
            if path.startswith(f"{prefix}/")
        ]


DEFAULT_ROUTES = RouteTable(
    routes={
        "principles": "/library/principles",
        "fragments": "/library/fragments",
        "essays": "/library/essays",
        "directives": "/library/directives",
        "everyday": "/library/everyday",
        "references": "/library/references",
        "books": "/library/books",
        "linked": "/library/linked",
        "projects": "/engineer/projects",
        "notes": "/engineer/notes",
        "poetry": "/artist/poetry",
        "artwork": "/artist/artwork",
        "broadcasts": "/mentor/broadcasts",
        "letters": "/mentor/letters",
        "diary": "/private/diary",
    },
    landing_pages=("/library", "/engineer", "/artist", "/mentor"),
)
