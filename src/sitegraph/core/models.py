"""Data models for SiteGraph."""

from datetime import datetime
from typing import Annotated, Any, Literal

from pydantic import AfterValidator, BaseModel, ConfigDict

Visibility = Literal["public", "supporter", "1v1", "private"]
Status = Literal["draft", "published", "archived"]


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO 8601 timestamp as the store writes it."""
    return datetime.fromisoformat(value)


def _check_timestamp(value: str) -> str:
    parse_timestamp(value)
    return value


# Validated as ISO 8601 but kept in the store's own text form
Timestamp = Annotated[str, AfterValidator(_check_timestamp)]


class DocumentRow(BaseModel):
    """Raw document row as returned by the document store."""

    model_config = ConfigDict(extra="ignore")

    id: str
    user_id: str | None = None
    title: str
    slug: str
    content_type: str
    visibility: Visibility
    status: Status
    body_md: str | None = None
    summary: str | None = None
    order: int | None = None
    metadata: dict[str, Any] | None = None
    created_at: Timestamp | None = None
    updated_at: Timestamp | None = None
    published_at: Timestamp | None = None


class Document(BaseModel):
    """A published document with its computed canonical URL and collection."""

    id: str
    title: str
    slug: str
    content_type: str
    collection: str
    visibility: Visibility
    status: Status
    canonical: str
    body_md: str = ""
    summary: str | None = None
    metadata: dict[str, Any] | None = None
    created_at: Timestamp | None = None
    updated_at: Timestamp | None = None
    published_at: Timestamp | None = None

    @property
    def is_public(self) -> bool:
        """Whether the document takes part in the link index and backlinks."""
        return self.visibility == "public" and self.status == "published"

    @property
    def date(self) -> datetime | None:
        """Best available date: published, then updated, then created."""
        value = self.published_at or self.updated_at or self.created_at
        return parse_timestamp(value) if value else None


class BacklinkEntry(BaseModel):
    """A document that links to another, with context around the link."""

    title: str
    canonical: str
    excerpt: str = ""


BacklinkGraph = dict[str, list[BacklinkEntry]]
