"""Shared fixtures: a small corpus of linked documents."""

import pytest

from sitegraph.core.models import Document, DocumentRow
from sitegraph.core.routes import DEFAULT_ROUTES

EMOTIONAL_SOVEREIGNTY_BODY = """# Emotional Sovereignty

Emotional sovereignty is the practice of owning your internal state regardless of external circumstances.

This builds on [[The Practice of Becoming]].

> [!note]
> This is a core principle that underpins much of the work in personal development.

## Related Ideas

See also [[On Stillness]] for the balance between action and rest.
"""

PRACTICE_OF_BECOMING_BODY = """# The Practice of Becoming

Becoming is not a destination but a practice, a daily commitment to intentional growth.

This practice builds on [[Emotional Sovereignty]] and expands through [[Anchored|the system I built]].
"""

ANCHORED_BODY = """# Anchored

A system for [[emotional-sovereignty|staying grounded]]. Back to [[Anchored]].
"""


def make_row(**overrides) -> DocumentRow:
    data = {
        "id": "01DOC",
        "user_id": "owner",
        "title": "Untitled",
        "slug": "untitled",
        "content_type": "principles",
        "visibility": "public",
        "status": "published",
        "body_md": "",
        "summary": None,
        "order": None,
        "metadata": None,
        "created_at": None,
        "updated_at": None,
        "published_at": None,
    }
    data.update(overrides)
    return DocumentRow(**data)


def make_document(**overrides) -> Document:
    content_type = overrides.get("content_type", "principles")
    slug = overrides.get("slug", "untitled")
    data = {
        "id": "01DOC",
        "title": "Untitled",
        "slug": slug,
        "content_type": content_type,
        "collection": DEFAULT_ROUTES.collection(content_type),
        "visibility": "public",
        "status": "published",
        "canonical": DEFAULT_ROUTES.resolve(content_type, slug),
        "body_md": "",
    }
    data.update(overrides)
    return Document(**data)


@pytest.fixture
def corpus_rows() -> list[DocumentRow]:
    """Raw rows in store order (newest first)."""
    return [
        make_row(
            id="01ES",
            title="Emotional Sovereignty",
            slug="emotional-sovereignty",
            content_type="principles",
            body_md=EMOTIONAL_SOVEREIGNTY_BODY,
            published_at="2024-01-15T10:00:00Z",
        ),
        make_row(
            id="01TPOB",
            title="The Practice of Becoming",
            slug="the-practice-of-becoming",
            content_type="principles",
            body_md=PRACTICE_OF_BECOMING_BODY,
            published_at="2024-01-12T10:00:00Z",
        ),
        make_row(
            id="01ANC",
            title="Anchored",
            slug="anchored",
            content_type="projects",
            body_md=ANCHORED_BODY,
            metadata={"stack": ["python"]},
            published_at="2024-01-10T10:00:00Z",
        ),
        make_row(
            id="01EMPTY",
            title="Untitled Fragment",
            slug="untitled-fragment",
            content_type="fragments",
            body_md=None,
        ),
    ]


@pytest.fixture
def corpus(corpus_rows) -> list[Document]:
    """Documents with canonical and collection computed."""
    from sitegraph.core.pipeline import transform_document

    return [transform_document(row, DEFAULT_ROUTES) for row in corpus_rows]
