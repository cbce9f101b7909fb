"""Exceptions raised by the content build."""


class SiteGraphError(Exception):
    """Base class for errors that abort a build."""


class ConfigurationError(SiteGraphError):
    """A required setting is missing."""

    def __init__(self, variable: str):
        self.variable = variable
        super().__init__(f"Missing required environment variable: {variable}")


class UnknownContentTypeError(SiteGraphError):
    """A document has a content type with no configured route."""

    def __init__(self, content_type: str):
        self.content_type = content_type
        super().__init__(f"Unknown content type: {content_type}")


class DocumentStoreError(SiteGraphError):
    """The document store could not be queried."""


class ArtifactError(SiteGraphError):
    """A build artifact is missing or unreadable."""
