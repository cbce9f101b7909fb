"""Static content pipeline with a wiki-link backlink graph."""

__version__ = "0.1.0"
