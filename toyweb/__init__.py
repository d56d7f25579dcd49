"""A small HTTP server framework: routing, filters, static files and graceful shutdown."""

__version__ = "0.1.0"