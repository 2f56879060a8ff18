"""HTTP API for the HTML PDF Studio."""

from .app import app, create_app

__all__ = ["app", "create_app"]
