"""HTTP API for gymdesk."""

from .app import create_app

__all__ = ["create_app"]
