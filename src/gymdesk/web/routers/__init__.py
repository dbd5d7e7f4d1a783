"""API routers."""

from pathlib import Path

from fastapi import Request


def get_db_path(request: Request) -> Path:
    """Database path the app was created with."""
    return request.app.state.db_path
