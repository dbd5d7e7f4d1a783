"""CLI commands for gymdesk."""

from .init import init
from .members import members
from .payments import payments
from .serve import serve
from .sessions import sessions
from .trainers import trainers

__all__ = [
    "init",
    "members",
    "payments",
    "serve",
    "sessions",
    "trainers",
]
