"""Shared CLI utilities."""

import asyncio
from datetime import date, datetime
from functools import wraps

import click

from ..db import get_db_path
from ..errors import GymdeskError


def async_command(f):
    """Decorator to run async Click commands.

    gymdesk errors are reported with ``echo_error`` and exit with status 1.
    """

    @wraps(f)
    def wrapper(*args, **kwargs):
        try:
            return asyncio.run(f(*args, **kwargs))
        except GymdeskError as e:
            echo_error(e.message)
            for field_name, message in getattr(e, "errors", {}).items():
                click.echo(f"  {field_name}: {message}")
            raise click.exceptions.Exit(1)

    return wrapper


def ensure_initialized(ctx: click.Context) -> None:
    """Ensure the database is initialized."""
    db_path = get_db_path()
    if not db_path.exists():
        click.echo(
            click.style("Error: ", fg="red")
            + "Database not initialized. Run 'gymdesk init' first."
        )
        ctx.exit(1)


def parse_date(value: str | None) -> date | None:
    """Parse an optional YYYY-MM-DD option value."""
    if not value:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise click.BadParameter(f"Invalid date '{value}', expected YYYY-MM-DD")


def parse_datetime(value: str) -> datetime:
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        raise click.BadParameter(f"Invalid datetime '{value}', expected YYYY-MM-DDTHH:MM")


def echo_success(message: str) -> None:
    """Print a success message."""
    click.echo(click.style("[OK] ", fg="green") + message)


def echo_error(message: str) -> None:
    """Print an error message."""
    click.echo(click.style("[ERROR] ", fg="red") + message)


def echo_info(message: str) -> None:
    """Print an info message."""
    click.echo(click.style("[INFO] ", fg="blue") + message)


def echo_warning(message: str) -> None:
    """Print a warning message."""
    click.echo(click.style("[WARN] ", fg="yellow") + message)


def format_money(value: float) -> str:
    return f"-${-value:,.2f}" if value < 0 else f"${value:,.2f}"


def format_table(headers: list[str], rows: list[list[str]], padding: int = 2) -> str:
    """Format data as a simple aligned table."""
    if not rows:
        return ""

    widths = [len(h) for h in headers]
    for row in rows:
        for i, cell in enumerate(row):
            widths[i] = max(widths[i], len(str(cell)))

    def _line(cells) -> str:
        return "".join(str(cell).ljust(widths[i] + padding) for i, cell in enumerate(cells))

    lines = [_line(headers), "".join("-" * w + " " * padding for w in widths)]
    lines.extend(_line(row) for row in rows)
    return "\n".join(line.rstrip() for line in lines)
