"""Initialize database command."""

import click

from ..config import get_settings
from ..db import get_db_path, init_db
from .base import async_command, echo_info, echo_success


@click.command()
@async_command
async def init():
    """Initialize the gymdesk database.

    Creates the data directory and the SQLite schema, and stores the default
    weekly session limits.
    """
    settings = get_settings()
    db_path = get_db_path()

    echo_info(f"Initializing gymdesk in {db_path.parent}")
    await init_db(db_path, settings)
    echo_success("Database initialized")
    echo_success(
        f"Weekly limits: studio {settings.studio_weekly_limit}, "
        f"member {settings.member_weekly_limit}"
    )

    click.echo()
    click.echo("gymdesk is ready to use!")
    click.echo()
    click.echo("Next steps:")
    click.echo("  1. Add a member and a subscription:")
    click.echo('     gymdesk members add --first-name Ana --last-name Silva --email ana@example.com')
    click.echo('     gymdesk members subscribe 1 --plan "10 sessions" --sessions 10 --amount 200')
    click.echo()
    click.echo("  2. Record a payment:")
    click.echo("     gymdesk payments record 1 100 --method card")
    click.echo()
    click.echo("  3. Add a trainer (interactive):")
    click.echo("     gymdesk trainers add")
