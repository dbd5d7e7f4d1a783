"""CLI entry point for gymdesk."""

import click

from . import __version__
from .commands import init, members, payments, serve, sessions, trainers
from .logging_config import configure_logging


@click.group()
@click.version_option(version=__version__, prog_name="gymdesk")
def main():
    """gymdesk: gym studio administration.

    Members, subscriptions, payments and refunds, trainers and training
    sessions with weekly booking limits.

    Example usage:

        # Initialize the database
        gymdesk init

        # Add a member and start a subscription
        gymdesk members add --first-name Ana --last-name Silva --email ana@example.com
        gymdesk members subscribe 1 --plan "10 sessions" --sessions 10 --amount 200

        # Take a payment, then refund part of it
        gymdesk payments record 1 100 --method card
        gymdesk payments refund 1 20 --reason "Overcharged"

        # Book a session
        gymdesk sessions book --member 1 --start 2025-10-20T18:00
    """
    pass


# Register commands
main.add_command(init)
main.add_command(members)
main.add_command(payments)
main.add_command(trainers)
main.add_command(sessions)
main.add_command(serve)


def run():
    """Run the CLI with logging configured from the environment."""
    configure_logging()
    main()


if __name__ == "__main__":
    run()
