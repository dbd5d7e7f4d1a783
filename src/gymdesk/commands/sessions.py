"""Training session commands."""

from datetime import date, timedelta
from pathlib import Path

import click

from ..exports import session_csv_filename, sessions_to_csv
from ..models.training_session import SessionType
from ..schemas import SessionCreate, validate_input
from ..services import (
    SessionLimitService,
    TrainingSessionService,
    get_capacity_color_scheme,
    get_week_range,
)
from .base import (
    async_command,
    echo_info,
    echo_success,
    echo_warning,
    ensure_initialized,
    format_table,
    parse_date,
    parse_datetime,
)


@click.group()
@click.pass_context
def sessions(ctx):
    """Book and manage training sessions."""
    ensure_initialized(ctx)


@sessions.command()
@click.option("--start", required=True, help="Start YYYY-MM-DDTHH:MM")
@click.option("--duration", type=int, default=60, help="Length in minutes (default: 60)")
@click.option(
    "--type",
    "session_type",
    type=click.Choice([t.value for t in SessionType]),
    default=SessionType.MEMBER.value,
    help="Session type (default: member)",
)
@click.option("--member", "member_id", type=int, default=None)
@click.option("--trainer", "trainer_id", type=int, default=None)
@click.option("--location", default=None)
@click.option("--notes", default=None)
@async_command
async def book(
    start: str,
    duration: int,
    session_type: str,
    member_id: int | None,
    trainer_id: int | None,
    location: str | None,
    notes: str | None,
):
    """Book a training session."""
    scheduled_start = parse_datetime(start)
    data = validate_input(
        SessionCreate,
        {
            "scheduled_start": scheduled_start,
            "scheduled_end": scheduled_start + timedelta(minutes=duration),
            "session_type": session_type,
            "member_id": member_id,
            "trainer_id": trainer_id,
            "location": location,
            "notes": notes,
        },
    )
    session = await TrainingSessionService().book_session(data)
    echo_success(
        f"Session booked (ID: {session.id}): {session.session_type.value} on "
        f"{session.scheduled_start:%Y-%m-%d %H:%M}-{session.scheduled_end:%H:%M}"
    )


@sessions.command()
@click.argument("session_id", type=int)
@async_command
async def cancel(session_id: int):
    """Cancel a session."""
    await TrainingSessionService().cancel_session(session_id)
    echo_success(f"Session {session_id} cancelled")


@sessions.command()
@click.option("--date", "day", default=None, help="Any day of the week (default: today)")
@click.option("--member", "member_id", type=int, default=None, help="Also check a member")
@async_command
async def limits(day: str | None, member_id: int | None):
    """Show weekly session capacity."""
    target = parse_date(day) or date.today()
    week_start, week_end = get_week_range(target)
    service = SessionLimitService()

    studio = await service.check_studio_session_limit(target)
    scheme = get_capacity_color_scheme(studio.percentage)

    click.echo()
    click.echo(f"Week {week_start} to {week_end}")
    click.echo(
        "Studio: "
        + click.style(
            f"{studio.current_count}/{studio.max_allowed} ({studio.percentage}%)",
            fg=scheme.color,
        )
    )
    if not studio.can_book:
        echo_warning("Studio weekly limit reached")

    if member_id is not None:
        member_limit = await service.check_member_weekly_limit(member_id, target)
        click.echo(
            f"Member {member_id}: "
            f"{member_limit.current_member_sessions}/{member_limit.max_allowed}"
        )
        click.echo(f"  {member_limit.message}")


@sessions.command("set-limit")
@click.option("--studio", type=int, default=None, help="Max sessions per week for the studio")
@click.option("--member", type=int, default=None, help="Max member sessions per week per member")
@async_command
async def set_limit(studio: int | None, member: int | None):
    """Change the weekly session limits."""
    if studio is None and member is None:
        raise click.UsageError("Give --studio and/or --member")
    changes = await SessionLimitService().set_weekly_limits(studio=studio, member=member)
    for key, value in changes.items():
        echo_success(f"{key} = {value}")

@sessions.command()
@click.option("--trainer", "trainer_id", type=int, default=None)
@click.option("--member", "member_id", type=int, default=None)
@click.option("--start", default=None, help="From date YYYY-MM-DD")
@click.option("--end", default=None, help="To date YYYY-MM-DD")
@async_command
async def history(
    trainer_id: int | None,
    member_id: int | None,
    start: str | None,
    end: str | None,
):
    """List session history, most recent first."""
    rows_data = await TrainingSessionService().get_session_history(
        trainer_id, member_id, parse_date(start), parse_date(end)
    )

    if not rows_data:
        echo_info("No sessions found")
        return

    headers = ["ID", "Date", "Time", "Type", "Status", "Member", "Trainer"]
    rows = [
        [
            str(s.id),
            f"{s.scheduled_start:%Y-%m-%d}",
            f"{s.scheduled_start:%H:%M}-{s.scheduled_end:%H:%M}",
            s.session_type.value,
            s.status.value,
            str(s.member_id or ""),
            s.trainer_name or "",
        ]
        for s in rows_data
    ]
    click.echo()
    click.echo(format_table(headers, rows))


@sessions.command()
@click.option("--trainer", "trainer_id", type=int, default=None)
@click.option("--member", "member_id", type=int, default=None)
@click.option("--start", default=None, help="From date YYYY-MM-DD")
@click.option("--end", default=None, help="To date YYYY-MM-DD")
@click.option("--output", "-o", type=click.Path(path_type=Path), default=None)
@async_command
async def export(
    trainer_id: int | None,
    member_id: int | None,
    start: str | None,
    end: str | None,
    output: Path | None,
):
    """Export session history to CSV."""
    rows_data = await TrainingSessionService().get_session_history(
        trainer_id, member_id, parse_date(start), parse_date(end)
    )
    output = output or Path(session_csv_filename())
    output.write_text(sessions_to_csv(rows_data), encoding="utf-8")
    echo_success(f"Exported {len(rows_data)} session(s) to {output}")
