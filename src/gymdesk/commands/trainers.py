"""Trainer management commands."""

import json
from pathlib import Path

import click

from ..exports import generate_csv_filename, trainers_to_csv
from ..forms import TrainerWizard
from ..forms.prompts import TrainerWizardPrompter
from ..models.trainer import TrainerFilters
from ..services import TrainerService
from .base import (
    async_command,
    echo_info,
    echo_success,
    echo_warning,
    ensure_initialized,
    format_money,
    format_table,
)


@click.group()
@click.pass_context
def trainers(ctx):
    """Manage trainers.

    Commands for adding, listing, exporting and deleting trainer profiles.
    """
    ensure_initialized(ctx)


@trainers.command()
@click.option(
    "--from-file",
    "from_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Read the form values from a JSON file instead of prompting",
)
@async_command
async def add(from_file: Path | None):
    """Add a trainer through the five-step wizard.

    Examples:

        # Interactive
        gymdesk trainers add

        # From a JSON file with the form fields (commission_rate in percent)
        gymdesk trainers add --from-file trainer.json
    """
    if from_file is not None:
        payload = TrainerWizard(json.loads(from_file.read_text())).submit()
    else:
        payload = await TrainerWizardPrompter().run()
        if payload is None:
            echo_info("Cancelled")
            return

    trainer = await TrainerService().create_trainer(payload)
    echo_success(f"Trainer created: {trainer.full_name} ({trainer.trainer_code}, ID: {trainer.id})")


@trainers.command(name="list")
@click.option("--search", "-s", default=None, help="Filter by name or email")
@click.option("--specialization", "specializations", multiple=True, help="Required specialization")
@click.option("--accepting/--not-accepting", default=None, help="Accepting new clients")
@click.option("--min-experience", type=int, default=None)
@click.option("--max-experience", type=int, default=None)
@click.option("--limit", type=int, default=None)
@async_command
async def list_trainers(
    search: str | None,
    specializations: tuple[str, ...],
    accepting: bool | None,
    min_experience: int | None,
    max_experience: int | None,
    limit: int | None,
):
    """List trainers."""
    filters = TrainerFilters(
        search=search,
        specializations=list(specializations),
        is_accepting_new_clients=accepting,
        years_experience_min=min_experience,
        years_experience_max=max_experience,
        limit=limit,
    )
    all_trainers = await TrainerService().get_trainers(filters)

    if not all_trainers:
        echo_info("No trainers found. Add one with 'gymdesk trainers add'")
        return

    headers = ["ID", "Code", "Name", "Email", "Rate", "Specializations", "Accepting"]
    rows = []
    for t in all_trainers:
        specs = ", ".join(t.specializations)
        rows.append([
            str(t.id),
            t.trainer_code,
            t.full_name,
            t.email,
            format_money(t.hourly_rate) if t.hourly_rate is not None else "-",
            specs[:30] + "..." if len(specs) > 30 else specs,
            "yes" if t.is_accepting_new_clients else "no",
        ])

    click.echo()
    click.echo(format_table(headers, rows))
    click.echo()
    click.echo(f"Total: {len(all_trainers)} trainer(s)")


@trainers.command()
@click.argument("trainer_id", type=int)
@async_command
async def show(trainer_id: int):
    """Show a trainer's profile."""
    t = await TrainerService().get_trainer(trainer_id)

    click.echo()
    click.echo("=" * 60)
    click.echo(f"Trainer: {t.full_name} ({t.trainer_code}, ID: {t.id})")
    click.echo("=" * 60)
    click.echo(f"Email: {t.email}")
    if t.phone:
        click.echo(f"Phone: {t.phone}")
    if t.hourly_rate is not None:
        click.echo(f"Hourly rate: {format_money(t.hourly_rate)}")
    click.echo(f"Commission: {t.commission_rate * 100:.1f}%")
    if t.years_experience is not None:
        click.echo(f"Experience: {t.years_experience} year(s)")
    click.echo(f"Languages: {', '.join(t.languages) or '-'}")
    click.echo(f"Specializations: {', '.join(t.specializations) or '-'}")
    click.echo(f"Certifications: {', '.join(t.certifications) or '-'}")
    click.echo(f"Max clients per session: {t.max_clients_per_session}")
    click.echo(f"Accepting new clients: {'yes' if t.is_accepting_new_clients else 'no'}")
    if t.cpr_certification_expires:
        click.echo(f"CPR expires: {t.cpr_certification_expires}")
        if t.cpr_expires_within(30):
            echo_warning("CPR certification expires within 30 days")
    if t.emergency_contact:
        c = t.emergency_contact
        click.echo(f"Emergency contact: {c.name} ({c.relationship}) {c.phone}")
    if t.notes:
        click.echo(f"Notes: {t.notes}")


@trainers.command()
@click.argument("trainer_id", type=int)
@click.option("--force", "-f", is_flag=True, help="Skip confirmation")
@async_command
async def delete(trainer_id: int, force: bool):
    """Permanently delete a trainer."""
    service = TrainerService()
    trainer = await service.get_trainer(trainer_id)

    if not force:
        click.echo(f"Trainer: {trainer.full_name} ({trainer.trainer_code})")
        if not click.confirm("Are you sure you want to delete this trainer?"):
            echo_info("Cancelled")
            return

    await service.delete_trainer(trainer_id)
    echo_success(f"Deleted trainer {trainer_id}")


@trainers.command()
@click.option("--output", "-o", type=click.Path(path_type=Path), default=None)
@click.option("--search", "-s", default=None)
@async_command
async def export(output: Path | None, search: str | None):
    """Export trainers to CSV."""
    all_trainers = await TrainerService().get_trainers(TrainerFilters(search=search))
    output = output or Path(generate_csv_filename())
    output.write_text(trainers_to_csv(all_trainers), encoding="utf-8-sig")
    echo_success(f"Exported {len(all_trainers)} trainer(s) to {output}")


@trainers.command()
@click.option("--days", type=int, default=30, help="Look-ahead window (default: 30)")
@async_command
async def expiring(days: int):
    """List trainers whose CPR certification expires soon."""
    expiring_trainers = await TrainerService().get_trainers_with_expiring_certifications(days)

    if not expiring_trainers:
        echo_info(f"No CPR certifications expire in the next {days} days")
        return

    headers = ["ID", "Name", "CPR Expires"]
    rows = [
        [str(t.id), t.full_name, t.cpr_certification_expires.isoformat()]
        for t in expiring_trainers
    ]
    click.echo()
    click.echo(format_table(headers, rows))


@trainers.command()
@click.argument("trainer_ids", type=int, nargs=-1, required=True)
@click.option("--accepting/--not-accepting", default=True, help="New value (default: accepting)")
@async_command
async def availability(trainer_ids: tuple[int, ...], accepting: bool):
    """Set whether trainers accept new clients."""
    updated = await TrainerService().bulk_update_trainer_availability(
        list(trainer_ids), accepting
    )
    echo_success(f"Updated {updated} trainer(s)")
