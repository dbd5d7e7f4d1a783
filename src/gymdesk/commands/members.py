"""Member and subscription commands."""

import click

from ..schemas import MemberCreate, SubscriptionCreate, validate_input
from ..services import MemberService, calculate_balance_info
from .base import (
    async_command,
    echo_info,
    echo_success,
    ensure_initialized,
    format_money,
    format_table,
    parse_date,
)


@click.group()
@click.pass_context
def members(ctx):
    """Manage members and their subscriptions."""
    ensure_initialized(ctx)


@members.command()
@click.option("--first-name", required=True)
@click.option("--last-name", required=True)
@click.option("--email", required=True)
@click.option("--phone", default=None)
@click.option("--notes", default="")
@async_command
async def add(first_name: str, last_name: str, email: str, phone: str | None, notes: str):
    """Add a new member."""
    data = validate_input(
        MemberCreate,
        {
            "first_name": first_name,
            "last_name": last_name,
            "email": email,
            "phone": phone,
            "notes": notes,
        },
    )
    member = await MemberService().create_member(data)
    echo_success(f"Member created: {member.full_name} (ID: {member.id})")


@members.command(name="list")
@click.option("--search", "-s", default=None, help="Filter by name or email")
@async_command
async def list_members(search: str | None):
    """List members."""
    service = MemberService()
    all_members = await service.list_members(search)

    if not all_members:
        echo_info("No members found. Add one with 'gymdesk members add'")
        return

    headers = ["ID", "Name", "Email", "Status", "Joined"]
    rows = [
        [
            str(m.id),
            m.full_name,
            m.email,
            m.status.value,
            m.join_date.isoformat() if m.join_date else "N/A",
        ]
        for m in all_members
    ]

    click.echo()
    click.echo(format_table(headers, rows))
    click.echo()
    click.echo(f"Total: {len(all_members)} member(s)")


@members.command()
@click.argument("member_id", type=int)
@click.option("--plan", "plan_name", required=True, help="Plan name")
@click.option("--sessions", "total_sessions", required=True, type=int, help="Sessions included")
@click.option("--amount", "total_amount", required=True, type=float, help="Plan price")
@click.option("--days", "duration_days", default=30, type=int, help="Duration in days (default: 30)")
@click.option("--start", default=None, help="Start date YYYY-MM-DD (default: today)")
@async_command
async def subscribe(
    member_id: int,
    plan_name: str,
    total_sessions: int,
    total_amount: float,
    duration_days: int,
    start: str | None,
):
    """Start a subscription for a member."""
    data = validate_input(
        SubscriptionCreate,
        {
            "member_id": member_id,
            "plan_name": plan_name,
            "total_sessions": total_sessions,
            "total_amount": total_amount,
            "duration_days": duration_days,
            "start_date": parse_date(start),
        },
    )
    subscription = await MemberService().create_subscription(data)
    echo_success(
        f"Subscription created (ID: {subscription.id}): {plan_name}, "
        f"{total_sessions} sessions, {format_money(total_amount)}, "
        f"{subscription.start_date} to {subscription.end_date}"
    )


@members.command()
@click.argument("member_id", type=int)
@async_command
async def show(member_id: int):
    """Show a member with their subscriptions and balances."""
    service = MemberService()
    member = await service.get_member(member_id)
    subscriptions = await service.get_member_subscriptions(member_id)

    click.echo()
    click.echo(f"Member: {member.full_name} (ID: {member.id})")
    click.echo(f"Email: {member.email}")
    click.echo(f"Status: {member.status.value}")
    click.echo()

    if not subscriptions:
        echo_info("No subscriptions")
        return

    headers = ["ID", "Plan", "Period", "Sessions", "Paid", "Balance", "Status"]
    rows = []
    for sub in subscriptions:
        balance = calculate_balance_info(sub)
        rows.append([
            str(sub.id),
            sub.plan_name_snapshot,
            f"{sub.start_date} - {sub.end_date}",
            f"{sub.used_sessions}/{sub.total_sessions_snapshot}",
            f"{format_money(balance.paid_amount)} ({balance.paid_percentage:.0f}%)",
            format_money(balance.balance),
            sub.status.value,
        ])
    click.echo(format_table(headers, rows))
