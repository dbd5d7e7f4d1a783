"""Payment and refund commands."""

from datetime import date
from pathlib import Path

import click

from ..models.payment import PaymentMethod
from ..schemas import PaymentCreate, validate_input
from ..services import PaymentService
from .base import (
    async_command,
    echo_error,
    echo_info,
    echo_success,
    echo_warning,
    ensure_initialized,
    format_money,
    format_table,
    parse_date,
    parse_datetime,
)


@click.group()
@click.pass_context
def payments(ctx):
    """Record payments, issue refunds and view revenue."""
    ensure_initialized(ctx)


@payments.command()
@click.argument("subscription_id", type=int)
@click.argument("amount", type=float)
@click.option(
    "--method",
    "-m",
    type=click.Choice([m.value for m in PaymentMethod]),
    default=PaymentMethod.CASH.value,
    help="Payment method (default: cash)",
)
@click.option("--date", "payment_date", default=None, help="Payment date/time (default: now)")
@click.option("--reference", default=None, help="External reference number")
@click.option("--notes", default=None)
@async_command
async def record(
    subscription_id: int,
    amount: float,
    method: str,
    payment_date: str | None,
    reference: str | None,
    notes: str | None,
):
    """Record a payment against a subscription."""
    data = validate_input(
        PaymentCreate,
        {
            "subscription_id": subscription_id,
            "amount": amount,
            "payment_method": method,
            "payment_date": parse_datetime(payment_date) if payment_date else None,
            "reference_number": reference,
            "notes": notes,
        },
    )
    service = PaymentService()
    payment = await service.record_payment(data)
    balance = await service.get_balance_info(subscription_id)

    echo_success(f"Payment recorded: {payment.receipt_number} {format_money(payment.amount)}")
    click.echo(
        f"  Paid {format_money(balance.paid_amount)} of {format_money(balance.total_amount)}"
        f" ({balance.paid_percentage:.0f}%), balance {format_money(balance.balance)}"
    )
    if balance.is_overpaid:
        echo_warning("Subscription is overpaid")


@payments.command(name="list")
@click.option("--subscription", "subscription_id", type=int, default=None)
@click.option("--member", "member_id", type=int, default=None)
@click.pass_context
@async_command
async def list_payments(ctx, subscription_id: int | None, member_id: int | None):
    """List ledger rows for a subscription or a member."""
    if (subscription_id is None) == (member_id is None):
        echo_error("Pass exactly one of --subscription or --member")
        ctx.exit(1)

    service = PaymentService()
    if subscription_id is not None:
        rows_data = await service.get_subscription_payments(subscription_id)
    else:
        rows_data = await service.get_member_payments(member_id)

    if not rows_data:
        echo_info("No payments found")
        return

    headers = ["ID", "Receipt", "Date", "Amount", "Method", "Status", "Refunded", "Plan"]
    rows = [
        [
            str(p.id),
            p.receipt_number or "",
            p.payment_date.strftime("%Y-%m-%d") if p.payment_date else "",
            format_money(p.amount),
            p.payment_method.value,
            "refund" if p.is_refund else p.payment_status.value,
            format_money(p.refund_amount) if p.refund_amount else "",
            p.plan_name or "",
        ]
        for p in rows_data
    ]
    click.echo()
    click.echo(format_table(headers, rows))

    if subscription_id is not None:
        balance = await service.get_balance_info(subscription_id)
        click.echo()
        click.echo(
            f"Paid {format_money(balance.paid_amount)} of {format_money(balance.total_amount)}, "
            f"balance {format_money(balance.balance)}"
        )


@payments.command()
@click.argument("payment_id", type=int)
@click.argument("amount", type=float)
@click.option("--reason", "-r", required=True, help="Reason for the refund")
@async_command
async def refund(payment_id: int, amount: float, reason: str):
    """Refund all or part of a payment."""
    service = PaymentService()
    refund_row = await service.process_refund(payment_id, amount, reason)
    history = await service.get_refund_history(payment_id)

    echo_success(
        f"Refund issued: {refund_row.receipt_number} {format_money(-refund_row.amount)}"
    )
    click.echo(
        f"  Total refunded {format_money(history.total_refunded)}, "
        f"net {format_money(history.net_amount)} ({history.payment.payment_status.value})"
    )


@payments.command()
@click.option("--start", default=None, help="Start date YYYY-MM-DD (default: first of month)")
@click.option("--end", default=None, help="End date YYYY-MM-DD (default: today)")
@async_command
async def stats(start: str | None, end: str | None):
    """Show revenue statistics for a date range."""
    end_date = parse_date(end) or date.today()
    start_date = parse_date(start) or end_date.replace(day=1)

    result = await PaymentService().get_payment_stats(start_date, end_date)

    click.echo()
    click.echo(f"Payments {start_date} to {end_date}")
    click.echo("-" * 40)
    click.echo(f"Revenue:   {format_money(result.total_revenue)}")
    click.echo(f"Payments:  {result.payment_count}")
    click.echo(f"Average:   {format_money(result.average_payment)}")
    click.echo(f"Refunded:  {format_money(result.total_refunded)}")
    click.echo(f"Net:       {format_money(result.net_revenue)}")
    if result.payment_method_breakdown:
        click.echo()
        click.echo("By method:")
        for method, total in sorted(result.payment_method_breakdown.items()):
            click.echo(f"  {method:<15}{format_money(total)}")


@payments.command()
@click.argument("payment_id", type=int)
@click.option("--output", "-o", type=click.Path(path_type=Path), default=None)
@async_command
async def receipt(payment_id: int, output: Path | None):
    """Write a PDF receipt for a payment or refund."""
    pdf, filename = await PaymentService().render_receipt(payment_id)
    output = output or Path(filename)
    output.write_bytes(pdf)
    echo_success(f"Receipt written to {output}")
