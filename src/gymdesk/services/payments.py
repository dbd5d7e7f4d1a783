"""Payment ledger service: payments, refunds, balances and statistics."""

import logging
import math
from collections import defaultdict
from datetime import date, datetime
from pathlib import Path

from ..db.repositories import MemberRepository, PaymentRepository, SubscriptionRepository
from ..errors import NotFoundError, RefundError
from ..exports import build_receipt_pdf, receipt_filename
from ..models.member import Subscription
from ..models.payment import (
    LEDGER_STATUSES,
    BalanceInfo,
    Payment,
    PaymentStats,
    PaymentStatus,
    RefundHistory,
    round_money,
)
from ..schemas import PaymentCreate

logger = logging.getLogger(__name__)

# Originals in these states can still be (further) refunded
REFUNDABLE_STATUSES = (PaymentStatus.COMPLETED, PaymentStatus.REFUNDED)


def calculate_balance_info(subscription: Subscription) -> BalanceInfo:
    """Compute the outstanding balance of a subscription."""
    total = subscription.total_amount_snapshot
    paid = subscription.paid_amount
    balance = round_money(max(0.0, total - paid))
    percentage = round(paid / total * 100, 2) if total > 0 else 0.0
    return BalanceInfo(
        total_amount=total,
        paid_amount=paid,
        balance=balance,
        paid_percentage=percentage,
        is_fully_paid=balance == 0,
        is_overpaid=paid > total,
    )


class PaymentService:
    """Records payments and refunds against member subscriptions.

    The ledger is append-only: a refund never edits the original amount, it
    adds a negative row linked to the original. The subscription's
    ``paid_amount`` is recomputed from the ledger after every mutation.
    """

    def __init__(self, db_path: Path | None = None):
        self.payments = PaymentRepository(db_path)
        self.subscriptions = SubscriptionRepository(db_path)
        self.members = MemberRepository(db_path)

    async def record_payment(self, data: PaymentCreate) -> Payment:
        """Record a completed payment for a subscription."""
        subscription = await self.subscriptions.get(data.subscription_id)
        if subscription is None:
            raise NotFoundError("Subscription", data.subscription_id)

        payment = Payment(
            subscription_id=subscription.id,
            member_id=subscription.member_id,
            amount=round_money(data.amount),
            payment_method=data.payment_method,
            payment_status=PaymentStatus.COMPLETED,
            payment_date=data.payment_date or datetime.now(),
            reference_number=data.reference_number,
            notes=data.notes,
        )
        payment.id = await self.payments.create(payment)

        logger.info(
            "Payment recorded: %s %.2f via %s for subscription %s",
            payment.receipt_number,
            payment.amount,
            payment.payment_method.value,
            subscription.id,
        )
        return payment

    async def update_subscription_paid_amount(self, subscription_id: int) -> float:
        """Recompute a subscription's paid amount from its ledger."""
        return await self.payments.refresh_paid_amount(subscription_id)

    async def get_subscription_payments(self, subscription_id: int) -> list[Payment]:
        return await self.payments.list_for_subscription(subscription_id)

    async def get_member_payments(self, member_id: int) -> list[Payment]:
        return await self.payments.list_for_member(member_id)

    async def get_balance_info(self, subscription_id: int) -> BalanceInfo:
        """Balance of a stored subscription."""
        subscription = await self.subscriptions.get(subscription_id)
        if subscription is None:
            raise NotFoundError("Subscription", subscription_id)
        return calculate_balance_info(subscription)

    async def process_refund(
        self, payment_id: int, refund_amount: float, reason: str
    ) -> Payment:
        """Refund all or part of a payment.

        Raises:
            NotFoundError: If the payment does not exist.
            RefundError: If the payment cannot be refunded or the amount is
                not positive or exceeds what remains refundable.
        """
        original = await self.payments.get(payment_id)
        if original is None:
            raise NotFoundError("Payment", payment_id)

        if original.is_refund:
            logger.warning("Refund rejected: payment %s is itself a refund", payment_id)
            raise RefundError("Cannot refund a refund transaction")

        if original.payment_status not in REFUNDABLE_STATUSES:
            logger.warning(
                "Refund rejected: payment %s has status %s",
                payment_id,
                original.payment_status.value,
            )
            raise RefundError(
                f"Cannot refund a payment with status '{original.payment_status.value}'"
            )

        if not math.isfinite(refund_amount) or refund_amount <= 0:
            logger.warning("Refund rejected: invalid amount %s", refund_amount)
            raise RefundError("Refund amount must be greater than zero")
        refund_amount = round_money(refund_amount)
        if refund_amount <= 0:
            logger.warning("Refund rejected: amount %s rounds to zero", refund_amount)
            raise RefundError("Refund amount must be greater than zero")

        previously_refunded = await self.payments.sum_refunds(payment_id)
        remaining = round_money(original.amount - previously_refunded)
        if refund_amount > remaining:
            logger.warning(
                "Refund rejected: %.2f exceeds remaining %.2f on payment %s",
                refund_amount,
                remaining,
                payment_id,
            )
            raise RefundError(
                f"Refund amount ${refund_amount:.2f} exceeds the refundable "
                f"amount ${remaining:.2f}"
            )

        total_refunded = round_money(previously_refunded + refund_amount)
        new_status = (
            PaymentStatus.REFUNDED
            if total_refunded >= original.amount
            else PaymentStatus.COMPLETED
        )

        refund = Payment(
            subscription_id=original.subscription_id,
            member_id=original.member_id,
            amount=-refund_amount,
            payment_method=original.payment_method,
            payment_status=PaymentStatus.COMPLETED,
            payment_date=datetime.now(),
            notes=f"Refund for {original.receipt_number}: {reason}",
            refund_reason=reason,
            is_refund=True,
            refunded_payment_id=original.id,
        )
        refund.id = await self.payments.create_refund(
            original, refund, total_refunded, new_status
        )

        logger.info(
            "Refund processed: %s %.2f against %s (total refunded %.2f, status %s)",
            refund.receipt_number,
            refund_amount,
            original.receipt_number,
            total_refunded,
            new_status.value,
        )
        return refund

    async def get_refund_history(self, payment_id: int) -> RefundHistory:
        """A payment together with the refunds recorded against it."""
        payment = await self.payments.get(payment_id)
        if payment is None:
            raise NotFoundError("Payment", payment_id)
        refunds = await self.payments.list_refunds(payment_id)
        return RefundHistory(payment=payment, refunds=refunds)

    async def get_payment_stats(self, start_date: date, end_date: date) -> PaymentStats:
        """Revenue statistics for payments dated within the range.

        Revenue counts original payments only; refund rows are totalled
        separately so ``net_revenue`` reflects money actually kept.
        """
        rows = await self.payments.list_in_range(start_date, end_date)

        revenue_rows = [
            p for p in rows if not p.is_refund and p.payment_status in LEDGER_STATUSES
        ]
        refund_rows = [
            p for p in rows if p.is_refund and p.payment_status == PaymentStatus.COMPLETED
        ]

        total = round_money(sum(p.amount for p in revenue_rows))
        count = len(revenue_rows)

        breakdown: dict[str, float] = defaultdict(float)
        for p in revenue_rows:
            breakdown[p.payment_method.value] += p.amount

        return PaymentStats(
            total_revenue=total,
            payment_count=count,
            average_payment=round_money(total / count) if count else 0.0,
            payment_method_breakdown={k: round_money(v) for k, v in breakdown.items()},
            total_refunded=round_money(sum(-p.amount for p in refund_rows)),
        )

    async def render_receipt(self, payment_id: int) -> tuple[bytes, str]:
        """PDF receipt for a payment or refund, with its filename.

        Refund receipts show the original payment and its refund totals.
        """
        history = await self.get_refund_history(payment_id)
        payment = history.payment
        member = await self.members.get(payment.member_id)

        if payment.is_refund:
            original = await self.get_refund_history(payment.refunded_payment_id)
            pdf = build_receipt_pdf(
                payment, member, history=original, original=original.payment
            )
        else:
            pdf = build_receipt_pdf(
                payment, member, history=history if history.refunds else None
            )
        return pdf, receipt_filename(payment)
