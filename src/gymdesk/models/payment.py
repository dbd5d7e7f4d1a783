"""Payment ledger data models."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class PaymentMethod(str, Enum):
    """How a payment was made."""

    CASH = "cash"
    CARD = "card"
    BANK_TRANSFER = "bank_transfer"
    ONLINE = "online"
    CHECK = "check"


class PaymentStatus(str, Enum):
    """Payment status."""

    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"
    REFUNDED = "refunded"
    CANCELLED = "cancelled"


# Statuses whose amounts count towards a subscription's paid amount
LEDGER_STATUSES = (PaymentStatus.COMPLETED, PaymentStatus.REFUNDED)


def round_money(value: float) -> float:
    """Round a currency amount to cents."""
    return round(value, 2) + 0.0  # normalizes -0.0


@dataclass
class Payment:
    """A row of the payment ledger.

    Refunds are separate rows with a negative ``amount``, ``is_refund`` set and
    ``refunded_payment_id`` pointing at the original payment. The original
    row carries the running ``refund_amount`` total for display.
    """

    subscription_id: int
    member_id: int
    amount: float
    payment_method: PaymentMethod
    payment_status: PaymentStatus = PaymentStatus.COMPLETED
    payment_date: datetime | None = None
    receipt_number: str | None = None
    reference_number: str | None = None
    notes: str | None = None
    refund_amount: float = 0.0
    refund_date: datetime | None = None
    refund_reason: str | None = None
    is_refund: bool = False
    refunded_payment_id: int | None = None
    plan_name: str | None = None  # joined from the subscription when listed per member
    id: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def refundable_amount(self) -> float:
        """Amount that can still be refunded on this payment."""
        if self.is_refund:
            return 0.0
        return max(0.0, round_money(self.amount - self.refund_amount))

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "subscription_id": self.subscription_id,
            "member_id": self.member_id,
            "amount": self.amount,
            "payment_method": self.payment_method.value,
            "payment_status": self.payment_status.value,
            "payment_date": self.payment_date.isoformat() if self.payment_date else None,
            "receipt_number": self.receipt_number,
            "reference_number": self.reference_number,
            "notes": self.notes,
            "refund_amount": self.refund_amount,
            "refund_date": self.refund_date.isoformat() if self.refund_date else None,
            "refund_reason": self.refund_reason,
            "is_refund": self.is_refund,
            "refunded_payment_id": self.refunded_payment_id,
            "plan_name": self.plan_name,
        }


@dataclass
class BalanceInfo:
    """Balance of a subscription against its snapshot price."""

    total_amount: float
    paid_amount: float
    balance: float
    paid_percentage: float
    is_fully_paid: bool
    is_overpaid: bool

    def to_dict(self) -> dict:
        return {
            "total_amount": self.total_amount,
            "paid_amount": self.paid_amount,
            "balance": self.balance,
            "paid_percentage": self.paid_percentage,
            "is_fully_paid": self.is_fully_paid,
            "is_overpaid": self.is_overpaid,
        }


@dataclass
class RefundHistory:
    """Refund rows recorded against one original payment."""

    payment: Payment
    refunds: list[Payment] = field(default_factory=list)

    @property
    def total_refunded(self) -> float:
        return round_money(sum(-r.amount for r in self.refunds))

    @property
    def net_amount(self) -> float:
        return round_money(self.payment.amount - self.total_refunded)

    def to_dict(self) -> dict:
        return {
            "payment": self.payment.to_dict(),
            "refunds": [r.to_dict() for r in self.refunds],
            "total_refunded": self.total_refunded,
            "net_amount": self.net_amount,
        }


@dataclass
class PaymentStats:
    """Revenue statistics over a date range."""

    total_revenue: float = 0.0
    payment_count: int = 0
    average_payment: float = 0.0
    payment_method_breakdown: dict[str, float] = field(default_factory=dict)
    total_refunded: float = 0.0

    @property
    def net_revenue(self) -> float:
        return round_money(self.total_revenue - self.total_refunded)

    def to_dict(self) -> dict:
        return {
            "total_revenue": self.total_revenue,
            "payment_count": self.payment_count,
            "average_payment": self.average_payment,
            "payment_method_breakdown": self.payment_method_breakdown,
            "total_refunded": self.total_refunded,
            "net_revenue": self.net_revenue,
        }
