"""Member and subscription data models."""

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from enum import Enum


class MemberStatus(str, Enum):
    """Member account status."""

    ACTIVE = "active"
    INACTIVE = "inactive"
    SUSPENDED = "suspended"
    EXPIRED = "expired"
    PENDING = "pending"


class SubscriptionStatus(str, Enum):
    """Subscription lifecycle status."""

    ACTIVE = "active"
    PAUSED = "paused"
    CANCELLED = "cancelled"
    EXPIRED = "expired"
    PENDING = "pending"


@dataclass
class Member:
    """A gym member."""

    first_name: str
    last_name: str
    email: str
    phone: str | None = None
    status: MemberStatus = MemberStatus.ACTIVE
    join_date: date | None = None
    notes: str = ""
    id: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def to_dict(self) -> dict:
        """Convert to dictionary for storage."""
        return {
            "id": self.id,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "email": self.email,
            "phone": self.phone,
            "status": self.status.value,
            "join_date": self.join_date.isoformat() if self.join_date else None,
            "notes": self.notes,
        }

    @classmethod
    def from_dict(cls, data: dict, **kwargs) -> "Member":
        """Create from dictionary."""
        join_date = data.get("join_date")
        return cls(
            first_name=data["first_name"],
            last_name=data["last_name"],
            email=data["email"],
            phone=data.get("phone"),
            status=MemberStatus(data.get("status", "active")),
            join_date=date.fromisoformat(join_date) if join_date else None,
            notes=data.get("notes") or "",
            **kwargs,
        )


@dataclass
class Subscription:
    """A member's plan instance.

    Plan details are copied into ``*_snapshot`` fields at signup so later plan
    edits do not change what the member bought. ``paid_amount`` is a cache of
    the net of the subscription's completed payment ledger rows.
    """

    member_id: int
    plan_name_snapshot: str
    total_sessions_snapshot: int
    total_amount_snapshot: float
    duration_days_snapshot: int
    start_date: date
    end_date: date | None = None
    status: SubscriptionStatus = SubscriptionStatus.ACTIVE
    used_sessions: int = 0
    paid_amount: float = 0.0
    id: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def __post_init__(self):
        if self.end_date is None:
            self.end_date = self.start_date + timedelta(days=self.duration_days_snapshot)

    @property
    def remaining_sessions(self) -> int:
        return max(0, self.total_sessions_snapshot - self.used_sessions)

    def is_active_on(self, day: date) -> bool:
        """Check whether the subscription covers the given day."""
        if self.status != SubscriptionStatus.ACTIVE:
            return False
        return self.start_date <= day <= self.end_date

    def to_dict(self) -> dict:
        """Convert to dictionary for storage."""
        return {
            "id": self.id,
            "member_id": self.member_id,
            "plan_name_snapshot": self.plan_name_snapshot,
            "total_sessions_snapshot": self.total_sessions_snapshot,
            "total_amount_snapshot": self.total_amount_snapshot,
            "duration_days_snapshot": self.duration_days_snapshot,
            "start_date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat() if self.end_date else None,
            "status": self.status.value,
            "used_sessions": self.used_sessions,
            "paid_amount": self.paid_amount,
        }
