"""Training session and weekly limit models."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class SessionType(str, Enum):
    """Kind of training session."""

    TRIAL = "trial"  # Try-out session for a prospective member
    MEMBER = "member"  # Regular member session, capped weekly
    CONTRACTUAL = "contractual"  # Contract signing session
    MULTI_SITE = "multi_site"  # Guest from another gym in the group
    COLLABORATION = "collaboration"  # Partnership/influencer session
    MAKEUP = "makeup"  # Extra session, bypasses the member weekly cap
    NON_BOOKABLE = "non_bookable"  # Time blocker, no member

    @property
    def consumes_credit(self) -> bool:
        """Whether booking this type uses a subscription session."""
        return self in (SessionType.MEMBER, SessionType.MAKEUP)

    @property
    def counts_toward_member_limit(self) -> bool:
        return self == SessionType.MEMBER


class SessionStatus(str, Enum):
    """Training session status."""

    SCHEDULED = "scheduled"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


@dataclass
class TrainingSession:
    """A scheduled training session."""

    scheduled_start: datetime
    scheduled_end: datetime
    session_type: SessionType = SessionType.MEMBER
    status: SessionStatus = SessionStatus.SCHEDULED
    trainer_id: int | None = None
    member_id: int | None = None
    location: str | None = None
    notes: str | None = None
    trainer_name: str | None = None  # joined for history listings
    id: int | None = None
    created_at: datetime | None = None

    @property
    def duration_minutes(self) -> int:
        return int((self.scheduled_end - self.scheduled_start).total_seconds() // 60)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "scheduled_start": self.scheduled_start.isoformat(),
            "scheduled_end": self.scheduled_end.isoformat(),
            "session_type": self.session_type.value,
            "status": self.status.value,
            "trainer_id": self.trainer_id,
            "member_id": self.member_id,
            "location": self.location,
            "notes": self.notes,
            "trainer_name": self.trainer_name,
            "duration_minutes": self.duration_minutes,
        }


@dataclass
class StudioSessionLimit:
    """Studio-wide weekly capacity."""

    current_count: int
    max_allowed: int
    can_book: bool
    percentage: int

    def to_dict(self) -> dict:
        return {
            "current_count": self.current_count,
            "max_allowed": self.max_allowed,
            "can_book": self.can_book,
            "percentage": self.percentage,
        }

    @classmethod
    def empty(cls) -> "StudioSessionLimit":
        """Result used when the limit query returns no row."""
        return cls(current_count=0, max_allowed=0, can_book=False, percentage=0)


@dataclass
class MemberWeeklyLimitResult:
    """Per-member weekly session allowance."""

    can_book: bool
    current_member_sessions: int
    max_allowed: int
    message: str

    def to_dict(self) -> dict:
        return {
            "can_book": self.can_book,
            "current_member_sessions": self.current_member_sessions,
            "max_allowed": self.max_allowed,
            "message": self.message,
        }


@dataclass(frozen=True)
class CapacityColorScheme:
    """Traffic-light styling for a capacity percentage."""

    color: str
    variant: str  # default, warning, error

    @property
    def text(self) -> str:
        return f"text-{self.color}-600"

    @property
    def bg(self) -> str:
        return f"bg-{self.color}-100"

    @property
    def border(self) -> str:
        return f"border-{self.color}-300"

    def to_dict(self) -> dict:
        return {
            "color": self.color,
            "variant": self.variant,
            "text": self.text,
            "bg": self.bg,
            "border": self.border,
        }
