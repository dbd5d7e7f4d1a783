"""Weekly session limits for members and the studio."""

import logging
from datetime import date, datetime, timedelta
from pathlib import Path

from ..db.engine import MAX_MEMBER_SESSIONS_PER_WEEK, MAX_SESSIONS_PER_WEEK
from ..db.repositories import StudioSettingsRepository, TrainingSessionRepository
from ..errors import DatabaseError, ValidationError
from ..models.training_session import (
    CapacityColorScheme,
    MemberWeeklyLimitResult,
    SessionType,
    StudioSessionLimit,
)

logger = logging.getLogger(__name__)

WARNING_THRESHOLD = 80
ERROR_THRESHOLD = 95


def get_week_range(day: date | datetime) -> tuple[date, date]:
    """Return the Monday and Sunday of the week containing ``day``."""
    if isinstance(day, datetime):
        day = day.date()
    monday = day - timedelta(days=day.weekday())
    return monday, monday + timedelta(days=6)


def get_capacity_color_scheme(percentage: float) -> CapacityColorScheme:
    """Map a capacity percentage to traffic-light styling."""
    if percentage >= ERROR_THRESHOLD:
        return CapacityColorScheme(color="red", variant="error")
    if percentage >= WARNING_THRESHOLD:
        return CapacityColorScheme(color="yellow", variant="warning")
    return CapacityColorScheme(color="green", variant="default")


class SessionLimitService:
    """Checks the member and studio weekly session limits."""

    def __init__(self, db_path: Path | None = None):
        self.sessions = TrainingSessionRepository(db_path)
        self.settings = StudioSettingsRepository(db_path)

    async def check_member_weekly_limit(
        self,
        member_id: int,
        scheduled_start: date | datetime,
        session_type: SessionType = SessionType.MEMBER,
    ) -> MemberWeeklyLimitResult:
        """Check whether a member may book another session that week."""
        week_start, week_end = get_week_range(scheduled_start)
        try:
            row = await self.sessions.check_member_weekly_session_limit(
                member_id, week_start, week_end, session_type
            )
        except DatabaseError as e:
            logger.error("Weekly limit check failed for member %s: %s", member_id, e.message)
            raise DatabaseError(
                f"Failed to check weekly limit: {e.message}", code=e.code, details=e.details
            ) from e

        return MemberWeeklyLimitResult(
            can_book=row["can_book"],
            current_member_sessions=row["current_member_sessions"],
            max_allowed=row["max_allowed"],
            message=row["message"],
        )

    async def check_studio_session_limit(self, day: date | datetime) -> StudioSessionLimit:
        """Studio-wide capacity for the week containing ``day``."""
        week_start, week_end = get_week_range(day)
        try:
            rows = await self.sessions.check_studio_session_limit(week_start, week_end)
        except DatabaseError as e:
            logger.error("Studio limit check failed: %s", e.message)
            raise DatabaseError(
                f"Failed to check studio session limit: {e.message}",
                code=e.code,
                details=e.details,
            ) from e

        if not rows:
            return StudioSessionLimit.empty()
        row = rows[0]
        return StudioSessionLimit(
            current_count=row["current_count"],
            max_allowed=row["max_allowed"],
            can_book=row["can_book"],
            percentage=row["percentage"],
        )

    async def set_weekly_limits(
        self, studio: int | None = None, member: int | None = None
    ) -> dict[str, int]:
        """Change the studio and/or per-member weekly limits.

        Returns the values that were written, keyed by setting name.
        """
        changes = {}
        if studio is not None:
            changes[MAX_SESSIONS_PER_WEEK] = studio
        if member is not None:
            changes[MAX_MEMBER_SESSIONS_PER_WEEK] = member

        negative = {key: "Must be zero or greater" for key, value in changes.items() if value < 0}
        if negative:
            raise ValidationError("Weekly limits cannot be negative", negative)

        for key, value in changes.items():
            await self.settings.set(key, str(value))
            logger.info("Studio setting %s set to %s", key, value)
        return changes
