"""Booking, cancelling and listing training sessions."""

import logging
from datetime import date
from pathlib import Path

from ..db.repositories import (
    MemberRepository,
    SubscriptionRepository,
    TrainingSessionRepository,
)
from ..errors import NotFoundError, SessionLimitError, ValidationError
from ..models.training_session import SessionStatus, SessionType, TrainingSession
from ..schemas import SessionCreate
from .session_limits import SessionLimitService

logger = logging.getLogger(__name__)


class TrainingSessionService:
    """Books sessions while enforcing credits and weekly limits."""

    def __init__(self, db_path: Path | None = None):
        self.sessions = TrainingSessionRepository(db_path)
        self.members = MemberRepository(db_path)
        self.subscriptions = SubscriptionRepository(db_path)
        self.limits = SessionLimitService(db_path)

    async def book_session(self, data: SessionCreate) -> TrainingSession:
        """Book a session.

        Raises:
            ValidationError: If the times are inconsistent or the member has
                no usable subscription.
            NotFoundError: If the member does not exist.
            SessionLimitError: If a weekly limit is reached.
        """
        if data.scheduled_end <= data.scheduled_start:
            raise ValidationError(
                "Session must end after it starts",
                {"scheduled_end": "Must be later than scheduled_start"},
            )

        session_type = data.session_type
        subscription = None

        if session_type.consumes_credit:
            if data.member_id is None:
                raise ValidationError(
                    f"{session_type.value} sessions require a member",
                    {"member_id": "Required for this session type"},
                )
            if await self.members.get(data.member_id) is None:
                raise NotFoundError("Member", data.member_id)

            subscription = await self.subscriptions.get_active_for_member(
                data.member_id, on=data.scheduled_start.date()
            )
            if subscription is None or subscription.remaining_sessions <= 0:
                logger.warning(
                    "Booking rejected: member %s has no sessions available", data.member_id
                )
                raise ValidationError(
                    "Member has no active subscription with remaining sessions",
                    {"member_id": "No sessions available"},
                )

        if session_type.counts_toward_member_limit:
            member_limit = await self.limits.check_member_weekly_limit(
                data.member_id, data.scheduled_start, session_type
            )
            if not member_limit.can_book:
                logger.warning("Booking rejected: %s", member_limit.message)
                raise SessionLimitError(member_limit.message, limit=member_limit)

        if session_type != SessionType.NON_BOOKABLE:
            studio_limit = await self.limits.check_studio_session_limit(data.scheduled_start)
            if not studio_limit.can_book:
                message = (
                    f"Studio weekly session limit reached "
                    f"({studio_limit.current_count}/{studio_limit.max_allowed})"
                )
                logger.warning("Booking rejected: %s", message)
                raise SessionLimitError(message, limit=studio_limit)

        session = TrainingSession(
            scheduled_start=data.scheduled_start,
            scheduled_end=data.scheduled_end,
            session_type=session_type,
            trainer_id=data.trainer_id,
            member_id=data.member_id,
            location=data.location,
            notes=data.notes,
        )
        session.id = await self.sessions.create(session)

        if subscription is not None:
            if not await self.subscriptions.consume_session(subscription.id):
                logger.warning(
                    "Session %s booked but subscription %s had no session left to consume",
                    session.id,
                    subscription.id,
                )

        logger.info(
            "Session booked: %s (%s) on %s",
            session.id,
            session_type.value,
            session.scheduled_start.isoformat(),
        )
        return await self.sessions.get(session.id)

    async def get_session(self, session_id: int) -> TrainingSession:
        session = await self.sessions.get(session_id)
        if session is None:
            raise NotFoundError("Session", session_id)
        return session

    async def cancel_session(self, session_id: int) -> TrainingSession:
        """Cancel a session, returning its credit to the member."""
        session = await self.get_session(session_id)
        if session.status in (SessionStatus.CANCELLED, SessionStatus.COMPLETED):
            raise ValidationError(
                f"Cannot cancel a {session.status.value} session",
                {"status": session.status.value},
            )

        await self.sessions.set_status(session_id, SessionStatus.CANCELLED)

        if session.session_type.consumes_credit and session.member_id is not None:
            subscription = await self.subscriptions.get_active_for_member(
                session.member_id, on=session.scheduled_start.date()
            )
            if subscription is not None:
                await self.subscriptions.release_session(subscription.id)

        logger.info("Session cancelled: %s", session_id)
        session.status = SessionStatus.CANCELLED
        return session

    async def get_session_history(
        self,
        trainer_id: int | None = None,
        member_id: int | None = None,
        start: date | None = None,
        end: date | None = None,
    ) -> list[TrainingSession]:
        return await self.sessions.history(trainer_id, member_id, start, end)
