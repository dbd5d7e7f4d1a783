"""Member and subscription service."""

import logging
from datetime import date
from pathlib import Path

from ..db.repositories import MemberRepository, SubscriptionRepository
from ..errors import NotFoundError, ValidationError
from ..models.member import Member, Subscription
from ..schemas import MemberCreate, SubscriptionCreate

logger = logging.getLogger(__name__)


class MemberService:
    def __init__(self, db_path: Path | None = None):
        self.members = MemberRepository(db_path)
        self.subscriptions = SubscriptionRepository(db_path)

    async def create_member(self, data: MemberCreate) -> Member:
        if await self.members.get_by_email(data.email) is not None:
            raise ValidationError(
                "Email already registered", {"email": f"'{data.email}' is already in use"}
            )
        member = Member(
            first_name=data.first_name,
            last_name=data.last_name,
            email=data.email,
            phone=data.phone,
            join_date=data.join_date or date.today(),
            notes=data.notes,
        )
        member.id = await self.members.create(member)
        logger.info("Member created: %s (%s)", member.full_name, member.id)
        return member

    async def get_member(self, member_id: int) -> Member:
        member = await self.members.get(member_id)
        if member is None:
            raise NotFoundError("Member", member_id)
        return member

    async def list_members(self, search: str | None = None) -> list[Member]:
        return await self.members.list_all(search)

    async def create_subscription(self, data: SubscriptionCreate) -> Subscription:
        """Start a subscription, snapshotting the plan details."""
        await self.get_member(data.member_id)
        subscription = Subscription(
            member_id=data.member_id,
            plan_name_snapshot=data.plan_name,
            total_sessions_snapshot=data.total_sessions,
            total_amount_snapshot=data.total_amount,
            duration_days_snapshot=data.duration_days,
            start_date=data.start_date or date.today(),
        )
        subscription.id = await self.subscriptions.create(subscription)
        logger.info(
            "Subscription created: %s for member %s (%s)",
            subscription.id,
            data.member_id,
            data.plan_name,
        )
        return subscription

    async def get_subscription(self, subscription_id: int) -> Subscription:
        subscription = await self.subscriptions.get(subscription_id)
        if subscription is None:
            raise NotFoundError("Subscription", subscription_id)
        return subscription

    async def get_member_subscriptions(self, member_id: int) -> list[Subscription]:
        return await self.subscriptions.list_for_member(member_id)

    async def get_active_subscription(
        self, member_id: int, on: date | None = None
    ) -> Subscription | None:
        return await self.subscriptions.get_active_for_member(member_id, on)

    async def consume_session(self, subscription_id: int) -> Subscription:
        """Use one session of a subscription."""
        subscription = await self.get_subscription(subscription_id)
        if not await self.subscriptions.consume_session(subscription_id):
            raise ValidationError(
                "No sessions remaining",
                {"used_sessions": f"{subscription.used_sessions}/{subscription.total_sessions_snapshot}"},
            )
        return await self.get_subscription(subscription_id)
