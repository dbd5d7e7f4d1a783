"""Tests for members and subscriptions."""

from datetime import date

import pytest

from gymdesk.errors import NotFoundError, ValidationError
from gymdesk.schemas import MemberCreate, SubscriptionCreate, validate_input
from gymdesk.services import MemberService


@pytest.fixture
def service(db_path):
    return MemberService(db_path)


class TestMembers:
    """Tests for member management."""

    async def test_create_and_get(self, service):
        created = await service.create_member(
            MemberCreate(first_name="Ana", last_name="Silva", email="ana@example.com")
        )

        stored = await service.get_member(created.id)

        assert stored.full_name == "Ana Silva"
        assert stored.join_date == date.today()

    async def test_duplicate_email_is_case_insensitive(self, service, member):
        with pytest.raises(ValidationError) as exc_info:
            await service.create_member(
                MemberCreate(first_name="Ana", last_name="Other", email="Ana@example.com")
            )

        assert "email" in exc_info.value.errors

    async def test_search(self, service, member):
        await service.create_member(
            MemberCreate(first_name="Bruno", last_name="Costa", email="bruno@example.com")
        )

        assert [m.first_name for m in await service.list_members("cost")] == ["Bruno"]
        assert len(await service.list_members()) == 2

    async def test_unknown_member(self, service):
        with pytest.raises(NotFoundError):
            await service.get_member(77)

    def test_input_validation(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_input(MemberCreate, {"first_name": "", "last_name": "X", "email": "x"})

        assert set(exc_info.value.errors) == {"first_name", "email"}


class TestSubscriptions:
    """Tests for subscriptions and session credits."""

    async def test_create_snapshots_plan(self, service, member):
        subscription = await service.create_subscription(
            SubscriptionCreate(
                member_id=member.id,
                plan_name="Monthly 8",
                total_sessions=8,
                total_amount=150,
                duration_days=30,
                start_date=date(2025, 10, 1),
            )
        )

        stored = await service.get_subscription(subscription.id)
        assert stored.plan_name_snapshot == "Monthly 8"
        assert stored.end_date == date(2025, 10, 31)
        assert stored.paid_amount == 0.0

    async def test_subscription_for_unknown_member(self, service):
        with pytest.raises(NotFoundError):
            await service.create_subscription(
                SubscriptionCreate(
                    member_id=5, plan_name="X", total_sessions=1, total_amount=10, duration_days=7
                )
            )

    async def test_active_subscription(self, service, member, subscription):
        active = await service.get_active_subscription(member.id, on=date(2025, 10, 18))
        assert active.id == subscription.id

        assert await service.get_active_subscription(member.id, on=date(2026, 2, 1)) is None

    async def test_consume_session(self, service, subscription):
        updated = await service.consume_session(subscription.id)
        assert updated.used_sessions == 1
        assert updated.remaining_sessions == 9

    async def test_consume_session_when_exhausted(self, service, member):
        subscription = await service.create_subscription(
            SubscriptionCreate(
                member_id=member.id,
                plan_name="Single",
                total_sessions=1,
                total_amount=25,
                duration_days=7,
            )
        )
        await service.consume_session(subscription.id)

        with pytest.raises(ValidationError, match="No sessions remaining"):
            await service.consume_session(subscription.id)
