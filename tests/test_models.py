"""Tests for data models."""

from datetime import date, datetime

from gymdesk.models import (
    Member,
    Payment,
    PaymentMethod,
    PaymentStats,
    RefundHistory,
    SessionType,
    StudioSessionLimit,
    Subscription,
    Trainer,
    TrainingSession,
)
from gymdesk.models.member import SubscriptionStatus
from gymdesk.models.payment import round_money


def _payment(amount, **kwargs):
    return Payment(
        subscription_id=1,
        member_id=1,
        amount=amount,
        payment_method=PaymentMethod.CARD,
        **kwargs,
    )


class TestRoundMoney:
    """Tests for round_money."""

    def test_rounds_to_cents(self):
        assert round_money(10.005 + 0.001) == 10.01
        assert round_money(19.999) == 20.0

    def test_negative_zero_is_normalized(self):
        assert str(round_money(-0.0)) == "0.0"


class TestMember:
    """Tests for Member."""

    def test_full_name(self):
        member = Member(first_name="Ana", last_name="Silva", email="ana@example.com")
        assert member.full_name == "Ana Silva"

    def test_from_dict_roundtrip(self):
        member = Member(
            first_name="Ana",
            last_name="Silva",
            email="ana@example.com",
            join_date=date(2025, 1, 15),
        )
        restored = Member.from_dict(member.to_dict())
        assert restored.join_date == date(2025, 1, 15)
        assert restored.email == "ana@example.com"


class TestSubscription:
    """Tests for Subscription."""

    def _subscription(self, **kwargs):
        defaults = dict(
            member_id=1,
            plan_name_snapshot="10 Sessions",
            total_sessions_snapshot=10,
            total_amount_snapshot=200.0,
            duration_days_snapshot=30,
            start_date=date(2025, 10, 1),
        )
        defaults.update(kwargs)
        return Subscription(**defaults)

    def test_end_date_derived_from_duration(self):
        assert self._subscription().end_date == date(2025, 10, 31)

    def test_remaining_sessions_never_negative(self):
        assert self._subscription(used_sessions=3).remaining_sessions == 7
        assert self._subscription(used_sessions=12).remaining_sessions == 0

    def test_is_active_on(self):
        sub = self._subscription()
        assert sub.is_active_on(date(2025, 10, 1))
        assert sub.is_active_on(date(2025, 10, 31))
        assert not sub.is_active_on(date(2025, 11, 1))

    def test_inactive_status_is_never_active(self):
        sub = self._subscription(status=SubscriptionStatus.PAUSED)
        assert not sub.is_active_on(date(2025, 10, 10))


class TestPayment:
    """Tests for Payment and refund summaries."""

    def test_refundable_amount(self):
        assert _payment(100.0).refundable_amount == 100.0
        assert _payment(100.0, refund_amount=20.0).refundable_amount == 80.0

    def test_refund_rows_are_not_refundable(self):
        refund = _payment(-20.0, is_refund=True, refunded_payment_id=1)
        assert refund.refundable_amount == 0.0

    def test_refund_history_totals(self):
        history = RefundHistory(
            payment=_payment(100.0),
            refunds=[
                _payment(-20.0, is_refund=True),
                _payment(-40.0, is_refund=True),
            ],
        )
        assert history.total_refunded == 60.0
        assert history.net_amount == 40.0

    def test_to_dict_serializes_enums_and_dates(self):
        payment = _payment(50.0, payment_date=datetime(2025, 10, 18, 9, 30))
        data = payment.to_dict()
        assert data["payment_method"] == "card"
        assert data["payment_status"] == "completed"
        assert data["payment_date"] == "2025-10-18T09:30:00"

    def test_stats_net_revenue(self):
        stats = PaymentStats(total_revenue=300.0, total_refunded=60.0)
        assert stats.net_revenue == 240.0
        assert stats.to_dict()["net_revenue"] == 240.0


class TestSessionType:
    """Tests for SessionType rules."""

    def test_credit_consuming_types(self):
        assert SessionType.MEMBER.consumes_credit
        assert SessionType.MAKEUP.consumes_credit
        assert not SessionType.TRIAL.consumes_credit
        assert not SessionType.NON_BOOKABLE.consumes_credit

    def test_only_member_sessions_count_toward_member_limit(self):
        counted = [t for t in SessionType if t.counts_toward_member_limit]
        assert counted == [SessionType.MEMBER]


class TestTrainingSession:
    """Tests for TrainingSession."""

    def test_duration_minutes(self):
        session = TrainingSession(
            scheduled_start=datetime(2025, 10, 20, 18, 0),
            scheduled_end=datetime(2025, 10, 20, 19, 30),
        )
        assert session.duration_minutes == 90


class TestStudioSessionLimit:
    """Tests for StudioSessionLimit."""

    def test_empty_result_blocks_booking(self):
        empty = StudioSessionLimit.empty()
        assert empty.can_book is False
        assert empty.current_count == 0
        assert empty.max_allowed == 0
        assert empty.percentage == 0


class TestTrainer:
    """Tests for Trainer."""

    def test_from_dict_defaults(self):
        trainer = Trainer.from_dict(
            {
                "trainer_code": "TR-0001",
                "first_name": "Marc",
                "last_name": "Dubois",
                "email": "marc@example.com",
            }
        )
        assert trainer.commission_rate == 0.15
        assert trainer.languages == ["English"]
        assert trainer.max_clients_per_session == 1
        assert trainer.is_accepting_new_clients is True
        assert trainer.emergency_contact is None

    def test_from_dict_parses_nested_values(self):
        trainer = Trainer.from_dict(
            {
                "trainer_code": "TR-0002",
                "first_name": "Lea",
                "last_name": "Martin",
                "email": "lea@example.com",
                "commission_rate": 0.2,
                "cpr_certification_expires": "2026-01-31",
                "emergency_contact": {"name": "Paul", "relationship": "Brother"},
            }
        )
        assert trainer.commission_rate == 0.2
        assert trainer.cpr_certification_expires == date(2026, 1, 31)
        assert trainer.emergency_contact.name == "Paul"
        assert trainer.emergency_contact.phone == ""

    def test_cpr_expires_within(self):
        trainer = Trainer(
            trainer_code="TR-0003",
            first_name="Zoe",
            last_name="Roy",
            email="zoe@example.com",
            cpr_certification_expires=date(2025, 11, 10),
        )
        today = date(2025, 10, 18)
        assert trainer.cpr_expires_within(30, today=today)
        assert not trainer.cpr_expires_within(10, today=today)
