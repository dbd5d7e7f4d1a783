"""Data access layer for gymdesk."""

import json
from contextlib import asynccontextmanager
from datetime import date, datetime
from pathlib import Path
from typing import AsyncIterator

import aiosqlite

from ..errors import DatabaseError
from ..models.member import Member, MemberStatus, Subscription, SubscriptionStatus
from ..models.payment import (
    LEDGER_STATUSES,
    Payment,
    PaymentMethod,
    PaymentStatus,
    round_money,
)
from ..models.trainer import EmergencyContact, Trainer, TrainerFilters
from ..models.training_session import SessionStatus, SessionType, TrainingSession
from .engine import MAX_MEMBER_SESSIONS_PER_WEEK, MAX_SESSIONS_PER_WEEK, get_db_path

RECEIPT_SEQUENCE_START = 1000


@asynccontextmanager
async def connect(db_path: Path) -> AsyncIterator[aiosqlite.Connection]:
    """Open a connection with row access by name.

    SQLite errors are re-raised as DatabaseError.
    """
    try:
        async with aiosqlite.connect(db_path) as db:
            db.row_factory = aiosqlite.Row
            yield db
    except aiosqlite.IntegrityError as e:
        raise DatabaseError(str(e), code="integrity_error") from e
    except aiosqlite.Error as e:
        raise DatabaseError(str(e), code="database_error") from e


def _parse_datetime(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value else None


def _parse_date(value: str | None) -> date | None:
    return date.fromisoformat(value) if value else None


def _iso(value: date | datetime | None) -> str | None:
    return value.isoformat() if value else None


class MemberRepository:
    """Repository for members."""

    def __init__(self, db_path: Path | None = None):
        self.db_path = db_path or get_db_path()

    async def create(self, member: Member) -> int:
        """Create a new member."""
        async with connect(self.db_path) as db:
            cursor = await db.execute(
                """
                INSERT INTO members
                (first_name, last_name, email, phone, status, join_date, notes)
                VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    member.first_name,
                    member.last_name,
                    member.email,
                    member.phone,
                    member.status.value,
                    _iso(member.join_date or date.today()),
                    member.notes,
                ),
            )
            await db.commit()
            return cursor.lastrowid

    async def get(self, member_id: int) -> Member | None:
        """Get a member by ID."""
        async with connect(self.db_path) as db:
            cursor = await db.execute("SELECT * FROM members WHERE id = ?", (member_id,))
            row = await cursor.fetchone()
            if row is None:
                return None
            return self._row_to_member(row)

    async def get_by_email(self, email: str) -> Member | None:
        """Get a member by email (case-insensitive)."""
        async with connect(self.db_path) as db:
            cursor = await db.execute(
                "SELECT * FROM members WHERE lower(email) = lower(?)", (email,)
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            return self._row_to_member(row)

    async def list_all(self, search: str | None = None) -> list[Member]:
        """List members, optionally filtered by name/email."""
        async with connect(self.db_path) as db:
            if search:
                like = f"%{search}%"
                cursor = await db.execute(
                    """
                    SELECT * FROM members
                    WHERE first_name LIKE ? OR last_name LIKE ? OR email LIKE ?
                    ORDER BY last_name, first_name
                    """,
                    (like, like, like),
                )
            else:
                cursor = await db.execute(
                    "SELECT * FROM members ORDER BY last_name, first_name"
                )
            rows = await cursor.fetchall()
            return [self._row_to_member(row) for row in rows]

    def _row_to_member(self, row: aiosqlite.Row) -> Member:
        """Convert a database row to a Member."""
        return Member(
            id=row["id"],
            first_name=row["first_name"],
            last_name=row["last_name"],
            email=row["email"],
            phone=row["phone"],
            status=MemberStatus(row["status"]),
            join_date=_parse_date(row["join_date"]),
            notes=row["notes"] or "",
            created_at=_parse_datetime(row["created_at"]),
            updated_at=_parse_datetime(row["updated_at"]),
        )


class SubscriptionRepository:
    """Repository for member subscriptions."""

    def __init__(self, db_path: Path | None = None):
        self.db_path = db_path or get_db_path()

    async def create(self, subscription: Subscription) -> int:
        """Create a new subscription."""
        async with connect(self.db_path) as db:
            cursor = await db.execute(
                """
                INSERT INTO member_subscriptions
                (member_id, plan_name_snapshot, total_sessions_snapshot,
                 total_amount_snapshot, duration_days_snapshot, start_date, end_date,
                 status, used_sessions, paid_amount)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    subscription.member_id,
                    subscription.plan_name_snapshot,
                    subscription.total_sessions_snapshot,
                    subscription.total_amount_snapshot,
                    subscription.duration_days_snapshot,
                    _iso(subscription.start_date),
                    _iso(subscription.end_date),
                    subscription.status.value,
                    subscription.used_sessions,
                    subscription.paid_amount,
                ),
            )
            await db.commit()
            return cursor.lastrowid

    async def get(self, subscription_id: int) -> Subscription | None:
        """Get a subscription by ID."""
        async with connect(self.db_path) as db:
            cursor = await db.execute(
                "SELECT * FROM member_subscriptions WHERE id = ?", (subscription_id,)
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            return self._row_to_subscription(row)

    async def list_for_member(self, member_id: int) -> list[Subscription]:
        """List a member's subscriptions, newest first."""
        async with connect(self.db_path) as db:
            cursor = await db.execute(
                """
                SELECT * FROM member_subscriptions
                WHERE member_id = ?
                ORDER BY start_date DESC, id DESC
                """,
                (member_id,),
            )
            rows = await cursor.fetchall()
            return [self._row_to_subscription(row) for row in rows]

    async def get_active_for_member(
        self, member_id: int, on: date | None = None
    ) -> Subscription | None:
        """Get the member's active subscription covering the given day."""
        on = on or date.today()
        async with connect(self.db_path) as db:
            cursor = await db.execute(
                """
                SELECT * FROM member_subscriptions
                WHERE member_id = ? AND status = ?
                  AND start_date <= ? AND end_date >= ?
                ORDER BY start_date DESC, id DESC
                LIMIT 1
                """,
                (member_id, SubscriptionStatus.ACTIVE.value, on.isoformat(), on.isoformat()),
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            return self._row_to_subscription(row)

    async def consume_session(self, subscription_id: int) -> bool:
        """Use one session; returns False if none remain."""
        async with connect(self.db_path) as db:
            cursor = await db.execute(
                """
                UPDATE member_subscriptions
                SET used_sessions = used_sessions + 1, updated_at = ?
                WHERE id = ? AND used_sessions < total_sessions_snapshot
                """,
                (datetime.now().isoformat(), subscription_id),
            )
            await db.commit()
            return cursor.rowcount == 1

    async def release_session(self, subscription_id: int) -> None:
        """Give back one used session (e.g. after a cancellation)."""
        async with connect(self.db_path) as db:
            await db.execute(
                """
                UPDATE member_subscriptions
                SET used_sessions = used_sessions - 1, updated_at = ?
                WHERE id = ? AND used_sessions > 0
                """,
                (datetime.now().isoformat(), subscription_id),
            )
            await db.commit()

    def _row_to_subscription(self, row: aiosqlite.Row) -> Subscription:
        """Convert a database row to a Subscription."""
        return Subscription(
            id=row["id"],
            member_id=row["member_id"],
            plan_name_snapshot=row["plan_name_snapshot"],
            total_sessions_snapshot=row["total_sessions_snapshot"],
            total_amount_snapshot=row["total_amount_snapshot"],
            duration_days_snapshot=row["duration_days_snapshot"],
            start_date=date.fromisoformat(row["start_date"]),
            end_date=date.fromisoformat(row["end_date"]),
            status=SubscriptionStatus(row["status"]),
            used_sessions=row["used_sessions"],
            paid_amount=row["paid_amount"],
            created_at=_parse_datetime(row["created_at"]),
            updated_at=_parse_datetime(row["updated_at"]),
        )


class PaymentRepository:
    """Repository for the subscription payment ledger."""

    def __init__(self, db_path: Path | None = None):
        self.db_path = db_path or get_db_path()

    async def _next_receipt_number(self, db: aiosqlite.Connection, year: int) -> str:
        """Next receipt number for the year: RCPT-<year>-<sequence>."""
        prefix = f"RCPT-{year}-"
        cursor = await db.execute(
            "SELECT receipt_number FROM subscription_payments WHERE receipt_number LIKE ?",
            (f"{prefix}%",),
        )
        rows = await cursor.fetchall()
        sequences = [
            int(row["receipt_number"][len(prefix):])
            for row in rows
            if row["receipt_number"][len(prefix):].isdigit()
        ]
        next_seq = max(sequences) + 1 if sequences else RECEIPT_SEQUENCE_START
        return f"{prefix}{next_seq:04d}"

    async def _insert(self, db: aiosqlite.Connection, payment: Payment) -> int:
        if payment.payment_date is None:
            payment.payment_date = datetime.now()
        payment_date = payment.payment_date
        if payment.receipt_number is None:
            payment.receipt_number = await self._next_receipt_number(db, payment_date.year)
        cursor = await db.execute(
            """
            INSERT INTO subscription_payments
            (subscription_id, member_id, amount, payment_method, payment_status,
             payment_date, receipt_number, reference_number, notes,
             refund_amount, refund_date, refund_reason, is_refund, refunded_payment_id)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                payment.subscription_id,
                payment.member_id,
                payment.amount,
                payment.payment_method.value,
                payment.payment_status.value,
                payment_date.isoformat(),
                payment.receipt_number,
                payment.reference_number,
                payment.notes,
                payment.refund_amount,
                _iso(payment.refund_date),
                payment.refund_reason,
                int(payment.is_refund),
                payment.refunded_payment_id,
            ),
        )
        return cursor.lastrowid

    async def create(self, payment: Payment) -> int:
        """Insert a payment and refresh the subscription's paid amount.

        A receipt number is assigned when the payment has none.
        """
        async with connect(self.db_path) as db:
            payment_id = await self._insert(db, payment)
            await self._refresh_paid_amount(db, payment.subscription_id)
            await db.commit()
            return payment_id

    async def create_refund(
        self,
        original: Payment,
        refund: Payment,
        total_refunded: float,
        new_status: PaymentStatus,
    ) -> int:
        """Append a refund row, update the original's refund totals and
        refresh the paid amount in one transaction."""
        async with connect(self.db_path) as db:
            refund_id = await self._insert(db, refund)
            await db.execute(
                """
                UPDATE subscription_payments SET
                    refund_amount = ?, refund_date = ?, refund_reason = ?,
                    payment_status = ?, updated_at = ?
                WHERE id = ?
                """,
                (
                    total_refunded,
                    _iso(refund.payment_date),
                    refund.refund_reason,
                    new_status.value,
                    datetime.now().isoformat(),
                    original.id,
                ),
            )
            await self._refresh_paid_amount(db, original.subscription_id)
            await db.commit()
            return refund_id

    async def get(self, payment_id: int) -> Payment | None:
        """Get a payment by ID."""
        async with connect(self.db_path) as db:
            cursor = await db.execute(
                "SELECT * FROM subscription_payments WHERE id = ?", (payment_id,)
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            return self._row_to_payment(row)

    async def list_for_subscription(self, subscription_id: int) -> list[Payment]:
        """All ledger rows for a subscription, newest first."""
        async with connect(self.db_path) as db:
            cursor = await db.execute(
                """
                SELECT * FROM subscription_payments
                WHERE subscription_id = ?
                ORDER BY payment_date DESC, id DESC
                """,
                (subscription_id,),
            )
            rows = await cursor.fetchall()
            return [self._row_to_payment(row) for row in rows]

    async def list_for_member(self, member_id: int) -> list[Payment]:
        """All ledger rows for a member with the plan name, newest first."""
        async with connect(self.db_path) as db:
            cursor = await db.execute(
                """
                SELECT p.*, s.plan_name_snapshot AS plan_name
                FROM subscription_payments p
                JOIN member_subscriptions s ON s.id = p.subscription_id
                WHERE p.member_id = ?
                ORDER BY p.payment_date DESC, p.id DESC
                """,
                (member_id,),
            )
            rows = await cursor.fetchall()
            return [self._row_to_payment(row) for row in rows]

    async def list_refunds(self, payment_id: int) -> list[Payment]:
        """Refund rows linked to an original payment, oldest first."""
        async with connect(self.db_path) as db:
            cursor = await db.execute(
                """
                SELECT * FROM subscription_payments
                WHERE refunded_payment_id = ? AND is_refund = 1
                ORDER BY payment_date ASC, id ASC
                """,
                (payment_id,),
            )
            rows = await cursor.fetchall()
            return [self._row_to_payment(row) for row in rows]

    async def sum_refunds(self, payment_id: int) -> float:
        """Total already refunded against a payment (positive number)."""
        async with connect(self.db_path) as db:
            cursor = await db.execute(
                """
                SELECT COALESCE(SUM(-amount), 0) AS total FROM subscription_payments
                WHERE refunded_payment_id = ? AND is_refund = 1
                """,
                (payment_id,),
            )
            row = await cursor.fetchone()
            return round_money(row["total"])

    async def _refresh_paid_amount(self, db: aiosqlite.Connection, subscription_id: int) -> float:
        placeholders = ", ".join("?" for _ in LEDGER_STATUSES)
        cursor = await db.execute(
            f"""
            SELECT amount FROM subscription_payments
            WHERE subscription_id = ? AND payment_status IN ({placeholders})
            """,
            (subscription_id, *(s.value for s in LEDGER_STATUSES)),
        )
        rows = await cursor.fetchall()
        total = round_money(sum(row["amount"] for row in rows))
        await db.execute(
            "UPDATE member_subscriptions SET paid_amount = ?, updated_at = ? WHERE id = ?",
            (total, datetime.now().isoformat(), subscription_id),
        )
        return total

    async def refresh_paid_amount(self, subscription_id: int) -> float:
        """Set the subscription's paid amount to the net of its ledger rows."""
        async with connect(self.db_path) as db:
            total = await self._refresh_paid_amount(db, subscription_id)
            await db.commit()
            return total

    async def list_in_range(self, start: date, end: date) -> list[Payment]:
        """Ledger rows with a payment date inside [start, end]."""
        async with connect(self.db_path) as db:
            cursor = await db.execute(
                """
                SELECT * FROM subscription_payments
                WHERE date(payment_date) BETWEEN ? AND ?
                ORDER BY payment_date ASC, id ASC
                """,
                (start.isoformat(), end.isoformat()),
            )
            rows = await cursor.fetchall()
            return [self._row_to_payment(row) for row in rows]

    def _row_to_payment(self, row: aiosqlite.Row) -> Payment:
        """Convert a database row to a Payment."""
        return Payment(
            id=row["id"],
            subscription_id=row["subscription_id"],
            member_id=row["member_id"],
            amount=row["amount"],
            payment_method=PaymentMethod(row["payment_method"]),
            payment_status=PaymentStatus(row["payment_status"]),
            payment_date=_parse_datetime(row["payment_date"]),
            receipt_number=row["receipt_number"],
            reference_number=row["reference_number"],
            notes=row["notes"],
            refund_amount=row["refund_amount"] or 0.0,
            refund_date=_parse_datetime(row["refund_date"]),
            refund_reason=row["refund_reason"],
            is_refund=bool(row["is_refund"]),
            refunded_payment_id=row["refunded_payment_id"],
            plan_name=row["plan_name"] if "plan_name" in row.keys() else None,
            created_at=_parse_datetime(row["created_at"]),
            updated_at=_parse_datetime(row["updated_at"]),
        )


class TrainerRepository:
    """Repository for trainers."""

    def __init__(self, db_path: Path | None = None):
        self.db_path = db_path or get_db_path()

    async def create(self, trainer: Trainer) -> int:
        """Create a new trainer."""
        async with connect(self.db_path) as db:
            cursor = await db.execute(
                """
                INSERT INTO trainers
                (trainer_code, first_name, last_name, email, phone, date_of_birth,
                 hourly_rate, commission_rate, years_experience, certifications,
                 specializations, languages, max_clients_per_session,
                 is_accepting_new_clients, emergency_contact, insurance_policy_number,
                 background_check_date, cpr_certification_expires, notes)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                self._trainer_values(trainer),
            )
            await db.commit()
            return cursor.lastrowid

    async def get(self, trainer_id: int) -> Trainer | None:
        """Get a trainer by ID."""
        async with connect(self.db_path) as db:
            cursor = await db.execute("SELECT * FROM trainers WHERE id = ?", (trainer_id,))
            row = await cursor.fetchone()
            if row is None:
                return None
            return self._row_to_trainer(row)

    async def list_filtered(self, filters: TrainerFilters | None = None) -> list[Trainer]:
        """List trainers matching the filters, newest first."""
        filters = filters or TrainerFilters()
        clauses: list[str] = []
        params: list = []

        if filters.search:
            like = f"%{filters.search}%"
            clauses.append("(first_name LIKE ? OR last_name LIKE ? OR email LIKE ?)")
            params.extend([like, like, like])

        # Every requested specialization must be present
        for specialization in filters.specializations:
            clauses.append("specializations LIKE ?")
            params.append(f'%"{specialization}"%')

        if filters.is_accepting_new_clients is not None:
            clauses.append("is_accepting_new_clients = ?")
            params.append(int(filters.is_accepting_new_clients))

        if filters.years_experience_min is not None:
            clauses.append("years_experience >= ?")
            params.append(filters.years_experience_min)
        if filters.years_experience_max is not None:
            clauses.append("years_experience <= ?")
            params.append(filters.years_experience_max)

        sql = "SELECT * FROM trainers"
        if clauses:
            sql += " WHERE " + " AND ".join(clauses)
        sql += " ORDER BY created_at DESC, id DESC"

        if filters.offset is not None:
            sql += " LIMIT ? OFFSET ?"
            params.extend([filters.limit or 50, filters.offset])
        elif filters.limit:
            sql += " LIMIT ?"
            params.append(filters.limit)

        async with connect(self.db_path) as db:
            cursor = await db.execute(sql, params)
            rows = await cursor.fetchall()
            return [self._row_to_trainer(row) for row in rows]

    async def update(self, trainer: Trainer) -> None:
        """Update an existing trainer."""
        if trainer.id is None:
            raise ValueError("Trainer must have an ID to update")

        async with connect(self.db_path) as db:
            await db.execute(
                """
                UPDATE trainers SET
                    trainer_code = ?, first_name = ?, last_name = ?, email = ?,
                    phone = ?, date_of_birth = ?, hourly_rate = ?, commission_rate = ?,
                    years_experience = ?, certifications = ?, specializations = ?,
                    languages = ?, max_clients_per_session = ?,
                    is_accepting_new_clients = ?, emergency_contact = ?,
                    insurance_policy_number = ?, background_check_date = ?,
                    cpr_certification_expires = ?, notes = ?,
                    updated_at = CURRENT_TIMESTAMP
                WHERE id = ?
                """,
                (*self._trainer_values(trainer), trainer.id),
            )
            await db.commit()

    async def delete(self, trainer_id: int) -> bool:
        """Hard-delete a trainer, detaching them from their sessions."""
        async with connect(self.db_path) as db:
            await db.execute(
                "UPDATE training_sessions SET trainer_id = NULL WHERE trainer_id = ?",
                (trainer_id,),
            )
            cursor = await db.execute("DELETE FROM trainers WHERE id = ?", (trainer_id,))
            await db.commit()
            return cursor.rowcount == 1

    async def count(self) -> int:
        """Count all trainers."""
        async with connect(self.db_path) as db:
            cursor = await db.execute("SELECT COUNT(*) AS c FROM trainers")
            row = await cursor.fetchone()
            return row["c"]

    async def count_by_accepting(self) -> dict[str, int]:
        """Count trainers by the accepting-new-clients flag."""
        async with connect(self.db_path) as db:
            cursor = await db.execute(
                """
                SELECT
                    COALESCE(SUM(is_accepting_new_clients = 1), 0) AS active,
                    COALESCE(SUM(is_accepting_new_clients = 0), 0) AS inactive
                FROM trainers
                """
            )
            row = await cursor.fetchone()
            return {"active": row["active"], "inactive": row["inactive"]}

    async def list_cpr_expiring_before(self, cutoff: date) -> list[Trainer]:
        """Trainers whose CPR certification expires on or before the cutoff."""
        async with connect(self.db_path) as db:
            cursor = await db.execute(
                """
                SELECT * FROM trainers
                WHERE cpr_certification_expires IS NOT NULL
                  AND cpr_certification_expires <= ?
                ORDER BY cpr_certification_expires ASC
                """,
                (cutoff.isoformat(),),
            )
            rows = await cursor.fetchall()
            return [self._row_to_trainer(row) for row in rows]

    async def set_accepting_clients(self, trainer_ids: list[int], is_accepting: bool) -> int:
        """Set the accepting-new-clients flag for several trainers."""
        if not trainer_ids:
            return 0
        placeholders = ", ".join("?" for _ in trainer_ids)
        async with connect(self.db_path) as db:
            cursor = await db.execute(
                f"""
                UPDATE trainers
                SET is_accepting_new_clients = ?, updated_at = CURRENT_TIMESTAMP
                WHERE id IN ({placeholders})
                """,
                (int(is_accepting), *trainer_ids),
            )
            await db.commit()
            return cursor.rowcount

    async def code_exists(self, trainer_code: str, exclude_id: int | None = None) -> bool:
        """Check whether a trainer code is already taken."""
        async with connect(self.db_path) as db:
            if exclude_id is not None:
                cursor = await db.execute(
                    "SELECT 1 FROM trainers WHERE trainer_code = ? AND id != ?",
                    (trainer_code, exclude_id),
                )
            else:
                cursor = await db.execute(
                    "SELECT 1 FROM trainers WHERE trainer_code = ?", (trainer_code,)
                )
            return await cursor.fetchone() is not None

    def _trainer_values(self, trainer: Trainer) -> tuple:
        return (
            trainer.trainer_code,
            trainer.first_name,
            trainer.last_name,
            trainer.email,
            trainer.phone,
            _iso(trainer.date_of_birth),
            trainer.hourly_rate,
            trainer.commission_rate,
            trainer.years_experience,
            json.dumps(trainer.certifications),
            json.dumps(trainer.specializations),
            json.dumps(trainer.languages),
            trainer.max_clients_per_session,
            int(trainer.is_accepting_new_clients),
            json.dumps(trainer.emergency_contact.to_dict()) if trainer.emergency_contact else None,
            trainer.insurance_policy_number,
            _iso(trainer.background_check_date),
            _iso(trainer.cpr_certification_expires),
            trainer.notes,
        )

    def _row_to_trainer(self, row: aiosqlite.Row) -> Trainer:
        """Convert a database row to a Trainer."""
        contact = json.loads(row["emergency_contact"]) if row["emergency_contact"] else None
        return Trainer(
            id=row["id"],
            trainer_code=row["trainer_code"],
            first_name=row["first_name"],
            last_name=row["last_name"],
            email=row["email"],
            phone=row["phone"],
            date_of_birth=_parse_date(row["date_of_birth"]),
            hourly_rate=row["hourly_rate"],
            commission_rate=row["commission_rate"],
            years_experience=row["years_experience"],
            certifications=json.loads(row["certifications"] or "[]"),
            specializations=json.loads(row["specializations"] or "[]"),
            languages=json.loads(row["languages"] or "[]"),
            max_clients_per_session=row["max_clients_per_session"],
            is_accepting_new_clients=bool(row["is_accepting_new_clients"]),
            emergency_contact=EmergencyContact.from_dict(contact) if contact else None,
            insurance_policy_number=row["insurance_policy_number"],
            background_check_date=_parse_date(row["background_check_date"]),
            cpr_certification_expires=_parse_date(row["cpr_certification_expires"]),
            notes=row["notes"],
            created_at=_parse_datetime(row["created_at"]),
            updated_at=_parse_datetime(row["updated_at"]),
        )


class TrainingSessionRepository:
    """Repository for training sessions and the weekly limit queries."""

    def __init__(self, db_path: Path | None = None):
        self.db_path = db_path or get_db_path()

    async def create(self, session: TrainingSession) -> int:
        """Create a new training session."""
        async with connect(self.db_path) as db:
            cursor = await db.execute(
                """
                INSERT INTO training_sessions
                (trainer_id, member_id, scheduled_start, scheduled_end,
                 session_type, status, location, notes)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    session.trainer_id,
                    session.member_id,
                    session.scheduled_start.isoformat(),
                    session.scheduled_end.isoformat(),
                    session.session_type.value,
                    session.status.value,
                    session.location,
                    session.notes,
                ),
            )
            await db.commit()
            return cursor.lastrowid

    async def get(self, session_id: int) -> TrainingSession | None:
        """Get a session by ID."""
        async with connect(self.db_path) as db:
            cursor = await db.execute(
                """
                SELECT s.*, t.first_name || ' ' || t.last_name AS trainer_name
                FROM training_sessions s
                LEFT JOIN trainers t ON t.id = s.trainer_id
                WHERE s.id = ?
                """,
                (session_id,),
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            return self._row_to_session(row)

    async def set_status(self, session_id: int, status: SessionStatus) -> None:
        """Change a session's status."""
        async with connect(self.db_path) as db:
            await db.execute(
                "UPDATE training_sessions SET status = ? WHERE id = ?",
                (status.value, session_id),
            )
            await db.commit()

    async def history(
        self,
        trainer_id: int | None = None,
        member_id: int | None = None,
        start: date | None = None,
        end: date | None = None,
    ) -> list[TrainingSession]:
        """Sessions matching the filters, most recent first."""
        clauses: list[str] = []
        params: list = []
        if trainer_id is not None:
            clauses.append("s.trainer_id = ?")
            params.append(trainer_id)
        if member_id is not None:
            clauses.append("s.member_id = ?")
            params.append(member_id)
        if start is not None:
            clauses.append("date(s.scheduled_start) >= ?")
            params.append(start.isoformat())
        if end is not None:
            clauses.append("date(s.scheduled_start) <= ?")
            params.append(end.isoformat())

        sql = """
            SELECT s.*, t.first_name || ' ' || t.last_name AS trainer_name
            FROM training_sessions s
            LEFT JOIN trainers t ON t.id = s.trainer_id
        """
        if clauses:
            sql += " WHERE " + " AND ".join(clauses)
        sql += " ORDER BY s.scheduled_start DESC, s.id DESC"

        async with connect(self.db_path) as db:
            cursor = await db.execute(sql, params)
            rows = await cursor.fetchall()
            return [self._row_to_session(row) for row in rows]

    async def check_member_weekly_session_limit(
        self,
        member_id: int,
        week_start: date,
        week_end: date,
        session_type: SessionType,
    ) -> dict:
        """Count the member's non-cancelled regular sessions in the week.

        Only ``member`` sessions are capped; other types can always book.
        """
        async with connect(self.db_path) as db:
            max_allowed = await self._get_int_setting(db, MAX_MEMBER_SESSIONS_PER_WEEK, 1)
            cursor = await db.execute(
                """
                SELECT COUNT(*) AS c FROM training_sessions
                WHERE member_id = ? AND session_type = ? AND status != ?
                  AND date(scheduled_start) BETWEEN ? AND ?
                """,
                (
                    member_id,
                    SessionType.MEMBER.value,
                    SessionStatus.CANCELLED.value,
                    week_start.isoformat(),
                    week_end.isoformat(),
                ),
            )
            row = await cursor.fetchone()
            current = row["c"]

        if not session_type.counts_toward_member_limit:
            return {
                "can_book": True,
                "current_member_sessions": current,
                "max_allowed": max_allowed,
                "message": f"{session_type.value} sessions are not subject to the weekly limit",
            }

        can_book = current < max_allowed
        if can_book:
            message = f"Member can book ({current}/{max_allowed} sessions this week)"
        else:
            message = (
                f"Member has reached the weekly limit of {max_allowed} "
                f"member session(s) ({current}/{max_allowed})"
            )
        return {
            "can_book": can_book,
            "current_member_sessions": current,
            "max_allowed": max_allowed,
            "message": message,
        }

    async def check_studio_session_limit(self, week_start: date, week_end: date) -> list[dict]:
        """Studio-wide weekly capacity; one row, or none when no limit is configured."""
        async with connect(self.db_path) as db:
            max_allowed = await self._get_int_setting(db, MAX_SESSIONS_PER_WEEK, None)
            if max_allowed is None:
                return []
            cursor = await db.execute(
                """
                SELECT COUNT(*) AS c FROM training_sessions
                WHERE status != ? AND date(scheduled_start) BETWEEN ? AND ?
                """,
                (SessionStatus.CANCELLED.value, week_start.isoformat(), week_end.isoformat()),
            )
            row = await cursor.fetchone()
            current = row["c"]

        percentage = round(current * 100 / max_allowed) if max_allowed > 0 else 0
        return [
            {
                "current_count": current,
                "max_allowed": max_allowed,
                "can_book": current < max_allowed,
                "percentage": percentage,
            }
        ]

    async def _get_int_setting(
        self, db: aiosqlite.Connection, key: str, default: int | None
    ) -> int | None:
        cursor = await db.execute("SELECT value FROM studio_settings WHERE key = ?", (key,))
        row = await cursor.fetchone()
        if row is None:
            return default
        return int(row["value"])

    def _row_to_session(self, row: aiosqlite.Row) -> TrainingSession:
        """Convert a database row to a TrainingSession."""
        return TrainingSession(
            id=row["id"],
            trainer_id=row["trainer_id"],
            member_id=row["member_id"],
            scheduled_start=datetime.fromisoformat(row["scheduled_start"]),
            scheduled_end=datetime.fromisoformat(row["scheduled_end"]),
            session_type=SessionType(row["session_type"]),
            status=SessionStatus(row["status"]),
            location=row["location"],
            notes=row["notes"],
            trainer_name=row["trainer_name"] if "trainer_name" in row.keys() else None,
            created_at=_parse_datetime(row["created_at"]),
        )


class StudioSettingsRepository:
    """Repository for studio key/value settings."""

    def __init__(self, db_path: Path | None = None):
        self.db_path = db_path or get_db_path()

    async def get(self, key: str) -> str | None:
        async with connect(self.db_path) as db:
            cursor = await db.execute("SELECT value FROM studio_settings WHERE key = ?", (key,))
            row = await cursor.fetchone()
            return row["value"] if row else None

    async def set(self, key: str, value: str) -> None:
        async with connect(self.db_path) as db:
            await db.execute(
                """
                INSERT INTO studio_settings (key, value) VALUES (?, ?)
                ON CONFLICT(key) DO UPDATE SET value = excluded.value
                """,
                (key, value),
            )
            await db.commit()

    async def delete(self, key: str) -> None:
        async with connect(self.db_path) as db:
            await db.execute("DELETE FROM studio_settings WHERE key = ?", (key,))
            await db.commit()
