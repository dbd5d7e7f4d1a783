"""Tests for CSV and PDF exports."""

import csv
import io
from datetime import date, datetime

from gymdesk.exports import (
    TRAINER_CSV_HEADERS,
    build_receipt_pdf,
    generate_csv_filename,
    receipt_filename,
    session_csv_filename,
    sessions_to_csv,
    trainers_to_csv,
)
from gymdesk.exports.csv_export import (
    SESSION_CSV_HEADERS,
    format_currency,
    format_date,
    format_datetime,
    format_list,
    format_percentage,
    session_to_row,
    trainer_to_row,
)
from gymdesk.models import (
    EmergencyContact,
    Member,
    Payment,
    PaymentMethod,
    RefundHistory,
    SessionStatus,
    SessionType,
    Trainer,
    TrainingSession,
)


def _trainer(**kwargs):
    defaults = dict(
        trainer_code="TR-0001",
        first_name="Marc",
        last_name="Dubois",
        email="marc@example.com",
    )
    defaults.update(kwargs)
    return Trainer(**defaults)


class TestFormatters:
    """Tests for CSV cell formatters."""

    def test_format_date(self):
        assert format_date(date(2025, 3, 7)) == "03/07/2025"
        assert format_date(None) == ""

    def test_format_datetime(self):
        assert format_datetime(datetime(2025, 3, 7, 14, 5, 9)) == "03/07/2025, 02:05:09 PM"

    def test_format_currency(self):
        assert format_currency(45) == "$45.00"
        assert format_currency(None) == ""

    def test_format_percentage(self):
        assert format_percentage(0.15) == "15.0%"
        assert format_percentage(None) == ""

    def test_format_list(self):
        assert format_list(["Pilates", "Yoga"]) == "Pilates; Yoga"
        assert format_list([]) == ""


class TestTrainerCsv:
    """Tests for the trainer export."""

    def test_row_matches_headers(self):
        trainer = _trainer(
            hourly_rate=45.0,
            specializations=["Pilates", "Rehabilitation"],
            emergency_contact=EmergencyContact(name="Paul", relationship="Brother"),
            is_accepting_new_clients=False,
        )

        row = dict(zip(TRAINER_CSV_HEADERS, trainer_to_row(trainer)))

        assert len(trainer_to_row(trainer)) == len(TRAINER_CSV_HEADERS)
        assert row["Hourly Rate"] == "$45.00"
        assert row["Commission Rate"] == "15.0%"
        assert row["Specializations"] == "Pilates; Rehabilitation"
        assert row["Languages"] == "English"
        assert row["Accepting New Clients"] == "No"
        assert row["Emergency Contact Name"] == "Paul"
        assert row["Years Experience"] == ""

    def test_csv_quotes_embedded_commas(self):
        text = trainers_to_csv([_trainer(notes='Prefers mornings, "early" ones')])

        rows = list(csv.reader(io.StringIO(text)))

        assert rows[0] == TRAINER_CSV_HEADERS
        assert rows[1][TRAINER_CSV_HEADERS.index("Notes")] == 'Prefers mornings, "early" ones'

    def test_filename(self):
        name = generate_csv_filename(datetime(2025, 10, 18, 14, 30, 5))
        assert name == "trainers-export-2025-10-18-14-30-05.csv"


class TestSessionCsv:
    """Tests for the session history export."""

    def test_completed_member_session(self):
        session = TrainingSession(
            scheduled_start=datetime(2025, 10, 18, 9, 0),
            scheduled_end=datetime(2025, 10, 18, 10, 0),
            session_type=SessionType.MEMBER,
            status=SessionStatus.COMPLETED,
            member_id=1,
            trainer_name="Marc Dubois",
            notes="Line one\nLine two",
        )

        row = dict(zip(SESSION_CSV_HEADERS, session_to_row(session)))

        assert row["Date"] == "2025-10-18"
        assert row["Time"] == "09:00-10:00"
        assert row["Trainer"] == "Marc Dubois"
        assert row["Category"] == "member"
        assert row["Duration (min)"] == 60
        assert row["Participants"] == 1
        assert row["Attendance Rate (%)"] == 100
        assert row["Notes"] == "Line one Line two"

    def test_scheduled_blocker_has_no_attendance(self):
        session = TrainingSession(
            scheduled_start=datetime(2025, 10, 18, 12, 0),
            scheduled_end=datetime(2025, 10, 18, 12, 30),
            session_type=SessionType.NON_BOOKABLE,
        )

        row = dict(zip(SESSION_CSV_HEADERS, session_to_row(session)))

        assert row["Participants"] == 0
        assert row["Attendance Rate (%)"] == 0

    def test_csv_text(self):
        text = sessions_to_csv([])
        assert text.splitlines() == [",".join(SESSION_CSV_HEADERS)]

    def test_filename(self):
        assert session_csv_filename(date(2025, 10, 18)) == "training-sessions-2025-10-18.csv"


class TestReceiptPdf:
    """Tests for PDF receipts."""

    def _payment(self, **kwargs):
        defaults = dict(
            id=1,
            subscription_id=1,
            member_id=1,
            amount=100.0,
            payment_method=PaymentMethod.BANK_TRANSFER,
            payment_date=datetime(2025, 10, 18, 10, 0),
            receipt_number="RCPT-2025-1000",
        )
        defaults.update(kwargs)
        return Payment(**defaults)

    def test_payment_receipt(self):
        member = Member(first_name="Ana", last_name="Silva", email="ana@example.com")

        pdf = build_receipt_pdf(self._payment(plan_name="10 Sessions"), member)

        assert pdf.startswith(b"%PDF")

    def test_refund_receipt(self):
        original = self._payment(refund_amount=20.0)
        refund = self._payment(
            id=2,
            amount=-20.0,
            is_refund=True,
            refunded_payment_id=1,
            receipt_number="RCPT-2025-1001",
            refund_reason="Overcharged",
        )
        history = RefundHistory(payment=original, refunds=[refund])

        pdf = build_receipt_pdf(refund, history=history, original=original)

        assert pdf.startswith(b"%PDF")

    def test_filename(self):
        assert receipt_filename(self._payment()) == "receipt-RCPT-2025-1000.pdf"
