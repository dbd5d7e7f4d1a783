"""CSV exports for trainers and training sessions."""

import csv
import io
from datetime import date, datetime

from ..models.trainer import Trainer
from ..models.training_session import SessionStatus, TrainingSession

# Column order of the trainer export
TRAINER_CSV_HEADERS = [
    "Trainer Code",
    "First Name",
    "Last Name",
    "Email",
    "Phone",
    "Date of Birth",
    "Hourly Rate",
    "Commission Rate",
    "Years Experience",
    "Max Clients Per Session",
    "Certifications",
    "Specializations",
    "Languages",
    "Accepting New Clients",
    "Emergency Contact Name",
    "Emergency Contact Relationship",
    "Emergency Contact Phone",
    "Insurance Policy Number",
    "Background Check Date",
    "CPR Certification Expires",
    "Notes",
    "Created At",
    "Updated At",
]

SESSION_CSV_HEADERS = [
    "Date",
    "Time",
    "Trainer",
    "Location",
    "Category",
    "Status",
    "Duration (min)",
    "Participants",
    "Max Participants",
    "Attendance Rate (%)",
    "Notes",
]


def format_date(value: date | None) -> str:
    """MM/DD/YYYY, empty when missing."""
    return value.strftime("%m/%d/%Y") if value else ""


def format_datetime(value: datetime | None) -> str:
    return value.strftime("%m/%d/%Y, %I:%M:%S %p") if value else ""


def format_currency(value: float | None) -> str:
    return f"${value:.2f}" if value is not None else ""


def format_percentage(value: float | None) -> str:
    """Format a fraction as a percentage: 0.15 -> '15.0%'."""
    return f"{value * 100:.1f}%" if value is not None else ""


def format_list(values: list[str] | None) -> str:
    return "; ".join(values) if values else ""


def _optional(value) -> str:
    return "" if value is None else str(value)


def trainer_to_row(trainer: Trainer) -> list[str]:
    contact = trainer.emergency_contact
    return [
        trainer.trainer_code,
        trainer.first_name or "",
        trainer.last_name or "",
        trainer.email or "",
        trainer.phone or "",
        format_date(trainer.date_of_birth),
        format_currency(trainer.hourly_rate),
        format_percentage(trainer.commission_rate),
        _optional(trainer.years_experience),
        _optional(trainer.max_clients_per_session),
        format_list(trainer.certifications),
        format_list(trainer.specializations),
        format_list(trainer.languages),
        "Yes" if trainer.is_accepting_new_clients else "No",
        contact.name if contact else "",
        contact.relationship if contact else "",
        contact.phone if contact else "",
        trainer.insurance_policy_number or "",
        format_date(trainer.background_check_date),
        format_date(trainer.cpr_certification_expires),
        trainer.notes or "",
        format_datetime(trainer.created_at),
        format_datetime(trainer.updated_at),
    ]


def trainers_to_csv(trainers: list[Trainer]) -> str:
    """Render trainers as CSV text with a header row."""
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(TRAINER_CSV_HEADERS)
    for trainer in trainers:
        writer.writerow(trainer_to_row(trainer))
    return buf.getvalue()


def generate_csv_filename(now: datetime | None = None) -> str:
    """Filename like ``trainers-export-2025-10-18-14-30-05.csv``."""
    now = now or datetime.now()
    return f"trainers-export-{now.strftime('%Y-%m-%d-%H-%M-%S')}.csv"


def session_to_row(session: TrainingSession) -> list:
    participants = 1 if session.member_id is not None else 0
    attended = participants and session.status == SessionStatus.COMPLETED
    return [
        session.scheduled_start.strftime("%Y-%m-%d"),
        f"{session.scheduled_start:%H:%M}-{session.scheduled_end:%H:%M}",
        session.trainer_name or "",
        session.location or "",
        session.session_type.value,
        session.status.value,
        session.duration_minutes,
        participants,
        1,
        100 if attended else 0,
        (session.notes or "").replace("\n", " "),
    ]


def sessions_to_csv(sessions: list[TrainingSession]) -> str:
    """Render session history as CSV text with a header row."""
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(SESSION_CSV_HEADERS)
    for session in sessions:
        writer.writerow(session_to_row(session))
    return buf.getvalue()


def session_csv_filename(day: date | None = None) -> str:
    return f"training-sessions-{(day or date.today()).isoformat()}.csv"
