"""File exports: CSV listings and PDF receipts."""

from .csv_export import (
    TRAINER_CSV_HEADERS,
    generate_csv_filename,
    session_csv_filename,
    sessions_to_csv,
    trainers_to_csv,
)
from .receipts import build_receipt_pdf, receipt_filename

__all__ = [
    "TRAINER_CSV_HEADERS",
    "build_receipt_pdf",
    "generate_csv_filename",
    "receipt_filename",
    "session_csv_filename",
    "sessions_to_csv",
    "trainers_to_csv",
]
