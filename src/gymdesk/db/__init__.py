"""Database layer for gymdesk."""

from .engine import get_db_path, init_db
from .repositories import (
    MemberRepository,
    PaymentRepository,
    StudioSettingsRepository,
    SubscriptionRepository,
    TrainerRepository,
    TrainingSessionRepository,
)

__all__ = [
    "get_db_path",
    "init_db",
    "MemberRepository",
    "PaymentRepository",
    "StudioSettingsRepository",
    "SubscriptionRepository",
    "TrainerRepository",
    "TrainingSessionRepository",
]
