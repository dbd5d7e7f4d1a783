"""Data models for gymdesk."""

from .member import Member, MemberStatus, Subscription, SubscriptionStatus
from .payment import (
    BalanceInfo,
    Payment,
    PaymentMethod,
    PaymentStats,
    PaymentStatus,
    RefundHistory,
)
from .trainer import EmergencyContact, Trainer, TrainerFilters
from .training_session import (
    CapacityColorScheme,
    MemberWeeklyLimitResult,
    SessionStatus,
    SessionType,
    StudioSessionLimit,
    TrainingSession,
)

__all__ = [
    "BalanceInfo",
    "CapacityColorScheme",
    "EmergencyContact",
    "Member",
    "MemberStatus",
    "MemberWeeklyLimitResult",
    "Payment",
    "PaymentMethod",
    "PaymentStats",
    "PaymentStatus",
    "RefundHistory",
    "SessionStatus",
    "SessionType",
    "StudioSessionLimit",
    "Subscription",
    "SubscriptionStatus",
    "Trainer",
    "TrainerFilters",
    "TrainingSession",
]
