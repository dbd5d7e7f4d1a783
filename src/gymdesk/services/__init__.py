"""Business services for gymdesk."""

from .members import MemberService
from .payments import PaymentService, calculate_balance_info
from .session_limits import SessionLimitService, get_capacity_color_scheme, get_week_range
from .trainers import TrainerService
from .training_sessions import TrainingSessionService

__all__ = [
    "calculate_balance_info",
    "get_capacity_color_scheme",
    "get_week_range",
    "MemberService",
    "PaymentService",
    "SessionLimitService",
    "TrainerService",
    "TrainingSessionService",
]
