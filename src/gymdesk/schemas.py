"""Input schemas shared by the CLI and the HTTP API."""

from datetime import date, datetime
from typing import TypeVar

from pydantic import BaseModel, ConfigDict, EmailStr, Field, model_validator
from pydantic import ValidationError as PydanticValidationError

from .errors import ValidationError
from .models.payment import PaymentMethod
from .models.training_session import SessionType

ModelT = TypeVar("ModelT", bound=BaseModel)


def validate_input(model: type[ModelT], data: dict) -> ModelT:
    """Validate ``data`` against ``model``.

    Raises:
        ValidationError: with one message per failing field.
    """
    try:
        return model.model_validate(data)
    except PydanticValidationError as e:
        errors = {}
        for error in e.errors():
            field_name = ".".join(str(part) for part in error["loc"]) or "__root__"
            errors.setdefault(field_name, error["msg"])
        raise ValidationError(f"Invalid {model.__name__} input", errors) from e


class MemberCreate(BaseModel):
    first_name: str = Field(min_length=1, max_length=50)
    last_name: str = Field(min_length=1, max_length=50)
    email: EmailStr
    phone: str | None = None
    join_date: date | None = None
    notes: str = ""


class SubscriptionCreate(BaseModel):
    """Plan details copied into the subscription at signup."""

    member_id: int = Field(gt=0)
    plan_name: str = Field(min_length=1)
    total_sessions: int = Field(gt=0)
    total_amount: float = Field(ge=0, allow_inf_nan=False)
    duration_days: int = Field(gt=0)
    start_date: date | None = None


class PaymentCreate(BaseModel):
    subscription_id: int = Field(gt=0)
    amount: float = Field(gt=0, allow_inf_nan=False)
    payment_method: PaymentMethod
    payment_date: datetime | None = None
    reference_number: str | None = None
    notes: str | None = None


class RefundCreate(BaseModel):
    # Positivity is a refund rule, checked by the payment service
    refund_amount: float = Field(allow_inf_nan=False)
    reason: str = Field(min_length=1)


class SessionCreate(BaseModel):
    scheduled_start: datetime
    scheduled_end: datetime
    session_type: SessionType = SessionType.MEMBER
    trainer_id: int | None = None
    member_id: int | None = None
    location: str | None = None
    notes: str | None = None

    @model_validator(mode="after")
    def _same_offset_kind(self) -> "SessionCreate":
        if (self.scheduled_start.tzinfo is None) != (self.scheduled_end.tzinfo is None):
            raise ValueError(
                "scheduled_start and scheduled_end must both carry a UTC offset or neither"
            )
        return self


class TrainerUpdate(BaseModel):
    """Partial trainer update.

    Only the fields present are applied. ``commission_rate`` is a fraction as
    stored, not the percentage the onboarding form takes. Fields without
    ``None`` in their type cannot be cleared.
    """

    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    trainer_code: str = Field(default=None, min_length=1)
    first_name: str = Field(default=None, min_length=1, max_length=50)
    last_name: str = Field(default=None, min_length=1, max_length=50)
    email: EmailStr = None
    phone: str | None = None
    date_of_birth: date | None = None
    hourly_rate: float | None = Field(default=None, ge=0, allow_inf_nan=False)
    commission_rate: float = Field(default=None, ge=0, le=1)
    years_experience: int | None = Field(default=None, ge=0, le=50)
    certifications: list[str] = None
    specializations: list[str] = None
    languages: list[str] = Field(default=None, min_length=1)
    max_clients_per_session: int = Field(default=None, ge=1, le=50)
    is_accepting_new_clients: bool = None
    emergency_contact: dict | None = None
    insurance_policy_number: str | None = None
    background_check_date: date | None = None
    cpr_certification_expires: date | None = None
    notes: str | None = None
