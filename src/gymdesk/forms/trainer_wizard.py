"""Five-step trainer creation wizard.

Each step owns a pydantic schema. A step counts as completed once its schema
validates, and the wizard only moves forward through validation::

    wizard = TrainerWizard()
    wizard.update(first_name="Ana", last_name="Silva", email="ana@example.com")
    wizard.next()          # validates step 1, moves to step 2
    ...
    payload = wizard.submit()
"""

import json
import logging
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, EmailStr, Field, model_validator

from ..errors import ValidationError
from ..schemas import validate_input

logger = logging.getLogger(__name__)


class _StepSchema(BaseModel):
    """Validates the whole form but only looks at its own fields."""

    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True)

    @model_validator(mode="before")
    @classmethod
    def _blank_to_none(cls, data: Any) -> Any:
        # Blank form inputs mean "not provided"
        if isinstance(data, dict):
            return {k: (None if v == "" else v) for k, v in data.items()}
        return data


class PersonalInfoStep(_StepSchema):
    first_name: str = Field(min_length=1, max_length=50)
    last_name: str = Field(min_length=1, max_length=50)
    email: EmailStr
    phone: str | None = None
    date_of_birth: date | None = None
    trainer_code: str | None = None


class ProfessionalDetailsStep(_StepSchema):
    hourly_rate: float | None = Field(default=None, ge=0)
    commission_rate: float | None = Field(default=None, ge=0, le=100)  # percent
    years_experience: int | None = Field(default=None, ge=0, le=50)


class SpecializationsStep(_StepSchema):
    specializations: list[str] = Field(default_factory=list)
    certifications: list[str] = Field(default_factory=list)
    languages: list[str] = Field(min_length=1)


class CapacityStep(_StepSchema):
    max_clients_per_session: int | None = Field(default=None, ge=1, le=50)
    is_accepting_new_clients: bool = True


class ComplianceStep(_StepSchema):
    insurance_policy_number: str | None = None
    background_check_date: date | None = None
    cpr_certification_expires: date | None = None
    emergency_contact_name: str | None = None
    emergency_contact_relationship: str | None = None
    emergency_contact_phone: str | None = None
    notes: str | None = None


@dataclass(frozen=True)
class WizardStep:
    id: int
    title: str
    description: str
    schema: type[_StepSchema]
    is_optional: bool = False

    @property
    def fields(self) -> list[str]:
        return list(self.schema.model_fields)


STEPS: tuple[WizardStep, ...] = (
    WizardStep(1, "Personal Information", "Basic trainer details", PersonalInfoStep),
    WizardStep(
        2, "Professional Details", "Rates and experience", ProfessionalDetailsStep, True
    ),
    WizardStep(
        3, "Specializations & Certifications", "Skills and qualifications", SpecializationsStep
    ),
    WizardStep(4, "Capacity & Availability", "Client capacity settings", CapacityStep, True),
    WizardStep(5, "Compliance & Settings", "Safety and compliance info", ComplianceStep, True),
)


def default_form_data() -> dict[str, Any]:
    """Initial values for a new trainer form."""
    return {
        "first_name": "",
        "last_name": "",
        "email": "",
        "phone": "",
        "date_of_birth": "",
        "trainer_code": "",
        "hourly_rate": None,
        "commission_rate": "",
        "years_experience": None,
        "certifications": [],
        "specializations": [],
        "languages": ["English"],
        "max_clients_per_session": "",
        "is_accepting_new_clients": True,
        "insurance_policy_number": "",
        "background_check_date": "",
        "cpr_certification_expires": "",
        "emergency_contact_name": "",
        "emergency_contact_relationship": "",
        "emergency_contact_phone": "",
        "notes": "",
    }


class TrainerWizard:
    """State machine behind the progressive trainer form."""

    def __init__(self, data: dict[str, Any] | None = None):
        self.data = default_form_data()
        if data:
            self.data.update(data)
        self.current_step = 1
        self.completed_steps: set[int] = set()

    @property
    def step(self) -> WizardStep:
        return self.get_step(self.current_step)

    @property
    def progress(self) -> float:
        """Percentage of the way through the steps."""
        return self.current_step / len(STEPS) * 100

    @property
    def is_last_step(self) -> bool:
        return self.current_step == len(STEPS)

    @staticmethod
    def get_step(step_id: int) -> WizardStep:
        if not 1 <= step_id <= len(STEPS):
            raise ValueError(f"Step must be between 1 and {len(STEPS)}, got {step_id}")
        return STEPS[step_id - 1]

    def update(self, **values: Any) -> None:
        """Set form values. Unknown keys are rejected."""
        unknown = set(values) - set(self.data)
        if unknown:
            raise ValueError(f"Unknown form fields: {', '.join(sorted(unknown))}")
        self.data.update(values)

    def validate_step(self, step_id: int | None = None) -> _StepSchema:
        """Validate one step and mark it completed.

        Raises:
            ValidationError: If the step's fields are invalid.
        """
        step = self.get_step(step_id or self.current_step)
        validated = validate_input(step.schema, self.data)
        self.completed_steps.add(step.id)
        return validated

    def next(self) -> int:
        """Validate the current step and advance."""
        self.validate_step()
        if self.current_step < len(STEPS):
            self.current_step += 1
        return self.current_step

    def previous(self) -> int:
        if self.current_step > 1:
            self.current_step -= 1
        return self.current_step

    def go_to(self, step_id: int) -> int:
        """Jump to a step.

        Earlier and completed steps are always reachable. The step right after
        the current one is reachable through validation; anything else is
        refused.
        """
        self.get_step(step_id)
        if step_id <= self.current_step or step_id in self.completed_steps:
            self.current_step = step_id
        elif step_id == self.current_step + 1:
            self.next()
        else:
            raise ValueError(f"Step {step_id} is not reachable from step {self.current_step}")
        return self.current_step

    def submit(self) -> dict[str, Any]:
        """Validate every step and build the trainer creation payload.

        A failing required step becomes the current step and raises. A failing
        optional step is left out of the payload.
        """
        merged: dict[str, Any] = {}
        for step in STEPS:
            try:
                validated = validate_input(step.schema, self.data)
            except ValidationError as e:
                if not step.is_optional:
                    self.current_step = step.id
                    logger.warning("Trainer form incomplete at step %d", step.id)
                    raise ValidationError(
                        f"Please complete step {step.id}: {step.title}", e.errors
                    ) from e
                logger.debug("Skipping invalid optional step %d", step.id)
                continue
            self.completed_steps.add(step.id)
            merged.update(validated.model_dump())

        return self._to_payload(merged)

    @staticmethod
    def _to_payload(values: dict[str, Any]) -> dict[str, Any]:
        payload = {k: v for k, v in values.items() if v is not None}

        if "commission_rate" in payload:
            payload["commission_rate"] = round(payload["commission_rate"] / 100, 4)

        contact_name = payload.pop("emergency_contact_name", None)
        relationship = payload.pop("emergency_contact_relationship", None)
        phone = payload.pop("emergency_contact_phone", None)
        if contact_name:
            payload["emergency_contact"] = {
                "name": contact_name,
                "relationship": relationship or "",
                "phone": phone or "",
            }

        for key in ("date_of_birth", "background_check_date", "cpr_certification_expires"):
            if isinstance(payload.get(key), date):
                payload[key] = payload[key].isoformat()
        return payload

    def to_dict(self) -> dict[str, Any]:
        return {
            "current_step": self.current_step,
            "completed_steps": sorted(self.completed_steps),
            "data": self.data,
        }

    @classmethod
    def from_dict(cls, state: dict[str, Any]) -> "TrainerWizard":
        wizard = cls(state.get("data"))
        wizard.current_step = state.get("current_step", 1)
        wizard.completed_steps = set(state.get("completed_steps", []))
        return wizard

    def save(self, path: Path) -> None:
        """Persist the in-progress form as JSON."""
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(self.to_dict(), indent=2, default=str))

    @classmethod
    def load(cls, path: Path) -> "TrainerWizard":
        """Restore a form saved with :meth:`save`; a missing file starts fresh."""
        if not path.exists():
            return cls()
        return cls.from_dict(json.loads(path.read_text()))
