"""Trainer data models."""

from dataclasses import dataclass, field
from datetime import date, datetime

DEFAULT_COMMISSION_RATE = 0.15
DEFAULT_LANGUAGES = ["English"]


@dataclass
class EmergencyContact:
    """Emergency contact for a trainer."""

    name: str
    relationship: str = ""
    phone: str = ""

    def to_dict(self) -> dict:
        return {"name": self.name, "relationship": self.relationship, "phone": self.phone}

    @classmethod
    def from_dict(cls, data: dict) -> "EmergencyContact":
        return cls(
            name=data.get("name", ""),
            relationship=data.get("relationship", ""),
            phone=data.get("phone", ""),
        )


@dataclass
class Trainer:
    """A trainer profile.

    ``commission_rate`` is stored as a fraction (0.15 == 15%).
    """

    trainer_code: str
    first_name: str
    last_name: str
    email: str
    phone: str | None = None
    date_of_birth: date | None = None
    hourly_rate: float | None = None
    commission_rate: float = DEFAULT_COMMISSION_RATE
    years_experience: int | None = None
    certifications: list[str] = field(default_factory=list)
    specializations: list[str] = field(default_factory=list)
    languages: list[str] = field(default_factory=lambda: list(DEFAULT_LANGUAGES))
    max_clients_per_session: int = 1
    is_accepting_new_clients: bool = True
    emergency_contact: EmergencyContact | None = None
    insurance_policy_number: str | None = None
    background_check_date: date | None = None
    cpr_certification_expires: date | None = None
    notes: str | None = None
    id: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def cpr_expires_within(self, days: int, today: date | None = None) -> bool:
        """Check whether the CPR certification expires within ``days`` days."""
        if self.cpr_certification_expires is None:
            return False
        today = today or date.today()
        return (self.cpr_certification_expires - today).days <= days

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "trainer_code": self.trainer_code,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "email": self.email,
            "phone": self.phone,
            "date_of_birth": self.date_of_birth.isoformat() if self.date_of_birth else None,
            "hourly_rate": self.hourly_rate,
            "commission_rate": self.commission_rate,
            "years_experience": self.years_experience,
            "certifications": self.certifications,
            "specializations": self.specializations,
            "languages": self.languages,
            "max_clients_per_session": self.max_clients_per_session,
            "is_accepting_new_clients": self.is_accepting_new_clients,
            "emergency_contact": (
                self.emergency_contact.to_dict() if self.emergency_contact else None
            ),
            "insurance_policy_number": self.insurance_policy_number,
            "background_check_date": (
                self.background_check_date.isoformat() if self.background_check_date else None
            ),
            "cpr_certification_expires": (
                self.cpr_certification_expires.isoformat()
                if self.cpr_certification_expires
                else None
            ),
            "notes": self.notes,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }

    @classmethod
    def from_dict(cls, data: dict, **kwargs) -> "Trainer":
        """Create from dictionary."""

        def _date(key: str) -> date | None:
            value = data.get(key)
            if not value:
                return None
            if isinstance(value, date):
                return value
            return date.fromisoformat(value)

        contact = data.get("emergency_contact")
        return cls(
            trainer_code=data["trainer_code"],
            first_name=data["first_name"],
            last_name=data["last_name"],
            email=data["email"],
            phone=data.get("phone"),
            date_of_birth=_date("date_of_birth"),
            hourly_rate=data.get("hourly_rate"),
            commission_rate=(
                data["commission_rate"]
                if data.get("commission_rate") is not None
                else DEFAULT_COMMISSION_RATE
            ),
            years_experience=data.get("years_experience"),
            certifications=list(data.get("certifications") or []),
            specializations=list(data.get("specializations") or []),
            languages=list(data.get("languages") or DEFAULT_LANGUAGES),
            max_clients_per_session=data.get("max_clients_per_session") or 1,
            is_accepting_new_clients=bool(data.get("is_accepting_new_clients", True)),
            emergency_contact=EmergencyContact.from_dict(contact) if contact else None,
            insurance_policy_number=data.get("insurance_policy_number") or None,
            background_check_date=_date("background_check_date"),
            cpr_certification_expires=_date("cpr_certification_expires"),
            notes=data.get("notes") or None,
            **kwargs,
        )


@dataclass
class TrainerFilters:
    """Filters for listing trainers."""

    search: str | None = None
    specializations: list[str] = field(default_factory=list)
    is_accepting_new_clients: bool | None = None
    years_experience_min: int | None = None
    years_experience_max: int | None = None
    limit: int | None = None
    offset: int | None = None
