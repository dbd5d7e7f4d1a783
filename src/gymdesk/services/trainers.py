"""Trainer management service."""

import logging
from dataclasses import replace
from datetime import date, timedelta
from pathlib import Path

from ..db.repositories import TrainerRepository
from ..errors import NotFoundError, ValidationError
from ..models.trainer import EmergencyContact, Trainer, TrainerFilters
from ..schemas import TrainerUpdate, validate_input

logger = logging.getLogger(__name__)

MIN_SEARCH_LENGTH = 2
SEARCH_LIMIT = 20
DEFAULT_EXPIRY_WINDOW_DAYS = 30


class TrainerService:
    """Create, query and maintain trainer profiles."""

    def __init__(self, db_path: Path | None = None):
        self.trainers = TrainerRepository(db_path)

    async def create_trainer(self, data: dict) -> Trainer:
        """Create a trainer from a creation payload.

        A trainer code is generated when the payload has none.

        Raises:
            ValidationError: If the trainer code is already in use.
        """
        data = dict(data)
        if not data.get("trainer_code"):
            data["trainer_code"] = await self._generate_trainer_code()
        elif await self.trainers.code_exists(data["trainer_code"]):
            raise ValidationError(
                "Trainer code already exists",
                {"trainer_code": f"'{data['trainer_code']}' is already in use"},
            )

        trainer = Trainer.from_dict(data)
        trainer.id = await self.trainers.create(trainer)
        logger.info("Trainer created: %s (%s)", trainer.full_name, trainer.trainer_code)
        return trainer

    async def _generate_trainer_code(self) -> str:
        seq = await self.trainers.count() + 1
        while True:
            code = f"TR-{seq:04d}"
            if not await self.trainers.code_exists(code):
                return code
            seq += 1

    async def get_trainer(self, trainer_id: int) -> Trainer:
        trainer = await self.trainers.get(trainer_id)
        if trainer is None:
            raise NotFoundError("Trainer", trainer_id)
        return trainer

    async def get_trainers(self, filters: TrainerFilters | None = None) -> list[Trainer]:
        return await self.trainers.list_filtered(filters)

    async def update_trainer(self, trainer_id: int, changes: dict) -> Trainer:
        """Apply a partial update to a trainer.

        Raises:
            ValidationError: If a field is unknown, a value is out of range or
                the new trainer code is already in use.
        """
        trainer = await self.get_trainer(trainer_id)
        changes = validate_input(TrainerUpdate, changes).model_dump(exclude_unset=True)

        new_code = changes.get("trainer_code")
        if new_code and await self.trainers.code_exists(new_code, exclude_id=trainer_id):
            raise ValidationError(
                "Trainer code already exists",
                {"trainer_code": f"'{new_code}' is already in use"},
            )

        contact = changes.get("emergency_contact")
        if contact is not None:
            changes["emergency_contact"] = EmergencyContact.from_dict(contact)

        updated = replace(trainer, **changes)
        await self.trainers.update(updated)
        logger.info("Trainer updated: %s (%s)", trainer_id, ", ".join(sorted(changes)))
        return await self.get_trainer(trainer_id)

    async def delete_trainer(self, trainer_id: int) -> None:
        """Permanently delete a trainer."""
        if not await self.trainers.delete(trainer_id):
            raise NotFoundError("Trainer", trainer_id)
        logger.info("Trainer deleted: %s", trainer_id)

    async def search_trainers(self, query: str) -> list[Trainer]:
        """Search by name or email; queries shorter than two characters match nothing."""
        query = query.strip()
        if len(query) < MIN_SEARCH_LENGTH:
            return []
        return await self.trainers.list_filtered(TrainerFilters(search=query, limit=SEARCH_LIMIT))

    async def get_trainer_count(self) -> int:
        return await self.trainers.count()

    async def get_trainer_count_by_status(self) -> dict[str, int]:
        """Counts of trainers accepting (active) and not accepting new clients."""
        return await self.trainers.count_by_accepting()

    async def get_trainers_by_specialization(self, specialization: str) -> list[Trainer]:
        return await self.trainers.list_filtered(TrainerFilters(specializations=[specialization]))

    async def get_available_trainers(self) -> list[Trainer]:
        return await self.trainers.list_filtered(TrainerFilters(is_accepting_new_clients=True))

    async def get_trainers_with_expiring_certifications(
        self, days_ahead: int = DEFAULT_EXPIRY_WINDOW_DAYS, today: date | None = None
    ) -> list[Trainer]:
        """Trainers whose CPR certification expires within ``days_ahead`` days.

        Already expired certifications are included.
        """
        cutoff = (today or date.today()) + timedelta(days=days_ahead)
        return await self.trainers.list_cpr_expiring_before(cutoff)

    async def bulk_update_trainer_availability(
        self, trainer_ids: list[int], is_accepting: bool
    ) -> int:
        updated = await self.trainers.set_accepting_clients(trainer_ids, is_accepting)
        logger.info(
            "Accepting-new-clients set to %s for %d trainer(s)", is_accepting, updated
        )
        return updated

    async def check_trainer_code_exists(
        self, trainer_code: str, exclude_id: int | None = None
    ) -> bool:
        return await self.trainers.code_exists(trainer_code, exclude_id)
