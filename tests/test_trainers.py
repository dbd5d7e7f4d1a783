"""Tests for the trainer service."""

from datetime import date

import pytest

from gymdesk.errors import NotFoundError, ValidationError
from gymdesk.models import TrainerFilters
from gymdesk.services import TrainerService


@pytest.fixture
def service(db_path):
    return TrainerService(db_path)


def _payload(first_name, last_name, **kwargs):
    data = {
        "first_name": first_name,
        "last_name": last_name,
        "email": f"{first_name.lower()}@example.com",
    }
    data.update(kwargs)
    return data


@pytest.fixture
async def roster(service):
    """Three trainers with varied skills and availability."""
    return [
        await service.create_trainer(
            _payload(
                "Marc",
                "Dubois",
                specializations=["Pilates", "Rehabilitation"],
                years_experience=6,
                cpr_certification_expires="2025-10-25",
            )
        ),
        await service.create_trainer(
            _payload(
                "Lea",
                "Martin",
                specializations=["Strength"],
                years_experience=2,
                is_accepting_new_clients=False,
                cpr_certification_expires="2026-06-01",
            )
        ),
        await service.create_trainer(
            _payload("Zoe", "Roy", specializations=["Pilates"], years_experience=12)
        ),
    ]


class TestCreateTrainer:
    """Tests for TrainerService.create_trainer."""

    async def test_generates_trainer_code(self, service):
        first = await service.create_trainer(_payload("Marc", "Dubois"))
        second = await service.create_trainer(_payload("Lea", "Martin"))

        assert first.trainer_code == "TR-0001"
        assert second.trainer_code == "TR-0002"

    async def test_generated_code_skips_taken_codes(self, service):
        await service.create_trainer(_payload("Marc", "Dubois", trainer_code="TR-0002"))

        trainer = await service.create_trainer(_payload("Lea", "Martin"))

        assert trainer.trainer_code == "TR-0003"

    async def test_duplicate_code_rejected(self, service):
        await service.create_trainer(_payload("Marc", "Dubois", trainer_code="PIL-01"))

        with pytest.raises(ValidationError) as exc_info:
            await service.create_trainer(_payload("Lea", "Martin", trainer_code="PIL-01"))

        assert "trainer_code" in exc_info.value.errors

    async def test_roundtrip_through_storage(self, service):
        created = await service.create_trainer(
            _payload(
                "Marc",
                "Dubois",
                commission_rate=0.2,
                languages=["French"],
                emergency_contact={"name": "Paul", "relationship": "Brother", "phone": "123"},
                background_check_date="2025-01-10",
            )
        )

        stored = await service.get_trainer(created.id)

        assert stored.commission_rate == 0.2
        assert stored.languages == ["French"]
        assert stored.emergency_contact.relationship == "Brother"
        assert stored.background_check_date == date(2025, 1, 10)
        assert stored.created_at is not None


class TestQueries:
    """Tests for trainer listing and search."""

    async def test_filter_by_specialization(self, service, roster):
        trainers = await service.get_trainers_by_specialization("Pilates")
        assert {t.first_name for t in trainers} == {"Marc", "Zoe"}

    async def test_filter_by_experience_range(self, service, roster):
        trainers = await service.get_trainers(
            TrainerFilters(years_experience_min=3, years_experience_max=10)
        )
        assert [t.first_name for t in trainers] == ["Marc"]

    async def test_available_trainers(self, service, roster):
        trainers = await service.get_available_trainers()
        assert {t.first_name for t in trainers} == {"Marc", "Zoe"}

    async def test_limit_and_offset(self, service, roster):
        page = await service.get_trainers(TrainerFilters(limit=2, offset=1))
        assert len(page) == 2

    async def test_search(self, service, roster):
        assert [t.last_name for t in await service.search_trainers("mart")] == ["Martin"]
        assert [t.first_name for t in await service.search_trainers("zoe@")] == ["Zoe"]

    async def test_short_search_returns_nothing(self, service, roster):
        assert await service.search_trainers("m") == []
        assert await service.search_trainers("  ") == []

    async def test_counts(self, service, roster):
        assert await service.get_trainer_count() == 3
        assert await service.get_trainer_count_by_status() == {"active": 2, "inactive": 1}

    async def test_expiring_certifications(self, service, roster):
        expiring = await service.get_trainers_with_expiring_certifications(
            30, today=date(2025, 10, 18)
        )
        assert [t.first_name for t in expiring] == ["Marc"]

    async def test_expired_certifications_included(self, service, roster):
        expiring = await service.get_trainers_with_expiring_certifications(
            0, today=date(2026, 7, 1)
        )
        assert {t.first_name for t in expiring} == {"Marc", "Lea"}


class TestUpdateTrainer:
    """Tests for updates, availability and deletion."""

    async def test_partial_update(self, service, roster):
        trainer = roster[0]

        updated = await service.update_trainer(
            trainer.id,
            {"hourly_rate": 55.0, "cpr_certification_expires": "2027-01-01"},
        )

        assert updated.hourly_rate == 55.0
        assert updated.cpr_certification_expires == date(2027, 1, 1)
        assert updated.first_name == "Marc"

    async def test_out_of_range_values_rejected(self, service, roster):
        trainer = roster[0]

        with pytest.raises(ValidationError) as exc_info:
            await service.update_trainer(
                trainer.id,
                {"hourly_rate": -50, "years_experience": 999, "max_clients_per_session": 0},
            )

        assert set(exc_info.value.errors) == {
            "hourly_rate",
            "years_experience",
            "max_clients_per_session",
        }
        stored = await service.get_trainer(trainer.id)
        assert stored.years_experience == 6
        assert stored.max_clients_per_session == 1

    async def test_commission_is_a_fraction(self, service, roster):
        with pytest.raises(ValidationError) as exc_info:
            await service.update_trainer(roster[0].id, {"commission_rate": 15})
        assert "commission_rate" in exc_info.value.errors

        updated = await service.update_trainer(roster[0].id, {"commission_rate": 0.2})
        assert updated.commission_rate == 0.2

    async def test_malformed_date_rejected(self, service, roster):
        with pytest.raises(ValidationError) as exc_info:
            await service.update_trainer(roster[0].id, {"date_of_birth": "not-a-date"})

        assert "date_of_birth" in exc_info.value.errors

    async def test_required_fields_cannot_be_cleared(self, service, roster):
        with pytest.raises(ValidationError) as exc_info:
            await service.update_trainer(roster[0].id, {"first_name": None})

        assert "first_name" in exc_info.value.errors

    async def test_optional_fields_can_be_cleared(self, service, roster):
        updated = await service.update_trainer(
            roster[0].id, {"cpr_certification_expires": None}
        )

        assert updated.cpr_certification_expires is None

    async def test_emergency_contact(self, service, roster):
        updated = await service.update_trainer(
            roster[0].id,
            {"emergency_contact": {"name": "Julie Dubois", "phone": "555-0100"}},
        )

        assert updated.emergency_contact.name == "Julie Dubois"
        assert updated.emergency_contact.phone == "555-0100"

    async def test_unknown_fields_rejected(self, service, roster):
        with pytest.raises(ValidationError) as exc_info:
            await service.update_trainer(roster[0].id, {"salary": 10})

        assert "salary" in exc_info.value.errors

    async def test_code_must_stay_unique(self, service, roster):
        with pytest.raises(ValidationError):
            await service.update_trainer(roster[0].id, {"trainer_code": roster[1].trainer_code})

        assert await service.check_trainer_code_exists(roster[0].trainer_code)
        assert not await service.check_trainer_code_exists(
            roster[0].trainer_code, exclude_id=roster[0].id
        )

    async def test_bulk_availability(self, service, roster):
        updated = await service.bulk_update_trainer_availability(
            [t.id for t in roster], False
        )

        assert updated == 3
        assert await service.get_available_trainers() == []

    async def test_delete(self, service, roster):
        await service.delete_trainer(roster[1].id)

        with pytest.raises(NotFoundError):
            await service.get_trainer(roster[1].id)
        with pytest.raises(NotFoundError):
            await service.delete_trainer(roster[1].id)
