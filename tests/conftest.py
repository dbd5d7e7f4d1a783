"""Pytest configuration and fixtures."""

import tempfile
from datetime import date
from pathlib import Path

import pytest

from gymdesk.config import get_settings
from gymdesk.db import MemberRepository, SubscriptionRepository, init_db
from gymdesk.models import Member, Subscription


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    """Point settings at a throwaway data directory for every test."""
    monkeypatch.setenv("GYMDESK_DATA_DIR", str(tmp_path / "data"))
    for name in ("DB_FILENAME", "STUDIO_WEEKLY_LIMIT", "MEMBER_WEEKLY_LIMIT", "LOG_FORMAT"):
        monkeypatch.delenv(f"GYMDESK_{name}", raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def temp_db_path():
    """Create a temporary database path."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir) / "test.db"


@pytest.fixture
async def db_path(temp_db_path):
    """An initialized temporary database."""
    await init_db(temp_db_path)
    return temp_db_path


@pytest.fixture
async def member(db_path):
    """A stored member."""
    m = Member(first_name="Ana", last_name="Silva", email="ana@example.com")
    m.id = await MemberRepository(db_path).create(m)
    return m


@pytest.fixture
async def subscription(db_path, member):
    """A stored 10-session plan for $200 running Oct-Nov 2025."""
    sub = Subscription(
        member_id=member.id,
        plan_name_snapshot="10 Sessions",
        total_sessions_snapshot=10,
        total_amount_snapshot=200.0,
        duration_days_snapshot=60,
        start_date=date(2025, 10, 1),
    )
    sub.id = await SubscriptionRepository(db_path).create(sub)
    return sub


@pytest.fixture
def trainer_form():
    """Valid trainer form values as entered in the wizard."""
    return {
        "first_name": "Marc",
        "last_name": "Dubois",
        "email": "marc@example.com",
        "phone": "+33 6 12 34 56 78",
        "hourly_rate": 45,
        "commission_rate": 20,
        "years_experience": 6,
        "specializations": ["Pilates", "Rehabilitation"],
        "certifications": ["BPJEPS"],
        "languages": ["French", "English"],
        "max_clients_per_session": 2,
        "is_accepting_new_clients": True,
        "cpr_certification_expires": "2026-03-01",
    }
