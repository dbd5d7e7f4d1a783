"""Integration tests for a studio's day-to-day flow.

The CLI and the HTTP API share one database here: records created from one
surface must be visible, and enforced, through the other.
"""

import json

import pytest
from click.testing import CliRunner
from fastapi.testclient import TestClient

from gymdesk.cli import main
from gymdesk.db import get_db_path
from gymdesk.web import create_app


@pytest.fixture
def cli():
    runner = CliRunner()

    def _invoke(*args, **kwargs):
        return runner.invoke(main, list(args), **kwargs)

    return _invoke


@pytest.fixture
def api(cli):
    assert cli("init").exit_code == 0
    with TestClient(create_app(get_db_path())) as client:
        yield client


class TestStudioFlow:
    """End-to-end flows across the CLI, API and database."""

    def test_membership_payment_refund_and_booking(self, cli, api):
        """A member signs up, pays, gets a partial refund and books sessions."""
        assert cli(
            "members", "add", "--first-name", "Ana", "--last-name", "Silva",
            "--email", "ana@example.com",
        ).exit_code == 0
        assert cli(
            "members", "subscribe", "1", "--plan", "8 Sessions", "--sessions", "8",
            "--amount", "160", "--days", "60", "--start", "2025-10-01",
        ).exit_code == 0

        # Pay in two instalments through both surfaces
        assert cli("payments", "record", "1", "100", "--method", "card").exit_code == 0
        response = api.post(
            "/payments", json={"subscription_id": 1, "amount": 60, "payment_method": "cash"}
        )
        assert response.status_code == 201
        balance = api.get("/subscriptions/1/balance").json()
        assert balance["is_fully_paid"] is True

        # Refund $20 then $40 of the card payment
        assert cli("payments", "refund", "1", "20", "--reason", "Overcharged").exit_code == 0
        response = api.post("/payments/1/refund", json={"refund_amount": 40, "reason": "Downgrade"})
        assert response.status_code == 201
        history = response.json()["history"]
        assert history["total_refunded"] == 60.0
        assert history["net_amount"] == 40.0
        assert history["payment"]["payment_status"] == "completed"

        balance = api.get("/subscriptions/1/balance").json()
        assert balance["paid_amount"] == 100.0
        assert balance["balance"] == 60.0

        # The remaining $40 can go, but not a cent more
        over = api.post("/payments/1/refund", json={"refund_amount": 40.01, "reason": "Too much"})
        assert over.status_code == 409
        assert cli("payments", "refund", "1", "40", "--reason", "Cancelled").exit_code == 0
        assert api.get("/payments/1").json()["payment_status"] == "refunded"

        # One member session a week; makeup sessions bypass the cap
        assert cli("sessions", "book", "--member", "1", "--start", "2025-10-14T18:00").exit_code == 0
        blocked = api.post(
            "/sessions",
            json={
                "scheduled_start": "2025-10-19T10:00:00",
                "scheduled_end": "2025-10-19T11:00:00",
                "session_type": "member",
                "member_id": 1,
            },
        )
        assert blocked.status_code == 409
        assert cli(
            "sessions", "book", "--member", "1", "--type", "makeup",
            "--start", "2025-10-19T10:00",
        ).exit_code == 0

        subscription = api.get("/subscriptions/1").json()
        assert subscription["used_sessions"] == 2
        assert subscription["remaining_sessions"] == 6

        studio = api.get("/sessions/limits/studio", params={"day": "2025-10-15"}).json()
        assert studio["current_count"] == 2

    def test_trainer_onboarding(self, cli, api, tmp_path):
        """A trainer created through the API shows up in the CLI export."""
        form = {
            "first_name": "Marc",
            "last_name": "Dubois",
            "email": "marc@example.com",
            "commission_rate": 12.5,
            "specializations": ["Pilates"],
            "languages": ["French", "English"],
            "cpr_certification_expires": "2025-11-01",
        }
        response = api.post("/trainers", json=form)
        assert response.status_code == 201
        assert response.json()["commission_rate"] == 0.125

        draft = tmp_path / "lea.json"
        draft.write_text(
            json.dumps({"first_name": "Lea", "last_name": "Martin", "email": "lea@example.com"})
        )
        assert cli("trainers", "add", "--from-file", str(draft)).exit_code == 0

        output = tmp_path / "trainers.csv"
        assert cli("trainers", "export", "-o", str(output)).exit_code == 0
        text = output.read_text(encoding="utf-8-sig")
        assert "TR-0001,Marc,Dubois" in text
        assert "TR-0002,Lea,Martin" in text
        assert "12.5%" in text

        available = api.get("/trainers/available").json()["trainers"]
        assert {t["trainer_code"] for t in available} == {"TR-0001", "TR-0002"}
