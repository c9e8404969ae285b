"""
Tests for the reminder admin API.

Uses TestClient over an app built without the lifespan, with the runner
attached to ``app.state`` directly.
"""

from datetime import UTC, datetime, timedelta

import httpx
import pytest
from fastapi.testclient import TestClient

from mamacare.config.settings import Settings
from mamacare.core.app_factory import create_app
from mamacare.domains.reminders.application.dto import JobContext, JobReport, OutcomeKind
from mamacare.domains.reminders.application.jobs import IntervalCadence
from mamacare.domains.reminders.infrastructure.scheduler import ReminderRunner

BASE = "/api/v1/admin/reminders"


class CountingJob:
    name = "appointment_reminders"
    cadence = IntervalCadence(timedelta(hours=1))

    async def run(self, ctx: JobContext) -> JobReport:
        report = JobReport(job_name=self.name, started_at=ctx.now)
        report.candidates = 2
        report.record("a1", OutcomeKind.OK)
        report.record("a2", OutcomeKind.SKIPPED, "already sent")
        return report.finish()


@pytest.fixture
def app():
    return create_app(Settings(ENVIRONMENT="test", REMINDER_SCHEDULER_ENABLED=False), use_lifespan=False)


@pytest.fixture
def runner(dispatcher):
    return ReminderRunner([CountingJob()], dispatcher)


@pytest.fixture
def client(app, runner) -> TestClient:
    app.state.reminder_runner = runner
    return TestClient(app)


def future(hours: int = 2) -> str:
    return (datetime.now(UTC) + timedelta(hours=hours)).isoformat()


# ============================================================================
# Health and status
# ============================================================================


@pytest.mark.unit
def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok", "environment": "test", "scheduler_running": False}


@pytest.mark.unit
def test_status_of_stopped_runner(client):
    response = client.get(f"{BASE}/status")

    assert response.status_code == 200
    body = response.json()
    assert body["initialized"] is False
    assert body["active_jobs"] == 0
    assert body["pending_receipts"] == 0
    assert body["jobs"]["appointment_reminders"]["cadence"] == "every 60 min"
    assert body["jobs"]["appointment_reminders"]["last_report"] is None


@pytest.mark.unit
def test_missing_runner_is_503(app):
    client = TestClient(app)

    response = client.get(f"{BASE}/status")

    assert response.status_code == 503
    assert response.json()["message"] == "Reminder runner not configured"


# ============================================================================
# Job runs
# ============================================================================


@pytest.mark.unit
def test_run_job_now_returns_report(client):
    response = client.post(f"{BASE}/jobs/appointment_reminders/run")

    assert response.status_code == 200
    report = response.json()
    assert report["job"] == "appointment_reminders"
    assert report["candidates"] == 2
    assert report["ok"] == 1
    assert report["skipped"] == 1
    assert report["error"] is None

    status = client.get(f"{BASE}/status").json()
    assert status["jobs"]["appointment_reminders"]["last_report"]["ok"] == 1


@pytest.mark.unit
def test_run_unknown_job_is_404(client):
    response = client.post(f"{BASE}/jobs/nope/run")

    assert response.status_code == 404


# ============================================================================
# One-off reminders
# ============================================================================


@pytest.mark.unit
def test_custom_reminder_needs_started_runner(client):
    payload = {"user_id": "user-1", "title": "Hi", "body": "Body", "scheduled_at": future()}

    response = client.post(f"{BASE}/custom", json=payload)

    assert response.status_code == 503


@pytest.mark.unit
def test_custom_reminder_payload_validated(client):
    response = client.post(f"{BASE}/custom", json={"user_id": "", "title": "Hi", "body": "Body"})

    assert response.status_code == 422


@pytest.mark.unit
def test_cancel_unknown_reminder_is_404(client):
    response = client.delete(f"{BASE}/custom/unknown")

    assert response.status_code == 404


@pytest.mark.unit
@pytest.mark.asyncio
async def test_custom_reminder_lifecycle(app, runner):
    await runner.start()
    app.state.reminder_runner = runner
    transport = httpx.ASGITransport(app=app)
    try:
        async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
            created = await client.post(
                f"{BASE}/custom",
                json={"user_id": "user-1", "title": "Clinic", "body": "Bring your card", "scheduled_at": future()},
            )
            assert created.status_code == 201
            handle = created.json()["handle"]
            assert created.json()["user_id"] == "user-1"

            listed = (await client.get(f"{BASE}/custom")).json()
            assert listed["total"] == 1
            assert listed["reminders"][0]["handle"] == handle

            past = await client.post(
                f"{BASE}/custom",
                json={"user_id": "user-1", "title": "Late", "body": "Too late", "scheduled_at": future(-1)},
            )
            assert past.status_code == 400

            assert (await client.delete(f"{BASE}/custom/{handle}")).status_code == 204
            assert (await client.delete(f"{BASE}/custom/{handle}")).status_code == 404
            assert (await client.get(f"{BASE}/custom")).json()["total"] == 0
    finally:
        await runner.stop()
