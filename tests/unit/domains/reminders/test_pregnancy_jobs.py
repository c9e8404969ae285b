"""
Unit tests for the gestational age recalculation, milestone reminders and
the combined daily pregnancy job.
"""

from datetime import UTC, date, datetime, timedelta

import pytest

from mamacare.domains.reminders.application.dto import JobContext, OutcomeKind, RunReason
from mamacare.domains.reminders.application.jobs import (
    GestationalAgeRecalculator,
    MilestoneReminderJob,
    PregnancyDailyJob,
)
from tests.utils.factories import create_pregnant_patient, create_recipient

NOW = datetime(2025, 3, 10, 9, 0, tzinfo=UTC)
TODAY = date(2025, 3, 10)


def ctx(reason: RunReason = RunReason.SCHEDULED) -> JobContext:
    return JobContext(now=NOW, reason=reason)


# ============================================================================
# GestationalAgeRecalculator
# ============================================================================


@pytest.mark.unit
@pytest.mark.asyncio
async def test_recalculation_writes_changed_week(patients):
    patients.add(create_pregnant_patient("p1", due_date=TODAY + timedelta(weeks=20), current_week=19))
    job = GestationalAgeRecalculator(patients)

    report = await job.run(ctx())

    assert report.affected == 1
    assert patients.patients["p1"].pregnancy.current_week == 20
    assert patients.week_updates == [("p1", 19, 20)]


@pytest.mark.unit
@pytest.mark.asyncio
async def test_recalculation_is_idempotent(patients):
    patients.add(create_pregnant_patient("p1", due_date=TODAY + timedelta(weeks=20), current_week=None))
    patients.add(create_pregnant_patient("p2", due_date="2025-05-01", current_week=10))
    job = GestationalAgeRecalculator(patients)

    first = await job.run(ctx())
    writes_after_first = len(patients.week_updates)
    second = await job.run(ctx())

    assert first.affected == 2
    assert second.affected == 0
    assert len(patients.week_updates) == writes_after_first
    assert second.skipped == 2


@pytest.mark.unit
@pytest.mark.asyncio
async def test_unparseable_due_date_is_data_error(patients):
    patients.add(create_pregnant_patient("bad", due_date="next spring"))
    patients.add(create_pregnant_patient("good", due_date=TODAY + timedelta(weeks=12)))
    job = GestationalAgeRecalculator(patients)

    report = await job.run(ctx())

    assert report.data_errors == 1
    assert report.affected == 1
    bad = next(o for o in report.outcomes if o.kind is OutcomeKind.DATA_ERROR)
    assert bad.record_id == "bad"
    assert "invalid due date" in bad.detail


@pytest.mark.unit
@pytest.mark.asyncio
async def test_store_failure_on_one_patient_does_not_halt_recalculation(patients):
    patients.add(create_pregnant_patient("p1", due_date=TODAY + timedelta(weeks=20), current_week=19))
    patients.add(create_pregnant_patient("p2", due_date=TODAY + timedelta(weeks=10), current_week=29))
    patients.failing_ids.add("p1")
    job = GestationalAgeRecalculator(patients)

    report = await job.run(ctx())

    assert [(o.record_id, o.kind) for o in report.outcomes] == [
        ("p1", OutcomeKind.DATA_ERROR),
        ("p2", OutcomeKind.OK),
    ]
    assert report.affected == 1
    assert patients.patients["p1"].pregnancy.current_week == 19
    assert patients.patients["p2"].pregnancy.current_week == 30


# ============================================================================
# MilestoneReminderJob
# ============================================================================


@pytest.mark.unit
@pytest.mark.asyncio
async def test_milestone_sent_for_table_week_only(patients, recipients, dispatcher, push_provider):
    recipients.add(create_recipient("user-1"))
    recipients.add(create_recipient("user-2"))
    patients.add(create_pregnant_patient("p20", user_id="user-1", due_date=TODAY, current_week=20))
    patients.add(create_pregnant_patient("p21", user_id="user-2", due_date=TODAY, current_week=21))
    job = MilestoneReminderJob(patients, dispatcher)

    report = await job.run(ctx())

    assert report.candidates == 1
    assert report.ok == 1
    message = push_provider.sent[0]
    assert message.title == "Week 20 Milestone"
    assert message.data == {"type": "pregnancy_milestone", "week": 20, "category": "milestone"}
    assert message.category_id == "general"


@pytest.mark.unit
@pytest.mark.asyncio
async def test_milestone_failure_for_one_patient_does_not_halt_batch(patients, recipients, dispatcher, push_provider):
    recipients.add(create_recipient("user-1"))
    recipients.add(create_recipient("user-2"))
    recipients.failing_ids.add("user-1")
    patients.add(create_pregnant_patient("p1", user_id="user-1", due_date=TODAY, current_week=20))
    patients.add(create_pregnant_patient("p2", user_id="user-2", due_date=TODAY, current_week=24))
    job = MilestoneReminderJob(patients, dispatcher)

    report = await job.run(ctx())

    assert report.candidates == 2
    assert [(o.record_id, o.kind) for o in report.outcomes] == [
        ("p1", OutcomeKind.DELIVERY_ERROR),
        ("p2", OutcomeKind.OK),
    ]
    assert [m.title for m in push_provider.sent] == ["Week 24 Milestone"]


# ============================================================================
# PregnancyDailyJob
# ============================================================================


@pytest.mark.unit
@pytest.mark.asyncio
async def test_daily_job_recalculates_before_milestones(patients, recipients, dispatcher, push_provider):
    """A patient crossing into week 20 today gets the week 20 milestone."""
    recipients.add(create_recipient("user-1"))
    patients.add(create_pregnant_patient("p1", due_date=TODAY + timedelta(weeks=20), current_week=19))
    job = PregnancyDailyJob(patients, dispatcher)

    report = await job.run(ctx())

    assert patients.patients["p1"].pregnancy.current_week == 20
    assert [m.title for m in push_provider.sent] == ["Week 20 Milestone"]
    assert report.affected == 1
    assert report.ok == 2


@pytest.mark.unit
@pytest.mark.asyncio
async def test_startup_run_only_recalculates(patients, recipients, dispatcher, push_provider):
    recipients.add(create_recipient("user-1"))
    patients.add(create_pregnant_patient("p1", due_date=TODAY + timedelta(weeks=20), current_week=19))
    job = PregnancyDailyJob(patients, dispatcher)

    report = await job.run(ctx(RunReason.STARTUP))

    assert patients.patients["p1"].pregnancy.current_week == 20
    assert push_provider.batches == []
    assert report.affected == 1


@pytest.mark.unit
def test_daily_job_cadence_runs_on_startup(patients, dispatcher):
    job = PregnancyDailyJob(patients, dispatcher)

    assert job.cadence.run_on_startup
    assert job.name == "pregnancy_daily"
