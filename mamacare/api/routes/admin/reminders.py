# ============================================================================
# SCOPE: ADMIN API
# Description: Admin API for the reminder runner.
# ============================================================================
"""
Reminder Runner Admin API.

Provides endpoints for:
- Runner status and per-job schedule
- Scheduling and cancelling one-off reminders
- Running a job immediately

API Prefix: /api/v1/admin/reminders
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status

from mamacare.api.schemas.reminders import (
    CustomReminderCreate,
    CustomReminderListResponse,
    CustomReminderResponse,
    JobReportResponse,
    RunnerStatusResponse,
)
from mamacare.core.domain.exceptions import (
    EntityNotFoundException,
    SchedulerNotRunningError,
    ValidationException,
)
from mamacare.domains.reminders.infrastructure.scheduler import ReminderHandle, ReminderRunner

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Reminders"])


# ============================================================================
# HELPERS
# ============================================================================


def get_reminder_runner(request: Request) -> ReminderRunner:
    """Runner attached to the application at startup."""
    runner = getattr(request.app.state, "reminder_runner", None)
    if runner is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Reminder runner not configured",
        )
    return runner


def _handle_to_response(handle: ReminderHandle) -> CustomReminderResponse:
    return CustomReminderResponse(handle=handle.id, user_id=handle.user_id, scheduled_at=handle.run_at)


# ============================================================================
# ENDPOINTS
# ============================================================================


@router.get("/status", response_model=RunnerStatusResponse)
async def get_runner_status(runner: ReminderRunner = Depends(get_reminder_runner)):
    """Runner state, outstanding one-off reminders and per-job schedule."""
    return RunnerStatusResponse.model_validate(runner.get_status())


@router.get("/custom", response_model=CustomReminderListResponse)
async def list_custom_reminders(runner: ReminderRunner = Depends(get_reminder_runner)):
    handles = runner.list_custom_reminders()
    return CustomReminderListResponse(
        reminders=[_handle_to_response(h) for h in handles],
        total=len(handles),
    )


@router.post("/custom", response_model=CustomReminderResponse, status_code=status.HTTP_201_CREATED)
async def schedule_custom_reminder(
    payload: CustomReminderCreate,
    runner: ReminderRunner = Depends(get_reminder_runner),
):
    """Schedule a one-off reminder for a user."""
    try:
        handle = runner.schedule_custom_reminder(
            user_id=payload.user_id,
            title=payload.title,
            body=payload.body,
            at=payload.scheduled_at,
            data=payload.data,
        )
    except SchedulerNotRunningError as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=e.message) from e
    except ValidationException as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message) from e

    return _handle_to_response(handle)


@router.delete("/custom/{handle_id}", status_code=status.HTTP_204_NO_CONTENT)
async def cancel_custom_reminder(
    handle_id: str,
    runner: ReminderRunner = Depends(get_reminder_runner),
):
    """Cancel a one-off reminder that has not fired yet."""
    if not runner.cancel_reminder(handle_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Reminder {handle_id} not found",
        )
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/jobs/{job_name}/run", response_model=JobReportResponse)
async def run_job_now(
    job_name: str,
    runner: ReminderRunner = Depends(get_reminder_runner),
):
    """Run a reminder job immediately and return its report."""
    try:
        report = await runner.run_job_now(job_name)
    except EntityNotFoundException as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message) from e

    logger.info(f"Manual run of {job_name} requested via admin API")
    return JobReportResponse.model_validate(report.to_dict())
