# ============================================================================
# SCOPE: ADMIN API
# Description: Pydantic schemas for the reminder admin API.
# ============================================================================
"""
Reminder API Schemas.

Pydantic models for runner status, one-off reminders and job reports.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field


class JobReportResponse(BaseModel):
    """Summary of one job run."""

    job: str
    started_at: str
    finished_at: str | None = None
    candidates: int = 0
    ok: int = 0
    skipped: int = 0
    data_errors: int = 0
    delivery_errors: int = 0
    affected: int = 0
    error: str | None = None


class JobStatusResponse(BaseModel):
    cadence: str
    next_run: str | None = None
    last_report: JobReportResponse | None = None


class RunnerStatusResponse(BaseModel):
    """Schema for the runner status endpoint."""

    initialized: bool = Field(..., description="Whether the runner is started")
    active_jobs: int = Field(..., description="Outstanding one-off reminders")
    uptime: float = Field(..., description="Seconds since start")
    pending_receipts: int = Field(0, description="Push tickets awaiting receipts")
    jobs: dict[str, JobStatusResponse] = Field(default_factory=dict)


class CustomReminderCreate(BaseModel):
    """Schema for scheduling a one-off reminder."""

    user_id: str = Field(..., min_length=1, description="Recipient user id")
    title: str = Field(..., min_length=1, max_length=200, description="Push title")
    body: str = Field(..., min_length=1, max_length=1000, description="Push body")
    scheduled_at: datetime = Field(..., description="When to send (timezone-aware, future)")
    data: dict[str, Any] = Field(default_factory=dict, description="Extra push payload")


class CustomReminderResponse(BaseModel):
    handle: str
    user_id: str
    scheduled_at: datetime


class CustomReminderListResponse(BaseModel):
    reminders: list[CustomReminderResponse]
    total: int
