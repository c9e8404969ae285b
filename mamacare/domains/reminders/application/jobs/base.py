# ============================================================================
# SCOPE: APPLICATION LAYER (Reminders)
# Description: Contract shared by all reminder jobs.
# ============================================================================
"""Reminder Job Port."""

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from ..dto import JobContext, JobReport
    from .cadence import Cadence


@runtime_checkable
class IReminderJob(Protocol):
    """A job the runner triggers on its cadence.

    ``run`` returns a structured report and is expected to handle per-record
    failures itself; anything it raises is recorded as a failed run.
    """

    name: str
    cadence: "Cadence"

    async def run(self, ctx: "JobContext") -> "JobReport": ...
