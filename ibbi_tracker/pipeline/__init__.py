"""Daily update pipeline."""

from .models import RunOutcome, RunStatistics, RunStatus
from .runner import DailyUpdatePipeline

__all__ = ["DailyUpdatePipeline", "RunOutcome", "RunStatistics", "RunStatus"]
