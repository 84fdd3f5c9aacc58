"""Background job scheduling."""

from stockroom.infrastructure.scheduling.scheduler import JobRun, JobScheduler, PeriodicJob

__all__ = ["JobScheduler", "PeriodicJob", "JobRun"]
