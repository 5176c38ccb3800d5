"""Shared services module."""

from recruitcrm.services.job_queue import JobQueue, job_queue

__all__ = ["JobQueue", "job_queue"]
