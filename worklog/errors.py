# worklog/errors.py
from __future__ import annotations


class WorklogError(Exception):
    """Base class for errors raised at the worklog boundary."""


class InvalidIntervalError(WorklogError, ValueError):
    """A manual or edited entry whose end is not after its start."""

    def __init__(self, start_time: int, end_time: int):
        super().__init__(f"End time must be after start time ({start_time} >= {end_time})")
        self.start_time = start_time
        self.end_time = end_time


class InvalidEntryError(WorklogError, ValueError):
    """An entry edit that would leave the entry in an inconsistent state."""
