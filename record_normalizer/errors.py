"""Failure types raised while normalizing records."""

from __future__ import annotations

from typing import List, Optional


class NormalizationError(ValueError):
    """A line-scoped failure: the line is dropped and counted against the budget."""

    issue = "normalization_error"

    def __init__(self, message: str, field: Optional[str] = None, value: Optional[str] = None):
        super().__init__(message)
        self.field = field
        self.value = value


class MalformedRecord(NormalizationError):
    issue = "malformed_record"


class MalformedTimestamp(NormalizationError):
    issue = "malformed_timestamp"


class InvalidZipFormat(NormalizationError):
    issue = "invalid_zip_format"


class ZipTooLong(NormalizationError):
    issue = "zip_too_long"


class MalformedDuration(NormalizationError):
    issue = "malformed_duration"


class ErrorBudgetExhausted(RuntimeError):
    """Raised once the error tracker reaches its maximum; fatal for the run."""

    def __init__(
        self,
        max_errors: int,
        line_number: Optional[int] = None,
        errors: Optional[List[dict]] = None,
    ):
        super().__init__(f"Max error count ({max_errors}) reached. Stopping processing.")
        self.max_errors = max_errors
        self.line_number = line_number
        self.errors = list(errors or [])
