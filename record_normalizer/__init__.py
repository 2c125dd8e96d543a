"""Normalization of 8-column CSV records."""

from .errors import (
    ErrorBudgetExhausted,
    InvalidZipFormat,
    MalformedDuration,
    MalformedRecord,
    MalformedTimestamp,
    NormalizationError,
    ZipTooLong,
)
from .fields import Field, canonical_order, resolve_field_order
from .normalize import RecordProcessor, dispatch, normalize_lines, normalize_text
from .tokenizer import tokenize
from .tracker import ErrorTracker

__all__ = [
    "ErrorBudgetExhausted",
    "ErrorTracker",
    "Field",
    "InvalidZipFormat",
    "MalformedDuration",
    "MalformedRecord",
    "MalformedTimestamp",
    "NormalizationError",
    "RecordProcessor",
    "ZipTooLong",
    "canonical_order",
    "dispatch",
    "normalize_lines",
    "normalize_text",
    "resolve_field_order",
    "tokenize",
]
