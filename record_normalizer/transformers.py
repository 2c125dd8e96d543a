"""
Per-field normalization rules.

Every field except TotalDuration is cleaned (non-BMP characters replaced,
NFC composition) and then passed through its own one-argument rule.
TotalDuration is derived from the already-normalized FooDuration and
BarDuration values.
"""

from __future__ import annotations

import re
import unicodedata
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Dict, Tuple, Union
from zoneinfo import ZoneInfo

from .errors import InvalidZipFormat, MalformedDuration, MalformedTimestamp, ZipTooLong
from .fields import Field
from .rules import (
    EMPTY_DURATION,
    NON_BMP_PATTERN,
    REPLACEMENT_CHAR,
    SOURCE_TIMEZONE,
    TARGET_TIMEZONE,
    TIMESTAMP_INPUT_FORMAT,
    TWO_DIGIT_YEAR_BASE,
    UNICODE_FORM,
    ZIP_LENGTH,
)

_RE_NON_BMP = re.compile(NON_BMP_PATTERN)
# H:mm:ss.SSS or HH:mm:ss.SSS
_RE_DURATION = re.compile(r"^([0-9]{1,2}):([0-9]{2}):([0-9]{2})\.([0-9]{3})$")
_RE_ZIP = re.compile(r"^[0-9]+$")

_SOURCE_TZ = ZoneInfo(SOURCE_TIMEZONE)
_TARGET_TZ = ZoneInfo(TARGET_TIMEZONE)


def clean_unicode(value: str) -> str:
    value = _RE_NON_BMP.sub(REPLACEMENT_CHAR, value)
    return unicodedata.normalize(UNICODE_FORM, value)


def normalize_timestamp(timestamp: str) -> str:
    """
    Parse ``M/D/YY h:mm:ss AM|PM`` as US/Pacific time and render it as
    ISO-8601 in US/Eastern, e.g. ``2023-04-01T17:30:00-04:00``.
    """
    try:
        parsed = datetime.strptime(timestamp, TIMESTAMP_INPUT_FORMAT)
    except ValueError as exc:
        raise MalformedTimestamp(
            f"Error parsing Timestamp: '{timestamp}' ({exc})",
            field=Field.TIMESTAMP.display_name,
            value=timestamp,
        ) from exc

    # Two-digit years always land in 2000-2099.
    parsed = parsed.replace(year=TWO_DIGIT_YEAR_BASE + parsed.year % 100)
    pacific = parsed.replace(tzinfo=_SOURCE_TZ)
    return pacific.astimezone(_TARGET_TZ).isoformat(timespec="seconds")


def normalize_zip(zip_code: str) -> str:
    if not zip_code.strip():
        return zip_code
    if len(zip_code) > ZIP_LENGTH:
        raise ZipTooLong(
            f"Error parsing ZIP: '{zip_code}' is longer than {ZIP_LENGTH}",
            field=Field.ZIP.display_name,
            value=zip_code,
        )
    if not _RE_ZIP.match(zip_code):
        raise InvalidZipFormat(
            f"Error parsing ZIP: '{zip_code}' is not a number",
            field=Field.ZIP.display_name,
            value=zip_code,
        )
    return str(int(zip_code)).zfill(ZIP_LENGTH)


def normalize_full_name(full_name: str) -> str:
    return full_name.upper()


def normalize_address(address: str) -> str:
    return address


def normalize_notes(notes: str) -> str:
    return notes


def duration_to_seconds(duration: str) -> int:
    """Seconds since midnight for a ``H:mm:ss.SSS`` clock time; milliseconds are dropped."""
    match = _RE_DURATION.match(duration)
    if not match:
        raise ValueError(f"'{duration}' does not match H:mm:ss.SSS")

    hours, minutes, seconds, _millis = (int(part) for part in match.groups())
    if hours > 23 or minutes > 59 or seconds > 59:
        raise ValueError(f"'{duration}' is not a valid time of day")
    return hours * 3600 + minutes * 60 + seconds


def _duration_rule(field: Field) -> Callable[[str], str]:
    def normalize(duration: str) -> str:
        if not duration.strip():
            return EMPTY_DURATION
        try:
            return str(duration_to_seconds(duration))
        except ValueError as exc:
            raise MalformedDuration(
                f"Error parsing {field.display_name}: {exc}",
                field=field.display_name,
                value=duration,
            ) from exc

    normalize.__name__ = f"normalize_{field.name.lower()}"
    return normalize


normalize_foo_duration = _duration_rule(Field.FOODURATION)
normalize_bar_duration = _duration_rule(Field.BARDURATION)


def _seconds(value: str, source: Field) -> int:
    try:
        return int(value, 10)
    except ValueError as exc:
        raise MalformedDuration(
            f"Error computing TotalDuration: {source.display_name} '{value}' is not a number",
            field=source.display_name,
            value=value,
        ) from exc


def normalize_total_duration(foo_duration: str, bar_duration: str) -> str:
    foo = _seconds(foo_duration, Field.FOODURATION)
    bar = _seconds(bar_duration, Field.BARDURATION)
    return str(foo + bar)


@dataclass(frozen=True)
class SingleFieldRule:
    """Clean the field's own raw value and transform it."""

    transform: Callable[[str], str]


@dataclass(frozen=True)
class DerivedRule:
    """Compute a value from other, already-normalized fields."""

    sources: Tuple[Field, ...]
    derive: Callable[..., str]


FieldRule = Union[SingleFieldRule, DerivedRule]


FIELD_RULES: Dict[Field, FieldRule] = {
    Field.TIMESTAMP: SingleFieldRule(normalize_timestamp),
    Field.ZIP: SingleFieldRule(normalize_zip),
    Field.FULLNAME: SingleFieldRule(normalize_full_name),
    Field.ADDRESS: SingleFieldRule(normalize_address),
    Field.FOODURATION: SingleFieldRule(normalize_foo_duration),
    Field.BARDURATION: SingleFieldRule(normalize_bar_duration),
    Field.TOTALDURATION: DerivedRule((Field.FOODURATION, Field.BARDURATION), normalize_total_duration),
    Field.NOTES: SingleFieldRule(normalize_notes),
}
