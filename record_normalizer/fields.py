"""
Field catalog and column-order resolution.

The eight fields are declared in canonical order: a file without a header
is read in exactly this order. A header, when present, is the first record
and names all eight fields (any case, surrounding whitespace ignored).
"""

from __future__ import annotations

from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional, Sequence

from .rules import FIELD_COUNT


class Field(Enum):
    TIMESTAMP = "Timestamp"
    ZIP = "ZIP"
    FULLNAME = "FullName"
    ADDRESS = "Address"
    FOODURATION = "FooDuration"
    BARDURATION = "BarDuration"
    TOTALDURATION = "TotalDuration"
    NOTES = "Notes"

    @property
    def display_name(self) -> str:
        return self.value

    @property
    def position(self) -> int:
        """Canonical column position (declaration order)."""
        return list(Field).index(self)


FieldOrderMap = Mapping[Field, int]


def canonical_order() -> FieldOrderMap:
    return MappingProxyType({field: position for position, field in enumerate(Field)})


def header_field_order(tokens: Sequence[str]) -> Optional[FieldOrderMap]:
    """
    Return the field order declared by a header record, or None.

    Every token must name a field and every field must be named exactly once.
    """
    if len(tokens) != FIELD_COUNT:
        return None

    order: dict[Field, int] = {}
    for position, token in enumerate(tokens):
        name = token.strip().upper()
        field = Field.__members__.get(name)
        if field is None or field in order:
            return None
        order[field] = position

    if len(order) != FIELD_COUNT:
        return None
    return MappingProxyType(order)


def resolve_field_order(tokens: Sequence[str]) -> tuple[FieldOrderMap, bool]:
    """Resolve the column order from the first record: (order, is_header)."""
    order = header_field_order(tokens)
    if order is not None:
        return order, True
    return canonical_order(), False
