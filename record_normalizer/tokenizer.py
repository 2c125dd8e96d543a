from __future__ import annotations

import re
from functools import lru_cache
from typing import List

from .errors import MalformedRecord
from .rules import DELIMITER, FIELD_COUNT, QUOTE_CHAR


@lru_cache(maxsize=8)
def _split_pattern(delimiter: str) -> re.Pattern[str]:
    # Split only where an even number of quotes follows the delimiter,
    # i.e. the delimiter is not inside a quoted segment.
    d = re.escape(delimiter)
    q = re.escape(QUOTE_CHAR)
    return re.compile(rf"{d}(?=(?:[^{q}]*{q}[^{q}]*{q})*[^{q}]*$)")


def tokenize(line: str, delimiter: str = DELIMITER) -> List[str]:
    """
    Split one raw line into exactly eight field strings.

    Quoted segments are kept intact, quotes included. Trailing empty fields
    do not count, except that a line ending in a bare delimiter with seven
    remaining parts gets an empty eighth field.
    """
    tokens = _split_pattern(delimiter).split(line)
    # Trailing empty fields are dropped; only the last one is restored below.
    while tokens and tokens[-1] == "":
        tokens.pop()

    if len(tokens) == FIELD_COUNT:
        return tokens

    if len(tokens) == FIELD_COUNT - 1 and line.strip().endswith(delimiter):
        return tokens + [""]

    raise MalformedRecord(
        f"Invalid CSV format: expected {FIELD_COUNT} fields, found {len(tokens)}",
        value=line,
    )
