"""
Deterministic normalization rules.

This file exists to make the fixed parts of the record format explicit:
nothing here is configurable at runtime.
"""

OUTPUT_ENCODING = "utf-8"
DELIMITER = ","
QUOTE_CHAR = '"'
FIELD_COUNT = 8

DEFAULT_MAX_ERRORS = 100

REPLACEMENT_CHAR = "\ufffd"
# Anything outside the Basic Multilingual Plane.
NON_BMP_PATTERN = "[^\u0000-\uffff]"
UNICODE_FORM = "NFC"

# Timestamps arrive as Pacific wall-clock time and leave as Eastern.
SOURCE_TIMEZONE = "America/Los_Angeles"
TARGET_TIMEZONE = "America/New_York"
TIMESTAMP_INPUT_FORMAT = "%m/%d/%y %I:%M:%S %p"
TWO_DIGIT_YEAR_BASE = 2000

ZIP_LENGTH = 5
EMPTY_DURATION = "0"
