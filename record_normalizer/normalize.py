"""
Core normalization logic.

Responsibilities:
- input decoding (UTF-8 first, detected encoding as fallback) + newline normalization
- per-line tokenization and header / field-order resolution
- per-field dispatch, including the derived TotalDuration
- error budget enforcement and reporting
"""

from __future__ import annotations

import base64
import hashlib
from enum import Enum
from typing import Any, Dict, Iterable, List, MutableSequence, Optional

from charset_normalizer import from_bytes

from .errors import ErrorBudgetExhausted, NormalizationError
from .fields import Field, FieldOrderMap, resolve_field_order
from .logging import get_logger
from .rules import DEFAULT_MAX_ERRORS, DELIMITER, FIELD_COUNT, OUTPUT_ENCODING
from .tokenizer import tokenize
from .tracker import ErrorTracker
from .transformers import FIELD_RULES, DerivedRule, clean_unicode

logger = get_logger(__name__)


def _sha256_hex(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


def decode_input(raw: bytes) -> tuple[str, Dict[str, Any]]:
    """
    Decode input bytes to text with LF newlines.

    Rules:
    - Strict UTF-8 first (a leading BOM is dropped).
    - Otherwise detect the encoding best-effort via charset-normalizer.
    - Last resort: UTF-8 with U+FFFD replacement characters, reported as a fallback.
    """
    detected = None
    decode_fallback = False

    try:
        text = raw.decode("utf-8-sig")
        decode_used = "utf-8"
    except UnicodeDecodeError:
        match = from_bytes(raw).best()
        if match is not None:
            detected = match.encoding
        try:
            if detected is None:
                raise LookupError("no encoding detected")
            text = raw.decode(detected)
            decode_used = detected
        except (LookupError, UnicodeDecodeError):
            text = raw.decode("utf-8", errors="replace")
            decode_used = "utf-8"
            decode_fallback = True

    # --- Newline normalization: CRLF/CR -> LF ---
    nl_before = {
        "crlf": text.count("\r\n"),
        "cr": text.count("\r") - text.count("\r\n"),
    }
    text = text.replace("\r\n", "\n").replace("\r", "\n")

    report = {
        "detected": detected,
        "decode_used": decode_used,
        "decode_fallback": decode_fallback,
        "output": OUTPUT_ENCODING,
        "newlines_changed": nl_before["crlf"] > 0 or nl_before["cr"] > 0,
    }
    return text, report


def dispatch(record: MutableSequence[str], order: FieldOrderMap) -> None:
    """
    Normalize ``record`` in place, field by field in canonical order.

    Derived fields read the current (already-normalized) values of their
    sources. The first failing field aborts the rest of the record.
    """
    for field in Field:
        rule = FIELD_RULES[field]
        position = order[field]
        if isinstance(rule, DerivedRule):
            record[position] = rule.derive(*(record[order[source]] for source in rule.sources))
        else:
            record[position] = rule.transform(clean_unicode(record[position]))


class ProcessorState(Enum):
    AWAITING_FIRST_LINE = "awaiting_first_line"
    PROCESSING = "processing"
    HALTED = "halted_by_error_budget"


class RecordProcessor:
    """
    Turns raw input lines into normalized output lines.

    ``process_line`` returns the line to emit, or None when the line was
    rejected. The first successfully tokenized line decides the field order;
    a header line is passed through unchanged. Once the error budget is spent
    every further call raises ErrorBudgetExhausted.
    """

    def __init__(self, max_errors: int = DEFAULT_MAX_ERRORS):
        self.tracker = ErrorTracker(max_errors)
        self.state = ProcessorState.AWAITING_FIRST_LINE
        self.field_order: Optional[FieldOrderMap] = None
        self.header_detected = False
        self.line_number = 0
        self.errors: List[dict] = []

    def process_line(self, line: str) -> Optional[str]:
        if self.state is ProcessorState.HALTED:
            raise ErrorBudgetExhausted(self.tracker.max_errors, self.line_number, self.errors)

        self.line_number += 1

        try:
            record = tokenize(line)
        except NormalizationError as exc:
            self._reject(exc)
            return None

        if self.state is ProcessorState.AWAITING_FIRST_LINE:
            self.field_order, self.header_detected = resolve_field_order(record)
            self.state = ProcessorState.PROCESSING
            if self.header_detected:
                return line

        try:
            dispatch(record, self.field_order)
        except NormalizationError as exc:
            self._reject(exc)
            return None

        return DELIMITER.join(record)

    def _reject(self, exc: NormalizationError) -> None:
        self.errors.append({
            "row": self.line_number,
            "column": exc.field,
            "issue": exc.issue,
            "value": exc.value,
            "action": "line_skipped",
            "message": str(exc),
        })
        count = self.tracker.record_error()
        logger.warning(
            "record_rejected",
            line=self.line_number,
            issue=exc.issue,
            field=exc.field,
            error=str(exc),
            error_count=count,
        )

        if self.tracker.budget_exhausted():
            self.state = ProcessorState.HALTED
            logger.error(
                "error_budget_exhausted",
                line=self.line_number,
                max_errors=self.tracker.max_errors,
            )
            raise ErrorBudgetExhausted(self.tracker.max_errors, self.line_number, self.errors)

    def field_order_report(self) -> Optional[Dict[str, int]]:
        if self.field_order is None:
            return None
        return {field.display_name: self.field_order[field] for field in Field}


def normalize_lines(lines: Iterable[str], processor: RecordProcessor) -> List[str]:
    """Run every non-empty line through ``processor``; ErrorBudgetExhausted propagates."""
    output: List[str] = []
    for line in lines:
        if line == "":
            continue
        normalized = processor.process_line(line)
        if normalized is not None:
            output.append(normalized)
    return output


def normalize_text(text: str, max_errors: int = DEFAULT_MAX_ERRORS) -> tuple[List[str], RecordProcessor]:
    processor = RecordProcessor(max_errors)
    output = normalize_lines(text.split("\n"), processor)
    return output, processor


def normalize_csv_bytes(raw: bytes, max_errors: int = DEFAULT_MAX_ERRORS) -> Dict[str, Any]:
    """
    Decode, normalize and package a whole upload.
    Returns a dict matching the API's response envelope.
    """
    text, enc_report = decode_input(raw)
    output, processor = normalize_text(text, max_errors)

    warnings: List[dict] = []
    if enc_report["decode_fallback"]:
        warnings.append({
            "row": None,
            "column": None,
            "issue": "decode_fallback",
            "value": enc_report["detected"],
            "action": "decoded_as_utf8_with_replacement",
        })

    normalized_bytes = "".join(line + "\n" for line in output).encode(OUTPUT_ENCODING)
    data_rows_out = len(output) - (1 if processor.header_detected else 0)

    b64 = base64.b64encode(normalized_bytes).decode("ascii")
    return {
        "normalized_csv": {
            "sha256": _sha256_hex(normalized_bytes),
            "encoding": OUTPUT_ENCODING,
            "content_b64": b64,
        },
        "report": {
            "summary": {
                "rows_in": processor.line_number,
                "rows_out": data_rows_out,
                "columns": FIELD_COUNT,
                "header_detected": processor.header_detected,
                "warnings": len(warnings),
                "errors": len(processor.errors),
                "deterministic": True,
            },
            "normalizations": {
                "encoding": enc_report,
                "field_order": processor.field_order_report(),
                "max_errors": processor.tracker.max_errors,
            },
            "warnings": warnings,
            "errors": processor.errors,
        },
    }
