# ========================
# src/sales_metrics/parsing.py
# ========================

"""
Record Parsing Module

Turns raw log lines into TransactionRecord objects and keeps track of the
rows it had to drop.
"""

import re
import math
import logging
from typing import Dict, Iterable, Optional, Union

from .models import ParseResult, RowIssue, SourceLine, TransactionRecord

logger = logging.getLogger(__name__)

FIELD_DELIMITER = ","
EXPECTED_FIELDS = ("Date", "SKU", "Unit_Price", "Quantity", "Total_Price")

# ASCII digits only, no digit-group underscores
QUANTITY_PATTERN = re.compile(r"[+-]?[0-9]+")
TOTAL_PRICE_PATTERN = re.compile(r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")


class InvalidNumberError(ValueError):
    """A numeric column held something that is not a number."""


class RecordParser:
    """
    Parses sales log lines into records.

    Line 0 is the header and is skipped without looking at it. A line with
    the wrong number of fields, or with a non-numeric Quantity/Total_Price,
    is dropped and reported as a RowIssue; the remaining lines are still
    parsed. Counters accumulate across calls so a chunked reader can feed
    the parser piece by piece.
    """

    def __init__(self):
        """Initialize the record parser."""
        self.lines_seen = 0
        self.records_parsed = 0
        self.rows_dropped = 0
        logger.info("RecordParser initialized")

    def parse_lines(self, lines: Iterable[Union[SourceLine, str]]) -> ParseResult:
        """
        Parse a batch of lines.

        Args:
            lines: SourceLine objects, or plain strings numbered from 0.

        Returns:
            ParseResult: Records in input order and the issues for dropped rows.
        """
        result = ParseResult()

        for position, line in enumerate(lines):
            if not isinstance(line, SourceLine):
                line = SourceLine(position, line)

            result.lines_read += 1
            self.lines_seen += 1

            if line.number == 0:
                result.header_skipped = True
                logger.debug(f"Skipping header line: {line.text!r}")
                continue

            record, issue = self.parse_line(line)
            if record is not None:
                result.records.append(record)
                self.records_parsed += 1
            else:
                result.issues.append(issue)
                self.rows_dropped += 1
                logger.debug(f"Line {issue.line_number} dropped ({issue.kind}): {issue.detail}")

        return result

    def parse_line(self, line: SourceLine):
        """
        Parse a single data line.

        Returns:
            tuple: (TransactionRecord, None) on success, (None, RowIssue) otherwise.
        """
        fields = line.text.split(FIELD_DELIMITER)
        if len(fields) != len(EXPECTED_FIELDS):
            return None, RowIssue(
                line.number,
                RowIssue.FIELD_COUNT,
                f"expected {len(EXPECTED_FIELDS)} fields, got {len(fields)}",
            )

        date_text, sku, unit_price, quantity_text, total_text = (f.strip() for f in fields)

        try:
            quantity = parse_quantity(quantity_text)
            total_price = parse_total_price(total_text)
        except InvalidNumberError as e:
            return None, RowIssue(line.number, RowIssue.INVALID_NUMBER, str(e))

        record = TransactionRecord(
            date=date_text,
            sku=sku,
            unit_price=unit_price,
            quantity=quantity,
            total_price=total_price,
            line_number=line.number,
        )
        return record, None

    def get_statistics(self) -> Dict[str, float]:
        """Get parsing statistics across every batch seen so far."""
        data_rows = self.records_parsed + self.rows_dropped
        return {
            'lines_seen': self.lines_seen,
            'records_parsed': self.records_parsed,
            'rows_dropped': self.rows_dropped,
            'success_rate': self.records_parsed / data_rows * 100 if data_rows > 0 else 0
        }


def parse_quantity(value: Optional[str]) -> int:
    """Base-10 integer; an empty field counts as 0."""
    text = (value or "").strip() or "0"
    if not QUANTITY_PATTERN.fullmatch(text):
        raise InvalidNumberError(f"Quantity {value!r} is not an integer")
    return int(text, 10)


def parse_total_price(value: Optional[str]) -> float:
    """Decimal amount; an empty field counts as 0. NaN and infinities are refused."""
    text = (value or "").strip() or "0"
    if not TOTAL_PRICE_PATTERN.fullmatch(text):
        raise InvalidNumberError(f"Total_Price {value!r} is not a number")
    amount = float(text)
    if not math.isfinite(amount):
        raise InvalidNumberError(f"Total_Price {value!r} is not a finite number")
    return amount


def parse_lines(lines: Iterable[Union[SourceLine, str]]) -> ParseResult:
    """Parse a complete log in one call."""
    return RecordParser().parse_lines(lines)
