# ========================
# src/sales_metrics/transformation.py
# ========================

"""
Data Transformation Module

Folds transaction records into the month -> SKU -> statistics aggregate.
"""

import logging
from datetime import datetime
from typing import Any, Dict, Iterable, Optional

from .models import MonthlyAggregate, SkuMonthlyStat, TransactionRecord

logger = logging.getLogger(__name__)

# Pinned so month keys do not depend on the process locale
MONTH_NAMES = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)

INVALID_DATE_BUCKET = "Invalid Date"

DATE_FORMATS = (
    "%Y-%m-%d",
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%dT%H:%M:%S",
    "%Y/%m/%d",
    "%m/%d/%Y",
    "%d-%b-%Y",
    "%b %d, %Y",
    "%B %d, %Y",
)


def parse_date(value: Optional[str]) -> Optional[datetime]:
    """
    Parses a date string in the formats seen in sales logs.
    Returns a datetime object or None if malformed.
    """
    if not value or not isinstance(value, str):
        return None

    text = value.strip()
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue

    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


def month_key(date_text: Optional[str]) -> str:
    """Full English month name for a date string, or the invalid-date bucket."""
    parsed = parse_date(date_text)
    if parsed is None:
        return INVALID_DATE_BUCKET
    return MONTH_NAMES[parsed.month - 1]


class MonthlyAggregator:
    """
    Builds the monthly aggregate one record at a time.

    The update is a sum for quantity, revenue and order count and a pointwise
    min/max for order size, so the final state does not depend on the order
    records arrive in.
    """

    def __init__(self):
        """Initialize the aggregator with an empty aggregate."""
        self.monthly_sales: MonthlyAggregate = {}
        self.records_processed = 0
        self.invalid_dates = 0
        logger.info("MonthlyAggregator initialized")

    def process_chunk(self, records: Iterable[TransactionRecord]) -> None:
        """
        Fold a batch of parsed records into the aggregate.

        Args:
            records: Parsed records, in input order.
        """
        count = 0
        for record in records:
            self.add_record(record)
            count += 1
        logger.debug(f"Chunk folded: {count} records. Total records so far: {self.records_processed}")

    def add_record(self, record: TransactionRecord) -> None:
        month = month_key(record.date)
        if month == INVALID_DATE_BUCKET:
            self.invalid_dates += 1
            logger.debug(f"Line {record.line_number}: unparseable date {record.date!r}")

        sku_sales = self.monthly_sales.setdefault(month, {})
        stat = sku_sales.get(record.sku)
        if stat is None:
            sku_sales[record.sku] = SkuMonthlyStat.from_record(record)
        else:
            stat.add(record)

        self.records_processed += 1

    def get_aggregate(self) -> MonthlyAggregate:
        """Return the finished aggregate and log what it holds."""
        logger.info(
            f"Aggregation complete. Processed {self.records_processed} records into "
            f"{len(self.monthly_sales)} months"
        )
        if self.invalid_dates:
            logger.warning(f"{self.invalid_dates} records had unparseable dates ('{INVALID_DATE_BUCKET}' bucket)")
        return self.monthly_sales

    def get_aggregation_summary(self) -> Dict[str, Any]:
        """Get a summary of the aggregate."""
        return {
            'records_processed': self.records_processed,
            'months': len(self.monthly_sales),
            'month_sku_pairs': sum(len(skus) for skus in self.monthly_sales.values()),
            'unique_skus': len({sku for skus in self.monthly_sales.values() for sku in skus}),
            'invalid_dates': self.invalid_dates,
        }


def aggregate_records(records: Iterable[TransactionRecord]) -> MonthlyAggregate:
    """Fold a complete record sequence into a fresh aggregate."""
    aggregator = MonthlyAggregator()
    aggregator.process_chunk(records)
    return aggregator.get_aggregate()
