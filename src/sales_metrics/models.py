# ========================
# src/sales_metrics/models.py
# ========================

"""
Data Model

Typed records flowing between the pipeline stages: parsed transactions,
per-month SKU statistics and the result objects built by the reports.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List

# Month key -> SKU -> running statistics
MonthlyAggregate = Dict[str, Dict[str, "SkuMonthlyStat"]]


@dataclass(frozen=True)
class SourceLine:
    number: int
    text: str


@dataclass(frozen=True)
class TransactionRecord:
    """One validated sales line."""
    date: str
    sku: str
    unit_price: str
    quantity: int
    total_price: float
    line_number: int = 0


@dataclass
class SkuMonthlyStat:
    """
    Running statistics for one SKU within one month.

    The average is derived on read from quantity and order_count so it
    always matches the accumulated totals.
    """
    quantity: int
    revenue: float
    order_count: int
    min_quantity: int
    max_quantity: int

    @classmethod
    def from_record(cls, record: TransactionRecord) -> "SkuMonthlyStat":
        return cls(
            quantity=record.quantity,
            revenue=record.total_price,
            order_count=1,
            min_quantity=record.quantity,
            max_quantity=record.quantity,
        )

    def add(self, record: TransactionRecord) -> None:
        """Fold one more order into the running totals."""
        self.quantity += record.quantity
        self.revenue += record.total_price
        self.order_count += 1
        self.min_quantity = min(self.min_quantity, record.quantity)
        self.max_quantity = max(self.max_quantity, record.quantity)

    @property
    def avg_quantity(self) -> float:
        return self.quantity / self.order_count


@dataclass(frozen=True)
class RowIssue:
    """A line the parser refused, with the reason."""
    line_number: int
    kind: str
    detail: str

    FIELD_COUNT = "field_count"
    INVALID_NUMBER = "invalid_number"


@dataclass
class ParseResult:
    """Records produced from a batch of lines plus everything that was dropped."""
    records: List[TransactionRecord] = field(default_factory=list)
    issues: List[RowIssue] = field(default_factory=list)
    lines_read: int = 0
    header_skipped: bool = False

    @property
    def records_parsed(self) -> int:
        return len(self.records)

    @property
    def rows_dropped(self) -> int:
        return len(self.issues)

    @property
    def success_rate(self) -> float:
        data_rows = self.records_parsed + self.rows_dropped
        return self.records_parsed / data_rows * 100 if data_rows > 0 else 0.0


class RevenueRanking(str, Enum):
    """How the most-revenue report picks its winner."""
    REVENUE = "revenue"
    # Candidate quantity compared against the leader's revenue, as the
    # first version of the report did.
    QUANTITY = "quantity"


@dataclass(frozen=True)
class PopularItem:
    sku: str
    total_quantity_sold: int


@dataclass(frozen=True)
class RevenueItem:
    sku: str
    revenue: float


@dataclass(frozen=True)
class PopularItemDetail:
    sku: str
    min_quantity: int
    max_quantity: int
    avg_quantity: float
