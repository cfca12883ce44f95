# ========================
# src/sales_metrics/reports.py
# ========================

"""
Report Generators

Read-only functions deriving business metrics from a finished monthly
aggregate. Every function builds new result objects; none of them touch
the aggregate it is given.

Ties are broken by insertion order: a SKU only replaces the current leader
when it is strictly greater, so the first SKU seen in a month wins.
"""

import logging
from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional, Union

from .exceptions import ConfigError, ReportInvariantError
from .models import (
    MonthlyAggregate,
    PopularItem,
    PopularItemDetail,
    RevenueItem,
    RevenueRanking,
)

logger = logging.getLogger(__name__)


def total_sales(aggregate: MonthlyAggregate) -> float:
    """Revenue across every SKU in every month."""
    total = 0.0
    for sku_sales in aggregate.values():
        for stat in sku_sales.values():
            total += stat.revenue
    return total


def monthly_totals(aggregate: MonthlyAggregate) -> Dict[str, float]:
    """Revenue per month."""
    totals = {}
    for month, sku_sales in aggregate.items():
        month_total = 0.0
        for stat in sku_sales.values():
            month_total += stat.revenue
        totals[month] = month_total
    return totals


def most_popular_items(aggregate: MonthlyAggregate) -> Dict[str, PopularItem]:
    """SKU with the highest cumulative quantity in each month."""
    popular = {}
    for month, sku_sales in aggregate.items():
        best = None
        for sku, stat in sku_sales.items():
            if best is None or stat.quantity > best.total_quantity_sold:
                best = PopularItem(sku=sku, total_quantity_sold=stat.quantity)
        if best is not None:
            popular[month] = best
    return popular


def most_revenue_items(aggregate: MonthlyAggregate,
                       ranking: Union[RevenueRanking, str] = RevenueRanking.REVENUE) -> Dict[str, RevenueItem]:
    """
    SKU generating the most revenue in each month.

    Args:
        aggregate: Finished monthly aggregate
        ranking: RevenueRanking.REVENUE compares revenue with revenue.
            RevenueRanking.QUANTITY keeps the first version of this report,
            which compared the candidate's quantity against the leader's
            revenue; the reported value is revenue in both modes.

    Returns:
        dict: month -> RevenueItem
    """
    ranking = resolve_ranking(ranking)
    leaders = {}
    for month, sku_sales in aggregate.items():
        best = None
        for sku, stat in sku_sales.items():
            score = stat.revenue if ranking is RevenueRanking.REVENUE else stat.quantity
            if best is None or score > best.revenue:
                best = RevenueItem(sku=sku, revenue=stat.revenue)
        if best is not None:
            leaders[month] = best
    return leaders


def popular_item_details(popular_items: Dict[str, PopularItem],
                         aggregate: MonthlyAggregate) -> Dict[str, PopularItemDetail]:
    """
    Order-size statistics of each month's most popular SKU.

    Raises:
        ReportInvariantError: A month or SKU of popular_items is not in the aggregate.
    """
    details = {}
    for month, item in popular_items.items():
        sku_sales = aggregate.get(month)
        if sku_sales is None:
            raise ReportInvariantError(f"Month {month!r} is missing from the aggregate")
        stat = sku_sales.get(item.sku)
        if stat is None:
            raise ReportInvariantError(f"SKU {item.sku!r} is missing from month {month!r}")

        details[month] = PopularItemDetail(
            sku=item.sku,
            min_quantity=stat.min_quantity,
            max_quantity=stat.max_quantity,
            avg_quantity=stat.avg_quantity,
        )
    return details


def resolve_ranking(value: Union[RevenueRanking, str, None]) -> RevenueRanking:
    if isinstance(value, RevenueRanking):
        return value
    try:
        return RevenueRanking((value or RevenueRanking.REVENUE.value).strip().lower())
    except ValueError:
        allowed = ", ".join(r.value for r in RevenueRanking)
        raise ConfigError(f"Unknown revenue ranking {value!r} (expected one of: {allowed})") from None


@dataclass(frozen=True)
class SalesReport:
    """The five reports derived from one aggregate."""
    total_sales: float
    monthly_totals: Dict[str, float]
    most_popular_items: Dict[str, PopularItem]
    most_revenue_items: Dict[str, RevenueItem]
    popular_item_details: Dict[str, PopularItemDetail]
    revenue_ranking: RevenueRanking = RevenueRanking.REVENUE

    def to_dict(self) -> Dict[str, Any]:
        """JSON-safe representation."""
        return {
            'total_sales': self.total_sales,
            'monthly_totals': dict(self.monthly_totals),
            'most_popular_items': {m: asdict(v) for m, v in self.most_popular_items.items()},
            'most_revenue_items': {m: asdict(v) for m, v in self.most_revenue_items.items()},
            'popular_item_details': {m: asdict(v) for m, v in self.popular_item_details.items()},
            'revenue_ranking': self.revenue_ranking.value,
        }


def build_report(aggregate: MonthlyAggregate,
                 ranking: Optional[Union[RevenueRanking, str]] = None) -> SalesReport:
    """Run all five report generators over a finished aggregate."""
    ranking = resolve_ranking(ranking)
    popular = most_popular_items(aggregate)

    report = SalesReport(
        total_sales=total_sales(aggregate),
        monthly_totals=monthly_totals(aggregate),
        most_popular_items=popular,
        most_revenue_items=most_revenue_items(aggregate, ranking),
        popular_item_details=popular_item_details(popular, aggregate),
        revenue_ranking=ranking,
    )
    logger.info(f"Reports built for {len(report.monthly_totals)} months (revenue ranking: {ranking.value})")
    return report
