# ========================
# src/sales_metrics/__init__.py
# ========================

"""
Sales Metrics Package

Core components of the sales metrics pipeline:
- ingestion: Chunked reading of the sales log
- parsing: Line to record conversion with row-level error reporting
- transformation: Month -> SKU aggregation
- reports: Total, monthly and per-item reports
- storage: Console and file report sinks
- orchestrator: Pipeline coordination
"""

from .exceptions import SalesMetricsError, SourceReadError, ReportInvariantError, ConfigError
from .models import (
    TransactionRecord,
    SkuMonthlyStat,
    RowIssue,
    ParseResult,
    RevenueRanking,
    PopularItem,
    RevenueItem,
    PopularItemDetail,
)
from .ingestion import LineReader
from .parsing import RecordParser, parse_lines
from .transformation import MonthlyAggregator, aggregate_records, month_key, INVALID_DATE_BUCKET
from .reports import (
    SalesReport,
    build_report,
    total_sales,
    monthly_totals,
    most_popular_items,
    most_revenue_items,
    popular_item_details,
)
from .storage import ConsoleReportSink, FileReportSink, emit_report
from .orchestrator import SalesPipeline, PipelineResult, run_pipeline

__all__ = [
    'SalesMetricsError',
    'SourceReadError',
    'ReportInvariantError',
    'ConfigError',
    'TransactionRecord',
    'SkuMonthlyStat',
    'RowIssue',
    'ParseResult',
    'RevenueRanking',
    'PopularItem',
    'RevenueItem',
    'PopularItemDetail',
    'LineReader',
    'RecordParser',
    'parse_lines',
    'MonthlyAggregator',
    'aggregate_records',
    'month_key',
    'INVALID_DATE_BUCKET',
    'SalesReport',
    'build_report',
    'total_sales',
    'monthly_totals',
    'most_popular_items',
    'most_revenue_items',
    'popular_item_details',
    'ConsoleReportSink',
    'FileReportSink',
    'emit_report',
    'SalesPipeline',
    'PipelineResult',
    'run_pipeline',
]

__version__ = "1.0.0"
