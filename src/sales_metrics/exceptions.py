# ========================
# src/sales_metrics/exceptions.py
# ========================

"""
Exception hierarchy for the sales metrics pipeline.

Row-level problems never raise; they are collected in the parse result.
These exceptions cover the failures that abort a whole run.
"""


class SalesMetricsError(Exception):
    """Base class for pipeline-level failures."""


class SourceReadError(SalesMetricsError):
    """The input log could not be opened, read or decoded."""

    def __init__(self, file_path, reason):
        self.file_path = str(file_path)
        self.reason = reason
        super().__init__(f"Cannot read sales log '{self.file_path}': {reason}")


class ReportInvariantError(SalesMetricsError):
    """Two maps derived from the same aggregate disagree."""


class ConfigError(SalesMetricsError):
    """A configuration value is outside its allowed set."""
