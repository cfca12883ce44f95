# ========================
# src/sales_metrics/storage.py
# ========================

"""
Report Sinks

Renders the computed reports. ConsoleReportSink prints them as text,
FileReportSink writes one CSV per per-month report plus a JSON summary.
"""

import csv
import json
import os
import shutil
import sys
import tempfile
import logging
from dataclasses import asdict, is_dataclass
from typing import Any, Dict, List, Optional, TextIO
from pathlib import Path

from .reports import SalesReport

logger = logging.getLogger(__name__)

REPORT_TITLES = {
    'total_sales': "Total sales of the store",
    'monthly_totals': "Month-wise sales totals",
    'most_popular_items': "Most popular item (most quantity sold) in each month",
    'most_revenue_items': "Item generating most revenue in each month",
    'popular_item_details': "Min, max and average order quantity of the most popular item",
}


def emit_report(report: SalesReport, sink) -> None:
    """
    Route the five reports to a sink.

    A sink needs two methods: show_scalar(key, title, value) and
    show_mapping(key, title, mapping) where mapping is keyed by month.
    """
    sink.show_scalar('total_sales', REPORT_TITLES['total_sales'], report.total_sales)
    sink.show_mapping('monthly_totals', REPORT_TITLES['monthly_totals'], report.monthly_totals)
    sink.show_mapping('most_popular_items', REPORT_TITLES['most_popular_items'], report.most_popular_items)
    sink.show_mapping('most_revenue_items', REPORT_TITLES['most_revenue_items'], report.most_revenue_items)
    sink.show_mapping('popular_item_details', REPORT_TITLES['popular_item_details'], report.popular_item_details)


def _format_value(value: Any) -> str:
    if isinstance(value, float):
        return f"{value:,.2f}"
    return str(value)


class ConsoleReportSink:
    """Text rendering of the reports, one block per report."""

    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream or sys.stdout

    def _write(self, text: str = "") -> None:
        self.stream.write(text + "\n")

    def show_scalar(self, key: str, title: str, value: Any) -> None:
        self._write(f"{title}: {_format_value(value)}")
        self._write()

    def show_mapping(self, key: str, title: str, mapping: Dict[str, Any]) -> None:
        self._write(title)
        if not mapping:
            self._write("   (no data)")
        for month, value in mapping.items():
            if is_dataclass(value):
                parts = ", ".join(f"{name}={_format_value(v)}" for name, v in asdict(value).items())
                self._write(f"   • {month}: {parts}")
            else:
                self._write(f"   • {month}: {_format_value(value)}")
        self._write()


class FileReportSink:
    """
    Writes reports to an output directory.

    Everything handed to the sink is buffered; nothing touches the disk
    until save() is called, so a run that fails half way leaves no files.
    """

    FILE_NAMES = {
        'monthly_totals': "monthly_totals.csv",
        'most_popular_items': "most_popular_items.csv",
        'most_revenue_items': "most_revenue_items.csv",
        'popular_item_details': "popular_item_details.csv",
    }
    SUMMARY_FILE = "report_summary.json"
    DICTIONARY_FILE = "DATA_DICTIONARY.md"

    HEADERS = {
        'monthly_totals': ['month', 'total_sales'],
        'most_popular_items': ['month', 'sku', 'total_quantity_sold'],
        'most_revenue_items': ['month', 'sku', 'revenue'],
        'popular_item_details': ['month', 'sku', 'min_quantity', 'max_quantity', 'avg_quantity'],
    }

    def __init__(self, output_dir: str = "data/reports"):
        """
        Initialize the file sink.

        Args:
            output_dir (str): Directory to save output files
        """
        self.output_dir = Path(output_dir)
        self._scalars: Dict[str, Any] = {}
        self._tables: Dict[str, List[Dict[str, Any]]] = {}
        logger.info(f"FileReportSink initialized with output directory: {self.output_dir}")

    def show_scalar(self, key: str, title: str, value: Any) -> None:
        self._scalars[key] = value

    def show_mapping(self, key: str, title: str, mapping: Dict[str, Any]) -> None:
        rows = []
        for month, value in mapping.items():
            if is_dataclass(value):
                rows.append({'month': month, **asdict(value)})
            else:
                rows.append({'month': month, self.HEADERS[key][1]: value})
        self._tables[key] = rows

    def save(self, summary: Optional[Dict[str, Any]] = None) -> Dict[str, str]:
        """
        Write every buffered report.

        Files are written to a staging directory beside output_dir and only
        moved into output_dir once all of them exist. A failed save leaves
        output_dir as it was.

        Args:
            summary (dict): Extra run statistics merged into report_summary.json

        Returns:
            dict: Mapping of report name to saved file path
        """
        parent_dir = self.output_dir.parent
        parent_dir.mkdir(parents=True, exist_ok=True)
        staging_dir = Path(tempfile.mkdtemp(prefix=f".{self.output_dir.name}-", dir=parent_dir))
        staged_files = {}

        try:
            for key, rows in self._tables.items():
                file_path = staging_dir / self.FILE_NAMES[key]
                self._write_csv(file_path, self.HEADERS[key], rows)
                staged_files[key] = file_path

            staged_files['summary'] = self._save_summary(staging_dir, {**self._scalars, **(summary or {})})
            staged_files['data_dictionary'] = self.create_data_dictionary(staging_dir)

            self.output_dir.mkdir(parents=True, exist_ok=True)
            saved_files = {}
            for key, file_path in staged_files.items():
                target = self.output_dir / file_path.name
                os.replace(file_path, target)
                saved_files[key] = str(target)

            logger.info(f"All reports saved successfully to {len(saved_files)} files in {self.output_dir}")
            return saved_files

        except Exception as e:
            logger.error(f"Error saving reports: {e}")
            raise
        finally:
            shutil.rmtree(staging_dir, ignore_errors=True)

    def _save_summary(self, directory: Path, summary_data: Dict[str, Any]) -> Path:
        """Save run summary as JSON."""
        file_path = directory / self.SUMMARY_FILE

        with open(file_path, 'w', encoding='utf-8') as f:
            json.dump(summary_data, f, indent=2, ensure_ascii=False, default=str)

        logger.info(f"Summary written to {file_path}")
        return file_path

    def _write_csv(self, file_path: Path, headers: List[str], data_items: List[Dict]) -> None:
        """Write data to CSV file."""
        try:
            with open(file_path, 'w', newline='', encoding='utf-8') as f:
                writer = csv.DictWriter(f, fieldnames=headers)
                writer.writeheader()
                writer.writerows(data_items)

            logger.info(f"Saved {len(data_items)} rows to {file_path}")

        except Exception as e:
            logger.error(f"Error writing CSV file {file_path}: {e}")
            raise

    def create_data_dictionary(self, directory: Path) -> Path:
        """Create a data dictionary explaining all output files."""
        file_path = directory / self.DICTIONARY_FILE

        content = """# Data Dictionary

Files produced from one run over a sales log
(`Date,SKU,Unit_Price,Quantity,Total_Price`, first line is the header).

Months are full English month names ("January"). Rows whose date could not be
parsed are grouped under "Invalid Date". Years are not part of the key.

### monthly_totals.csv

| Column | Type | Description |
|--------|------|-------------|
| month | string | Month name |
| total_sales | float | Sum of Total_Price for the month |

### most_popular_items.csv

| Column | Type | Description |
|--------|------|-------------|
| month | string | Month name |
| sku | string | SKU with the highest quantity sold (first SKU wins ties) |
| total_quantity_sold | integer | Units sold in the month |

### most_revenue_items.csv

| Column | Type | Description |
|--------|------|-------------|
| month | string | Month name |
| sku | string | SKU picked by the configured revenue ranking |
| revenue | float | Sum of Total_Price for that SKU in the month |

### popular_item_details.csv

| Column | Type | Description |
|--------|------|-------------|
| month | string | Month name |
| sku | string | Most popular SKU of the month |
| min_quantity | integer | Smallest single-order quantity |
| max_quantity | integer | Largest single-order quantity |
| avg_quantity | float | Units sold / number of orders |

### report_summary.json

Total sales, the revenue ranking in use, parse statistics (lines read, records
parsed, rows dropped) and a capped list of the dropped rows with the reason.
"""

        with open(file_path, 'w', encoding='utf-8') as f:
            f.write(content)

        logger.info(f"Data dictionary created at {file_path}")
        return file_path
