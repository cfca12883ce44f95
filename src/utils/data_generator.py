# ========================
# src/utils/data_generator.py
# ========================

"""
Data Generation Utilities

Writes sample sales logs in the Date,SKU,Unit_Price,Quantity,Total_Price
layout, with controlled injection of the row defects the parser must survive.
"""

import random
import logging
from datetime import datetime, timedelta
from typing import List, Dict, Any, Optional
from pathlib import Path

logger = logging.getLogger(__name__)

HEADER = "Date,SKU,Unit_Price,Quantity,Total_Price"

class DataGenerator:
    """
    Sample data generator for the sales log.
    """

    ERROR_TYPES = ('extra_field', 'missing_field', 'string_quantity', 'empty_quantity', 'bad_date')

    def __init__(self, seed: Optional[int] = None):
        """
        Initialize data generator.

        Args:
            seed (int): Random seed for reproducible data generation
        """
        self.random = random.Random(seed)
        self._initialize_data_patterns()
        logger.info(f"DataGenerator initialized with seed: {seed}")

    def _initialize_data_patterns(self) -> None:
        """Initialize the SKU catalog and seasonal demand."""
        self.catalog = {
            "Death by Chocolate": 60.0,
            "Cake Fudge": 50.0,
            "Pista Cone": 35.0,
            "Hot Chocolate Fudge": 80.0,
            "Butterscotch Sundae": 45.0,
            "Almond Fudge": 70.0,
            "Vanilla Double Scoop": 40.0,
            "Trilogy": 60.0,
        }

        # Seasonal patterns (month -> demand multiplier)
        self.seasonal_patterns = {
            1: 0.8, 2: 0.9, 3: 1.1, 4: 1.3, 5: 1.5, 6: 1.4,
            7: 1.2, 8: 1.1, 9: 1.0, 10: 0.9, 11: 0.8, 12: 1.0
        }

    def generate_dataset(self,
                        file_path: str,
                        num_rows: int,
                        error_rate: float = 0.1,
                        start_date: Optional[datetime] = None) -> Dict[str, Any]:
        """
        Generate a sales log with controlled error injection.

        Args:
            file_path (str): Output file path
            num_rows (int): Number of data rows to generate (header excluded)
            error_rate (float): Fraction of rows with an injected defect
            start_date (datetime): First possible sale date

        Returns:
            dict: Generation statistics
        """
        logger.info(f"Generating {num_rows:,} rows with {error_rate:.1%} error rate...")

        if start_date is None:
            start_date = datetime(2019, 1, 1)

        stats = {
            'total_rows': num_rows,
            'error_rate': error_rate,
            'records_with_errors': 0,
            'error_types': {}
        }

        Path(file_path).parent.mkdir(parents=True, exist_ok=True)

        with open(file_path, 'w', newline='', encoding='utf-8') as f:
            f.write(HEADER + "\n")
            for _ in range(num_rows):
                f.write(",".join(self._generate_single_row(start_date, error_rate, stats)) + "\n")

        stats['error_rate_actual'] = stats['records_with_errors'] / num_rows if num_rows else 0.0

        logger.info(f"Dataset generated: {file_path}")
        logger.info(f"Error breakdown: {stats['error_types']}")
        return stats

    def generate_lines(self, num_rows: int, error_rate: float = 0.0,
                       start_date: Optional[datetime] = None) -> List[str]:
        """Same rows as generate_dataset, returned as lines including the header."""
        stats = {'records_with_errors': 0, 'error_types': {}}
        start_date = start_date or datetime(2019, 1, 1)
        return [HEADER] + [
            ",".join(self._generate_single_row(start_date, error_rate, stats))
            for _ in range(num_rows)
        ]

    def _generate_single_row(self,
                             start_date: datetime,
                             error_rate: float,
                             stats: Dict[str, Any]) -> List[str]:
        """Generate one row, possibly with a defect."""
        sku = self.random.choice(list(self.catalog))
        unit_price = self.catalog[sku]

        sale_date = start_date + timedelta(days=self.random.randint(0, 364))
        multiplier = self.seasonal_patterns[sale_date.month]
        quantity = max(1, int(self.random.randint(1, 6) * multiplier))

        row = [
            sale_date.strftime("%Y-%m-%d"),
            sku,
            f"{unit_price:g}",
            str(quantity),
            f"{unit_price * quantity:g}",
        ]

        if self.random.random() < error_rate:
            stats['records_with_errors'] += 1
            row = self._inject_error(row, stats)

        return row

    def _inject_error(self, row: List[str], stats: Dict[str, Any]) -> List[str]:
        """Inject one defect into the row."""
        error_type = self.random.choice(self.ERROR_TYPES)

        if error_type == 'extra_field':
            row = row + ["note"]
        elif error_type == 'missing_field':
            row = row[:4]
        elif error_type == 'string_quantity':
            row[3] = f"{row[3]} units"
        elif error_type == 'empty_quantity':
            row[3] = ""
        elif error_type == 'bad_date':
            row[0] = "not-a-date"

        self._track_error_type(stats, error_type)
        return row

    def _track_error_type(self, stats: Dict[str, Any], error_type: str) -> None:
        """Track error types for statistics."""
        stats['error_types'][error_type] = stats['error_types'].get(error_type, 0) + 1
