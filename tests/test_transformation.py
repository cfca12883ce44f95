# ========================
# tests/test_transformation.py
# ========================

import unittest
import random
import sys
import os

# Add the project root to Python path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from src.sales_metrics.models import SkuMonthlyStat, TransactionRecord
from src.sales_metrics.parsing import parse_lines
from src.sales_metrics.transformation import (
    INVALID_DATE_BUCKET,
    MonthlyAggregator,
    aggregate_records,
    month_key,
)
from src.utils.data_generator import DataGenerator

def record(date, sku, quantity, total):
    return TransactionRecord(date=date, sku=sku, unit_price="0", quantity=quantity, total_price=total)

class TestMonthKey(unittest.TestCase):

    def test_month_names(self):
        cases = [
            ("2023-01-05", "January"),
            ("2023/02/01", "February"),
            ("03/15/2023", "March"),
            ("2023-12-31 23:59:59", "December"),
            ("15-Aug-2023", "August"),
            ("2023-06-01T08:30:00", "June"),
        ]
        for date_text, expected in cases:
            self.assertEqual(month_key(date_text), expected, f"Failed for date: {date_text}")

    def test_unparseable_dates_use_invalid_bucket(self):
        for date_text in ("not-a-date", "", None, "2023-13-01", "2023-02-30"):
            self.assertEqual(month_key(date_text), INVALID_DATE_BUCKET, f"Failed for date: {date_text!r}")


class TestMonthlyAggregator(unittest.TestCase):

    def test_single_order_statistics(self):
        """One order: min, max and average all equal its quantity."""
        aggregate = aggregate_records([record("2023-01-05", "ABC", 4, 40.0)])
        stat = aggregate["January"]["ABC"]

        self.assertEqual(stat.quantity, 4)
        self.assertEqual(stat.order_count, 1)
        self.assertEqual(stat.min_quantity, 4)
        self.assertEqual(stat.max_quantity, 4)
        self.assertEqual(stat.avg_quantity, 4.0)

    def test_accumulates_per_month_and_sku(self):
        aggregate = aggregate_records([
            record("2023-01-05", "ABC", 2, 20.0),
            record("2023-01-20", "ABC", 3, 30.0),
            record("2023-01-21", "DEF", 1, 5.0),
            record("2023-02-01", "XYZ", 10, 50.0),
        ])

        self.assertEqual(list(aggregate), ["January", "February"])
        self.assertEqual(list(aggregate["January"]), ["ABC", "DEF"])
        self.assertEqual(
            aggregate["January"]["ABC"],
            SkuMonthlyStat(quantity=5, revenue=50.0, order_count=2, min_quantity=2, max_quantity=3),
        )
        self.assertEqual(aggregate["January"]["ABC"].avg_quantity, 2.5)
        self.assertEqual(aggregate["February"]["XYZ"].revenue, 50.0)

    def test_average_is_fractional(self):
        aggregate = aggregate_records([
            record("2023-01-01", "ABC", 1, 1.0),
            record("2023-01-02", "ABC", 1, 1.0),
            record("2023-01-03", "ABC", 2, 2.0),
        ])
        self.assertAlmostEqual(aggregate["January"]["ABC"].avg_quantity, 4 / 3)

    def test_years_share_a_month_bucket(self):
        aggregate = aggregate_records([
            record("2023-01-05", "ABC", 2, 20.0),
            record("2024-01-05", "ABC", 3, 30.0),
        ])
        self.assertEqual(list(aggregate), ["January"])
        self.assertEqual(aggregate["January"]["ABC"].order_count, 2)

    def test_invalid_dates_are_kept_in_their_own_bucket(self):
        aggregator = MonthlyAggregator()
        aggregator.process_chunk([
            record("garbage", "ABC", 2, 20.0),
            record("2023-03-01", "ABC", 1, 10.0),
        ])
        aggregate = aggregator.get_aggregate()

        self.assertEqual(aggregate[INVALID_DATE_BUCKET]["ABC"].quantity, 2)
        self.assertEqual(aggregator.invalid_dates, 1)
        summary = aggregator.get_aggregation_summary()
        self.assertEqual(summary['records_processed'], 2)
        self.assertEqual(summary['months'], 2)
        self.assertEqual(summary['month_sku_pairs'], 2)
        self.assertEqual(summary['unique_skus'], 1)

    def test_chunks_fold_into_the_same_aggregate(self):
        aggregator = MonthlyAggregator()
        aggregator.process_chunk([record("2023-01-05", "ABC", 2, 20.0)])
        aggregator.process_chunk([record("2023-01-06", "ABC", 7, 70.0)])

        stat = aggregator.get_aggregate()["January"]["ABC"]
        self.assertEqual((stat.quantity, stat.min_quantity, stat.max_quantity), (9, 2, 7))

    def test_empty_input(self):
        self.assertEqual(aggregate_records([]), {})

    def test_record_order_does_not_change_statistics(self):
        """Shuffling the valid rows gives the same quantities, revenue, min, max and average."""
        lines = DataGenerator(seed=7).generate_lines(500)
        records = parse_lines(lines).records
        shuffled = list(records)
        random.Random(3).shuffle(shuffled)

        original = aggregate_records(records)
        reordered = aggregate_records(shuffled)

        self.assertEqual(set(original), set(reordered))
        for month, sku_sales in original.items():
            self.assertEqual(set(sku_sales), set(reordered[month]))
            for sku, stat in sku_sales.items():
                other = reordered[month][sku]
                self.assertEqual(stat.quantity, other.quantity)
                self.assertEqual(stat.order_count, other.order_count)
                self.assertEqual(stat.min_quantity, other.min_quantity)
                self.assertEqual(stat.max_quantity, other.max_quantity)
                self.assertEqual(stat.avg_quantity, other.avg_quantity)
                self.assertAlmostEqual(stat.revenue, other.revenue, places=6)

if __name__ == '__main__':
    unittest.main()
