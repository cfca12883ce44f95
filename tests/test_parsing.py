# ========================
# tests/test_parsing.py
# ========================

import unittest
import sys
import os

# Add the project root to Python path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from src.sales_metrics.models import RowIssue, SourceLine, TransactionRecord
from src.sales_metrics.parsing import (
    InvalidNumberError,
    RecordParser,
    parse_lines,
    parse_quantity,
    parse_total_price,
)

HEADER = "Date,SKU,Unit_Price,Quantity,Total_Price"

class TestRecordParser(unittest.TestCase):

    def test_valid_lines(self):
        result = parse_lines([
            HEADER,
            "2023-01-05,ABC,10,2,20",
            "2023-02-01,XYZ,5,10,50.5",
        ])

        self.assertEqual(result.records, [
            TransactionRecord("2023-01-05", "ABC", "10", 2, 20.0, line_number=1),
            TransactionRecord("2023-02-01", "XYZ", "5", 10, 50.5, line_number=2),
        ])
        self.assertEqual(result.issues, [])
        self.assertEqual(result.lines_read, 3)
        self.assertTrue(result.header_skipped)

    def test_header_skipped_regardless_of_content(self):
        """Line 0 is never a record, even when it looks like data."""
        result = parse_lines([
            "2023-01-05,ABC,10,2,20",
            "2023-01-06,ABC,10,3,30",
        ])

        self.assertEqual(len(result.records), 1)
        self.assertEqual(result.records[0].quantity, 3)

    def test_wrong_field_count_is_dropped(self):
        result = parse_lines([
            HEADER,
            "2023-01-05,ABC,10,2",
            "2023-01-05,ABC,10,2,20,extra",
            "2023-01-06,DEF,4,1,4",
        ])

        self.assertEqual([r.sku for r in result.records], ["DEF"])
        self.assertEqual([(i.line_number, i.kind) for i in result.issues], [
            (1, RowIssue.FIELD_COUNT),
            (2, RowIssue.FIELD_COUNT),
        ])
        self.assertIn("got 4", result.issues[0].detail)
        self.assertIn("got 6", result.issues[1].detail)

    def test_blank_line_is_dropped(self):
        result = parse_lines([HEADER, "2023-01-05,ABC,10,2,20", ""])

        self.assertEqual(result.records_parsed, 1)
        self.assertEqual(result.rows_dropped, 1)

    def test_missing_numeric_fields_default_to_zero(self):
        result = parse_lines([HEADER, "2023-01-05,ABC,10,,", "2023-01-05,ABC,10, ,7"])

        self.assertEqual(result.records[0].quantity, 0)
        self.assertEqual(result.records[0].total_price, 0.0)
        self.assertEqual(result.records[1].quantity, 0)
        self.assertEqual(result.records[1].total_price, 7.0)

    def test_non_numeric_values_reject_the_row(self):
        result = parse_lines([
            HEADER,
            "2023-01-05,ABC,10,2 units,20",
            "2023-01-05,ABC,10,2.5,20",
            "2023-01-05,ABC,10,2,$20",
            "2023-01-05,ABC,10,2,nan",
            "2023-01-05,ABC,10,2,20",
        ])

        self.assertEqual(len(result.records), 1)
        self.assertEqual(result.records[0].line_number, 5)
        self.assertEqual([i.kind for i in result.issues], [RowIssue.INVALID_NUMBER] * 4)
        self.assertEqual([i.line_number for i in result.issues], [1, 2, 3, 4])

    def test_fields_are_stripped_and_unit_price_kept_raw(self):
        result = parse_lines([HEADER, " 2023-01-05 , ABC , 10.00 , 2 , 20 "])
        record = result.records[0]

        self.assertEqual(record.date, "2023-01-05")
        self.assertEqual(record.sku, "ABC")
        self.assertEqual(record.unit_price, "10.00")

    def test_statistics_accumulate_across_chunks(self):
        parser = RecordParser()
        parser.parse_lines([SourceLine(0, HEADER), SourceLine(1, "2023-01-05,ABC,10,2,20")])
        second = parser.parse_lines([SourceLine(2, "bad"), SourceLine(3, "2023-01-06,ABC,10,1,10")])

        self.assertFalse(second.header_skipped)
        self.assertEqual(second.issues[0].line_number, 2)
        stats = parser.get_statistics()
        self.assertEqual(stats['lines_seen'], 4)
        self.assertEqual(stats['records_parsed'], 2)
        self.assertEqual(stats['rows_dropped'], 1)
        self.assertAlmostEqual(stats['success_rate'], 2 / 3 * 100)

    def test_success_rate_of_empty_result(self):
        result = parse_lines([HEADER])
        self.assertEqual(result.success_rate, 0.0)
        self.assertEqual(result.records, [])


class TestNumberParsing(unittest.TestCase):

    def test_parse_quantity(self):
        cases = [("7", 7), (" 12 ", 12), ("", 0), (None, 0), ("-3", -3)]
        for value, expected in cases:
            self.assertEqual(parse_quantity(value), expected, f"Failed for quantity: {value!r}")

    def test_parse_quantity_rejects_garbage(self):
        for value in ("abc", "1.5", "0x10"):
            with self.assertRaises(InvalidNumberError):
                parse_quantity(value)

    def test_parse_total_price(self):
        cases = [("20", 20.0), ("19.99", 19.99), ("", 0.0), (None, 0.0), ("1e2", 100.0)]
        for value, expected in cases:
            self.assertEqual(parse_total_price(value), expected, f"Failed for total: {value!r}")

    def test_parse_total_price_rejects_non_finite(self):
        for value in ("inf", "-inf", "nan", "twenty"):
            with self.assertRaises(InvalidNumberError):
                parse_total_price(value)

    def test_overflowing_total_price_is_refused(self):
        with self.assertRaises(InvalidNumberError):
            parse_total_price("1e999")

    def test_underscores_and_non_ascii_digits_are_refused(self):
        for value in ("1_000", "\u0663", "\uff17", "1 000"):
            with self.assertRaises(InvalidNumberError, msg=f"quantity {value!r}"):
                parse_quantity(value)
        for value in ("1_0.5", "\u0663.5", "1,5", "0x1p3", ".", "1e"):
            with self.assertRaises(InvalidNumberError, msg=f"total {value!r}"):
                parse_total_price(value)

    def test_row_with_underscored_quantity_is_dropped(self):
        result = parse_lines([
            "Date,SKU,Unit_Price,Quantity,Total_Price",
            "2023-01-05,ABC,10,1_000,20",
            "2023-01-06,ABC,10,2,1_0.5",
            "2023-01-07,ABC,10,2,20",
        ])

        self.assertEqual([r.line_number for r in result.records], [3])
        self.assertEqual([(i.line_number, i.kind) for i in result.issues], [
            (1, RowIssue.INVALID_NUMBER),
            (2, RowIssue.INVALID_NUMBER),
        ])

if __name__ == '__main__':
    unittest.main()
