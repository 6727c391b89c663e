"""Tests for lenient cell coercion."""

from datetime import date, datetime

from openpyxl.utils.datetime import CALENDAR_MAC_1904

from finsheet.ingestion.cells import (
    coerce_amount,
    coerce_label,
    coerce_month,
    is_blank,
    serial_to_date,
)


class TestCoerceAmount:
    """Tests for amount coercion."""

    def test_numbers(self):
        assert coerce_amount(10) == 10.0
        assert coerce_amount(2.5) == 2.5

    def test_formatted_text(self):
        """Test thousands separators and currency symbols."""
        assert coerce_amount("1,234.50") == 1234.5
        assert coerce_amount("₪ 500") == 500.0
        assert coerce_amount(" -20 ") == -20.0

    def test_invalid_cells_are_zero(self):
        """Test that blanks and placeholders become 0."""
        assert coerce_amount(None) == 0.0
        assert coerce_amount("") == 0.0
        assert coerce_amount("n/a") == 0.0
        assert coerce_amount("-") == 0.0
        assert coerce_amount(True) == 0.0
        assert coerce_amount(datetime(2024, 1, 1)) == 0.0
        assert coerce_amount(float("nan")) == 0.0


class TestCoerceLabel:
    """Tests for label coercion."""

    def test_strips_text(self):
        assert coerce_label("  שכר דירה ") == "שכר דירה"

    def test_blank_is_none(self):
        assert coerce_label(None) is None
        assert coerce_label("   ") is None
        assert is_blank("  ")
        assert not is_blank(0)

    def test_integer_floats(self):
        assert coerce_label(3.0) == "3"
        assert coerce_label(2.5) == "2.5"


class TestCoerceMonth:
    """Tests for month decoding."""

    def test_date_cells(self):
        assert coerce_month(datetime(2024, 3, 1, 12)) == date(2024, 3, 1)
        assert coerce_month(date(2024, 3, 1)) == date(2024, 3, 1)

    def test_serials(self):
        """Test numeric and numeric-text Excel serials."""
        assert coerce_month(44562) == date(2022, 1, 1)
        assert coerce_month("44593") == date(2022, 2, 1)

    def test_serial_outside_range_is_not_a_date(self):
        assert coerce_month(2024) is None
        assert coerce_month(70000) is None

    def test_serial_range_can_be_disabled(self):
        assert serial_to_date(2, serial_range=None) is not None

    def test_mac_epoch(self):
        """Test that the workbook epoch is honoured."""
        assert serial_to_date(43101, epoch=CALENDAR_MAC_1904) == date(2022, 1, 2)

    def test_date_strings(self):
        """Test generic parsing; a missing day means the first."""
        assert coerce_month("2024-03-15") == date(2024, 3, 15)
        assert coerce_month("Jan 2024") == date(2024, 1, 1)

    def test_unparseable(self):
        assert coerce_month("הערות") is None
        assert coerce_month(None) is None
        assert coerce_month(True) is None
