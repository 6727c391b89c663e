"""Tests for the melt & fill-down engine."""

from datetime import date, datetime

from finsheet.config import FinanceSheetSettings
from finsheet.config.settings import DEFAULT_STATIC_LABELS
from finsheet.ingestion import FillDownState, melt_block, melt_row, parse_finance_grid
from finsheet.models import CategoryLabel, MonthColumn, RawGrid


JAN = date(2024, 1, 1)
FEB = date(2024, 2, 1)
LABEL_COLUMNS = (0, 1, 2)
MONTHS = [MonthColumn(column=3, month=JAN), MonthColumn(column=4, month=FEB)]


class TestFillDownState:
    """Tests for the fill-down accumulator."""

    def test_blank_levels_are_inherited(self):
        state = FillDownState("A", "X", "item1").advance(None, None, "item2")
        assert state == FillDownState("A", "X", "item2")

    def test_category_heading_ends_line_item(self):
        """Test that a row naming only a category starts a new group."""
        state = FillDownState("A", "X", "item1").advance("B", None, None)
        assert state == FillDownState("B", "X", None)

    def test_advance_does_not_mutate(self):
        state = FillDownState("A", "X", "item1")
        state.advance("B", "Y", "item2")
        assert state == FillDownState("A", "X", "item1")


class TestMeltBlock:
    """Tests for melt_block."""

    def test_fill_down_labels(self):
        """Test the fill-down example: levels stick until redefined."""
        rows = [
            ["A", "X", "item1", 10],
            [None, None, "item2", 20],
            ["B", None, "item3", 30],
        ]
        result = melt_block(rows, LABEL_COLUMNS, [MonthColumn(column=3, month=JAN)])

        assert [e.label for e in result.entries] == [
            CategoryLabel(main_category="A", sub_category="X", line_item="item1"),
            CategoryLabel(main_category="A", sub_category="X", line_item="item2"),
            CategoryLabel(main_category="B", sub_category="X", line_item="item3"),
        ]
        assert [e.amount for e in result.entries] == [10, 20, 30]

    def test_one_entry_per_month_column(self):
        """Test that blank and invalid amounts are kept as zero."""
        rows = [["A", "X", "item1", None, "abc"]]
        result = melt_block(rows, LABEL_COLUMNS, MONTHS)

        assert [(e.month, e.amount) for e in result.entries] == [(JAN, 0.0), (FEB, 0.0)]

    def test_category_heading_row_has_no_entries(self):
        """Test that a pure category row only updates the state."""
        rows = [
            ["A", "X", None, None, None],
            [None, None, "item1", 1, 2],
        ]
        result = melt_block(rows, LABEL_COLUMNS, MONTHS)

        assert len(result.entries) == 2
        assert result.item_rows == 1
        assert result.entries[0].label.main_category == "A"

    def test_blank_rows_are_skipped(self):
        rows = [
            ["A", "X", "item1", 1, 2],
            [None, None, None, None, None],
            [],
            [None, None, "item2", 3, 4],
        ]
        result = melt_block(rows, LABEL_COLUMNS, MONTHS)
        assert [e.line_item for e in result.entries] == ["item1", "item1", "item2", "item2"]
        assert result.rows_read == 4

    def test_schema_first_observation_wins(self):
        """Test that a repeated line item keeps its first hierarchy."""
        rows = [
            ["A", "X", "shared", 1, 1],
            ["B", "Y", "shared", 2, 2],
            [None, None, "other", 3, 3],
        ]
        result = melt_block(rows, LABEL_COLUMNS, MONTHS)

        assert [(s.line_item, s.main_category, s.sub_category) for s in result.schema_entries] == [
            ("shared", "A", "X"),
            ("other", "B", "Y"),
        ]
        assert len(result.entries) == 6

    def test_melt_row_returns_label(self):
        state, label, entries = melt_row(FillDownState(), ["A", "X", "item1", 5, 6], LABEL_COLUMNS, MONTHS)
        assert label.line_item == "item1"
        assert state.line_item == "item1"
        assert len(entries) == 2


class TestParseFinanceGrid:
    """Tests for parsing a whole finance sheet."""

    def _grid(self) -> RawGrid:
        return RawGrid(rows=[
            ["budget"],
            [*DEFAULT_STATIC_LABELS, datetime(2024, 1, 1), datetime(2024, 2, 1)],
            ["דיור", "שכירות", "שכר דירה", 4000, 4000],
            [None, None, "ארנונה", 500, None],
            ["הכנסות", "משכורת", "משכורת נטו", 10000, 12000],
            ["סיכום", None, "סה\"כ", 1, 1],
        ])

    def _settings(self) -> FinanceSheetSettings:
        return FinanceSheetSettings(
            expenses_start=0,
            expenses_end=2,
            income_start=2,
            income_end=3,
        )

    def test_blocks_follow_row_offsets(self):
        """Test that blocks are fixed offsets below the header."""
        sheet = parse_finance_grid(self._grid(), self._settings())

        assert sheet.month_count == 2
        assert {e.line_item for e in sheet.expenses.entries} == {"שכר דירה", "ארנונה"}
        assert {e.line_item for e in sheet.income.entries} == {"משכורת נטו"}
        assert len(sheet.expenses.entries) == 4
        assert len(sheet.income.entries) == 2

    def test_missing_header_is_an_empty_sheet(self):
        """Test that an unrecognized layout yields no data rather than an error."""
        sheet = parse_finance_grid(RawGrid(rows=[["nothing", "here"]]), self._settings())

        assert sheet.is_empty
        assert sheet.month_count == 0
        assert sheet.expenses.entries == []
        assert sheet.income.entries == []

    def test_parse_is_idempotent(self):
        grid = self._grid()
        assert parse_finance_grid(grid, self._settings()) == parse_finance_grid(grid, self._settings())
