"""Tests for month and net worth edits."""

from datetime import date

import pytest

from finsheet.editing import (
    apply_month_edit,
    edit_net_worth_row,
    month_edit_view,
    replace_net_worth_row,
)
from finsheet.models import CategoryLabel, NetWorthRow, SchemaEntry, TimeSeriesEntry


JAN = date(2024, 1, 1)
FEB = date(2024, 2, 1)
MAR = date(2024, 3, 1)


def entry(month: date, amount: float, item: str) -> TimeSeriesEntry:
    return TimeSeriesEntry(month=month, amount=amount, label=CategoryLabel(main_category="M", line_item=item))


SCHEMA = [
    SchemaEntry(line_item="rent", main_category="housing", sub_category="home"),
    SchemaEntry(line_item="food", main_category="living"),
    SchemaEntry(line_item="gym", main_category="living", sub_category="sport"),
]


class TestMonthEditView:
    """Tests for month_edit_view."""

    def test_missing_schema_items_are_zero_filled(self):
        """Test that every known line item appears, even when absent this month."""
        entries = [entry(JAN, 4000, "rent"), entry(FEB, 4100, "rent"), entry(FEB, 900, "food")]
        view = month_edit_view(entries, SCHEMA, JAN)

        assert [(e.line_item, e.amount) for e in view] == [("rent", 4000), ("food", 0), ("gym", 0)]
        assert all(e.month == JAN for e in view)
        assert view[2].label == CategoryLabel(main_category="living", sub_category="sport", line_item="gym")

    def test_existing_entries_keep_their_labels(self):
        view = month_edit_view([entry(FEB, 900, "food")], SCHEMA, FEB)
        assert view[0].label.main_category == "M"

    def test_empty_schema(self):
        assert month_edit_view([entry(JAN, 1, "x")], [], FEB) == []


class TestApplyMonthEdit:
    """Tests for apply_month_edit."""

    def test_replaces_only_the_edited_month(self):
        entries = [entry(JAN, 1, "rent"), entry(FEB, 2, "rent"), entry(FEB, 3, "food"), entry(MAR, 4, "rent")]
        edited = [entry(FEB, 20, "rent"), entry(FEB, 0, "food"), entry(FEB, 50, "gym")]

        result = apply_month_edit(entries, FEB, edited)

        assert [(e.month, e.line_item, e.amount) for e in result] == [
            (JAN, "rent", 1),
            (FEB, "rent", 20),
            (FEB, "food", 0),
            (FEB, "gym", 50),
            (MAR, "rent", 4),
        ]

    def test_edited_entries_are_restamped(self):
        """Test that entries edited under another month land in the edited month."""
        result = apply_month_edit([], MAR, [entry(JAN, 5, "rent")])
        assert result[0].month == MAR

    def test_clearing_a_month(self):
        result = apply_month_edit([entry(JAN, 1, "rent"), entry(FEB, 2, "rent")], FEB, [])
        assert [e.month for e in result] == [JAN]


class TestNetWorthEdits:
    """Tests for net worth row edits."""

    def test_edit_recomputes_totals(self):
        """Test the net worth identity after an edit."""
        row = NetWorthRow(month=JAN, cash=1000, pension=5000, mortgage=2000)
        edited = edit_net_worth_row(row, cash=3000, loans=-500)

        assert edited.loans == 500
        assert edited.net_worth == 3000 + 5000 - 2500
        assert edited.net_worth == edited.liquid_total + edited.non_liquid_total - edited.debt_total
        assert row.cash == 1000

    def test_edit_rejects_unknown_fields(self):
        with pytest.raises(ValueError):
            edit_net_worth_row(NetWorthRow(month=JAN), net_worth=5)

    def test_replace_existing_row(self):
        rows = [NetWorthRow(month=JAN, cash=1), NetWorthRow(month=FEB, cash=2)]
        result = replace_net_worth_row(rows, NetWorthRow(month=JAN, cash=10))
        assert [(r.month, r.cash) for r in result] == [(JAN, 10), (FEB, 2)]

    def test_replace_inserts_new_month_in_order(self):
        rows = [NetWorthRow(month=JAN, cash=1), NetWorthRow(month=MAR, cash=3)]
        result = replace_net_worth_row(rows, NetWorthRow(month=FEB, cash=2))
        assert [r.month for r in result] == [JAN, FEB, MAR]

    def test_replace_rebuilds_copied_row(self):
        """Test that a model_copy edit with negative debt is stored as its magnitude."""
        row = NetWorthRow(month=JAN, cash=10000, mortgage=5000)
        copied = row.model_copy(update={"mortgage": -5000})

        stored = replace_net_worth_row([row], copied)[0]
        assert stored.mortgage == 5000
        assert stored.net_worth == 5000
