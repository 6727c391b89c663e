"""Tests for chart-ready reports."""

from datetime import date

from finsheet.analytics import default_month, expense_breakdown, savings_series, savings_summary
from finsheet.models import CategoryLabel, MonthlyAggregate, TimeSeriesEntry


JAN = date(2024, 1, 1)
FEB = date(2024, 2, 1)


def entry(month: date, amount: float, item=None) -> TimeSeriesEntry:
    return TimeSeriesEntry(month=month, amount=amount, label=CategoryLabel(line_item=item))


class TestExpenseBreakdown:
    """Tests for expense_breakdown."""

    def test_per_line_item_in_first_appearance_order(self):
        entries = [
            entry(JAN, 100, "rent"),
            entry(FEB, 999, "rent"),
            entry(JAN, 30, "food"),
            entry(JAN, 20, "rent"),
            entry(JAN, 5),
        ]
        breakdown = expense_breakdown(entries, JAN)
        assert [(c.category, c.amount) for c in breakdown] == [("rent", 120), ("food", 30), ("אחר", 5)]

    def test_month_without_entries(self):
        assert expense_breakdown([entry(JAN, 1, "rent")], FEB) == []


class TestSavings:
    """Tests for savings series and summary."""

    def test_cumulative_series(self):
        aggregates = [
            MonthlyAggregate.from_totals(FEB, 1000, 1500),
            MonthlyAggregate.from_totals(JAN, 1000, 400),
        ]
        points = savings_series(aggregates)
        assert [(p.month, p.savings, p.cumulative) for p in points] == [
            (JAN, 600, 600),
            (FEB, -500, 100),
        ]

    def test_summary(self):
        aggregates = [
            MonthlyAggregate.from_totals(JAN, 1000, 400),
            MonthlyAggregate.from_totals(FEB, 1000, 800),
        ]
        summary = savings_summary(aggregates)
        assert summary.total_cumulative == 800
        assert summary.average_monthly == 400
        assert summary.months == 2

    def test_empty_summary(self):
        summary = savings_summary([])
        assert summary.total_cumulative == 0
        assert summary.months == 0


class TestDefaultMonth:
    """Tests for default_month."""

    def test_latest_month(self):
        aggregates = [MonthlyAggregate.from_totals(m, 1, 1) for m in (FEB, JAN)]
        assert default_month(aggregates) == FEB

    def test_no_aggregates(self):
        assert default_month([]) is None
