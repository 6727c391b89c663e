"""
Portfolio Allocation

Normalizes loosely shaped holding records and groups them by category.
Records come from user-maintained tables, so field names vary in case.
"""

from typing import Any, Iterable, Mapping, Optional, Sequence

from finsheet.ingestion.cells import coerce_amount, coerce_label
from finsheet.models.finance import CategoryAllocation, PortfolioHolding


UNCATEGORIZED = "Uncategorized"


def _field(record: Mapping[str, Any], name: str) -> Any:
    """Value of `name` in either Title or lower case."""
    value = record.get(name.capitalize())
    if value is None:
        value = record.get(name)
    return value


def normalize_holding(
    record: Mapping[str, Any],
    category_map: Optional[Mapping[str, str]] = None,
) -> Optional[PortfolioHolding]:
    """
    A PortfolioHolding from a raw record, or None when it has no ticker.

    The category comes from the record, then from `category_map` by
    ticker, then falls back to "Uncategorized".
    """
    ticker = coerce_label(_field(record, "ticker"))
    if ticker is None:
        return None

    category = (
        coerce_label(_field(record, "category"))
        or (category_map or {}).get(ticker)
        or UNCATEGORIZED
    )
    return PortfolioHolding(
        ticker=ticker,
        name=coerce_label(_field(record, "name")) or ticker,
        qty=coerce_amount(_field(record, "qty")),
        price=coerce_amount(_field(record, "price")),
        value=coerce_amount(_field(record, "value")),
        category=category,
    )


def combine_holdings(
    holdings: Sequence[PortfolioHolding],
    low_risk: Sequence[PortfolioHolding],
    include_low_risk: bool = True,
) -> list[PortfolioHolding]:
    """Portfolio holdings, optionally followed by the low-risk balances."""
    if not include_low_risk:
        return list(holdings)
    return list(holdings) + list(low_risk)


def allocation_by_category(holdings: Iterable[PortfolioHolding]) -> list[CategoryAllocation]:
    """
    Value and percent weight per category, largest first.

    Weights are 0 when the portfolio is worth nothing.
    """
    values: dict[str, float] = {}
    for holding in holdings:
        values[holding.category] = values.get(holding.category, 0.0) + holding.effective_value

    total = sum(values.values())
    allocations = [
        CategoryAllocation(
            category=category,
            value=value,
            weight=value / total * 100 if total else 0.0,
        )
        for category, value in values.items()
    ]
    allocations.sort(key=lambda a: a.value, reverse=True)
    return allocations
