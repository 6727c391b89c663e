"""
Melt & Fill-Down Engine

Turns the wide expenses & income sheet (one column per month) into
long-format TimeSeriesEntry records, one per (line item, month).

Category cells in these sheets are sparse: a main or sub category is
written once and applies to every row below it until redefined. The
"last seen" labels are carried as an explicit FillDownState threaded
through the rows, so each step is a pure function of (state, row).
"""

from typing import Any, NamedTuple, Optional, Sequence

import structlog

from finsheet.config import FinanceSheetSettings
from finsheet.ingestion.cells import coerce_amount, coerce_label, is_blank
from finsheet.ingestion.errors import HeaderNotFoundError
from finsheet.ingestion.header import locate_header
from finsheet.models.finance import CategoryLabel, SchemaEntry, TimeSeriesEntry
from finsheet.models.sheet import FinanceSheet, MeltResult, MonthColumn, RawGrid


logger = structlog.get_logger(__name__)


class FillDownState(NamedTuple):
    """Last non-blank value seen at each hierarchy level."""
    main_category: Optional[str] = None
    sub_category: Optional[str] = None
    line_item: Optional[str] = None

    def advance(
        self,
        main_category: Optional[str],
        sub_category: Optional[str],
        line_item: Optional[str],
    ) -> 'FillDownState':
        """
        State after a row with the given (possibly blank) static cells.

        A row that names a category but no line item is a category heading:
        it ends the previous line item instead of inheriting it.
        """
        main = main_category if main_category is not None else self.main_category
        sub = sub_category if sub_category is not None else self.sub_category

        if line_item is None and (main_category is not None or sub_category is not None):
            return FillDownState(main, sub, None)

        item = line_item if line_item is not None else self.line_item
        return FillDownState(main, sub, item)

    def label(self) -> CategoryLabel:
        return CategoryLabel(
            main_category=self.main_category,
            sub_category=self.sub_category,
            line_item=self.line_item,
        )


def melt_row(
    state: FillDownState,
    row: list[Any],
    label_columns: tuple[int, int, int],
    month_columns: Sequence[MonthColumn],
) -> tuple[FillDownState, Optional[CategoryLabel], list[TimeSeriesEntry]]:
    """
    One fold step over a data row.

    Returns the next state, the row's label when it is a line item row
    (own or inherited line item), and its entries: one per month column,
    with blank or invalid amounts recorded as 0. A fully blank row is
    skipped without touching the state.
    """
    static = [coerce_label(RawGrid.cell(row, column)) for column in label_columns]
    cells = [RawGrid.cell(row, month.column) for month in month_columns]

    if all(value is None for value in static) and all(is_blank(cell) for cell in cells):
        return state, None, []

    state = state.advance(*static)
    if state.line_item is None:
        return state, None, []

    label = state.label()
    entries = [
        TimeSeriesEntry(month=month.month, amount=coerce_amount(cell), label=label)
        for month, cell in zip(month_columns, cells)
    ]
    return state, label, entries


def melt_block(
    rows: Sequence[list[Any]],
    label_columns: tuple[int, int, int],
    month_columns: Sequence[MonthColumn],
) -> MeltResult:
    """
    Melt a contiguous block of rows into entries and a schema.

    The schema keeps the first (main, sub) observed for each line item.
    """
    state = FillDownState()
    entries: list[TimeSeriesEntry] = []
    schema: dict[str, SchemaEntry] = {}
    item_rows = 0

    for row in rows:
        state, label, row_entries = melt_row(state, row, label_columns, month_columns)
        if label is None:
            continue

        item_rows += 1
        entries.extend(row_entries)
        if label.line_item not in schema:
            schema[label.line_item] = SchemaEntry(
                line_item=label.line_item,
                main_category=label.main_category,
                sub_category=label.sub_category,
            )

    return MeltResult(
        entries=entries,
        schema_entries=list(schema.values()),
        rows_read=len(rows),
        item_rows=item_rows,
    )


def parse_finance_grid(
    grid: RawGrid,
    settings: Optional[FinanceSheetSettings] = None,
) -> FinanceSheet:
    """
    Parse the expenses & income sheet.

    The expenses and income blocks are fixed row offsets below the
    header, taken from settings; they are not detected from content.
    A sheet without a recognizable header parses to an empty result.
    """
    settings = settings or FinanceSheetSettings()
    labels = settings.static_labels

    try:
        header = locate_header(
            grid,
            labels,
            search_rows=settings.header_search_rows,
            serial_range=(settings.serial_min, settings.serial_max),
        )
    except HeaderNotFoundError as e:
        logger.warning(
            "header_not_found",
            sheet=grid.sheet_name,
            labels=e.labels,
            search_rows=e.search_rows,
        )
        return FinanceSheet()

    label_columns = tuple(header.columns[label] for label in labels)
    data_rows = grid.rows[header.row_index + 1:]

    expenses_start, expenses_end = settings.expenses_block
    income_start, income_end = settings.income_block

    sheet = FinanceSheet(
        header=header,
        expenses=melt_block(data_rows[expenses_start:expenses_end], label_columns, header.month_columns),
        income=melt_block(data_rows[income_start:income_end], label_columns, header.month_columns),
    )
    logger.info(
        "finance_sheet_parsed",
        sheet=grid.sheet_name,
        months=sheet.month_count,
        expense_entries=len(sheet.expenses.entries),
        income_entries=len(sheet.income.entries),
    )
    return sheet
