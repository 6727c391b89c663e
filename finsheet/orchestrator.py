"""
Main Orchestrator for finsheet

This module ties together all the components and defines the
end-to-end flows for:
1. Finance workbook load (bytes -> grid -> header -> melt -> entries)
2. Net worth workbook load (bytes -> grid -> positional decode -> rows)
3. Manual edits (month re-ingestion, net worth row replacement)
4. Snapshot export / import

DESIGN DECISION: The pipeline owns the raw collections and rebuilds
every derived collection from scratch after each mutation, before
anything can be read:

    expenses, income  -> monthly aggregates
    net worth rows    -> projection -> combined series
    aggregates + rows -> FI progress

Nothing is updated incrementally, so derived data can never be stale.
Every step is audited.
"""

from datetime import date
from typing import Any, Iterable, Mapping, Optional, Sequence, Union
from uuid import UUID

from finsheet.analytics import (
    allocation_by_category,
    build_fi_progress,
    build_monthly_aggregates,
    combine_holdings,
    combine_net_worth_series,
    default_month,
    expense_breakdown,
    normalize_holding,
    project_net_worth,
    savings_series,
    savings_summary,
)
from finsheet.audit import AuditLogger, create_correlation_id
from finsheet.config import (
    FinanceSheetSettings,
    FISettings,
    NetWorthSheetSettings,
    ProjectionSettings,
    get_settings,
)
from finsheet.editing import (
    apply_month_edit,
    month_edit_view,
    replace_net_worth_row,
    revalidate_net_worth_row,
)
from finsheet.ingestion import (
    decode_net_worth,
    extract_low_risk_holdings,
    low_risk_holdings,
    parse_finance_grid,
)
from finsheet.models import (
    CategoryAllocation,
    CategoryAmount,
    FinanceLoadStats,
    FinanceSnapshot,
    FIProgressRow,
    MonthlyAggregate,
    NetWorthRow,
    PortfolioHolding,
    ProjectedNetWorthRow,
    SavingsPoint,
    SavingsSummary,
    SchemaEntry,
    SnapshotError,
    TimeSeriesEntry,
)
from finsheet.services.storage import AuditStorageInterface, InMemoryAuditStorage
from finsheet.services.workbook import WorkbookError, WorkbookReader


def _extend_schema(
    schema: Sequence[SchemaEntry],
    entries: Iterable[TimeSeriesEntry],
) -> list[SchemaEntry]:
    """Schema plus any line items first seen in `entries`; first observation wins."""
    extended = list(schema)
    known = {item.line_item for item in schema}
    for entry in entries:
        if entry.line_item and entry.line_item not in known:
            known.add(entry.line_item)
            extended.append(SchemaEntry(
                line_item=entry.line_item,
                main_category=entry.label.main_category,
                sub_category=entry.label.sub_category,
            ))
    return extended


class FinancePipeline:
    """
    Holds the imported finance data and everything derived from it.

    Flow:
    1. Load → Decode a workbook (or import a snapshot) into raw collections
    2. Edit → Replace a month of entries or a net worth row
    3. Recompute → Rebuild aggregates, projection and FI progress
    4. Read → Read-only properties and chart-ready reports

    Workbook errors are audited and re-raised; the state for that
    input stays as it was.
    """

    def __init__(
        self,
        reader: Optional[WorkbookReader] = None,
        finance_settings: Optional[FinanceSheetSettings] = None,
        net_worth_settings: Optional[NetWorthSheetSettings] = None,
        projection_settings: Optional[ProjectionSettings] = None,
        fi_settings: Optional[FISettings] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        settings = get_settings()
        self._reader = reader or WorkbookReader()
        self._finance_settings = finance_settings or settings.finance_sheet
        self._net_worth_settings = net_worth_settings or settings.net_worth_sheet
        self._projection_settings = projection_settings or settings.projection
        self._fi_settings = fi_settings or settings.fi
        self._audit_logger = audit_logger

        # Raw collections
        self._expenses: list[TimeSeriesEntry] = []
        self._income: list[TimeSeriesEntry] = []
        self._expense_schema: list[SchemaEntry] = []
        self._income_schema: list[SchemaEntry] = []
        self._net_worth: list[NetWorthRow] = []
        self._low_risk: list[PortfolioHolding] = []
        self._holdings: list[PortfolioHolding] = []
        self._finance_stats = FinanceLoadStats()
        self._finance_file_name: Optional[str] = None
        self._net_worth_file_name: Optional[str] = None

        # Derived collections
        self._aggregates: list[MonthlyAggregate] = []
        self._projection: list[ProjectedNetWorthRow] = []
        self._net_worth_series: list[ProjectedNetWorthRow] = []
        self._fi_progress: list[FIProgressRow] = []

    # =========================================================================
    # LOADING
    # =========================================================================

    def load_finance_workbook(
        self,
        data: bytes,
        file_name: str = "",
        correlation_id: Optional[UUID] = None,
    ) -> FinanceLoadStats:
        """
        Load the expenses & income workbook, replacing the current entries.

        A sheet without a recognizable header loads as empty data.

        Raises:
            WorkbookError: If the bytes cannot be read as a workbook
        """
        correlation_id = correlation_id or create_correlation_id()
        grid = self._read_workbook("finance", data, file_name, self._finance_settings.sheet, correlation_id)

        sheet = parse_finance_grid(grid, self._finance_settings)
        if sheet.is_empty and self._audit_logger:
            self._audit_logger.log_header_not_found(
                file_name=file_name,
                labels=self._finance_settings.static_labels,
                search_rows=self._finance_settings.header_search_rows,
                correlation_id=correlation_id,
            )

        self._expenses = list(sheet.expenses.entries)
        self._income = list(sheet.income.entries)
        self._expense_schema = list(sheet.expenses.schema_entries)
        self._income_schema = list(sheet.income.schema_entries)
        self._finance_file_name = file_name or None
        self._finance_stats = FinanceLoadStats(
            months=sheet.month_count,
            expense_rows=len(self._expenses),
            income_rows=len(self._income),
        )

        if self._audit_logger:
            self._audit_logger.log_finance_parsed(
                file_name=file_name,
                months=self._finance_stats.months,
                expense_rows=self._finance_stats.expense_rows,
                income_rows=self._finance_stats.income_rows,
                correlation_id=correlation_id,
            )

        self._recompute(correlation_id)
        return self._finance_stats

    def load_net_worth_workbook(
        self,
        data: bytes,
        file_name: str = "",
        correlation_id: Optional[UUID] = None,
    ) -> list[NetWorthRow]:
        """
        Load the net worth tracking workbook, replacing the current rows.

        Raises:
            WorkbookError: If the bytes cannot be read as a workbook
        """
        correlation_id = correlation_id or create_correlation_id()
        grid = self._read_workbook(
            "net_worth", data, file_name, self._net_worth_settings.sheet_name, correlation_id
        )

        rows, dropped = decode_net_worth(grid, self._net_worth_settings)
        self._net_worth = rows
        self._low_risk = extract_low_risk_holdings(grid, self._net_worth_settings)
        self._net_worth_file_name = file_name or None

        if self._audit_logger:
            self._audit_logger.log_net_worth_parsed(
                file_name=file_name,
                rows=len(rows),
                dropped_rows=dropped,
                low_risk_items=len(self._low_risk),
                correlation_id=correlation_id,
            )

        self._recompute(correlation_id)
        return self.net_worth

    def _read_workbook(
        self,
        source: str,
        data: bytes,
        file_name: str,
        sheet: Union[int, str],
        correlation_id: UUID,
    ):
        try:
            grid = self._reader.read(data, sheet)
        except WorkbookError as e:
            if self._audit_logger:
                self._audit_logger.log_workbook_rejected(
                    source=source,
                    file_name=file_name,
                    error=e,
                    correlation_id=correlation_id,
                )
            raise

        if self._audit_logger:
            self._audit_logger.log_workbook_loaded(
                source=source,
                file_name=file_name,
                size_bytes=len(data),
                sheet_name=grid.sheet_name,
                correlation_id=correlation_id,
            )
        return grid

    def set_portfolio_holdings(
        self,
        records: Iterable[Mapping[str, Any]],
        category_map: Optional[Mapping[str, str]] = None,
    ) -> list[PortfolioHolding]:
        """Replace the portfolio holdings; records without a ticker are skipped."""
        holdings = (normalize_holding(record, category_map) for record in records)
        self._holdings = [h for h in holdings if h is not None]
        return list(self._holdings)

    # =========================================================================
    # EDITING
    # =========================================================================

    def month_view(self, month: date) -> tuple[list[TimeSeriesEntry], list[TimeSeriesEntry]]:
        """(expenses, income) of one month, padded with every known line item."""
        return (
            month_edit_view(self._expenses, self._expense_schema, month),
            month_edit_view(self._income, self._income_schema, month),
        )

    def apply_month_edit(
        self,
        month: date,
        expenses: Sequence[TimeSeriesEntry],
        income: Sequence[TimeSeriesEntry],
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Replace every entry of `month` on both sides and recompute."""
        correlation_id = correlation_id or create_correlation_id()

        self._expenses = apply_month_edit(self._expenses, month, expenses)
        self._income = apply_month_edit(self._income, month, income)
        self._expense_schema = _extend_schema(self._expense_schema, expenses)
        self._income_schema = _extend_schema(self._income_schema, income)

        if self._audit_logger:
            self._audit_logger.log_month_edited(
                month=month.isoformat(),
                expense_entries=len(expenses),
                income_entries=len(income),
                correlation_id=correlation_id,
            )

        self._recompute(correlation_id)

    def update_net_worth_row(
        self,
        edited: NetWorthRow,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Replace (or add) the net worth row of `edited.month` and recompute."""
        correlation_id = correlation_id or create_correlation_id()
        edited = revalidate_net_worth_row(edited)

        self._net_worth = replace_net_worth_row(self._net_worth, edited)
        if self._net_worth[-1].month == edited.month:
            self._low_risk = low_risk_holdings(edited)

        if self._audit_logger:
            self._audit_logger.log_net_worth_edited(
                month=edited.month.isoformat(),
                net_worth=edited.net_worth,
                correlation_id=correlation_id,
            )

        self._recompute(correlation_id)

    # =========================================================================
    # SNAPSHOTS
    # =========================================================================

    def export_snapshot(self, correlation_id: Optional[UUID] = None) -> FinanceSnapshot:
        """The raw collections as a snapshot document."""
        snapshot = FinanceSnapshot(
            finance_file_name=self._finance_file_name,
            net_worth_file_name=self._net_worth_file_name,
            expenses=self._expenses,
            income=self._income,
            expense_schema=self._expense_schema,
            income_schema=self._income_schema,
            net_worth=self._net_worth,
        )

        if self._audit_logger:
            self._audit_logger.log_snapshot_exported(
                version=snapshot.version,
                counts=self._counts(),
                correlation_id=correlation_id or create_correlation_id(),
            )
        return snapshot

    def import_snapshot(
        self,
        snapshot: Union[FinanceSnapshot, str, bytes],
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """
        Replace all raw collections with a snapshot's and recompute.

        Raises:
            SnapshotError: If a serialized snapshot is malformed or of an
                unsupported version; the state is left unchanged
        """
        correlation_id = correlation_id or create_correlation_id()
        if not isinstance(snapshot, FinanceSnapshot):
            try:
                snapshot = FinanceSnapshot.from_json(snapshot)
            except SnapshotError as e:
                if self._audit_logger:
                    self._audit_logger.log_error(
                        error_type=type(e).__name__,
                        error_message=str(e),
                        details={"operation": "import_snapshot"},
                        correlation_id=correlation_id,
                    )
                raise

        self._expenses = list(snapshot.expenses)
        self._income = list(snapshot.income)
        self._expense_schema = list(snapshot.expense_schema)
        self._income_schema = list(snapshot.income_schema)
        self._net_worth = sorted(snapshot.net_worth, key=lambda r: r.month)
        self._low_risk = low_risk_holdings(self._net_worth[-1]) if self._net_worth else []
        self._finance_file_name = snapshot.finance_file_name
        self._net_worth_file_name = snapshot.net_worth_file_name
        self._finance_stats = FinanceLoadStats(
            months=len({entry.month for entry in self._expenses + self._income}),
            expense_rows=len(self._expenses),
            income_rows=len(self._income),
        )

        if self._audit_logger:
            self._audit_logger.log_snapshot_imported(
                version=snapshot.version,
                counts=self._counts(),
                correlation_id=correlation_id,
            )

        self._recompute(correlation_id)

    # =========================================================================
    # DERIVED DATA
    # =========================================================================

    def _recompute(self, correlation_id: Optional[UUID] = None) -> None:
        """Rebuild every derived collection from the raw ones."""
        self._aggregates = build_monthly_aggregates(self._expenses, self._income)
        self._projection = project_net_worth(self._net_worth, self._projection_settings)
        self._net_worth_series = combine_net_worth_series(self._net_worth, self._projection)
        self._fi_progress = build_fi_progress(self._net_worth, self._aggregates, self._fi_settings)

        if self._audit_logger:
            self._audit_logger.log_derived_recomputed(
                counts={
                    "aggregates": len(self._aggregates),
                    "projected": len(self._projection),
                    "fi_progress": len(self._fi_progress),
                },
                correlation_id=correlation_id,
            )

    def _counts(self) -> dict[str, int]:
        return {
            "expenses": len(self._expenses),
            "income": len(self._income),
            "net_worth": len(self._net_worth),
        }

    @property
    def expenses(self) -> list[TimeSeriesEntry]:
        return list(self._expenses)

    @property
    def income(self) -> list[TimeSeriesEntry]:
        return list(self._income)

    @property
    def expense_schema(self) -> list[SchemaEntry]:
        return list(self._expense_schema)

    @property
    def income_schema(self) -> list[SchemaEntry]:
        return list(self._income_schema)

    @property
    def net_worth(self) -> list[NetWorthRow]:
        return list(self._net_worth)

    @property
    def low_risk_holdings(self) -> list[PortfolioHolding]:
        return list(self._low_risk)

    @property
    def holdings(self) -> list[PortfolioHolding]:
        return list(self._holdings)

    @property
    def monthly_aggregates(self) -> list[MonthlyAggregate]:
        return list(self._aggregates)

    @property
    def projection(self) -> list[ProjectedNetWorthRow]:
        return list(self._projection)

    @property
    def net_worth_series(self) -> list[ProjectedNetWorthRow]:
        """Actual rows followed by projected ones."""
        return list(self._net_worth_series)

    @property
    def fi_progress(self) -> list[FIProgressRow]:
        return list(self._fi_progress)

    @property
    def finance_stats(self) -> FinanceLoadStats:
        return self._finance_stats

    @property
    def finance_file_name(self) -> Optional[str]:
        return self._finance_file_name

    @property
    def net_worth_file_name(self) -> Optional[str]:
        return self._net_worth_file_name

    # =========================================================================
    # REPORTS
    # =========================================================================

    def default_month(self) -> Optional[date]:
        return default_month(self._aggregates)

    def expense_breakdown(self, month: Optional[date] = None) -> list[CategoryAmount]:
        """Expenses per line item for `month` (default: latest month)."""
        month = month or self.default_month()
        if month is None:
            return []
        return expense_breakdown(self._expenses, month)

    def savings_series(self) -> list[SavingsPoint]:
        return savings_series(self._aggregates)

    def savings_summary(self) -> SavingsSummary:
        return savings_summary(self._aggregates)

    def allocation(self, include_low_risk: bool = True) -> list[CategoryAllocation]:
        """Portfolio allocation by category, optionally with cash and deposits."""
        return allocation_by_category(
            combine_holdings(self._holdings, self._low_risk, include_low_risk)
        )


def create_pipeline(
    storage: Optional[AuditStorageInterface] = None,
    use_storage: bool = True,
) -> FinancePipeline:
    """
    Factory function to create a pipeline with audit logging.

    Args:
        storage: Audit storage backend; an in-memory one by default
        use_storage: Set to False for local-only audit logging

    Returns:
        A FinancePipeline with empty collections
    """
    if use_storage:
        audit_logger = AuditLogger(storage or InMemoryAuditStorage())
    else:
        audit_logger = AuditLogger()  # Local-only logging

    settings = get_settings()
    return FinancePipeline(
        reader=WorkbookReader(settings.app.max_upload_size_bytes),
        audit_logger=audit_logger,
    )
