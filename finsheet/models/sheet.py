"""
Parse-stage Models

Intermediate shapes handed between the workbook reader, the header
locator and the melt engine. A RawGrid is ephemeral: it is consumed
immediately and never persisted.
"""

from datetime import date, datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field
from openpyxl.utils.datetime import CALENDAR_WINDOWS_1900

from finsheet.models.finance import SchemaEntry, TimeSeriesEntry


class RawGrid(BaseModel):
    """
    A worksheet as rows x columns of raw cell values.

    Cells are str, int, float, datetime or None. No semantic
    interpretation has happened yet; rows may have different lengths.
    """
    model_config = ConfigDict(frozen=True)

    rows: list[list[Any]] = Field(default_factory=list)
    sheet_name: str = ""
    epoch: datetime = Field(
        default=CALENDAR_WINDOWS_1900,
        description="Workbook date epoch used to decode numeric date serials"
    )

    def row(self, index: int) -> list[Any]:
        """Row at index, or an empty row past the end of the grid."""
        if 0 <= index < len(self.rows):
            return self.rows[index]
        return []

    @staticmethod
    def cell(row: list[Any], column: int) -> Any:
        """Cell at column, or None when the row is shorter."""
        if 0 <= column < len(row):
            return row[column]
        return None

    @property
    def height(self) -> int:
        return len(self.rows)


class MonthColumn(BaseModel):
    """A column of the finance sheet that holds one month of amounts."""
    model_config = ConfigDict(frozen=True)

    column: int = Field(..., ge=0)
    month: date


class HeaderLocation(BaseModel):
    """Where the header row is and what each column means."""
    model_config = ConfigDict(frozen=True)

    row_index: int = Field(..., ge=0)
    columns: dict[str, int] = Field(
        ...,
        description="Static label -> column index"
    )
    month_columns: list[MonthColumn] = Field(default_factory=list)
    months_from_next_row: bool = Field(
        default=False,
        description="Month dates were read from the row below the header"
    )


class MeltResult(BaseModel):
    """Long-format entries and schema melted from one block of rows."""
    model_config = ConfigDict(frozen=True)

    entries: list[TimeSeriesEntry] = Field(default_factory=list)
    schema_entries: list[SchemaEntry] = Field(default_factory=list)
    rows_read: int = Field(default=0, ge=0)
    item_rows: int = Field(
        default=0,
        ge=0,
        description="Rows that carried a line item and produced entries"
    )


class FinanceSheet(BaseModel):
    """
    Everything parsed from the expenses & income workbook.

    An unparsable sheet (no header) is an empty FinanceSheet, not an error.
    """
    model_config = ConfigDict(frozen=True)

    header: Optional[HeaderLocation] = None
    expenses: MeltResult = Field(default_factory=MeltResult)
    income: MeltResult = Field(default_factory=MeltResult)

    @property
    def month_count(self) -> int:
        return len(self.header.month_columns) if self.header else 0

    @property
    def is_empty(self) -> bool:
        return self.header is None


class FinanceLoadStats(BaseModel):
    """Counts shown to the user after a finance workbook is loaded."""
    model_config = ConfigDict(frozen=True)

    months: int = Field(default=0, ge=0)
    expense_rows: int = Field(default=0, ge=0)
    income_rows: int = Field(default=0, ge=0)
