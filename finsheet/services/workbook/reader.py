"""
Workbook Reader using openpyxl

Decodes workbook bytes into a RawGrid: rows x columns of raw cell values.
No semantic interpretation happens here.

This service handles:
1. Opening the workbook from memory (no disk I/O)
2. Picking the requested sheet, falling back to the first one
3. Normalizing cell values to str / int / float / datetime / None
4. Carrying the workbook date epoch so numeric serials can be decoded later
"""

from datetime import date, datetime
from io import BytesIO
from typing import Any, Optional, Union
from zipfile import BadZipFile

import structlog
from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from finsheet.config import get_settings
from finsheet.models.sheet import RawGrid


logger = structlog.get_logger(__name__)


class WorkbookError(Exception):
    """Base exception for workbook reading errors."""
    pass


class SheetNotFoundError(WorkbookError):
    """The workbook contains no worksheets at all."""
    pass


class WorkbookDecodeError(WorkbookError):
    """The bytes are not a readable workbook."""
    pass


class WorkbookTooLargeError(WorkbookError):
    """The workbook exceeds the configured upload size."""

    def __init__(self, size_bytes: int, limit_bytes: int):
        self.size_bytes = size_bytes
        self.limit_bytes = limit_bytes
        super().__init__(
            f"Workbook is {size_bytes} bytes; the limit is {limit_bytes} bytes"
        )


def normalize_cell(value: Any) -> Any:
    """
    Normalize an openpyxl cell value.

    Dates and numbers keep their type; everything else that is not
    empty becomes text.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if isinstance(value, bool):
        return str(value)
    if isinstance(value, (int, float)):
        return value
    return str(value)


class WorkbookReader:
    """
    Reads a single worksheet of an .xlsx workbook into a RawGrid.

    IMPORTANT BOUNDARIES:
    1. This service ONLY decodes cells - it does not look for headers
    2. A missing sheet name is not an error; the first sheet is used
    3. Only a workbook without any worksheet is a hard failure
    """

    def __init__(self, max_size_bytes: Optional[int] = None):
        self._max_size_bytes = max_size_bytes or get_settings().app.max_upload_size_bytes

    def read(self, data: bytes, sheet: Union[str, int] = 0) -> RawGrid:
        """
        Decode one sheet of a workbook.

        Args:
            data: Workbook file contents
            sheet: Sheet name or 0-based index

        Returns:
            The sheet as a RawGrid

        Raises:
            WorkbookTooLargeError: If data exceeds the size limit
            WorkbookDecodeError: If data is not a workbook
            SheetNotFoundError: If the workbook has no worksheets
        """
        if len(data) > self._max_size_bytes:
            raise WorkbookTooLargeError(len(data), self._max_size_bytes)

        try:
            workbook = load_workbook(BytesIO(data), read_only=True, data_only=True)
        except (BadZipFile, InvalidFileException, KeyError, OSError) as e:
            raise WorkbookDecodeError(f"Could not read workbook: {e}") from e

        try:
            worksheets = workbook.worksheets
            if not worksheets:
                raise SheetNotFoundError("Workbook contains no worksheets")

            worksheet = self._select_sheet(workbook, sheet)
            rows = [
                [normalize_cell(value) for value in row]
                for row in worksheet.iter_rows(values_only=True)
            ]
            grid = RawGrid(
                rows=rows,
                sheet_name=worksheet.title,
                epoch=workbook.epoch,
            )
        finally:
            workbook.close()

        logger.debug(
            "workbook_decoded",
            sheet=grid.sheet_name,
            rows=grid.height,
        )
        return grid

    def _select_sheet(self, workbook, sheet: Union[str, int]):
        """Requested sheet, or the first worksheet when it is absent."""
        worksheets = workbook.worksheets

        if isinstance(sheet, int):
            if 0 <= sheet < len(worksheets):
                return worksheets[sheet]
        elif sheet in workbook.sheetnames:
            candidate = workbook[sheet]
            if candidate in worksheets:
                return candidate

        logger.info(
            "sheet_fallback",
            requested=sheet,
            used=worksheets[0].title,
        )
        return worksheets[0]


def read_grid(data: bytes, sheet: Union[str, int] = 0) -> RawGrid:
    """Decode one sheet of a workbook with the default reader."""
    return WorkbookReader().read(data, sheet)
