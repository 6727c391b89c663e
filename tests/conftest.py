"""
Shared fixtures.

Workbooks are built in memory with openpyxl and handed around as bytes,
exactly as an upload would arrive. No disk or network I/O.
"""

from datetime import datetime
from io import BytesIO

import pytest
from openpyxl import Workbook

from finsheet.audit import AuditLogger
from finsheet.config import (
    FinanceSheetSettings,
    FISettings,
    NetWorthSheetSettings,
    ProjectionSettings,
)
from finsheet.config.settings import DEFAULT_NET_WORTH_COLUMNS, DEFAULT_STATIC_LABELS
from finsheet.orchestrator import FinancePipeline
from finsheet.services.storage import InMemoryAuditStorage
from finsheet.services.workbook import WorkbookReader


NET_WORTH_SHEET = "מעקב שווי נקי"


def build_workbook(sheets: dict[str, list[list]]) -> bytes:
    """An .xlsx file with one sheet per entry, rows appended in order."""
    workbook = Workbook()
    workbook.remove(workbook.active)
    for title, rows in sheets.items():
        worksheet = workbook.create_sheet(title)
        for row in rows:
            worksheet.append(row)

    buffer = BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()


def net_worth_sheet_row(month, **buckets) -> list:
    """A row of the net worth sheet with values at their configured columns."""
    row = [None] * (max(DEFAULT_NET_WORTH_COLUMNS.values()) + 1)
    row[DEFAULT_NET_WORTH_COLUMNS["month"]] = month
    for name, value in buckets.items():
        row[DEFAULT_NET_WORTH_COLUMNS[name]] = value
    return row


# Header at row 2; expenses are data rows 0-3, income rows 4-5
FINANCE_ROWS = [
    ["תקציב משפחתי 2024"],
    ["עודכן לאחרונה", "מרץ"],
    [*DEFAULT_STATIC_LABELS, datetime(2024, 1, 1), datetime(2024, 2, 1), datetime(2024, 3, 1)],
    ["דיור", "שכירות", "שכר דירה", 4000, 4000, 4000],
    [None, None, "ארנונה", 500, None, 500],
    ["מזון", "סופר", None, None, None, None],
    [None, None, "קניות", 1500, "n/a", 1700],
    ["הכנסות", "משכורת", "משכורת נטו", 10000, 10000, 10500],
    [None, None, "בונוס", None, 2000, None],
    ["סיכום", None, "סה\"כ", 99999, 99999, 99999],
]

# Header at row 5; rows deliberately out of month order
NET_WORTH_ROWS = [
    ["מעקב שווי נקי"],
    ["כל הסכומים בש\"ח"],
    ["-"],
    ["-"],
    ["-"],
    ["חודש", "עו\"ש", "קרן כספית", "אג\"ח", "מניות"],
    net_worth_sheet_row(
        datetime(2024, 2, 1),
        cash=12000, mmf=20000, stocks=52000, pension=101000, mortgage=4900,
    ),
    net_worth_sheet_row(
        datetime(2024, 1, 1),
        cash=10000, mmf=20000, stocks=50000, pension=100000, mortgage=-5000,
    ),
    ["הערות", 1, 2, 3],
    net_worth_sheet_row(
        45352,  # 2024-03-01 as an Excel serial
        cash=15000, stocks=55000, pension=102000, mortgage=4800, loans=-3000,
    ),
]


@pytest.fixture
def make_workbook():
    """Factory for in-memory workbook bytes."""
    return build_workbook


@pytest.fixture
def finance_settings() -> FinanceSheetSettings:
    return FinanceSheetSettings(
        expenses_start=0,
        expenses_end=4,
        income_start=4,
        income_end=6,
    )


@pytest.fixture
def net_worth_settings() -> NetWorthSheetSettings:
    return NetWorthSheetSettings()


@pytest.fixture
def finance_workbook() -> bytes:
    return build_workbook({"תקציב": FINANCE_ROWS})


@pytest.fixture
def net_worth_workbook() -> bytes:
    return build_workbook({
        "Summary": [["Totals live on the tracking sheet"]],
        NET_WORTH_SHEET: NET_WORTH_ROWS,
    })


@pytest.fixture
def audit_storage() -> InMemoryAuditStorage:
    return InMemoryAuditStorage()


@pytest.fixture
def pipeline(finance_settings, net_worth_settings, audit_storage) -> FinancePipeline:
    return FinancePipeline(
        reader=WorkbookReader(max_size_bytes=5 * 1024 * 1024),
        finance_settings=finance_settings,
        net_worth_settings=net_worth_settings,
        projection_settings=ProjectionSettings(),
        fi_settings=FISettings(),
        audit_logger=AuditLogger(audit_storage),
    )
