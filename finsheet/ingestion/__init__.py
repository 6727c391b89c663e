"""Sheet interpretation: header location, melting and net worth decoding."""

from finsheet.ingestion.cells import (
    coerce_amount,
    coerce_label,
    coerce_month,
    is_blank,
    serial_to_date,
)
from finsheet.ingestion.errors import HeaderNotFoundError, IngestionError
from finsheet.ingestion.header import locate_header
from finsheet.ingestion.melt import (
    FillDownState,
    melt_block,
    melt_row,
    parse_finance_grid,
)
from finsheet.ingestion.net_worth import (
    decode_net_worth,
    extract_low_risk_holdings,
    low_risk_holdings,
)

__all__ = [
    "coerce_amount",
    "coerce_label",
    "coerce_month",
    "is_blank",
    "serial_to_date",
    "HeaderNotFoundError",
    "IngestionError",
    "locate_header",
    "FillDownState",
    "melt_block",
    "melt_row",
    "parse_finance_grid",
    "decode_net_worth",
    "extract_low_risk_holdings",
    "low_risk_holdings",
]
