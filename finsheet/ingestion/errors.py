"""Ingestion exceptions."""

from typing import Sequence


class IngestionError(Exception):
    """Base exception for sheet interpretation errors."""
    pass


class HeaderNotFoundError(IngestionError):
    """No row in the search window carries every static label exactly once."""

    def __init__(self, labels: Sequence[str], search_rows: int):
        self.labels = list(labels)
        self.search_rows = search_rows
        super().__init__(
            f"No header row with {', '.join(self.labels)} in the first {search_rows} rows"
        )
