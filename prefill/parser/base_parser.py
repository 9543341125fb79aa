"""Abstract base class for spreadsheet parsers."""
from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Union

from prefill.schema.models import SourceTable
from prefill.validator.data_validator import DataValidator
from prefill.validator.errors import StructuralCsvError


class TableParser(ABC):
    """Turns raw spreadsheet content into a header-keyed SourceTable."""

    @abstractmethod
    def parse(
        self,
        content: Union[str, bytes],
        delimiter: Optional[str] = None,
    ) -> SourceTable:
        """
        Parse content and return its rows.

        Args:
            content: Raw file content
            delimiter: Column delimiter, for formats that have one

        Returns:
            SourceTable: Headers and header-keyed rows

        Raises:
            CsvParseError: If the content cannot be parsed
            StructuralCsvError: If headers are duplicated
        """

    @staticmethod
    def detect_format(file_path: str) -> str:
        """Detect file format from extension."""
        return file_path.lower().split('.')[-1]

    @staticmethod
    def _clean_headers(raw_headers: List[object]) -> List[str]:
        """Trim header text and reject duplicates."""
        headers = []
        for idx, value in enumerate(raw_headers):
            text = "" if value is None else str(value).strip()
            headers.append(text or f"Column_{idx}")

        duplicates = DataValidator.find_duplicates(headers)
        if duplicates:
            raise StructuralCsvError(
                f"Duplicate column headers: {', '.join(duplicates)}"
            )
        return headers

    @staticmethod
    def _build_row(headers: List[str], cells: List[object]) -> Optional[Dict[str, str]]:
        """Key cells by header; returns None for a blank line."""
        values = ["" if cell is None else str(cell) for cell in cells]
        if not any(value.strip() for value in values):
            return None

        row = {}
        for idx, header in enumerate(headers):
            row[header] = values[idx] if idx < len(values) else ""
        return row
