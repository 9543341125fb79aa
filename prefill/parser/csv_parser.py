"""CSV file parser with auto-delimiter detection."""
import csv
import logging
from io import StringIO
from typing import Optional, List, Union

from prefill.parser.base_parser import TableParser
from prefill.schema.models import SourceTable
from prefill.validator.errors import CsvParseError

logger = logging.getLogger(__name__)


class CsvParser(TableParser):
    """Parse CSV text into header-keyed rows."""

    # Common delimiters
    DELIMITERS = [',', ';', '|', '\t']

    def parse(
        self,
        content: Union[str, bytes],
        delimiter: Optional[str] = None,
    ) -> SourceTable:
        """
        Parse CSV content; the first row holds the headers.

        Args:
            content: CSV file content (text, or UTF-8 bytes)
            delimiter: Column delimiter. Auto-detected when omitted.

        Returns:
            SourceTable: Headers plus one dict per non-empty record

        Raises:
            CsvParseError: If the content is not decodable or not valid CSV
        """
        text = self._decode(content)
        delimiter = delimiter or self._detect_delimiter(text)

        rows = self._read_csv(text, delimiter)
        if not rows:
            return SourceTable(source_format="csv")

        headers = self._clean_headers(rows[0])
        table = SourceTable(headers=headers, source_format="csv")

        for line_no, cells in enumerate(rows[1:], start=2):
            if len(cells) > len(headers):
                table.errors.append(
                    f"Row {line_no}: expected {len(headers)} fields, saw {len(cells)}"
                )
            row = self._build_row(headers, cells)
            if row is not None:
                table.rows.append(row)

        logger.info(f"Parsed {table.row_count} rows with {len(headers)} columns")
        return table

    @staticmethod
    def _decode(content: Union[str, bytes]) -> str:
        if isinstance(content, bytes):
            try:
                content = content.decode("utf-8")
            except UnicodeDecodeError as e:
                raise CsvParseError(f"Failed to parse CSV file: {e}") from e
        # Strip a UTF-8 byte order mark left by spreadsheet exports
        return content.lstrip("\ufeff")

    def _detect_delimiter(self, content: str) -> str:
        """
        Auto-detect CSV delimiter.

        Returns:
            str: Most likely delimiter
        """
        # Sample the first few lines
        sample = "\n".join(content.splitlines()[:5])

        counts = {}
        for delimiter in self.DELIMITERS:
            counts[delimiter] = sample.count(delimiter)

        best_delimiter = max(counts, key=counts.get)

        # Fallback to comma if no clear winner
        if counts[best_delimiter] == 0:
            return ','

        return best_delimiter

    def _read_csv(self, content: str, delimiter: str) -> List[List[str]]:
        """
        Read CSV content and return rows.

        Args:
            content: CSV content as string
            delimiter: Field delimiter

        Returns:
            List[List[str]]: List of rows, blank lines removed
        """
        try:
            reader = csv.reader(StringIO(content), delimiter=delimiter, strict=True)
            return [row for row in reader if row]
        except csv.Error as e:
            raise CsvParseError(f"Failed to parse CSV file: {e}") from e
