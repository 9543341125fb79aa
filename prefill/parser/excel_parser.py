"""Excel workbook parser."""
import logging
from io import BytesIO
from typing import Optional, Union

from openpyxl import load_workbook

from prefill.parser.base_parser import TableParser
from prefill.schema.models import SourceTable
from prefill.validator.errors import CsvParseError

logger = logging.getLogger(__name__)


class ExcelParser(TableParser):
    """Parse one sheet of an .xlsx workbook into header-keyed rows."""

    def __init__(self, sheet_name: Optional[str] = None):
        """
        Initialize parser.

        Args:
            sheet_name: Sheet to read. Defaults to the first sheet.
        """
        self.sheet_name = sheet_name

    def parse(
        self,
        content: Union[str, bytes],
        delimiter: Optional[str] = None,
    ) -> SourceTable:
        """
        Parse Excel content.

        Args:
            content: Workbook content (as bytes)
            delimiter: Ignored; sheets have no delimiter

        Returns:
            SourceTable: Headers from the first row, one dict per data row

        Raises:
            CsvParseError: If the workbook cannot be opened or the sheet is missing
        """
        if isinstance(content, str):
            raise CsvParseError("Excel content must be bytes")

        try:
            wb = load_workbook(BytesIO(content), read_only=True, data_only=True)
        except Exception as e:
            raise CsvParseError(f"Failed to parse Excel file: {e}") from e

        if self.sheet_name is not None and self.sheet_name not in wb.sheetnames:
            wb.close()
            raise CsvParseError(f"Sheet not found: {self.sheet_name}")

        ws = wb[self.sheet_name] if self.sheet_name else wb[wb.sheetnames[0]]
        try:
            rows = ws.iter_rows(values_only=True)

            first = next(rows, None)
            if first is None:
                return SourceTable(source_format="excel")

            headers = self._clean_headers(list(first))
            table = SourceTable(headers=headers, source_format="excel")

            for cells in rows:
                row = self._build_row(headers, [self._cell_text(c) for c in cells])
                if row is not None:
                    table.rows.append(row)
        finally:
            wb.close()

        logger.info(f"Parsed sheet '{ws.title}': {table.row_count} rows")
        return table

    @staticmethod
    def _cell_text(value: object) -> str:
        """Render a cell the way it reads in the sheet."""
        if value is None:
            return ""
        if isinstance(value, float) and value.is_integer():
            return str(int(value))
        return str(value)
