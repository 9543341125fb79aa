"""Factory for creating appropriate parser based on file type."""
from pathlib import Path
from typing import Optional, Union

from prefill.parser.base_parser import TableParser
from prefill.parser.csv_parser import CsvParser
from prefill.parser.excel_parser import ExcelParser
from prefill.schema.models import SourceTable
from prefill.validator.errors import CsvParseError


class ParserFactory:
    """Factory for creating spreadsheet parsers."""

    # Map extensions to parser types
    PARSERS = {
        'csv': 'csv',
        'txt': 'csv',
        'tsv': 'csv',
        'xlsx': 'excel',
        'xlsm': 'excel',
    }

    @staticmethod
    def create_parser(file_path: Union[str, Path]) -> TableParser:
        """
        Create parser based on file extension.

        Args:
            file_path: Path to spreadsheet file

        Returns:
            TableParser: Appropriate parser instance

        Raises:
            CsvParseError: If file format is not supported
        """
        ext = TableParser.detect_format(str(file_path))
        parser_type = ParserFactory.PARSERS.get(ext)

        if parser_type == 'csv':
            return CsvParser()
        elif parser_type == 'excel':
            return ExcelParser()

        raise CsvParseError(f"Unsupported file format: .{ext}")

    @staticmethod
    def parse_file(
        file_path: Union[str, Path],
        delimiter: Optional[str] = None,
    ) -> SourceTable:
        """
        Convenience method to parse a spreadsheet file in one call.

        Args:
            file_path: Path to the file
            delimiter: Column delimiter for text formats

        Returns:
            SourceTable: Parsed rows
        """
        file_path = Path(file_path)
        parser = ParserFactory.create_parser(file_path)

        try:
            content = file_path.read_bytes()
        except OSError as e:
            raise CsvParseError(f"Failed to read {file_path}: {e}") from e

        if file_path.suffix.lower() == '.tsv' and delimiter is None:
            delimiter = '\t'

        return parser.parse(content, delimiter)
