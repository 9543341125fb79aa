"""Notification recipients imported from a spreadsheet column."""
import logging
from typing import List, Optional

from prefill.mapper.heuristic import ColumnMatcher
from prefill.schema.models import NotificationMethod, SourceTable
from prefill.validator.errors import StructuralCsvError

logger = logging.getLogger(__name__)


def load_recipients(
    table: SourceTable,
    method: NotificationMethod,
    header: Optional[str] = None,
    matcher: Optional[ColumnMatcher] = None,
) -> List[str]:
    """
    Extract contacts from one column, auto-detecting it when header is omitted.

    Returns:
        Trimmed, non-blank contacts in row order

    Raises:
        StructuralCsvError: Empty table, or no usable column
    """
    if not table.rows:
        raise StructuralCsvError("CSV file is empty or invalid")

    if header is None:
        header = (matcher or ColumnMatcher()).detect_column(method.value, table.headers)
        if header is None:
            kind = "an email" if method == NotificationMethod.EMAIL else "a phone number"
            raise StructuralCsvError(
                f"Could not auto-detect {kind} column. Please select one manually."
            )
    elif header not in table.headers:
        raise StructuralCsvError(f"Column not found: {header}")

    contacts = [value.strip() for value in table.column(header) if value.strip()]
    logger.info(f"Loaded {len(contacts)} recipients from column '{header}'")
    return contacts
