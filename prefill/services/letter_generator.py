"""Bulk letter request generation."""
import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from prefill.builder import CombinationAssembler, PayloadBuilder
from prefill.mapper.heuristic import ColumnMatcher
from prefill.mapper.mapping import FieldMapping
from prefill.schema.models import (
    BulkLetterRequest,
    Combination,
    LetterTemplate,
    NotificationMethod,
    SourceTable,
)
from prefill.validator.data_validator import DataValidator
from prefill.validator.errors import StructuralCsvError, RecipientFormatError

logger = logging.getLogger(__name__)


@dataclass
class LetterBatch:
    """Combinations and the request built from them."""

    combinations: List[Combination] = field(default_factory=list)
    request: Optional[BulkLetterRequest] = None


class LetterGenerator:
    """Maps spreadsheet rows onto a letter template and builds the bulk request."""

    def __init__(self, template: LetterTemplate, matcher: Optional[ColumnMatcher] = None):
        self.template = template
        self.matcher = matcher or ColumnMatcher()
        self.assembler = CombinationAssembler()

    def suggest_mapping(
        self,
        headers: Sequence[str],
        current: Optional[FieldMapping] = None,
    ) -> FieldMapping:
        """Auto-map template fields; manual choices in current are kept."""
        return self.matcher.apply(current or FieldMapping(), self.template.fields, headers)

    def build(self, table: SourceTable, mapping: FieldMapping) -> LetterBatch:
        """
        Build one letter per non-empty row

        Raises:
            StructuralCsvError: Empty table, nothing mapped, or no data after mapping
            RequiredFieldMissingError: A required field is blank for some letter
        """
        DataValidator.validate_table(table)

        if not any(mapping.is_mapped(f.name) for f in self.template.fields):
            raise StructuralCsvError("Please map at least one template field to a CSV header.")

        combinations = self.assembler.from_rows(table, mapping, self.template.fields)
        if not combinations:
            raise StructuralCsvError("No valid data found after mapping. Please check your CSV file.")

        DataValidator.validate_required_fields(combinations, self.template.fields)

        request = PayloadBuilder(self.template.fields, mapping).build_request(
            self.template.id, combinations
        )
        logger.info(f"Prepared {len(request.letters)} letters for template {self.template.id}")
        return LetterBatch(combinations=combinations, request=request)

    @staticmethod
    def attach_recipients(
        request: BulkLetterRequest,
        recipients: Sequence[str],
        method: NotificationMethod,
    ) -> BulkLetterRequest:
        """
        Attach notification settings once count and shape checks pass

        The request is left untouched when a check fails.

        Raises:
            RecipientFormatError: No recipients, or a contact has the wrong shape
            CountMismatchError: Recipients do not line up with the letters
        """
        if not recipients:
            kind = "phone numbers" if method == NotificationMethod.SMS else "email addresses"
            raise RecipientFormatError([], f"Please enter {kind} for notifications")

        DataValidator.validate_count(recipients, len(request.letters))
        DataValidator.validate_recipients(recipients, method)

        request.notification_method = method
        request.recipients = list(recipients)
        return request
