"""Batch pre-filled link generation."""
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from prefill.builder import (
    CombinationAssembler,
    ExportTableBuilder,
    LinkBuilder,
    ValueListNormalizer,
    DEFAULT_VALUES_DELIMITER,
)
from prefill.schema.models import (
    Combination,
    ExportConfig,
    Link,
    NormalizedFieldValues,
    RawFieldValues,
    SourceTable,
)
from prefill.transformer.registry import TransformerRegistry
from prefill.validator.data_validator import DataValidator
from prefill.validator.errors import StructuralCsvError

logger = logging.getLogger(__name__)


@dataclass
class LinkBatch:
    """Everything produced by one generation run."""

    fields: List[NormalizedFieldValues] = field(default_factory=list)
    combinations: List[Combination] = field(default_factory=list)
    links: List[Link] = field(default_factory=list)

    @property
    def max_values(self) -> int:
        return len(self.combinations)


class LinkGenerator:
    """
    Generates pre-filled form links from a FieldID/values/description sheet

    Usage:
    ```python
    table = CsvParser().parse(text)
    generator = LinkGenerator(delimiter=",")
    batch = generator.generate("https://form.gov.sg/<24 hex>", table)
    headers, rows = generator.export_table(batch, ExportConfig(label_field="index"))
    ```
    """

    FIELD_ID_COLUMN = "FieldID"
    VALUES_COLUMN = "values"
    DESCRIPTION_COLUMN = "description"

    def __init__(
        self,
        delimiter: str = DEFAULT_VALUES_DELIMITER,
        strict: bool = False,
        transformers: Optional[Dict[str, str]] = None,
        registry: Optional[TransformerRegistry] = None,
    ):
        """
        Initialize generator

        Args:
            delimiter: Separator between values in the values column
            strict: Reject unequal multi-value lengths instead of padding
            transformers: {field_id: transformer name} cleaners per field
        """
        self.normalizer = ValueListNormalizer(delimiter, strict=strict, registry=registry)
        self.assembler = CombinationAssembler()
        self.transformers = transformers or {}

    def load_fields(self, table: SourceTable) -> List[RawFieldValues]:
        """
        Read one RawFieldValues per non-empty row

        Raises:
            StructuralCsvError: Empty table, missing FieldID/values columns or a repeated FieldID
            IdentifierFormatError: A FieldID is not 24 hex digits
            EmptyValuesError: A values cell holds no usable value
        """
        DataValidator.validate_table(table, [self.FIELD_ID_COLUMN, self.VALUES_COLUMN])

        id_column = table.get_header(self.FIELD_ID_COLUMN)
        values_column = table.get_header(self.VALUES_COLUMN)
        description_column = table.get_header(self.DESCRIPTION_COLUMN)

        fields = []
        seen = set()
        for row in table.rows:
            if not any((value or "").strip() for value in row.values()):
                continue

            field_id = DataValidator.validate_field_id((row.get(id_column) or "").strip())
            if field_id.lower() in seen:
                raise StructuralCsvError(f"Duplicate FieldID: {field_id}")
            seen.add(field_id.lower())
            description = (row.get(description_column) or "").strip() if description_column else ""

            fields.append(
                self.normalizer.parse_field(
                    field_id,
                    row.get(values_column),
                    description,
                    transformer=self.transformers.get(field_id),
                )
            )

        return fields

    def prepare(self, table: SourceTable) -> List[NormalizedFieldValues]:
        """Load and normalize the fields of a sheet."""
        fields = self.normalizer.normalize(self.load_fields(table))
        if not fields:
            raise StructuralCsvError("No fields imported")
        return fields

    def generate(self, form_url: str, table: SourceTable) -> LinkBatch:
        """
        Validate the form URL, then build one link per combination

        Raises:
            UrlFormatError: Before any combination is built
        """
        DataValidator.validate_form_url(form_url)

        fields = self.prepare(table)
        combinations = self.assembler.assemble(fields)
        links = LinkBuilder(form_url).build_batch(combinations)

        logger.info(f"Generated {len(links)} matched links from {len(fields)} fields")
        return LinkBatch(fields=fields, combinations=combinations, links=links)

    @staticmethod
    def export_table(
        batch: LinkBatch,
        config: Optional[ExportConfig] = None,
    ) -> Tuple[List[str], List[List[str]]]:
        """Render the results table for a batch."""
        return ExportTableBuilder(config).build_for_links(batch.combinations, batch.links)
