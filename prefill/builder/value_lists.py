"""
Value-List Normalizer - parses delimited cells and equalizes list lengths

Policies:
- A field with a single value is broadcast to every row
- A shorter multi-value field repeats its last value (strict mode rejects it)
"""

import logging
from typing import List, Optional, Sequence

from prefill.schema.models import RawFieldValues, NormalizedFieldValues
from prefill.transformer.registry import TransformerRegistry
from prefill.validator.errors import EmptyValuesError, CountMismatchError, PrefillError

logger = logging.getLogger(__name__)

DEFAULT_VALUES_DELIMITER = ","


def split_values(text: Optional[str], delimiter: str = DEFAULT_VALUES_DELIMITER) -> List[str]:
    """Split a cell on delimiter, trim tokens and drop empty ones."""
    if not text:
        return []
    tokens = text.split(delimiter) if delimiter else [text]
    return [token.strip() for token in tokens if token.strip()]


class ValueListNormalizer:
    """
    Turns per-field raw value lists into equal-length lists

    Usage:
    ```python
    normalizer = ValueListNormalizer(delimiter=",")
    raw = [
        normalizer.parse_field("67488bb37e8c75e33b9f9191", "John,Jane,Alex", "Names"),
        normalizer.parse_field("67488f8e088e833537af24aa", "a@x.com", "Email"),
    ]
    fields = normalizer.normalize(raw)
    # Both fields now carry 3 values
    ```
    """

    def __init__(
        self,
        delimiter: str = DEFAULT_VALUES_DELIMITER,
        strict: bool = False,
        registry: Optional[TransformerRegistry] = None,
    ):
        """
        Initialize normalizer

        Args:
            delimiter: Separator between values inside one cell
            strict: Reject multi-value fields of unequal length instead of padding
            registry: Value cleaners available to parse_field
        """
        self.delimiter = delimiter
        self.strict = strict
        self.registry = registry or TransformerRegistry()

    def parse_field(
        self,
        field_id: str,
        text: Optional[str],
        description: str = "",
        transformer: Optional[str] = None,
    ) -> RawFieldValues:
        """
        Split one cell into a RawFieldValues

        Raises:
            EmptyValuesError: If no usable value remains
            PrefillError: If transformer is not registered
        """
        values = split_values(text, self.delimiter)
        if transformer:
            try:
                values = self.registry.transform_all(values, transformer)
            except KeyError as e:
                raise PrefillError(f"Unknown transformer: {transformer}") from e

        if not values:
            raise EmptyValuesError(field_id)

        return RawFieldValues(id=field_id, raw_values=values, description=description or field_id)

    def normalize(self, fields: Sequence[RawFieldValues]) -> List[NormalizedFieldValues]:
        """
        Equalize every field to the longest field's length

        Returns:
            One NormalizedFieldValues per input field, same order

        Raises:
            EmptyValuesError: If a field has no values
            CountMismatchError: In strict mode, if multi-value lengths differ
        """
        if not fields:
            return []

        for raw in fields:
            if not raw.raw_values:
                raise EmptyValuesError(raw.id)

        max_values = max(len(raw.raw_values) for raw in fields)

        if self.strict:
            self._check_strict(fields, max_values)

        normalized = []
        for raw in fields:
            values = list(raw.raw_values)

            if len(values) == 1:
                values = values * max_values
            elif len(values) < max_values:
                logger.warning(
                    f"Field {raw.id} has {len(values)} values; repeating "
                    f"'{values[-1]}' for the remaining {max_values - len(values)}"
                )
                values = values + [values[-1]] * (max_values - len(values))

            normalized.append(
                NormalizedFieldValues(
                    id=raw.id,
                    values=values,
                    description=raw.description,
                    is_single_value=raw.is_single_value,
                )
            )

        logger.info(f"Normalized {len(normalized)} fields to {max_values} values each")
        return normalized

    @staticmethod
    def _check_strict(fields: Sequence[RawFieldValues], max_values: int) -> None:
        for raw in fields:
            count = len(raw.raw_values)
            if count != 1 and count != max_values:
                raise CountMismatchError(
                    max_values,
                    count,
                    f"Field {raw.id} has {count} values but the longest field has {max_values}",
                )
