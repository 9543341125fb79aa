"""Combination Assembler - zips normalized field lists into rows."""

import logging
from typing import List, Sequence

from prefill.mapper.mapping import FieldMapping
from prefill.schema.models import (
    Combination,
    NormalizedFieldValues,
    SourceTable,
    TargetField,
)
from prefill.validator.errors import AssemblyError

logger = logging.getLogger(__name__)


class CombinationAssembler:
    """Builds one Combination per value index."""

    def assemble(self, fields: Sequence[NormalizedFieldValues]) -> List[Combination]:
        """
        Read values[i] of every field for each index i

        Raises:
            AssemblyError: If field lists disagree on length
        """
        if not fields:
            return []

        lengths = {len(f.values) for f in fields}
        if len(lengths) != 1:
            raise AssemblyError(
                f"Normalized fields have unequal lengths: {sorted(lengths)}"
            )

        count = lengths.pop()
        combinations = []

        for i in range(count):
            combination = Combination(index=i)
            for f in fields:
                combination.values[f.id] = f.values[i]
                combination.descriptions[f.id] = f.description
                if f.is_single_value:
                    combination.single_value_fields.add(f.id)
            combinations.append(combination)

        logger.info(f"Assembled {len(combinations)} combinations from {len(fields)} fields")
        return combinations

    def from_rows(
        self,
        table: SourceTable,
        mapping: FieldMapping,
        target_fields: Sequence[TargetField],
    ) -> List[Combination]:
        """
        Build one Combination per source row through a field mapping

        Only mapped fields are read; rows whose mapped cells are all blank are dropped.
        """
        mapped = [
            (target.name, mapping.get(target.name))
            for target in target_fields
            if target.name and mapping.is_mapped(target.name)
        ]

        combinations = []
        for row in table.rows:
            values = {name: (row.get(header) or "").strip() for name, header in mapped}
            if not any(values.values()):
                continue

            combination = Combination(index=len(combinations), values=values)
            combination.descriptions = {name: name for name in values}
            combinations.append(combination)

        dropped = table.row_count - len(combinations)
        if dropped:
            logger.info(f"Skipped {dropped} rows with no mapped values")

        return combinations
