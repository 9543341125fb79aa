"""Export table rendering for generated artifacts."""

from typing import Dict, List, Optional, Sequence, Tuple

from prefill.schema.models import Combination, ExportConfig, Link

LABEL_COLUMN = "Label"
URL_COLUMN = "Form URL"
INDEX_LABEL = "index"


class ExportTableBuilder:
    """Projects combinations into rows for the results CSV."""

    def __init__(self, config: Optional[ExportConfig] = None, artifact_column: str = URL_COLUMN):
        self.config = config or ExportConfig()
        self.artifact_column = artifact_column

    def headers(self, descriptions: Dict[str, str]) -> List[str]:
        """Column order: Label, artifact, then one column per additional field."""
        headers = []
        if self.config.label_field:
            headers.append(LABEL_COLUMN)
        if self.config.include_url:
            headers.append(self.artifact_column)
        for field_id in self.config.additional_fields:
            headers.append(descriptions.get(field_id) or field_id)
        return headers

    def row(self, combination: Combination, artifact_id: str) -> List[str]:
        row = []
        label_field = self.config.label_field
        if label_field:
            if label_field == INDEX_LABEL:
                row.append(f"Entry {combination.index + 1}")
            else:
                row.append(combination.get(label_field))
        if self.config.include_url:
            row.append(artifact_id or "")
        for field_id in self.config.additional_fields:
            row.append(combination.get(field_id))
        return row

    def build(
        self,
        combinations: Sequence[Combination],
        artifact_ids: Sequence[str],
    ) -> Tuple[List[str], List[List[str]]]:
        """
        Render the export table.

        Args:
            combinations: Generated combinations, in order
            artifact_ids: URL (or other identifier) per combination

        Returns:
            (headers, rows)
        """
        descriptions: Dict[str, str] = {}
        for combination in combinations[:1]:
            descriptions.update(combination.descriptions)

        rows = [
            self.row(combination, artifact_ids[i] if i < len(artifact_ids) else "")
            for i, combination in enumerate(combinations)
        ]
        return self.headers(descriptions), rows

    def build_for_links(
        self,
        combinations: Sequence[Combination],
        links: Sequence[Link],
    ) -> Tuple[List[str], List[List[str]]]:
        return self.build(combinations, [link.url for link in links])
