"""
Payload Builder - Turns combinations into letter parameter maps

A template field is sent when it is mapped and either required or carries a
value. Required fields with no value are sent as empty strings so the
required-field check (or the API) can point at them.
"""

import logging
from typing import Dict, List, Optional, Sequence

from prefill.mapper.mapping import FieldMapping
from prefill.schema.models import (
    BulkLetterRequest,
    Combination,
    LetterRequest,
    TargetField,
)

logger = logging.getLogger(__name__)


class PayloadBuilder:
    """
    Builds letter parameter maps for a template

    Usage:
    ```python
    builder = PayloadBuilder(template_fields, mapping)
    request = builder.build_request(template_id=42, combinations=combinations)
    client.create_bulk(request)
    ```
    """

    def __init__(
        self,
        target_fields: Sequence[TargetField],
        mapping: Optional[FieldMapping] = None,
    ):
        """
        Initialize PayloadBuilder

        Args:
            target_fields: Template fields, in template order
            mapping: Field mapping; when omitted every field counts as mapped
        """
        self.target_fields = list(target_fields)
        self.mapping = mapping

    def _is_mapped(self, field_name: str) -> bool:
        return self.mapping is None or self.mapping.is_mapped(field_name)

    def build(self, combination: Combination) -> LetterRequest:
        """Build the parameter map for one combination"""
        params: Dict[str, str] = {}

        for target in self.target_fields:
            if not target.name or not self._is_mapped(target.name):
                continue

            value = combination.get(target.name)
            if target.required or value:
                params[target.name] = value

        return LetterRequest(params=params)

    def build_batch(self, combinations: Sequence[Combination]) -> List[LetterRequest]:
        letters = [self.build(combination) for combination in combinations]
        logger.info(f"Built {len(letters)} letter payloads")
        return letters

    def build_request(
        self,
        template_id: int,
        combinations: Sequence[Combination],
    ) -> BulkLetterRequest:
        """Build a bulk request without notification settings"""
        return BulkLetterRequest(
            template_id=template_id,
            letters=self.build_batch(combinations),
        )
