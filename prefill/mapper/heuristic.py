"""Heuristic mapping engine for auto-detecting column mappings."""
import logging
from dataclasses import dataclass
from difflib import SequenceMatcher
from typing import List, Optional, Dict, Sequence, Tuple

from prefill.mapper.mapping import FieldMapping
from prefill.schema.models import TargetField, NotificationMethod

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class KeywordRule:
    """A target concept and the header keywords that identify it."""

    target: str
    keywords: Tuple[str, ...]


class ColumnMatcher:
    """Propose which source header feeds each target field."""

    KEYWORD_RULES = [
        KeywordRule(NotificationMethod.EMAIL.value, ("email", "mail", "e-mail")),
        KeywordRule(NotificationMethod.SMS.value, ("phone", "mobile", "cell", "tel", "number")),
    ]

    def __init__(self, keyword_rules: Optional[List[KeywordRule]] = None):
        """Initialize matcher with optional extra keyword rules."""
        self.keyword_rules = list(self.KEYWORD_RULES)
        if keyword_rules:
            self.keyword_rules.extend(keyword_rules)

    def suggest_mapping(
        self,
        target_fields: Sequence[TargetField],
        headers: Sequence[str],
    ) -> Dict[str, Optional[str]]:
        """
        Suggest a header for every target field, in field order.

        Exact (case-insensitive) matches win; otherwise the first header that
        contains the field name, or is contained by it. Ties go to header order.

        Returns:
            {field_name: header or None}
        """
        mapping: Dict[str, Optional[str]] = {}

        for target in target_fields:
            if not target.name:
                continue
            mapping[target.name] = self._find_header(target.name, headers)

        matched = sum(1 for header in mapping.values() if header)
        logger.info(f"Auto-mapped {matched}/{len(mapping)} fields")
        return mapping

    def apply(
        self,
        current: FieldMapping,
        target_fields: Sequence[TargetField],
        headers: Sequence[str],
    ) -> FieldMapping:
        """Re-run suggestions and merge them under the user's manual choices."""
        return current.merge(self.suggest_mapping(target_fields, headers))

    @staticmethod
    def _find_header(field_name: str, headers: Sequence[str]) -> Optional[str]:
        """Find matching header."""
        name_lower = field_name.lower()

        # Exact match
        for header in headers:
            if header.lower() == name_lower:
                return header

        # Containment either way
        for header in headers:
            header_lower = header.lower()
            if not header_lower:
                continue
            if name_lower in header_lower or header_lower in name_lower:
                return header

        return None

    def detect_column(self, target: str, headers: Sequence[str]) -> Optional[str]:
        """Find the first header containing any keyword registered for target."""
        for rule in self.keyword_rules:
            if rule.target != target:
                continue
            for header in headers:
                header_lower = header.lower()
                if any(keyword in header_lower for keyword in rule.keywords):
                    return header

        logger.warning(f"Could not auto-detect a column for {target}")
        return None

    @staticmethod
    def rank_headers(
        field_name: str,
        headers: Sequence[str],
        limit: int = 3,
    ) -> List[Tuple[str, float]]:
        """
        Rank headers by similarity to a field name, for manual selection.

        Returns:
            list: (header, ratio) tuples, best first
        """
        name_lower = field_name.lower()
        scored = [
            (header, SequenceMatcher(None, name_lower, header.lower()).ratio())
            for header in headers
        ]
        scored.sort(key=lambda x: x[1], reverse=True)
        return scored[:limit]
