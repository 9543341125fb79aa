"""Field-to-header mapping state."""
from dataclasses import dataclass, field
from typing import Dict, Any, Optional, Set


@dataclass
class FieldMapping:
    """Maps target field names to source headers; manual choices win over suggestions."""

    assignments: Dict[str, Optional[str]] = field(default_factory=dict)
    manual: Set[str] = field(default_factory=set)

    def get(self, field_name: str) -> Optional[str]:
        return self.assignments.get(field_name)

    def is_mapped(self, field_name: str) -> bool:
        return bool(self.assignments.get(field_name))

    def set(self, field_name: str, header: Optional[str]) -> None:
        """Record a user choice. None clears the field and pins it unmapped."""
        self.assignments[field_name] = header or None
        self.manual.add(field_name)

    def clear(self, field_name: str) -> None:
        """Drop any choice so the next suggestion run can fill the field."""
        self.assignments.pop(field_name, None)
        self.manual.discard(field_name)

    def merge(self, suggested: Dict[str, Optional[str]]) -> "FieldMapping":
        """Return a new mapping from suggestions, keeping every manual choice."""
        merged = dict(suggested)
        for name in self.manual:
            merged[name] = self.assignments.get(name)
        return FieldMapping(assignments=merged, manual=set(self.manual))

    def mapped_fields(self) -> Dict[str, str]:
        return {name: header for name, header in self.assignments.items() if header}

    def unmapped_fields(self) -> Set[str]:
        return {name for name, header in self.assignments.items() if not header}

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "assignments": dict(self.assignments),
            "manual": sorted(self.manual),
        }
