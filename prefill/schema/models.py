"""Data models for prefill generation sessions."""
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Dict, Any, Set


class NotificationMethod(str, Enum):
    """How letter recipients are notified."""

    SMS = "SMS"
    EMAIL = "EMAIL"


@dataclass(frozen=True)
class TargetField:
    """A named slot a generated artifact must (or may) supply."""

    name: str
    required: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "required": self.required}


@dataclass
class SourceTable:
    """Rows read from a spreadsheet, keyed by header."""

    headers: List[str] = field(default_factory=list)
    rows: List[Dict[str, str]] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
    source_format: str = "csv"

    @property
    def row_count(self) -> int:
        return len(self.rows)

    def get_header(self, name: str) -> Optional[str]:
        """Return the header matching name, ignoring case."""
        for header in self.headers:
            if header.lower() == name.lower():
                return header
        return None

    def column(self, header: str) -> List[str]:
        """Return every cell of a column, in row order."""
        return [row.get(header, "") for row in self.rows]


@dataclass
class RawFieldValues:
    """Values parsed for one field before length equalization."""

    id: str
    raw_values: List[str]
    description: str = ""

    @property
    def is_single_value(self) -> bool:
        return len(self.raw_values) == 1


@dataclass
class NormalizedFieldValues:
    """Field values after broadcast/padding to the session length."""

    id: str
    values: List[str]
    description: str = ""
    is_single_value: bool = False

    @property
    def label(self) -> str:
        return self.description or self.id


@dataclass
class Combination:
    """One fully-resolved row: a single value per field."""

    index: int
    values: Dict[str, str] = field(default_factory=dict)
    descriptions: Dict[str, str] = field(default_factory=dict)
    single_value_fields: Set[str] = field(default_factory=set)

    def get(self, field_id: str, default: str = "") -> str:
        value = self.values.get(field_id)
        return default if value is None else value

    @property
    def field_ids(self) -> List[str]:
        return list(self.values.keys())


@dataclass(frozen=True)
class Link:
    """Pre-filled form URL built from one combination."""

    url: str
    fields: Dict[str, str]
    label: int

    def to_dict(self) -> Dict[str, Any]:
        return {"url": self.url, "fields": dict(self.fields), "label": self.label}


@dataclass(frozen=True)
class LetterRequest:
    """Letter parameters built from one combination."""

    params: Dict[str, str]

    def to_dict(self) -> Dict[str, Any]:
        return dict(self.params)


@dataclass
class BulkLetterRequest:
    """Payload for a bulk letter submission."""

    template_id: int
    letters: List[LetterRequest] = field(default_factory=list)
    notification_method: Optional[NotificationMethod] = None
    recipients: List[str] = field(default_factory=list)

    @property
    def has_notification(self) -> bool:
        return self.notification_method is not None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the API request body."""
        payload: Dict[str, Any] = {
            "templateId": self.template_id,
            "lettersParams": [letter.to_dict() for letter in self.letters],
        }
        if self.notification_method is not None:
            payload["notificationMethod"] = self.notification_method.value
            payload["recipients"] = list(self.recipients)
        return payload


@dataclass
class ExportConfig:
    """Projection instructions for the results table."""

    include_url: bool = True
    label_field: Optional[str] = None  # field id, "index", or None
    additional_fields: List[str] = field(default_factory=list)

    def toggle_field(self, field_id: str, checked: bool) -> None:
        """Add or remove an additional export column."""
        if checked and field_id not in self.additional_fields:
            self.additional_fields.append(field_id)
        elif not checked and field_id in self.additional_fields:
            self.additional_fields.remove(field_id)


@dataclass
class LetterTemplate:
    """A letter template and the fields it expects."""

    id: int
    name: str = ""
    fields: List[TargetField] = field(default_factory=list)

    @property
    def field_names(self) -> List[str]:
        return [f.name for f in self.fields]

    @staticmethod
    def parse_fields(raw_fields: Any) -> List[TargetField]:
        """Accept field names (required) or {name, required} objects (required unless false)."""
        if not isinstance(raw_fields, list):
            return []

        fields = []
        for raw in raw_fields:
            if isinstance(raw, str) and raw:
                fields.append(TargetField(name=raw, required=True))
            elif isinstance(raw, dict) and raw.get("name"):
                fields.append(TargetField(name=raw["name"], required=raw.get("required") is not False))
        return fields
