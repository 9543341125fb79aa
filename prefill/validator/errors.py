"""Errors raised while importing and generating prefill artifacts."""
from typing import List, Optional


class PrefillError(ValueError):
    """Base class for user-facing generation errors."""


class CsvParseError(PrefillError):
    """The input file could not be read or parsed."""


class StructuralCsvError(PrefillError):
    """Empty table, missing required headers or duplicate headers."""


class IdentifierFormatError(PrefillError):
    """A field identifier does not have the expected shape."""

    def __init__(self, identifier: str, message: Optional[str] = None):
        self.identifier = identifier
        super().__init__(
            message
            or f"Invalid FieldID format: {identifier}. Must be a 24-digit hexadecimal."
        )


class UrlFormatError(PrefillError):
    """The base form URL does not have the expected shape."""

    def __init__(self, url: str, message: Optional[str] = None):
        self.url = url
        super().__init__(
            message
            or "Invalid form URL. Must be in format: https://form.gov.sg/[24-digit hexadecimal]"
        )


class EmptyValuesError(PrefillError):
    """A field resolved to zero usable values."""

    def __init__(self, field_id: str):
        self.field_id = field_id
        super().__init__(f"Missing values for FieldID: {field_id}")


class RequiredFieldMissingError(PrefillError):
    """A required field is empty in one combination."""

    def __init__(self, field_name: str, index: int):
        self.field_name = field_name
        self.index = index
        super().__init__(
            f'The field "{field_name}" is required but missing or empty in entry {index + 1}'
        )


class RecipientFormatError(PrefillError):
    """One or more recipient contacts have an invalid shape."""

    def __init__(self, values: List[str], message: str):
        self.values = list(values)
        super().__init__(message)


class CountMismatchError(PrefillError):
    """A side list does not line up with the combinations."""

    def __init__(self, expected: int, actual: int, message: Optional[str] = None):
        self.expected = expected
        self.actual = actual
        super().__init__(
            message or f"Expected {expected} entries but got {actual}"
        )


class AssemblyError(RuntimeError):
    """Normalized field lists disagree on length."""
