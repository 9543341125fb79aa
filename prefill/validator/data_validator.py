"""Input-format checks applied between generation stages."""
import re
from typing import List, Iterable, Optional, Sequence

from prefill.schema.models import (
    SourceTable,
    TargetField,
    Combination,
    NotificationMethod,
)
from prefill.validator.errors import (
    StructuralCsvError,
    IdentifierFormatError,
    UrlFormatError,
    RequiredFieldMissingError,
    RecipientFormatError,
    CountMismatchError,
)


FORM_URL_REGEX = re.compile(r"^https://form\.gov\.sg/[a-f0-9]{24}$", re.IGNORECASE)
FIELD_ID_REGEX = re.compile(r"^[a-f0-9]{24}$", re.IGNORECASE)
LOCAL_PHONE_REGEX = re.compile(r"^[89]\d{7}$")
INTERNATIONAL_PHONE_REGEX = re.compile(r"^\+\d{6,15}$")
EMAIL_REGEX = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


class DataValidator:
    """Stateless predicates; each raises on the first violation."""

    @staticmethod
    def validate_table(table: SourceTable, required_headers: Iterable[str] = ()) -> None:
        """Check the table has rows and every required header (case-insensitive)."""
        if not table.rows:
            raise StructuralCsvError("CSV file is empty or invalid")

        missing = [name for name in required_headers if table.get_header(name) is None]
        if missing:
            raise StructuralCsvError(
                f"Missing required columns: {' and '.join(missing)}"
            )

    @staticmethod
    def validate_field_id(field_id: Optional[str]) -> str:
        if not field_id or not FIELD_ID_REGEX.fullmatch(field_id):
            raise IdentifierFormatError(field_id or "")
        return field_id

    @staticmethod
    def validate_form_url(url: Optional[str]) -> str:
        if not url:
            raise UrlFormatError("", "Form URL is required")
        if not FORM_URL_REGEX.fullmatch(url):
            raise UrlFormatError(url)
        return url

    @staticmethod
    def validate_required_fields(
        combinations: Sequence[Combination],
        target_fields: Sequence[TargetField],
    ) -> None:
        """Every required field must be non-blank in every combination."""
        for combination in combinations:
            for target in target_fields:
                if not target.required:
                    continue
                if not combination.get(target.name).strip():
                    raise RequiredFieldMissingError(target.name, combination.index)

    @staticmethod
    def is_valid_phone(phone: str) -> bool:
        return bool(LOCAL_PHONE_REGEX.fullmatch(phone) or INTERNATIONAL_PHONE_REGEX.fullmatch(phone))

    @staticmethod
    def is_valid_email(email: str) -> bool:
        return bool(EMAIL_REGEX.fullmatch(email))

    @classmethod
    def validate_recipients(
        cls,
        recipients: Sequence[str],
        method: NotificationMethod,
    ) -> None:
        """Check every contact has the shape required by the notification method."""
        if method == NotificationMethod.SMS:
            invalid = [phone for phone in recipients if not cls.is_valid_phone(phone)]
            if invalid:
                raise RecipientFormatError(
                    invalid,
                    "Phone numbers should be in local SG format (8/9XXXXXXX) "
                    "or international format (+XXXXXXXXX)",
                )
        else:
            invalid = [email for email in recipients if not cls.is_valid_email(email)]
            if invalid:
                raise RecipientFormatError(invalid, "Please provide valid email addresses")

    @staticmethod
    def validate_count(side_list: Sequence[str], expected: int, what: str = "recipients") -> None:
        if len(side_list) != expected:
            raise CountMismatchError(
                expected,
                len(side_list),
                f"The number of {what} ({len(side_list)}) must match "
                f"the number of entries ({expected})",
            )

    @staticmethod
    def find_duplicates(headers: Iterable[str]) -> List[str]:
        """Return headers that appear more than once after trimming."""
        seen = set()
        duplicates = []
        for header in headers:
            name = header.strip()
            if name in seen and name not in duplicates:
                duplicates.append(name)
            seen.add(name)
        return duplicates
