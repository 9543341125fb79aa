"""Example spreadsheets users fill in before importing."""

from typing import List, Sequence, Tuple

from prefill.schema.models import TargetField

LINK_TEMPLATE_HEADERS = ["FieldID", "values", "description"]

LINK_TEMPLATE_ROWS = [
    ("67488bb37e8c75e33b9f9191", ["John", "Jane", "Alex"], "Names"),
    (
        "67488f8e088e833537af24aa",
        ["john@agency.gov.sg", "jane@agency.gov.sg", "alex@agency.gov.sg"],
        "Email",
    ),
]

# (keywords, example values) checked in order against lower-cased field names
EXAMPLE_VALUES: List[Tuple[Tuple[str, ...], List[str]]] = [
    (("name",), ["John Doe", "Jane Smith", "Alex Johnson"]),
    (("email",), ["john.doe@example.com", "jane.smith@example.com", "alex.johnson@example.com"]),
    (("phone",), ["+6591234567", "+6598765432", "+6590123456"]),
    (
        ("address",),
        [
            "123 Main St, Singapore 123456",
            "456 Orchard Rd, Singapore 654321",
            "789 Marina Bay, Singapore 987654",
        ],
    ),
    (("date",), ["2023-01-01", "2023-02-15", "2023-03-30"]),
    (("id",), ["ID10001", "ID10002", "ID10003"]),
    (("cost", "price", "amount"), ["1000.00", "2500.50", "750.25"]),
]


def link_template(delimiter: str = ",") -> Tuple[List[str], List[List[str]]]:
    """Header and example rows for the links import CSV."""
    rows = [
        [field_id, delimiter.join(values), description]
        for field_id, values, description in LINK_TEMPLATE_ROWS
    ]
    return list(LINK_TEMPLATE_HEADERS), rows


def example_value(field_name: str, index: int) -> str:
    name = field_name.lower()
    for keywords, values in EXAMPLE_VALUES:
        if any(keyword in name for keyword in keywords):
            return values[index % len(values)]
    return f"Example {index + 1}"


def letter_template(
    target_fields: Sequence[TargetField],
    rows: int = 3,
) -> Tuple[List[str], List[List[str]]]:
    """One column per template field with keyword-chosen example values."""
    names = [target.name for target in target_fields if target.name]
    if not names:
        raise ValueError("There are no template fields available to create an example template.")

    return names, [[example_value(name, i) for name in names] for i in range(rows)]
