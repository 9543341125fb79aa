"""
End-to-end tests for link and letter generation services

Tests:
- LinkGenerator: Import sheet -> links -> export table
- LetterGenerator: Mapping -> validation -> bulk request
- load_recipients: Recipient column detection
"""

import pytest

from prefill.mapper.mapping import FieldMapping
from prefill.parser.csv_parser import CsvParser
from prefill.schema.models import (
    BulkLetterRequest,
    ExportConfig,
    LetterRequest,
    LetterTemplate,
    NotificationMethod,
    TargetField,
)
from prefill.services.letter_generator import LetterGenerator
from prefill.services.link_generator import LinkGenerator
from prefill.services.recipients import load_recipients
from prefill.validator.errors import (
    CountMismatchError,
    EmptyValuesError,
    IdentifierFormatError,
    RecipientFormatError,
    RequiredFieldMissingError,
    StructuralCsvError,
    UrlFormatError,
)

NAMES_ID = "67488bb37e8c75e33b9f9191"
EMAIL_ID = "67488f8e088e833537af24aa"
FORM_URL = "https://form.gov.sg/abcdefabcdefabcdefabcdef"


# ============================================================================
# FIXTURES
# ============================================================================


@pytest.fixture
def links_sheet():
    """FieldID/values/description import sheet"""
    return CsvParser().parse(
        "FieldID,values,description\n"
        f'{NAMES_ID},"John,Jane,Alex",Names\n'
        f"{EMAIL_ID},a@x.com,Email\n"
    )


@pytest.fixture
def template():
    """Letter template: Name and Email required, Note optional"""
    return LetterTemplate(
        id=42,
        name="Award",
        fields=[
            TargetField("Name"),
            TargetField("Email"),
            TargetField("Note", required=False),
        ],
    )


@pytest.fixture
def letters_sheet():
    return CsvParser().parse(
        "Full Name,Email Address,Remarks\n"
        "John,john@x.com,Top\n"
        "Jane,jane@x.com,\n"
        ",,\n"
        "Alex,alex@x.com,Late\n"
    )


# ============================================================================
# LINK GENERATOR
# ============================================================================


class TestLinkGenerator:
    """Test matched link generation"""

    def test_generate(self, links_sheet):
        batch = LinkGenerator().generate(FORM_URL, links_sheet)

        assert batch.max_values == 3
        assert [f.label for f in batch.fields] == ["Names", "Email"]
        assert batch.links[0].url == (
            f"{FORM_URL}?{NAMES_ID}=John&{EMAIL_ID}=a%40x.com"
        )
        assert batch.links[2].fields == {NAMES_ID: "Alex", EMAIL_ID: "a@x.com"}

    def test_invalid_url_checked_first(self, links_sheet):
        """Test URL is rejected before any combination is built"""
        generator = LinkGenerator()
        with pytest.raises(UrlFormatError):
            generator.generate("http://form.gov.sg/123", links_sheet)

    def test_semicolon_values_delimiter(self):
        table = CsvParser().parse(
            "FieldID,values\n"
            f'{NAMES_ID},"Tan, Ah Kow;Lim, Mei"\n'
        )
        batch = LinkGenerator(delimiter=";").generate(FORM_URL, table)
        assert [link.fields[NAMES_ID] for link in batch.links] == ["Tan, Ah Kow", "Lim, Mei"]

    def test_headers_case_insensitive_and_description_optional(self):
        table = CsvParser().parse(f"fieldid,VALUES\n{NAMES_ID},x\n")
        fields = LinkGenerator().prepare(table)
        assert fields[0].label == NAMES_ID

    def test_missing_values_column(self):
        table = CsvParser().parse(f"FieldID,description\n{NAMES_ID},Names\n")
        with pytest.raises(StructuralCsvError, match="Missing required columns: values"):
            LinkGenerator().prepare(table)

    def test_bad_field_id(self):
        table = CsvParser().parse("FieldID,values\nnot-an-id,x\n")
        with pytest.raises(IdentifierFormatError, match="not-an-id"):
            LinkGenerator().prepare(table)

    def test_duplicate_field_id(self):
        """Test a repeated FieldID is rejected instead of overwriting"""
        table = CsvParser().parse(
            "FieldID,values\n"
            f'{NAMES_ID},"a,b"\n'
            f'{NAMES_ID.upper()},"x,y"\n'
        )
        with pytest.raises(StructuralCsvError, match="Duplicate FieldID"):
            LinkGenerator().prepare(table)

    def test_empty_values(self):
        table = CsvParser().parse(f"FieldID,values\n{NAMES_ID},\" , \"\n")
        with pytest.raises(EmptyValuesError):
            LinkGenerator().prepare(table)

    def test_transformers_per_field(self):
        table = CsvParser().parse(f'FieldID,values\n{EMAIL_ID},"A@X.COM,B@Y.COM"\n')
        generator = LinkGenerator(transformers={EMAIL_ID: "LOWERCASE"})
        fields = generator.prepare(table)
        assert fields[0].values == ["a@x.com", "b@y.com"]

    def test_strict_lengths(self):
        table = CsvParser().parse(
            "FieldID,values\n"
            f'{NAMES_ID},"x,y,z"\n'
            f'{EMAIL_ID},"p,q"\n'
        )
        with pytest.raises(CountMismatchError):
            LinkGenerator(strict=True).generate(FORM_URL, table)

        batch = LinkGenerator().generate(FORM_URL, table)
        assert [link.fields[EMAIL_ID] for link in batch.links] == ["p", "q", "q"]

    def test_export_table(self, links_sheet):
        generator = LinkGenerator()
        batch = generator.generate(FORM_URL, links_sheet)

        headers, rows = generator.export_table(
            batch, ExportConfig(label_field=NAMES_ID, additional_fields=[EMAIL_ID])
        )

        assert headers == ["Label", "Form URL", "Email"]
        assert rows[1] == ["Jane", batch.links[1].url, "a@x.com"]


# ============================================================================
# LETTER GENERATOR
# ============================================================================


class TestLetterGenerator:
    """Test bulk letter request building"""

    def test_suggest_mapping(self, template, letters_sheet):
        mapping = LetterGenerator(template).suggest_mapping(letters_sheet.headers)

        assert mapping.get("Name") == "Full Name"
        assert mapping.get("Email") == "Email Address"
        assert mapping.get("Note") is None

    def test_suggest_keeps_manual(self, template, letters_sheet):
        current = FieldMapping()
        current.set("Note", "Remarks")

        mapping = LetterGenerator(template).suggest_mapping(letters_sheet.headers, current)

        assert mapping.get("Note") == "Remarks"
        assert mapping.get("Name") == "Full Name"

    def test_build(self, template, letters_sheet):
        generator = LetterGenerator(template)
        mapping = generator.suggest_mapping(letters_sheet.headers)
        mapping.set("Note", "Remarks")

        batch = generator.build(letters_sheet, mapping)

        assert len(batch.combinations) == 3
        assert batch.request.template_id == 42
        assert [letter.params for letter in batch.request.letters] == [
            {"Name": "John", "Email": "john@x.com", "Note": "Top"},
            {"Name": "Jane", "Email": "jane@x.com"},
            {"Name": "Alex", "Email": "alex@x.com", "Note": "Late"},
        ]

    def test_nothing_mapped(self, template, letters_sheet):
        with pytest.raises(StructuralCsvError, match="map at least one"):
            LetterGenerator(template).build(letters_sheet, FieldMapping())

    def test_no_data_after_mapping(self, template):
        table = CsvParser().parse("Full Name,Other\n,x\n")
        mapping = FieldMapping({"Name": "Full Name"})
        with pytest.raises(StructuralCsvError, match="No valid data"):
            LetterGenerator(template).build(table, mapping)

    def test_required_field_missing(self, template):
        table = CsvParser().parse("Full Name,Email Address\nJohn,j@x.com\nJane,\n")
        generator = LetterGenerator(template)
        mapping = generator.suggest_mapping(table.headers)

        with pytest.raises(RequiredFieldMissingError) as exc:
            generator.build(table, mapping)

        assert exc.value.field_name == "Email"
        assert exc.value.index == 1

    def test_unmapped_required_field(self, template):
        """Test an unmapped required field is caught before submission"""
        table = CsvParser().parse("Full Name\nJohn\n")
        mapping = FieldMapping({"Name": "Full Name"})

        with pytest.raises(RequiredFieldMissingError, match='"Email"'):
            LetterGenerator(template).build(table, mapping)

    def test_empty_table(self, template):
        table = CsvParser().parse("Full Name\n")
        with pytest.raises(StructuralCsvError, match="empty or invalid"):
            LetterGenerator(template).build(table, FieldMapping({"Name": "Full Name"}))


class TestAttachRecipients:
    """Test notification settings on a bulk request"""

    @pytest.fixture
    def request_of_three(self):
        return BulkLetterRequest(
            template_id=42,
            letters=[LetterRequest({"Name": n}) for n in ("John", "Jane", "Alex")],
        )

    def test_attach(self, request_of_three):
        LetterGenerator.attach_recipients(
            request_of_three, ["91234567", "+6598765432", "81234567"], NotificationMethod.SMS
        )

        body = request_of_three.to_dict()
        assert body["notificationMethod"] == "SMS"
        assert body["recipients"] == ["91234567", "+6598765432", "81234567"]

    def test_count_mismatch_leaves_request_unchanged(self, request_of_three):
        with pytest.raises(CountMismatchError):
            LetterGenerator.attach_recipients(
                request_of_three, ["a@x.com", "b@x.com"], NotificationMethod.EMAIL
            )

        assert not request_of_three.has_notification
        assert request_of_three.recipients == []
        assert "recipients" not in request_of_three.to_dict()

    def test_bad_shape(self, request_of_three):
        with pytest.raises(RecipientFormatError):
            LetterGenerator.attach_recipients(
                request_of_three, ["a@x.com", "bad", "c@x.com"], NotificationMethod.EMAIL
            )
        assert not request_of_three.has_notification

    def test_empty_recipients(self, request_of_three):
        with pytest.raises(RecipientFormatError, match="phone numbers"):
            LetterGenerator.attach_recipients(request_of_three, [], NotificationMethod.SMS)


class TestLoadRecipients:
    """Test recipient column import"""

    def test_auto_detect(self):
        table = CsvParser().parse("Name,Mobile\nJohn, 91234567 \nJane,\nAlex,81234567\n")
        assert load_recipients(table, NotificationMethod.SMS) == ["91234567", "81234567"]

    def test_explicit_column(self):
        table = CsvParser().parse("Name,Contact\nJohn,j@x.com\n")
        assert load_recipients(table, NotificationMethod.EMAIL, "Contact") == ["j@x.com"]

    def test_unknown_column(self):
        table = CsvParser().parse("Name,Contact\nJohn,j@x.com\n")
        with pytest.raises(StructuralCsvError, match="Column not found"):
            load_recipients(table, NotificationMethod.EMAIL, "Email")

    def test_nothing_detected(self):
        table = CsvParser().parse("Name,Contact\nJohn,j@x.com\n")
        with pytest.raises(StructuralCsvError, match="auto-detect an email column"):
            load_recipients(table, NotificationMethod.EMAIL)

    def test_empty_table(self):
        with pytest.raises(StructuralCsvError):
            load_recipients(CsvParser().parse("Email\n"), NotificationMethod.EMAIL)
