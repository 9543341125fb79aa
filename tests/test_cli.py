"""Tests for the command line interface."""
import csv
import json
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from main import cli
from prefill.api.letters_client import LettersApiError
from prefill.schema.models import LetterTemplate, TargetField

NAMES_ID = "67488bb37e8c75e33b9f9191"
EMAIL_ID = "67488f8e088e833537af24aa"
FORM_URL = "https://form.gov.sg/abcdefabcdefabcdefabcdef"


# ============================================================================
# FIXTURES
# ============================================================================


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def links_csv(tmp_path):
    path = tmp_path / "fields.csv"
    path.write_text(
        "FieldID,values,description\n"
        f'{NAMES_ID},"John,Jane,Alex",Names\n'
        f"{EMAIL_ID},a@x.com,Email\n",
        encoding="utf-8",
    )
    return path


@pytest.fixture
def letters_csv(tmp_path):
    path = tmp_path / "letters.csv"
    path.write_text(
        "Name,Email,Remarks\n"
        "John,john@x.com,Top\n"
        "Jane,jane@x.com,\n",
        encoding="utf-8",
    )
    return path


@pytest.fixture
def mock_client():
    """Patch the Letters API client used by the CLI"""
    with patch("prefill.cli.interactive.LettersClient") as client_cls:
        client = client_cls.return_value
        client.get_template.return_value = LetterTemplate(
            id=42,
            name="Award",
            fields=[TargetField("Name"), TargetField("Email"), TargetField("Note", required=False)],
        )
        client.create_bulk.return_value = "batch_123"
        yield client


def read_csv(path):
    with open(path, newline="", encoding="utf-8") as f:
        return list(csv.reader(f))


# ============================================================================
# LINKS
# ============================================================================


class TestLinksCommand:
    """Test links and links-template commands"""

    def test_links(self, runner, links_csv, tmp_path):
        output = tmp_path / "links.csv"

        result = runner.invoke(cli, [
            "links", str(links_csv),
            "--form-url", FORM_URL,
            "--label", "index",
            "--field", EMAIL_ID,
            "--output", str(output),
        ])

        assert result.exit_code == 0, result.output
        rows = read_csv(output)
        assert rows[0] == ["Label", "Form URL", "Email"]
        assert rows[1] == [
            "Entry 1",
            f"{FORM_URL}?{NAMES_ID}=John&{EMAIL_ID}=a%40x.com",
            "a@x.com",
        ]
        assert len(rows) == 4
        assert "Generated 3 matched links" in result.output

    def test_links_invalid_url(self, runner, links_csv, tmp_path):
        output = tmp_path / "links.csv"

        result = runner.invoke(cli, [
            "links", str(links_csv), "--form-url", "http://form.gov.sg/123", "--output", str(output),
        ])

        assert result.exit_code == 1
        assert "Invalid form URL" in result.output
        assert not output.exists()

    def test_links_strict(self, runner, tmp_path):
        path = tmp_path / "fields.csv"
        path.write_text(
            f'FieldID,values\n{NAMES_ID},"x,y,z"\n{EMAIL_ID},"p,q"\n', encoding="utf-8"
        )

        result = runner.invoke(cli, [
            "links", str(path), "--form-url", FORM_URL, "--strict",
            "--output", str(tmp_path / "out.csv"),
        ])

        assert result.exit_code == 1
        assert "has 2 values but the longest field has 3" in result.output

    def test_links_no_columns(self, runner, links_csv, tmp_path):
        result = runner.invoke(cli, [
            "links", str(links_csv), "--form-url", FORM_URL, "--no-url",
            "--output", str(tmp_path / "out.csv"),
        ])

        assert result.exit_code == 1
        assert "no columns" in result.output

    def test_links_template(self, runner, tmp_path):
        output = tmp_path / "template.csv"

        result = runner.invoke(cli, ["links-template", "--delimiter", ";", "--output", str(output)])

        assert result.exit_code == 0, result.output
        rows = read_csv(output)
        assert rows[0] == ["FieldID", "values", "description"]
        assert rows[1] == [NAMES_ID, "John;Jane;Alex", "Names"]


# ============================================================================
# LETTERS
# ============================================================================


class TestLettersCommand:
    """Test letters and related commands"""

    def test_dry_run(self, runner, letters_csv, tmp_path, mock_client):
        output = tmp_path / "request.json"

        result = runner.invoke(cli, [
            "letters", str(letters_csv),
            "--template-id", "42",
            "--map", "Note=Remarks",
            "--dry-run", "--non-interactive",
            "--output", str(output),
        ])

        assert result.exit_code == 0, result.output
        data = json.loads(output.read_text(encoding="utf-8"))
        assert data["request"] == {
            "templateId": 42,
            "lettersParams": [
                {"Name": "John", "Email": "john@x.com", "Note": "Top"},
                {"Name": "Jane", "Email": "jane@x.com"},
            ],
        }
        mock_client.create_bulk.assert_not_called()

    def test_submit_with_notifications(self, runner, letters_csv, tmp_path, mock_client):
        recipients = tmp_path / "recipients.csv"
        recipients.write_text("Name,Email\nJohn,john@x.com\nJane,jane@x.com\n", encoding="utf-8")

        result = runner.invoke(cli, [
            "letters", str(letters_csv),
            "--template-id", "42",
            "--notify", "email",
            "--recipients", str(recipients),
            "--non-interactive",
        ])

        assert result.exit_code == 0, result.output
        request = mock_client.create_bulk.call_args.args[0]
        assert request.to_dict()["notificationMethod"] == "EMAIL"
        assert request.recipients == ["john@x.com", "jane@x.com"]
        assert "batch_123" in result.output

    def test_recipient_count_mismatch(self, runner, letters_csv, tmp_path, mock_client):
        recipients = tmp_path / "recipients.csv"
        recipients.write_text("Mobile\n91234567\n", encoding="utf-8")

        result = runner.invoke(cli, [
            "letters", str(letters_csv),
            "--template-id", "42",
            "--notify", "SMS",
            "--recipients", str(recipients),
            "--non-interactive",
        ])

        assert result.exit_code == 1
        assert "must match the number of entries" in result.output
        mock_client.create_bulk.assert_not_called()

    def test_notify_without_recipients(self, runner, letters_csv, mock_client):
        result = runner.invoke(cli, [
            "letters", str(letters_csv), "--template-id", "42", "--notify", "SMS", "--non-interactive",
        ])

        assert result.exit_code == 1
        assert "recipients file is required" in result.output

    def test_api_error(self, runner, letters_csv, mock_client):
        mock_client.create_bulk.side_effect = LettersApiError("Rate limit exceeded.", 429)

        result = runner.invoke(cli, [
            "letters", str(letters_csv), "--template-id", "42", "--non-interactive",
        ])

        assert result.exit_code == 1
        assert "Rate limit exceeded." in result.output
        assert mock_client.create_bulk.call_count == 1

    def test_interactive_flow(self, runner, letters_csv, mock_client):
        """Decline the optional field, keep mappings, confirm submission"""
        result = runner.invoke(
            cli,
            ["letters", str(letters_csv), "--template-id", "42"],
            input="n\nn\ny\n",
        )

        assert result.exit_code == 0, result.output
        request = mock_client.create_bulk.call_args.args[0]
        assert [letter.params for letter in request.letters] == [
            {"Name": "John", "Email": "john@x.com"},
            {"Name": "Jane", "Email": "jane@x.com"},
        ]

    def test_interactive_cancel(self, runner, letters_csv, mock_client):
        result = runner.invoke(
            cli,
            ["letters", str(letters_csv), "--template-id", "42"],
            input="n\nn\nn\n",
        )

        assert result.exit_code == 0, result.output
        assert "Submission cancelled" in result.output
        mock_client.create_bulk.assert_not_called()

    def test_bad_map_option(self, runner, letters_csv, mock_client):
        result = runner.invoke(cli, [
            "letters", str(letters_csv), "--template-id", "42", "--map", "Note", "--non-interactive",
        ])

        assert result.exit_code == 2
        assert "KEY=VALUE" in result.output

    def test_letters_template(self, runner, tmp_path, mock_client):
        output = tmp_path / "letters-template.csv"

        result = runner.invoke(cli, ["letters-template", "--template-id", "42", "--output", str(output)])

        assert result.exit_code == 0, result.output
        rows = read_csv(output)
        assert rows[0] == ["Name", "Email", "Note"]
        assert len(rows) == 4

    def test_templates(self, runner, mock_client):
        mock_client.list_templates.return_value = [
            LetterTemplate(id=1, name="Award", fields=[TargetField(n) for n in "ABCDE"]),
        ]

        result = runner.invoke(cli, ["templates", "--limit", "5"])

        assert result.exit_code == 0, result.output
        assert "Award" in result.output
        assert "+2 more" in result.output
        mock_client.list_templates.assert_called_once_with(5, None)

    def test_batch_status(self, runner, mock_client):
        mock_client.get_batch.return_value = {"batchId": "batch_123", "status": "completed"}

        result = runner.invoke(cli, ["batch-status", "batch_123"])

        assert result.exit_code == 0, result.output
        assert "status: completed" in result.output

    def test_preview(self, runner, tmp_path, mock_client):
        mock_client.preview_letter.return_value = "<p>Dear John</p>"
        output = tmp_path / "preview.html"

        result = runner.invoke(cli, [
            "preview", "--template-id", "42", "--param", "Name=John", "--output", str(output),
        ])

        assert result.exit_code == 0, result.output
        assert output.read_text(encoding="utf-8") == "<p>Dear John</p>"
        mock_client.preview_letter.assert_called_once_with(42, {"Name": "John"})
