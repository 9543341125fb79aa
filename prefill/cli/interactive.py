"""Interactive CLI flows for link and letter generation."""
from pathlib import Path
from typing import Optional, Dict, List

import click
from colorama import Fore, Style

from config import AppConfig, app_config
from prefill.api.letter_submitter import LetterSubmitter
from prefill.api.letters_client import LettersClient
from prefill.builder.templates import link_template, letter_template
from prefill.cli.column_selector import ColumnSelector
from prefill.exporter.csv_exporter import CsvExporter
from prefill.mapper.mapping import FieldMapping
from prefill.parser.parser_factory import ParserFactory
from prefill.schema.models import ExportConfig, LetterTemplate, NotificationMethod
from prefill.services.letter_generator import LetterGenerator
from prefill.services.link_generator import LinkGenerator
from prefill.services.recipients import load_recipients
from prefill.validator.errors import StructuralCsvError


class InteractiveCLI:
    """Interactive CLI interface."""

    def __init__(self, config: Optional[AppConfig] = None, client: Optional[LettersClient] = None):
        """Initialize CLI."""
        self.config = config or app_config
        self.client = client or LettersClient(self.config.letters_api)
        self.exporter = CsvExporter()

    def print_header(self, title: str):
        """Print a section header."""
        click.echo(f"\n{Fore.CYAN}{'━' * 45}")
        click.echo(f"{Fore.CYAN}{title}")
        click.echo(f"{Fore.CYAN}{'━' * 45}{Style.RESET_ALL}\n")

    def _output_path(self, output: Optional[str], default_name: str) -> Path:
        if output:
            return Path(output)
        return Path(self.config.generation.output_dir) / default_name

    # ------------------------------------------------------------------
    # Links
    # ------------------------------------------------------------------

    def write_link_template(self, delimiter: str, output: Optional[str] = None) -> Path:
        headers, rows = link_template(delimiter)
        path = self.exporter.export(self._output_path(output, "form-prefill-template.csv"), headers, rows)
        click.echo(f"{Fore.GREEN}✅ Template written to {path}")
        return path

    def generate_links(
        self,
        csv_path: str,
        form_url: str,
        delimiter: str,
        strict: bool = False,
        export_config: Optional[ExportConfig] = None,
        transformers: Optional[Dict[str, str]] = None,
        output: Optional[str] = None,
    ) -> Path:
        """Import a links sheet, generate links and write the results CSV."""
        self.print_header("Step 1: Import CSV")
        table = ParserFactory.parse_file(csv_path)
        click.echo(f"{Fore.GREEN}✅ Parsed {table.row_count} rows")
        for warning in table.errors[:5]:
            click.echo(f"{Fore.YELLOW}   • {warning}")

        self.print_header("Step 2: Generate Links")
        generator = LinkGenerator(delimiter=delimiter, strict=strict, transformers=transformers)
        batch = generator.generate(form_url, table)

        click.echo(
            f"{Fore.GREEN}Found {len(batch.fields)} fields with {batch.max_values} values each"
        )
        for f in batch.fields:
            note = " (single value, applied to all)" if f.is_single_value else ""
            click.echo(f"   • {f.label}: {', '.join(f.values[:3])}{' ...' if len(f.values) > 3 else ''}{note}")

        for link in batch.links[:3]:
            click.echo(f"{Fore.CYAN}   {link.label}. {link.url}")
        if len(batch.links) > 3:
            click.echo(f"   ... and {len(batch.links) - 3} more")

        self.print_header("Step 3: Export Results")
        headers, rows = generator.export_table(batch, export_config)
        path = self.exporter.export(self._output_path(output, "prefilled-links.csv"), headers, rows)
        click.echo(f"{Fore.GREEN}✅ Generated {len(batch.links)} matched links → {path}")
        return path

    # ------------------------------------------------------------------
    # Letters
    # ------------------------------------------------------------------

    def load_template(self, template_id: int) -> LetterTemplate:
        template = self.client.get_template(template_id)
        if not template.fields:
            raise StructuralCsvError(f"Template {template_id} has no fields")

        required = sum(1 for f in template.fields if f.required)
        click.echo(
            f"{Fore.GREEN}Template loaded successfully with {len(template.fields)} fields "
            f"({required} required)"
        )
        return template

    def write_letter_template(self, template_id: int, output: Optional[str] = None) -> Path:
        template = self.load_template(template_id)
        headers, rows = letter_template(template.fields)
        path = self.exporter.export(
            self._output_path(output, f"letter-template-{template_id}.csv"), headers, rows
        )
        click.echo(f"{Fore.GREEN}✅ Example CSV written to {path}")
        return path

    def show_mapping(self, template: LetterTemplate, mapping: FieldMapping):
        for f in template.fields:
            header = mapping.get(f.name)
            icon = f"{Fore.GREEN}✓" if header else (f"{Fore.RED}✗" if f.required else f"{Fore.YELLOW}–")
            star = "*" if f.required else ""
            click.echo(f"{icon} {f.name}{star} → {header or 'unmapped'}{Style.RESET_ALL}")

    def edit_mapping(
        self,
        template: LetterTemplate,
        headers: List[str],
        mapping: FieldMapping,
    ) -> FieldMapping:
        """Let the user fix unmapped fields, then any others they choose."""
        selector = ColumnSelector(headers)

        for f in template.fields:
            if mapping.is_mapped(f.name):
                continue
            if f.required or click.confirm(f"Map optional field '{f.name}'?", default=False):
                mapping.set(f.name, selector.prompt_column(f.name, required=f.required))

        while click.confirm("Edit another mapping?", default=False):
            name = click.prompt("Field", type=click.Choice(template.field_names))
            target = next(f for f in template.fields if f.name == name)
            mapping.set(name, selector.prompt_column(name, mapping.get(name), target.required))

        return mapping

    def generate_letters(
        self,
        csv_path: str,
        template_id: int,
        manual_mapping: Optional[Dict[str, str]] = None,
        notify: Optional[NotificationMethod] = None,
        recipients_path: Optional[str] = None,
        recipient_column: Optional[str] = None,
        dry_run: bool = False,
        output: Optional[str] = None,
        interactive: bool = True,
    ) -> dict:
        """Map a sheet onto a letter template, validate and submit."""
        self.print_header("Step 1: Load Template")
        template = self.load_template(template_id)

        self.print_header("Step 2: Import CSV")
        table = ParserFactory.parse_file(csv_path)
        click.echo(f"{Fore.GREEN}✅ Parsed {table.row_count} rows, columns: {', '.join(table.headers)}")

        self.print_header("Step 3: Map Fields")
        generator = LetterGenerator(template)
        mapping = FieldMapping()
        for name, header in (manual_mapping or {}).items():
            if header not in table.headers:
                raise StructuralCsvError(f"Column not found: {header}")
            mapping.set(name, header)

        mapping = generator.suggest_mapping(table.headers, mapping)
        self.show_mapping(template, mapping)
        if interactive:
            mapping = self.edit_mapping(template, table.headers, mapping)

        self.print_header("Step 4: Validate")
        batch = generator.build(table, mapping)
        click.echo(f"{Fore.GREEN}✅ {len(batch.combinations)} letters ready")

        if notify is not None:
            if not recipients_path:
                raise StructuralCsvError("A recipients file is required when notifications are enabled")
            recipients_table = ParserFactory.parse_file(recipients_path)
            recipients = load_recipients(recipients_table, notify, recipient_column)
            generator.attach_recipients(batch.request, recipients, notify)
            click.echo(f"{Fore.GREEN}✅ {len(recipients)} recipients attached ({notify.value})")

        if not dry_run and interactive:
            if not click.confirm(f"Submit {len(batch.request.letters)} letters now?", default=True):
                click.echo(f"{Fore.YELLOW}Submission cancelled.")
                return {"status": "cancelled", "letters": len(batch.request.letters)}

        self.print_header("Step 5: Submit")
        submitter = LetterSubmitter(self.client)
        return submitter.submit(
            batch.request,
            dry_run=dry_run,
            output_file=self._output_path(output, "letters-request.json"),
        )

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def list_templates(self, limit: Optional[int] = None, offset: Optional[int] = None):
        self.print_header("Letter Templates")
        templates = self.client.list_templates(limit, offset)

        if not templates:
            click.echo(f"{Fore.YELLOW}No templates found for this API key.")
            return

        for t in templates:
            names = t.field_names
            more = f" +{len(names) - 3} more" if len(names) > 3 else ""
            click.echo(f"{t.id:>6}  {t.name:40s} Fields: {', '.join(names[:3])}{more}")

        click.echo(f"\n{Fore.GREEN}Found {len(templates)} templates.")

    def batch_status(self, batch_id: str):
        self.print_header(f"Batch {batch_id}")
        status = self.client.get_batch(batch_id)
        for key, value in status.items():
            click.echo(f"{key}: {value}")

    def preview(self, template_id: int, params: Dict[str, str], output: Optional[str] = None) -> Path:
        """Render one letter to an HTML file."""
        html = self.client.preview_letter(template_id, params)
        path = self._output_path(output, f"letter-preview-{template_id}.html")
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(html, encoding="utf-8")
        click.echo(f"{Fore.GREEN}✅ Preview written to {path}")
        return path


def build_export_config(
    label: Optional[str],
    include_url: bool,
    fields: List[str],
) -> ExportConfig:
    """Translate CLI options into an ExportConfig."""
    config = ExportConfig(include_url=include_url, label_field=label or None)
    for field_id in fields:
        config.toggle_field(field_id, True)
    if not config.include_url and not config.label_field and not config.additional_fields:
        raise StructuralCsvError("Export would contain no columns")
    return config
