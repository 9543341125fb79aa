#!/usr/bin/env python3
"""FormSG prefill and bulk letters tool - Entry point."""
import logging
import sys
from functools import wraps

import click
from colorama import Fore, Style, init

from config import app_config
from prefill.api.credentials import MissingCredentialsError
from prefill.api.letters_client import LettersApiError
from prefill.cli.interactive import InteractiveCLI, build_export_config
from prefill.schema.models import NotificationMethod
from prefill.validator.errors import PrefillError, AssemblyError

# Initialize colorama
init(autoreset=True)


def print_banner():
    """Print application banner."""
    click.echo(f"{Fore.CYAN}{'=' * 44}")
    click.echo(f"{Fore.CYAN}║   {Fore.WHITE}FormSG Prefill Tool{Fore.CYAN}                  ║")
    click.echo(f"{Fore.CYAN}║   {Fore.WHITE}Matched Links & Bulk Letters{Fore.CYAN}         ║")
    click.echo(f"{Fore.CYAN}{'=' * 44}{Style.RESET_ALL}")
    click.echo()


def handle_errors(func):
    """Report known failures in red and exit with status 1."""

    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except (PrefillError, LettersApiError, MissingCredentialsError, AssemblyError) as e:
            click.echo(f"{Fore.RED}❌ {e}", err=True)
            sys.exit(1)

    return wrapper


def parse_pairs(pairs, option):
    """Turn ('a=b', ...) into {'a': 'b'}."""
    result = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key.strip():
            raise click.BadParameter(f"expected KEY=VALUE, got '{pair}'", param_hint=option)
        result[key.strip()] = value.strip()
    return result


@click.group()
@click.version_option(version="0.1.0")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def cli(verbose):
    """Generate matched FormSG prefill links and bulk letters from spreadsheets."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@cli.command()
@click.argument("csv_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--form-url", required=True, help="Form URL, e.g. https://form.gov.sg/<form id>")
@click.option("--delimiter", default=None, help="Separator between values in the values column")
@click.option("--strict", is_flag=True, help="Reject fields with unequal value counts")
@click.option("--label", default=None, help="Label column: a FieldID, or 'index' for Entry N")
@click.option("--no-url", is_flag=True, help="Leave the Form URL column out of the export")
@click.option("--field", "fields", multiple=True, help="FieldID to add as an export column")
@click.option(
    "--transform",
    "transforms",
    multiple=True,
    help="Value cleaner per field, FIELD_ID=TRANSFORMER",
)
@click.option("--output", "-o", type=click.Path(dir_okay=False), help="Output CSV path")
@handle_errors
def links(csv_file, form_url, delimiter, strict, label, no_url, fields, transforms, output):
    """Generate matched prefill links from a FieldID/values sheet."""
    print_banner()

    generation = app_config.generation
    export_config = build_export_config(label, not no_url, list(fields))

    InteractiveCLI().generate_links(
        csv_file,
        form_url,
        delimiter if delimiter is not None else generation.values_delimiter,
        strict=strict or generation.strict_lengths,
        export_config=export_config,
        transformers=parse_pairs(transforms, "--transform"),
        output=output,
    )


@cli.command("links-template")
@click.option("--delimiter", default=None, help="Separator used in the example values")
@click.option("--output", "-o", type=click.Path(dir_okay=False), help="Output CSV path")
@handle_errors
def links_template(delimiter, output):
    """Write an example FieldID/values/description sheet."""
    InteractiveCLI().write_link_template(
        delimiter if delimiter is not None else app_config.generation.values_delimiter,
        output,
    )


@cli.command()
@click.argument("csv_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--template-id", required=True, type=int, help="Letter template id")
@click.option(
    "--notify",
    type=click.Choice([m.value for m in NotificationMethod], case_sensitive=False),
    default=None,
    help="Send notifications by SMS or EMAIL",
)
@click.option("--recipients", type=click.Path(exists=True, dir_okay=False), help="Recipients CSV")
@click.option("--recipient-column", default=None, help="Recipients column header")
@click.option("--map", "mappings", multiple=True, help="Field mapping, FIELD=HEADER")
@click.option("--dry-run", is_flag=True, help="Write the request JSON instead of submitting")
@click.option("--output", "-o", type=click.Path(dir_okay=False), help="Dry-run output path")
@click.option("--non-interactive", is_flag=True, help="Use automatic mapping without prompts")
@handle_errors
def letters(
    csv_file,
    template_id,
    notify,
    recipients,
    recipient_column,
    mappings,
    dry_run,
    output,
    non_interactive,
):
    """Generate bulk letters from a spreadsheet."""
    print_banner()

    result = InteractiveCLI().generate_letters(
        csv_file,
        template_id,
        manual_mapping=parse_pairs(mappings, "--map"),
        notify=NotificationMethod(notify.upper()) if notify else None,
        recipients_path=recipients,
        recipient_column=recipient_column,
        dry_run=dry_run,
        output=output,
        interactive=not non_interactive,
    )
    if result.get("batch_id"):
        click.echo(f"Check progress with: batch-status {result['batch_id']}")


@cli.command("letters-template")
@click.option("--template-id", required=True, type=int, help="Letter template id")
@click.option("--output", "-o", type=click.Path(dir_okay=False), help="Output CSV path")
@handle_errors
def letters_template(template_id, output):
    """Write an example CSV whose headers are the template's fields."""
    InteractiveCLI().write_letter_template(template_id, output)


@cli.command()
@click.option("--limit", type=int, default=None, help="Maximum templates to list")
@click.option("--offset", type=int, default=None, help="Templates to skip")
@handle_errors
def templates(limit, offset):
    """List letter templates available to the API key."""
    InteractiveCLI().list_templates(limit, offset)


@cli.command("batch-status")
@click.argument("batch_id")
@handle_errors
def batch_status(batch_id):
    """Show the status of a submitted batch."""
    InteractiveCLI().batch_status(batch_id)


@cli.command()
@click.option("--template-id", required=True, type=int, help="Letter template id")
@click.option("--param", "params", multiple=True, help="Letter parameter, KEY=VALUE")
@click.option("--output", "-o", type=click.Path(dir_okay=False), help="Output HTML path")
@handle_errors
def preview(template_id, params, output):
    """Render one letter to HTML without sending anything."""
    InteractiveCLI().preview(template_id, parse_pairs(params, "--param"), output)


@cli.command()
def config_api():
    """Configure Letters API credentials for this session."""
    print_banner()

    click.echo(f"{Fore.YELLOW}Letters API Configuration")
    click.echo(f"{Fore.YELLOW}{'=' * 30}")

    base_url = click.prompt("API Base URL", default=app_config.letters_api.base_url)
    api_key = click.prompt("API Key", hide_input=True, default="")

    app_config.letters_api.base_url = base_url
    app_config.letters_api.api_key = api_key

    click.echo(f"{Fore.GREEN}✅ Configuration saved!")
    click.echo(f"{Fore.YELLOW}Set LETTERS_API_URL and LETTERS_API_KEY to keep it across runs.")


if __name__ == "__main__":
    cli()
