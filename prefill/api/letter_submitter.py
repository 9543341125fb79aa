"""Submit bulk letter requests to the Letters API."""
from pathlib import Path
from typing import Optional
import click
from colorama import Fore

from prefill.api.letters_client import LettersClient
from prefill.exporter.json_exporter import JsonExporter
from prefill.schema.models import BulkLetterRequest


class LetterSubmitter:
    """Submit a prepared bulk request once; never retries."""

    def __init__(self, client: LettersClient, exporter: Optional[JsonExporter] = None):
        """
        Initialize submitter.

        Args:
            client: LettersClient instance
            exporter: Writes the request body on dry runs
        """
        self.client = client
        self.exporter = exporter or JsonExporter()

    def submit(
        self,
        request: BulkLetterRequest,
        dry_run: bool = False,
        output_file: Optional[Path] = None,
    ) -> dict:
        """
        Submit the request, or write it to disk on a dry run.

        Args:
            request: Prepared bulk request
            dry_run: If True, do not call the API
            output_file: Where a dry run writes the request body

        Returns:
            {status: 'submitted'|'dry_run', letters: N, batch_id?: str, file?: str}
        """
        count = len(request.letters)
        noun = "letter" if count == 1 else "letters"

        click.echo(f"\n{Fore.CYAN}{'=' * 70}")
        click.echo(f"{Fore.CYAN}📤 SUBMITTING {count} {noun.upper()} (template {request.template_id})")
        if request.has_notification:
            click.echo(f"{Fore.CYAN}   with {request.notification_method.value} notifications")
        click.echo(f"{Fore.CYAN}{'=' * 70}\n")

        if dry_run:
            target = output_file or Path("letters-request.json")
            self.exporter.export(target, request)
            click.echo(f"   [DRY RUN] Request for {count} {noun} written to {target}")
            return {"status": "dry_run", "letters": count, "file": str(target)}

        batch_id = self.client.create_bulk(request)
        click.echo(
            f"{Fore.GREEN}✅ Batch ID: {batch_id}. {count} {noun} generated and sent successfully."
        )
        return {"status": "submitted", "letters": count, "batch_id": batch_id}
