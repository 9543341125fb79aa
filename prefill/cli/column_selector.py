"""Interactive column selection from source headers."""
from typing import List, Optional
import click
from colorama import Fore

from prefill.mapper.heuristic import ColumnMatcher

SKIP = "SKIP"


class ColumnSelector:
    """Interactive selection of a source column for a target field."""

    def __init__(self, headers: List[str]):
        """Initialize selector."""
        self.headers = list(headers)

    def prompt_column(
        self,
        field_name: str,
        current: Optional[str] = None,
        required: bool = False,
    ) -> Optional[str]:
        """
        Prompt user to pick the column feeding field_name.

        Returns:
            Chosen header, or None when skipped
        """
        marker = f"{Fore.RED}*" if required else ""
        click.echo(f"\nField: {Fore.YELLOW}{field_name}{marker}")

        for i, header in enumerate(self.headers, 1):
            click.echo(f"{i:2d}. {header}")

        suggestions = ColumnMatcher.rank_headers(field_name, self.headers)
        if suggestions:
            hint = ", ".join(f"{h} ({ratio:.0%})" for h, ratio in suggestions)
            click.echo(f"{Fore.CYAN}Closest: {hint}")

        while True:
            selection = click.prompt(
                "Column number or name (SKIP to leave unmapped)",
                default=current or SKIP,
                type=str,
            ).strip()

            if selection.upper() == SKIP:
                return None

            if selection.isdigit():
                idx = int(selection) - 1
                if 0 <= idx < len(self.headers):
                    return self.headers[idx]
                click.echo(f"{Fore.RED}Invalid column number: {selection}")
                continue

            if selection in self.headers:
                return selection

            click.echo(f"{Fore.RED}Unknown column: {selection}")
