"""CSV exporter."""
import csv
from pathlib import Path
from typing import List, Sequence


class CsvExporter:
    """Write tables to CSV files."""

    def export(
        self,
        output_file: Path,
        headers: Sequence[str],
        rows: Sequence[Sequence[str]],
    ) -> Path:
        """Export to CSV file."""
        output_file = Path(output_file)
        output_file.parent.mkdir(parents=True, exist_ok=True)

        with open(output_file, "w", newline="", encoding="utf-8") as f:
            writer = csv.writer(f)
            writer.writerow(list(headers))
            writer.writerows([list(row) for row in rows])

        return output_file
