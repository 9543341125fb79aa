"""JSON exporter."""
import json
from pathlib import Path
from datetime import datetime

from prefill.schema.models import BulkLetterRequest


class JsonExporter:
    """Export letter requests to JSON (dry runs)."""

    def export(
        self,
        output_file: Path,
        request: BulkLetterRequest,
    ) -> Path:
        """Export to JSON file."""
        output_file = Path(output_file)
        output_file.parent.mkdir(parents=True, exist_ok=True)

        data = {
            "metadata": {
                "created_at": datetime.now().isoformat(),
                "template_id": request.template_id,
                "letters": len(request.letters),
                "notification_method": (
                    request.notification_method.value if request.notification_method else None
                ),
            },
            "request": request.to_dict(),
        }

        with open(output_file, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, default=str)

        return output_file
