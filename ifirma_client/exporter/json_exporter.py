"""JSON exporter for mapped payloads."""
import json
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Mapping

from ifirma_client.api.ifirma_client import encode_body


class JsonExporter:
    """Export attribute trees and their wire payloads to JSON."""

    def export(
        self,
        output_file: Path,
        attributes: Mapping[str, Any],
        payload: Mapping[str, Any],
    ) -> None:
        """Export to JSON file."""
        output_file = Path(output_file)
        output_file.parent.mkdir(parents=True, exist_ok=True)

        data: Dict[str, Any] = {
            "metadata": {
                "created_at": datetime.now().isoformat(),
                "attribute_count": len(attributes),
            },
            "attributes": attributes,
            "payload": json.loads(encode_body(payload)),
        }

        with open(output_file, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, default=str, ensure_ascii=False)
