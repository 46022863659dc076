"""
Export of the in-memory error log to standalone files.

Unlike the rest of the pipeline, export failures are raised to the caller
as ExportError.
"""

import csv
import io
import json
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import List, Sequence, Union

from faultline.models.error import ErrorRecord
from faultline.services.error_log import json_default
from faultline.utils.logging import get_logger


logger = get_logger(__name__)

CSV_COLUMNS = ("timestamp", "id", "type", "severity", "message", "component", "operation")
SUPPORTED_FORMATS = ("json", "csv")


class ExportError(Exception):
    """Raised when the error log cannot be exported."""
    pass


def records_to_json(records: Sequence[ErrorRecord]) -> str:
    """Pretty-printed JSON array of full records."""
    return json.dumps([record.model_dump() for record in records], indent=2, default=json_default)


def records_to_csv(records: Sequence[ErrorRecord]) -> str:
    """
    Fixed seven-column CSV projection of the records.

    Every field, header included, is double-quoted with embedded quotes
    doubled.
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(CSV_COLUMNS)
    for record in records:
        row = record.model_dump(include=set(CSV_COLUMNS))
        writer.writerow(_csv_value(row.get(column)) for column in CSV_COLUMNS)
    return buffer.getvalue()


def _csv_value(value) -> str:
    if value is None:
        return ""
    if isinstance(value, str) and not isinstance(value, Enum):
        return value
    return str(json_default(value))


class LogExporter:
    """Writes error log exports into a directory."""

    def __init__(self, directory: Union[str, Path]):
        self.directory = Path(directory)

    def export(self, records: List[ErrorRecord], fmt: str = "json") -> Path:
        """
        Write records to ``error-export-<timestamp>.<fmt>``.

        Args:
            records: Records to export, in order
            fmt: 'json' or 'csv'

        Returns:
            Path of the written file

        Raises:
            ExportError: If the format is unsupported or the write fails
        """
        fmt = (fmt or "").lower()
        if fmt not in SUPPORTED_FORMATS:
            raise ExportError(f"Failed to export error logs: unsupported format '{fmt}'")

        stamp = datetime.now(timezone.utc).isoformat().replace(":", "-").replace(".", "-")
        path = self.directory / f"error-export-{stamp}.{fmt}"

        try:
            content = records_to_json(records) if fmt == "json" else records_to_csv(records)
            self.directory.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
        except Exception as e:
            logger.error(f"Failed to export error logs to {path}: {e}", exc_info=True)
            raise ExportError(f"Failed to export error logs: {e}") from e

        logger.info(
            f"Exported {len(records)} error records",
            extra={"export_format": fmt, "export_path": str(path)},
        )
        return path
