"""Transaction export package."""

from pinee.export.csv_export import (
    CSV_HEADER,
    CsvExporter,
    ExportError,
    ExportFileSystemError,
    NoDataFoundError,
    export_filename,
    translate_frequency,
    translate_status,
    type_label,
)

__all__ = [
    "CSV_HEADER",
    "CsvExporter",
    "ExportError",
    "ExportFileSystemError",
    "NoDataFoundError",
    "export_filename",
    "translate_frequency",
    "translate_status",
    "type_label",
]
