"""Spreadsheet/CSV export module for resume-builder."""
from resume_builder.export.tabular import (
    CsvSink,
    ExcelSink,
    ExportArtifact,
    ExportError,
    export_filename,
    export_record,
    save_artifact,
)

__all__ = [
    "CsvSink",
    "ExcelSink",
    "ExportArtifact",
    "ExportError",
    "export_filename",
    "export_record",
    "save_artifact",
]
