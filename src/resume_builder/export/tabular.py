"""Spreadsheet and CSV export of a ResumeRecord."""

from __future__ import annotations

import csv
import io
import logging
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Protocol

from openpyxl import Workbook
from openpyxl.cell.cell import ILLEGAL_CHARACTERS_RE

from resume_builder.models.resume import ResumeRecord

logger = logging.getLogger(__name__)

DEFAULT_PLACEHOLDER = "未入力"

Row = list[str]


class ExportError(RuntimeError):
    """Writing the export file failed."""


@dataclass(frozen=True)
class ExportArtifact:
    filename: str
    data: bytes
    mime: str


class TabularSink(Protocol):
    suffix: str
    mime: str

    def render(self, sheets: dict[str, list[Row]]) -> bytes: ...


# ---------------------------------------------------------------------------
# Row builders
# ---------------------------------------------------------------------------


def _numbered(items: tuple[str, ...], prefix: str = "") -> list[Row]:
    return [[f"{prefix}{i}", item] for i, item in enumerate(items, 1)]


def build_resume_sheet(record: ResumeRecord, placeholder: str = DEFAULT_PLACEHOLDER) -> list[Row]:
    """Rows for the 履歴書 sheet."""
    return [
        ["履歴書"],
        [""],
        ["基本情報"],
        ["氏名", record.display("name", placeholder)],
        ["生年月日", record.display("birth_date", placeholder)],
        ["住所", record.display("address", placeholder)],
        ["電話番号", record.display("phone", placeholder)],
        ["メールアドレス", record.display("email", placeholder)],
        [""],
        ["学歴"],
        *_numbered(record.education),
        [""],
        ["職歴"],
        *_numbered(record.experience),
        [""],
        ["資格・免許"],
        *_numbered(record.qualifications),
        [""],
        ["スキル・特技"],
        *_numbered(record.skills),
    ]


def build_career_sheet(record: ResumeRecord, placeholder: str = DEFAULT_PLACEHOLDER) -> list[Row]:
    """Rows for the 職務経歴書 sheet."""
    return [
        ["職務経歴書"],
        [""],
        ["基本情報"],
        ["氏名", record.display("name", placeholder)],
        ["生年月日", record.display("birth_date", placeholder)],
        ["連絡先", record.display("phone", placeholder)],
        ["メールアドレス", record.display("email", placeholder)],
        [""],
        ["職務経歴"],
        *_numbered(record.experience, "職歴"),
        [""],
        ["保有スキル・技術"],
        *_numbered(record.skills, "スキル"),
        [""],
        ["保有資格"],
        *_numbered(record.qualifications, "資格"),
    ]


def build_csv_rows(record: ResumeRecord, placeholder: str = DEFAULT_PLACEHOLDER) -> list[Row]:
    """Single-table (項目, 内容) layout used for CSV."""
    return [
        ["項目", "内容"],
        ["氏名", record.display("name", placeholder)],
        ["生年月日", record.display("birth_date", placeholder)],
        ["住所", record.display("address", placeholder)],
        ["電話番号", record.display("phone", placeholder)],
        ["メールアドレス", record.display("email", placeholder)],
        [""],
        ["学歴", ""],
        *_numbered(record.education, "学歴"),
        [""],
        ["職歴", ""],
        *_numbered(record.experience, "職歴"),
        [""],
        ["資格・免許", ""],
        *_numbered(record.qualifications, "資格"),
        [""],
        ["スキル・特技", ""],
        *_numbered(record.skills, "スキル"),
    ]


# ---------------------------------------------------------------------------
# Sinks
# ---------------------------------------------------------------------------


class ExcelSink:
    """One worksheet per entry in ``sheets``, in insertion order.

    Every value is written as a plain string; control characters that the
    xlsx format cannot hold are removed.
    """

    suffix = ".xlsx"
    mime = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

    def render(self, sheets: dict[str, list[Row]]) -> bytes:
        wb = Workbook()
        wb.remove(wb.active)
        for title, rows in sheets.items():
            ws = wb.create_sheet(title=title)
            for row in rows:
                ws.append([ILLEGAL_CHARACTERS_RE.sub("", value) for value in row])
                # user text starting with "=" stays text, never a formula
                for cell in ws[ws.max_row]:
                    if isinstance(cell.value, str):
                        cell.data_type = "s"
        buf = io.BytesIO()
        wb.save(buf)
        return buf.getvalue()


class CsvSink:
    """UTF-8 with BOM so Excel opens Japanese text correctly; all fields quoted."""

    suffix = ".csv"
    mime = "text/csv"

    def render(self, sheets: dict[str, list[Row]]) -> bytes:
        if len(sheets) != 1:
            raise ValueError(f"CSV holds exactly one sheet, got {len(sheets)}")
        (rows,) = sheets.values()
        buf = io.StringIO()
        writer = csv.writer(buf, quoting=csv.QUOTE_ALL, lineterminator="\n")
        writer.writerows(rows)
        # no trailing newline after the last row
        return ("\ufeff" + buf.getvalue().rstrip("\n")).encode("utf-8")


SINKS: dict[str, type] = {"xlsx": ExcelSink, "csv": CsvSink}


# ---------------------------------------------------------------------------
# Facade
# ---------------------------------------------------------------------------


def export_filename(
    record: ResumeRecord,
    suffix: str,
    today: date | None = None,
    placeholder: str = DEFAULT_PLACEHOLDER,
) -> str:
    """'履歴書_山田太郎_2025-04-01.xlsx'."""
    today = today or date.today()
    return f"履歴書_{record.display('name', placeholder)}_{today.isoformat()}{suffix}"


def export_record(
    record: ResumeRecord,
    fmt: str = "xlsx",
    today: date | None = None,
    placeholder: str = DEFAULT_PLACEHOLDER,
) -> ExportArtifact:
    """Serialize ``record`` as xlsx (履歴書 + 職務経歴書 sheets) or csv."""
    fmt = fmt.lower().lstrip(".")
    if fmt not in SINKS:
        raise ValueError(f"Unsupported export format: {fmt} (choose from {', '.join(SINKS)})")
    sink: TabularSink = SINKS[fmt]()

    if fmt == "xlsx":
        sheets = {
            "履歴書": build_resume_sheet(record, placeholder),
            "職務経歴書": build_career_sheet(record, placeholder),
        }
    else:
        sheets = {"履歴書": build_csv_rows(record, placeholder)}

    try:
        data = sink.render(sheets)
    except Exception as e:
        logger.exception("%s export failed", fmt)
        raise ExportError("エクスポートに失敗しました。再度お試しください。") from e

    return ExportArtifact(
        filename=export_filename(record, sink.suffix, today, placeholder),
        data=data,
        mime=sink.mime,
    )


def save_artifact(artifact: ExportArtifact, output_dir: str | Path) -> Path:
    """Write the artifact into ``output_dir`` and return its path."""
    path = Path(output_dir) / artifact.filename
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(artifact.data)
    return path
