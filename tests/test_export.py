"""Tests for Excel/CSV export."""

import csv
import io
from datetime import date
from unittest.mock import patch

import pytest
from openpyxl import load_workbook

from resume_builder.export import (
    CsvSink,
    ExportError,
    export_filename,
    export_record,
    save_artifact,
)
from resume_builder.export.tabular import build_career_sheet, build_resume_sheet
from resume_builder.models.resume import ResumeRecord

TODAY = date(2025, 4, 1)


def _sheet_values(ws) -> list[list]:
    return [[c for c in row if c is not None] for row in ws.iter_rows(values_only=True)]


class TestFilename:
    def test_with_name(self, sample_record):
        assert export_filename(sample_record, ".xlsx", TODAY) == "履歴書_山田太郎_2025-04-01.xlsx"

    def test_without_name(self):
        assert export_filename(ResumeRecord(), ".csv", TODAY) == "履歴書_未入力_2025-04-01.csv"


class TestRows:
    def test_resume_sheet_numbering(self, sample_record):
        rows = build_resume_sheet(sample_record)
        assert ["氏名", "山田太郎"] in rows
        i = rows.index(["職歴"])
        assert rows[i + 1] == ["1", "2017年〜現在 株式会社A 勤務\n営業"]
        assert rows[i + 2] == ["2", "2015年〜2017年 株式会社B 勤務"]

    def test_career_sheet_prefixes(self, sample_record):
        rows = build_career_sheet(sample_record)
        assert ["職歴1", "2017年〜現在 株式会社A 勤務\n営業"] in rows
        assert ["スキル1", "Excelが得意"] in rows
        assert ["資格1", "普通自動車免許"] in rows
        assert ["連絡先", "090-1234-5678"] in rows

    def test_placeholder_for_missing_scalars(self):
        rows = build_resume_sheet(ResumeRecord(), placeholder="-")
        assert ["氏名", "-"] in rows
        assert ["メールアドレス", "-"] in rows


class TestExcelExport:
    def test_two_sheets(self, sample_record):
        artifact = export_record(sample_record, "xlsx", today=TODAY)
        assert artifact.filename == "履歴書_山田太郎_2025-04-01.xlsx"
        assert artifact.mime.endswith("spreadsheetml.sheet")

        wb = load_workbook(io.BytesIO(artifact.data))
        assert wb.sheetnames == ["履歴書", "職務経歴書"]
        values = _sheet_values(wb["履歴書"])
        assert values[0] == ["履歴書"]
        assert ["氏名", "山田太郎"] in values
        assert ["1", "2017年 ○○大学 経済学部 卒業"] in values
        assert _sheet_values(wb["職務経歴書"])[0] == ["職務経歴書"]

    def test_empty_record(self):
        artifact = export_record(ResumeRecord(), "xlsx", today=TODAY)
        wb = load_workbook(io.BytesIO(artifact.data))
        assert ["氏名", "未入力"] in _sheet_values(wb["履歴書"])


class TestCsvExport:
    def test_bom_and_quoting(self, sample_record):
        artifact = export_record(sample_record, "csv", today=TODAY)
        assert artifact.filename.endswith(".csv")
        assert artifact.mime == "text/csv"
        assert artifact.data.startswith(b"\xef\xbb\xbf")

        text = artifact.data.decode("utf-8-sig")
        assert text.splitlines()[0] == '"項目","内容"'
        assert not text.endswith("\n")

    def test_rows(self, sample_record):
        text = export_record(sample_record, "csv", today=TODAY).data.decode("utf-8-sig")
        rows = list(csv.reader(io.StringIO(text)))
        assert rows[1] == ["氏名", "山田太郎"]
        assert ["学歴1", "2017年 ○○大学 経済学部 卒業"] in rows
        assert ["職歴1", "2017年〜現在 株式会社A 勤務\n営業"] in rows
        assert ["資格1", "普通自動車免許"] in rows

    def test_sink_rejects_multiple_sheets(self):
        with pytest.raises(ValueError, match="exactly one sheet"):
            CsvSink().render({"a": [], "b": []})


class TestExportRecord:
    def test_format_is_normalized(self, sample_record):
        artifact = export_record(sample_record, ".CSV", today=TODAY)
        assert artifact.filename.endswith(".csv")

    def test_unknown_format(self, sample_record):
        with pytest.raises(ValueError, match="Unsupported export format"):
            export_record(sample_record, "pdf")

    def test_render_failure_wrapped(self, sample_record):
        with patch(
            "resume_builder.export.tabular.ExcelSink.render", side_effect=OSError("disk full")
        ):
            with pytest.raises(ExportError):
                export_record(sample_record, "xlsx")

    def test_save_artifact(self, sample_record, tmp_path):
        artifact = export_record(sample_record, "csv", today=TODAY)
        path = save_artifact(artifact, tmp_path / "out")
        assert path == tmp_path / "out" / "履歴書_山田太郎_2025-04-01.csv"
        assert path.read_bytes() == artifact.data


class TestExcelCellSafety:
    def test_leading_equals_is_stored_as_text(self):
        record = ResumeRecord(name='=HYPERLINK("http://example.com","x")', skills=("=1+1",))
        artifact = export_record(record, "xlsx", today=TODAY)

        wb = load_workbook(io.BytesIO(artifact.data))
        cells = [c for ws in wb.worksheets for row in ws.iter_rows() for c in row]
        assert all(c.data_type != "f" for c in cells)
        assert ["1", "=1+1"] in _sheet_values(wb["履歴書"])

    def test_control_characters_are_removed(self):
        record = ResumeRecord(name="山田\x0b太郎", skills=("Excel\x00",))
        artifact = export_record(record, "xlsx", today=TODAY)

        wb = load_workbook(io.BytesIO(artifact.data))
        values = _sheet_values(wb["履歴書"])
        assert ["氏名", "山田太郎"] in values
        assert ["1", "Excel"] in values
