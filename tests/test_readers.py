"""Tests for reading CSV and workbook files into raw tables."""

from __future__ import annotations

import io
from pathlib import Path

import pytest
from openpyxl import Workbook

from surveylens.readers import TableParseError, read_table, read_table_bytes


def _xlsx_bytes(*sheets: list[list[object]]) -> bytes:
    wb = Workbook()
    wb.remove(wb.active)
    for i, rows in enumerate(sheets):
        ws = wb.create_sheet(f"Sheet{i + 1}")
        for row in rows:
            ws.append(row)
    buffer = io.BytesIO()
    wb.save(buffer)
    return buffer.getvalue()


# ---------------------------------------------------------------------------
# CSV
# ---------------------------------------------------------------------------


class TestReadCsv:
    def test_headers_and_rows(self) -> None:
        data = "回答者ID,部署,Q1\n001,営業部,4\n002,開発部,5\n".encode()
        table = read_table_bytes(data, "survey.csv")
        assert table.headers == ["回答者ID", "部署", "Q1"]
        assert table.rows == [
            {"回答者ID": "001", "部署": "営業部", "Q1": "4"},
            {"回答者ID": "002", "部署": "開発部", "Q1": "5"},
        ]

    def test_utf8_bom(self) -> None:
        data = b"\xef\xbb\xbf" + "回答者ID,Q1\n001,4\n".encode()
        table = read_table_bytes(data, "survey.csv")
        assert table.headers == ["回答者ID", "Q1"]

    def test_shift_jis(self) -> None:
        data = "回答者ID,部署\n001,営業部\n".encode("cp932")
        table = read_table_bytes(data, "survey.csv")
        assert table.headers == ["回答者ID", "部署"]
        assert table.rows[0]["部署"] == "営業部"

    def test_blank_rows_skipped(self) -> None:
        data = b"ID,Q1\n\n1,4\n,\n2,5\n"
        table = read_table_bytes(data, "survey.csv")
        assert [r["ID"] for r in table.rows] == ["1", "2"]

    def test_empty_cells_absent(self) -> None:
        table = read_table_bytes(b"ID,Q1,Q2\n1,,3\n", "survey.csv")
        assert table.rows == [{"ID": "1", "Q2": "3"}]

    def test_blank_and_duplicate_headers(self) -> None:
        table = read_table_bytes(b"a,,b,,a\n1,2,3,4,5\n", "survey.csv")
        assert table.headers == ["a", "__EMPTY", "b", "__EMPTY_1", "a_1"]

    def test_empty_file(self) -> None:
        with pytest.raises(TableParseError, match="no header row"):
            read_table_bytes(b"", "survey.csv")

    def test_uppercase_extension(self) -> None:
        assert read_table_bytes(b"ID\n1\n", "SURVEY.CSV").headers == ["ID"]


# ---------------------------------------------------------------------------
# Workbooks
# ---------------------------------------------------------------------------


class TestReadWorkbook:
    def test_first_sheet_only(self) -> None:
        data = _xlsx_bytes(
            [["回答者ID", "Q1"], ["001", 4], ["002", 3.5]],
            [["other"], ["ignored"]],
        )
        table = read_table_bytes(data, "survey.xlsx")
        assert table.headers == ["回答者ID", "Q1"]
        assert table.rows == [{"回答者ID": "001", "Q1": 4}, {"回答者ID": "002", "Q1": 3.5}]

    def test_numeric_headers_become_text(self) -> None:
        data = _xlsx_bytes([["質問", 5, 4, 3], ["設問", "そう思う", "普通", "思わない"]])
        table = read_table_bytes(data, "freq.xlsx")
        assert table.headers == ["質問", "5", "4", "3"]

    def test_blank_header_cells(self) -> None:
        data = _xlsx_bytes([["番号", None, "5"], [1, "質問文", 3]])
        table = read_table_bytes(data, "freq.xlsx")
        assert table.headers == ["番号", "__EMPTY", "5"]
        assert table.rows[0]["__EMPTY"] == "質問文"

    def test_empty_rows_and_cells(self) -> None:
        data = _xlsx_bytes([["ID", "Q1"], [None, None], ["1", None]])
        table = read_table_bytes(data, "survey.xlsx")
        assert table.rows == [{"ID": "1"}]

    def test_empty_sheet(self) -> None:
        with pytest.raises(TableParseError, match="empty"):
            read_table_bytes(_xlsx_bytes([]), "survey.xlsx")

    def test_not_a_workbook(self) -> None:
        with pytest.raises(TableParseError, match="not a readable workbook"):
            read_table_bytes(b"plain text", "survey.xlsx")


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------


class TestReadTable:
    def test_reads_file_from_disk(self, tmp_path: Path) -> None:
        path = tmp_path / "survey.csv"
        path.write_text("ID,Q1\n1,4\n", encoding="utf-8")
        assert read_table(path).rows == [{"ID": "1", "Q1": "4"}]

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(TableParseError, match="Could not read"):
            read_table(tmp_path / "nope.csv")

    def test_unsupported_extension(self) -> None:
        with pytest.raises(TableParseError, match="Unsupported file type"):
            read_table_bytes(b"ID\n1\n", "survey.txt")

    def test_parse_error_is_a_value_error(self) -> None:
        with pytest.raises(ValueError):
            read_table_bytes(b"", "survey.json")
