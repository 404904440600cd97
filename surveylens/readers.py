"""Read CSV and spreadsheet files into a header list plus row dicts.

The whole file is loaded at once.  Only the first worksheet of a workbook is
read, and the first row is always the header row.  Any failure to produce a
table surfaces as ``TableParseError`` before normalisation starts.
"""

from __future__ import annotations

import csv
import io
import logging
from dataclasses import dataclass, field
from pathlib import Path

from surveylens.models import Cell, Row

logger = logging.getLogger(__name__)

CSV_SUFFIXES = frozenset({".csv"})
EXCEL_SUFFIXES = frozenset({".xlsx", ".xlsm"})

# Tried in order; cp932 covers Shift_JIS exports from Japanese Excel.
_CSV_ENCODINGS = ("utf-8-sig", "utf-8", "cp932", "latin-1")


class TableParseError(ValueError):
    """The file could not be read as a table."""


@dataclass
class RawTable:
    """Headers and rows exactly as parsed, before shape detection."""

    headers: list[str]
    rows: list[Row] = field(default_factory=list)


def read_table(path: Path) -> RawTable:
    """Read a CSV or workbook file from disk."""
    try:
        data = path.read_bytes()
    except OSError as exc:
        msg = f"Could not read {path.name}: {exc}"
        raise TableParseError(msg) from exc
    return read_table_bytes(data, path.name)


def read_table_bytes(data: bytes, filename: str) -> RawTable:
    """Parse in-memory file contents, dispatching on the filename extension."""
    suffix = Path(filename).suffix.lower()
    if suffix in CSV_SUFFIXES:
        table = _parse_csv(data, filename)
    elif suffix in EXCEL_SUFFIXES:
        table = _parse_workbook(data, filename)
    else:
        msg = f"Unsupported file type: {filename} (use .csv or .xlsx)"
        raise TableParseError(msg)
    logger.info(
        "Read %s: %d columns, %d rows", filename, len(table.headers), len(table.rows)
    )
    return table


def _decode(data: bytes, filename: str) -> str:
    for encoding in _CSV_ENCODINGS:
        try:
            return data.decode(encoding)
        except UnicodeDecodeError:
            continue
    msg = f"Could not decode {filename} with any supported encoding"
    raise TableParseError(msg)


def _unique_headers(raw: list[object]) -> list[str]:
    """Name blank header cells ``__EMPTY``, ``__EMPTY_1``, ... and de-duplicate."""
    headers: list[str] = []
    seen: dict[str, int] = {}
    for value in raw:
        name = "" if value is None else str(value).strip()
        if not name:
            name = "__EMPTY"
        if name in seen:
            seen[name] += 1
            name = f"{name}_{seen[name]}"
            while name in seen:
                name = f"{name}_1"
        seen.setdefault(name, 0)
        headers.append(name)
    return headers


def _parse_csv(data: bytes, filename: str) -> RawTable:
    text = _decode(data, filename)
    try:
        records = list(csv.reader(io.StringIO(text, newline="")))
    except csv.Error as exc:
        msg = f"{filename}: malformed CSV ({exc})"
        raise TableParseError(msg) from exc

    records = [r for r in records if any(cell.strip() for cell in r)]
    if not records:
        msg = f"{filename}: no header row found"
        raise TableParseError(msg)

    headers = _unique_headers(list(records[0]))
    rows: list[Row] = []
    for record in records[1:]:
        row: Row = {}
        for header, value in zip(headers, record):
            if value != "":
                row[header] = value
        rows.append(row)
    return RawTable(headers=headers, rows=rows)


def _parse_workbook(data: bytes, filename: str) -> RawTable:
    from openpyxl import load_workbook

    try:
        wb = load_workbook(io.BytesIO(data), read_only=True, data_only=True)
    except Exception as exc:  # openpyxl raises zipfile/KeyError/InvalidFileException
        msg = f"{filename}: not a readable workbook ({exc})"
        raise TableParseError(msg) from exc

    try:
        if not wb.sheetnames:
            msg = f"{filename}: workbook has no sheets"
            raise TableParseError(msg)
        ws = wb[wb.sheetnames[0]]
        values = [list(r) for r in ws.iter_rows(values_only=True)]
    finally:
        wb.close()

    values = [r for r in values if any(_present(c) for c in r)]
    if not values:
        msg = f"{filename}: first sheet is empty"
        raise TableParseError(msg)

    headers = _unique_headers(values[0])
    rows: list[Row] = []
    for record in values[1:]:
        row: Row = {}
        for header, value in zip(headers, record):
            cell = _cell(value)
            if cell is not None:
                row[header] = cell
        rows.append(row)
    return RawTable(headers=headers, rows=rows)


def _present(value: object) -> bool:
    return value is not None and str(value).strip() != ""


def _cell(value: object) -> Cell:
    """Coerce an openpyxl cell value to ``str | int | float | None``."""
    if value is None:
        return None
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, (int, float)):
        return value
    text = str(value)
    return text if text.strip() else None
