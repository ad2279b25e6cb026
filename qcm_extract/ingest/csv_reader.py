"""Hand-rolled CSV tokenizer for the spreadsheet exports.

The exports come from several editors, so rows may be short, carry a BOM or
Windows line endings, and quote cells containing commas or newlines. Cells are
always trimmed and fully blank lines are dropped.
"""
from __future__ import annotations

CsvRecord = dict[str, str]


class CsvFormatError(ValueError):
    pass


def _flush_row(row: list[str], rows: list[list[str]]) -> None:
    if any(cell for cell in row):
        rows.append(row)


def read_csv_rows(content: str) -> list[list[str]]:
    cleaned = (content or "").removeprefix("\ufeff").replace("\r", "")
    rows: list[list[str]] = []
    row: list[str] = []
    cell: list[str] = []
    in_quotes = False

    i = 0
    n = len(cleaned)
    while i < n:
        ch = cleaned[i]
        if ch == '"':
            if in_quotes and i + 1 < n and cleaned[i + 1] == '"':
                cell.append('"')
                i += 2
                continue
            in_quotes = not in_quotes
        elif ch == "," and not in_quotes:
            row.append("".join(cell).strip())
            cell = []
        elif ch == "\n" and not in_quotes:
            row.append("".join(cell).strip())
            _flush_row(row, rows)
            row = []
            cell = []
        else:
            cell.append(ch)
        i += 1

    if cell or row:
        row.append("".join(cell).strip())
        _flush_row(row, rows)
    return rows


def rows_to_records(rows: list[list[str]]) -> list[CsvRecord]:
    if not rows:
        return []
    headers = [h.strip() for h in rows[0]]
    records: list[CsvRecord] = []
    for row in rows[1:]:
        records.append({h: (row[idx] if idx < len(row) else "").strip() for idx, h in enumerate(headers)})
    return records


def read_csv_records(content: str) -> list[CsvRecord]:
    rows = read_csv_rows(content)
    if not rows:
        raise CsvFormatError("CSV input has no header row")
    return rows_to_records(rows)


def first_value(record: CsvRecord, *columns: str) -> str:
    for col in columns:
        value = (record.get(col) or "").strip()
        if value:
            return value
    return ""
