"""
CSV helpers shared by import and export.

Parsing rules:
- A leading BOM is stripped (spreadsheets add one)
- RFC-4180 quoting: commas and newlines inside "..." are literal, "" is one quote
- \\n and \\r\\n line endings
- Fields are trimmed; records whose fields are all empty are dropped
- Every record keeps the 1-based line number where it starts in the source,
  so error messages point at the line the user sees in their editor
"""

import csv
import io
import re
import unicodedata
from dataclasses import dataclass

from assetledger.exceptions import ValidationError

BOM = '\ufeff'

_NON_DIGITS = re.compile(r'[^0-9]')
_SPACES = re.compile(r'\s+')


@dataclass(frozen=True)
class Record:
    """One parsed CSV record."""

    line: int
    fields: list[str]

    def get(self, index: int | None, default: str = '') -> str:
        """Field at index, or default when the column is absent."""
        if index is None or index < 0 or index >= len(self.fields):
            return default
        return self.fields[index]

    @property
    def is_blank(self) -> bool:
        return not any(self.fields)


def strip_bom(text: str) -> str:
    if text.startswith(BOM):
        return text[len(BOM):]
    return text


def parse_records(text: str) -> list[Record]:
    """
    Split CSV text into non-blank records.

    Returns:
        Records in source order, each tagged with its starting line.

    Raises:
        ValidationError('MALFORMED_CSV'): Unreadable CSV (e.g. field over csv.field_size_limit())
    """
    reader = csv.reader(
        io.StringIO(strip_bom(text or ''), newline=''),
        skipinitialspace=True,
    )

    records = []
    start = 1
    try:
        for row in reader:
            record = Record(line=start, fields=[field.strip() for field in row])
            # reader.line_num = physical lines consumed so far (quoted newlines included)
            start = reader.line_num + 1
            if not record.is_blank:
                records.append(record)
    except csv.Error as exc:
        raise ValidationError(
            'MALFORMED_CSV',
            f"Linha {start}: CSV malformado ({exc})",
            line=start,
        ) from exc
    return records


def normalize_header(name: str) -> str:
    """
    Lowercase, strip diacritics and collapse whitespace.

    'Estoque  Mínimo' -> 'estoque minimo'
    """
    decomposed = unicodedata.normalize('NFKD', name or '')
    ascii_only = ''.join(ch for ch in decomposed if not unicodedata.combining(ch))
    return _SPACES.sub(' ', ascii_only.strip().strip('"').lower()).strip()


def sanitize_count(value: str, maximum: int | None = None) -> int:
    """
    Keep only digits: '1.200 un' -> 1200, '' -> 0, 'n/a' -> 0.

    Raises:
        ValueError: If the digits exceed maximum
    """
    digits = _NON_DIGITS.sub('', value or '').lstrip('0')
    if not digits:
        return 0
    if maximum is not None and len(digits) > len(str(maximum)):
        raise ValueError(f"{value!r} exceeds {maximum}")
    number = int(digits)
    if maximum is not None and number > maximum:
        raise ValueError(f"{value!r} exceeds {maximum}")
    return number


def render_csv(header: list[str], rows: list[list], bom: bool = True) -> str:
    """
    Serialize rows with minimal quoting (fields with commas, quotes or
    newlines are double-quoted) and \\n line endings.
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator='\n')
    writer.writerow(header)
    writer.writerows(rows)
    return (BOM if bom else '') + buffer.getvalue()
