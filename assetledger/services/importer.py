"""
Batch import — CSV rows into new items, one row at a time.

Usage:
    result = ledger.import_batch(csv_text, category)
    result.success_count   # 10
    result.errors          # ['Linha 4: Nome do item não informado']

Three header shapes are recognized:

    EXPORT    has an internal-code column; columns found by header name
              (what export_csv() produces, so exports can be re-imported)
    TEMPLATE  first header is "name" and a "current stock" header exists;
              fixed positions name, description, current stock, min stock, location
    FALLBACK  anything else; read as TEMPLATE, missing numbers count as 0

A failing row adds "Linha <n>: <reason>" to errors and the import goes on
with the next row. A row either creates its item completely or nothing.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from assetledger.conf import assetledger_settings
from assetledger.csvformat import Record, normalize_header, parse_records, sanitize_count
from assetledger.exceptions import LedgerError, ValidationError
from assetledger.models.enums import ItemStatus
from assetledger.services.catalog import MAX_STOCK, CatalogOperations

logger = logging.getLogger('assetledger')


class Layout(str, Enum):
    EXPORT = 'export'
    TEMPLATE = 'template'
    FALLBACK = 'fallback'


# Normalized header spellings (see normalize_header) per item field
HEADER_ALIASES = {
    'code': ('internal code', 'codigo interno'),
    'name': ('name', 'nome'),
    'description': ('description', 'descricao'),
    'current_stock': ('current stock', 'estoque atual'),
    'min_stock': ('min stock', 'minimum stock', 'estoque minimo'),
    'location': ('location', 'localizacao', 'local'),
}

TEMPLATE_COLUMNS = {
    'name': 0,
    'description': 1,
    'current_stock': 2,
    'min_stock': 3,
    'location': 4,
}


@dataclass
class ImportResult:
    """Tally of a batch import."""

    success_count: int = 0
    errors: list[str] = field(default_factory=list)
    layout: Layout = Layout.FALLBACK

    def as_dict(self) -> dict[str, Any]:
        """Serialize to dict (useful for APIs)."""
        return {
            'success_count': self.success_count,
            'errors': list(self.errors),
        }


def find_column(header: list[str], field_name: str) -> int | None:
    """Index of the first header matching any alias of field_name."""
    aliases = HEADER_ALIASES[field_name]
    for index, name in enumerate(header):
        if name in aliases:
            return index
    return None


def detect_layout(header_fields: list[str]) -> tuple[Layout, dict[str, int | None]]:
    """
    Classify the header row.

    Returns:
        (layout, {field: column index or None})
    """
    header = [normalize_header(name) for name in header_fields]

    if find_column(header, 'code') is not None:
        columns = {
            name: find_column(header, name)
            for name in TEMPLATE_COLUMNS
        }
        return Layout.EXPORT, columns

    if header and header[0] in HEADER_ALIASES['name'] \
            and find_column(header, 'current_stock') is not None:
        return Layout.TEMPLATE, dict(TEMPLATE_COLUMNS)

    return Layout.FALLBACK, dict(TEMPLATE_COLUMNS)


class BatchImport:
    """CSV reconciliation into the catalog."""

    @classmethod
    def import_batch(cls, raw_text: str, category) -> ImportResult:
        """
        Create one item per valid data row.

        Args:
            raw_text: CSV content (BOM allowed)
            category: Category (instance or pk) applied to every row

        Returns:
            ImportResult with success_count and per-line errors

        Raises:
            ValidationError('EMPTY_FILE'): No data rows after dropping blank ones
            ValidationError('MALFORMED_CSV'): Text the csv module cannot read (e.g. oversized field)
            ValidationError('TOO_MANY_ROWS'): More rows than IMPORT_MAX_ROWS

        Concurrency:
            - No batch-wide transaction: each row commits on its own
            - Row creation goes through CatalogOperations.create_item()
        """
        records = parse_records(raw_text)
        if len(records) < 2:
            raise ValidationError('EMPTY_FILE')

        header, body = records[0], records[1:]
        max_rows = assetledger_settings.IMPORT_MAX_ROWS
        if max_rows and len(body) > max_rows:
            raise ValidationError('TOO_MANY_ROWS', rows=len(body), maximum=max_rows)

        layout, columns = detect_layout(header.fields)
        result = ImportResult(layout=layout)

        for record in body:
            try:
                values = cls._read_row(record, columns)
                CatalogOperations.create_item(
                    category=category,
                    status=ItemStatus.AVAILABLE,
                    **values,
                )
                result.success_count += 1
            except LedgerError as exc:
                result.errors.append(f"Linha {record.line}: {exc.message}")

        logger.info(
            "ledger.import",
            extra={
                "layout": layout.value,
                "rows": len(body),
                "success": result.success_count,
                "errors": len(result.errors),
            },
        )
        return result

    @classmethod
    def _read_row(cls, record: Record, columns: dict[str, int | None]) -> dict[str, Any]:
        """Row fields as create_item() keyword arguments."""
        name = record.get(columns['name'])
        if not name:
            raise ValidationError('NAME_REQUIRED')

        return {
            'name': name,
            'description': record.get(columns['description']),
            'initial_stock': cls._count(record.get(columns['current_stock'])),
            'min_stock': cls._count(record.get(columns['min_stock'])),
            'location': record.get(columns['location']),
        }

    @classmethod
    def _count(cls, value: str) -> int:
        try:
            return sanitize_count(value, maximum=MAX_STOCK)
        except ValueError:
            raise ValidationError('UNPARSEABLE_QUANTITY', value=value)
