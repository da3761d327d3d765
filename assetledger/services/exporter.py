"""
Catalog export — CSV for spreadsheets, re-importable by BatchImport.
"""

from datetime import date

from django.utils import timezone

from assetledger.conf import assetledger_settings
from assetledger.csvformat import render_csv
from assetledger.models.item import Item

EXPORT_HEADER = [
    'Internal Code',
    'Name',
    'Description',
    'Category',
    'Current Stock',
    'Min Stock',
    'Location',
    'Status',
    'Created Date',
]


class CatalogExport:
    """CSV export of items."""

    @classmethod
    def export_csv(cls, items=None) -> str:
        """
        Render items as UTF-8 CSV text with a leading BOM.

        Args:
            items: Iterable of Item (None = whole catalog, newest first)
        """
        if items is None:
            items = Item.objects.select_related('category').order_by('-created_at', '-id')

        date_format = assetledger_settings.EXPORT_DATE_FORMAT
        rows = [
            [
                item.internal_code,
                item.name,
                item.description,
                item.category.name,
                item.current_stock,
                item.min_stock,
                item.location,
                item.status,
                cls._local(item.created_at).strftime(date_format),
            ]
            for item in items
        ]
        return render_csv(EXPORT_HEADER, rows)

    @classmethod
    def export_filename(cls) -> str:
        return f"inventario-{date.today().isoformat()}.csv"

    @classmethod
    def _local(cls, value):
        if timezone.is_aware(value):
            return timezone.localtime(value)
        return value
