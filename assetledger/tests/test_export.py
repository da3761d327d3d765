"""
Tests for CSV export.
"""

from datetime import date

import pytest
from django.utils import timezone

from assetledger import ledger
from assetledger.csvformat import BOM, parse_records
from assetledger.models import Item
from assetledger.services.exporter import EXPORT_HEADER


pytestmark = pytest.mark.django_db


class TestExportCsv:
    """Tests for ledger.export_csv()."""

    def test_header_and_bom(self):
        text = ledger.export_csv([])

        assert text == BOM + ','.join(EXPORT_HEADER) + '\n'

    def test_row_values(self, stocked_item, category):
        text = ledger.export_csv([stocked_item])

        rows = parse_records(text)
        assert rows[1].fields == [
            stocked_item.internal_code,
            'Teclado ABNT2',
            '',
            category.name,
            '5',
            '2',
            'Almoxarifado B',
            'available',
            timezone.localtime(stocked_item.created_at).strftime('%d/%m/%Y'),
        ]

    def test_quotes_special_characters(self, category):
        item = ledger.create_item(
            'Cabo, HDMI', category, description='Modelo "Pro"\n2 metros',
        )

        text = ledger.export_csv([item])

        assert '"Cabo, HDMI"' in text
        assert '"Modelo ""Pro""\n2 metros"' in text

    def test_default_is_whole_catalog_newest_first(self, item, stocked_item):
        rows = parse_records(ledger.export_csv())

        assert [r.fields[0] for r in rows[1:]] == [
            stocked_item.internal_code,
            item.internal_code,
        ]

    def test_date_format_from_settings(self, item, settings):
        settings.ASSETLEDGER = {'EXPORT_DATE_FORMAT': '%Y-%m-%d'}

        rows = parse_records(ledger.export_csv([item]))

        assert rows[1].fields[-1] == timezone.localtime(item.created_at).strftime('%Y-%m-%d')

    def test_filename(self):
        assert ledger.export_filename() == f"inventario-{date.today().isoformat()}.csv"


class TestRoundTrip:
    """Exported files import back into equivalent items."""

    def test_export_then_import(self, category, other_category, user):
        ledger.create_item('Monitor 24', category, min_stock=2, initial_stock=4, location='Sala 1')
        cable = ledger.create_item('Cabo, HDMI', category, description='2 m\nblindado', initial_stock=9)
        ledger.record_movement(cable, user, 'outflow', 4)
        originals = list(Item.objects.all())

        result = ledger.import_batch(ledger.export_csv(originals), other_category)

        assert result.success_count == 2
        assert result.errors == []

        def snapshot(items):
            return sorted(
                (i.name, i.description, i.current_stock, i.min_stock, i.location)
                for i in items
            )

        copies = Item.objects.filter(category=other_category)
        assert snapshot(copies) == snapshot(originals)
        assert not set(c.internal_code for c in copies) & set(o.internal_code for o in originals)
