"""
Tests for CSV batch import.
"""

import logging

import pytest

from assetledger import ledger
from assetledger.csvformat import BOM
from assetledger.exceptions import ValidationError
from assetledger.models import Item, ItemStatus
from assetledger.services.importer import Layout, detect_layout


pytestmark = pytest.mark.django_db


TEMPLATE_HEADER = "Nome,Descrição,Estoque Atual,Estoque Mínimo,Localização\n"


class TestDetectLayout:

    def test_export_layout(self):
        layout, columns = detect_layout(['Location', 'Name', 'Internal Code', 'Current Stock'])

        assert layout == Layout.EXPORT
        assert columns['name'] == 1
        assert columns['location'] == 0
        assert columns['current_stock'] == 3
        assert columns['min_stock'] is None

    def test_portuguese_export_layout(self):
        layout, columns = detect_layout(['Código Interno', 'Nome', 'Estoque Atual'])

        assert layout == Layout.EXPORT
        assert columns['name'] == 1

    def test_template_layout(self):
        layout, columns = detect_layout(['Nome', 'Descrição', 'Estoque Atual', 'Estoque Mínimo', 'Localização'])

        assert layout == Layout.TEMPLATE
        assert columns == {'name': 0, 'description': 1, 'current_stock': 2, 'min_stock': 3, 'location': 4}

    def test_fallback_layout(self):
        layout, columns = detect_layout(['produto', 'qtd'])

        assert layout == Layout.FALLBACK
        assert columns['name'] == 0


class TestImportBatch:
    """Tests for ledger.import_batch()."""

    def test_template_rows(self, category, template_csv):
        result = ledger.import_batch(template_csv, category)

        assert result.success_count == 2
        assert result.errors == []
        assert result.layout == Layout.TEMPLATE

        monitor = Item.objects.get(name='Monitor 24')
        assert monitor.description == 'Full HD'
        assert monitor.current_stock == monitor.opening_stock == 10
        assert monitor.min_stock == 2
        assert monitor.location == 'Sala 1'
        assert monitor.category == category
        assert monitor.status == ItemStatus.AVAILABLE
        assert monitor.movements.count() == 0

    def test_each_row_gets_a_new_code(self, category, template_csv):
        ledger.import_batch(template_csv, category)

        codes = list(Item.objects.values_list('internal_code', flat=True))
        assert len(set(codes)) == 2

    def test_bad_rows_reported_with_their_line(self, category):
        lines = [TEMPLATE_HEADER.rstrip('\n')]
        lines += [f"Cadeira {n},Escritório,{n},1,Sala {n}" for n in range(1, 6)]  # lines 2-6
        lines.append(",Sem nome,3,1,Sala 9")                                      # line 7
        lines.append(",,,,")                                                       # line 8
        lines += [f"Mesa {n},Reunião,{n},0,Sala {n}" for n in range(1, 6)]        # lines 9-13
        lines.append("Servidor,Rack,99999999999,1,CPD")                            # line 14
        text = "\n".join(lines) + "\n"

        result = ledger.import_batch(text, category)

        assert result.success_count == 10
        assert result.errors == [
            'Linha 7: Nome do item não informado',
            'Linha 14: Quantidade ilegível',
        ]
        assert Item.objects.count() == 10
        assert not Item.objects.filter(name='Servidor').exists()

    def test_line_numbers_follow_multiline_fields(self, category):
        text = (
            TEMPLATE_HEADER
            + '"Cabo, HDMI","2 metros\nblindado",3,1,"Sala ""A"""\r\n'
            + ',sem nome,1,0,x\r\n'
        )

        result = ledger.import_batch(text, category)

        assert result.success_count == 1
        assert result.errors == ['Linha 4: Nome do item não informado']
        cable = Item.objects.get()
        assert cable.name == 'Cabo, HDMI'
        assert cable.description == '2 metros\nblindado'
        assert cable.location == 'Sala "A"'

    def test_non_numeric_counts_become_zero(self, category):
        text = TEMPLATE_HEADER + "Grampeador,,muitos,1.200 un,\n"

        result = ledger.import_batch(text, category)

        assert result.errors == []
        item = Item.objects.get(name='Grampeador')
        assert item.current_stock == 0
        assert item.min_stock == 1200

    def test_export_layout_in_any_column_order(self, category):
        text = (
            "Location,Min Stock,Name,Internal Code,Current Stock,Status\n"
            "Depósito,3,Projetor,2019-0001,7,in-use\n"
        )

        result = ledger.import_batch(text, category)

        assert result.layout == Layout.EXPORT
        projector = Item.objects.get(name='Projetor')
        assert projector.location == 'Depósito'
        assert projector.min_stock == 3
        assert projector.current_stock == 7
        # Codes are always freshly allocated; status resets to available
        assert projector.internal_code != '2019-0001'
        assert projector.status == ItemStatus.AVAILABLE

    def test_fallback_reads_template_positions(self, category):
        text = "produto,detalhe\nCaneta,Azul\n"

        result = ledger.import_batch(text, category)

        assert result.layout == Layout.FALLBACK
        pen = Item.objects.get(name='Caneta')
        assert pen.description == 'Azul'
        assert pen.current_stock == 0
        assert pen.min_stock == 0

    def test_bom_is_ignored(self, category, template_csv):
        result = ledger.import_batch(BOM + template_csv, category)

        assert result.layout == Layout.TEMPLATE
        assert result.success_count == 2

    @pytest.mark.parametrize('text', ['', TEMPLATE_HEADER, '\n\n,,\n', BOM])
    def test_empty_file(self, category, text):
        with pytest.raises(ValidationError) as exc:
            ledger.import_batch(text, category)

        assert exc.value.code == 'EMPTY_FILE'
        assert exc.value.message == 'CSV vazio'

    def test_too_many_rows(self, category, settings):
        settings.ASSETLEDGER = {'IMPORT_MAX_ROWS': 2}
        text = TEMPLATE_HEADER + "A,,1,0,\nB,,1,0,\nC,,1,0,\n"

        with pytest.raises(ValidationError) as exc:
            ledger.import_batch(text, category)

        assert exc.value.code == 'TOO_MANY_ROWS'
        assert Item.objects.count() == 0

    def test_unknown_category_fails_every_row(self, template_csv):
        result = ledger.import_batch(template_csv, 999999)

        assert result.success_count == 0
        assert result.errors == [
            'Linha 2: Categoria não encontrada',
            'Linha 3: Categoria não encontrada',
        ]

    def test_as_dict(self, category, template_csv):
        result = ledger.import_batch(template_csv + ",,5,0,\n", category)

        assert result.as_dict() == {
            'success_count': 2,
            'errors': ['Linha 4: Nome do item não informado'],
        }

    def test_logs_summary(self, category, template_csv, caplog):
        caplog.set_level(logging.INFO, logger='assetledger')

        ledger.import_batch(template_csv, category)

        assert 'ledger.import' in caplog.messages

    def test_oversized_field_rejects_file(self, category):
        text = TEMPLATE_HEADER + "Monitor,Full HD,1,0,\nCabo,\"" + 'x' * 200_000 + "\",1,0,\n"

        with pytest.raises(ValidationError) as exc:
            ledger.import_batch(text, category)

        assert exc.value.code == 'MALFORMED_CSV'
        assert Item.objects.count() == 0
