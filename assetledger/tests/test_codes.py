"""
Tests for internal code allocation.
"""

import threading
from datetime import date

import pytest
from django.db import IntegrityError, connection, transaction

from assetledger import ledger
from assetledger.exceptions import Conflict, ValidationError
from assetledger.models import Item, YearSequence
from assetledger.services.codes import CodeAllocator


pytestmark = pytest.mark.django_db


class TestAllocate:
    """Tests for CodeAllocator.allocate()."""

    def test_first_code_of_year(self):
        assert CodeAllocator.allocate(2030) == '2030-0001'

    def test_sequential(self):
        codes = [CodeAllocator.allocate(2030) for _ in range(3)]

        assert codes == ['2030-0001', '2030-0002', '2030-0003']

    def test_counter_is_per_year(self):
        CodeAllocator.allocate(2030)
        CodeAllocator.allocate(2030)

        assert CodeAllocator.allocate(2031) == '2031-0001'
        assert CodeAllocator.allocate(2030) == '2030-0003'

    def test_defaults_to_current_year(self):
        code = CodeAllocator.allocate()

        assert code == f"{date.today().year}-0001"

    def test_seeded_from_existing_codes(self, category):
        """Items created before the counter existed are not reused."""
        Item.objects.create(internal_code='2030-0041', name='Projetor', category=category)
        Item.objects.create(internal_code='2030-0007', name='Tela', category=category)

        assert CodeAllocator.allocate(2030) == '2030-0042'

    def test_widens_past_four_digits(self):
        YearSequence.objects.create(year=2030, last_number=9999)

        assert CodeAllocator.allocate(2030) == '2030-10000'

    def test_width_from_settings(self, settings):
        settings.ASSETLEDGER = {'CODE_SEQUENCE_WIDTH': 6}

        assert CodeAllocator.allocate(2030) == '2030-000001'

    def test_rolled_back_allocation_leaves_no_gap(self):
        with pytest.raises(RuntimeError):
            with transaction.atomic():
                CodeAllocator.allocate(2030)
                raise RuntimeError('insert failed')

        assert CodeAllocator.allocate(2030) == '2030-0001'


class TestParseCode:
    """Tests for CodeAllocator.parse_code()."""

    def test_parse(self):
        assert CodeAllocator.parse_code('2025-0012') == (2025, 12)

    def test_parse_wide_number(self):
        assert CodeAllocator.parse_code('2025-10000') == (2025, 10000)

    @pytest.mark.parametrize('code', ['', '25-0001', '2025/0001', 'ABCD-0001', None])
    def test_invalid(self, code):
        with pytest.raises(ValidationError) as exc:
            CodeAllocator.parse_code(code)

        assert exc.value.code == 'INVALID_CODE'


class TestItemCodes:
    """Code assignment through ledger.create_item()."""

    def test_items_get_consecutive_codes(self, category):
        first = ledger.create_item('Mouse', category, year=2030)
        second = ledger.create_item('Teclado', category, year=2030)

        assert first.internal_code == '2030-0001'
        assert second.internal_code == '2030-0002'

    def test_failed_insert_does_not_consume_code(self, category, monkeypatch):
        def collide(**kwargs):
            raise IntegrityError('UNIQUE constraint failed: assetledger_item.internal_code')

        monkeypatch.setattr(Item.objects, 'create', collide)

        with pytest.raises(Conflict) as exc:
            ledger.create_item('Mouse', category, year=2030)

        assert exc.value.code == 'DUPLICATE_CODE'
        assert exc.value.data['internal_code'] == '2030-0001'

        monkeypatch.undo()
        item = ledger.create_item('Mouse', category, year=2030)
        assert item.internal_code == '2030-0001'

    def test_code_is_immutable(self, item):
        item.internal_code = '1999-0001'

        with pytest.raises(ValueError):
            item.save()

    def test_code_required(self, category):
        with pytest.raises(ValueError):
            Item(name='Sem código', category=category).save()

    def test_allocate_code_on_facade(self):
        assert ledger.allocate_code(2030) == '2030-0001'


@pytest.mark.django_db(transaction=True)
class TestConcurrentAllocation:
    """Concurrent item creation never duplicates or skips a code."""

    def test_unique_and_gap_free(self, category):
        codes = []
        lock = threading.Lock()

        def create(index):
            try:
                item = ledger.create_item(f'Cadeira {index}', category.pk, year=2030)
            finally:
                connection.close()
            with lock:
                codes.append(item.internal_code)

        threads = [threading.Thread(target=create, args=(n,)) for n in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(codes) == 8
        numbers = sorted(CodeAllocator.parse_code(code)[1] for code in codes)
        assert numbers == list(range(1, 9))
        assert Item.objects.filter(internal_code__startswith='2030-').count() == 8
