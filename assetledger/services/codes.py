"""
Internal code allocation — sequential per calendar year (2025-0001, 2025-0002, ...).

The counter lives in YearSequence and is bumped with an atomic
UPDATE ... SET last_number = last_number + 1. The row lock taken by that
UPDATE is held until the surrounding transaction commits, so callers must
insert the item consuming the code in the same transaction:

    with transaction.atomic():
        code = CodeAllocator.allocate()
        Item.objects.create(internal_code=code, ...)

If the insert fails the counter increment is rolled back with it.
"""

import logging
import re
from datetime import date

from django.db import transaction
from django.db.models import F

from assetledger.conf import assetledger_settings
from assetledger.exceptions import ValidationError
from assetledger.models.item import Item
from assetledger.models.sequence import YearSequence

logger = logging.getLogger('assetledger')

CODE_PATTERN = re.compile(r'^(?P<year>\d{4})-(?P<number>\d+)$')


class CodeAllocator:
    """Allocates unique item codes."""

    @classmethod
    def allocate(cls, year: int | None = None) -> str:
        """
        Next internal code for the year (None = current year).

        Concurrency:
            - Runs under transaction.atomic() (a savepoint when nested)
            - get_or_create seeds the counter from existing codes once
            - F() increment serializes concurrent callers on the counter row
        """
        year = year or date.today().year

        with transaction.atomic():
            sequence, created = YearSequence.objects.get_or_create(
                year=year,
                defaults={'last_number': cls.highest_existing(year)},
            )
            YearSequence.objects.filter(pk=sequence.pk).update(
                last_number=F('last_number') + 1
            )
            sequence.refresh_from_db(fields=['last_number'])

        code = cls.format_code(year, sequence.last_number)
        logger.debug("ledger.code.allocate", extra={"year": year, "code": code})
        return code

    @classmethod
    def highest_existing(cls, year: int) -> int:
        """Highest sequence number already used by an item code for the year."""
        codes = Item.objects.filter(
            internal_code__startswith=f"{year}-"
        ).values_list('internal_code', flat=True)

        highest = 0
        for code in codes:
            match = CODE_PATTERN.match(code)
            if match:
                highest = max(highest, int(match['number']))
        return highest

    @classmethod
    def format_code(cls, year: int, number: int) -> str:
        width = assetledger_settings.CODE_SEQUENCE_WIDTH
        return f"{year}-{number:0{width}d}"

    @classmethod
    def parse_code(cls, code: str) -> tuple[int, int]:
        """
        Split a code into (year, number).

        Raises:
            ValidationError('INVALID_CODE'): If code is not YYYY-NNNN
        """
        match = CODE_PATTERN.match((code or '').strip())
        if not match:
            raise ValidationError('INVALID_CODE', internal_code=code)
        return int(match['year']), int(match['number'])
