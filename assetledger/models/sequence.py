"""
YearSequence model — Per-year counter behind item internal codes.
"""

from django.db import models
from django.utils.translation import gettext_lazy as _


class YearSequence(models.Model):
    """
    Last sequence number handed out for a calendar year.

    Only CodeAllocator touches this table, always with an atomic
    UPDATE ... SET last_number = last_number + 1 inside the same
    transaction that inserts the item consuming the code.
    The counter never decreases, so codes are never reused.
    """

    year = models.PositiveIntegerField(unique=True, verbose_name=_('Ano'))
    last_number = models.PositiveIntegerField(default=0, verbose_name=_('Último Número'))

    class Meta:
        verbose_name = _('Sequência Anual')
        verbose_name_plural = _('Sequências Anuais')
        ordering = ['year']

    def __str__(self) -> str:
        return f"{self.year}: {self.last_number}"
