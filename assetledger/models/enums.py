"""
Enums for Asset Ledger models.
"""

from django.db import models
from django.utils.translation import gettext_lazy as _


class ItemStatus(models.TextChoices):
    """Operational status of an asset (edited directly, not by the ledger)."""
    AVAILABLE = 'available', _('Disponível')
    IN_USE = 'in-use', _('Em uso')
    MAINTENANCE = 'maintenance', _('Manutenção')
    DISCARDED = 'discarded', _('Descartado')   # Archive for items with history


class MovementType(models.TextChoices):
    """
    Direction of a stock movement.

    INFLOW:  new_stock = previous_stock + quantity
    OUTFLOW: new_stock = previous_stock - quantity (never below zero)
    """
    INFLOW = 'inflow', _('Entrada')
    OUTFLOW = 'outflow', _('Saída')
