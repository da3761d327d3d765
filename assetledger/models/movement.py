"""
Movement model — Immutable ledger of stock changes.
"""

from django.conf import settings
from django.db import models, transaction
from django.db.models import F, Q
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from assetledger.models.enums import MovementType


class Movement(models.Model):
    """
    Immutable record of a stock change with before/after snapshot.

    Rules:
    - NEVER update() or delete()
    - Corrections are new Movements in the opposite direction
    - previous_stock/new_stock are captured at creation, never recomputed
    - Updates Item.current_stock atomically on save()

    This is the ONLY model that changes stock.
    """

    item = models.ForeignKey(
        'assetledger.Item',
        on_delete=models.PROTECT,
        related_name='movements',
        verbose_name=_('Item'),
    )
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name='+',
        verbose_name=_('Usuário'),
    )

    type = models.CharField(
        max_length=10,
        choices=MovementType.choices,
        verbose_name=_('Tipo'),
    )
    quantity = models.PositiveIntegerField(verbose_name=_('Quantidade'))

    # Audit snapshot
    previous_stock = models.PositiveIntegerField(verbose_name=_('Estoque Anterior'))
    new_stock = models.PositiveIntegerField(verbose_name=_('Novo Estoque'))

    destination = models.CharField(
        max_length=200,
        blank=True,
        default='',
        verbose_name=_('Destino'),
    )
    observation = models.TextField(blank=True, default='', verbose_name=_('Observação'))

    created_at = models.DateTimeField(default=timezone.now, db_index=True, verbose_name=_('Data/Hora'))

    class Meta:
        verbose_name = _('Movimentação')
        verbose_name_plural = _('Movimentações')
        ordering = ['-created_at', '-id']
        constraints = [
            models.CheckConstraint(
                condition=Q(quantity__gt=0),
                name='assetledger_movement_quantity_positive',
            ),
            models.CheckConstraint(
                condition=Q(new_stock__gte=0),
                name='assetledger_movement_new_stock_non_negative',
            ),
            models.CheckConstraint(
                condition=(
                    Q(type='inflow', new_stock=F('previous_stock') + F('quantity'))
                    | Q(type='outflow', new_stock=F('previous_stock') - F('quantity'))
                ),
                name='assetledger_movement_balance',
            ),
        ]
        indexes = [
            models.Index(fields=['item', 'created_at'], name='assetledger_mov_item_idx'),
        ]

    @property
    def signed_quantity(self) -> int:
        if self.type == MovementType.OUTFLOW:
            return -self.quantity
        return self.quantity

    def apply(self, stock: int) -> int:
        """Stock after applying this movement to `stock`."""
        return stock + self.signed_quantity

    def save(self, *args, **kwargs):
        """Save movement and move the item's stock cache atomically."""
        # Immutability check
        if self.pk:
            raise ValueError(
                "Movimentações são imutáveis. "
                "Para corrigir, registre uma nova movimentação no sentido oposto."
            )

        if self.new_stock != self.apply(self.previous_stock) or self.new_stock < 0:
            raise ValueError(
                f"Snapshot inconsistente: {self.previous_stock} "
                f"{self.signed_quantity:+d} ≠ {self.new_stock}"
            )

        with transaction.atomic():
            super().save(*args, **kwargs)

            # Import here to avoid circular import
            from assetledger.exceptions import Conflict
            from assetledger.models.item import Item

            # Compare-and-set: the snapshot must extend the current chain
            updated = Item.objects.filter(
                pk=self.item_id,
                current_stock=self.previous_stock,
            ).update(
                current_stock=self.new_stock,
                updated_at=timezone.now(),
            )
            if updated != 1:
                raise Conflict(
                    'STALE_STOCK',
                    item_id=self.item_id,
                    previous_stock=self.previous_stock,
                )

    def delete(self, *args, **kwargs):
        """Prevent deletion — movements are immutable."""
        raise ValueError(
            "Movimentações são imutáveis. "
            "Para estornar, registre uma nova movimentação no sentido oposto."
        )

    def __str__(self) -> str:
        return f"{self.signed_quantity:+d} | {self.previous_stock} → {self.new_stock}"
