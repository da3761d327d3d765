"""
Item model — Catalog entry whose stock is owned by the ledger.
"""

from django.db import models
from django.db.models import F, Q
from django.utils.translation import gettext_lazy as _

from assetledger.models.enums import ItemStatus


class ItemQuerySet(models.QuerySet):
    """Custom QuerySet for Item with convenience filters."""

    def low_stock(self):
        """Items at or below their advisory minimum."""
        return self.filter(current_stock__lte=F('min_stock'))

    def search(self, query: str):
        """Case-insensitive match on name or internal code."""
        query = (query or '').strip()
        if not query:
            return self
        return self.filter(Q(name__icontains=query) | Q(internal_code__icontains=query))


class Item(models.Model):
    """
    Inventory item.

    Ownership:
    - name, description, category, serial_number, min_stock, status,
      location: direct edits (Catalog)
    - current_stock: ONLY Movement.save() writes it
    - internal_code: assigned once by CodeAllocator, never changes

    current_stock is a cache of the movement history:
        opening_stock ± quantity of every Movement, in creation order.
    Use replay() for audit.
    """

    internal_code = models.CharField(
        max_length=20,
        unique=True,
        editable=False,
        verbose_name=_('Código Interno'),
        help_text=_('Formato AAAA-NNNN, sequencial por ano'),
    )
    name = models.CharField(max_length=200, verbose_name=_('Nome'))
    description = models.TextField(blank=True, default='', verbose_name=_('Descrição'))
    category = models.ForeignKey(
        'assetledger.Category',
        on_delete=models.PROTECT,
        related_name='items',
        verbose_name=_('Categoria'),
    )
    serial_number = models.CharField(
        max_length=100,
        blank=True,
        default='',
        verbose_name=_('Número de Série'),
    )

    # Stock cache (updated atomically by Movement)
    current_stock = models.PositiveIntegerField(
        default=0,
        editable=False,
        verbose_name=_('Estoque Atual'),
    )
    opening_stock = models.PositiveIntegerField(
        default=0,
        editable=False,
        verbose_name=_('Estoque Inicial'),
        help_text=_('Estoque na criação (ex: importação CSV). Base para auditoria.'),
    )
    min_stock = models.PositiveIntegerField(
        default=0,
        verbose_name=_('Estoque Mínimo'),
    )

    status = models.CharField(
        max_length=20,
        choices=ItemStatus.choices,
        default=ItemStatus.AVAILABLE,
        db_index=True,
        verbose_name=_('Status'),
    )
    location = models.CharField(max_length=200, blank=True, default='', verbose_name=_('Localização'))

    created_at = models.DateTimeField(auto_now_add=True, verbose_name=_('Criado em'))
    updated_at = models.DateTimeField(auto_now=True, verbose_name=_('Atualizado em'))

    objects = ItemQuerySet.as_manager()

    class Meta:
        verbose_name = _('Item')
        verbose_name_plural = _('Itens')
        ordering = ['-created_at']
        constraints = [
            models.CheckConstraint(
                condition=Q(current_stock__gte=0),
                name='assetledger_item_stock_non_negative',
            ),
        ]
        indexes = [
            models.Index(fields=['category', 'status'], name='assetledger_item_cat_idx'),
        ]

    @classmethod
    def from_db(cls, db, field_names, values):
        instance = super().from_db(db, field_names, values)
        instance._loaded_code = instance.__dict__.get('internal_code')
        return instance

    def save(self, *args, **kwargs):
        """Save item, refusing to change an assigned internal code."""
        if not self.internal_code:
            raise ValueError("Código interno deve ser alocado antes de salvar o item")

        loaded = getattr(self, '_loaded_code', None)
        if loaded and loaded != self.internal_code:
            raise ValueError(
                f"Código interno é imutável ({loaded} → {self.internal_code})"
            )

        super().save(*args, **kwargs)
        self._loaded_code = self.internal_code

    # ══════════════════════════════════════════════════════════════
    # PROPERTIES
    # ══════════════════════════════════════════════════════════════

    @property
    def is_low_stock(self) -> bool:
        return self.current_stock <= self.min_stock

    # ══════════════════════════════════════════════════════════════
    # METHODS
    # ══════════════════════════════════════════════════════════════

    def replay(self) -> tuple[int, list[dict]]:
        """
        Rebuild stock from the movement history.

        Walks movements in creation order starting at opening_stock and
        collects every link where previous_stock does not match the
        running value.

        Returns:
            (derived_stock, broken_links)
        """
        running = self.opening_stock
        broken = []

        for movement in self.movements.order_by('created_at', 'id'):
            if movement.previous_stock != running:
                broken.append({
                    'movement_id': movement.pk,
                    'expected_previous': running,
                    'recorded_previous': movement.previous_stock,
                })
            running = movement.apply(running)

        return running, broken

    def __str__(self) -> str:
        return f"{self.internal_code} {self.name}"
