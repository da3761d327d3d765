"""
Ledger queries — read-only operations.

All methods are classmethod on Ledger and use no locking.
"""

from datetime import date, datetime, time

from django.conf import settings
from django.db.models import Count, QuerySet
from django.utils import timezone

from assetledger.conf import assetledger_settings
from assetledger.exceptions import NotFound, ValidationError
from assetledger.models.category import Category
from assetledger.models.enums import ItemStatus
from assetledger.models.item import Item
from assetledger.models.movement import Movement


class LedgerQueries:
    """Read-only ledger query methods."""

    @classmethod
    def list_movements(cls, item=None, limit: int | None = None) -> list[Movement]:
        """
        Movements newest-first.

        Args:
            item: Item instance or pk (None = all items)
            limit: Maximum rows (None = MOVEMENT_LIST_LIMIT)
        """
        if limit is None:
            limit = assetledger_settings.MOVEMENT_LIST_LIMIT
        if isinstance(limit, bool) or not isinstance(limit, int) or limit <= 0:
            raise ValidationError('INVALID_INPUT', field='limit', value=limit)

        qs = Movement.objects.select_related('item', 'item__category', 'user')
        if item is not None:
            qs = qs.filter(item_id=getattr(item, 'pk', item))

        return list(qs.order_by('-created_at', '-id')[:limit])

    @classmethod
    def low_stock(cls) -> list[Item]:
        """Items with current_stock <= min_stock, lowest stock first."""
        return list(
            Item.objects.low_stock()
            .select_related('category')
            .order_by('current_stock', 'internal_code')
        )

    @classmethod
    def get_item(cls, pk) -> Item:
        """
        Raises:
            NotFound('ITEM_NOT_FOUND')
        """
        try:
            return Item.objects.select_related('category').get(pk=pk)
        except (Item.DoesNotExist, ValueError, TypeError):
            raise NotFound('ITEM_NOT_FOUND', item_id=pk)

    @classmethod
    def get_item_by_code(cls, code: str) -> Item:
        """
        Lookup by internal code (what QR labels carry).

        Raises:
            NotFound('ITEM_NOT_FOUND')
        """
        try:
            return Item.objects.select_related('category').get(internal_code=(code or '').strip())
        except Item.DoesNotExist:
            raise NotFound('ITEM_NOT_FOUND', internal_code=code)

    @classmethod
    def list_categories(cls) -> QuerySet:
        """Categories by name, each annotated with item_count."""
        return Category.objects.annotate(item_count=Count('items')).order_by('name')

    @classmethod
    def list_items(cls) -> QuerySet:
        return Item.objects.select_related('category').order_by('-created_at', '-id')

    @classmethod
    def search_items(cls, query: str = '', category=None, status: str | None = None) -> QuerySet:
        """Name/code search, optionally filtered by category and status."""
        qs = cls.list_items().search(query)

        if category is not None:
            qs = qs.filter(category_id=getattr(category, 'pk', category))

        if status:
            if status not in ItemStatus.values:
                raise ValidationError('INVALID_STATUS', status=status)
            qs = qs.filter(status=status)

        return qs

    @classmethod
    def summary(cls) -> dict[str, int]:
        """Counters for dashboards: items, low stock, movements today."""
        if settings.USE_TZ:
            start_of_day = timezone.make_aware(datetime.combine(timezone.localdate(), time.min))
        else:
            start_of_day = datetime.combine(date.today(), time.min)
        return {
            'total_items': Item.objects.count(),
            'low_stock': Item.objects.low_stock().count(),
            'today_movements': Movement.objects.filter(created_at__gte=start_of_day).count(),
        }
