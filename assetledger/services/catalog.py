"""
Catalog operations — items and categories (create, edit, delete).

Stock is NOT editable here: current_stock only changes through
LedgerMovements.record_movement(). Item creation allocates the internal
code inside the same transaction as the insert.
"""

import logging

from django.db import IntegrityError, transaction
from django.db.models import ProtectedError

from assetledger.exceptions import Conflict, NotFound, ValidationError
from assetledger.models.category import Category
from assetledger.models.enums import ItemStatus
from assetledger.models.item import Item
from assetledger.services.codes import CodeAllocator
from assetledger.transactions import atomic_operation

logger = logging.getLogger('assetledger')

# Largest value a PositiveIntegerField stores on every supported backend
MAX_STOCK = 2147483647

ITEM_EDITABLE_FIELDS = (
    'name', 'description', 'category', 'serial_number',
    'min_stock', 'status', 'location',
)

# Not every backend enforces max_length
ITEM_MAX_LENGTHS = {
    'name': 200,
    'serial_number': 100,
    'location': 200,
}


def validate_lengths(**values) -> None:
    for field, value in values.items():
        limit = ITEM_MAX_LENGTHS.get(field)
        if limit is not None and len(value or '') > limit:
            raise ValidationError('INVALID_INPUT', field=field, max_length=limit)


def validate_count(value, field: str) -> int:
    """Non-negative int within storable range."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError('INVALID_QUANTITY', field=field, value=value)
    if value < 0 or value > MAX_STOCK:
        raise ValidationError('INVALID_QUANTITY', field=field, value=value)
    return value


class CatalogOperations:
    """Item and category persistence."""

    # ══════════════════════════════════════════════════════════════
    # ITEMS
    # ══════════════════════════════════════════════════════════════

    @classmethod
    def create_item(cls, name: str, category, min_stock: int = 0,
                    status: str = ItemStatus.AVAILABLE, location: str = '',
                    serial_number: str = '', initial_stock: int = 0,
                    description: str = '', year: int | None = None) -> Item:
        """
        Create item with a freshly allocated internal code.

        initial_stock becomes both current_stock and opening_stock;
        no Movement is created for it.

        Raises:
            ValidationError: Empty name, bad status or negative numbers
            NotFound('CATEGORY_NOT_FOUND'): Unknown category
            Conflict('DUPLICATE_CODE'): Code collided with an existing row
            TransientStorageError: Database unavailable (retry the call)

        Concurrency:
            - Runs under atomic_operation()
            - CodeAllocator holds the year counter lock until commit
        """
        name = (name or '').strip()
        if not name:
            raise ValidationError('NAME_REQUIRED')
        if status not in ItemStatus.values:
            raise ValidationError('INVALID_STATUS', status=status)
        validate_count(min_stock, 'min_stock')
        validate_count(initial_stock, 'initial_stock')
        validate_lengths(
            name=name,
            serial_number=(serial_number or '').strip(),
            location=(location or '').strip(),
        )

        with atomic_operation('create_item'):
            category = cls._resolve_category(category)
            code = CodeAllocator.allocate(year)

            try:
                with transaction.atomic():
                    item = Item.objects.create(
                        internal_code=code,
                        name=name,
                        description=(description or '').strip(),
                        category=category,
                        serial_number=(serial_number or '').strip(),
                        current_stock=initial_stock,
                        opening_stock=initial_stock,
                        min_stock=min_stock,
                        status=status,
                        location=(location or '').strip(),
                    )
            except IntegrityError as exc:
                raise Conflict('DUPLICATE_CODE', internal_code=code) from exc

        logger.info(
            "ledger.item.create",
            extra={
                "item_id": item.pk,
                "code": item.internal_code,
                "category_id": category.pk,
                "initial_stock": initial_stock,
            },
        )
        return item

    @classmethod
    def update_item(cls, item, **fields) -> Item:
        """
        Direct edit of catalog fields.

        Raises:
            ValidationError('READ_ONLY_FIELD'): current_stock, opening_stock,
                internal_code or any unknown field
            NotFound: Unknown item or category
        """
        forbidden = sorted(set(fields) - set(ITEM_EDITABLE_FIELDS))
        if forbidden:
            raise ValidationError('READ_ONLY_FIELD', fields=', '.join(forbidden))

        if 'name' in fields:
            fields['name'] = (fields['name'] or '').strip()
            if not fields['name']:
                raise ValidationError('NAME_REQUIRED')
        if 'status' in fields and fields['status'] not in ItemStatus.values:
            raise ValidationError('INVALID_STATUS', status=fields['status'])
        if 'min_stock' in fields:
            validate_count(fields['min_stock'], 'min_stock')
        validate_lengths(**{k: v for k, v in fields.items() if k in ITEM_MAX_LENGTHS})

        with atomic_operation('update_item'):
            locked = cls._lock_item(item)
            if 'category' in fields:
                fields['category'] = cls._resolve_category(fields['category'])

            for field, value in fields.items():
                setattr(locked, field, value)
            locked.save(update_fields=[*fields, 'updated_at'])

        logger.info(
            "ledger.item.update",
            extra={"item_id": locked.pk, "fields": sorted(fields)},
        )
        return locked

    @classmethod
    def delete_item(cls, item) -> None:
        """
        Hard delete an item without history.

        Items with movements are kept for audit: set status to
        'discarded' instead.

        Raises:
            Conflict('ITEM_HAS_MOVEMENTS'): Item is referenced by movements
            NotFound('ITEM_NOT_FOUND'): Unknown item
        """
        with atomic_operation('delete_item'):
            locked = cls._lock_item(item)
            if locked.movements.exists():
                raise Conflict('ITEM_HAS_MOVEMENTS', item_id=locked.pk)
            try:
                locked.delete()
            except ProtectedError as exc:
                raise Conflict('ITEM_HAS_MOVEMENTS', item_id=locked.pk) from exc

        logger.info("ledger.item.delete", extra={"item_id": locked.pk, "code": locked.internal_code})

    # ══════════════════════════════════════════════════════════════
    # CATEGORIES
    # ══════════════════════════════════════════════════════════════

    @classmethod
    def create_category(cls, name: str, description: str = '',
                        icon: str = 'fas fa-box') -> Category:
        """
        Raises:
            ValidationError('INVALID_INPUT'): Empty name
            Conflict('DUPLICATE_CATEGORY'): Name already used (case-insensitive)
        """
        name = (name or '').strip()
        if not name:
            raise ValidationError('INVALID_INPUT', field='name')

        with atomic_operation('create_category'):
            if Category.objects.filter(name__iexact=name).exists():
                raise Conflict('DUPLICATE_CATEGORY', name=name)
            try:
                with transaction.atomic():
                    return Category.objects.create(
                        name=name,
                        description=description or '',
                        icon=icon or 'fas fa-box',
                    )
            except IntegrityError as exc:
                raise Conflict('DUPLICATE_CATEGORY', name=name) from exc

    @classmethod
    def update_category(cls, category, **fields) -> Category:
        allowed = {'name', 'description', 'icon'}
        forbidden = sorted(set(fields) - allowed)
        if forbidden:
            raise ValidationError('READ_ONLY_FIELD', fields=', '.join(forbidden))

        with atomic_operation('update_category'):
            category = cls._resolve_category(category)
            if 'name' in fields:
                name = (fields['name'] or '').strip()
                if not name:
                    raise ValidationError('INVALID_INPUT', field='name')
                clash = Category.objects.filter(name__iexact=name).exclude(pk=category.pk)
                if clash.exists():
                    raise Conflict('DUPLICATE_CATEGORY', name=name)
                fields['name'] = name

            for field, value in fields.items():
                setattr(category, field, value)
            category.save(update_fields=list(fields))
            return category

    @classmethod
    def delete_category(cls, category) -> None:
        """
        Raises:
            Conflict('CATEGORY_IN_USE'): Category still has items
        """
        with atomic_operation('delete_category'):
            category = cls._resolve_category(category)
            if category.items.exists():
                raise Conflict('CATEGORY_IN_USE', category_id=category.pk)
            try:
                category.delete()
            except ProtectedError as exc:
                raise Conflict('CATEGORY_IN_USE', category_id=category.pk) from exc

    # ══════════════════════════════════════════════════════════════
    # INTERNALS
    # ══════════════════════════════════════════════════════════════

    @classmethod
    def _resolve_category(cls, category) -> Category:
        """Accept Category instance or pk."""
        pk = getattr(category, 'pk', category)
        try:
            return Category.objects.get(pk=pk)
        except (Category.DoesNotExist, ValueError, TypeError):
            raise NotFound('CATEGORY_NOT_FOUND', category_id=pk)

    @classmethod
    def _lock_item(cls, item) -> Item:
        """Fetch item row with select_for_update(). Accepts instance or pk."""
        pk = getattr(item, 'pk', item)
        try:
            return Item.objects.select_for_update().get(pk=pk)
        except (Item.DoesNotExist, ValueError, TypeError):
            raise NotFound('ITEM_NOT_FOUND', item_id=pk)
