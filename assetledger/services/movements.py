"""
Stock movements — the only state-changing operations on stock.

All methods use atomic_operation() with row locking on the item.
"""

import logging
from dataclasses import dataclass, field

from django.contrib.auth import get_user_model

from assetledger.exceptions import InsufficientStock, NotFound, ValidationError
from assetledger.models.enums import MovementType
from assetledger.models.item import Item
from assetledger.models.movement import Movement
from assetledger.services.catalog import MAX_STOCK
from assetledger.transactions import atomic_operation

logger = logging.getLogger('assetledger')


@dataclass
class LedgerAudit:
    """Result of replaying an item's movement history."""

    item_id: int
    cached_stock: int
    derived_stock: int
    broken_links: list[dict] = field(default_factory=list)

    @property
    def is_consistent(self) -> bool:
        return self.cached_stock == self.derived_stock and not self.broken_links


class LedgerMovements:
    """State-changing stock movement methods."""

    @classmethod
    def record_movement(cls, item, user, type: str, quantity: int,
                        destination: str = '', observation: str = '') -> Movement:
        """
        Record an inflow or outflow and move the item's stock.

        Args:
            item: Item instance or pk
            user: User instance or pk (the actor)
            type: 'inflow' or 'outflow'
            quantity: Positive integer

        Returns:
            Created Movement with previous_stock/new_stock snapshot

        Raises:
            ValidationError('INVALID_QUANTITY'): If quantity is not a positive int,
                or an inflow would take the stock past MAX_STOCK
            ValidationError('INVALID_TYPE'): If type is not inflow/outflow
            ValidationError('USER_REQUIRED'): If user is None
            NotFound('ITEM_NOT_FOUND' | 'USER_NOT_FOUND')
            InsufficientStock: If outflow quantity > current_stock
            TransientStorageError: Database unavailable; nothing was written

        Concurrency:
            - Runs under atomic_operation()
            - Uses select_for_update() on the Item
            - Reads current_stock after the lock
            - Movement.save() writes the stock with compare-and-set
        """
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
            raise ValidationError('INVALID_QUANTITY', requested=quantity)
        if quantity > MAX_STOCK:
            raise ValidationError('INVALID_QUANTITY', requested=quantity, maximum=MAX_STOCK)
        if type not in MovementType.values:
            raise ValidationError('INVALID_TYPE', type=type)
        if user is None:
            raise ValidationError('USER_REQUIRED')

        item_id = getattr(item, 'pk', item)
        user_id = getattr(user, 'pk', user)

        with atomic_operation('record_movement'):
            if not get_user_model().objects.filter(pk=user_id).exists():
                raise NotFound('USER_NOT_FOUND', user_id=user_id)

            try:
                locked_item = Item.objects.select_for_update().get(pk=item_id)
            except (Item.DoesNotExist, ValueError, TypeError):
                raise NotFound('ITEM_NOT_FOUND', item_id=item_id)

            previous = locked_item.current_stock

            if type == MovementType.OUTFLOW:
                if quantity > previous:
                    raise InsufficientStock(
                        available=previous,
                        requested=quantity,
                        item_id=locked_item.pk,
                    )
                new = previous - quantity
            else:
                new = previous + quantity
                if new > MAX_STOCK:
                    raise ValidationError(
                        'INVALID_QUANTITY',
                        requested=quantity,
                        available=previous,
                        maximum=MAX_STOCK,
                    )

            movement = Movement.objects.create(
                item=locked_item,
                user_id=user_id,
                type=type,
                quantity=quantity,
                previous_stock=previous,
                new_stock=new,
                destination=(destination or '').strip(),
                observation=(observation or '').strip(),
            )

        logger.info(
            "ledger.movement",
            extra={
                "item_id": locked_item.pk,
                "code": locked_item.internal_code,
                "type": type,
                "qty": quantity,
                "previous_stock": previous,
                "new_stock": new,
                "user_id": user_id,
            },
        )
        if type == MovementType.OUTFLOW and new <= locked_item.min_stock:
            logger.warning(
                "ledger.low_stock",
                extra={
                    "item_id": locked_item.pk,
                    "code": locked_item.internal_code,
                    "current_stock": new,
                    "min_stock": locked_item.min_stock,
                },
            )
        return movement

    # ══════════════════════════════════════════════════════════════
    # AUDIT
    # ══════════════════════════════════════════════════════════════

    @classmethod
    def verify_item(cls, item) -> LedgerAudit:
        """
        Replay the item's history and compare with the cached stock.

        Read-only. See Item.replay().
        """
        item_id = getattr(item, 'pk', item)
        try:
            item = Item.objects.get(pk=item_id)
        except (Item.DoesNotExist, ValueError, TypeError):
            raise NotFound('ITEM_NOT_FOUND', item_id=item_id)

        derived, broken = item.replay()
        return LedgerAudit(
            item_id=item.pk,
            cached_stock=item.current_stock,
            derived_stock=derived,
            broken_links=broken,
        )

    @classmethod
    def repair_item(cls, item) -> LedgerAudit:
        """
        Rewrite the cached stock from the movement history.

        Use for:
        - Correction after detected inconsistency
        - Data migrated from systems that wrote stock directly

        Broken chain links are reported but not rewritten: movements are
        immutable.
        """
        item_id = getattr(item, 'pk', item)

        with atomic_operation('repair_item'):
            try:
                locked_item = Item.objects.select_for_update().get(pk=item_id)
            except (Item.DoesNotExist, ValueError, TypeError):
                raise NotFound('ITEM_NOT_FOUND', item_id=item_id)

            derived, broken = locked_item.replay()
            audit = LedgerAudit(
                item_id=locked_item.pk,
                cached_stock=locked_item.current_stock,
                derived_stock=derived,
                broken_links=broken,
            )

            if derived != locked_item.current_stock and derived >= 0:
                Item.objects.filter(pk=locked_item.pk).update(current_stock=derived)
                logger.warning(
                    f"Item {locked_item.internal_code} recalculated: "
                    f"{locked_item.current_stock} → {derived} "
                    f"(diff: {derived - locked_item.current_stock})",
                    extra={"item_id": locked_item.pk},
                )

        return audit
