"""
Asset Ledger Admin.

- Category: list + edit
- Item: edit catalog fields; code and stock read-only (codes allocated on add)
- Movement: read-only audit trail (timestamp, type, before → after)
"""

from django.contrib import admin
from django.db import transaction
from django.utils.translation import gettext_lazy as _

from assetledger.models import Category, Item, Movement
from assetledger.services.catalog import ITEM_EDITABLE_FIELDS
from assetledger.services.codes import CodeAllocator

# =========================================================================
# CATEGORY ADMIN
# =========================================================================


@admin.register(Category)
class CategoryAdmin(admin.ModelAdmin):
    """Category admin — editable."""

    list_display = ['name', 'icon', 'created_at']
    search_fields = ['name']
    readonly_fields = ['created_at']


# =========================================================================
# ITEM ADMIN
# =========================================================================


@admin.register(Item)
class ItemAdmin(admin.ModelAdmin):
    """Item admin — stock only changes via the ledger service."""

    list_display = ['internal_code', 'name', 'category', 'current_stock',
                    'min_stock', 'status', 'low_stock_display']
    list_filter = ['status', 'category']
    search_fields = ['internal_code', 'name', 'serial_number']
    readonly_fields = ['internal_code', 'current_stock', 'opening_stock',
                       'created_at', 'updated_at']

    def save_model(self, request, obj, form, change):
        if change:
            # Only catalog fields; current_stock on obj may be stale
            changed = form.changed_data if form is not None else ITEM_EDITABLE_FIELDS
            fields = [name for name in changed if name in ITEM_EDITABLE_FIELDS]
            obj.save(update_fields=[*fields, 'updated_at'])
            return
        with transaction.atomic():
            obj.internal_code = CodeAllocator.allocate()
            super().save_model(request, obj, form, change)

    def has_delete_permission(self, request, obj=None):
        # Items with history are archived (status=discarded), not deleted
        if obj is not None and obj.movements.exists():
            return False
        return super().has_delete_permission(request, obj)

    @admin.display(description=_('Estoque baixo?'), boolean=True)
    def low_stock_display(self, obj):
        return obj.is_low_stock


# =========================================================================
# MOVEMENT ADMIN (read-only audit trail)
# =========================================================================


@admin.register(Movement)
class MovementAdmin(admin.ModelAdmin):
    """Movement admin — read-only. Immutable audit trail."""

    list_display = ['created_at', 'item', 'type', 'quantity',
                    'previous_stock', 'new_stock', 'user', 'destination']
    list_filter = ['type', 'created_at']
    search_fields = ['item__internal_code', 'item__name', 'destination', 'observation']
    readonly_fields = ['item', 'user', 'type', 'quantity', 'previous_stock',
                       'new_stock', 'destination', 'observation', 'created_at']
    date_hierarchy = 'created_at'

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
