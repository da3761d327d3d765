"""
Django Asset Ledger — Estoque de ativos de TI com histórico auditável.

Uso:
    from assetledger import ledger, LedgerError

    item = ledger.create_item('Notebook Dell', category, min_stock=2)
    ledger.record_movement(item, user, 'inflow', 10)
    ledger.record_movement(item, user, 'outflow', 3)  # 10 → 7
"""


def __getattr__(name):
    """Lazy import to avoid circular imports during app loading."""
    if name == 'ledger':
        from assetledger.service import Ledger
        return Ledger
    elif name == 'LedgerError':
        from assetledger.exceptions import LedgerError
        return LedgerError
    elif name == 'InsufficientStock':
        from assetledger.exceptions import InsufficientStock
        return InsufficientStock
    elif name == 'Category':
        from assetledger.models.category import Category
        return Category
    elif name == 'Item':
        from assetledger.models.item import Item
        return Item
    elif name == 'Movement':
        from assetledger.models.movement import Movement
        return Movement
    elif name == 'ItemStatus':
        from assetledger.models.enums import ItemStatus
        return ItemStatus
    elif name == 'MovementType':
        from assetledger.models.enums import MovementType
        return MovementType
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    'ledger',
    'LedgerError',
    'InsufficientStock',
    'Category',
    'Item',
    'Movement',
    'ItemStatus',
    'MovementType',
]

__version__ = '0.1.0'
