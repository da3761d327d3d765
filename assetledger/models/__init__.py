"""
Asset Ledger Models.

Core models for the stock ledger:
- Category: Grouping of items
- Item: Catalog entry with stock cache
- Movement: Immutable ledger of stock changes
- YearSequence: Counter behind internal codes
"""

from assetledger.models.category import Category
from assetledger.models.enums import ItemStatus, MovementType
from assetledger.models.item import Item
from assetledger.models.movement import Movement
from assetledger.models.sequence import YearSequence

__all__ = [
    'ItemStatus',
    'MovementType',
    'Category',
    'Item',
    'Movement',
    'YearSequence',
]
