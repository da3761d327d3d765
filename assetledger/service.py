"""
Ledger Service — The single public interface for all inventory operations.

Usage:
    from assetledger import ledger, InsufficientStock

    item = ledger.create_item('Mouse USB', category, min_stock=2)
    ledger.record_movement(item, user, 'inflow', 5)
    try:
        ledger.record_movement(item, user, 'outflow', 6)
    except InsufficientStock as e:
        print(e.available, e.requested)  # 5 6
"""

from assetledger.services.catalog import CatalogOperations
from assetledger.services.codes import CodeAllocator
from assetledger.services.exporter import CatalogExport
from assetledger.services.importer import BatchImport
from assetledger.services.movements import LedgerMovements
from assetledger.services.queries import LedgerQueries


class Ledger(CatalogOperations, LedgerMovements, LedgerQueries, BatchImport, CatalogExport):
    """
    Single interface for all ledger operations.

    Writes:
        create_item, update_item, delete_item
        create_category, update_category, delete_category
        record_movement
        import_batch
        repair_item

    Reads:
        list_movements, low_stock, get_item, get_item_by_code,
        list_items, list_categories, search_items, summary, verify_item, export_csv

    IMPORTANT: All state-changing methods use atomic transactions
    with row locking. See each method's docstring.
    """

    @classmethod
    def allocate_code(cls, year: int | None = None) -> str:
        """See CodeAllocator.allocate(). Call inside the transaction that uses the code."""
        return CodeAllocator.allocate(year)
