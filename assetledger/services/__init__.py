"""
Ledger services — modular organization of ledger operations.

    from assetledger.services import (
        CodeAllocator, CatalogOperations, LedgerMovements,
        LedgerQueries, BatchImport, CatalogExport,
    )
"""

from assetledger.services.catalog import CatalogOperations
from assetledger.services.codes import CodeAllocator
from assetledger.services.exporter import CatalogExport
from assetledger.services.importer import BatchImport, ImportResult
from assetledger.services.movements import LedgerAudit, LedgerMovements
from assetledger.services.queries import LedgerQueries

__all__ = [
    'CodeAllocator',
    'CatalogOperations',
    'LedgerMovements',
    'LedgerAudit',
    'LedgerQueries',
    'BatchImport',
    'ImportResult',
    'CatalogExport',
]
