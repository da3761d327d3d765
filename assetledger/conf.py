"""
Asset Ledger configuration.

Usage in settings.py:
    ASSETLEDGER = {
        "CODE_SEQUENCE_WIDTH": 4,
        "MOVEMENT_LIST_LIMIT": 50,
        "EXPORT_DATE_FORMAT": "%d/%m/%Y",
        "IMPORT_MAX_ROWS": 5000,
    }
"""

from dataclasses import dataclass
from typing import Any

from django.conf import settings


@dataclass
class AssetLedgerSettings:
    """Asset Ledger configuration settings."""

    # Digits of the sequential part of internal codes (2025-0001)
    CODE_SEQUENCE_WIDTH: int = 4

    # Default page size for list_movements()
    MOVEMENT_LIST_LIMIT: int = 50

    # strftime format of the "Created Date" export column
    EXPORT_DATE_FORMAT: str = "%d/%m/%Y"

    # Maximum data rows accepted by a single CSV import
    IMPORT_MAX_ROWS: int = 5000


def get_assetledger_settings() -> AssetLedgerSettings:
    """Load settings from Django settings."""
    user_settings: dict[str, Any] = getattr(settings, "ASSETLEDGER", {})
    return AssetLedgerSettings(**{
        k: v for k, v in user_settings.items()
        if k in AssetLedgerSettings.__dataclass_fields__
    })


class _LazySettings:
    """Lazy proxy that re-reads settings on every attribute access."""

    def __getattr__(self, name):
        return getattr(get_assetledger_settings(), name)


assetledger_settings = _LazySettings()
