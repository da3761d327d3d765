"""Django app configuration for Asset Ledger."""

from django.apps import AppConfig
from django.utils.translation import gettext_lazy as _


class AssetLedgerConfig(AppConfig):
    """Configuration for Asset Ledger app."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "assetledger"
    verbose_name = _("Inventário de Ativos")
