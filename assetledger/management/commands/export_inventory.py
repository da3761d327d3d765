"""
Management command to export the catalog as CSV.

Usage:
    python manage.py export_inventory
    python manage.py export_inventory --output inventario.csv
"""

from django.core.management.base import BaseCommand

from assetledger import ledger


class Command(BaseCommand):
    """Export inventory CSV command."""

    help = 'Exporta o inventário em CSV (UTF-8 com BOM)'

    def add_arguments(self, parser):
        parser.add_argument(
            '--output',
            help='Arquivo de saída (padrão: inventario-AAAA-MM-DD.csv)'
        )

    def handle(self, *args, **options):
        path = options['output'] or ledger.export_filename()
        items = list(ledger.list_items())
        content = ledger.export_csv(items)

        with open(path, 'w', encoding='utf-8', newline='') as fh:
            fh.write(content)

        self.stdout.write(self.style.SUCCESS(f'{len(items)} item(ns) exportado(s) para {path}'))
