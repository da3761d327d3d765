"""
Management command to import items from a CSV file.

Usage:
    python manage.py import_inventory estoque.csv --category 3
    python manage.py import_inventory estoque.csv --category "Periféricos"
"""

from pathlib import Path

from django.core.management.base import BaseCommand, CommandError

from assetledger import ledger
from assetledger.exceptions import LedgerError
from assetledger.models import Category


class Command(BaseCommand):
    """Import inventory CSV command."""

    help = 'Importa itens de um arquivo CSV para o inventário'

    def add_arguments(self, parser):
        parser.add_argument('path', help='Arquivo CSV (exportação ou modelo)')
        parser.add_argument(
            '--category',
            required=True,
            help='ID ou nome da categoria aplicada a todos os itens'
        )
        parser.add_argument(
            '--encoding',
            default='utf-8-sig',
            help='Codificação do arquivo (padrão: utf-8-sig)'
        )

    def handle(self, *args, **options):
        path = Path(options['path'])
        try:
            text = path.read_text(encoding=options['encoding'])
        except (OSError, UnicodeDecodeError) as exc:
            raise CommandError(f'Não foi possível ler {path}: {exc}')

        category = self._find_category(options['category'])

        try:
            result = ledger.import_batch(text, category)
        except LedgerError as exc:
            raise CommandError(exc.message)

        for error in result.errors:
            self.stderr.write(error)

        self.stdout.write(
            self.style.SUCCESS(f'{result.success_count} item(ns) importado(s)')
        )
        if result.errors:
            self.stdout.write(self.style.WARNING(f'{len(result.errors)} linha(s) com erro'))

    def _find_category(self, value):
        lookup = {'pk': value} if value.isdigit() else {'name__iexact': value}
        category = Category.objects.filter(**lookup).first()
        if category is None:
            raise CommandError(f'Categoria não encontrada: {value}')
        return category
