"""
Management command to audit stock against the movement history.

Usage:
    python manage.py verify_ledger
    python manage.py verify_ledger --repair
"""

from django.core.management.base import BaseCommand

from assetledger import ledger
from assetledger.models import Item


class Command(BaseCommand):
    """Verify ledger consistency command."""

    help = 'Confere o estoque de cada item com o histórico de movimentações'

    def add_arguments(self, parser):
        parser.add_argument(
            '--repair',
            action='store_true',
            help='Recalcula o estoque dos itens divergentes'
        )

    def handle(self, *args, **options):
        checked = 0
        divergent = 0

        for item_id in Item.objects.order_by('pk').values_list('pk', flat=True):
            checked += 1
            audit = ledger.verify_item(item_id)
            if audit.is_consistent:
                continue

            divergent += 1
            code = Item.objects.values_list('internal_code', flat=True).get(pk=item_id)
            self.stdout.write(self.style.WARNING(
                f'{code}: estoque {audit.cached_stock}, histórico {audit.derived_stock}, '
                f'{len(audit.broken_links)} elo(s) quebrado(s)'
            ))
            if options['repair']:
                ledger.repair_item(item_id)

        summary = f'{checked} item(ns) verificado(s), {divergent} divergente(s)'
        if divergent:
            suffix = ' (corrigidos)' if options['repair'] else ''
            self.stdout.write(self.style.WARNING(summary + suffix))
        else:
            self.stdout.write(self.style.SUCCESS(summary))
