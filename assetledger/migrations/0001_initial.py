"""
Initial migration for Asset Ledger models.
"""

import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):
    """Create Asset Ledger models: Category, Item, Movement, YearSequence."""

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Category',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=100, unique=True, verbose_name='Nome')),
                ('description', models.TextField(blank=True, default='', verbose_name='Descrição')),
                ('icon', models.CharField(default='fas fa-box', help_text='Classe do ícone exibido na interface', max_length=50, verbose_name='Ícone')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='Criado em')),
            ],
            options={
                'verbose_name': 'Categoria',
                'verbose_name_plural': 'Categorias',
                'ordering': ['name'],
            },
        ),
        migrations.CreateModel(
            name='YearSequence',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('year', models.PositiveIntegerField(unique=True, verbose_name='Ano')),
                ('last_number', models.PositiveIntegerField(default=0, verbose_name='Último Número')),
            ],
            options={
                'verbose_name': 'Sequência Anual',
                'verbose_name_plural': 'Sequências Anuais',
                'ordering': ['year'],
            },
        ),
        migrations.CreateModel(
            name='Item',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('internal_code', models.CharField(editable=False, help_text='Formato AAAA-NNNN, sequencial por ano', max_length=20, unique=True, verbose_name='Código Interno')),
                ('name', models.CharField(max_length=200, verbose_name='Nome')),
                ('description', models.TextField(blank=True, default='', verbose_name='Descrição')),
                ('serial_number', models.CharField(blank=True, default='', max_length=100, verbose_name='Número de Série')),
                ('current_stock', models.PositiveIntegerField(default=0, editable=False, verbose_name='Estoque Atual')),
                ('opening_stock', models.PositiveIntegerField(default=0, editable=False, help_text='Estoque na criação (ex: importação CSV). Base para auditoria.', verbose_name='Estoque Inicial')),
                ('min_stock', models.PositiveIntegerField(default=0, verbose_name='Estoque Mínimo')),
                ('status', models.CharField(choices=[('available', 'Disponível'), ('in-use', 'Em uso'), ('maintenance', 'Manutenção'), ('discarded', 'Descartado')], db_index=True, default='available', max_length=20, verbose_name='Status')),
                ('location', models.CharField(blank=True, default='', max_length=200, verbose_name='Localização')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='Criado em')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='Atualizado em')),
                ('category', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='items', to='assetledger.category', verbose_name='Categoria')),
            ],
            options={
                'verbose_name': 'Item',
                'verbose_name_plural': 'Itens',
                'ordering': ['-created_at'],
            },
        ),
        migrations.CreateModel(
            name='Movement',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('type', models.CharField(choices=[('inflow', 'Entrada'), ('outflow', 'Saída')], max_length=10, verbose_name='Tipo')),
                ('quantity', models.PositiveIntegerField(verbose_name='Quantidade')),
                ('previous_stock', models.PositiveIntegerField(verbose_name='Estoque Anterior')),
                ('new_stock', models.PositiveIntegerField(verbose_name='Novo Estoque')),
                ('destination', models.CharField(blank=True, default='', max_length=200, verbose_name='Destino')),
                ('observation', models.TextField(blank=True, default='', verbose_name='Observação')),
                ('created_at', models.DateTimeField(db_index=True, default=django.utils.timezone.now, verbose_name='Data/Hora')),
                ('item', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='movements', to='assetledger.item', verbose_name='Item')),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='+', to=settings.AUTH_USER_MODEL, verbose_name='Usuário')),
            ],
            options={
                'verbose_name': 'Movimentação',
                'verbose_name_plural': 'Movimentações',
                'ordering': ['-created_at', '-id'],
            },
        ),
        # Indexes
        migrations.AddIndex(
            model_name='item',
            index=models.Index(fields=['category', 'status'], name='assetledger_item_cat_idx'),
        ),
        migrations.AddIndex(
            model_name='movement',
            index=models.Index(fields=['item', 'created_at'], name='assetledger_mov_item_idx'),
        ),
        # Ledger invariants
        migrations.AddConstraint(
            model_name='item',
            constraint=models.CheckConstraint(condition=models.Q(('current_stock__gte', 0)), name='assetledger_item_stock_non_negative'),
        ),
        migrations.AddConstraint(
            model_name='movement',
            constraint=models.CheckConstraint(condition=models.Q(('quantity__gt', 0)), name='assetledger_movement_quantity_positive'),
        ),
        migrations.AddConstraint(
            model_name='movement',
            constraint=models.CheckConstraint(condition=models.Q(('new_stock__gte', 0)), name='assetledger_movement_new_stock_non_negative'),
        ),
        migrations.AddConstraint(
            model_name='movement',
            constraint=models.CheckConstraint(
                condition=models.Q(
                    models.Q(('type', 'inflow'), ('new_stock', models.F('previous_stock') + models.F('quantity'))),
                    models.Q(('type', 'outflow'), ('new_stock', models.F('previous_stock') - models.F('quantity'))),
                    _connector='OR',
                ),
                name='assetledger_movement_balance',
            ),
        ),
    ]
