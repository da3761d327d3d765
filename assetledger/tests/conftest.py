"""
Pytest fixtures for Asset Ledger tests.
"""

import pytest
from django.contrib.auth import get_user_model

from assetledger import ledger
from assetledger.models import Category


User = get_user_model()


@pytest.fixture
def user(db):
    """Create a test user."""
    return User.objects.create_user(
        username='tecnico',
        password='testpass123'
    )


@pytest.fixture
def category(db):
    """Create a test category."""
    return Category.objects.create(
        name='Periféricos',
        description='Mouses, teclados e monitores',
    )


@pytest.fixture
def other_category(db):
    """Create a second category."""
    return Category.objects.create(name='Notebooks', icon='fas fa-laptop')


@pytest.fixture
def item(db, category):
    """Create an item with no stock."""
    return ledger.create_item('Mouse USB', category, min_stock=2, location='Almoxarifado A')


@pytest.fixture
def stocked_item(db, category):
    """Create an item with 5 units and min_stock=2."""
    return ledger.create_item(
        'Teclado ABNT2', category, min_stock=2, initial_stock=5,
        location='Almoxarifado B',
    )


@pytest.fixture
def template_csv():
    """CSV in the template layout (fixed positions)."""
    return (
        "Nome,Descrição,Estoque Atual,Estoque Mínimo,Localização\n"
        "Monitor 24,Full HD,10,2,Sala 1\n"
        "Cabo HDMI,,25,5,Sala 2\n"
    )
