"""
Category model — Grouping of items.
"""

from django.db import models
from django.utils.translation import gettext_lazy as _


class Category(models.Model):
    """Item category. No invariants beyond the unique name."""

    name = models.CharField(
        max_length=100,
        unique=True,
        verbose_name=_('Nome'),
    )
    description = models.TextField(
        blank=True,
        default='',
        verbose_name=_('Descrição'),
    )
    icon = models.CharField(
        max_length=50,
        default='fas fa-box',
        verbose_name=_('Ícone'),
        help_text=_('Classe do ícone exibido na interface'),
    )

    created_at = models.DateTimeField(auto_now_add=True, verbose_name=_('Criado em'))

    class Meta:
        verbose_name = _('Categoria')
        verbose_name_plural = _('Categorias')
        ordering = ['name']

    def __str__(self) -> str:
        return self.name
