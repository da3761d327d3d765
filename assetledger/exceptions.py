"""
Exceptions for Asset Ledger.

All errors are LedgerError subclasses with a structured code for
programmatic handling. The subclass tells the caller whose fault it is:

- ValidationError: malformed input (4xx)
- InsufficientStock: outflow larger than the current stock
- NotFound: unknown item, category or user
- Conflict: duplicate unique key or a state that forbids the operation
- TransientStorageError: database unavailable; retry the whole operation
"""

from typing import Any


class LedgerError(Exception):
    """
    Structured exception for ledger operations.

    Usage:
        try:
            ledger.record_movement(item, user, 'outflow', 10)
        except InsufficientStock as e:
            print(f"Só tem {e.available} disponível")
        except LedgerError as e:
            print(e.code, e.message)

    Attributes:
        code: Error code for programmatic handling
        message: Human-readable message
        data: Additional context data
    """

    default_code = 'LEDGER_ERROR'

    _default_messages = {
        'LEDGER_ERROR': 'Erro no inventário',
    }

    def __init__(self, code: str | None = None, message: str | None = None, /, **data):
        self.code = code or self.default_code
        self.message = message or self._default_messages.get(self.code, self.code)
        self.data = data
        super().__init__(self.message)

    def as_dict(self) -> dict[str, Any]:
        """Serialize to dict (useful for APIs)."""
        return {
            'code': self.code,
            'message': self.message,
            'data': {
                k: v if isinstance(v, (int, str, bool, type(None))) else str(v)
                for k, v in self.data.items()
            }
        }

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.code!r}, {self.data!r})"


class ValidationError(LedgerError):
    """Malformed input — caller's fault."""

    default_code = 'INVALID_INPUT'

    _default_messages = {
        'INVALID_INPUT': 'Dados inválidos',
        'INVALID_QUANTITY': 'Quantidade inválida (deve ser um inteiro positivo)',
        'INVALID_TYPE': 'Tipo de movimentação inválido',
        'INVALID_STATUS': 'Status inválido',
        'INVALID_CODE': 'Código interno inválido',
        'NAME_REQUIRED': 'Nome do item não informado',
        'USER_REQUIRED': 'Usuário é obrigatório',
        'READ_ONLY_FIELD': 'Campo não pode ser alterado diretamente',
        'EMPTY_FILE': 'CSV vazio',
        'MALFORMED_CSV': 'CSV malformado',
        'TOO_MANY_ROWS': 'CSV excede o número máximo de linhas',
        'UNPARSEABLE_QUANTITY': 'Quantidade ilegível',
    }


class InsufficientStock(LedgerError):
    """Outflow requested more than the item holds."""

    default_code = 'INSUFFICIENT_STOCK'

    _default_messages = {
        'INSUFFICIENT_STOCK': 'Estoque insuficiente',
    }

    @property
    def available(self) -> int:
        """Shortcut for data['available']."""
        return self.data.get('available', 0)

    @property
    def requested(self) -> int:
        """Shortcut for data['requested']."""
        return self.data.get('requested', 0)


class NotFound(LedgerError):
    """Unknown item, category or user."""

    default_code = 'NOT_FOUND'

    _default_messages = {
        'NOT_FOUND': 'Registro não encontrado',
        'ITEM_NOT_FOUND': 'Item não encontrado',
        'CATEGORY_NOT_FOUND': 'Categoria não encontrada',
        'USER_NOT_FOUND': 'Usuário não encontrado',
    }


class Conflict(LedgerError):
    """Duplicate unique key, or current state forbids the operation."""

    default_code = 'CONFLICT'

    _default_messages = {
        'CONFLICT': 'Conflito',
        'DUPLICATE_CODE': 'Código interno já utilizado',
        'DUPLICATE_CATEGORY': 'Já existe uma categoria com este nome',
        'ITEM_HAS_MOVEMENTS': 'Item possui movimentações e não pode ser excluído',
        'CATEGORY_IN_USE': 'Categoria possui itens e não pode ser excluída',
        'STALE_STOCK': 'Estoque alterado por outra operação',
    }


class TransientStorageError(LedgerError):
    """Database unreachable or aborted the transaction; safe to retry."""

    default_code = 'STORAGE_UNAVAILABLE'

    _default_messages = {
        'STORAGE_UNAVAILABLE': 'Banco de dados indisponível, tente novamente',
    }
