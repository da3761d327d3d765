"""
Transaction helper shared by every state-changing ledger operation.

    with atomic_operation():
        ...

Runs the block under transaction.atomic() and turns infrastructure
failures (connection lost, lock timeout, serialization failure) into
TransientStorageError. By the time the error reaches the caller the
transaction has been rolled back, so the whole operation can be retried.
"""

import logging
from contextlib import contextmanager

from django.db import InterfaceError, OperationalError, transaction

from assetledger.exceptions import TransientStorageError

logger = logging.getLogger('assetledger')


@contextmanager
def atomic_operation(operation: str = 'ledger'):
    try:
        with transaction.atomic():
            yield
    except (OperationalError, InterfaceError) as exc:
        logger.warning(
            "ledger.storage_error",
            extra={"operation": operation, "error": str(exc)},
        )
        raise TransientStorageError(operation=operation, error=str(exc)) from exc
