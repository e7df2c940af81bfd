"""Ledger package: the store and its identity generator."""

from construction_ledger.ledger.ids import IdGenerator
from construction_ledger.ledger.store import (
    CollectionKeys,
    InvalidArgumentError,
    LedgerClosedError,
    LedgerError,
    LedgerStore,
    NotFoundError,
)

__all__ = [
    "CollectionKeys",
    "IdGenerator",
    "InvalidArgumentError",
    "LedgerClosedError",
    "LedgerError",
    "LedgerStore",
    "NotFoundError",
]
