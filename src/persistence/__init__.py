"""
Persistence Module

Append-only storage for executed trades.
"""

from .transaction_log import InMemoryTransactionLog, SQLiteTransactionLog, TransactionLog

__all__ = ['InMemoryTransactionLog', 'SQLiteTransactionLog', 'TransactionLog']
