"""
Core infrastructure for the OWL to graph importer.

- Graph store client (GraphStoreConfig, GraphStoreClient, GraphStoreAPIError)
- Remote transactions (Transaction, TransactionState, TransactionStateError)
- Memory management (MemoryManager)
- Input validation (InputValidator)

Usage:
    from core import GraphStoreConfig, GraphStoreClient, GraphStoreAPIError
    from core.transaction import Transaction
"""

from .graph_client import GraphStoreAPIError, GraphStoreClient, GraphStoreConfig
from .memory import MemoryManager
from .transaction import Transaction, TransactionState, TransactionStateError
from .validators import InputValidator

__all__ = [
    'GraphStoreAPIError',
    'GraphStoreClient',
    'GraphStoreConfig',
    'MemoryManager',
    'Transaction',
    'TransactionState',
    'TransactionStateError',
    'InputValidator',
]
