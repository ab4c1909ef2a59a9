"""
Remote transaction over the graph store's transactional endpoint.

A ``Transaction`` moves through ``IDLE -> OPEN -> COMMITTED | ABORTED``.
Every statement is sent as its own request the moment it is appended;
nothing becomes visible in the store until ``commit()``. Any failure aborts
the transaction for good; no rollback request is sent.
"""

import logging
from enum import Enum
from typing import Any, Dict, Optional
from urllib.parse import urlparse

from graph.mutations import GraphMutation
from .graph_client import GraphStoreAPIError, GraphStoreClient

logger = logging.getLogger(__name__)

# Receives every statement text. Only the verbose-mode statement log handles
# it; it never reaches the root handlers.
statement_logger = logging.getLogger("owl2graph.statements")
statement_logger.propagate = False


class TransactionState(str, Enum):
    IDLE = "idle"
    OPEN = "open"
    COMMITTED = "committed"
    ABORTED = "aborted"


class TransactionStateError(Exception):
    """Raised when a transaction is used outside the OPEN state."""

    def __init__(self, operation: str, state: TransactionState):
        self.operation = operation
        self.state = state
        super().__init__(f"Cannot {operation} a transaction in state '{state.value}'")


def _handle_from_url(url: Optional[str]) -> Optional[str]:
    if not url:
        return None
    segments = [segment for segment in urlparse(url).path.split('/') if segment]
    if segments and segments[-1] == 'commit':
        segments.pop()
    return segments[-1] if segments else None


class Transaction:
    """One remote transaction; see module docstring."""

    def __init__(self, client: GraphStoreClient):
        self.client = client
        self.state = TransactionState.IDLE
        self.handle: Optional[str] = None
        self.statements_sent = 0

    @property
    def url(self) -> str:
        return f"{self.client.config.transaction_url}/{self.handle}"

    def _require(self, state: TransactionState, operation: str) -> None:
        if self.state != state:
            raise TransactionStateError(operation, self.state)

    def _abort(self) -> None:
        self.state = TransactionState.ABORTED
        logger.error(f"Transaction {self.handle or '(not opened)'} aborted")

    def begin(self) -> str:
        """
        Open the remote transaction.

        Returns:
            The transaction handle

        Raises:
            GraphStoreAPIError: If the store reports an error or returns no
                transaction handle
        """
        self._require(TransactionState.IDLE, "begin")

        try:
            response = self.client.post_json(
                self.client.config.transaction_url, {"statements": []}, "Begin transaction"
            )
            body = self.client.check_for_errors(response)

            handle = _handle_from_url(response.headers.get('Location')) or _handle_from_url(body.get('commit'))
            if not handle:
                raise GraphStoreAPIError(
                    status_code=response.status_code,
                    error_code='NoTransactionHandle',
                    message='Server did not return a transaction location',
                )
        except GraphStoreAPIError:
            self._abort()
            raise

        self.handle = handle
        self.state = TransactionState.OPEN
        logger.info(f"Opened transaction {handle}")
        return handle

    def append(self, statement: str, parameters: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Send one parameterized statement inside the open transaction."""
        self._require(TransactionState.OPEN, "append to")

        parameters = parameters or {}
        logger.debug(f"{statement} {parameters}")
        statement_logger.info(f"{statement} {parameters}")

        payload = {"statements": [{"statement": statement, "parameters": parameters}]}
        try:
            response = self.client.post_json(self.url, payload, "Append statement")
            body = self.client.check_for_errors(response)
        except GraphStoreAPIError as e:
            logger.error(f"Statement failed: {statement} {parameters}: {e}")
            self._abort()
            raise

        self.statements_sent += 1
        return body

    def send(self, mutation: GraphMutation) -> Dict[str, Any]:
        statement, parameters = mutation.to_statement()
        return self.append(statement, parameters)

    def commit(self) -> None:
        """Commit everything appended so far."""
        self._require(TransactionState.OPEN, "commit")

        try:
            response = self.client.post_json(f"{self.url}/commit", {"statements": []}, "Commit transaction")
            self.client.check_for_errors(response)
        except GraphStoreAPIError:
            self._abort()
            raise

        self.state = TransactionState.COMMITTED
        logger.info(f"Committed transaction {self.handle} ({self.statements_sent} statements)")
