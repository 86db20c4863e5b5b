# =============================================================================
# core/backend.py  —  Backend contract & the Dgraph adapter
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   1. Declares the two narrow interfaces the rest of core/ talks to:
#        Backend      opens transactions, applies schema alterations
#        Transaction  query, mutate, discard
#   2. Implements them on top of pydgraph (DgraphBackend / DgraphTransaction).
#
# WHY PROTOCOLS?
#   Handlers receive a Backend through their constructor.  Production code
#   passes a DgraphBackend; tests pass a fake that counts transactions.
#   Nothing outside this module imports pydgraph or grpc.
#
# CANCELLATION:
#   Queries and mutations are issued as gRPC futures.  The future's cancel()
#   is registered on the InvocationContext, so a caller-side cancel aborts
#   the call in flight.  Every call also carries the context's remaining
#   time as its gRPC timeout.
#
# ERROR MAPPING:
#   gRPC CANCELLED / DEADLINE_EXCEEDED / cancelled futures  → Cancelled
#   anything else raised by pydgraph or grpc               → BackendFailure
# =============================================================================

import logging
from typing import Optional, Protocol

import grpc
import pydgraph

from core.context import InvocationContext
from core.errors import BackendFailure, Cancelled
from core.models import (
    MutationRequest,
    MutationResult,
    QueryRequest,
    QueryResult,
    SchemaOperation,
)

logger = logging.getLogger(__name__)

# Discard is issued even after the invocation's own deadline has passed.
DISCARD_TIMEOUT_SECONDS = 5.0
CONNECT_TIMEOUT_SECONDS = 10.0

_CANCEL_CODES = (grpc.StatusCode.CANCELLED, grpc.StatusCode.DEADLINE_EXCEEDED)


class Transaction(Protocol):
    def query(self, request: QueryRequest, context: InvocationContext) -> QueryResult: ...

    def mutate(self, request: MutationRequest, context: InvocationContext) -> MutationResult: ...

    def discard(self) -> None: ...


class Backend(Protocol):
    def new_transaction(self, read_only: bool = False) -> Transaction: ...

    def alter(self, operation: SchemaOperation, context: InvocationContext) -> None: ...


def _translate_error(action: str, error: Exception, context: InvocationContext) -> Exception:
    """Map a pydgraph/grpc exception onto the core error taxonomy."""
    if isinstance(error, grpc.FutureCancelledError) or context.cancelled:
        return Cancelled(f"{action} cancelled")
    code = error.code() if isinstance(error, grpc.RpcError) and hasattr(error, "code") else None
    if code in _CANCEL_CODES:
        return Cancelled(f"{action} aborted: {code.name}")
    return BackendFailure(f"{action} failed: {error}")


# =============================================================================
# Dgraph implementation
# =============================================================================
class DgraphTransaction:
    """One pydgraph transaction, used by exactly one invocation."""

    def __init__(self, txn: "pydgraph.Txn") -> None:
        self._txn = txn

    def query(self, request: QueryRequest, context: InvocationContext) -> QueryResult:
        context.check()
        try:
            future = self._txn.async_query(
                request.query,
                variables=request.variables,
                timeout=context.remaining(),
            )
            unregister = context.on_cancel(future.cancel)
            try:
                response = pydgraph.Txn.handle_query_future(future)
            finally:
                unregister()
        except Exception as e:
            raise _translate_error("query", e, context) from e
        return QueryResult(json=response.json.decode("utf-8"))

    def mutate(self, request: MutationRequest, context: InvocationContext) -> MutationResult:
        context.check()
        try:
            future = self._txn.async_mutate(
                set_nquads=request.set_nquads,
                commit_now=request.commit,
                timeout=context.remaining(),
            )
            unregister = context.on_cancel(future.cancel)
            try:
                response = pydgraph.Txn.handle_mutate_future(self._txn, future, request.commit)
            finally:
                unregister()
        except Exception as e:
            raise _translate_error("mutation", e, context) from e
        return MutationResult(uids=dict(response.uids), committed=request.commit)

    def discard(self) -> None:
        # pydgraph makes this a no-op once the transaction has committed.
        try:
            self._txn.discard(timeout=DISCARD_TIMEOUT_SECONDS)
        except Exception as e:
            raise BackendFailure(f"discard failed: {e}") from e


class DgraphBackend:
    """Backend backed by a pydgraph client.

    The client is thread-safe; every invocation opens its own transaction
    on it and nothing else is shared.
    """

    def __init__(self, client: "pydgraph.DgraphClient", stub: Optional["pydgraph.DgraphClientStub"] = None) -> None:
        self._client = client
        self._stub = stub

    @classmethod
    def connect(cls, host: str, timeout: float = CONNECT_TIMEOUT_SECONDS) -> "DgraphBackend":
        """Open a gRPC channel to ``host`` and check that Dgraph answers.

        Raises:
            BackendFailure: if the server can't be reached.
        """
        stub = pydgraph.DgraphClientStub(host)
        client = pydgraph.DgraphClient(stub)
        try:
            version = client.check_version(timeout=timeout)
        except Exception as e:
            stub.close()
            raise BackendFailure(f"cannot reach Dgraph at {host}: {e}") from e
        logger.info("Connected to Dgraph %s at %s", version, host)
        return cls(client, stub)

    def new_transaction(self, read_only: bool = False) -> DgraphTransaction:
        return DgraphTransaction(self._client.txn(read_only=read_only))

    def alter(self, operation: SchemaOperation, context: InvocationContext) -> None:
        # Alter has no future variant and no rollback; only the deadline applies.
        context.check()
        try:
            self._client.alter(pydgraph.Operation(schema=operation.schema), timeout=context.remaining())
        except Exception as e:
            raise _translate_error("schema alteration", e, context) from e

    def close(self) -> None:
        if self._stub is not None:
            self._stub.close()
