# =============================================================================
# core/transactions.py  —  Transaction Coordinator
# =============================================================================
#
# One invocation, one transaction, one discard.
#
#   open  →  body runs  →  discard   (always, on every exit path)
#
# The commit, when requested, happens inside the body through the mutation's
# own commit flag.  Discarding a transaction that already committed is a
# no-op in the backend, so the coordinator never needs to know which case it
# is in.
#
# If discard itself fails while another error is already propagating, the
# discard failure is logged and the ORIGINAL error wins.
# =============================================================================

import logging
from contextlib import contextmanager
from typing import Callable, Iterator, TypeVar

from core.backend import Backend, Transaction
from core.context import InvocationContext
from core.errors import GraphMCPError

logger = logging.getLogger(__name__)

T = TypeVar("T")


@contextmanager
def transaction(
    backend: Backend, context: InvocationContext, read_only: bool = False
) -> Iterator[Transaction]:
    """Open a fresh transaction and guarantee it is discarded on exit.

    Raises:
        Cancelled: if the context is already cancelled or past its
            deadline; in that case no transaction is opened.
    """
    context.check()
    txn = backend.new_transaction(read_only=read_only)
    logger.debug("opened %s transaction", "read-only" if read_only else "read-write")
    try:
        yield txn
    except BaseException as exc:
        try:
            txn.discard()
        except GraphMCPError:
            logger.warning("discard failed while handling %s", type(exc).__name__, exc_info=True)
        raise
    else:
        txn.discard()
    finally:
        logger.debug("transaction closed")


def with_transaction(
    backend: Backend,
    read_only: bool,
    body: Callable[[Transaction], T],
    context: InvocationContext,
) -> T:
    """Run ``body`` inside a transaction and return its result."""
    with transaction(backend, context, read_only=read_only) as txn:
        return body(txn)
