"""Root conftest — a fake Dgraph backend shared by every test.

Invariants:
    - FakeBackend never touches the network
    - Every transaction it hands out records how often it was discarded
    - opened / discarded counters make "no transaction was opened" and
      "every transaction was discarded exactly once" one-line assertions
"""

import os

import pytest

from core.context import InvocationContext
from core.models import MutationResult, QueryResult

# Never let a test reach a real Dgraph.
os.environ.setdefault("DGRAPH_HOST", "fake-dgraph:9080")


class FakeTransaction:
    def __init__(self, backend: "FakeBackend", read_only: bool) -> None:
        self.backend = backend
        self.read_only = read_only
        self.discards = 0
        self.committed = False

    def query(self, request, context):
        context.check()
        self.backend.requests.append(request)
        if self.backend.on_query is not None:
            self.backend.on_query(context)
        if self.backend.query_error is not None:
            raise self.backend.query_error
        return QueryResult(json=self.backend.query_json)

    def mutate(self, request, context):
        context.check()
        self.backend.requests.append(request)
        if self.backend.mutate_error is not None:
            raise self.backend.mutate_error
        self.committed = request.commit
        return MutationResult(uids=dict(self.backend.uids), committed=request.commit)

    def discard(self):
        self.discards += 1
        self.backend.discarded += 1
        if self.backend.discard_error is not None:
            raise self.backend.discard_error


class FakeBackend:
    def __init__(self, query_json: str = '{"q":[]}') -> None:
        self.query_json = query_json
        self.uids: dict[str, str] = {}
        self.query_error = None
        self.mutate_error = None
        self.discard_error = None
        self.alter_error = None
        self.on_query = None           # called with the context inside query()
        self.opened = 0
        self.discarded = 0
        self.transactions: list[FakeTransaction] = []
        self.requests: list = []
        self.alters: list = []

    def new_transaction(self, read_only: bool = False) -> FakeTransaction:
        self.opened += 1
        txn = FakeTransaction(self, read_only)
        self.transactions.append(txn)
        return txn

    def alter(self, operation, context):
        context.check()
        if self.alter_error is not None:
            raise self.alter_error
        self.alters.append(operation)


@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
def context():
    return InvocationContext()
