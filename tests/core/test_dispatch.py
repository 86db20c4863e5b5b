"""Tool Dispatch — routing, handler behaviour, transaction accounting.

Tests cover:
    - All 4 tools and both resources are registered; table is read-only
    - Unknown tool → NotFound before validation, no transaction
    - Missing/mis-typed required args → InvalidArgument, no transaction
    - Each handler's result text and backend request
    - opened == discarded after every invocation, success or failure
"""

import json

import pytest

from core.context import InvocationContext
from core.dispatch import DispatchTable
from core.errors import BackendFailure, Cancelled, InvalidArgument, NotFound
from core.models import MutationRequest, QueryRequest, ToolInvocation


@pytest.fixture
def table(backend):
    return DispatchTable.build(backend)


def _invoke(table, name, **arguments):
    return table.invoke(ToolInvocation(name, arguments), InvocationContext())


def test_dispatch_has_all_tools_and_resources(table):
    assert table.tool_names() == [
        "dgraph_alter_schema", "dgraph_mutate", "dgraph_query", "search_movies",
    ]
    assert table.resource_uris() == ["dgraph://schema", "movies://{id}"]


def test_dispatch_table_is_read_only(table):
    with pytest.raises(TypeError):
        table.tools["evil"] = None


def test_unknown_tool_is_not_found(table, backend):
    with pytest.raises(NotFound, match="unknown tool"):
        _invoke(table, "dgraph_drop_all")
    assert backend.opened == 0


def test_lookup_is_exact_match(table):
    with pytest.raises(NotFound):
        _invoke(table, "DGRAPH_QUERY", query="{}")


@pytest.mark.parametrize(
    "name, arguments",
    [
        ("dgraph_query", {}),
        ("dgraph_query", {"query": 1}),
        ("dgraph_mutate", {}),
        ("dgraph_mutate", {"mutation": "m", "commit": "yes"}),
        ("dgraph_alter_schema", {}),
        ("search_movies", {}),
        ("search_movies", {"search_term": True}),
    ],
)
def test_invalid_arguments_open_no_transaction(table, backend, name, arguments):
    with pytest.raises(InvalidArgument):
        _invoke(table, name, **arguments)
    assert backend.opened == 0
    assert backend.alters == []


def test_query_returns_backend_json_verbatim(table, backend):
    backend.query_json = '{"q":[{"name":"Alice"}]}'
    result = _invoke(table, "dgraph_query", query="{ q(func: has(name)) { name } }")
    assert result.text == '{"q":[{"name":"Alice"}]}'
    assert backend.requests == [QueryRequest("{ q(func: has(name)) { name } }")]
    assert backend.transactions[0].read_only is True
    assert backend.opened == backend.discarded == 1


def test_query_variables_are_bound(table, backend):
    _invoke(table, "dgraph_query", query="query q($n: string) { q(func: eq(name, $n)) { uid } }",
            variables={"$n": "Alice", "$limit": 5})
    assert backend.requests[0].variables == {"$n": "Alice", "$limit": "5"}


def test_bad_variables_open_no_transaction(table, backend):
    with pytest.raises(InvalidArgument):
        _invoke(table, "dgraph_query", query="{}", variables={"$n": {"nested": 1}})
    assert backend.opened == 0


def test_mutation_without_commit_behaves_like_commit_true(backend):
    table = DispatchTable.build(backend)
    backend.uids = {"alice": "0x1"}
    implicit = _invoke(table, "dgraph_mutate", mutation='_:alice <name> "Alice" .')
    explicit = _invoke(table, "dgraph_mutate", mutation='_:alice <name> "Alice" .', commit=True)

    assert implicit == explicit
    assert backend.requests[0] == backend.requests[1] == MutationRequest('_:alice <name> "Alice" .', True)
    assert implicit.text.startswith("Mutation successful. Response: ")
    summary = json.loads(implicit.text.split("Response: ", 1)[1])
    assert summary == {"committed": True, "uids": {"alice": "0x1"}}
    assert backend.transactions[0].read_only is False
    assert backend.opened == backend.discarded == 2


def test_uncommitted_mutation_is_discarded(table, backend):
    result = _invoke(table, "dgraph_mutate", mutation='_:a <name> "A" .', commit=False)
    assert '"committed": false' in result.text
    assert backend.transactions[0].committed is False
    assert backend.transactions[0].discards == 1


def test_alter_schema_opens_no_transaction(table, backend):
    result = _invoke(table, "dgraph_alter_schema", schema="name: string @index(exact) .")
    assert result.text == "Schema updated successfully"
    assert backend.alters[0].schema == "name: string @index(exact) ."
    assert backend.opened == 0


def test_alter_schema_failure_propagates(table, backend):
    backend.alter_error = BackendFailure("schema alteration failed: bad schema")
    with pytest.raises(BackendFailure):
        _invoke(table, "dgraph_alter_schema", schema="nonsense")


def test_search_builds_derived_query(table, backend):
    backend.query_json = '{"movies":[]}'
    result = _invoke(table, "search_movies", search_term="Nolan", search_type="director")
    assert result.text == '{"movies":[]}'
    assert 'allofterms(director, "Nolan")' in backend.requests[0].query
    assert backend.opened == backend.discarded == 1


def test_search_with_unknown_type_uses_any(table, backend):
    _invoke(table, "search_movies", search_term="Nolan", search_type="budget")
    assert 'anyoftext(title director actors genres, "Nolan")' in backend.requests[0].query


@pytest.mark.parametrize("error", [BackendFailure("query failed: down"), Cancelled("query cancelled")])
def test_failed_invocation_still_discards(table, backend, error):
    backend.query_error = error
    with pytest.raises(type(error)):
        _invoke(table, "dgraph_query", query="{}")
    assert backend.opened == backend.discarded == 1


def test_failed_mutation_still_discards(table, backend):
    backend.mutate_error = BackendFailure("mutation failed: conflict")
    with pytest.raises(BackendFailure):
        _invoke(table, "dgraph_mutate", mutation="bad")
    assert backend.opened == backend.discarded == 1


def test_schema_resource_reads_schema(table, backend):
    backend.query_json = '{"schema":[{"predicate":"name","type":"string"}]}'
    result = table.read_resource("dgraph://schema", InvocationContext())
    assert result.mime_type == "text/plain"
    assert result.text == backend.query_json
    assert backend.requests == [QueryRequest("schema {}")]
    assert backend.opened == backend.discarded == 1


def test_movie_resource_looks_up_by_uid(table, backend):
    backend.query_json = '{"movie":[{"title":"Inception"}]}'
    result = table.read_resource("movies://0x2a", InvocationContext())
    assert result.uri == "movies://0x2a"
    assert result.mime_type == "application/json"
    assert "movie(func: uid(0x2a))" in backend.requests[0].query


def test_resource_errors_open_no_transaction(table, backend):
    with pytest.raises(NotFound):
        table.read_resource("films://0x1", InvocationContext())
    with pytest.raises(InvalidArgument):
        table.read_resource("movies://", InvocationContext())
    with pytest.raises(InvalidArgument):
        table.read_resource("movies://not-a-uid", InvocationContext())
    assert backend.opened == 0
