# =============================================================================
# core/handlers.py  —  One handler per tool / resource
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Wires the pieces together for each operation:
#
#     validate  →  translate  →  run in a transaction  →  shape the result
#
#   Every handler gets the Backend through its constructor.  There is no
#   module-level client: tests build handlers around a fake backend, and
#   the server builds them around a DgraphBackend.
#
# ORDERING GUARANTEE:
#   Validation and translation both happen BEFORE the transaction opens, so
#   an InvalidArgument never costs a backend round-trip.
# =============================================================================

import json

from core.backend import Backend
from core.context import InvocationContext
from core.models import ResourceRequest, ResourceResult, ToolInvocation, ToolResult
from core.transactions import with_transaction
from core.translator import (
    build_movie_details,
    build_movie_search,
    build_mutation,
    build_query,
    build_schema_operation,
    build_schema_query,
)
from core.validation import (
    AlterSchemaArguments,
    MutateArguments,
    QueryArguments,
    SearchMoviesArguments,
    ToolArguments,
    normalize_variables,
    validate_arguments,
)


class ToolHandler:
    """Base class: a named tool with declared arguments and a backend."""

    name: str = ""
    description: str = ""
    arguments: type[ToolArguments] = ToolArguments

    def __init__(self, backend: Backend) -> None:
        self._backend = backend

    def __call__(self, invocation: ToolInvocation, context: InvocationContext) -> ToolResult:
        args = validate_arguments(self.name, self.arguments, invocation.arguments)
        return self.handle(args, context)

    def handle(self, args: dict, context: InvocationContext) -> ToolResult:
        raise NotImplementedError


# -----------------------------------------------------------------------------
# Tools
# -----------------------------------------------------------------------------
class QueryHandler(ToolHandler):
    name = "dgraph_query"
    description = "Execute a DQL (GraphQL+-) query against Dgraph"
    arguments = QueryArguments

    def handle(self, args: dict, context: InvocationContext) -> ToolResult:
        request = build_query(args["query"], normalize_variables(args["variables"]))
        result = with_transaction(
            self._backend, True, lambda txn: txn.query(request, context), context
        )
        return ToolResult(text=result.json)


class MutationHandler(ToolHandler):
    name = "dgraph_mutate"
    description = "Execute an RDF mutation against Dgraph"
    arguments = MutateArguments

    def handle(self, args: dict, context: InvocationContext) -> ToolResult:
        request = build_mutation(args["mutation"], commit=args["commit"])
        result = with_transaction(
            self._backend, False, lambda txn: txn.mutate(request, context), context
        )
        summary = json.dumps({"uids": result.uids, "committed": result.committed}, sort_keys=True)
        return ToolResult(text=f"Mutation successful. Response: {summary}")


class SchemaAlterHandler(ToolHandler):
    """Schema alterations are global and not transactional: no Transaction."""

    name = "dgraph_alter_schema"
    description = "Alter the Dgraph schema"
    arguments = AlterSchemaArguments

    def handle(self, args: dict, context: InvocationContext) -> ToolResult:
        self._backend.alter(build_schema_operation(args["schema"]), context)
        return ToolResult(text="Schema updated successfully")


class MovieSearchHandler(ToolHandler):
    name = "search_movies"
    description = "Search for movies by title, actor, director, or genre"
    arguments = SearchMoviesArguments

    def handle(self, args: dict, context: InvocationContext) -> ToolResult:
        request = build_movie_search(args["search_term"], args["search_type"])
        result = with_transaction(
            self._backend, True, lambda txn: txn.query(request, context), context
        )
        return ToolResult(text=result.json)


# -----------------------------------------------------------------------------
# Resources
# -----------------------------------------------------------------------------
class SchemaResourceHandler:
    uri = "dgraph://schema"
    name = "Dgraph Schema"
    description = "The current Dgraph schema"
    mime_type = "text/plain"

    def __init__(self, backend: Backend) -> None:
        self._backend = backend

    def read(self, request: ResourceRequest, context: InvocationContext) -> ResourceResult:
        query = build_schema_query()
        result = with_transaction(
            self._backend, True, lambda txn: txn.query(query, context), context
        )
        return ResourceResult(uri=request.uri, mime_type=self.mime_type, text=result.json)


class MovieDetailsHandler:
    uri = "movies://{id}"
    name = "Movie Details"
    description = "Returns detailed information about a specific movie"
    mime_type = "application/json"

    def __init__(self, backend: Backend) -> None:
        self._backend = backend

    def read(self, request: ResourceRequest, context: InvocationContext) -> ResourceResult:
        query = build_movie_details(request.identifier)
        result = with_transaction(
            self._backend, True, lambda txn: txn.query(query, context), context
        )
        return ResourceResult(uri=request.uri, mime_type=self.mime_type, text=result.json)


TOOL_HANDLERS = (QueryHandler, MutationHandler, SchemaAlterHandler, MovieSearchHandler)
RESOURCE_HANDLERS = (SchemaResourceHandler, MovieDetailsHandler)
