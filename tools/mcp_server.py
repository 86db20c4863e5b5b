# =============================================================================
# tools/mcp_server.py  —  FastMCP server for Dgraph (tools + resources)
# =============================================================================
#
# WHAT THIS FILE DOES:
#   Exposes the dispatch table from core/ over MCP.  Each tool/resource here
#   is a thin async wrapper: it packs its parameters into a ToolInvocation,
#   runs the synchronous core in a worker thread, and turns the outcome into
#   MCP content (or an MCP error result).
#
# HOW IT WORKS (the flow):
#   1. A client (e.g. the ADK agent in agent/) calls a tool by name
#   2. ArgumentValidationMiddleware checks the raw arguments (InvalidArgument)
#   3. FastMCP routes the call to the matching function in create_server()
#   4. The function hands a ToolInvocation to DispatchTable.invoke()
#   5. core/ translates and runs ONE Dgraph transaction
#   6. The result text (or a ToolError) goes back to the client
#
# TOOLS:
#   dgraph_query         read-only DQL query          → JSON text
#   dgraph_mutate        RDF N-Quad mutation          → status text
#   dgraph_alter_schema  schema alteration            → confirmation text
#   search_movies        derived movie search query   → JSON text
#
# RESOURCES:
#   dgraph://schema      current schema (text/plain)
#   movies://{id}        one movie by uid (application/json)
#
# CANCELLATION:
#   When the client cancels a request, the worker thread is abandoned and
#   the invocation's context is cancelled.  The Dgraph adapter aborts the
#   in-flight gRPC call and the transaction is discarded in the thread.
#
# RUNNING THIS SERVER:
#   a) Standalone:  python -m tools.mcp_server   (or the dgraph-mcp-server script)
#   b) Spawned by the ADK agent via stdio transport (see agent/graph_agent.py)
# =============================================================================

import json
import logging
import sys
from typing import Annotated, Any, Optional

import anyio
from dotenv import load_dotenv
from fastmcp import FastMCP
from fastmcp.exceptions import ResourceError, ToolError
from fastmcp.server.middleware import Middleware, MiddlewareContext
from pydantic import Field

from core.backend import DgraphBackend
from core.config import Settings
from core.context import InvocationContext
from core.dispatch import DispatchTable
from core.errors import BackendFailure, ConfigError, GraphMCPError, InvalidArgument
from core.handlers import (
    MovieDetailsHandler,
    MovieSearchHandler,
    MutationHandler,
    QueryHandler,
    SchemaAlterHandler,
    SchemaResourceHandler,
)
from core.models import ToolInvocation
from core.movies import seed_movies
from core.validation import (
    AlterSchemaArguments,
    MutateArguments,
    QueryArguments,
    SearchMoviesArguments,
    describe,
    validate_arguments,
)

logger = logging.getLogger("dgraph_mcp")

# =============================================================================
# Logging Setup
# =============================================================================
# We log to STDERR because stdout IS the MCP transport.  Anything printed to
# stdout would corrupt the JSON-RPC stream.
#
#   CYAN    incoming tool calls with their parameters
#   YELLOW  intermediate status (errors, cancellation)
#   GREEN   responses
# =============================================================================
_CYAN = "\033[36m"
_GREEN = "\033[32m"
_YELLOW = "\033[33m"
_RESET = "\033[0m"

# Responses can be whole query results; keep the log line readable.
_MAX_LOGGED_RESPONSE = 500


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [MCP] %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )


def _log_request(name: str, **params) -> None:
    """Log an incoming call with its parameters in CYAN."""
    param_str = ", ".join(f"{k}={v!r}" for k, v in params.items())
    logger.info(f"{_CYAN}{name} called with: {param_str}{_RESET}")


def _log_status(message: str) -> None:
    """Log an intermediate status message in YELLOW."""
    logger.info(f"{_YELLOW}  → {message}{_RESET}")


def _log_response(name: str, text: str) -> str:
    """Log the (possibly truncated) response in GREEN, then return it."""
    shown = text if len(text) <= _MAX_LOGGED_RESPONSE else text[:_MAX_LOGGED_RESPONSE] + "…"
    logger.info(f"{_GREEN}  ← {name} response: {shown}{_RESET}")
    return text


# =============================================================================
# Argument validation at the MCP edge
# =============================================================================
# Runs the core's argument models on the raw call BEFORE FastMCP binds it to
# a tool signature.  A mistyped or missing argument is reported as
# InvalidArgument and no tool body (and no transaction) runs.
# =============================================================================
class ArgumentValidationMiddleware(Middleware):
    def __init__(self, table: DispatchTable) -> None:
        self._table = table

    async def on_call_tool(self, context: MiddlewareContext, call_next):
        params = context.message
        handler = self._table.tools.get(params.name)
        if handler is not None:
            try:
                validate_arguments(params.name, handler.arguments, params.arguments or {})
            except InvalidArgument as e:
                _log_status(str(e))
                raise ToolError(str(e)) from e
        return await call_next(context)


# =============================================================================
# Server construction
# =============================================================================
def create_server(table: DispatchTable, timeout_seconds: Optional[float] = None) -> FastMCP:
    """Build a FastMCP server whose tools and resources call into ``table``.

    Args:
        table: The dispatch table, already built around a backend.
        timeout_seconds: Deadline applied to each invocation (None = none).
    """
    mcp = FastMCP("Dgraph MCP Server")
    mcp.add_middleware(ArgumentValidationMiddleware(table))

    async def _run(name: str, fn, *args):
        context = InvocationContext(timeout_seconds)
        try:
            return await anyio.to_thread.run_sync(fn, *args, context, abandon_on_cancel=True)
        except anyio.get_cancelled_exc_class():
            context.cancel()
            _log_status(f"{name} cancelled by client")
            raise

    async def _call_tool(name: str, arguments: dict[str, Any]) -> str:
        _log_request(name, **arguments)
        try:
            result = await _run(name, table.invoke, ToolInvocation(name, arguments))
        except GraphMCPError as e:
            _log_status(str(e))
            raise ToolError(str(e)) from e
        return _log_response(name, result.text)

    async def _read_resource(uri: str) -> str:
        _log_request("read_resource", uri=uri)
        try:
            result = await _run(uri, table.read_resource, uri)
        except GraphMCPError as e:
            _log_status(str(e))
            raise ResourceError(str(e)) from e
        return _log_response(uri, result.text)

    # -------------------------------------------------------------------------
    # TOOL: dgraph_query
    # -------------------------------------------------------------------------
    @mcp.tool(name=QueryHandler.name, description=QueryHandler.description)
    async def dgraph_query(
        query: Annotated[str, Field(strict=True, description=describe(QueryArguments, "query"))],
        variables: Annotated[
            Optional[dict[str, Any]],
            Field(strict=True, description=describe(QueryArguments, "variables")),
        ] = None,
    ) -> str:
        """Run a read-only query and return Dgraph's JSON response verbatim."""
        return await _call_tool(QueryHandler.name, {"query": query, "variables": variables})

    # -------------------------------------------------------------------------
    # TOOL: dgraph_mutate
    # -------------------------------------------------------------------------
    # commit=False runs the mutation and then discards it with the
    # transaction: useful as a dry run, nothing is persisted.
    @mcp.tool(name=MutationHandler.name, description=MutationHandler.description)
    async def dgraph_mutate(
        mutation: Annotated[str, Field(strict=True, description=describe(MutateArguments, "mutation"))],
        commit: Annotated[
            Optional[bool], Field(strict=True, description=describe(MutateArguments, "commit"))
        ] = True,
    ) -> str:
        return await _call_tool(MutationHandler.name, {"mutation": mutation, "commit": commit})

    # -------------------------------------------------------------------------
    # TOOL: dgraph_alter_schema
    # -------------------------------------------------------------------------
    @mcp.tool(name=SchemaAlterHandler.name, description=SchemaAlterHandler.description)
    async def dgraph_alter_schema(
        schema: Annotated[str, Field(strict=True, description=describe(AlterSchemaArguments, "schema"))],
    ) -> str:
        return await _call_tool(SchemaAlterHandler.name, {"schema": schema})

    # -------------------------------------------------------------------------
    # TOOL: search_movies
    # -------------------------------------------------------------------------
    # search_type is a plain string on purpose: an unknown selector is not an
    # error, it searches every field ("any").
    @mcp.tool(name=MovieSearchHandler.name, description=MovieSearchHandler.description)
    async def search_movies(
        search_term: Annotated[
            str, Field(strict=True, description=describe(SearchMoviesArguments, "search_term"))
        ],
        search_type: Annotated[
            Optional[str], Field(strict=True, description=describe(SearchMoviesArguments, "search_type"))
        ] = "any",
    ) -> str:
        return await _call_tool(
            MovieSearchHandler.name, {"search_term": search_term, "search_type": search_type}
        )

    # -------------------------------------------------------------------------
    # RESOURCES
    # -------------------------------------------------------------------------
    @mcp.resource(
        SchemaResourceHandler.uri,
        name=SchemaResourceHandler.name,
        description=SchemaResourceHandler.description,
        mime_type=SchemaResourceHandler.mime_type,
    )
    async def dgraph_schema() -> str:
        return await _read_resource(SchemaResourceHandler.uri)

    @mcp.resource(
        MovieDetailsHandler.uri,
        name=MovieDetailsHandler.name,
        description=MovieDetailsHandler.description,
        mime_type=MovieDetailsHandler.mime_type,
    )
    async def movie_details(id: str) -> str:
        return await _read_resource(f"movies://{id}")

    return mcp


# =============================================================================
# Server entry point
# =============================================================================
# Startup failures (config, connection, seeding) exit the process.  After
# that every failure is reported per-invocation.
# =============================================================================
def main() -> None:
    load_dotenv()
    try:
        settings = Settings.load()
    except ConfigError as e:
        configure_logging()
        logger.critical("Invalid configuration: %s", e)
        sys.exit(1)

    configure_logging(settings.log_level)

    try:
        backend = DgraphBackend.connect(settings.dgraph_host)
    except BackendFailure as e:
        logger.critical("Failed to connect to Dgraph: %s", e)
        sys.exit(1)

    try:
        if settings.seed_movies:
            try:
                seed_movies(backend, InvocationContext(settings.timeout_seconds))
            except GraphMCPError as e:
                logger.critical("Failed to seed movie database: %s", e)
                sys.exit(1)

        table = DispatchTable.build(backend)
        server = create_server(table, settings.timeout_seconds)
        logger.info(
            "Starting Dgraph MCP Server... %s",
            json.dumps({"host": settings.dgraph_host, "timeout": settings.timeout_seconds}),
        )
        server.run()
    finally:
        backend.close()


if __name__ == "__main__":
    main()
