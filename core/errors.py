# =============================================================================
# core/errors.py  —  Error taxonomy
# =============================================================================
#
# Four kinds of failure can come out of the core:
#
#   InvalidArgument  missing/mis-typed parameter, malformed resource id
#   NotFound         unknown tool, unknown resource, URI with no template
#   BackendFailure   anything Dgraph (or the gRPC channel) rejected
#   Cancelled        caller cancelled, or the deadline ran out
#
# InvalidArgument and NotFound are always raised before a transaction is
# opened.  The MCP layer turns every GraphMCPError into an error result;
# none of them crash the server.
# =============================================================================


class GraphMCPError(Exception):
    """Base class for every error the core reports to a caller."""

    kind = "Error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return f"{self.kind}: {self.message}"


class InvalidArgument(GraphMCPError):
    kind = "InvalidArgument"


class NotFound(GraphMCPError):
    kind = "NotFound"


class BackendFailure(GraphMCPError):
    kind = "BackendFailure"


class Cancelled(GraphMCPError):
    kind = "Cancelled"


class ConfigError(Exception):
    """Raised at startup when the environment holds an unusable value."""
