# =============================================================================
# core/models.py  —  Data Models (the "nouns" of the system)
# =============================================================================
#
# These dataclasses define the *shape* of every piece of information that
# flows between the MCP layer and Dgraph.  They carry no behavior beyond
# trivial normalisation; they are structured bags of data.
#
# THE FLOW OF NOUNS:
#   ToolInvocation  →  (validated)  →  QueryRequest / MutationRequest /
#   SchemaOperation  →  (backend)  →  QueryResult / MutationResult  →
#   ToolResult / ResourceResult
#
# All request objects are frozen: once the translator builds one, nobody
# downstream can rewrite it.
# =============================================================================

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping, Optional


# -----------------------------------------------------------------------------
# ToolInvocation: one inbound tool call
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class ToolInvocation:
    """A tool name plus its raw, not-yet-validated arguments.

    The arguments are copied into a read-only mapping so that a handler
    can never mutate what the caller sent.
    """

    name: str
    arguments: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "arguments", MappingProxyType(dict(self.arguments or {})))


# -----------------------------------------------------------------------------
# Backend requests
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class QueryRequest:
    """A read-only DQL query plus optional bound variables."""

    query: str
    variables: Optional[dict[str, str]] = None


@dataclass(frozen=True)
class MutationRequest:
    """RDF N-Quad statements to set, and whether to commit immediately."""

    set_nquads: str
    commit: bool = True


@dataclass(frozen=True)
class SchemaOperation:
    """Schema text applied as one global alteration (no rollback)."""

    schema: str


@dataclass(frozen=True)
class ResourceRequest:
    """A resource URI matched against a template, with its extracted id."""

    uri: str
    identifier: str


# -----------------------------------------------------------------------------
# Backend results
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class QueryResult:
    json: str                          # JSON document exactly as Dgraph returned it


@dataclass(frozen=True)
class MutationResult:
    uids: dict[str, str] = field(default_factory=dict)   # blank node → assigned uid
    committed: bool = False


# -----------------------------------------------------------------------------
# What the core hands back to the MCP layer
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class ToolResult:
    text: str


@dataclass(frozen=True)
class ResourceResult:
    uri: str
    mime_type: str
    text: str


# -----------------------------------------------------------------------------
# SearchType: the closed set of movie search selectors
# -----------------------------------------------------------------------------
class SearchType(str, Enum):
    """Which predicate(s) a movie search looks at."""

    TITLE = "title"
    ACTOR = "actor"
    DIRECTOR = "director"
    GENRE = "genre"
    ANY = "any"

    @classmethod
    def parse(cls, value: Optional[str]) -> "SearchType":
        """Map a raw selector string to a SearchType.

        Anything unrecognised (including None) falls back to ANY.
        """
        for member in cls:
            if member.value == value:
                return member
        return cls.ANY
