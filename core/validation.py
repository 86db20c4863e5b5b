# =============================================================================
# core/validation.py  —  Argument Validator
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Declares each tool's arguments as a strict pydantic model and checks a
#   raw argument mapping against it, returning a plain dict of values.
#
# RULES:
#   - required field missing (or None)      → InvalidArgument
#   - field present with the wrong type     → InvalidArgument (no coercion:
#                                             "false" is not a boolean)
#   - optional field missing (or None)      → its documented default
#   - unknown extra fields                  → passed through untouched
#
# The same models are the single source of truth for the MCP layer: the
# server validates inbound calls against them before anything else runs.
#
# Validation never touches the backend, so a bad call costs nothing: no
# transaction is opened until this module has said yes.
# =============================================================================

from typing import Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from core.errors import InvalidArgument


class ToolArguments(BaseModel):
    """Base for every tool's argument model: strict types, extras kept."""

    model_config = ConfigDict(strict=True, extra="allow", frozen=True)


# -----------------------------------------------------------------------------
# Declared argument shapes, one model per tool
# -----------------------------------------------------------------------------
class QueryArguments(ToolArguments):
    query: str = Field(description="The DQL (GraphQL+-) query to execute")
    variables: Optional[dict[str, Any]] = Field(
        default=None,
        description='Variables for the query, e.g. {"$name": "Alice"} (optional)',
    )


class MutateArguments(ToolArguments):
    mutation: str = Field(description="The RDF N-Quad mutation to execute")
    commit: bool = Field(default=True, description="Whether to commit the transaction (default: true)")


class AlterSchemaArguments(ToolArguments):
    schema_text: str = Field(alias="schema", description="The schema definition to apply")


class SearchMoviesArguments(ToolArguments):
    search_term: str = Field(description="The search term to look for in movie titles, actor names, etc.")
    search_type: str = Field(default="any", description="Type of search: title, actor, director, genre, or any")


def describe(model: type[ToolArguments], name: str) -> Optional[str]:
    """Description of the argument ``name`` (by its wire name) in ``model``."""
    for field_name, info in model.model_fields.items():
        if (info.alias or field_name) == name:
            return info.description
    return None


def _explain(tool_name: str, error: Mapping[str, Any]) -> str:
    field = ".".join(str(part) for part in error["loc"]) or "arguments"
    if error["type"] == "missing":
        return f"{tool_name}: '{field}' is required"
    message = error["msg"][:1].lower() + error["msg"][1:]
    return f"{tool_name}: '{field}' {message}, got {type(error['input']).__name__}"


def validate_arguments(
    tool_name: str, model: type[ToolArguments], arguments: Mapping[str, Any]
) -> dict[str, Any]:
    """Validate ``arguments`` against ``model`` for the tool ``tool_name``.

    Returns a new dict keyed by wire names: declared fields (with defaults
    filled in) plus any undeclared extras.  The input mapping is never
    modified.

    Raises:
        InvalidArgument: naming the first offending argument.
    """
    # An explicit null means "not given".
    present = {key: value for key, value in arguments.items() if value is not None}
    try:
        validated = model.model_validate(present)
    except ValidationError as e:
        raise InvalidArgument(_explain(tool_name, e.errors()[0])) from e
    return validated.model_dump(by_alias=True)


def normalize_variables(variables: Optional[Mapping[str, Any]]) -> Optional[dict[str, str]]:
    """Turn query variables into the string→string map Dgraph expects.

    Strings pass through, booleans become "true"/"false", numbers are
    stringified.  Nested objects and lists are rejected.
    """
    if variables is None:
        return None
    normalized: dict[str, str] = {}
    for key, value in variables.items():
        if not isinstance(key, str) or not key:
            raise InvalidArgument("variables: keys must be non-empty strings")
        if isinstance(value, str):
            normalized[key] = value
        elif isinstance(value, bool):
            normalized[key] = "true" if value else "false"
        elif isinstance(value, (int, float)):
            normalized[key] = str(value)
        else:
            raise InvalidArgument(
                f"variables: value for '{key}' must be a string, number or boolean, "
                f"got {type(value).__name__}"
            )
    return normalized
