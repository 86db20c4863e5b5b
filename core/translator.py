# =============================================================================
# core/translator.py  —  Query / Mutation / Schema Translator
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Builds the backend request objects from validated arguments.
#
#   - Queries, mutations and schema text supplied by the caller pass through
#     UNMODIFIED.  We don't parse DQL or RDF; Dgraph does.
#   - The movie search tool is different: the query is DERIVED here from a
#     search term and a selector.  Because the term lands inside a DQL
#     string literal, it is escaped first, and terms carrying control
#     characters are refused outright.
#   - Resource lookups (movies://{id}) only accept ids that look like a
#     Dgraph uid, so the id can't smuggle query syntax into uid(...).
# =============================================================================

import re

from core.errors import InvalidArgument
from core.models import (
    MutationRequest,
    QueryRequest,
    SchemaOperation,
    SearchType,
)

SCHEMA_QUERY = "schema {}"

_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f]")
_UID = re.compile(r"0x[0-9a-fA-F]+|[0-9]+")


def build_query(query: str, variables: dict[str, str] | None = None) -> QueryRequest:
    return QueryRequest(query=query, variables=variables or None)


def build_mutation(nquads: str, commit: bool = True) -> MutationRequest:
    return MutationRequest(set_nquads=nquads, commit=commit)


def build_schema_operation(schema: str) -> SchemaOperation:
    return SchemaOperation(schema=schema)


def build_schema_query() -> QueryRequest:
    """The read query that returns the current schema."""
    return QueryRequest(query=SCHEMA_QUERY)


# -----------------------------------------------------------------------------
# Derived movie search queries
# -----------------------------------------------------------------------------
def escape_term(term: str) -> str:
    """Make ``term`` safe to place between double quotes in DQL.

    Backslashes and double quotes are escaped; control characters and blank
    terms are rejected with InvalidArgument.
    """
    if not term.strip():
        raise InvalidArgument("search_term must not be blank")
    if _CONTROL_CHARS.search(term):
        raise InvalidArgument("search_term must not contain control characters")
    return term.replace("\\", "\\\\").replace('"', '\\"')


def _search_template(search_type: SearchType) -> tuple[str, str]:
    """Return (root function, extra predicates) for a search type."""
    if search_type is SearchType.TITLE:
        return 'alloftext(title, "{term}")', ""
    if search_type is SearchType.ACTOR:
        return 'allofterms(actors, "{term}")', "actors"
    if search_type is SearchType.DIRECTOR:
        return 'allofterms(director, "{term}")', ""
    if search_type is SearchType.GENRE:
        return 'allofterms(genres, "{term}")', "genres"
    return 'anyoftext(title director actors genres, "{term}")', ""


def build_movie_search(search_term: str, search_type: str | SearchType | None = None) -> QueryRequest:
    """Build the DQL query for a movie search.

    Args:
        search_term: Free text to look for.  Escaped before substitution.
        search_type: One of title/actor/director/genre/any.  Anything else
            falls back to "any".

    Returns:
        A QueryRequest whose root block is named ``movies``.
    """
    kind = search_type if isinstance(search_type, SearchType) else SearchType.parse(search_type)
    func, extra = _search_template(kind)
    func = func.format(term=escape_term(search_term))

    fields = ["uid", "title", "release_year", "director"]
    if extra:
        fields.append(extra)
    fields.append("rating")

    body = "\n".join(f"    {name}" for name in fields)
    return QueryRequest(query=f"{{\n  movies(func: {func}) {{\n{body}\n  }}\n}}")


# -----------------------------------------------------------------------------
# Resource lookups
# -----------------------------------------------------------------------------
def build_movie_details(movie_id: str) -> QueryRequest:
    """Build the lookup-by-uid query behind movies://{id}."""
    if not movie_id:
        raise InvalidArgument("movie id must not be empty")
    if not _UID.fullmatch(movie_id):
        raise InvalidArgument(f"'{movie_id}' is not a valid uid")
    return QueryRequest(
        query=(
            "{\n"
            f"  movie(func: uid({movie_id})) {{\n"
            "    title\n"
            "    release_year\n"
            "    director\n"
            "    actors\n"
            "    genres\n"
            "    rating\n"
            "    description\n"
            "  }\n"
            "}"
        )
    )
