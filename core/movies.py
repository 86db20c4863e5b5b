# =============================================================================
# core/movies.py  —  Movie sample database (schema + seed data)
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Prepares a Dgraph instance for the search_movies tool and the
#   movies://{id} resource: applies the movie schema, and inserts three
#   sample films only when the database has no movies yet.
#
# WHEN DOES IT RUN?
#   Only at server startup, and only when DGRAPH_SEED_MOVIES is enabled.
#   Seeding is idempotent: running it against a populated database applies
#   the (unchanged) schema and adds nothing.
#
# INDEXES MATTER:
#   The search templates in core/translator.py rely on these indexes:
#     alloftext(title, ...)      → title needs @index(fulltext)
#     allofterms(director, ...)  → director/actors/genres need @index(term)
#   The "any" template uses anyoftext over all four, which Dgraph only
#   accepts on fulltext-indexed predicates, so those carry both.
# =============================================================================

import json
import logging

from core.backend import Backend
from core.context import InvocationContext
from core.models import MutationRequest, QueryRequest, SchemaOperation
from core.transactions import with_transaction

logger = logging.getLogger(__name__)


MOVIE_SCHEMA = """
title: string @index(fulltext) .
release_year: int @index(int) .
director: string @index(term, fulltext) .
actors: [string] @index(term, fulltext) .
genres: [string] @index(term, fulltext) .
rating: float .
description: string .

type Movie {
  title
  release_year
  director
  actors
  genres
  rating
  description
}
"""

COUNT_MOVIES_QUERY = "{ movies(func: has(title)) { count(uid) } }"


def _movie_nquads(key: str, title: str, year: int, director: str,
                  actors: list[str], genres: list[str], rating: float,
                  description: str) -> str:
    node = f"_:{key}"
    lines = [
        f'{node} <title> {json.dumps(title)} .',
        f'{node} <release_year> "{year}" .',
        f'{node} <director> {json.dumps(director)} .',
    ]
    lines += [f'{node} <actors> {json.dumps(actor)} .' for actor in actors]
    lines += [f'{node} <genres> {json.dumps(genre)} .' for genre in genres]
    lines += [
        f'{node} <rating> "{rating}" .',
        f'{node} <description> {json.dumps(description)} .',
        f'{node} <dgraph.type> "Movie" .',
    ]
    return "\n".join(lines)


SAMPLE_MOVIES = "\n".join([
    _movie_nquads(
        "inception", "Inception", 2010, "Christopher Nolan",
        ["Leonardo DiCaprio", "Joseph Gordon-Levitt", "Ellen Page"],
        ["Sci-Fi", "Action"], 8.8,
        "A thief who steals corporate secrets through the use of dream-sharing "
        "technology is given the inverse task of planting an idea into the mind of a C.E.O.",
    ),
    _movie_nquads(
        "darkKnight", "The Dark Knight", 2008, "Christopher Nolan",
        ["Christian Bale", "Heath Ledger", "Aaron Eckhart"],
        ["Action", "Crime", "Drama"], 9.0,
        "When the menace known as the Joker wreaks havoc and chaos on the people of "
        "Gotham, Batman must accept one of the greatest psychological and physical "
        "tests of his ability to fight injustice.",
    ),
    _movie_nquads(
        "pulpFiction", "Pulp Fiction", 1994, "Quentin Tarantino",
        ["John Travolta", "Uma Thurman", "Samuel L. Jackson"],
        ["Crime", "Drama"], 8.9,
        "The lives of two mob hitmen, a boxer, a gangster and his wife, and a pair "
        "of diner bandits intertwine in four tales of violence and redemption.",
    ),
])


def count_movies(result_json: str) -> int:
    """Read the movie count out of a COUNT_MOVIES_QUERY response.

    Dgraph answers either {"movies": []} or {"movies": [{"count": N}]}.
    """
    rows = json.loads(result_json or "{}").get("movies") or []
    return sum(int(row.get("count", 0)) for row in rows)


def seed_movies(backend: Backend, context: InvocationContext) -> bool:
    """Apply the movie schema and insert sample data into an empty database.

    Returns:
        True if the sample movies were inserted, False if movies already
        existed.
    """
    backend.alter(SchemaOperation(schema=MOVIE_SCHEMA), context)
    logger.info("Movie schema set up successfully")

    existing = with_transaction(
        backend, True,
        lambda txn: count_movies(txn.query(QueryRequest(query=COUNT_MOVIES_QUERY), context).json),
        context,
    )
    if existing:
        logger.info("Found %d movies; skipping sample data", existing)
        return False

    with_transaction(
        backend, False,
        lambda txn: txn.mutate(MutationRequest(set_nquads=SAMPLE_MOVIES, commit=True), context),
        context,
    )
    logger.info("Sample movies added successfully")
    return True
