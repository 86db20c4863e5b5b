"""Translator — pass-through requests, derived search queries, uid lookups."""

import pytest

from core.errors import InvalidArgument
from core.models import SearchType
from core.translator import (
    SCHEMA_QUERY,
    build_movie_details,
    build_movie_search,
    build_mutation,
    build_query,
    build_schema_operation,
    build_schema_query,
    escape_term,
)


def test_query_text_passes_through_unmodified():
    text = "{ q(func: has(name)) { name } }"
    request = build_query(text, {"$a": "1"})
    assert request.query == text
    assert request.variables == {"$a": "1"}


def test_empty_variables_become_none():
    assert build_query("{}", {}).variables is None


def test_mutation_wraps_nquads_with_commit_flag():
    request = build_mutation('_:a <name> "A" .', commit=False)
    assert request.set_nquads == '_:a <name> "A" .'
    assert request.commit is False


def test_schema_operation_is_unmodified():
    assert build_schema_operation("name: string @index(exact) .").schema == "name: string @index(exact) ."


def test_schema_query():
    assert build_schema_query().query == SCHEMA_QUERY == "schema {}"


@pytest.mark.parametrize(
    "search_type, expected",
    [
        ("title", 'alloftext(title, "Nolan")'),
        ("actor", 'allofterms(actors, "Nolan")'),
        ("director", 'allofterms(director, "Nolan")'),
        ("genre", 'allofterms(genres, "Nolan")'),
        ("any", 'anyoftext(title director actors genres, "Nolan")'),
    ],
)
def test_each_search_type_uses_its_template(search_type, expected):
    query = build_movie_search("Nolan", search_type).query
    assert f"movies(func: {expected})" in query


def test_director_search_example():
    query = build_movie_search("Nolan", "director").query
    assert 'allofterms(director, "Nolan")' in query


def test_unrecognized_search_type_falls_back_to_any():
    assert build_movie_search("Nolan", "budget").query == build_movie_search("Nolan", "any").query


def test_missing_search_type_falls_back_to_any():
    assert build_movie_search("Nolan", None).query == build_movie_search("Nolan", SearchType.ANY).query


def test_list_predicates_are_selected_for_actor_and_genre():
    assert "    actors\n" in build_movie_search("Bale", "actor").query
    assert "    genres\n" in build_movie_search("Drama", "genre").query
    assert "actors" not in build_movie_search("Inception", "title").query.split(")", 1)[1]


def test_search_term_quotes_are_escaped():
    query = build_movie_search('Nolan") { uid } }', "director").query
    assert 'allofterms(director, "Nolan\\") { uid } }")' in query


def test_escape_term_escapes_backslash_before_quote():
    assert escape_term('a\\"b') == 'a\\\\\\"b'


@pytest.mark.parametrize("term", ["", "   ", "line\nbreak", "tab\there", "nul\x00"])
def test_bad_search_terms_are_rejected(term):
    with pytest.raises(InvalidArgument):
        build_movie_search(term, "any")


@pytest.mark.parametrize("uid", ["0x1", "0xABCdef", "42"])
def test_movie_details_accepts_uids(uid):
    assert f"movie(func: uid({uid}))" in build_movie_details(uid).query


@pytest.mark.parametrize(
    "uid", ["", "0x", "abc", "0x1\n", "42\n", "0x1) { uid } q(func: has(name)"]
)
def test_movie_details_rejects_malformed_ids(uid):
    with pytest.raises(InvalidArgument):
        build_movie_details(uid)
