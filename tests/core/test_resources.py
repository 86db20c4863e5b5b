"""Resource Resolver — fixed URIs, prefix templates, error kinds."""

import pytest

from core.errors import InvalidArgument, NotFound
from core.handlers import MovieDetailsHandler, SchemaResourceHandler
from core.resources import ResourceResolver, template_prefix


@pytest.fixture
def resolver(backend):
    return ResourceResolver([SchemaResourceHandler(backend), MovieDetailsHandler(backend)])


def test_fixed_resource_matches_exactly(resolver):
    handler, request = resolver.resolve("dgraph://schema")
    assert isinstance(handler, SchemaResourceHandler)
    assert request.identifier == ""


def test_template_extracts_identifier(resolver):
    handler, request = resolver.resolve("movies://0x2a")
    assert isinstance(handler, MovieDetailsHandler)
    assert request.uri == "movies://0x2a"
    assert request.identifier == "0x2a"


@pytest.mark.parametrize("uri", ["movie://0x1", "MOVIES://0x1", "http://movies/0x1", "dgraph://schemas"])
def test_unknown_prefix_is_not_found(resolver, uri):
    with pytest.raises(NotFound):
        resolver.resolve(uri)


def test_empty_identifier_is_invalid(resolver):
    with pytest.raises(InvalidArgument):
        resolver.resolve("movies://")


def test_template_prefix():
    assert template_prefix("movies://{id}") == "movies://"
    with pytest.raises(ValueError):
        template_prefix("movies://{id}/{rev}")


def test_duplicate_registration_is_rejected(backend):
    with pytest.raises(ValueError):
        ResourceResolver([MovieDetailsHandler(backend), MovieDetailsHandler(backend)])


def test_fixed_resources_are_read_only(resolver):
    with pytest.raises(TypeError):
        resolver.fixed["x://y"] = None
