# =============================================================================
# core/resources.py  —  Resource Resolver
# =============================================================================
#
# Two kinds of resources:
#   - FIXED     an exact URI, e.g. dgraph://schema
#   - TEMPLATE  a prefix plus one path parameter, e.g. movies://{id}
#
# Both are registered once when the resolver is built and are frozen from
# then on.  resolve() never touches the backend: a bad URI fails before any
# transaction could be opened.
# =============================================================================

from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterable, Protocol

from core.context import InvocationContext
from core.errors import InvalidArgument, NotFound
from core.models import ResourceRequest, ResourceResult


class ResourceHandler(Protocol):
    uri: str                           # fixed URI or "prefix://{param}" template
    name: str
    description: str
    mime_type: str

    def read(self, request: ResourceRequest, context: InvocationContext) -> ResourceResult: ...


@dataclass(frozen=True)
class _Template:
    prefix: str
    handler: ResourceHandler


def template_prefix(uri_template: str) -> str:
    """'movies://{id}' → 'movies://'."""
    head, brace, tail = uri_template.partition("{")
    if not brace or not tail.endswith("}") or "{" in tail:
        raise ValueError(f"unsupported URI template: {uri_template!r}")
    return head


def is_template(uri: str) -> bool:
    return "{" in uri


class ResourceResolver:
    """Maps a resource URI to its handler and request."""

    def __init__(self, handlers: Iterable[ResourceHandler]) -> None:
        fixed: dict[str, ResourceHandler] = {}
        templates: list[_Template] = []
        for handler in handlers:
            if is_template(handler.uri):
                prefix = template_prefix(handler.uri)
                if any(t.prefix == prefix for t in templates):
                    raise ValueError(f"duplicate resource template prefix: {prefix!r}")
                templates.append(_Template(prefix, handler))
            else:
                if handler.uri in fixed:
                    raise ValueError(f"duplicate resource: {handler.uri!r}")
                fixed[handler.uri] = handler
        self._fixed = MappingProxyType(fixed)
        self._templates = tuple(templates)

    @property
    def fixed(self):
        return self._fixed

    @property
    def templates(self) -> tuple[ResourceHandler, ...]:
        return tuple(t.handler for t in self._templates)

    def resolve(self, uri: str) -> tuple[ResourceHandler, ResourceRequest]:
        """Find the handler for ``uri``.

        Raises:
            NotFound: no fixed resource or template prefix matches.
            InvalidArgument: a template matched but the identifier is empty.
        """
        handler = self._fixed.get(uri)
        if handler is not None:
            return handler, ResourceRequest(uri=uri, identifier="")

        for template in self._templates:
            if uri.startswith(template.prefix):
                identifier = uri[len(template.prefix):]
                if not identifier:
                    raise InvalidArgument(f"resource URI '{uri}' has an empty identifier")
                return template.handler, ResourceRequest(uri=uri, identifier=identifier)

        raise NotFound(f"no resource matches '{uri}'")
