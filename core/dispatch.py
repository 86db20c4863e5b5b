# =============================================================================
# core/dispatch.py  —  Tool Dispatch Table
# =============================================================================
#
# The single registry of everything the server can do.  Built ONCE at
# startup from the fixed handler declarations, then read-only for the life
# of the process, so concurrent invocations can share it without locks.
#
# Lookup is exact-match on the tool name.  An unknown name fails with
# NotFound here, before the validator (and long before any transaction).
# =============================================================================

import logging
from types import MappingProxyType
from typing import Iterable, Mapping

from core.backend import Backend
from core.context import InvocationContext
from core.errors import NotFound
from core.handlers import RESOURCE_HANDLERS, TOOL_HANDLERS, ToolHandler
from core.models import ResourceResult, ToolInvocation, ToolResult
from core.resources import ResourceHandler, ResourceResolver

logger = logging.getLogger(__name__)


class DispatchTable:
    """Read-only mapping from tool name / resource URI to handler."""

    def __init__(self, tools: Iterable[ToolHandler], resources: Iterable[ResourceHandler]) -> None:
        registry: dict[str, ToolHandler] = {}
        for handler in tools:
            if handler.name in registry:
                raise ValueError(f"duplicate tool name: {handler.name!r}")
            registry[handler.name] = handler
        self._tools = MappingProxyType(registry)
        self._resources = ResourceResolver(resources)

    @classmethod
    def build(cls, backend: Backend) -> "DispatchTable":
        """Construct every declared handler around ``backend``."""
        table = cls(
            tools=[handler_cls(backend) for handler_cls in TOOL_HANDLERS],
            resources=[handler_cls(backend) for handler_cls in RESOURCE_HANDLERS],
        )
        logger.info(
            "Dispatch table ready: tools=%s resources=%s",
            table.tool_names(), table.resource_uris(),
        )
        return table

    @property
    def tools(self) -> Mapping[str, ToolHandler]:
        return self._tools

    @property
    def resources(self) -> ResourceResolver:
        return self._resources

    def tool_names(self) -> list[str]:
        return sorted(self._tools)

    def resource_uris(self) -> list[str]:
        return list(self._resources.fixed) + [h.uri for h in self._resources.templates]

    def invoke(self, invocation: ToolInvocation, context: InvocationContext) -> ToolResult:
        handler = self._tools.get(invocation.name)
        if handler is None:
            raise NotFound(f"unknown tool '{invocation.name}'")
        return handler(invocation, context)

    def read_resource(self, uri: str, context: InvocationContext) -> ResourceResult:
        handler, request = self._resources.resolve(uri)
        return handler.read(request, context)
