# =============================================================================
# agent/graph_agent.py  —  Google ADK Agent Configuration
# =============================================================================
#
# WHAT THIS FILE DOES:
#   Creates the ADK agent that talks to Dgraph ONLY through our MCP server.
#
#   ┌────────────────────────────┐   stdio    ┌─────────────────────────┐
#   │  ADK Agent (LiteLlm model) │ ─────────▶ │  tools/mcp_server.py    │
#   │  + system prompt           │ ◀───────── │  (FastMCP)              │
#   └────────────────────────────┘            └────────────┬────────────┘
#                                                          │ gRPC
#                                                          ▼
#                                                  ┌───────────────┐
#                                                  │    Dgraph     │
#                                                  └───────────────┘
#
# MCP CONNECTION:
#   ADK starts the server as a subprocess ("python -m tools.mcp_server") in
#   the project root and inherits our environment, so DGRAPH_HOST and
#   friends reach the server unchanged.
#
# MODEL:
#   Any LiteLLM model string works; GRAPH_AGENT_MODEL overrides the default.
# =============================================================================

import os
import sys

from google.adk.agents import Agent
from google.adk.models.lite_llm import LiteLlm
from google.adk.tools.mcp_tool import MCPToolset
from mcp import StdioServerParameters

from agent.prompt import get_graph_assistant_prompt

DEFAULT_MODEL = "openrouter/openai/gpt-4o"


def server_parameters() -> StdioServerParameters:
    """How ADK should launch the Dgraph MCP server."""
    project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
    return StdioServerParameters(
        command=sys.executable,
        args=["-m", "tools.mcp_server"],
        cwd=project_root,
        env=dict(os.environ),
    )


def create_agent(model: str | None = None) -> Agent:
    """Create the graph assistant agent.

    Args:
        model: LiteLLM model string.  Defaults to $GRAPH_AGENT_MODEL, then
            to DEFAULT_MODEL.

    Returns:
        A configured Google ADK Agent whose only tools come from the
        Dgraph MCP server.
    """
    mcp_tools = MCPToolset(connection_params=server_parameters())

    return Agent(
        name="dgraph_assistant",
        model=LiteLlm(model=model or os.getenv("GRAPH_AGENT_MODEL", DEFAULT_MODEL)),
        instruction=get_graph_assistant_prompt(),
        tools=[mcp_tools],
    )
