# =============================================================================
# main.py  —  Entry Point for the Dgraph Assistant Agent
# =============================================================================
#
# HOW TO RUN:
#   python main.py            (Dgraph reachable at $DGRAPH_HOST)
#
# WHAT HAPPENS:
#   1. Creates the Google ADK agent (agent/graph_agent.py)
#   2. The agent spawns the Dgraph MCP server as a subprocess over stdio
#   3. Each line you type is sent to the agent; it queries, mutates or
#      inspects the schema through the MCP tools
#   4. The agent's final answer is printed
#
# The MCP server itself can also be run alone (python -m tools.mcp_server)
# and attached to any MCP client.
# =============================================================================

import asyncio

from dotenv import load_dotenv

# Load .env BEFORE creating the agent: LiteLlm reads provider keys and the
# spawned server reads DGRAPH_* from the environment.
load_dotenv()

from google.adk.runners import Runner
from google.adk.sessions import InMemorySessionService
from google.genai import types

from agent.graph_agent import create_agent

APP_NAME = "dgraph_assistant"
USER_ID = "local_user"


async def run_agent():
    """Run the Dgraph assistant interactively until the user quits."""
    print("=" * 70)
    print("  DGRAPH ASSISTANT")
    print("  Google ADK + LiteLLM + FastMCP + Dgraph")
    print("=" * 70)
    print("\nInitializing agent...")
    agent = create_agent()

    session_service = InMemorySessionService()
    runner = Runner(agent=agent, app_name=APP_NAME, session_service=session_service)
    session = await session_service.create_session(app_name=APP_NAME, user_id=USER_ID)

    print("Agent ready. Ask about your graph (type 'quit' to exit).")
    print("-" * 70)

    while True:
        try:
            user_input = input("\nYou: ").strip()
        except (EOFError, KeyboardInterrupt):
            print("\n\nGoodbye!")
            break

        if user_input.lower() in ("quit", "exit", "q"):
            print("\nGoodbye!")
            break

        if not user_input:
            continue

        user_message = types.Content(role="user", parts=[types.Part(text=user_input)])

        final_response = ""
        async for event in runner.run_async(
            user_id=USER_ID,
            session_id=session.id,
            new_message=user_message,
        ):
            if event.content and event.content.parts:
                for part in event.content.parts:
                    if getattr(part, "text", None):
                        final_response = part.text
                    if getattr(part, "function_call", None):
                        print(f"  Calling tool: {part.function_call.name}")

        print("-" * 70)
        if final_response:
            print(f"\nAgent:\n\n{final_response}")
        else:
            print("\nNo response generated. The agent may have encountered an error.")


if __name__ == "__main__":
    asyncio.run(run_agent())
