# =============================================================================
# tools/__init__.py
# =============================================================================
# FastMCP surface of the Dgraph adapter.
#
# ARCHITECTURAL ROLE:
#   tools/ is the "translation layer" between MCP and core/.  It:
#     1. Declares each tool/resource with typed, described parameters
#     2. Packs the parameters into a ToolInvocation / resource URI
#     3. Runs the core in a worker thread (one Dgraph transaction per call)
#     4. Converts core errors into MCP error results
#
# WHAT TOOLS DO NOT DO:
#   - They do NOT build queries or touch transactions (that's core/)
#   - They do NOT know about Google ADK (that's agent/)
# =============================================================================
