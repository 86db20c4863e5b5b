# =============================================================================
# agent/__init__.py
# =============================================================================
# The Google ADK agent that drives the Dgraph MCP server over stdio.
#
# ARCHITECTURAL ROLE:
#   agent/ is a CLIENT of tools/mcp_server.py.  It never imports core/ and
#   never talks to Dgraph directly: every read, write and schema change goes
#   through the same MCP tools any other client would use.
# =============================================================================
