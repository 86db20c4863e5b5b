# =============================================================================
# core/__init__.py
# =============================================================================
# The adapter between tool invocations and Dgraph transactions.
#
# CRITICAL ARCHITECTURAL RULE:
#   Nothing in this package imports FastMCP, Google ADK, or any protocol
#   framework.  The only third-party imports (pydgraph, grpc) are confined
#   to core/backend.py; everything else talks to the Backend protocol and
#   can be tested against a fake.
# =============================================================================
