"""
Read-only Algorand MCP server package.

This package exposes LLM-friendly tools backed by algod and the indexer, and
normalizes every tool result into a size-bounded, paginated envelope. See
DESIGN.md for full details.
"""

__all__ = ["config", "response"]
