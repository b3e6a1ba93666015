"""MCP server that delegates coding tasks to an external coding assistant."""

__version__ = "0.1.0"

__all__ = ["__version__"]
