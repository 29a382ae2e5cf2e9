"""
Read-only Secret Network MCP server package.

This package exposes LLM-friendly tools backed by a Secret Network LCD
endpoint. See DESIGN.md for full details.
"""

__version__ = "0.1.0"

__all__ = ["__version__", "config"]
