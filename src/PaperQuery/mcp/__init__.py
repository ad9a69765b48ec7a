"""MCP server exposing PaperQuery operations as tools."""

from __future__ import annotations

from PaperQuery.mcp.server import create_server, main
from PaperQuery.mcp.tools import PaperTools

__all__ = ["PaperTools", "create_server", "main"]
