"""Sveriges Radio MCP Server - Model Context Protocol bridge to the SR open API."""

__version__ = "1.3.0"
