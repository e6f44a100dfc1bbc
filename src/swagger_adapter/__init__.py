"""MCP server exposing OpenAPI loading and generic HTTP calls as tools."""

__version__ = "0.1.0"
