"""MCP tools for the Primavera Data Service REST API."""

__version__ = "0.1.0"
