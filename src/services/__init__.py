"""MCP service layer: tool registry, tools and server."""
