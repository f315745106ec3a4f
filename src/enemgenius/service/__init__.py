"""Server-side services: persistence, question generation and the MCP server."""
