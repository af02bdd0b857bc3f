"""ServiceNow Dev MCP server: now-sdk CLI wrappers and Fluent code generators."""

__version__ = "1.0.0"
