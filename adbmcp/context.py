"""
adb-mcp MCP Instance.

The FastMCP server object lives here so resource, tool and prompt modules can
register against it without importing the server entry point.
"""

from mcp.server.fastmcp import FastMCP

mcp = FastMCP(
    "mcp-server-adb",
    instructions="List Android devices, read their properties and relay input and screenshots through adb",
)
