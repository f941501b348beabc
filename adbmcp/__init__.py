"""
mcp-server-adb - Android Debug Bridge access via Model Context Protocol.

This package builds adb command lines, runs them, parses what adb prints and
exposes the result to AI assistants as MCP tools, resources and prompts.
"""
