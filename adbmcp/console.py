"""
Console output for adb-mcp using the rich library.

Only the SSE transport prints here; in stdio mode stdout carries the protocol.
"""

from typing import Any

from rich.console import Console
from rich.style import Style
from rich.table import Table
from rich.text import Text

console = Console(highlight=True)

COLORS = {
    "android_green": "#3DDC84",
    "slate": "#A0A8B8",
    "sky": "#00BFFF",
    "amber": "#FFBF00",
}


def print_banner() -> None:
    """Print the server name and tagline."""
    console.print()
    console.print(Text("mcp-server-adb", style=Style(color=COLORS["android_green"], bold=True)), justify="center")
    console.print(Text("Android Debug Bridge over MCP", style=Style(color=COLORS["slate"])), justify="center")
    console.print()


def display_system_info(config: dict[str, Any]) -> None:
    """Print the server configuration as a borderless table."""
    info_table = Table(box=None, show_header=False, padding=(0, 2), show_edge=False)
    info_table.add_column("Category", style=f"bold {COLORS['android_green']}", width=10)
    info_table.add_column("Key", style=f"bold {COLORS['sky']}", width=14)
    info_table.add_column("Value")

    info_table.add_row("SERVER", "Transport", config["transport"])
    info_table.add_row("", "Host", f"{config['host']} {config.get('host_note', '')}".rstrip())
    info_table.add_row("", "Port", str(config["port"]))
    info_table.add_row("", "Log Level", config["log_level"])
    info_table.add_row("", "", "")
    info_table.add_row("ADB", "Binary", config["adb_path"])
    info_table.add_row("", "Timeout", config["timeout"])
    info_table.add_row("", "Cache Size", str(config["cache_size"]))
    info_table.add_row("", "", "")
    info_table.add_row("NETWORK", "SSE URL", f"http://{config['host']}:{config['port']}/sse")
    info_table.add_row("", "Exit", "Press Ctrl+C to exit")

    rule = Text("─" * console.width, style=Style(color=COLORS["slate"]))
    console.print(rule)
    console.print(info_table)
    console.print(rule)
    console.print()
