"""
Rendering functions for devbase output.

This module handles all pretty-printing and table formatting.
Services return data, this module makes it human-readable.
"""

from rich.table import Table
from rich.console import Console
from rich import box
from typing import Any, Dict, List

from .domain.update import UpdatePlan

console = Console()


def render_version_table(info: List[Dict[str, Any]]) -> None:
    """
    Render installed version information for core and overlay.

    Args:
        info: Rows from RepositoryService.version_info()
    """
    table = Table(
        title="devbase",
        box=box.ROUNDED,
        show_header=True,
        header_style="bold magenta"
    )
    table.add_column("Repository", style="cyan")
    table.add_column("Tag")
    table.add_column("Commit", style="dim")
    table.add_column("Remote")
    table.add_column("Path", style="dim")

    for row in info:
        table.add_row(
            row.get('name', ''),
            row.get('tag') or "[dim]-[/dim]",
            row.get('commit') or "[dim]-[/dim]",
            row.get('remote') or "[yellow]not configured[/yellow]",
            row.get('path') or "[dim]-[/dim]",
        )

    console.print(table)


def render_update_plans(plans: List[UpdatePlan]) -> None:
    """Show what an update is about to change."""
    table = Table(box=box.SIMPLE, show_header=True, header_style="bold")
    table.add_column("Repository", style="cyan")
    table.add_column("Installed")
    table.add_column("")
    table.add_column("Available", style="green")

    for plan in plans:
        target = plan.target_ref or "latest"
        if plan.forced:
            target += " [yellow](forced)[/yellow]"
        table.add_row(plan.repository.label, plan.current_ref or "unknown", "→", target)

    console.print(table)


def format_banner(info: List[Dict[str, Any]]) -> List[str]:
    """Plain one-line-per-repo form, e.g. ``devbase-core v1.4.0 (3f2a9c1)``."""
    lines = []
    for row in info:
        tag = row.get('tag') or "unknown"
        commit = row.get('commit') or "unknown"
        lines.append(f"{row.get('name')} {tag} ({commit})")
    return lines
