"""Rich terminal output for a record stream."""

from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from wrfoutput.errors import WrfOutputError
from wrfoutput.models import OutputFile
from wrfoutput.stream.results import ResultStream

# Styles cycle over domains so nested grids are easy to tell apart.
_DOMAIN_STYLES = ["cyan", "green", "magenta", "yellow", "blue"]


def _domain_style(domain: int) -> str:
    return _DOMAIN_STYLES[(domain - 1) % len(_DOMAIN_STYLES)]


def _fmt_instant(record: OutputFile) -> str:
    return record.instant.strftime("%Y-%m-%d %H:%M")


def render_records(stream: ResultStream, no_color: bool = False, console: Optional[Console] = None) -> bool:
    """Print every record of ``stream`` as it arrives, then a status panel.

    Returns True when the run completed without failure.
    """
    if console is None:
        console = Console(force_terminal=not no_color, no_color=no_color, highlight=False)

    table = Table(title="WRF output files", border_style="dim")
    table.add_column("Hour", justify="right")
    table.add_column("Type", style="bold")
    table.add_column("Domain", justify="center")
    table.add_column("Instant (UTC)")
    table.add_column("Filename", style="dim")

    count = 0
    kinds: dict[str, int] = {}
    failure = None
    for item in stream:
        if isinstance(item, WrfOutputError):
            failure = item
            break
        count += 1
        kinds[item.kind] = kinds.get(item.kind, 0) + 1
        style = _domain_style(item.domain)
        table.add_row(
            str(item.hour_offset),
            item.kind,
            f"[{style}]d{item.domain:02d}[/{style}]",
            _fmt_instant(item),
            item.filename,
        )

    if count:
        console.print(table)

    summary = ", ".join(f"{kind}: {n}" for kind, n in sorted(kinds.items())) or "none"
    if failure is None:
        console.print(Panel(
            f"Status: [bold green]completed[/bold green]\n"
            f"Files: {count} ({summary})",
            title="WRF run",
            border_style="green",
        ))
        return True

    console.print(Panel(
        f"Status: [bold red]failed[/bold red]\n"
        f"Files before failure: {count} ({summary})\n"
        f"Error: {escape(str(failure))}",
        title="WRF run",
        border_style="red",
    ))
    return False
