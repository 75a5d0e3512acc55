"""
Logging helpers: coloured, timestamped output with rich-style sections.
Messages are escaped before printing, so ``[group:artifact]`` style
coordinates are shown literally instead of being parsed as markup.
"""
from datetime import datetime

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.text import Text

_console     = Console()
_console_err = Console(stderr=True)

_verbose = False


def set_verbose(enabled: bool) -> None:
    """Turn :func:`debug` output on or off."""
    global _verbose
    _verbose = enabled


def is_verbose() -> bool:
    return _verbose


def _ts() -> str:
    return datetime.now().strftime("%H:%M:%S")


def section(title: str) -> None:
    _console.rule(f"[bold cyan]{escape(title)}[/bold cyan]")


def debug(msg: str) -> None:
    if _verbose:
        _console.print(f"[dim]{_ts()}  ·  {escape(msg)}[/dim]")


def info(msg: str) -> None:
    _console.print(f"[dim]{_ts()}[/dim]  [blue]ℹ[/blue]  {escape(msg)}")


def success(msg: str) -> None:
    _console.print(f"[dim]{_ts()}[/dim]  [bold green]✔[/bold green]  {escape(msg)}")


def warn(msg: str) -> None:
    _console.print(f"[dim]{_ts()}[/dim]  [bold yellow]⚠[/bold yellow]  {escape(msg)}")


def error(msg: str) -> None:
    _console_err.print(f"[dim]{_ts()}[/dim]  [bold red]✖[/bold red]  {escape(msg)}")


def banner(title: str, subtitle: str = "") -> None:
    text = Text(title, style="bold cyan")
    if subtitle:
        text.append(f"\n{subtitle}", style="dim")
    _console.print(Panel(text, border_style="cyan"))
