# fedora-postinstall/postinstall/console_output.py

from typing import Any, Optional
from rich.console import Console
from rich.rule import Rule
from rich.padding import Padding
from rich.panel import Panel

# highlight=False keeps Rich from auto-highlighting numbers and paths in messages.
# Styling is done with explicit markup only.
console = Console(highlight=False)

# --- Output Functions ---

def print_info(message: Any, icon: bool = True):
    """Prints an informational message using Rich markup."""
    prefix = "[bold blue]➤ INFO:[/] " if icon else ""
    console.print(f"{prefix}{message}")

def print_warning(message: Any, icon: bool = True):
    """Prints a warning message using Rich markup."""
    prefix = "[bold yellow]➤ WARN:[/] " if icon else ""
    console.print(f"{prefix}{message}")

def print_error(message: Any, icon: bool = True):
    """Prints an error message using Rich markup. Exiting is left to the caller."""
    prefix = "[bold red]➤ ERROR:[/] " if icon else ""
    console.print(f"{prefix}[bold red]{message}[/]")

def print_success(message: Any, icon: bool = True):
    """Prints a success message using Rich markup."""
    prefix = "[bold green]➤ DONE:[/] " if icon else ""
    console.print(f"{prefix}{message}")

def print_step(title: str, char: str = "="):
    """
    Prints a major step title, styled as a Rich Rule.
    Example: print_step("Gaming tooling")
    """
    console.print(Rule(f"[bold magenta]{title}[/]", style="magenta", characters=char))

def print_sub_step(message: str, indent: int = 2):
    """
    Prints a sub-step message, slightly indented, with a leading marker.
    Example: print_sub_step("Installing Flatpak applications...")
    """
    console.print(Padding(f"[bright_blue]❯[/] {message}", (0, 0, 0, indent)))

def print_panel(
    content: Any,
    title: Optional[str] = None,
    style: str = "blue",
    padding: tuple = (1, 2)
):
    """Prints content within a Rich Panel that fits its content."""
    console.print(
        Panel(
            content,
            title=f"[bold]{title}[/]" if title else None,
            border_style=style,
            padding=padding,
            expand=False
        )
    )
