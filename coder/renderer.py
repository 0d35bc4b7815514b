from __future__ import annotations

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from coder.tools import ToolRegistry, format_arguments
from coder.models import ToolResultBlock, ToolUseBlock

console = Console()


def render_banner(model_label: str, out: Console | None = None) -> None:
    out = out or console
    out.print(
        f"[bold cyan]coder[/bold cyan] [dim]({escape(model_label)})[/dim]\n"
        "[dim]Chat with the model, Ctrl+D or Ctrl+C to quit[/dim]\n"
    )


def render_assistant_text(text: str, out: Console | None = None) -> None:
    (out or console).print(f"[bold yellow]Assistant[/bold yellow]: {escape(text)}")


def render_tool_call(call: ToolUseBlock, out: Console | None = None) -> None:
    (out or console).print(
        f"[bold green]tool[/bold green]: {escape(call.name)}({escape(format_arguments(call.input))})"
    )


def render_tool_error(result: ToolResultBlock, out: Console | None = None) -> None:
    first_line = result.content.splitlines()[0] if result.content else ""
    (out or console).print(f"[dim red]  ! {escape(first_line)}[/dim red]")


def render_fatal(message: str, out: Console | None = None) -> None:
    (out or console).print(f"[red]Error: {escape(message)}[/red]")


def render_tools(registry: ToolRegistry, out: Console | None = None) -> None:
    """Show the registered tools and their parameters as a Rich table."""
    table = Table(title="Tools", show_lines=True)
    table.add_column("Name", style="cyan", no_wrap=True)
    table.add_column("Parameters", style="green")
    table.add_column("Description")

    for tool in registry.schemas:
        required = set(tool.parameters.get("required", []))
        params = [
            f"{name}{'' if name in required else '?'}: {prop.get('type', 'any')}"
            for name, prop in tool.parameters.get("properties", {}).items()
        ]
        table.add_row(tool.name, "\n".join(params) or "-", tool.description)

    (out or console).print(table)
