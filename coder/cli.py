from __future__ import annotations

import sys

import click
import questionary
from rich.console import Console

import coder.config as config_mod
from coder.connectors import CONNECTOR_MAP, get_connector
from coder.errors import ConfigError, TransportError
from coder.logger import setup_logging
from coder.renderer import render_banner, render_fatal, render_tools
from coder.repl import make_input_reader
from coder.session import Agent
from coder.tools import default_registry

console = Console()


@click.group(invoke_without_command=True)
@click.option("--connector", "-c", default=None, help="Model connector (anthropic, ollama).")
@click.option("--model", "-m", default=None, help="Model identifier.")
@click.option("--max-tokens", type=int, default=None, help="Output token budget per model call.")
@click.option("--verbose", "-v", is_flag=True, help="Log tool dispatches and model calls to stderr.")
@click.pass_context
def main(
    ctx: click.Context,
    connector: str | None,
    model: str | None,
    max_tokens: int | None,
    verbose: bool,
) -> None:
    """coder: chat with a model that can read, edit and commit files in this directory."""
    cfg = config_mod.load()
    setup_logging("DEBUG" if verbose else cfg["logging"]["level"])

    if ctx.invoked_subcommand is not None:
        return

    connector_name = connector or cfg["llm"]["connector"]
    model_name = model or cfg["llm"]["model"]
    budget = max_tokens or int(cfg["llm"]["max_tokens"])

    try:
        registry = default_registry()
        llm = get_connector(connector_name, model_name, max_tokens=budget)
    except ConfigError as e:
        render_fatal(str(e), console)
        sys.exit(2)

    render_banner(f"{connector_name}/{model_name}", console)
    agent = Agent(llm, registry, make_input_reader(), console=console)
    try:
        agent.run()
    except TransportError as e:
        render_fatal(str(e), console)
        sys.exit(1)


@main.command("tools")
def cmd_tools() -> None:
    """List the tools the model can call."""
    render_tools(default_registry(), console)


@main.command("config")
def cmd_config() -> None:
    """Interactive configuration wizard."""
    cfg = config_mod.load()

    console.print("[bold cyan]coder configuration[/bold cyan]\n")

    connector = questionary.select(
        "LLM connector:",
        choices=list(CONNECTOR_MAP),
        default=cfg["llm"]["connector"],
    ).ask()

    model = questionary.text(
        "Model name:",
        default=cfg["llm"]["model"],
    ).ask()

    max_tokens = questionary.text(
        "Max output tokens per call:",
        default=str(cfg["llm"]["max_tokens"]),
        validate=lambda s: s.isdigit() and int(s) > 0 or "Enter a positive integer",
    ).ask()

    if connector is None or model is None or max_tokens is None:
        console.print("[yellow]Configuration cancelled.[/yellow]")
        return

    cfg["llm"]["connector"] = connector
    cfg["llm"]["model"] = model
    cfg["llm"]["max_tokens"] = int(max_tokens)

    config_mod.save(cfg)

    console.print(f"\n[green]Config saved to {config_mod.CONFIG_FILE}[/green]")

    if connector == "anthropic":
        console.print("\n[dim]Export your key before starting:[/dim]\n  export ANTHROPIC_API_KEY=...\n")
    elif connector == "ollama":
        console.print(
            "\n[dim]Make sure Ollama is running:[/dim]\n"
            "  ollama serve\n"
            f"  ollama pull {model}\n"
        )
