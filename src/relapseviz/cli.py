"""CLI interface for relapseviz using Typer framework."""

import logging
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from relapse import ParseError
from relapseviz import __description__, __version__
from relapseviz.config import LogLevel, OutputFormat, RelapsevizConfig, load_config
from relapseviz.errors import RenderError
from relapseviz.generator import DiagramGenerator
from relapseviz.graph import GraphSpec
from relapseviz.label import plain_text

app = typer.Typer(
    name="relapseviz",
    help=__description__,
    add_completion=False,
    rich_markup_mode="rich"
)

console = Console()

LOG_LEVELS = {
    LogLevel.ERROR.value: logging.ERROR,
    LogLevel.WARN.value: logging.WARNING,
    LogLevel.INFO.value: logging.INFO,
    LogLevel.DEBUG.value: logging.DEBUG,
}


def version_callback(value: bool) -> None:
    """Show version information and exit."""
    if value:
        console.print(f"relapseviz version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option("--version", "-v", callback=version_callback, help="Show version and exit")
    ] = False,
) -> None:
    """relapseviz - Graph visualizer for Relapse grammar parse trees."""


def _setup_logging(level: str) -> None:
    """Configure root logging from a config level name."""
    logging.basicConfig(
        level=LOG_LEVELS.get(level, logging.WARNING),
        format="%(levelname)s %(name)s: %(message)s",
        force=True,
    )


def _load_settings(config: Path | None, log_level: str | None) -> RelapsevizConfig:
    """Load configuration and apply logging settings."""
    relapseviz_config = load_config(config)
    _setup_logging(log_level or relapseviz_config.logging.level)
    return relapseviz_config


def _read_source(grammar_file: Path | None, expr: str | None) -> str:
    """Grammar source from a file or an inline expression.

    Raises:
        typer.Exit: If neither or both are given, or the file cannot be read
    """
    if grammar_file and expr is not None:
        console.print("[red]Error:[/red] Give either a grammar file or --expr, not both")
        raise typer.Exit(1)
    if expr is not None:
        return expr
    if not grammar_file:
        console.print("[red]Error:[/red] No grammar given. Pass a grammar file or --expr")
        raise typer.Exit(1)
    if not grammar_file.is_file():
        console.print(f"[red]Error:[/red] Grammar file not found: {grammar_file}")
        raise typer.Exit(1)
    try:
        return grammar_file.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        console.print(f"[red]Error:[/red] Grammar file is not valid UTF-8: {grammar_file}: {e}")
        raise typer.Exit(1)
    except OSError as e:
        console.print(f"[red]Error:[/red] Cannot read grammar file {grammar_file}: {e}")
        raise typer.Exit(1)


@app.command()
def render(
    grammar_file: Annotated[
        Optional[Path],
        typer.Argument(help="Relapse grammar file")
    ] = None,
    expr: Annotated[
        Optional[str],
        typer.Option("--expr", "-e", help="Inline grammar source instead of a file")
    ] = None,
    full: Annotated[
        bool,
        typer.Option("--full", help="Include keyword and whitespace nodes")
    ] = False,
    format: Annotated[
        Optional[str],
        typer.Option("--format", "-f", help="Output format: dot, mermaid, svg (default: from config, else dot)")
    ] = None,
    out: Annotated[
        Optional[Path],
        typer.Option("--out", "-o", help="Output file path (default: stdout)")
    ] = None,
    config: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="Configuration file path (default: search for .relapseviz.json)")
    ] = None,
    seed: Annotated[
        Optional[int],
        typer.Option("--seed", help="Seed for node identity suffixes (default: from config, else 0)")
    ] = None,
    log_level: Annotated[
        Optional[str],
        typer.Option("--log-level", help="Logging level: error, warn, info, debug")
    ] = None,
) -> None:
    """Render the parse tree of a grammar as a diagram."""
    valid_formats = [f.value for f in OutputFormat]

    if format is not None and format not in valid_formats:
        console.print(f"[red]Error:[/red] Invalid format '{format}'. Must be one of: {', '.join(valid_formats)}")
        raise typer.Exit(1)

    if log_level is not None and log_level not in LOG_LEVELS:
        console.print(f"[red]Error:[/red] Invalid log level '{log_level}'. Must be one of: {', '.join(LOG_LEVELS)}")
        raise typer.Exit(1)

    source = _read_source(grammar_file, expr)

    try:
        relapseviz_config = _load_settings(config, log_level)
        if full:
            relapseviz_config.render.full = True
        if seed is not None:
            if seed < 0:
                raise ValueError("seed must be >= 0")
            relapseviz_config.render.seed = seed

        generator = DiagramGenerator(relapseviz_config)
        generator.add_default_renderers()

        spec = generator.generate(source)
        rendered = generator.render_graph(spec, format or relapseviz_config.render.format)

        if out:
            output_file = out.resolve()
            output_file.parent.mkdir(parents=True, exist_ok=True)
            with open(output_file, "w", encoding="utf-8") as f:
                f.write(rendered)
            console.print(f"[green]OK[/green] Graph with {len(spec.nodes)} nodes and {len(spec.edges)} edges")
            console.print(f"[green]Diagram written:[/green] {output_file}")
        else:
            typer.echo(rendered, nl=not rendered.endswith("\n"))

    except ParseError as e:
        console.print(f"[red]Error:[/red] Invalid grammar: {e}")
        raise typer.Exit(1)
    except RenderError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    except (ValueError, OSError) as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


@app.command()
def nodes(
    grammar_file: Annotated[
        Optional[Path],
        typer.Argument(help="Relapse grammar file")
    ] = None,
    expr: Annotated[
        Optional[str],
        typer.Option("--expr", "-e", help="Inline grammar source instead of a file")
    ] = None,
    full: Annotated[
        bool,
        typer.Option("--full", help="Include keyword and whitespace nodes")
    ] = False,
    config: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="Configuration file path (default: search for .relapseviz.json)")
    ] = None,
) -> None:
    """List the nodes and edges of a grammar's parse tree."""
    source = _read_source(grammar_file, expr)

    try:
        relapseviz_config = _load_settings(config, None)
        if full:
            relapseviz_config.render.full = True

        spec = DiagramGenerator(relapseviz_config).generate(source)

    except ParseError as e:
        console.print(f"[red]Error:[/red] Invalid grammar: {e}")
        raise typer.Exit(1)
    except (ValueError, OSError) as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    _output_nodes_table(spec)
    _output_edges_table(spec)


def _output_nodes_table(spec: GraphSpec) -> None:
    """Output graph nodes in table format."""
    table = Table(title=f"Nodes ({len(spec.nodes)} found)")
    table.add_column("ID", style="cyan")
    table.add_column("Variant", style="green")
    table.add_column("Role", style="yellow")
    table.add_column("Label")

    for node in spec.nodes.values():
        lines = plain_text(node.label).split("\n")
        table.add_row(node.id, node.variant, node.role.value, escape("\n".join(lines[1:])))

    console.print(table)


def _output_edges_table(spec: GraphSpec) -> None:
    """Output graph edges in table format."""
    table = Table(title=f"Edges ({len(spec.edges)} found)")
    table.add_column("From", style="cyan")
    table.add_column("Label", style="green")
    table.add_column("To", style="cyan")
    table.add_column("Kind", style="dim")

    for edge in spec.edges:
        table.add_row(edge.src, escape(edge.label), edge.dst, edge.kind.value)

    console.print(table)


if __name__ == "__main__":
    app()
