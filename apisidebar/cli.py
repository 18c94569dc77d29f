"""
apisidebar CLI - API Reference Sidebar Generator

A command-line tool for turning an OpenAPI description into documentation
navigation by:
1. Loading the description and normalizing its operations
2. Grouping operations by tag and resolving identifier collisions
3. Writing a Docusaurus sidebar.ts (or the neutral JSON tree)
"""

import difflib
import logging
from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from apisidebar import __version__
from apisidebar.config import SidebarSettings
from apisidebar.errors import SidebarError
from apisidebar.formatters import DocusaurusSidebarFormatter, tree_to_json
from apisidebar.loaders import load_description
from apisidebar.schemas import ApiDescription, GroupingRules, NavigationTree
from apisidebar.synthesizer import DEPRECATED_HINT, synthesize
from apisidebar.utils import kebab_case

app = typer.Typer(
    name="apisidebar",
    help="API Reference Sidebar Generator",
    add_completion=False,
)

console = Console()
logger = logging.getLogger(__name__)

OUTPUT_FORMATS = ("ts", "json")


def _load_settings() -> SidebarSettings:
    """Read APISIDEBAR_* settings; invalid values end the command with an error."""
    try:
        return SidebarSettings()
    except ValidationError as e:
        console.print(f"\n[red]❌ Error: invalid APISIDEBAR_* setting: {escape(str(e))}[/red]")
        raise typer.Exit(1)


@app.callback()
def main_callback(
    log_level: Optional[str] = typer.Option(
        None,
        "--log-level",
        help="Logging level (default: APISIDEBAR_LOG_LEVEL or WARNING)",
    ),
):
    """Configure logging for every command."""
    settings = _load_settings()
    level = (log_level or settings.log_level).upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.WARNING),
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _build(
    api_file: Path,
    tag_field: str,
    untagged_label: Optional[str],
    label_source: Optional[str],
    overview: bool,
):
    """Load the description and synthesize its tree."""
    settings = _load_settings()

    description = load_description(api_file, label_source=label_source or settings.label_source)
    rules = GroupingRules(
        tag_field=tag_field,
        untagged_label=untagged_label or settings.untagged_label,
        overview_label=description.title,
        overview_id=kebab_case(description.title) if overview else None,
    )
    logger.debug(f"Grouping rules: {rules!r}")
    return description, synthesize(description.operations, rules)


def _render(
    tree: NavigationTree,
    output_format: str,
    doc_prefix: Optional[str],
    sidebar_name: Optional[str],
) -> str:
    settings = _load_settings()

    if output_format == "json":
        return tree_to_json(tree)

    formatter = DocusaurusSidebarFormatter(
        doc_prefix=doc_prefix if doc_prefix is not None else settings.doc_prefix,
        sidebar_name=sidebar_name or settings.sidebar_name,
    )
    return formatter.format(tree)


def _resolve_format(output_format: Optional[str], target: Optional[Path]) -> str:
    """Explicit --format wins; otherwise .json targets get JSON, everything else TypeScript."""
    if output_format is None:
        return "json" if target is not None and target.suffix.lower() == ".json" else "ts"

    if output_format not in OUTPUT_FORMATS:
        console.print(f"[red]Error: Invalid output format '{output_format}'[/red]")
        console.print(f"Valid options: {', '.join(OUTPUT_FORMATS)}")
        raise typer.Exit(1)
    return output_format


def _summary_table(description: ApiDescription, tree: NavigationTree) -> Table:
    """Per-category breakdown: operations, deprecated, collision-renamed."""
    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Category")
    table.add_column("Operations", justify="right")
    table.add_column("Deprecated", justify="right")
    table.add_column("Renamed", justify="right")

    for category in tree.categories:
        leaves = list(category.iter_leaves())
        deprecated = sum(1 for leaf in leaves if DEPRECATED_HINT in (leaf.render_hint or ""))
        renamed = sum(
            1 for leaf in leaves
            if leaf.operation_id and leaf.target_id != leaf.operation_id
        )
        table.add_row(category.label, str(len(leaves)), str(deprecated), str(renamed))

    table.add_row(
        "[bold]Total[/bold]",
        f"[bold]{len(description.operations)}[/bold]",
        "",
        "",
    )
    return table


@app.command()
def generate(
    api_file: Path = typer.Argument(..., help="OpenAPI description (.yaml, .yml or .json)"),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Output file (default: print to stdout)",
    ),
    output_format: Optional[str] = typer.Option(
        None,
        "--format",
        "-f",
        help="Output format: ts (Docusaurus sidebar.ts) or json (default: from output suffix, else ts)",
    ),
    tag_field: str = typer.Option(
        "tags",
        "--tag-field",
        "-t",
        help="Field supplying the category: 'tags' or an x-* extension name",
    ),
    untagged_label: Optional[str] = typer.Option(None, "--untagged-label", help="Category for untagged operations"),
    label_source: Optional[str] = typer.Option(
        None,
        "--label-source",
        help="Leaf labels from 'operation_id' or 'summary'",
    ),
    doc_prefix: Optional[str] = typer.Option(None, "--doc-prefix", help="Docs folder of the generated pages"),
    sidebar_name: Optional[str] = typer.Option(None, "--sidebar-name", help="SidebarsConfig key"),
    overview: bool = typer.Option(True, "--overview/--no-overview", help="Emit the root overview link"),
):
    """
    Generate the API reference sidebar from an OpenAPI description.

    Example:
        apisidebar generate static/files/api.yaml \\
            --output docs/openapi/sidebar.ts
    """
    resolved_format = _resolve_format(output_format, output)

    try:
        description, tree = _build(api_file, tag_field, untagged_label, label_source, overview)
        rendered = _render(tree, resolved_format, doc_prefix, sidebar_name)
    except (SidebarError, ValueError) as e:
        console.print(f"\n[red]❌ Error: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    if output is None:
        typer.echo(rendered, nl=False)
        return

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(rendered, encoding="utf-8")

    console.print(Panel.fit(
        "[bold cyan]API Sidebar Generated[/bold cyan]\n\n"
        f"API: [yellow]{description.title}[/yellow]"
        + (f" v[yellow]{description.version}[/yellow]" if description.version else "")
        + f"\nCategories: [yellow]{len(tree.categories)}[/yellow]\n"
        f"Operations: [yellow]{len(tree.leaves())}[/yellow]\n"
        f"Output: [yellow]{output}[/yellow]",
        border_style="cyan"
    ))


@app.command()
def check(
    api_file: Path = typer.Argument(..., help="OpenAPI description (.yaml, .yml or .json)"),
    existing: Path = typer.Argument(..., help="Previously generated sidebar to compare against"),
    output_format: Optional[str] = typer.Option(None, "--format", "-f", help="ts or json (default: from file suffix)"),
    tag_field: str = typer.Option("tags", "--tag-field", "-t", help="Field supplying the category"),
    untagged_label: Optional[str] = typer.Option(None, "--untagged-label", help="Category for untagged operations"),
    label_source: Optional[str] = typer.Option(None, "--label-source", help="'operation_id' or 'summary'"),
    doc_prefix: Optional[str] = typer.Option(None, "--doc-prefix", help="Docs folder of the generated pages"),
    sidebar_name: Optional[str] = typer.Option(None, "--sidebar-name", help="SidebarsConfig key"),
    overview: bool = typer.Option(True, "--overview/--no-overview", help="Expect the root overview link"),
):
    """
    Verify that a committed sidebar matches a fresh regeneration.

    Exits with status 1 and prints a diff when the file is out of date.
    """
    resolved_format = _resolve_format(output_format, existing)

    if not existing.is_file():
        console.print(f"[red]❌ Sidebar not found: {existing}[/red]")
        raise typer.Exit(1)

    try:
        _, tree = _build(api_file, tag_field, untagged_label, label_source, overview)
        rendered = _render(tree, resolved_format, doc_prefix, sidebar_name)
    except (SidebarError, ValueError) as e:
        console.print(f"\n[red]❌ Error: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    current = existing.read_text(encoding="utf-8")
    if current == rendered:
        console.print(f"[green]✅ Sidebar is up to date: {existing}[/green]")
        return

    diff = difflib.unified_diff(
        current.splitlines(keepends=True),
        rendered.splitlines(keepends=True),
        fromfile=str(existing),
        tofile="regenerated",
    )
    console.print(f"[red]❌ Sidebar is out of date: {existing}[/red]")
    console.print("".join(diff), markup=False, highlight=False)
    raise typer.Exit(1)


@app.command("inspect")
def inspect_description(
    api_file: Path = typer.Argument(..., help="OpenAPI description (.yaml, .yml or .json)"),
    tag_field: str = typer.Option("tags", "--tag-field", "-t", help="Field supplying the category"),
    untagged_label: Optional[str] = typer.Option(None, "--untagged-label", help="Category for untagged operations"),
):
    """Show how operations are grouped, without writing anything."""
    try:
        description, tree = _build(api_file, tag_field, untagged_label, None, overview=False)
    except (SidebarError, ValueError) as e:
        console.print(f"\n[red]❌ Error: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    console.print(f"\n[bold cyan]📚 {description.title}[/bold cyan]")
    console.print(_summary_table(description, tree))


@app.command()
def version():
    """Show the version of apisidebar."""
    console.print(f"[bold cyan]apisidebar[/bold cyan] v{__version__}")
    console.print("API Reference Sidebar Generator")


def main():
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
