"""CLI entry point for metamark.

Invoked as::

    metamark [OPTIONS] COMMAND [ARGS]...

or, during development::

    python -m metamark.cli.main

Elements and marker types are named as ``package.module:Qual.Name``.

Commands
--------
tree        Show the marker graph of an element
find        Find the first of several marker types on an element
has         Check whether an element carries a marker type
policies    List registered exclusion policies
version     Show version information
"""
from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.syntax import Syntax
from rich.table import Table
from rich.tree import Tree

if TYPE_CHECKING:
    from metamark.graph.tree import MarkerNode, MarkerTree
    from metamark.lookup.lookup import AnnotationLookup

console = Console()
err_console = Console(stderr=True)

_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


def _resolve_or_exit(path: str) -> object:
    """Resolve an element path, exiting on error."""
    from metamark.cli.resolve import ElementResolutionError, resolve_element

    try:
        return resolve_element(path)
    except ElementResolutionError as exc:
        err_console.print(f"[red]Error:[/red] {escape(str(exc))}")
        sys.exit(1)


def _marker_type_or_exit(path: str) -> type:
    """Resolve a path that must name a class, exiting otherwise."""
    obj = _resolve_or_exit(path)
    if not isinstance(obj, type):
        err_console.print(f"[red]Error:[/red] {escape(path)} is not a marker type")
        sys.exit(1)
    return obj


def _lookup_or_exit(policy_name: str) -> "AnnotationLookup":
    """Build a lookup for the named exclusion policy, exiting if it is unknown."""
    from metamark.lookup import AnnotationLookup
    from metamark.lookup.policy import POLICY_ENTRYPOINT_GROUP, policy_registry
    from metamark.plugins import PluginNotFoundError

    policy_registry.load_entrypoints(POLICY_ENTRYPOINT_GROUP)
    try:
        policy_class = policy_registry.get(policy_name)
    except PluginNotFoundError as exc:
        err_console.print(f"[red]Error:[/red] {escape(exc.args[0])}")
        sys.exit(1)
    return AnnotationLookup(policy=policy_class())


def _node_label(node: "MarkerNode") -> str:
    label = escape(repr(node.marker))
    if node.documented:
        label += " [cyan]documented[/cyan]"
    if node.excluded:
        label += " [dim](excluded)[/dim]"
    if node.revisited:
        label += " [yellow](revisited)[/yellow]"
    return label


def _render_tree(tree: "MarkerTree") -> Tree:
    root = Tree(f"[bold]{escape(tree.element_name)}[/bold] [dim]{tree.kind.name.lower()}[/dim]")

    def add(parent: Tree, nodes: "tuple[MarkerNode, ...]") -> None:
        for node in nodes:
            add(parent.add(_node_label(node)), node.children)

    add(root, tree.roots)
    return root


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(package_name="metamark")
@click.option(
    "--log-level",
    type=click.Choice(_LOG_LEVELS, case_sensitive=False),
    default="WARNING",
    show_default=True,
    help="Logging threshold for diagnostic output on stderr.",
)
@click.option(
    "--path",
    "-p",
    "extra_paths",
    multiple=True,
    type=click.Path(file_okay=False),
    help="Directory to prepend to sys.path before importing elements (repeatable).",
)
def cli(log_level: str, extra_paths: tuple[str, ...]) -> None:
    """Inspect markers and meta-markers declared on Python elements."""
    logging.basicConfig(
        level=log_level.upper(),
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )
    for extra in reversed(extra_paths):
        sys.path.insert(0, str(Path(extra).resolve()))


# ---------------------------------------------------------------------------
# version command
# ---------------------------------------------------------------------------


@cli.command(name="version")
def version_command() -> None:
    """Show detailed version information."""
    from metamark import __version__

    table = Table(show_header=False, box=None)
    table.add_row("[bold]metamark[/bold]", f"v{__version__}")
    table.add_row("Python", f"{sys.version_info.major}.{sys.version_info.minor}.{sys.version_info.micro}")
    table.add_row("Platform", sys.platform)
    console.print(table)


# ---------------------------------------------------------------------------
# policies command
# ---------------------------------------------------------------------------


@cli.command(name="policies")
def policies_command() -> None:
    """List exclusion policies, including those installed as entry-points."""
    from metamark.lookup.policy import POLICY_ENTRYPOINT_GROUP, policy_registry

    policy_registry.load_entrypoints(POLICY_ENTRYPOINT_GROUP)

    table = Table(title="Exclusion policies")
    table.add_column("Name", style="bold")
    table.add_column("Class")
    table.add_column("Description")
    for name, policy_class in policy_registry.items():
        summary = (policy_class.__doc__ or "").strip().splitlines()
        table.add_row(
            name,
            f"{policy_class.__module__}.{policy_class.__qualname__}",
            summary[0] if summary else "",
        )
    console.print(table)


# ---------------------------------------------------------------------------
# tree command
# ---------------------------------------------------------------------------


@cli.command(name="tree")
@click.argument("element")
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["text", "json", "yaml"], case_sensitive=False),
    default="text",
    help="Output format",
)
@click.option("--policy", "policy_name", default="definitional", show_default=True,
              help="Exclusion policy name")
@click.option("--output", "-o", default=None, help="Output file path (json/yaml only)")
def tree_command(element: str, output_format: str, policy_name: str, output: str | None) -> None:
    """Show every marker reachable from ELEMENT.

    ELEMENT is a path such as ``myapp.models:User`` or ``myapp.views:index``.
    """
    from metamark.graph import MarkerGraphSerializer, build_tree

    obj = _resolve_or_exit(element)
    lookup = _lookup_or_exit(policy_name)
    tree = build_tree(obj, lookup)
    output_format = output_format.lower()

    if output_format == "text":
        console.print(_render_tree(tree))
        console.print(f"\n[bold]{len(tree)}[/bold] marker(s)")
        return

    serializer = MarkerGraphSerializer()
    if output_format == "json":
        text = serializer.to_json(tree, indent=2)
    else:
        text = serializer.to_yaml(tree)

    if output:
        Path(output).write_text(text, encoding="utf-8")
        console.print(f"[green]Marker graph written to[/green] {escape(output)}")
    else:
        console.print(Syntax(text, output_format))


# ---------------------------------------------------------------------------
# find command
# ---------------------------------------------------------------------------


@cli.command(name="find")
@click.argument("element")
@click.argument("markers", nargs=-1, required=True)
@click.option("--policy", "policy_name", default="definitional", show_default=True,
              help="Exclusion policy name")
def find_command(element: str, markers: tuple[str, ...], policy_name: str) -> None:
    """Find the first of MARKERS carried by ELEMENT.

    MARKERS are tried in the order given; an earlier marker type wins
    over a later one even when the later one is declared closer.

    Examples:

    \b
        metamark find myapp.views:index myapp.markers:Route
        metamark find myapp.models:User myapp.markers:Entity myapp.markers:Component
    """
    obj = _resolve_or_exit(element)
    targets = [_marker_type_or_exit(m) for m in markers]
    lookup = _lookup_or_exit(policy_name)

    found = lookup.find_first_of(obj, targets)
    if found is None:
        console.print(f"[yellow]Not found[/yellow] on {escape(element)}")
        sys.exit(1)
    console.print(f"[green]Found[/green] {escape(repr(found))}")


# ---------------------------------------------------------------------------
# has command
# ---------------------------------------------------------------------------


@cli.command(name="has")
@click.argument("element")
@click.argument("marker")
@click.option("--policy", "policy_name", default="definitional", show_default=True,
              help="Exclusion policy name")
def has_command(element: str, marker: str, policy_name: str) -> None:
    """Print ``true`` if ELEMENT carries MARKER, ``false`` otherwise.

    Exits with status 0 when the marker is present and 1 when it is not.
    """
    obj = _resolve_or_exit(element)
    target = _marker_type_or_exit(marker)
    lookup = _lookup_or_exit(policy_name)

    present = lookup.has_marker(obj, target)
    console.print("true" if present else "false")
    if not present:
        sys.exit(1)


if __name__ == "__main__":
    cli()
