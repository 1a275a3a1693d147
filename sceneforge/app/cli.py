"""SceneForge CLI - write, check and inspect prefab documents.

Usage:
    python -m sceneforge demo
    python -m sceneforge demo --output assets/test.prefab
    python -m sceneforge check assets/test.prefab
    python -m sceneforge inspect assets/test.prefab
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Annotated

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table
from rich.tree import Tree

from sceneforge.app.config import SceneForgeConfig, get_config, set_config
from sceneforge.app.sample import build_sample_world
from sceneforge.core.errors import PrefabLoadError, SceneForgeError
from sceneforge.core.models.components import Name
from sceneforge.prefabs.codec import serialize
from sceneforge.prefabs.loader import PrefabLoader
from sceneforge.prefabs.prefab import Prefab
from sceneforge.reflect.registry import create_default_registry
from sceneforge.utils.logging import get_logger, log_error, setup_logging

load_dotenv()

app = typer.Typer(
    name="sceneforge",
    help="SceneForge prefab tools",
    add_completion=False,
)

console = Console()
logger = get_logger("cli")


class Level(str, Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


@app.callback()
def configure(
    config: Annotated[Path | None, typer.Option("--config", "-c", help="Path to configuration file")] = None,
    log_level: Annotated[
        Level | None,
        typer.Option("--log-level", "-l", case_sensitive=False, help="Minimum log level"),
    ] = None,
) -> None:
    """Load configuration and set up logging."""
    try:
        settings = SceneForgeConfig.load(config)
    except ValueError as e:
        console.print(f"[red]Error:[/red] invalid configuration: {e}")
        raise typer.Exit(1)

    if log_level is not None:
        settings.log_level = log_level.value
    set_config(settings)
    setup_logging(level=settings.log_level)


def _loader() -> PrefabLoader:
    return PrefabLoader(create_default_registry(), extensions=get_config().extensions)


def _load_or_exit(file: Path) -> Prefab:
    try:
        return _loader().load_file(file)
    except PrefabLoadError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


@app.command("demo")
def demo(
    name: Annotated[str, typer.Option("--name", "-n", help="Prefab name")] = "Test",
    output: Annotated[Path | None, typer.Option("--output", "-o", help="Write the document here")] = None,
) -> None:
    """Extract the sample world into a prefab and print it."""
    settings = get_config()
    world, root = build_sample_world()
    prefab = Prefab.from_world(world, root, name, policy=settings.to_policy())

    loader = _loader()
    try:
        text = serialize(
            prefab,
            loader.registry,
            indent=settings.document.indent,
            newline=settings.document.newline,
        )
    except SceneForgeError as e:
        log_error(logger, "serialize prefab", e, {"name": name})
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    logger.info(f"Serialized: {prefab.name}")
    console.print(Syntax(text, "yaml", theme="ansi_dark"))

    if output is not None:
        loader.save_file(
            prefab,
            output,
            indent=settings.document.indent,
            newline=settings.document.newline,
        )
        console.print(f"[green]Wrote[/green] {output}")


@app.command("check")
def check(
    file: Annotated[Path, typer.Argument(help="Prefab document to validate")],
) -> None:
    """Decode a prefab and summarise its nodes."""
    prefab = _load_or_exit(file)

    table = Table(title=f"Prefab '{prefab.name}'")
    table.add_column("Node", justify="right")
    table.add_column("Components")
    for scene_node in prefab.scene:
        table.add_row(str(scene_node.node), ", ".join(sorted(scene_node.records)) or "-")

    console.print(table)
    console.print(Panel(f"{len(prefab.scene)} nodes decoded", border_style="green"))


@app.command("inspect")
def inspect(
    file: Annotated[Path, typer.Argument(help="Prefab document to show")],
) -> None:
    """Show the prefab's hierarchy as a tree."""
    prefab = _load_or_exit(file)
    graph = prefab.scene.to_graph()

    def add_branch(tree: Tree, node) -> None:
        scene_node = prefab.scene.get(node)
        label = f"[bold]{node}[/bold]"
        name = scene_node.get(Name)
        if name is not None:
            label += f" {name.name}"
        branch = tree.add(label)
        for path in sorted(scene_node.records):
            branch.add(f"[dim]{path}[/dim]")
        for child in graph.successors(node):
            add_branch(branch, child)

    tree = Tree(f"Prefab '{prefab.name}'")
    for root in prefab.scene.roots():
        add_branch(tree, root)
    console.print(tree)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
