"""Command line interface for branchbin."""

import locale
import logging
import os
from datetime import datetime
from pathlib import Path
from typing import Annotated

import typer
from rich import print
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.tree import Tree

from branchbin import service
from branchbin.git import GitError
from branchbin.lifecycle import BranchFailure
from branchbin.recycle import recycled_name
from branchbin.status import BranchRecord, BranchStatus
from branchbin.tree import BranchNode, build_tree

app = typer.Typer(help="Git branch recycle bin")
console = Console()

PathOpt = Annotated[Path, typer.Option(help="Path to git repository", envvar="BRANCHBIN_REPO")]
YesOpt = Annotated[bool, typer.Option("--yes", "-y", help="Skip confirmation prompts")]

STATUS_STYLES = {
    BranchStatus.UP_TO_DATE: "green",
    BranchStatus.AHEAD: "bright_yellow",
    BranchStatus.BEHIND: "cyan",
    BranchStatus.DIVERGED: "magenta",
    BranchStatus.NO_UPSTREAM: "yellow",
    BranchStatus.UPSTREAM_GONE: "red",
}


def setup_logging(*, is_verbose: bool) -> None:
    """Configure logging based on verbosity."""
    log_level = "DEBUG" if is_verbose else os.environ.get("BRANCHBIN_LOG_LEVEL", "WARNING").upper()

    logging.basicConfig(
        level=log_level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=True, show_path=is_verbose)],
    )


@app.callback()
def main(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging")] = False,
) -> None:
    """Move git branches into a recycle bin instead of deleting them."""
    setup_logging(is_verbose=verbose)
    try:
        locale.setlocale(locale.LC_COLLATE, "")
    except locale.Error as err:
        logging.getLogger(__name__).debug("Keeping default collation: %s", err)


def fail(err: GitError) -> typer.Exit:
    print(f"[red]Error:[/red] {escape(err.message)}")
    return typer.Exit(code=1)


def format_commit_date(value: str) -> str:
    """Format an ISO-8601 commit date for display."""
    try:
        return datetime.fromisoformat(value).strftime("%a - %B %d @ %H:%M")
    except ValueError:
        return value


def styled_status(record: BranchRecord) -> str:
    style = STATUS_STYLES[record.status]
    return f"[{style}]{escape(record.status_text)}[/{style}]"


def display_name(record: BranchRecord) -> str:
    name = escape(record.name)
    if record.is_current:
        name = f"{name} [turquoise2](current)[/turquoise2]"
    return name


def create_branch_table(title: str, records: list[BranchRecord]) -> Table:
    """Create a table with standard branch columns."""
    table = Table(
        title=title,
        show_header=True,
        header_style="bold",
        title_style="bold blue",
        show_edge=True,
    )
    branch_width = max((len(r.name) + (len(" (current)") if r.is_current else 0) for r in records), default=0)
    table.add_column("Branch", style="cyan", min_width=branch_width, no_wrap=True)
    table.add_column("Status")
    table.add_column("Last Commit", style="yellow")
    table.add_column("Message", style="dim")

    for record in records:
        table.add_row(
            display_name(record),
            styled_status(record),
            format_commit_date(record.last_commit_date),
            escape(record.last_commit_subject),
        )
    return table


def add_tree_nodes(tree: Tree, node: BranchNode) -> None:
    for child in node.children:
        if child.record is None:
            add_tree_nodes(tree.add(f"[bold blue]{escape(child.name)}/[/bold blue]"), child)
        else:
            label = escape(child.name)
            if child.record.is_current:
                label = f"{label} [turquoise2](current)[/turquoise2]"
            tree.add(f"[cyan]{label}[/cyan]  {styled_status(child.record)}")


def failure_table(errors: list[BranchFailure]) -> Table:
    table = Table(
        title=f"Failed for {len(errors)} branch(es)",
        show_header=True,
        header_style="bold",
        title_style="bold red",
        show_edge=True,
    )
    table.add_column("Branch", style="cyan", no_wrap=True)
    table.add_column("Error", style="red")
    for failure in errors:
        table.add_row(escape(failure.branch), escape(failure.message))
    return table


def confirm(question: str) -> bool:
    return input(f"{question} [y/N] ").strip().lower() == "y"


@app.command("list")
def list_command(
    path: PathOpt = Path("."),
    show_all: Annotated[bool, typer.Option("--all/--active", help="Include branches in the recycle bin")] = True,
    as_tree: Annotated[bool, typer.Option("--tree", help="Show branches as a folder tree")] = False,
) -> None:
    """List all local branches with their sync status."""
    try:
        records = service.list_branches(path)
    except GitError as err:
        raise fail(err) from err

    active = [r for r in records if not r.is_recycled]
    recycled = [r for r in records if r.is_recycled]

    if as_tree:
        tree = Tree(f"[bold]{escape(str(path))}[/bold]")
        add_tree_nodes(tree, build_tree(records if show_all else active))
        console.print(tree)
        return

    console.print(create_branch_table("Local Branches", active))
    if show_all and recycled:
        console.print(create_branch_table("Recycle Bin", recycled))


@app.command()
def delete(
    branches: Annotated[list[str], typer.Argument(help="Branches to move to the recycle bin")],
    path: PathOpt = Path("."),
    yes: YesOpt = False,
) -> None:
    """Move branches into the recycle bin (reversible)."""
    try:
        warnings = service.list_warnings(path, branches)
    except GitError as err:
        raise fail(err) from err

    if warnings:
        lines = []
        for warning in warnings:
            lines.append(f"[cyan]{escape(warning.name)}[/cyan]")
            lines.extend(f"  [yellow]•[/yellow] {escape(reason)}" for reason in warning.reasons)
        console.print(Panel("\n".join(lines), title="Warnings", title_align="left", style="yellow", padding=(0, 2), expand=False))

    if not yes and not confirm(f"Move {len(branches)} branch(es) to the recycle bin?"):
        console.print("\n[yellow]Operation cancelled[/yellow]")
        return

    outcome = service.soft_delete(path, branches)

    if outcome.moved:
        table = Table(
            title=f"Moved {len(outcome.moved)} branch(es) to the recycle bin",
            show_header=True,
            header_style="bold",
            title_style="bold green",
            show_edge=True,
        )
        table.add_column("Branch", style="cyan", no_wrap=True)
        table.add_column("Now at", style="dim", no_wrap=True)
        for name in outcome.moved:
            table.add_row(escape(name), escape(recycled_name(outcome.prefix, name)))
        console.print(table)

    if not outcome.success:
        console.print(failure_table(outcome.errors))
        raise typer.Exit(code=1)


@app.command("bin")
def bin_command(path: PathOpt = Path(".")) -> None:
    """List branches in the recycle bin."""
    try:
        names = service.recycle_bin(path)
    except GitError as err:
        raise fail(err) from err

    if not names:
        console.print(Panel("[green]The recycle bin is empty ✨[/green]", style="green", padding=(0, 2), expand=False))
        return
    for name in names:
        console.print(f"  [blue]{escape(name)}[/blue]")


@app.command()
def purge(
    path: PathOpt = Path("."),
    yes: YesOpt = False,
) -> None:
    """Permanently delete every branch in the recycle bin."""
    try:
        names = service.recycle_bin(path)
    except GitError as err:
        raise fail(err) from err

    if not names:
        console.print(Panel("[green]The recycle bin is empty ✨[/green]", style="green", padding=(0, 2), expand=False))
        return

    msg = "These branches will be permanently deleted:\n" + "\n".join(f"  [blue]{escape(n)}[/blue]" for n in names)
    console.print(Panel(msg, title="Recycle Bin", title_align="left", padding=(0, 2), expand=False))

    if not yes and not confirm("Empty the recycle bin? This cannot be undone."):
        console.print("\n[yellow]Operation cancelled[/yellow]")
        return

    outcome = service.purge(path)
    if outcome.deleted:
        console.print(f"\n[green]Permanently deleted {len(outcome.deleted)} branch(es)[/green]")
    if not outcome.success:
        console.print(failure_table(outcome.errors))
        raise typer.Exit(code=1)


@app.command()
def check(path: PathOpt = Path(".")) -> None:
    """Check that a path is a usable git repository."""
    if not service.validate_repository(path):
        print(f"[red]Not a valid git repository:[/red] {escape(str(path))}")
        raise typer.Exit(code=1)
    print(f"[green]OK[/green] {escape(str(path))}")


if __name__ == "__main__":
    app()
