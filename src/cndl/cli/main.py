"""Main CLI entry point for cndl."""

import shutil
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import NoReturn, Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from cndl.config import CndlConfig, validate_branch, validate_repo_dir
from cndl.constants import (
    EXIT_DATA_ERROR,
    EXIT_SYSTEM_ERROR,
    EXIT_USER_ERROR,
    GBM_MU,
    GBM_S0,
    GBM_SEED,
    GBM_SIGMA,
    GBM_STEPS,
)
from cndl.core import Repository, StagingManager
from cndl.core.envelope import describe_frame
from cndl.errors import (
    ChunkDecodeError,
    CndlError,
    CommitCorruptedError,
    EnvelopeError,
    ObjectCorruptedError,
    RefCorruptedError,
)
from cndl.logging_config import configure_logging
from cndl.synthetic import gbm_series

console = Console()
app = typer.Typer(
    name="cndl",
    help="Content-addressed storage and snapshots for time-series chunks",
    add_completion=False,
)


@dataclass
class CliState:
    config: CndlConfig
    workspace_root: Path


def _exit_code(error: Exception) -> int:
    if isinstance(
        error,
        (
            EnvelopeError,
            ChunkDecodeError,
            ObjectCorruptedError,
            CommitCorruptedError,
            RefCorruptedError,
        ),
    ):
        return EXIT_DATA_ERROR
    if isinstance(error, CndlError):
        return EXIT_USER_ERROR
    return EXIT_SYSTEM_ERROR


def _fail(error: Exception) -> NoReturn:
    console.print(f"[bold red]Error:[/bold red] {error}", style="red")
    raise typer.Exit(_exit_code(error))


def _open_repo(state: CliState) -> Repository:
    try:
        return Repository.open(state.workspace_root, state.config.repo_dir)
    except CndlError as e:
        console.print("[bold red]Error:[/bold red] Not a cndl repository", style="red")
        console.print(f"  {e}", style="dim")
        console.print("\nRun [bold]cndl init[/bold] to initialize a repository", style="yellow")
        raise typer.Exit(EXIT_USER_ERROR)


def _format_time(timestamp: int) -> str:
    return datetime.fromtimestamp(timestamp, tz=timezone.utc).strftime("%Y-%m-%d %H:%M:%S UTC")


@app.callback()
def main_callback(
    ctx: typer.Context,
    repo_dir: Optional[str] = typer.Option(
        None,
        "--repo-dir",
        help="Repository directory name (default: $CNDL_DIR or .cndl)",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Log debug events to stderr",
    ),
) -> None:
    """Content-addressed storage and snapshots for time-series chunks."""
    configure_logging(verbose)
    try:
        config = CndlConfig.from_env()
        if repo_dir is not None:
            config = CndlConfig(repo_dir=validate_repo_dir(repo_dir), branch=config.branch)
    except CndlError as e:
        _fail(e)
    ctx.obj = CliState(config=config, workspace_root=Path.cwd())


@app.command()
def version() -> None:
    """Show cndl version."""
    from cndl import __version__
    typer.echo(f"cndl version {__version__}")


@app.command()
def init(
    ctx: typer.Context,
    force: bool = typer.Option(
        False,
        "--force",
        help="Remove and recreate an existing repository (dangerous!)",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        "-q",
        help="Suppress output except errors",
    ),
) -> None:
    """Initialize a cndl repository in the current directory."""
    state: CliState = ctx.obj
    repo = Repository(state.workspace_root, state.config.repo_dir)

    if repo.root.exists():
        if not force:
            console.print(
                f"[bold red]Error:[/bold red] cndl repository already exists in {state.workspace_root}",
                style="red",
            )
            console.print(
                "\nUse [bold]--force[/bold] to reinitialize (will delete existing data!)",
                style="yellow",
            )
            raise typer.Exit(EXIT_USER_ERROR)

        if not quiet:
            console.print(f"[yellow]Removing existing {state.config.repo_dir}/ directory...[/yellow]")
        shutil.rmtree(repo.root)

    try:
        repo = Repository.init(state.workspace_root, state.config.repo_dir)
    except OSError as e:
        _fail(e)

    if not quiet:
        success_message = f"""[bold green]✓[/bold green] Initialized cndl repository

[dim]Storage location:[/dim] {repo.root}

[bold]Next steps:[/bold]
  1. Stage a series: [cyan]cndl add AAPL[/cyan]
  2. Inspect it: [cyan]cndl show <hash-prefix>[/cyan]
  3. Snapshot staged symbols: [cyan]cndl commit -m "first"[/cyan]
"""
        console.print(Panel(success_message, border_style="green", title="cndl Initialized"))


@app.command()
def add(
    ctx: typer.Context,
    symbol: str = typer.Argument(..., help="Symbol to stage, e.g. AAPL"),
    steps: int = typer.Option(GBM_STEPS, "--steps", min=1, help="Number of samples"),
    s0: float = typer.Option(GBM_S0, "--s0", help="Starting price"),
    mu: float = typer.Option(GBM_MU, "--mu", help="Drift per step"),
    sigma: float = typer.Option(GBM_SIGMA, "--sigma", min=0.0, help="Volatility per step"),
    seed: int = typer.Option(GBM_SEED, "--seed", help="Random seed"),
) -> None:
    """Generate a price series for SYMBOL, store it and stage it."""
    repo = _open_repo(ctx.obj)
    staging = StagingManager(repo)

    try:
        samples = gbm_series(s0=s0, steps=steps, mu=mu, sigma=sigma, seed=seed)
        object_hash = staging.stage_series(symbol, samples)
    except (CndlError, OSError) as e:
        _fail(e)

    console.print(f"[green]+[/green] {symbol.strip().upper()}  [dim]({len(samples)} samples)[/dim]")
    console.print(object_hash)


@app.command()
def show(
    ctx: typer.Context,
    ref: str = typer.Argument(..., help="Object hash or unique prefix (3+ characters)"),
    samples: int = typer.Option(5, "--samples", "-n", min=0, help="Samples to print"),
) -> None:
    """Validate and describe a stored chunk."""
    repo = _open_repo(ctx.obj)
    staging = StagingManager(repo)

    try:
        chunk = staging.load(ref)
        summary = describe_frame(repo.objects.get(chunk.object_hash))
    except (CndlError, OSError) as e:
        _fail(e)

    console.print(f"[bold]object[/bold] {chunk.object_hash}")
    console.print(f"  encoding:  {summary['encoding']}")
    console.print(f"  frame:     {summary['frame_size']} bytes")
    console.print(f"  payload:   {summary['payload_size']} bytes")
    console.print(f"  checksum:  {summary['checksum']}")
    console.print(f"  samples:   {len(chunk.samples)}")

    if samples and chunk.samples:
        table = Table(show_header=True, header_style="bold")
        table.add_column("Timestamp", justify="right")
        table.add_column("Value", justify="right")
        for timestamp, value in chunk.samples[:samples]:
            table.add_row(str(timestamp), f"{value:.6f}")
        console.print(table)


@app.command()
def commit(
    ctx: typer.Context,
    message: str = typer.Option(
        "snapshot",
        "--message",
        "-m",
        help="Commit message",
    ),
    branch: Optional[str] = typer.Option(
        None,
        "--branch",
        "-b",
        help="Branch to advance (default: $CNDL_BRANCH or main)",
    ),
) -> None:
    """Snapshot every staged symbol on top of the branch head."""
    state: CliState = ctx.obj
    repo = _open_repo(state)

    try:
        branch_name = validate_branch(branch) if branch else state.config.branch
        commit_hash = repo.commits.commit(message, branch=branch_name)
        commit_obj = repo.commits.read_commit(commit_hash)
    except (CndlError, OSError) as e:
        _fail(e)

    console.print(
        f"[bold green]✓ Committed[/bold green] [dim]({branch_name}, "
        f"{len(commit_obj.snapshot)} symbols)[/dim]"
    )
    console.print(commit_hash)
    console.print(f"  {message}")


@app.command()
def log(
    ctx: typer.Context,
    branch: Optional[str] = typer.Option(None, "--branch", "-b", help="Branch to show"),
    max_count: Optional[int] = typer.Option(
        None, "--max-count", "-n", min=1, help="Limit the number of commits"
    ),
) -> None:
    """Show commit history, newest first."""
    state: CliState = ctx.obj
    repo = _open_repo(state)

    try:
        branch_name = validate_branch(branch) if branch else state.config.branch
        history = list(repo.commits.log(branch=branch_name, limit=max_count))
    except (CndlError, OSError) as e:
        _fail(e)

    if not history:
        console.print(f"[yellow]No commits yet on {branch_name}[/yellow]")
        return

    for index, (commit_hash, commit_obj) in enumerate(history):
        console.print(f"[bold yellow]commit[/bold yellow] {commit_hash}")
        console.print(f"Date:    {_format_time(commit_obj.timestamp)}")
        console.print(f"Symbols: {len(commit_obj.snapshot)}")
        console.print(f"\n    {commit_obj.message}")
        if index < len(history) - 1:
            console.print()


@app.command()
def status(ctx: typer.Context) -> None:
    """Show the branch head and staged symbols."""
    state: CliState = ctx.obj
    repo = _open_repo(state)

    try:
        head = repo.commits.head(state.config.branch)
        staged = repo.commits.staged()
    except (CndlError, OSError) as e:
        _fail(e)

    console.print(f"On branch [bold]{state.config.branch}[/bold]")
    console.print(f"Head: {head or '(no commits)'}")

    if not staged:
        console.print("\n[dim]Nothing staged[/dim]")
        return

    console.print("\n[bold green]Staged:[/bold green]")
    for symbol, object_hash in sorted(staged.items()):
        console.print(f"  [green]{symbol}[/green] {object_hash[:12]}")


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
