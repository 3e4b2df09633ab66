"""repojump CLI — the ``rj`` entry point.

Paths meant for the shell's ``cd`` go to stdout; everything else is
printed to stderr.
"""

from __future__ import annotations

import functools
import os

import click
from rich.console import Console
from rich.table import Table

from repojump import __version__
from repojump.errors import RepoJumpError

console = Console()
err_console = Console(stderr=True)


def reports_errors(func):
    """Print ``RepoJumpError`` in red and exit with status 1."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except RepoJumpError as exc:
            err_console.print(f"[red]error:[/] {exc}")
            raise SystemExit(1)

    return wrapper


def _context(obj: dict):
    from repojump.commands import Context
    from repojump.config import load_config

    if "ctx" not in obj:
        obj["ctx"] = Context.from_config(load_config(obj.get("config_path")))
    return obj["ctx"]


@click.group()
@click.version_option(version=__version__)
@click.option("--config", "config_path", default=None, help="Config file (default: $REPOJUMP_CONFIG_PATH)")
@click.option("--verbose", "-v", is_flag=True, help="Log debug output to stderr")
@click.pass_context
def main(ctx: click.Context, config_path: str | None, verbose: bool):
    """repojump — jump between your git clones by frecency.

    Repositories are keyed by remote and group/name; every jump raises the
    target's score so the ones you use most rise to the top.
    """
    from repojump.log import setup_logging

    setup_logging("DEBUG" if verbose else None)
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path


# ── Jump ─────────────────────────────────────────────────────────────


@main.command()
@click.argument("args", nargs=-1)
@click.option("--remote", "-r", default="", help="Only consider this remote")
@click.option("--group", "-g", default="", help="Only consider this group")
@click.pass_obj
@reports_errors
def home(obj: dict, args: tuple, remote: str, group: str):
    """Print the path of the best matching repository.

    ARGS is either REMOTE NAME for an exact repository, or a list of
    keywords (optionally led by a remote name).
    """
    from repojump import commands
    from repojump.registry.models import RepoQuery

    ctx = _context(obj)
    keywords = list(args)
    if keywords and not remote and ctx.config.get_remote(keywords[0]):
        remote = keywords.pop(0)
        if len(keywords) == 1 and ctx.store.load().get(remote, keywords[0]):
            record = commands.record_visit(ctx, remote, keywords[0])
            click.echo(record.path)
            return

    record = commands.resolve_target(ctx, RepoQuery(keywords=keywords, remote=remote, group=group))
    click.echo(record.path)


@main.command()
@click.argument("keywords", nargs=-1, required=True)
@click.pass_obj
@reports_errors
def jump(obj: dict, keywords: tuple):
    """Print the path of the best repository matching KEYWORDS."""
    from repojump import commands
    from repojump.registry.models import RepoQuery

    record = commands.resolve_target(_context(obj), RepoQuery(keywords=list(keywords)))
    click.echo(record.path)


# ── List ─────────────────────────────────────────────────────────────


@main.command(name="list")
@click.argument("keywords", nargs=-1)
@click.option("--remote", "-r", default="", help="Only list this remote")
@click.option("--group", "-g", default="", help="Only list this group")
@click.option("--scores", is_flag=True, help="Show scores and visit counts")
@click.pass_obj
@reports_errors
def list_entries(obj: dict, keywords: tuple, remote: str, group: str, scores: bool):
    """List tracked repositories, best first."""
    from repojump import commands
    from repojump.registry.models import RepoQuery

    entries = commands.list_entries(
        _context(obj), RepoQuery(keywords=list(keywords), remote=remote, group=group)
    )
    if not scores:
        for entry in entries:
            click.echo(entry.display_key)
        return

    if not entries:
        err_console.print("[yellow]No matching repositories.[/]")
        return

    table = Table(title=f"Repositories ({len(entries)})")
    table.add_column("Rank", style="dim", width=4)
    table.add_column("Repository", style="cyan")
    table.add_column("Score", justify="right", style="green")
    table.add_column("Visits", justify="right")
    table.add_column("Path")
    for i, entry in enumerate(entries):
        table.add_row(str(i + 1), entry.display_key, f"{entry.score:.2f}", str(entry.accessed), entry.path)
    console.print(table)


@main.command()
@click.argument("remote")
@click.option("--remote-api", is_flag=True, help="Ask the remote's provider instead of the registry")
@click.pass_obj
@reports_errors
def groups(obj: dict, remote: str, remote_api: bool):
    """List the groups of REMOTE."""
    from repojump import commands

    for group in commands.list_groups(_context(obj), remote, from_provider=remote_api):
        click.echo(group)


# ── Attach / Detach ──────────────────────────────────────────────────


@main.command()
@click.argument("remote")
@click.argument("name")
@click.option("--dir", "-d", "directory", default=None, help="Clone directory (default: current)")
@click.option("--remote-config", is_flag=True, help="Point origin at the remote's clone URL")
@click.option("--user-config", is_flag=True, help="Set the remote's user name/email in the clone")
@click.pass_obj
@reports_errors
def attach(obj: dict, remote: str, name: str, directory: str | None, remote_config: bool, user_config: bool):
    """Bind an existing clone directory to REMOTE NAME."""
    from repojump import commands
    from repojump.utils import git_ops

    ctx = _context(obj)
    remote_cfg = ctx.config.must_get_remote(remote)
    record = commands.attach_path(ctx, remote, name, directory or os.getcwd())

    url = git_ops.clone_url(remote_cfg.clone, record.name) if remote_config and remote_cfg.clone else ""
    user = remote_cfg.user if user_config else None
    if url or user:
        try:
            git_ops.configure_clone(record.path, url=url, user=user)
        except ValueError as e:
            err_console.print(f"[yellow]warning:[/] {e}")

    err_console.print(f"[yellow]{record.path}[/] attached as [cyan]{record.display_key}[/]")


@main.command()
@click.option("--dir", "-d", "directory", default=None, help="Clone directory (default: current)")
@click.pass_obj
@reports_errors
def detach(obj: dict, directory: str | None):
    """Unbind a clone directory from its repository record."""
    from repojump import commands

    record = commands.detach_path(_context(obj), directory or os.getcwd())
    err_console.print(f"[yellow]{record.path}[/] detached")


# ── Sync ─────────────────────────────────────────────────────────────


@main.command()
@click.argument("remote")
@click.option("--group", "-g", default=None, help="Only sync this group")
@click.pass_obj
@reports_errors
def sync(obj: dict, remote: str, group: str | None):
    """Attach every repository REMOTE's provider reports."""
    from repojump import commands

    added = commands.sync_remote(_context(obj), remote, group=group)
    for record in added:
        err_console.print(f"  [green]+[/] {record.display_key}")
    err_console.print(f"{len(added)} repositories attached")


@main.command()
@click.argument("remote")
@click.argument("names", nargs=-1)
@click.pass_obj
@reports_errors
def forget(obj: dict, remote: str, names: tuple):
    """Drop NAMES of REMOTE (or all of REMOTE) and their history."""
    from repojump import commands

    removed = commands.detach_remote(_context(obj), remote, list(names) or None)
    for record in removed:
        err_console.print(f"  [red]-[/] {record.display_key}")
    err_console.print(f"{len(removed)} repositories forgotten")


@main.command()
@click.option("--dry-run", is_flag=True, help="Only print what would be removed")
@click.pass_obj
@reports_errors
def clean(obj: dict, dry_run: bool):
    """Remove records whose clone directory no longer exists."""
    from repojump import commands

    removed = commands.clean_missing(_context(obj), dry_run=dry_run)
    for record in removed:
        click.echo(f"{record.display_key}\t{record.path}")
    if not dry_run:
        err_console.print(f"{len(removed)} repositories cleaned")


if __name__ == "__main__":
    main()
