"""Command-line entry point for Sprout."""

from __future__ import annotations

import sys
from types import SimpleNamespace

import typer

from . import __version__
from . import log as sprout_log
from .commands import launch as launch_cmd
from .commands import list as list_cmd
from .commands import prune as prune_cmd

COMMAND_NAMES = ("launch", "list", "prune")
_GLOBAL_VALUE_OPTIONS = ("--log-level",)
_GLOBAL_FLAGS = ("--no-color",)
_TOP_LEVEL_EXITS = ("--help", "--version")

app = typer.Typer(
    name="sprout",
    add_completion=False,
    no_args_is_help=True,
    help=(
        "Turn a ticket, issue, PR, URL, or prompt into a git worktree and "
        "hand it to your tool of choice."
    ),
)


def _validate_log_level(value: str | None) -> str | None:
    if value is None:
        return None
    normalized = value.strip().lower()
    if normalized not in sprout_log.LEVEL_NAMES:
        raise typer.BadParameter(f"expected one of: {', '.join(sprout_log.LEVEL_NAMES)}")
    return normalized


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(__version__)
        raise typer.Exit()


@app.callback()
def _global_options(
    log_level: str | None = typer.Option(
        None,
        "--log-level",
        callback=_validate_log_level,
        help="log verbosity (trace|debug|info|success|warning|error)",
    ),
    no_color: bool = typer.Option(False, "--no-color", help="disable colored output"),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="show the version and exit",
    ),
) -> None:
    if log_level:
        sprout_log.set_level(log_level)
    if no_color:
        sprout_log.set_no_color(True)


@app.command("launch")
def launch(
    text: str | None = typer.Argument(
        None,
        metavar="INPUT",
        help="Ticket (IOS-1234), issue (#42), PR (pr:7), URL, or prompt text; "
        "comma-separate references to launch several",
    ),
    jira: str | None = typer.Option(None, "--jira", "-j", help="use this Jira ticket"),
    github: str | None = typer.Option(
        None, "--github", "-g", help="use this GitHub issue number"
    ),
    pr: str | None = typer.Option(None, "--pr", help="use this GitHub PR number"),
    prompt: str | None = typer.Option(
        None, "--prompt", "-p", help="use this text as a raw prompt"
    ),
    branch: str | None = typer.Option(None, "--branch", "-b", help="override branch name"),
    config: str | None = typer.Option(
        None, "--config", "-c", help="use an alternate config file"
    ),
    dry_run: bool = typer.Option(
        False, "--dry-run", "-n", help="print what would happen without doing it"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="print detailed output"),
) -> None:
    """Create a worktree for a work item and run the launch script."""
    launch_cmd.launch(
        SimpleNamespace(
            input=text,
            jira=jira,
            github=github,
            pr=pr,
            prompt=prompt,
            branch=branch,
            config=config,
            dry_run=dry_run,
            verbose=verbose,
        )
    )


@app.command("list")
def list_worktrees(
    branches_only: bool = typer.Option(
        False, "--branches-only", help="print branch names only"
    ),
    include_main: bool = typer.Option(
        False, "--include-main", help="include the main worktree"
    ),
) -> None:
    """List worktrees as branch<TAB>path."""
    list_cmd.list_worktrees(
        SimpleNamespace(branches_only=branches_only, include_main=include_main)
    )


@app.command("prune")
def prune(
    pattern: str | None = typer.Argument(
        None, help="prune worktrees whose branch contains this text"
    ),
    stdin: bool = typer.Option(
        False, "--stdin", help="read branch names to prune from stdin, one per line"
    ),
    force: bool = typer.Option(False, "--force", "-f", help="skip confirmation"),
    dry_run: bool = typer.Option(
        False, "--dry-run", "-n", help="show what would be removed"
    ),
) -> None:
    """Remove worktrees and delete their branches."""
    prune_cmd.prune(
        SimpleNamespace(pattern=pattern, stdin=stdin, force=force, dry_run=dry_run)
    )


def route_default_command(argv: list[str]) -> list[str]:
    """Insert ``launch`` when the first non-global token is not a command.

    Launch options count too, so ``sprout -n IOS-1`` means
    ``sprout launch -n IOS-1``.

    Example:
        >>> route_default_command(["IOS-1234"])
        ['launch', 'IOS-1234']
        >>> route_default_command(["--log-level", "debug", "#42", "-n"])
        ['--log-level', 'debug', 'launch', '#42', '-n']
        >>> route_default_command(["--prompt", "fix it"])
        ['launch', '--prompt', 'fix it']
        >>> route_default_command(["list"])
        ['list']
    """
    index = 0
    while index < len(argv):
        token = argv[index]
        if token in _GLOBAL_VALUE_OPTIONS:
            index += 2
            continue
        if token in _GLOBAL_FLAGS or any(
            token.startswith(f"{option}=") for option in _GLOBAL_VALUE_OPTIONS
        ):
            index += 1
            continue
        break
    if index >= len(argv):
        return list(argv)
    token = argv[index]
    if token in COMMAND_NAMES or token in _TOP_LEVEL_EXITS:
        return list(argv)
    return [*argv[:index], "launch", *argv[index:]]


def main() -> None:
    app(args=route_default_command(sys.argv[1:]), prog_name="sprout")


if __name__ == "__main__":
    main()
