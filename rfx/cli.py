"""Click-based CLI for rfx - a guided front end for everyday git workflows."""

from __future__ import annotations

import sys
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Optional

import click
import yaml
from pydantic import ValidationError as ConfigValidationError
from rich.console import Console as RichConsole
from rich.markup import escape

from rfx import __version__
from rfx.config import (
    RfxConfig,
    generate_default_config,
    get_config_path,
    load_config,
    validate_config_file,
    write_default_config,
)
from rfx.errors import GitCommandError, RfxError, UserCancelled, format_error, friendly_hint
from rfx.git import GitRepository, SubprocessGitRunner
from rfx.logger import RfxLogger
from rfx.output import Console, InteractiveFlowHandler, interactive_branch, interactive_commit
from rfx.workflow import FlowResult, FlowState, Workflow


@dataclass
class App:
    """Per-invocation collaborators shared by all commands."""

    config: RfxConfig
    console: Console
    logger: RfxLogger
    workflow: Workflow


def _make_logger(verbose: bool, colored: bool = True) -> RfxLogger:
    # Status messages go to stderr so --json output on stdout stays parseable.
    return RfxLogger(RichConsole(stderr=True, no_color=not colored), verbose=verbose)


def _get_app(ctx: click.Context) -> App:
    """Build the App on first use; config errors end the command."""
    obj = ctx.ensure_object(dict)
    if "app" in obj:
        return obj["app"]

    verbose = obj.get("verbose", False)
    try:
        config = load_config()
    except (yaml.YAMLError, ConfigValidationError) as e:
        _make_logger(verbose).error(f"Invalid configuration in {get_config_path()}: {e}")
        sys.exit(1)

    verbose = verbose or config.output.verbose
    logger = _make_logger(verbose, config.output.colored)
    runner = SubprocessGitRunner(on_command=logger.command)
    workflow = Workflow(
        GitRepository(runner),
        min_message_length=config.commit.min_message_length,
        default_remote=config.defaults.remote,
    )
    app = App(config=config, console=Console(config.output), logger=logger, workflow=workflow)
    obj["app"] = app
    return app


@contextmanager
def _command_errors(app: App) -> Iterator[None]:
    """Report failures and exit 1; treat cancellation as a normal exit."""
    try:
        yield
    except UserCancelled:
        app.logger.warning("Cancelled.")
    except RfxError as e:
        _report_error(app, e)
        sys.exit(1)


def _report_error(app: App, error: RfxError) -> None:
    app.logger.error(format_error(error))
    if isinstance(error, GitCommandError):
        hint = friendly_hint(error.details)
        if hint:
            app.logger.hint(hint)


def _finish_flow(app: App, result: FlowResult, verb: str) -> None:
    for warning in result.warnings:
        app.logger.warning(warning)

    if result.state == FlowState.ABORTED:
        app.logger.warning("Cancelled.")
        return

    if result.state == FlowState.FAILURE:
        if result.error is not None:
            _report_error(app, result.error)
        sys.exit(1)

    if result.output:
        app.console.print(f"[dim]{escape(result.output)}[/dim]")
    app.logger.success(f"{verb} {result.target}")


@click.group()
@click.version_option(version=__version__, prog_name="rfx")
@click.option("--verbose", "-v", is_flag=True, help="Show the git commands being run")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """rfx - a beginner-friendly way to work with git.

    Guided status, commit, branch, pull, push and undo with safety checks.

    \b
    Examples:
        rfx status
        rfx show commits --branch main --count 5
        rfx new commit
        rfx pull
    """
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose


@cli.command()
@click.argument("entity", type=click.Choice(["branches", "remotes", "commits"]))
@click.option("--json", "as_json", is_flag=True, help="Output as JSON instead of a table")
@click.option("--branch", "-b", default=None, help="Branch for commits (default from config: main)")
@click.option("--count", "-n", type=click.IntRange(min=1), default=None, help="Number of commits to show")
@click.pass_context
def show(ctx: click.Context, entity: str, as_json: bool, branch: Optional[str], count: Optional[int]) -> None:
    """Show branches, remotes or commits.

    \b
    Examples:
        rfx show branches
        rfx show remotes --json
        rfx show commits --branch develop --count 20
    """
    app = _get_app(ctx)
    with _command_errors(app):
        if entity == "branches":
            branches = app.workflow.list_branches()
            if as_json:
                app.console.print_json(branches)
            else:
                app.console.print_branches(branches)

        elif entity == "remotes":
            remotes = app.workflow.list_remotes()
            if as_json:
                app.console.print_json(remotes)
            else:
                app.console.print_remotes(remotes)

        else:
            branch = branch or app.config.defaults.branch
            commits = app.workflow.list_commits(branch, count or app.config.defaults.count)
            if as_json:
                app.console.print_json(commits)
            else:
                app.console.print_commits(commits, branch=branch)


@cli.group()
def new() -> None:
    """Create something new (commit, branch)."""
    pass


@new.command("commit")
@click.pass_context
def new_commit(ctx: click.Context) -> None:
    """Stage changes and commit them with a message."""
    app = _get_app(ctx)
    with _command_errors(app):
        interactive_commit(app.workflow, app.console, app.logger)


@new.command("branch")
@click.pass_context
def new_branch(ctx: click.Context) -> None:
    """Create a new branch and switch to it."""
    app = _get_app(ctx)
    with _command_errors(app):
        interactive_branch(app.workflow, app.console, app.logger)


@cli.command()
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def status(ctx: click.Context, as_json: bool) -> None:
    """Show the current branch, its upstream and changed files."""
    app = _get_app(ctx)
    with _command_errors(app):
        summary = app.workflow.get_status()
        if as_json:
            app.console.print_object_json(summary)
        else:
            app.console.print_status(summary)


@cli.command()
@click.pass_context
def pull(ctx: click.Context) -> None:
    """Pull changes safely.

    Uncommitted changes must be committed or stashed first.
    """
    app = _get_app(ctx)
    with _command_errors(app):
        handler = InteractiveFlowHandler(app.console, app.logger, "pull")
        _finish_flow(app, app.workflow.pull(handler), "Pulled from")


@cli.command()
@click.pass_context
def push(ctx: click.Context) -> None:
    """Push changes safely.

    Uncommitted changes must be committed or stashed first.
    """
    app = _get_app(ctx)
    with _command_errors(app):
        handler = InteractiveFlowHandler(app.console, app.logger, "push")
        _finish_flow(app, app.workflow.push(handler), "Pushed to")


@cli.command()
@click.option("--yes", "-y", is_flag=True, help="Don't ask for confirmation")
@click.pass_context
def undo(ctx: click.Context, yes: bool) -> None:
    """Undo the last commit, keeping its changes."""
    app = _get_app(ctx)
    with _command_errors(app):
        last = app.workflow.last_commit()
        if last is None:
            app.logger.info("No commits to undo")
            return

        app.console.print(
            f"Last commit: [yellow]{last.hash}[/yellow] {escape(last.message)} "
            f"[dim]({escape(last.author)}, {last.date})[/dim]"
        )
        if not yes and not app.console.confirm("Undo this commit?", default=False):
            app.logger.warning("Cancelled.")
            return

        undone = app.workflow.undo_last_commit()
        app.logger.success(f"Undid commit {undone.hash}. Its changes are still in your working tree.")


@cli.command()
@click.pass_context
def diff(ctx: click.Context) -> None:
    """Summarize unstaged changes per file."""
    app = _get_app(ctx)
    with _command_errors(app):
        summary = app.workflow.change_summary()
        if summary:
            app.console.print(escape(summary))
        else:
            app.logger.info("No unstaged changes")


@cli.command()
@click.pass_context
def fetch(ctx: click.Context) -> None:
    """Fetch updates from all remotes without merging."""
    app = _get_app(ctx)
    with _command_errors(app):
        app.workflow.fetch()
        app.logger.success("Fetched all remotes")


# ============================================================================
# Configuration Commands
# ============================================================================


@cli.group()
def config() -> None:
    """Configuration management.

    \b
    Config file: ~/.config/rfx/config.yaml (override with RFX_CONFIG)
    Keys: defaults.branch, defaults.count, defaults.remote,
          commit.min_message_length, output.*
    """
    pass


@config.command("show")
@click.pass_context
def config_show(ctx: click.Context) -> None:
    """Show the effective configuration."""
    app = _get_app(ctx)
    path = get_config_path()
    source = str(path) if path.exists() else f"{path} (not found, using defaults)"
    app.logger.info(f"Config: {source}")
    app.console.rich.out(
        yaml.safe_dump(app.config.model_dump(mode="json"), default_flow_style=False, sort_keys=False),
        highlight=False,
    )


@config.command("init")
@click.option("--force", "-f", is_flag=True, help="Overwrite an existing file")
@click.pass_context
def config_init(ctx: click.Context, force: bool) -> None:
    """Write a commented default config file."""
    logger = _make_logger(ctx.obj.get("verbose", False))
    path, written = write_default_config(force=force)
    if written:
        logger.success(f"Created {path}")
    else:
        logger.warning(f"{path} already exists (use --force to overwrite)")


@config.command("validate")
@click.pass_context
def config_validate(ctx: click.Context) -> None:
    """Validate the config file."""
    logger = _make_logger(ctx.obj.get("verbose", False))
    valid, errors = validate_config_file()
    if valid:
        logger.success(f"{get_config_path()} is valid")
        return

    logger.error(f"{get_config_path()} has errors:")
    for error in errors:
        logger.hint(error)
    sys.exit(1)


@config.command("template")
def config_template() -> None:
    """Print the default config file to stdout."""
    click.echo(generate_default_config(), nl=False)


if __name__ == "__main__":
    cli()
