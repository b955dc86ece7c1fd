"""Click entry point — all commands."""

import os
import sys

import click

from flow_shell import __version__, config, log, process
from flow_shell import sync as sync_mod
from flow_shell.git import Git, GitEnvironmentNotFound
from flow_shell.output import ShellError
from flow_shell.sink import Sink


@click.group()
@click.version_option(version=__version__, prog_name="flow-shell")
def main():
    """Run shell commands and keep git checkouts in sync."""


@main.command(name="run", context_settings={"ignore_unknown_options": True})
@click.argument("command", nargs=-1, type=click.UNPROCESSED)
@click.option("--cwd", default=None, help="Working directory (default: current directory)")
@click.option("--verbose", "-v", count=True, help="Echo the command and its output")
@click.option("--stderr", "capture_stderr", is_flag=True, help="Capture stderr as well")
@click.option("--output", "output_path", default=None, help="Also stream stdout to this file")
@click.option("--error-output", "error_path", default=None, help="Also stream stderr to this file")
def run_cmd(command, cwd, verbose, capture_stderr, output_path, error_path):
    """Run COMMAND through the shell and print its output."""
    if not command:
        click.echo("Error: No command specified", err=True)
        sys.exit(1)

    config.set_default_path(os.getcwd())
    output_sink = Sink.open(output_path) if output_path else None
    error_sink = Sink.open(error_path) if error_path else None

    try:
        result = process.run(
            " ".join(command),
            verbose=verbose,
            cwd=cwd,
            output_sink=output_sink,
            capture_stderr=capture_stderr or error_sink is not None,
            error_sink=error_sink,
        )
    except ShellError as e:
        log.error(str(e))
        sys.exit(e.termination_status if 0 < e.termination_status < 256 else 1)

    if not verbose and result:
        click.echo(result)


@main.command()
@click.argument("manifest", type=click.Path(exists=True, dir_okay=False))
@click.option("--repo", multiple=True, help="Sync only specific repository(ies)")
@click.option("--dry-run", is_flag=True, help="Show what would happen without executing")
@click.option("--verbose", "-v", count=True, help="Echo every git command")
def sync(manifest, repo, dry_run, verbose):
    """Clone, fetch and check out every repository in MANIFEST."""
    try:
        manifest_dict = config.load_manifest(manifest)
        repos = config.parse_repos(manifest_dict)
        verbose = verbose or config.manifest_verbose(manifest_dict)
    except ValueError as e:
        log.error(str(e))
        sys.exit(1)

    if repo:
        repos = [r for r in repos if r.name in repo]

    code = sync_mod.sync(repos, verbose=verbose, dry_run=dry_run)
    sys.exit(code)


@main.command()
@click.argument("path", default=".", type=click.Path(exists=True, file_okay=False))
@click.option("--verbose", "-v", count=True, help="Echo every git command")
def status(path, verbose):
    """Show branch, commit and last committer of the repository at PATH."""
    path = os.path.abspath(path)
    if not Git.is_part_of_git(path, verbose=verbose):
        log.error(f"{path} is not inside a git work tree")
        sys.exit(1)

    git = Git(path, verbose=verbose)
    try:
        try:
            branch = git.current_branch_name()
        except GitEnvironmentNotFound:
            branch = "(detached)"
        log.info(f"Branch: {branch}")
        log.info(f"Commit: {git.current_hash()}")
        log.info(f"Last committer: {git.last_committer()} <{git.last_committer_email()}>")
        log.info(f"Staged changes: {'none' if git.is_staged_empty() else 'yes'}")
    except ShellError as e:
        log.error(str(e))
        sys.exit(1)


if __name__ == "__main__":
    main()
