"""Bring every repository of a manifest to its pinned ref."""

import time

from flow_shell import config, log
from flow_shell.git import Git, GitEnvironmentNotFound
from flow_shell.output import ShellError


def sync(repos: list[config.RepoConfig], verbose: int = 0, dry_run: bool = False) -> int:
    """Sync repos in order. Returns exit code (0=success, 1=failure)."""
    if not repos:
        log.error("No repositories to sync")
        return 1

    conflicting = config.validate_refs(repos)
    if conflicting:
        log.error(f"Repositories pin both branch and commit: {', '.join(conflicting)}")
        return 1

    if dry_run:
        _dry_run(repos)
        return 0

    log.header("sync")
    log.info(f"repositories: {', '.join(r.name for r in repos)}")
    log.info("")
    start_time = time.time()

    for repo in repos:
        if _sync_repo(repo, verbose) != 0:
            log.info("")
            log.footer("FAILED (sync aborted)")
            return 1

    log.info("")
    log.footer(f"complete ({time.time() - start_time:.1f}s)")
    return 0


def _sync_repo(repo: config.RepoConfig, verbose: int) -> int:
    """Sync a single repository. Returns 0 on success, 1 on failure."""
    log.repo_start(repo.name)
    repo_start = time.time()

    try:
        log.step(f"cloning {repo.url} into {repo.path} (if missing)...")
        git = Git.clone_if_not_exists(repo.url, repo.path, verbose=verbose)

        log.step("fetching...")
        git.fetch_all()

        if repo.branch:
            _checkout_branch(git, repo.branch)
        elif repo.commit:
            log.step(f"checking out {repo.commit}...")
            git.checkout_commit(repo.commit)

        if repo.submodules:
            log.step("updating submodules...")
            git.sync_submodules().update_submodules()

        head = git.current_hash()
    except ShellError as e:
        log.failure(f"{repo.name} FAILED (status {e.termination_status}): {e.message or e.output}")
        log.repo_end()
        return 1

    log.success(f"{repo.name} at {head[:12]} ({time.time() - repo_start:.1f}s)")
    log.repo_end()
    return 0


def _checkout_branch(git: Git, branch: str) -> None:
    try:
        current = git.current_branch_name()
    except GitEnvironmentNotFound:
        current = None

    if current == branch:
        log.step(f"already on {branch}")
        return

    log.step(f"checking out {branch}...")
    try:
        git.checkout_branch(branch)
    except ShellError:
        # Local branch exists already; switch to it.
        git.checkout_commit(branch)


def _dry_run(repos: list[config.RepoConfig]) -> None:
    """Show what would happen without executing."""
    log.header("sync (dry-run)")
    for repo in repos:
        log.repo_start(repo.name)
        log.step(f"would clone {repo.url} into {repo.path} if missing")
        log.step("would fetch all remotes")
        if repo.ref:
            log.step(f"would check out {repo.ref}")
        if repo.submodules:
            log.step("would sync and update submodules")
        log.repo_end()
    log.footer("dry-run complete")
