"""Git operations built on process.run."""

import os

from flow_shell import process
from flow_shell.output import ShellError


class GitEnvironmentNotFound(Exception):
    """Git returned nothing where a value was expected."""


class Git:
    def __init__(self, local_path: str, verbose: int = 0):
        self.local_path = local_path
        self.verbose = verbose

    def __repr__(self) -> str:
        return f"Git({self.local_path!r})"

    def _shell(self, command: str) -> str:
        return process.run(command, verbose=self.verbose, cwd=self.local_path)

    @staticmethod
    def is_root_of_git(path: str, verbose: int = 0) -> bool:
        """True if path is the top level of a work tree."""
        try:
            top_level = process.run("git rev-parse --show-toplevel", verbose=verbose, cwd=path)
        except ShellError:
            return False
        return os.path.realpath(top_level) == os.path.realpath(path)

    @staticmethod
    def is_part_of_git(path: str, verbose: int = 0) -> bool:
        try:
            result = process.run("git rev-parse --is-inside-work-tree", verbose=verbose, cwd=path)
        except ShellError:
            return False
        return result == "true"

    @classmethod
    def clone_if_not_exists(cls, url: str, local_path: str, verbose: int = 0) -> "Git":
        """Clone url into local_path unless it already holds a repository."""
        if cls.is_root_of_git(local_path, verbose=verbose):
            return cls(local_path, verbose=verbose)
        os.makedirs(local_path, exist_ok=True)
        process.run(f"git clone '{url}' .", verbose=verbose, cwd=local_path, capture_stderr=True)
        return cls(local_path, verbose=verbose)

    def fetch_all(self) -> "Git":
        self._shell("git fetch --prune --all --verbose")
        return self

    def checkout_branch(self, branch: str) -> "Git":
        """Create a local branch tracking origin/<branch> and switch to it."""
        self._shell(f"git checkout --track -b {branch} origin/{branch}")
        return self

    def checkout_commit(self, sha: str) -> "Git":
        self._shell(f"git checkout {sha}")
        return self

    def sync_submodules(self) -> "Git":
        self._shell("git submodule sync")
        return self

    def update_submodules(self) -> "Git":
        self._shell("git submodule update --init --recursive --force")
        return self

    def current_branch_name(self) -> str:
        """Name of the checked out branch.

        Raises GitEnvironmentNotFound on a detached HEAD.
        """
        name = self._shell("git branch --show-current").strip()
        if not name:
            raise GitEnvironmentNotFound(f"no current branch in {self.local_path}")
        return name

    def is_staged_empty(self) -> bool:
        return self._shell("git diff --staged --numstat") == ""

    def last_committer(self) -> str:
        return self._shell("git log -1 --pretty=format:'%an'")

    def last_committer_email(self) -> str:
        return self._shell("git log -1 --pretty=format:'%ae'")

    def current_hash(self) -> str:
        return self._shell("git rev-parse HEAD")
