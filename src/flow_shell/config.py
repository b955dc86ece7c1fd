"""Default working directory, interpreter resolution, and the repo manifest."""

import os
from dataclasses import dataclass

import yaml

DEFAULT_SHELL = "/bin/sh"

_default_path: str | None = None


def set_default_path(path: str) -> None:
    """Set the process-wide working directory used when run() gets no cwd.

    Set once at startup; a different value afterwards is an error.
    """
    global _default_path
    if _default_path is not None and _default_path != path:
        raise RuntimeError(f"default path already set to {_default_path}")
    _default_path = path


def default_path() -> str | None:
    return _default_path


def resolve_shell() -> str:
    """Interpreter for commands: $SHELL, else /bin/sh."""
    return os.environ.get("SHELL") or DEFAULT_SHELL


@dataclass
class RepoConfig:
    name: str
    url: str
    path: str
    branch: str | None = None
    commit: str | None = None
    submodules: bool = True

    @property
    def ref(self) -> str | None:
        return self.branch or self.commit


def _parse_x_sync(manifest: dict) -> dict:
    """Extract x-sync top-level defaults."""
    x_sync = manifest.get("x-sync") or {}
    if not isinstance(x_sync, dict):
        raise ValueError("x-sync must be a mapping")
    return x_sync


def parse_repos(manifest: dict) -> list[RepoConfig]:
    """Parse a manifest dict into RepoConfig objects, in file order.

    Relative dirs are joined to x-sync.root; dir defaults to the repo name.
    Raises ValueError for anything that is not a mapping of repo mappings.
    """
    x_sync = _parse_x_sync(manifest)
    root = os.path.expanduser(str(x_sync.get("root", ".")))
    repos_dict = manifest.get("repos") or {}
    if not isinstance(repos_dict, dict):
        raise ValueError("repos must be a mapping of name to settings")
    repos = []

    for name, repo in repos_dict.items():
        repo = repo or {}
        if not isinstance(repo, dict):
            raise ValueError(f"repo {name} must be a mapping")
        url = repo.get("url")
        if not url:
            raise ValueError(f"repo {name} has no url")

        repo_dir = os.path.expanduser(str(repo.get("dir", name)))
        repos.append(
            RepoConfig(
                name=str(name),
                url=url,
                path=os.path.abspath(os.path.join(root, repo_dir)),
                branch=repo.get("branch"),
                commit=repo.get("commit"),
                submodules=bool(repo.get("submodules", True)),
            )
        )

    return repos


def validate_refs(repos: list[RepoConfig]) -> list[str]:
    """Return names of repos that pin both a branch and a commit."""
    return [r.name for r in repos if r.branch and r.commit]


def load_manifest(path: str) -> dict:
    """Read a YAML manifest file. Raises ValueError if it is not a YAML mapping."""
    try:
        with open(path) as f:
            manifest = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ValueError(f"{path}: invalid YAML: {e}") from e
    if manifest is None:
        return {}
    if not isinstance(manifest, dict):
        raise ValueError(f"{path}: manifest must be a mapping")
    return manifest


def manifest_verbose(manifest: dict) -> int:
    value = _parse_x_sync(manifest).get("verbose", 0)
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValueError(f"x-sync.verbose must be an integer, got {value!r}") from None
