"""Thin wrapper around the ``git`` executable for the cached definitions repo."""

from __future__ import annotations

import logging
import shutil
import subprocess
from pathlib import Path

from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_fixed

from .models.libdef import LibDef

logger = logging.getLogger(__name__)


class GitError(RuntimeError):
    """Raised when git is missing or a git command fails."""


def get_git_path() -> str:
    path = shutil.which("git")
    if path is None:
        raise GitError("Unable to find `git` installed on this system")
    return path


def _run(args: list[str], cwd: Path | None = None) -> str:
    """Run ``git <args>`` and return stdout; failures raise GitError."""
    command = [get_git_path(), *args]
    logger.debug("Running %s (cwd=%s)", " ".join(command), cwd)
    try:
        completed = subprocess.run(
            command,
            cwd=cwd,
            check=True,
            capture_output=True,
            text=True,
        )
    except subprocess.CalledProcessError as exc:
        raise GitError(exc.stderr.strip() or str(exc)) from exc
    return completed.stdout


@retry(
    reraise=True,
    retry=retry_if_exception_type(GitError),
    stop=stop_after_attempt(3),
    wait=wait_fixed(2),
)
def clone_into(git_url: str, dest_dir: Path) -> None:
    try:
        _run(["clone", git_url, str(dest_dir)])
    except GitError as exc:
        raise GitError(f"Error cloning repo: {exc}") from exc


@retry(
    reraise=True,
    retry=retry_if_exception_type(GitError),
    stop=stop_after_attempt(3),
    wait=wait_fixed(2),
)
def rebase_repo_master(repo_dir: Path) -> None:
    try:
        _run(["checkout", "master"], cwd=repo_dir)
    except GitError as exc:
        raise GitError(
            f"Error checking out the `master` branch of the following repo:\n{repo_dir}\n\n{exc}"
        ) from exc
    try:
        _run(["pull", "--rebase"], cwd=repo_dir)
    except GitError as exc:
        raise GitError(
            f"Error rebasing the `master` branch of the following repo:\n{repo_dir}\n\n{exc}"
        ) from exc


def find_latest_file_commit_hash(repo_path: Path, file_path: Path) -> str:
    """Return the hash of the newest commit touching ``file_path``."""
    try:
        output = _run(["log", "-n", "1", "--pretty=%H", "--", str(file_path)], cwd=repo_path)
    except GitError as exc:
        raise GitError(f"Error finding latest commit hash for {file_path}: {exc}") from exc
    return output.strip()


def ensure_cache_repo(git_url: str, cache_dir: Path) -> Path:
    """Clone the definitions repo into ``cache_dir`` or bring it up to date."""
    if (cache_dir / ".git").is_dir():
        logger.info("Updating libdef cache in %s", cache_dir)
        rebase_repo_master(cache_dir)
    else:
        logger.info("Cloning %s into %s", git_url, cache_dir)
        cache_dir.parent.mkdir(parents=True, exist_ok=True)
        clone_into(git_url, cache_dir)
    return cache_dir


def libdef_version_hash(repo_path: Path, libdef: LibDef, tool_name: str = "flow") -> str:
    """``<commit[:10]>/<name>_<version>/<tool>_<range>`` identifying an installed libdef."""
    commit_hash = find_latest_file_commit_hash(repo_path, libdef.path)
    range_suffix = libdef.tool_version.to_dir_suffix()
    return f"{commit_hash[:10]}/{libdef.full_name}_{libdef.version}/{tool_name}_{range_suffix}"
