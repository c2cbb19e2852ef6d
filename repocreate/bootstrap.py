"""
bootstrap.py

Responsibility: turn an empty directory name into a local project wired to
the new remote.

Flow:
1) `uv init <name>` (creates the directory, a skeleton and a git repo)
2) work inside `<name>` from here on
3) `git branch -M main`
4) `git remote add origin <ssh_url>`
5) optionally `git add .`, commit, `git push -u origin main`

Every step is fatal on failure; nothing is undone.
"""

from __future__ import annotations

import subprocess
from pathlib import Path

import structlog

from repocreate.errors import CommandError
from repocreate.remote import RemoteRepo

logger = structlog.get_logger(__name__)

DEFAULT_BRANCH = "main"
REMOTE_NAME = "origin"
INITIAL_COMMIT_MESSAGE = "Initial commit: Project setup with uv"


def _run(step: str, cmd: list[str], *, cwd: Path) -> None:
    """
    Run a subprocess command, raising a CommandError on failure.
    """
    logger.debug("Running command", cmd=" ".join(cmd), cwd=str(cwd))
    try:
        subprocess.run(cmd, cwd=str(cwd), check=True, stdout=subprocess.PIPE, stderr=subprocess.STDOUT, text=True)
    except subprocess.CalledProcessError as e:
        raise CommandError(step, cmd, e.stdout or "") from e
    except OSError as e:
        raise CommandError(step, cmd, str(e)) from e


def scaffold_project(project_name: str, *, cwd: Path) -> Path:
    _run("uv init failed", ["uv", "init", project_name], cwd=cwd)
    project_dir = cwd / project_name
    if not project_dir.is_dir():
        raise CommandError("Failed to enter project directory", ["cd", str(project_dir)])
    return project_dir


def wire_remote(project_dir: Path, ssh_url: str) -> None:
    _run(f"Failed to rename branch to {DEFAULT_BRANCH}", ["git", "branch", "-M", DEFAULT_BRANCH], cwd=project_dir)
    _run("Failed to add git remote", ["git", "remote", "add", REMOTE_NAME, ssh_url], cwd=project_dir)


def commit_and_push(project_dir: Path) -> None:
    _run("Git add failed", ["git", "add", "."], cwd=project_dir)
    _run("Git commit failed", ["git", "commit", "-m", INITIAL_COMMIT_MESSAGE], cwd=project_dir)
    _run("Git push failed", ["git", "push", "-u", REMOTE_NAME, DEFAULT_BRANCH], cwd=project_dir)


def bootstrap_local_project(remote: RemoteRepo, *, cwd: Path, autocommit: bool) -> Path:
    """Run the local steps in order and return the project directory."""
    project_dir = scaffold_project(remote.name, cwd=cwd)
    wire_remote(project_dir, remote.ssh_url)
    if autocommit:
        commit_and_push(project_dir)
    else:
        logger.debug("Skipping initial commit and push", project_dir=str(project_dir))
    return project_dir
