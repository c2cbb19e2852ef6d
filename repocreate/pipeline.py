"""
pipeline.py

Responsibility: run the stages in order and report how the run ended.

preflight -> existence check -> create -> bootstrap

The first `RepoCreateError` stops the run. Instead of exiting, `run` returns
a `RunResult` naming the stage that failed, so callers (the CLI, tests)
decide what to do with it.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, Mapping

import requests
import structlog

from repocreate.api_client import ApiClient
from repocreate.bootstrap import bootstrap_local_project
from repocreate.config import Config
from repocreate.errors import RepoCreateError
from repocreate.preflight import run_preflight
from repocreate.providers import HostingProvider, select_provider
from repocreate.remote import RemoteRepo, check_repo_exists, create_remote_repo

logger = structlog.get_logger(__name__)


class Stage(str, Enum):
    PREFLIGHT = "preflight"
    EXISTENCE_CHECK = "existence-check"
    CREATE = "create"
    BOOTSTRAP = "bootstrap"
    DONE = "done"


@dataclass(frozen=True)
class RunResult:
    ok: bool
    stage: Stage
    error: RepoCreateError | None = None
    remote: RemoteRepo | None = None
    project_dir: Path | None = None


def run(
    config: Config,
    *,
    cwd: Path | None = None,
    environ: Mapping[str, str] | None = None,
    session: requests.Session | None = None,
    provider: HostingProvider | None = None,
    which: Callable[[str], str | None] | None = None,
) -> RunResult:
    """
    Execute one full run for `config`.

    The keyword arguments exist so tests can supply a working directory,
    an environment, an HTTP session and a PATH lookup.
    """
    cwd = cwd or Path.cwd()
    environ = os.environ if environ is None else environ
    provider = provider or select_provider(config)
    remote: RemoteRepo | None = None

    stage = Stage.PREFLIGHT
    try:
        credential = run_preflight(config, provider, cwd=cwd, environ=environ, which=which)
        api = ApiClient(provider, credential, session=session)

        stage = Stage.EXISTENCE_CHECK
        check_repo_exists(api, provider, config.project_name)

        stage = Stage.CREATE
        remote = create_remote_repo(api, provider, config.project_name)

        stage = Stage.BOOTSTRAP
        project_dir = bootstrap_local_project(remote, cwd=cwd, autocommit=config.autocommit)
    except RepoCreateError as e:
        return RunResult(ok=False, stage=stage, error=e, remote=remote)

    return RunResult(ok=True, stage=Stage.DONE, remote=remote, project_dir=project_dir)
