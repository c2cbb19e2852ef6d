"""
preflight.py

Responsibility: every check that can fail before the first network call.

- required executables are on PATH
- the project name has the allowed shape and is not already a directory
- the platform addressing fields are present
- the platform token is set and looks like a token for that platform

Token checks are purely syntactic; nothing here talks to a provider.
"""

from __future__ import annotations

import re
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Mapping

import structlog

from repocreate.config import ORG_ENV, ORG_URL_ENV, PROJECT_ID_ENV, Config, Platform
from repocreate.errors import CredentialError, ToolMissingError, UsageError
from repocreate.providers import HostingProvider

logger = structlog.get_logger(__name__)

REQUIRED_TOOLS = ("uv", "git")

PROJECT_NAME_PATTERN = re.compile(r"[a-z0-9][a-z0-9_-]{0,62}[a-z0-9]")


@dataclass(frozen=True)
class Credential:
    """A platform token, kept out of reprs and logs."""

    env_name: str
    value: str = field(repr=False)


def check_required_tools(tools: tuple[str, ...] = REQUIRED_TOOLS, *, which: Callable[[str], str | None] = shutil.which) -> None:
    for tool in tools:
        if which(tool) is None:
            raise ToolMissingError(tool)


def validate_project_name(name: str, cwd: Path) -> None:
    if not name:
        raise UsageError("Missing project name (--project-name).")
    if not PROJECT_NAME_PATTERN.fullmatch(name):
        raise UsageError(f"Invalid project name {name!r}. Must match: ^{PROJECT_NAME_PATTERN.pattern}$")
    if (cwd / name).is_dir():
        raise UsageError(f"Directory '{name}' already exists. Remove it or pick another name.")


def validate_addressing(config: Config) -> None:
    """Make sure the fields the selected platform builds its URLs from are set."""
    missing: list[str] = []
    if config.platform is Platform.DEVOPS:
        if not config.org_url:
            missing.append(f"organisation URL (--org-url or {ORG_URL_ENV})")
        if not config.project_id:
            missing.append(f"project ID (--project-id or {PROJECT_ID_ENV})")
    elif config.platform is Platform.GITHUB_ORG and not config.org:
        missing.append(f"organisation name (--org or {ORG_ENV})")

    if missing:
        raise UsageError("Missing " + ", ".join(missing))


def read_credential(provider: HostingProvider, environ: Mapping[str, str]) -> Credential:
    token = environ.get(provider.token_env, "")
    if not token:
        raise CredentialError(f"Missing {provider.token_env}. Export a {provider.name} token in that variable.")
    if not provider.token_pattern.fullmatch(token):
        raise CredentialError(f"Invalid {provider.name} token format in {provider.token_env}.")
    return Credential(env_name=provider.token_env, value=token)


def run_preflight(
    config: Config,
    provider: HostingProvider,
    *,
    cwd: Path,
    environ: Mapping[str, str],
    which: Callable[[str], str | None] | None = None,
) -> Credential:
    """Run all checks in order and return the validated credential."""
    check_required_tools(which=which or shutil.which)
    validate_project_name(config.project_name, cwd)
    validate_addressing(config)
    credential = read_credential(provider, environ)
    logger.debug("Preflight checks passed", project_name=config.project_name, platform=config.platform.value)
    return credential
