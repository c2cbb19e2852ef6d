"""
config.py

Responsibility: the single, immutable configuration for one run.

Values come from three places, in order of precedence:
1) command-line flags (parsed in `cli.py`)
2) environment variables (`AZURE_REPOCREATE_ORG_URL` and friends)
3) an optional YAML defaults file (`--config` / `REPOCREATE_CONFIG`)

Tokens are never part of `Config`; they are read by `preflight.py`.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Mapping

import yaml

from repocreate.errors import ConfigError

ORG_URL_ENV = "AZURE_REPOCREATE_ORG_URL"
PROJECT_ID_ENV = "AZURE_REPOCREATE_PROJECT_ID"
ORG_ENV = "GITHUB_REPOCREATE_ORG"
CONFIG_FILE_ENV = "REPOCREATE_CONFIG"

_DEFAULTS_KEYS = frozenset({"platform", "org_url", "project_id", "org", "autocommit"})


class Platform(str, Enum):
    """Hosting platform and addressing mode selected for the run."""

    DEVOPS = "devops"
    GITHUB_PERSONAL = "github-personal"
    GITHUB_ORG = "github-org"

    @property
    def is_github(self) -> bool:
        return self is not Platform.DEVOPS


@dataclass(frozen=True)
class Config:
    """Everything a run needs, built once by the CLI and passed to every stage."""

    project_name: str
    platform: Platform = Platform.DEVOPS
    autocommit: bool = False
    org_url: str = ""
    project_id: str = ""
    org: str = ""
    verbose: bool = False


def load_defaults_file(path: str | Path) -> dict[str, Any]:
    """
    Load a YAML defaults file into a plain dict.

    Accepted keys: platform, org_url, project_id, org, autocommit.
    An empty file yields an empty dict.
    """
    p = Path(path)
    try:
        text = p.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read config file {p}: {e}") from e

    try:
        data = yaml.safe_load(text) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Config file {p} is not valid YAML: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Config file {p} must contain a mapping at the top level.")

    unknown = sorted(str(k) for k in data if k not in _DEFAULTS_KEYS)
    if unknown:
        raise ConfigError(f"Unknown key(s) in config file {p}: {', '.join(unknown)}")

    if "platform" in data:
        try:
            data["platform"] = Platform(str(data["platform"]))
        except ValueError as e:
            choices = ", ".join(item.value for item in Platform)
            raise ConfigError(f"Invalid platform {data['platform']!r} in config file (expected one of: {choices})") from e

    if "autocommit" in data and not isinstance(data["autocommit"], bool):
        raise ConfigError("`autocommit` in config file must be true or false.")

    return data


def _pick(cli_value: str | None, env_name: str, environ: Mapping[str, str], defaults: Mapping[str, Any], key: str) -> str:
    if cli_value:
        return cli_value
    if environ.get(env_name):
        return environ[env_name]
    return str(defaults.get(key) or "")


def build_config(
    *,
    project_name: str | None,
    platform: Platform | None = None,
    autocommit: bool | None = None,
    org_url: str | None = None,
    project_id: str | None = None,
    org: str | None = None,
    verbose: bool = False,
    environ: Mapping[str, str],
    defaults: Mapping[str, Any] | None = None,
) -> Config:
    """
    Merge CLI values, environment fallbacks and file defaults into a `Config`.

    `None` / empty CLI values mean "not given on the command line"; an
    explicit `autocommit=False` overrides the file.
    """
    defaults = defaults or {}

    return Config(
        project_name=project_name or "",
        platform=platform or defaults.get("platform") or Platform.DEVOPS,
        autocommit=bool(defaults.get("autocommit", False)) if autocommit is None else autocommit,
        org_url=_pick(org_url, ORG_URL_ENV, environ, defaults, "org_url").rstrip("/"),
        project_id=_pick(project_id, PROJECT_ID_ENV, environ, defaults, "project_id"),
        org=_pick(org, ORG_ENV, environ, defaults, "org"),
        verbose=verbose,
    )
