"""
remote.py

Responsibility: the two remote stages of a run.

- `check_repo_exists`: fail if the platform already has a repository with
  the requested name
- `create_remote_repo`: create it and return its SSH and web URLs

A repository created here is left in place if a later stage fails.
"""

from __future__ import annotations

import json
from dataclasses import dataclass

import structlog

from repocreate.api_client import ApiClient
from repocreate.errors import ApiError, RepoExistsError
from repocreate.providers import HostingProvider

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class RemoteRepo:
    name: str
    ssh_url: str
    web_url: str


def check_repo_exists(api: ApiClient, provider: HostingProvider, project_name: str) -> None:
    """
    Raise `RepoExistsError` if the lookup returns an object with an `id`.

    A not-found lookup is classified as `{}` and therefore passes.
    """
    url = provider.lookup_url(api, project_name)
    data = json.loads(api.request("GET", url))
    if isinstance(data, dict) and data.get("id") not in (None, False):
        raise RepoExistsError(f"Repo '{project_name}' already exists on {provider.name}. Pick another name.")
    logger.debug("Repository name is free", project_name=project_name, url=url)


def create_remote_repo(api: ApiClient, provider: HostingProvider, project_name: str) -> RemoteRepo:
    url, payload = provider.create_request(project_name)
    logger.info("Creating remote repository", project_name=project_name, platform=provider.name)
    data = json.loads(api.request("POST", url, json_body=payload))

    ssh_url = provider.extract_clone_url(data)
    web_url = provider.extract_web_url(data)
    if ssh_url is None or web_url is None:
        raise ApiError("Failed to extract repo URLs from the creation response.")

    return RemoteRepo(name=project_name, ssh_url=ssh_url, web_url=web_url)
