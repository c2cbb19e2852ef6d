"""
providers.py

Responsibility: everything that differs between hosting platforms.

Each `HostingProvider` knows how to:
- authenticate (header shape, token variable and token format)
- address a repository for the existence check and for creation
- pull the SSH and web URLs out of a creation response
- classify a raw API response

The rest of the program only talks to the provider chosen by
`select_provider`, so supporting another platform means adding a class here.
"""

from __future__ import annotations

import base64
import json
import re
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Sequence

from repocreate.config import Config, Platform
from repocreate.errors import (
    ApiError,
    AuthenticationError,
    BadRequestError,
    InvalidResponseError,
    PermissionDeniedError,
)

if TYPE_CHECKING:
    from repocreate.api_client import ApiClient

GITHUB_API = "https://api.github.com"
AZURE_API_VERSION = "6.0"

EMPTY_RESULT = "{}"


def _first_present(data: Any, fields: Sequence[str]) -> str | None:
    """Return the first field that is set and not null/false, like jq's `//`."""
    if not isinstance(data, dict):
        return None
    for field in fields:
        value = data.get(field)
        if value is not None and value is not False:
            return str(value)
    return None


class HostingProvider(ABC):
    """Base ABC for hosting platforms."""

    name: str
    token_env: str
    token_pattern: re.Pattern[str]

    clone_url_fields: Sequence[str] = ("sshUrl", "ssh_url")
    web_url_fields: Sequence[str] = ("webUrl", "html_url")

    @abstractmethod
    def auth_headers(self, token: str) -> dict[str, str]:
        """Headers that authenticate a request with `token`."""
        pass

    @abstractmethod
    def lookup_url(self, api: ApiClient, project_name: str) -> str:
        """URL that returns the repository named `project_name` if it exists."""
        pass

    @abstractmethod
    def create_request(self, project_name: str) -> tuple[str, dict[str, Any]]:
        """URL and JSON payload that create the repository."""
        pass

    def extract_clone_url(self, data: Any) -> str | None:
        return _first_present(data, self.clone_url_fields)

    def extract_web_url(self, data: Any) -> str | None:
        return _first_present(data, self.web_url_fields)

    def classify_response(self, text: str) -> str:
        """
        Turn raw response text into a usable body or raise.

        The checks look for the status code anywhere in the text, in this
        order: 401, 403, 404, 400. A body that merely contains one of those
        digit runs is classified the same way. A "404" becomes an empty
        object so the existence check sees "not found".
        """
        if "401" in text:
            raise AuthenticationError("Authentication failed. Check your PAT.")
        if "403" in text:
            raise PermissionDeniedError("Permission denied. Missing required scopes.")
        if "404" in text:
            return EMPTY_RESULT
        if "400" in text:
            raise BadRequestError(f"Bad request: {text}")

        try:
            parsed = json.loads(text)
        except ValueError as e:
            raise InvalidResponseError(f"Invalid JSON response: {text}") from e
        if parsed is None or parsed is False:
            raise InvalidResponseError(f"Invalid JSON response: {text}")
        return text


class AzureDevOpsProvider(HostingProvider):
    name = "Azure DevOps"
    token_env = "AZURE_REPOCREATE_EXT_PAT"
    token_pattern = re.compile(r"[a-zA-Z0-9]+")

    def __init__(self, org_url: str, project_id: str) -> None:
        self.org_url = org_url.rstrip("/")
        self.project_id = project_id

    def auth_headers(self, token: str) -> dict[str, str]:
        auth = base64.b64encode(f":{token}".encode()).decode("ascii")
        return {
            "Authorization": f"Basic {auth}",
            "Content-Type": "application/json",
        }

    def lookup_url(self, api: ApiClient, project_name: str) -> str:
        return f"{self.org_url}/_apis/git/repositories/{project_name}?api-version={AZURE_API_VERSION}"

    def create_request(self, project_name: str) -> tuple[str, dict[str, Any]]:
        url = f"{self.org_url}/_apis/git/repositories?api-version={AZURE_API_VERSION}"
        return url, {"name": project_name, "project": {"id": self.project_id}}


class GitHubProvider(HostingProvider):
    name = "GitHub"
    token_env = "GITHUB_REPOCREATE_TOKEN"
    token_pattern = re.compile(r"gh[ps]_[a-zA-Z0-9]+")

    def __init__(self, api_base: str = GITHUB_API) -> None:
        self.api_base = api_base.rstrip("/")

    def auth_headers(self, token: str) -> dict[str, str]:
        return {
            "Authorization": f"token {token}",
            "Accept": "application/vnd.github.v3+json",
        }

    def _payload(self, project_name: str) -> dict[str, Any]:
        return {"name": project_name, "private": True}


class GitHubPersonalProvider(GitHubProvider):
    """Repositories owned by the user the token belongs to."""

    def lookup_url(self, api: ApiClient, project_name: str) -> str:
        login = _first_present(json.loads(api.request("GET", f"{self.api_base}/user")), ("login",))
        if login is None:
            raise ApiError("Could not determine the authenticated GitHub user.")
        return f"{self.api_base}/repos/{login}/{project_name}"

    def create_request(self, project_name: str) -> tuple[str, dict[str, Any]]:
        return f"{self.api_base}/user/repos", self._payload(project_name)


class GitHubOrgProvider(GitHubProvider):
    """Repositories owned by an organisation."""

    def __init__(self, org: str, api_base: str = GITHUB_API) -> None:
        super().__init__(api_base)
        self.org = org

    def lookup_url(self, api: ApiClient, project_name: str) -> str:
        return f"{self.api_base}/repos/{self.org}/{project_name}"

    def create_request(self, project_name: str) -> tuple[str, dict[str, Any]]:
        return f"{self.api_base}/orgs/{self.org}/repos", self._payload(project_name)


def select_provider(config: Config) -> HostingProvider:
    if config.platform is Platform.GITHUB_PERSONAL:
        return GitHubPersonalProvider()
    if config.platform is Platform.GITHUB_ORG:
        return GitHubOrgProvider(config.org)
    return AzureDevOpsProvider(config.org_url, config.project_id)
