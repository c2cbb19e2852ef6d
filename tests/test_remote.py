import pytest

from repocreate.api_client import ApiClient
from repocreate.errors import ApiError, RepoExistsError
from repocreate.preflight import Credential
from repocreate.providers import AzureDevOpsProvider, GitHubOrgProvider
from repocreate.remote import RemoteRepo, check_repo_exists, create_remote_repo
from tests.conftest import FakeSession

LOOKUP = "https://api.github.com/repos/acme/tools"
CREATE = "https://api.github.com/orgs/acme/repos"


def _api(provider, session) -> ApiClient:
    return ApiClient(provider, Credential("GITHUB_REPOCREATE_TOKEN", "ghp_abc"), session=session)


def test_existing_repo_fails() -> None:
    provider = GitHubOrgProvider("acme")
    session = FakeSession({("GET", LOOKUP): (200, '{"id": 123, "name": "tools"}')})

    with pytest.raises(RepoExistsError, match="'tools' already exists"):
        check_repo_exists(_api(provider, session), provider, "tools")


def test_not_found_passes() -> None:
    provider = GitHubOrgProvider("acme")
    session = FakeSession({("GET", LOOKUP): (404, '{"message": "Not Found", "status": "404"}')})

    check_repo_exists(_api(provider, session), provider, "tools")


@pytest.mark.parametrize("body", ["{}", '{"id": null}', '{"name": "tools"}', "[]"])
def test_body_without_identifier_passes(body: str) -> None:
    provider = GitHubOrgProvider("acme")
    session = FakeSession({("GET", LOOKUP): (200, body)})

    check_repo_exists(_api(provider, session), provider, "tools")


def test_create_extracts_github_urls() -> None:
    provider = GitHubOrgProvider("acme")
    body = '{"id": 9, "ssh_url": "git@github.com:acme/tools.git", "html_url": "https://github.com/acme/tools"}'
    session = FakeSession({("POST", CREATE): (201, body)})

    remote = create_remote_repo(_api(provider, session), provider, "tools")

    assert remote == RemoteRepo(name="tools", ssh_url="git@github.com:acme/tools.git", web_url="https://github.com/acme/tools")
    assert session.calls[0]["json"] == {"name": "tools", "private": True}


def test_create_extracts_azure_urls() -> None:
    provider = AzureDevOpsProvider("https://dev.azure.com/acme", "proj-1")
    create = "https://dev.azure.com/acme/_apis/git/repositories?api-version=6.0"
    body = '{"id": "b7c1", "sshUrl": "git@ssh.dev.azure.com:v3/acme/proj/svc", "webUrl": "https://dev.azure.com/acme/proj/_git/svc"}'
    session = FakeSession({("POST", create): (201, body)})

    remote = create_remote_repo(_api(provider, session), provider, "svc")

    assert remote.ssh_url == "git@ssh.dev.azure.com:v3/acme/proj/svc"
    assert remote.web_url == "https://dev.azure.com/acme/proj/_git/svc"


@pytest.mark.parametrize(
    "body",
    [
        '{"id": 9, "html_url": "https://github.com/acme/tools"}',
        '{"id": 9, "ssh_url": "git@github.com:acme/tools.git"}',
        '{"id": 9, "ssh_url": null, "html_url": "https://github.com/acme/tools"}',
        "{}",
    ],
)
def test_create_without_urls_fails(body: str) -> None:
    provider = GitHubOrgProvider("acme")
    session = FakeSession({("POST", CREATE): (201, body)})

    with pytest.raises(ApiError, match="Failed to extract repo URLs"):
        create_remote_repo(_api(provider, session), provider, "tools")
