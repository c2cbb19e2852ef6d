from pathlib import Path

import pytest

from repocreate.config import Config, Platform, build_config, load_defaults_file
from repocreate.errors import ConfigError


def test_defaults() -> None:
    config = build_config(project_name="ab", environ={})

    assert config == Config(project_name="ab", platform=Platform.DEVOPS)


def test_cli_value_wins_over_env_and_file() -> None:
    config = build_config(
        project_name="ab",
        org_url="https://dev.azure.com/cli",
        environ={"AZURE_REPOCREATE_ORG_URL": "https://dev.azure.com/env"},
        defaults={"org_url": "https://dev.azure.com/file"},
    )

    assert config.org_url == "https://dev.azure.com/cli"


def test_env_wins_over_file() -> None:
    config = build_config(
        project_name="ab",
        environ={"AZURE_REPOCREATE_PROJECT_ID": "env-id", "GITHUB_REPOCREATE_ORG": "env-org"},
        defaults={"project_id": "file-id", "org": "file-org"},
    )

    assert config.project_id == "env-id"
    assert config.org == "env-org"


def test_file_supplies_platform_and_autocommit() -> None:
    config = build_config(project_name="ab", environ={}, defaults={"platform": Platform.GITHUB_ORG, "org": "acme", "autocommit": True})

    assert config.platform is Platform.GITHUB_ORG
    assert config.org == "acme"
    assert config.autocommit is True


def test_cli_platform_wins_over_file() -> None:
    config = build_config(project_name="ab", platform=Platform.GITHUB_PERSONAL, environ={}, defaults={"platform": Platform.GITHUB_ORG})

    assert config.platform is Platform.GITHUB_PERSONAL


def test_org_url_trailing_slash_is_stripped() -> None:
    config = build_config(project_name="ab", org_url="https://dev.azure.com/acme/", environ={})

    assert config.org_url == "https://dev.azure.com/acme"


def test_config_is_frozen() -> None:
    config = Config(project_name="ab")

    with pytest.raises(AttributeError):
        config.project_name = "cd"  # type: ignore[misc]


def test_load_defaults_file(tmp_path: Path) -> None:
    path = tmp_path / "repocreate.yaml"
    path.write_text("platform: github-org\norg: acme\nautocommit: true\n")

    assert load_defaults_file(path) == {"platform": Platform.GITHUB_ORG, "org": "acme", "autocommit": True}


def test_empty_defaults_file(tmp_path: Path) -> None:
    path = tmp_path / "repocreate.yaml"
    path.write_text("")

    assert load_defaults_file(path) == {}


@pytest.mark.parametrize(
    "text, message",
    [
        ("- a\n- b\n", "mapping"),
        ("token: ghp_abc\n", "Unknown key"),
        ("platform: bitbucket\n", "Invalid platform"),
        ("autocommit: maybe\n", "true or false"),
        ("org: [unclosed\n", "not valid YAML"),
    ],
)
def test_bad_defaults_file(tmp_path: Path, text: str, message: str) -> None:
    path = tmp_path / "repocreate.yaml"
    path.write_text(text)

    with pytest.raises(ConfigError, match=message):
        load_defaults_file(path)


def test_missing_defaults_file(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="Cannot read"):
        load_defaults_file(tmp_path / "nope.yaml")


def test_explicit_no_autocommit_wins_over_file() -> None:
    config = build_config(project_name="ab", autocommit=False, environ={}, defaults={"autocommit": True})

    assert config.autocommit is False
