"""
cli.py

Responsibility: CLI entrypoint for repocreate.

High-level flow:
1) Parse flags -> `Config` (plus env fallbacks and the optional YAML file)
2) Hand the config to `pipeline.run`
3) Report the outcome and turn it into an exit status

This is the only module that decides the process exit status:
0 on success or help/version, 1 on any failure.
"""

from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path
from typing import Any, Mapping, NoReturn, Sequence

import structlog
from dotenv import load_dotenv

from repocreate import __version__
from repocreate.config import CONFIG_FILE_ENV, ORG_ENV, ORG_URL_ENV, PROJECT_ID_ENV, Config, Platform, build_config, load_defaults_file
from repocreate.errors import RepoCreateError, UsageError
from repocreate.logging_utils import configure_logging
from repocreate.pipeline import run

logger = structlog.get_logger(__name__)


class _EarlyExit(Exception):
    """Raised by --help / --version to stop parsing and print `text`."""

    def __init__(self, text: str) -> None:
        super().__init__(text)
        self.text = text


class _HelpAction(argparse.Action):
    def __init__(self, option_strings: Sequence[str], dest: str = argparse.SUPPRESS, help: str | None = None) -> None:
        super().__init__(option_strings=option_strings, dest=dest, nargs=0, default=argparse.SUPPRESS, help=help)

    def __call__(self, parser: argparse.ArgumentParser, namespace: argparse.Namespace, values: Any, option_string: str | None = None) -> None:
        raise _EarlyExit(parser.format_help())


class _VersionAction(argparse.Action):
    def __init__(self, option_strings: Sequence[str], dest: str = argparse.SUPPRESS, help: str | None = None) -> None:
        super().__init__(option_strings=option_strings, dest=dest, nargs=0, default=argparse.SUPPRESS, help=help)

    def __call__(self, parser: argparse.ArgumentParser, namespace: argparse.Namespace, values: Any, option_string: str | None = None) -> None:
        raise _EarlyExit(__version__)


class _ArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that raises `UsageError` instead of exiting."""

    def error(self, message: str) -> NoReturn:
        raise UsageError(message)

    def check_tokens(self, args: Sequence[str]) -> None:
        """
        Read `args` left to right and reject the first unknown token.

        Stops at help or version, so anything after them is never looked at.
        """
        tokens = iter(args)
        for token in tokens:
            action = self._option_string_actions.get(token.split("=", 1)[0])
            if action is None:
                self.error(f"unrecognized arguments: {token}")
            if isinstance(action, (_HelpAction, _VersionAction)):
                return
            if action.nargs is None and "=" not in token:
                next(tokens, None)


def _non_empty(what: str):
    def check(value: str) -> str:
        if not value:
            raise argparse.ArgumentTypeError(f"Missing {what}")
        return value

    return check


def build_arg_parser() -> _ArgumentParser:
    p = _ArgumentParser(
        prog="repocreate",
        description="Create a private remote repository and bootstrap a local uv project wired to it.",
        add_help=False,
        allow_abbrev=False,
    )

    platform = p.add_argument_group("platform (pick one)")
    choice = platform.add_mutually_exclusive_group()
    choice.add_argument("--devops", dest="platform", action="store_const", const=Platform.DEVOPS, help="Use Azure DevOps (default)")
    choice.add_argument(
        "--github-personal", dest="platform", action="store_const", const=Platform.GITHUB_PERSONAL, help="Use GitHub, personal account"
    )
    choice.add_argument("--github-org", dest="platform", action="store_const", const=Platform.GITHUB_ORG, help="Use GitHub, organisation")

    required = p.add_argument_group("required")
    required.add_argument("--project-name", type=_non_empty("project name"), metavar="NAME", help="Project name (lowercase)")

    devops = p.add_argument_group("Azure DevOps options")
    devops.add_argument("--org-url", type=_non_empty("org URL"), metavar="URL", help=f"DevOps org URL (or set {ORG_URL_ENV})")
    devops.add_argument("--project-id", type=_non_empty("project ID"), metavar="ID", help=f"DevOps project ID (or set {PROJECT_ID_ENV})")

    github = p.add_argument_group("GitHub org options")
    github.add_argument("--org", type=_non_empty("org name"), metavar="NAME", help=f"GitHub org name (or set {ORG_ENV})")

    optional = p.add_argument_group("optional")
    optional.add_argument("--autocommit", action="store_true", default=None, help="Commit the skeleton and push it to main after setup")
    optional.add_argument("--no-autocommit", dest="autocommit", action="store_false", help="Skip the commit and push, even if the config file enables it")
    optional.add_argument("--config", type=_non_empty("config path"), metavar="PATH", help=f"YAML defaults file (or set {CONFIG_FILE_ENV})")
    optional.add_argument("--verbose", action="store_true", help="Show debug output")
    optional.add_argument("-v", "--version", action=_VersionAction, help="Show version")
    optional.add_argument("-h", "--help", action=_HelpAction, help="Show this help")

    return p


def config_from_args(args: argparse.Namespace, environ: Mapping[str, str]) -> Config:
    config_path = args.config or environ.get(CONFIG_FILE_ENV)
    defaults = load_defaults_file(config_path) if config_path else {}
    return build_config(
        project_name=args.project_name,
        platform=args.platform,
        autocommit=args.autocommit,
        org_url=args.org_url,
        project_id=args.project_id,
        org=args.org,
        verbose=args.verbose,
        environ=environ,
        defaults=defaults,
    )


def main(argv: list[str] | None = None) -> int:
    load_dotenv(Path.cwd() / ".env")
    argv = sys.argv[1:] if argv is None else argv
    parser = build_arg_parser()

    try:
        parser.check_tokens(argv)
        args = parser.parse_args(argv)
    except _EarlyExit as e:
        print(e.text.rstrip("\n"))
        return 0
    except UsageError as e:
        configure_logging()
        logger.error(str(e))
        logger.error("Run with --help for usage.")
        return 1

    configure_logging(verbose=args.verbose)

    try:
        config = config_from_args(args, os.environ)
        result = run(config)
    except RepoCreateError as e:
        logger.error(str(e))
        return 1
    except KeyboardInterrupt:
        return 130

    if not result.ok or result.remote is None:
        logger.error(str(result.error), stage=result.stage.value)
        return 1

    logger.info("Setup complete", project_name=config.project_name, ssh_url=result.remote.ssh_url, web_url=result.remote.web_url)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
