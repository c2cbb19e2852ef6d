"""
errors.py

Exception types for every failure a run can end with.

Stage functions raise these; `pipeline.run` turns them into a failed
`RunResult` and `cli.main` maps that to exit status 1.
"""

from __future__ import annotations


class RepoCreateError(RuntimeError):
    """Base class for all repocreate failures."""


class UsageError(RepoCreateError):
    """Bad or missing command-line input, including an invalid project name."""


class ConfigError(RepoCreateError):
    """The YAML defaults file could not be used."""


class ToolMissingError(RepoCreateError):
    """A required executable is not on PATH."""

    def __init__(self, tool: str) -> None:
        super().__init__(f"Missing required tool: {tool}")
        self.tool = tool


class CredentialError(RepoCreateError):
    """The platform token is unset or malformed."""


class RepoExistsError(RepoCreateError):
    """The requested repository already exists on the hosting platform."""


class ApiError(RepoCreateError):
    """A platform API call failed or returned something unusable."""


class AuthenticationError(ApiError):
    pass


class PermissionDeniedError(ApiError):
    pass


class BadRequestError(ApiError):
    pass


class InvalidResponseError(ApiError):
    pass


class CommandError(RepoCreateError):
    """An external command (uv, git) could not run or exited non-zero."""

    def __init__(self, step: str, cmd: list[str], output: str = "") -> None:
        detail = f"{step}: {' '.join(cmd)}"
        if output.strip():
            detail = f"{detail}\n\n{output.strip()}"
        super().__init__(detail)
        self.step = step
        self.cmd = cmd
        self.output = output
