"""Fixtures shared by the repocreate tests."""

import subprocess
from pathlib import Path
from typing import Any, Generator

import pytest
import structlog


class FakeResponse:
    def __init__(self, status_code: int, text: str) -> None:
        self.status_code = status_code
        self.text = text


class FakeSession:
    """Stands in for `requests.Session`, answering from a route table."""

    def __init__(self, routes: dict[tuple[str, str], tuple[int, str]] | None = None) -> None:
        self.routes = dict(routes or {})
        self.calls: list[dict[str, Any]] = []

    def request(self, method: str, url: str, **kwargs: Any) -> FakeResponse:
        self.calls.append({"method": method, "url": url, **kwargs})
        if (method, url) not in self.routes:
            raise AssertionError(f"unexpected request: {method} {url}")
        status_code, text = self.routes[(method, url)]
        return FakeResponse(status_code, text)


class FakeRunner:
    """Records commands passed to `subprocess.run`; `uv init` creates the directory."""

    def __init__(self) -> None:
        self.calls: list[tuple[list[str], Path]] = []
        self.fail_on: tuple[str, ...] | None = None

    def __call__(self, cmd: list[str], cwd: str | None = None, **kwargs: Any) -> subprocess.CompletedProcess[str]:
        self.calls.append((list(cmd), Path(cwd or ".")))
        if self.fail_on is not None and tuple(cmd[: len(self.fail_on)]) == self.fail_on:
            raise subprocess.CalledProcessError(1, cmd, output="fatal: something went wrong")
        if cmd[:2] == ["uv", "init"]:
            (Path(cwd or ".") / cmd[2]).mkdir()
        return subprocess.CompletedProcess(cmd, 0, stdout="", stderr=None)

    @property
    def commands(self) -> list[list[str]]:
        return [cmd for cmd, _cwd in self.calls]


@pytest.fixture(autouse=True)
def reset_structlog() -> Generator[None, None, None]:
    """Undo any structlog configuration a test performed."""
    yield
    structlog.reset_defaults()


@pytest.fixture
def fake_runner(monkeypatch: pytest.MonkeyPatch) -> FakeRunner:
    runner = FakeRunner()
    monkeypatch.setattr("repocreate.bootstrap.subprocess.run", runner)
    return runner


@pytest.fixture
def all_tools() -> Any:
    return lambda tool: f"/usr/bin/{tool}"
