"""
repocreate package

Creates a remote repository on Azure DevOps or GitHub and bootstraps a local
`uv` project wired to it, as a single fail-fast CLI run.

Key responsibilities are split across modules:
- `cli.py`: argument parsing, logging setup and the single exit point
- `config.py`: the immutable run configuration and its fallbacks
- `preflight.py`: tool, project name and credential checks
- `providers.py` / `api_client.py`: hosting platform REST interaction
- `remote.py`: existence check and repository creation
- `bootstrap.py`: `uv init` plus the local git wiring
- `pipeline.py`: stage orchestration (preflight -> check -> create -> bootstrap)
"""

from __future__ import annotations

__all__ = ["__version__"]

__version__ = "1.0.0"
