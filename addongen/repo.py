"""
repo.py

Responsibility: the `owner/name` identity of a repository on GitHub.

Parsing is lenient on purpose: build configuration commonly reads the
identity from an environment variable that may be unset or malformed, and
that must degrade to "no repository configured" instead of failing the build.
Callers check `GitHubRepo.configured` before using the identity.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

ENV_REPOSITORY = "GITHUB_REPOSITORY"


def _split(owner_and_name: str | None) -> tuple[str, str]:
    if not owner_and_name:
        return "", ""
    values = owner_and_name.split("/")
    if len(values) != 2 or not values[0] or not values[1]:
        return "", ""
    return values[0], values[1]


@dataclass(frozen=True)
class GitHubRepo:
    owner: str
    name: str
    dir: Path | None = None

    @classmethod
    def parse(cls, owner_and_name: str | None, dir: str | Path | None = None) -> GitHubRepo:
        """
        Build from `"owner/name"`. Anything that is not exactly two non-empty
        segments yields an empty owner and name; no error is raised.
        """
        owner, name = _split(owner_and_name)
        return cls(owner=owner, name=name, dir=Path(dir) if dir is not None else None)

    @classmethod
    def from_env(cls, dir: str | Path | None = None, env: Mapping[str, str] | None = None) -> GitHubRepo:
        env = os.environ if env is None else env
        return cls.parse(env.get(ENV_REPOSITORY), dir)

    @property
    def configured(self) -> bool:
        return bool(self.owner) and bool(self.name)

    def __str__(self) -> str:
        return f"{self.owner}/{self.name}"
