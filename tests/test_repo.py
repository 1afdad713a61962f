from __future__ import annotations

from pathlib import Path

import pytest

from addongen.repo import GitHubRepo


def test_parse_owner_and_name(tmp_path: Path) -> None:
    repo = GitHubRepo.parse("zaproxy/zap-extensions", tmp_path)

    assert repo.owner == "zaproxy"
    assert repo.name == "zap-extensions"
    assert repo.dir == tmp_path
    assert repo.configured
    assert str(repo) == "zaproxy/zap-extensions"


@pytest.mark.parametrize("value", [None, "", "/", "owner", "owner/", "/name", "a/b/c", "a//b"])
def test_malformed_values_yield_empty_identity(value: str | None) -> None:
    repo = GitHubRepo.parse(value)

    assert repo.owner == ""
    assert repo.name == ""
    assert not repo.configured
    assert str(repo) == "/"


def test_round_trip_keeps_structural_equality(tmp_path: Path) -> None:
    repo = GitHubRepo("owner", "name", tmp_path)

    assert GitHubRepo.parse(str(repo), repo.dir) == repo
    assert GitHubRepo.parse(str(repo)) != repo


def test_from_env_is_lenient() -> None:
    assert GitHubRepo.from_env(env={"GITHUB_REPOSITORY": "octo/cat"}) == GitHubRepo("octo", "cat")
    assert not GitHubRepo.from_env(env={}).configured
    assert not GitHubRepo.from_env(env={"GITHUB_REPOSITORY": "garbage"}).configured


def test_identity_is_immutable() -> None:
    repo = GitHubRepo("owner", "name")
    with pytest.raises(AttributeError):
        repo.owner = "other"  # type: ignore[misc]
