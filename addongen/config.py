"""
config.py

Responsibility: load `apigen.yml`, the settings of an API client generation run.

Paths in the file are relative to the directory holding it (`api`,
`base_dir`) or to `base_dir` (`outputs`). The CLI may override most values.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

import yaml

from addongen.errors import ConfigError
from addongen.languages import ALL_LANGUAGES, Language, get_profile, parse_language, resolve_languages
from addongen.repo import GitHubRepo

DEFAULT_CONFIG_NAME = "apigen.yml"
DEFAULT_MARKETPLACE_REPO = "zaproxy/zap-admin"


@dataclass(frozen=True)
class GitHubSettings:
    repo: GitHubRepo = field(default_factory=lambda: GitHubRepo("", ""))
    marketplace_repo: GitHubRepo = field(default_factory=lambda: GitHubRepo.parse(DEFAULT_MARKETPLACE_REPO))


@dataclass(frozen=True)
class GenConfig:
    root: Path
    api: Path | None = None
    base_dir: Path | None = None
    languages: tuple[Language, ...] = tuple(Language)
    namespace: str | None = None
    outputs: dict[Language, Path] = field(default_factory=dict)
    github: GitHubSettings = field(default_factory=GitHubSettings)

    def output_dir(self, language: Language) -> Path:
        if language in self.outputs:
            return self.outputs[language]
        base = self.base_dir or self.root.parent
        return base / (get_profile(language).default_output or language.slug)


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / DEFAULT_CONFIG_NAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> dict[str, Any]:
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"Failed to read {path}: {e}") from e
    if not text.strip():
        return {}
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ConfigError(f"Failed to parse {path.name}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"{path.name} must contain a mapping at the top level.")
    return data


def _as_mapping(value: Any, where: str) -> dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ConfigError(f"`{where}` must be an object/mapping when provided.")
    return value


def _as_str(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _parse_outputs(raw: Any, base_dir: Path) -> dict[Language, Path]:
    outputs: dict[Language, Path] = {}
    for name, path in _as_mapping(raw, "outputs").items():
        if not _as_str(path):
            raise ConfigError(f"Output directory for {name!r} must be a non-empty path.")
        outputs[parse_language(name)] = (base_dir / str(path)).resolve()
    return outputs


def _parse_github(raw: Any, root: Path, env: Mapping[str, str] | None) -> GitHubSettings:
    data = _as_mapping(raw, "github")
    repo_value = _as_str(data.get("repo"))
    repo = GitHubRepo.parse(repo_value, root) if repo_value else GitHubRepo.from_env(root, env)
    marketplace = _as_str(data.get("marketplace_repo")) or DEFAULT_MARKETPLACE_REPO
    return GitHubSettings(repo=repo, marketplace_repo=GitHubRepo.parse(marketplace))


def load_config(config_path: str | Path, env: Mapping[str, str] | None = None) -> GenConfig:
    """
    Load generation settings. A missing file yields defaults rooted at its
    directory, so every value can come from the command line instead.

    Recognised keys:
    - api: path of the API description
    - base_dir: directory the outputs are relative to (default: parent of the config dir)
    - language: "ALL", a language name, or a list of names
    - namespace: package/namespace of the generated code
    - outputs: {language: directory}; unlisted languages use their default location
    - github.repo / github.marketplace_repo: "owner/name"
    """
    config_file = _resolve_config_path(Path(config_path))
    root = config_file.parent

    data = _read_config(config_file) if config_file.exists() else {}

    api = _as_str(data.get("api"))
    base_dir_raw = _as_str(data.get("base_dir"))
    base_dir = (root / base_dir_raw).resolve() if base_dir_raw else root.parent

    language_raw = data.get("language", ALL_LANGUAGES)
    if not isinstance(language_raw, (str, list)):
        raise ConfigError("`language` must be a name or a list of names.")

    return GenConfig(
        root=root,
        api=(root / api).resolve() if api else None,
        base_dir=base_dir,
        languages=tuple(resolve_languages(language_raw)),
        namespace=_as_str(data.get("namespace")),
        outputs=_parse_outputs(data.get("outputs"), base_dir),
        github=_parse_github(data.get("github"), root, env),
    )
