"""
cli.py

Responsibility: CLI entrypoint for addongen.

Commands:
- `generate`: load config + API description -> generate clients for every
  requested language -> write each language's files atomically.
- `release`: notify the marketplace repository of released add-ons.
- `create-release`: create the GitHub release of a version.
- `repo`: show how a repository identity resolves.

This module orchestrates only; the work lives in:
- Description loading: `description.py`
- Generation: `generator.py`
- Writing: `writer.py`
- GitHub API: `github_client.py`
"""

from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path

from addongen import __version__
from addongen.config import DEFAULT_CONFIG_NAME, load_config
from addongen.description import load_description
from addongen.errors import AddOnGenError, ConfigError, GitHubError
from addongen.generator import generate_all
from addongen.github_client import ADD_ON_RELEASE_EVENT, GitHubClient, addon_release_payload
from addongen.languages import resolve_languages
from addongen.log import configure_logging, get_logger
from addongen.repo import GitHubRepo
from addongen.writer import write_generated_files

logger = get_logger(__name__)


def generate_cmd(args: argparse.Namespace) -> int:
    config = load_config(args.config)

    api_path = Path(args.api).resolve() if args.api else config.api
    if api_path is None:
        raise ConfigError(f"No API description given (use --api or set `api` in {DEFAULT_CONFIG_NAME})")
    languages = resolve_languages(args.language) if args.language else list(config.languages)
    if args.output and len(languages) != 1:
        raise ConfigError("--output requires exactly one --language")

    description = load_description(api_path)
    # Everything is generated before anything is written.
    results = generate_all(description, languages, namespace=args.namespace or config.namespace)

    for language, files in results.items():
        destination = Path(args.output).resolve() if args.output else config.output_dir(language)
        result = write_generated_files(files, destination)
        print(f"{language.value}: {result.written} written, {result.unchanged} unchanged -> {destination}")
    return 0


def _token(args: argparse.Namespace) -> str:
    token = args.token or os.environ.get("GITHUB_TOKEN") or ""
    if not token:
        raise GitHubError("GitHub token is required (use --token or set GITHUB_TOKEN)")
    return token


def release_cmd(args: argparse.Namespace) -> int:
    if len(args.addon) != len(args.url):
        raise ConfigError("Each --addon needs a matching --url")

    config = load_config(args.config)
    repo = GitHubRepo.parse(args.repo) if args.repo else config.github.marketplace_repo
    if not repo.configured:
        raise ConfigError(f"Invalid marketplace repository: {args.repo!r}")

    payload = addon_release_payload(zip(args.addon, args.url))
    GitHubClient(_token(args)).send_repository_dispatch(repo, ADD_ON_RELEASE_EVENT, payload)
    print(f"Sent {ADD_ON_RELEASE_EVENT} for {len(payload['addons'])} add-on(s) to {repo}")
    return 0


def create_release_cmd(args: argparse.Namespace) -> int:
    repo = GitHubRepo.parse(args.repo) if args.repo else load_config(args.config).github.repo
    if not repo.configured:
        raise ConfigError("No GitHub repository given (use --repo, `github.repo` or GITHUB_REPOSITORY)")

    version = args.version.strip()
    if not version:
        raise ConfigError("Release version must not be empty")
    tag = f"v{version}"

    body = ""
    if args.body_file:
        try:
            body = Path(args.body_file).read_text(encoding="utf-8").strip()
        except (OSError, UnicodeDecodeError) as e:
            raise ConfigError(f"Failed to read release notes {args.body_file}: {e}") from e

    client = GitHubClient(_token(args))
    if client.get_release(repo, tag) is not None:
        raise GitHubError(f"Release {tag} already exists in {repo}")
    release = client.create_release(repo, tag, title=tag, body=body, prerelease=args.prerelease)
    print(f"Created release {release.tag} in {repo}: {release.html_url}")
    return 0


def repo_cmd(args: argparse.Namespace) -> int:
    if args.value is not None:
        repo = GitHubRepo.parse(args.value)
    else:
        repo = load_config(args.config).github.repo
    print(str(repo) if repo.configured else "not configured")
    return 0


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="addongen", description="Add-on build helper - API client generation and release bookkeeping")
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    p.add_argument("-q", "--quiet", action="store_true", help="Only log warnings and errors")
    p.add_argument("--config", default=DEFAULT_CONFIG_NAME, help=f"Configuration file (default: {DEFAULT_CONFIG_NAME})")
    sub = p.add_subparsers(dest="command", required=True)

    g = sub.add_parser("generate", help="Generate API client files")
    g.add_argument("--api", default=None, help="API description file (overrides config `api`)")
    g.add_argument(
        "--language",
        action="append",
        default=None,
        help="Target language, repeatable, or ALL (default: config `language`)",
    )
    g.add_argument("--output", default=None, help="Output directory (single language only)")
    g.add_argument("--namespace", default=None, help="Package/namespace of the generated code")
    g.set_defaults(func=generate_cmd)

    r = sub.add_parser("release", help="Send the add-on release event to the marketplace repository")
    r.add_argument("--addon", action="append", default=[], required=True, help="Released add-on file, repeatable")
    r.add_argument("--url", action="append", default=[], required=True, help="HTTPS download URL of each add-on")
    r.add_argument("--repo", default=None, help="Marketplace repository owner/name (default: config)")
    r.add_argument("--token", default=None, help="GitHub token (or set env GITHUB_TOKEN)")
    r.set_defaults(func=release_cmd)

    c = sub.add_parser("create-release", help="Create the GitHub release of a version")
    c.add_argument("version", help="Released version, tagged as v<version>")
    c.add_argument("--body-file", default=None, help="File with the release notes (e.g. the latest changelog section)")
    c.add_argument("--prerelease", action="store_true", help="Mark the release as a pre-release")
    c.add_argument("--repo", default=None, help="Repository owner/name (default: config or GITHUB_REPOSITORY)")
    c.add_argument("--token", default=None, help="GitHub token (or set env GITHUB_TOKEN)")
    c.set_defaults(func=create_release_cmd)

    i = sub.add_parser("repo", help="Print the resolved repository identity")
    i.add_argument("value", nargs="?", default=None, help="owner/name to parse (default: config or GITHUB_REPOSITORY)")
    i.set_defaults(func=repo_cmd)

    return p


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    configure_logging(verbose=args.verbose, quiet=args.quiet)
    try:
        return int(args.func(args))
    except AddOnGenError as e:
        logger.debug("Command failed", exc_info=True)
        print(f"error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
