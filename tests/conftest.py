from __future__ import annotations

import logging
from typing import Any

import pytest

from addongen.description import ApiDescription, parse_description

SAMPLE: dict[str, Any] = {
    "name": "Example API",
    "components": [
        {
            "name": "Core",
            "description": "Core functionality.",
            "actions": [
                {"name": "version"},
                {
                    "name": "urls",
                    "parameters": [{"name": "baseurl", "type": "string"}],
                    "returns": {"type": "list<string>", "key": "urls"},
                },
            ],
        },
        {
            "name": "spider",
            "actions": [
                {
                    "name": "scan",
                    "description": "Starts a spider scan.",
                    "parameters": [
                        {"name": "maxChildren", "type": "integer"},
                        {"name": "url", "type": "string", "required": True},
                        {"name": "recurse", "type": "boolean"},
                        {"name": "contextName", "type": "string", "required": True},
                    ],
                    "returns": {"type": "integer", "key": "scan"},
                },
                {
                    "name": "fullResults",
                    "parameters": [{"name": "scanId", "type": "integer", "required": True}],
                    "returns": {"kind": "complex", "key": "fullResults.inScope"},
                },
            ],
        },
    ],
}


class FakeTransport:
    """Records invocations and answers from a {(component, action): result} table."""

    def __init__(self, results: dict[tuple[str, str], Any] | None = None) -> None:
        self.results = results or {}
        self.calls: list[tuple[str, str, dict[str, Any]]] = []

    def invoke(self, component: str, action: str, params: dict[str, Any]) -> Any:
        self.calls.append((component, action, dict(params)))
        return self.results.get((component, action))


@pytest.fixture(autouse=True)
def _reset_cli_logging():
    """The CLI attaches a stderr handler; drop it so capsys sees a fresh stream each test."""
    yield
    logger = logging.getLogger("addongen")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.propagate = True


@pytest.fixture
def sample_description() -> ApiDescription:
    return parse_description(SAMPLE)


@pytest.fixture
def core_only() -> ApiDescription:
    return parse_description({"components": [{"name": "Core", "actions": [{"name": "version", "returns": "string"}]}]})
