"""
description.py

Responsibility: the in-memory API description and its YAML loader.

An API description is a list of components, each a list of actions with typed
parameters and a return shape. The loader validates structure and name
uniqueness; whether the types can be expressed in a given target language is
decided later by the generator.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

import yaml

from addongen.errors import DescriptionError
from addongen.log import get_logger

logger = get_logger(__name__)

STRUCTURED_TYPE = "map"

_LIST_TYPE = re.compile(r"^list\s*<\s*([A-Za-z0-9_]+)\s*>$")


class ShapeKind(str, Enum):
    SCALAR = "scalar"
    LIST = "list"
    COMPLEX = "complex"


@dataclass(frozen=True)
class Parameter:
    name: str
    type: str = "string"
    required: bool = False
    description: str = ""


@dataclass(frozen=True)
class ReturnShape:
    """Declared result of an action. `key` is a dotted path unwrapped from the raw result."""

    kind: ShapeKind = ShapeKind.SCALAR
    type: str = "string"
    key: str | None = None

    @property
    def key_path(self) -> tuple[str, ...]:
        return tuple(self.key.split(".")) if self.key else ()


@dataclass(frozen=True)
class Action:
    name: str
    parameters: tuple[Parameter, ...] = ()
    returns: ReturnShape = field(default_factory=ReturnShape)
    description: str = ""

    def ordered_parameters(self) -> tuple[Parameter, ...]:
        """Required parameters in declaration order, then optional ones in declaration order."""
        required = [p for p in self.parameters if p.required]
        optional = [p for p in self.parameters if not p.required]
        return tuple(required + optional)


@dataclass(frozen=True)
class Component:
    name: str
    actions: tuple[Action, ...] = ()
    description: str = ""


@dataclass(frozen=True)
class ApiDescription:
    name: str = ""
    components: tuple[Component, ...] = ()


def _require_mapping(value: Any, where: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise DescriptionError(f"{where} must be an object/mapping.")
    return value


def _require_list(value: Any, where: str) -> list[Any]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise DescriptionError(f"{where} must be a list when provided.")
    return value


def _require_bool(value: Any, where: str) -> bool:
    if not isinstance(value, bool):
        raise DescriptionError(f"{where} must be true or false, not {value!r}.")
    return value


def _require_name(data: dict[str, Any], where: str) -> str:
    name = str(data.get("name") or "").strip()
    if not name:
        raise DescriptionError(f"{where} must define a non-empty `name`.")
    return name


def _check_duplicates(names: list[str], where: str) -> None:
    seen: set[str] = set()
    for name in names:
        if name in seen:
            raise DescriptionError(f"Duplicate name {name!r} in {where}.")
        seen.add(name)


def _parse_returns(raw: Any, where: str) -> ReturnShape:
    if raw is None:
        return ReturnShape()

    if isinstance(raw, str):
        text = raw.strip()
        m = _LIST_TYPE.match(text)
        if m:
            return ReturnShape(kind=ShapeKind.LIST, type=m.group(1))
        return ReturnShape(kind=ShapeKind.SCALAR, type=text)

    data = _require_mapping(raw, f"{where} `returns`")
    kind_raw = str(data.get("kind") or "").strip().lower()
    type_raw = str(data.get("type") or "").strip()
    key = str(data.get("key") or "").strip() or None

    m = _LIST_TYPE.match(type_raw)
    if m and kind_raw in ("", ShapeKind.LIST.value):
        return ReturnShape(kind=ShapeKind.LIST, type=m.group(1), key=key)

    if not kind_raw:
        kind_raw = ShapeKind.SCALAR.value if type_raw else ShapeKind.COMPLEX.value
    try:
        kind = ShapeKind(kind_raw)
    except ValueError as e:
        raise DescriptionError(f"{where} has unknown return kind {kind_raw!r}.") from e

    if kind is ShapeKind.COMPLEX:
        type_name = type_raw or STRUCTURED_TYPE
    else:
        type_name = type_raw or "string"
    return ReturnShape(kind=kind, type=type_name, key=key)


def _parse_parameter(raw: Any, where: str) -> Parameter:
    data = _require_mapping(raw, where)
    return Parameter(
        name=_require_name(data, where),
        type=str(data.get("type") or "string").strip(),
        required=_require_bool(data.get("required", False), f"`required` of {where}"),
        description=str(data.get("description") or "").strip(),
    )


def _parse_action(raw: Any, where: str) -> Action:
    data = _require_mapping(raw, where)
    name = _require_name(data, where)
    where = f"action {name!r}"

    params = [
        _parse_parameter(p, f"parameter #{i + 1} of {where}")
        for i, p in enumerate(_require_list(data.get("parameters"), f"`parameters` of {where}"))
    ]
    _check_duplicates([p.name for p in params], f"parameters of {where}")

    return Action(
        name=name,
        parameters=tuple(params),
        returns=_parse_returns(data.get("returns"), where),
        description=str(data.get("description") or "").strip(),
    )


def _parse_component(raw: Any, where: str) -> Component:
    data = _require_mapping(raw, where)
    name = _require_name(data, where)
    where = f"component {name!r}"

    actions = [
        _parse_action(a, f"action #{i + 1} of {where}")
        for i, a in enumerate(_require_list(data.get("actions"), f"`actions` of {where}"))
    ]
    _check_duplicates([a.name for a in actions], f"actions of {where}")

    return Component(
        name=name,
        actions=tuple(actions),
        description=str(data.get("description") or "").strip(),
    )


def parse_description(data: Any) -> ApiDescription:
    """
    Build an `ApiDescription` from already-decoded YAML/JSON data.

    Expected keys:
    - name: str
    - components: list of {name, description, actions: [...]}
    - each action: {name, description, parameters: [...], returns: ...}
    """
    data = _require_mapping(data, "API description")
    components = [
        _parse_component(c, f"component #{i + 1}")
        for i, c in enumerate(_require_list(data.get("components"), "`components`"))
    ]
    _check_duplicates([c.name for c in components], "components")

    return ApiDescription(name=str(data.get("name") or "").strip(), components=tuple(components))


def load_description(path: str | Path) -> ApiDescription:
    path = Path(path)
    if not path.exists():
        raise DescriptionError(f"API description does not exist: {path}")

    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise DescriptionError(f"Failed to read API description {path}: {e}") from e
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise DescriptionError(f"Failed to parse API description {path}: {e}") from e

    description = parse_description(data or {})
    logger.debug(
        "Loaded %s: %d component(s), %d action(s)",
        path,
        len(description.components),
        sum(len(c.actions) for c in description.components),
    )
    return description
