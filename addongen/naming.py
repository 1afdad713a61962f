"""
naming.py

Responsibility: derive target-language identifiers from API names.

Source names are split into lowercase words and re-joined in the case the
target language uses for that kind of identifier. Escaping (reserved words,
leading digits) happens after joining, so two different source names may end
up with the same identifier; `check_unique` detects that.
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Callable, Iterable

from addongen.errors import GenerationError, NamingConflictError

_SEPARATORS = re.compile(r"[^0-9A-Za-z]+")
# Acronyms stay together unless followed by a lowercase letter: HTTPValue -> HTTP, Value
_WORDS = re.compile(r"[A-Z]+(?![a-z])|[A-Z]?[a-z]+|[0-9]+")


class Case(str, Enum):
    SNAKE = "snake"
    CAMEL = "camel"
    PASCAL = "pascal"


def split_words(name: str) -> list[str]:
    words: list[str] = []
    for chunk in _SEPARATORS.split(name):
        words.extend(w.lower() for w in _WORDS.findall(chunk))
    return words


def join_words(words: list[str], case: Case) -> str:
    if case is Case.SNAKE:
        return "_".join(words)
    pascal = "".join(w[:1].upper() + w[1:] for w in words)
    if case is Case.PASCAL:
        return pascal
    return words[0] + pascal[len(words[0]) :] if words else ""


def to_identifier(
    name: str,
    case: Case,
    *,
    reserved: frozenset[str] = frozenset(),
    escape_suffix: str = "_",
    ignore_case: bool = False,
) -> str:
    words = split_words(name)
    if not words:
        raise GenerationError(f"Cannot derive an identifier from name {name!r}")
    ident = join_words(words, case)
    if ident[0].isdigit():
        ident = "_" + ident
    if ident in reserved or (ignore_case and ident.lower() in {r.lower() for r in reserved}):
        ident += escape_suffix
    return ident


def check_unique(names: Iterable[str], render: Callable[[str], str], scope: str) -> dict[str, str]:
    """
    Render every name and return a `{source_name: identifier}` mapping in input
    order. Raises NamingConflictError when two distinct names collide.
    """
    seen: dict[str, str] = {}
    out: dict[str, str] = {}
    for name in names:
        ident = render(name)
        other = seen.get(ident)
        if other is not None and other != name:
            raise NamingConflictError(other, name, ident, scope)
        seen[ident] = name
        out[name] = ident
    return out
