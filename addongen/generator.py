"""
generator.py

Responsibility: translate an `ApiDescription` into client source files.

Generation is a pure function of (description, language, namespace):
- every name and type is resolved up front into render models, so naming
  conflicts and unmapped types abort the run before any template renders;
- templates are rendered with StrictUndefined and no timestamps, and files
  are returned sorted by path, so identical input gives identical bytes;
- nothing is written to disk here (see `writer.py`).
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from addongen.description import Action, ApiDescription, Component, ReturnShape, ShapeKind
from addongen.errors import GenerationError
from addongen.languages import Language, LanguageProfile, Layout, TypeMapping, get_profile
from addongen.log import get_logger
from addongen.naming import Case, check_unique, to_identifier

logger = get_logger(__name__)

TEMPLATES_DIR = Path(__file__).parent / "templates"

HEADER = "This file was automatically generated."

_KEY_SEGMENT = re.compile(r"^[A-Za-z0-9_\-]+$")


@dataclass(frozen=True)
class GeneratedFile:
    path: str
    content: str
    language: Language


@dataclass(frozen=True)
class ParamModel:
    key: str
    ident: str
    spelling: str
    required: bool
    description: str


@dataclass(frozen=True)
class MethodModel:
    name: str
    ident: str
    description: str
    params: tuple[ParamModel, ...]
    return_spelling: str
    result_expr: str
    returns_raw: bool

    @property
    def required(self) -> tuple[ParamModel, ...]:
        return tuple(p for p in self.params if p.required)

    @property
    def optional(self) -> tuple[ParamModel, ...]:
        return tuple(p for p in self.params if not p.required)


@dataclass(frozen=True)
class ComponentModel:
    name: str
    class_name: str
    file_stem: str
    description: str
    methods: tuple[MethodModel, ...]


def _literal(value: str) -> str:
    return json.dumps(value)


def _rust_literal(value: str) -> str:
    # Rust has no \uXXXX escape; keep non-ASCII characters as they are.
    return json.dumps(value, ensure_ascii=False)


def _php_literal(value: str) -> str:
    return "'" + value.replace("\\", "\\\\").replace("'", "\\'") + "'"


def _doc(value: str) -> str:
    # Single line, and safe inside a /** */ comment.
    text = " ".join(value.split())
    return text.replace("*/", "* /")


def _py_doc(value: str) -> str:
    # Body of a """ """ docstring: no escapes, no quote that could close it.
    text = " ".join(value.split())
    return text.replace("\\", "\\\\").replace('"', '\\"')


def _environment() -> Environment:
    env = Environment(
        loader=FileSystemLoader(str(TEMPLATES_DIR)),
        autoescape=False,
        undefined=StrictUndefined,
        keep_trailing_newline=True,
        trim_blocks=True,
        lstrip_blocks=True,
    )
    env.filters["literal"] = _literal
    env.filters["rust_literal"] = _rust_literal
    env.filters["php_literal"] = _php_literal
    env.filters["doc"] = _doc
    env.filters["py_doc"] = _py_doc
    return env


def _renderer(profile: LanguageProfile, case: Case, *, enclosing: str | None = None):
    def render(name: str) -> str:
        ident = to_identifier(
            name,
            case,
            reserved=profile.reserved,
            escape_suffix=profile.escape_suffix,
            ignore_case=profile.reserved_ignore_case,
        )
        if ident == enclosing:
            ident += profile.escape_suffix
        return ident

    return render


def _mapping(profile: LanguageProfile, type_name: str, where: str) -> TypeMapping:
    mapping = profile.types.get(type_name)
    if mapping is None:
        raise GenerationError(
            f"{where}: type {type_name!r} has no mapping for {profile.language.value}"
        )
    return mapping


def _resolve_return(profile: LanguageProfile, shape: ReturnShape, where: str) -> tuple[str, str]:
    """Return (spelling, conversion expression over the raw result)."""
    mapping = _mapping(profile, shape.type, f"{where} return")

    raw = profile.raw_var
    for key in shape.key_path:
        if not _KEY_SEGMENT.match(key):
            raise GenerationError(f"{where} return: invalid result key segment {key!r}")
        raw = profile.unwrap.format(value=raw, key=key)

    if shape.kind is ShapeKind.LIST:
        spelling = profile.list_spelling.format(item=mapping.boxed or mapping.spelling)
        convert = mapping.convert.format(value=profile.item_var)
        expr = profile.list_convert.format(value=raw, convert=convert, item=mapping.spelling)
        return spelling, expr

    return mapping.spelling, mapping.convert.format(value=raw)


def _build_method(profile: LanguageProfile, component: Component, action: Action, ident: str) -> MethodModel:
    where = f"{component.name}.{action.name}"
    ordered = action.ordered_parameters()
    idents = check_unique(
        [p.name for p in ordered],
        _renderer(profile, profile.param_case),
        f"parameters of action {where!r}",
    )

    params = []
    for p in ordered:
        mapping = _mapping(profile, p.type, f"{where} parameter {p.name!r}")
        spelling = mapping.spelling
        if not p.required:
            spelling = profile.optional_spelling.format(spelling=mapping.boxed or mapping.spelling)
        params.append(
            ParamModel(
                key=p.name,
                ident=idents[p.name],
                spelling=spelling,
                required=p.required,
                description=p.description,
            )
        )

    return_spelling, result_expr = _resolve_return(profile, action.returns, where)
    return MethodModel(
        name=action.name,
        ident=ident,
        description=action.description,
        params=tuple(params),
        return_spelling=return_spelling,
        result_expr=result_expr,
        returns_raw=result_expr == profile.raw_var,
    )


def _build_components(description: ApiDescription, profile: LanguageProfile) -> list[ComponentModel]:
    names = [c.name for c in description.components]
    class_names = check_unique(names, _renderer(profile, profile.class_case), "components")
    if profile.layout is Layout.PER_COMPONENT:
        file_stems = check_unique(names, _renderer(profile, profile.file_case), "generated files")
    else:
        file_stems = {name: profile.single_file for name in names}

    components = []
    for component in description.components:
        method_idents = check_unique(
            [a.name for a in component.actions],
            _renderer(
                profile,
                profile.method_case,
                enclosing=class_names[component.name] if profile.members_differ_from_class else None,
            ),
            f"actions of component {component.name!r}",
        )
        methods = tuple(
            _build_method(profile, component, action, method_idents[action.name])
            for action in component.actions
        )
        components.append(
            ComponentModel(
                name=component.name,
                class_name=class_names[component.name],
                file_stem=file_stems[component.name],
                description=component.description,
                methods=methods,
            )
        )
    return components


def generate(
    description: ApiDescription,
    language: Language | str,
    *,
    namespace: str | None = None,
) -> tuple[GeneratedFile, ...]:
    """
    Generate the client files of `description` for one target language.

    Raises GenerationError (unmapped type, unusable name) or NamingConflictError;
    in both cases no file is produced.
    """
    profile = get_profile(language)
    components = _build_components(description, profile)

    template = _environment().get_template(profile.template)
    context = {
        "header": HEADER,
        "api_name": description.name,
        "namespace": namespace or profile.default_namespace,
        "raw": profile.raw_var,
    }

    files: list[GeneratedFile] = []
    if profile.layout is Layout.SINGLE_FILE:
        content = template.render(components=components, **context)
        files.append(GeneratedFile(profile.file_name(profile.single_file), content, profile.language))
    else:
        for component in components:
            logger.debug("Rendering %s for component %s", profile.language.value, component.name)
            content = template.render(component=component, **context)
            files.append(GeneratedFile(profile.file_name(component.file_stem), content, profile.language))

    files.sort(key=lambda f: f.path)
    logger.info("Generated %d %s file(s)", len(files), profile.language.value)
    return tuple(files)


def generate_all(
    description: ApiDescription,
    languages: Iterable[Language | str],
    *,
    namespace: str | None = None,
) -> dict[Language, tuple[GeneratedFile, ...]]:
    """
    Generate for several languages. Runs are independent; the first failure
    propagates and no result is returned for any language.
    """
    results: dict[Language, tuple[GeneratedFile, ...]] = {}
    for language in languages:
        profile = get_profile(language)
        results[profile.language] = generate(description, profile.language, namespace=namespace)
    return results
