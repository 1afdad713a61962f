"""
languages.py

Responsibility: describe every supported target language as data.

A `LanguageProfile` holds everything the generator needs to know about a
language: naming cases, reserved words, file layout, the template to render
and the type-mapping table from abstract API types to the language's
spelling and conversion snippet. Conversion snippets are `str.format`
templates over `{value}` (the raw expression being converted).
"""

from __future__ import annotations

import keyword
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Mapping

from addongen.errors import ConfigError
from addongen.naming import Case

ALL_LANGUAGES = "ALL"


class Language(str, Enum):
    DOTNET = "DotNet"
    GO = "Go"
    JAVA = "Java"
    NODEJS = "NodeJs"
    PHP = "Php"
    PYTHON = "Python"
    RUST = "Rust"

    @property
    def slug(self) -> str:
        return self.value.lower()


class Layout(str, Enum):
    PER_COMPONENT = "per-component"
    SINGLE_FILE = "single-file"


@dataclass(frozen=True)
class TypeMapping:
    spelling: str
    convert: str = "{value}"
    # Reference-type spelling for languages whose generics reject primitives.
    boxed: str | None = None


@dataclass(frozen=True)
class LanguageProfile:
    language: Language
    template: str
    extension: str
    layout: Layout
    file_case: Case
    class_case: Case
    method_case: Case
    param_case: Case
    reserved: frozenset[str]
    types: Mapping[str, TypeMapping]
    # {item}: element spelling
    list_spelling: str
    # {value}: raw list expression, {convert}: element conversion of `item_var`, {item}: element spelling
    list_convert: str
    unwrap: str
    optional_spelling: str = "{spelling}"
    item_var: str = "item"
    raw_var: str = "raw"
    escape_suffix: str = "_"
    reserved_ignore_case: bool = False
    single_file: str = ""
    default_namespace: str = ""
    # Member names may not repeat the enclosing class name (C# constructors).
    members_differ_from_class: bool = False
    # Output directory when the config names none, relative to the base dir.
    default_output: str = ""

    def file_name(self, stem: str) -> str:
        return f"{stem}.{self.extension}"


# Names used by the generated code itself; parameters must not shadow them.
_LOCALS = frozenset({"params", "raw", "transport"})

PYTHON = LanguageProfile(
    language=Language.PYTHON,
    template="python.py.jinja",
    extension="py",
    layout=Layout.PER_COMPONENT,
    file_case=Case.SNAKE,
    class_case=Case.PASCAL,
    method_case=Case.SNAKE,
    param_case=Case.SNAKE,
    reserved=frozenset(keyword.kwlist) | frozenset({"self", "Any"}) | _LOCALS,
    types={
        "string": TypeMapping("str"),
        "integer": TypeMapping("int", "int({value})"),
        "number": TypeMapping("float", "float({value})"),
        "boolean": TypeMapping("bool", 'str({value}).lower() == "true"'),
        "map": TypeMapping("dict[str, Any]", "dict({value})"),
    },
    list_spelling="list[{item}]",
    list_convert="[{convert} for item in {value}]",
    unwrap='{value}["{key}"]',
    optional_spelling="{spelling} | None",
    default_output="zap-api-python/src/zapv2",
)

JAVA = LanguageProfile(
    language=Language.JAVA,
    template="java.java.jinja",
    extension="java",
    layout=Layout.PER_COMPONENT,
    file_case=Case.PASCAL,
    class_case=Case.PASCAL,
    method_case=Case.CAMEL,
    param_case=Case.CAMEL,
    reserved=frozenset(
        """
        abstract assert boolean break byte case catch char class const continue default do
        double else enum extends final finally float for goto if implements import instanceof
        int interface long native new package private protected public return short static
        strictfp super switch synchronized this throw throws transient try void volatile while
        true false null var record yield
        """.split()
    )
    | _LOCALS
    | frozenset({"String", "Object", "Integer", "Double", "Boolean", "Map", "List", "HashMap", "Collectors"})
    | frozenset({"ApiTransport", "ApiTransportException"}),
    types={
        "string": TypeMapping("String", "(String) {value}"),
        "integer": TypeMapping("int", "Integer.parseInt(String.valueOf({value}))", boxed="Integer"),
        "number": TypeMapping("double", "Double.parseDouble(String.valueOf({value}))", boxed="Double"),
        "boolean": TypeMapping("boolean", "Boolean.parseBoolean(String.valueOf({value}))", boxed="Boolean"),
        "map": TypeMapping("Map<String, Object>", "(Map<String, Object>) {value}"),
    },
    list_spelling="List<{item}>",
    list_convert="((List<?>) {value}).stream().map(item -> {convert}).collect(Collectors.toList())",
    unwrap='((Map<?, ?>) {value}).get("{key}")',
    default_namespace="org.zaproxy.clientapi.gen",
    default_output="zap-api-java/subprojects/zap-clientapi/src/main/java/org/zaproxy/clientapi/gen",
)

NODEJS = LanguageProfile(
    language=Language.NODEJS,
    template="nodejs.js.jinja",
    extension="js",
    layout=Layout.PER_COMPONENT,
    file_case=Case.CAMEL,
    class_case=Case.PASCAL,
    method_case=Case.CAMEL,
    param_case=Case.CAMEL,
    reserved=frozenset(
        """
        arguments await break case catch class const continue debugger default delete do else
        enum eval export extends false finally for function if implements import in instanceof
        interface let new null package private protected public return static super switch this
        throw true try typeof var void while with yield
        """.split()
    )
    | _LOCALS,
    types={
        "string": TypeMapping("string"),
        "integer": TypeMapping("number", "Number({value})"),
        "number": TypeMapping("number", "Number({value})"),
        "boolean": TypeMapping("boolean", "String({value}) === 'true'"),
        "map": TypeMapping("Object"),
    },
    list_spelling="Array<{item}>",
    list_convert="{value}.map((item) => {convert})",
    unwrap='{value}["{key}"]',
    optional_spelling="{spelling}=",
    default_output="zap-api-nodejs/src",
)

GO = LanguageProfile(
    language=Language.GO,
    template="go.go.jinja",
    extension="go",
    layout=Layout.SINGLE_FILE,
    single_file="api_gen",
    file_case=Case.SNAKE,
    class_case=Case.PASCAL,
    method_case=Case.PASCAL,
    param_case=Case.CAMEL,
    reserved=frozenset(
        """
        break case chan const continue default defer else fallthrough for func go goto if
        import interface map package range return select struct switch type var
        bool error false float64 int interface nil string true
        """.split()
    )
    | _LOCALS
    | frozenset({"c", "err", "zero", "convertList", "Transport"}),
    types={
        "string": TypeMapping("string", "{value}.(string)"),
        "integer": TypeMapping("int", "int({value}.(float64))"),
        "number": TypeMapping("float64", "{value}.(float64)"),
        "boolean": TypeMapping("bool", "{value}.(bool)"),
        "map": TypeMapping("map[string]interface{}", "{value}.(map[string]interface{{}})"),
    },
    list_spelling="[]{item}",
    list_convert="convertList({value}, func(item interface{{}}) {item} {{ return {convert} }})",
    unwrap='{value}.(map[string]interface{{}})["{key}"]',
    optional_spelling="*{spelling}",
    default_namespace="zap",
)

RUST = LanguageProfile(
    language=Language.RUST,
    template="rust.rs.jinja",
    extension="rs",
    layout=Layout.PER_COMPONENT,
    file_case=Case.SNAKE,
    class_case=Case.PASCAL,
    method_case=Case.SNAKE,
    param_case=Case.SNAKE,
    reserved=frozenset(
        """
        as async await break const continue crate dyn else enum extern false fn for if impl in
        let loop match mod move mut pub ref return self Self static struct super trait true type
        unsafe use where while abstract become box do final macro override priv try typeof
        unsized virtual yield
        """.split()
    )
    | _LOCALS
    | frozenset({"Transport", "TransportError", "Map", "Value", "Result", "Option", "String", "Vec"}),
    types={
        "string": TypeMapping("String", "{value}.as_str().unwrap_or_default().to_string()"),
        "integer": TypeMapping("i64", "{value}.as_i64().unwrap_or_default()"),
        "number": TypeMapping("f64", "{value}.as_f64().unwrap_or_default()"),
        "boolean": TypeMapping("bool", "{value}.as_bool().unwrap_or_default()"),
        "map": TypeMapping("Map<String, Value>", "{value}.as_object().cloned().unwrap_or_default()"),
    },
    list_spelling="Vec<{item}>",
    list_convert=(
        "{value}.as_array().map(|items| items.iter().map(|item| {convert}).collect()).unwrap_or_default()"
    ),
    unwrap='{value}["{key}"]',
    optional_spelling="Option<{spelling}>",
    default_output="zap-api-rust/src",
)

PHP = LanguageProfile(
    language=Language.PHP,
    template="php.php.jinja",
    extension="php",
    layout=Layout.PER_COMPONENT,
    file_case=Case.PASCAL,
    class_case=Case.PASCAL,
    method_case=Case.CAMEL,
    param_case=Case.CAMEL,
    reserved=frozenset(
        """
        abstract and array as break callable case catch class clone const continue declare
        default do echo else elseif empty enddeclare endfor endforeach endif endswitch endwhile
        eval exit extends final finally fn for foreach function global goto if implements
        include instanceof insteadof interface isset list match namespace new or print private
        protected public readonly require return static switch this throw trait try unset use
        var while xor yield
        """.split()
    )
    | _LOCALS
    | frozenset({"ApiTransport"}),
    reserved_ignore_case=True,
    types={
        "string": TypeMapping("string"),
        "integer": TypeMapping("int", "(int) {value}"),
        "number": TypeMapping("float", "(float) {value}"),
        "boolean": TypeMapping("bool", "filter_var({value}, FILTER_VALIDATE_BOOLEAN)"),
        "map": TypeMapping("array", "(array) {value}"),
    },
    list_spelling="array",
    list_convert="array_map(fn($item) => {convert}, {value})",
    unwrap="{value}['{key}']",
    optional_spelling="?{spelling}",
    item_var="$item",
    raw_var="$raw",
    default_namespace="Zap",
    default_output="zaproxy/php/api/zapv2/src/Zap",
)

DOTNET = LanguageProfile(
    language=Language.DOTNET,
    template="dotnet.cs.jinja",
    extension="cs",
    layout=Layout.PER_COMPONENT,
    file_case=Case.PASCAL,
    class_case=Case.PASCAL,
    method_case=Case.PASCAL,
    param_case=Case.CAMEL,
    reserved=frozenset(
        """
        abstract as base bool break byte case catch char checked class const continue decimal
        default delegate do double else enum event explicit extern false finally fixed float for
        foreach goto if implicit in int interface internal is lock long namespace new null object
        operator out override params private protected public readonly ref return sbyte sealed
        short sizeof stackalloc static string struct switch this throw true try typeof uint ulong
        unchecked unsafe ushort using virtual void volatile while
        """.split()
    )
    | _LOCALS
    | frozenset({"parameters", "IApiTransport", "Dictionary", "IDictionary", "IList", "IEnumerable", "Convert"}),
    types={
        "string": TypeMapping("string", "(string) {value}"),
        "integer": TypeMapping("long", "Convert.ToInt64({value})"),
        "number": TypeMapping("double", "Convert.ToDouble({value})"),
        "boolean": TypeMapping("bool", "Convert.ToBoolean({value})"),
        "map": TypeMapping("IDictionary<string, object>", "(IDictionary<string, object>) {value}"),
    },
    list_spelling="IList<{item}>",
    list_convert="((IEnumerable<object>) {value}).Select(item => {convert}).ToList()",
    unwrap='((IDictionary<string, object>) {value})["{key}"]',
    optional_spelling="{spelling}?",
    default_namespace="OWASPZAPDotNetAPI.Generated",
    members_differ_from_class=True,
)

PROFILES: dict[Language, LanguageProfile] = {
    p.language: p for p in (DOTNET, GO, JAVA, NODEJS, PHP, PYTHON, RUST)
}


def get_profile(language: Language | str) -> LanguageProfile:
    return PROFILES[parse_language(language)]


def parse_language(value: Language | str) -> Language:
    if isinstance(value, Language):
        return value
    wanted = str(value).strip().lower()
    for lang in Language:
        if wanted in (lang.slug, lang.name.lower()):
            return lang
    known = ", ".join(lang.value for lang in Language)
    raise ConfigError(f"Unknown language {value!r} (expected one of: {known}, {ALL_LANGUAGES})")


def resolve_languages(value: str | Language | Iterable[str | Language] | None) -> list[Language]:
    """
    Resolve a selector into languages, in enum order and without duplicates.

    `None` and "ALL" (any case) select every language.
    """
    if value is None:
        return list(Language)
    if isinstance(value, (str, Language)):
        if str(value).strip().upper() == ALL_LANGUAGES:
            return list(Language)
        values: list[str | Language] = [value]
    else:
        values = list(value)
        if any(str(v).strip().upper() == ALL_LANGUAGES for v in values):
            return list(Language)

    selected = {parse_language(v) for v in values}
    return [lang for lang in Language if lang in selected]
