from __future__ import annotations

from typing import Any

import pytest

from addongen.description import ApiDescription, parse_description
from addongen.errors import GenerationError, NamingConflictError
from addongen.generator import GeneratedFile, generate, generate_all
from addongen.languages import Language
from tests.conftest import FakeTransport


def _load_python(file: GeneratedFile) -> dict[str, Any]:
    namespace: dict[str, Any] = {}
    exec(compile(file.content, file.path, "exec"), namespace)
    return namespace


def test_core_version_python(core_only: ApiDescription) -> None:
    (file,) = generate(core_only, Language.PYTHON)

    assert file.path == "core.py"
    assert file.language is Language.PYTHON
    assert "def version(self) -> str:" in file.content
    assert 'return self._transport.invoke("Core", "version", {})' in file.content

    transport = FakeTransport({("Core", "version"): "2.14.0"})
    client = _load_python(file)["Core"](transport)
    assert client.version() == "2.14.0"
    assert transport.calls == [("Core", "version", {})]


@pytest.mark.parametrize(
    "language, path, method, call",
    [
        (Language.JAVA, "Core.java", "public String version() throws", 'transport.invoke("Core", "version", new HashMap<>())'),
        (Language.NODEJS, "core.js", "async version() {", 'this.transport.invoke("Core", "version", {})'),
        (Language.GO, "api_gen.go", "func (c *Core) Version() (string, error) {", 'c.Transport.Invoke("Core", "version", map[string]interface{}{})'),
        (Language.RUST, "core.rs", "pub fn version(&self) -> Result<String, TransportError> {", 'self.transport.invoke("Core", "version", Map::new())?'),
        (Language.PHP, "Core.php", "public function version(): string", "$this->transport->invoke('Core', 'version', [])"),
        (Language.DOTNET, "Core.cs", "public string Version()", 'transport.Invoke("Core", "version", new Dictionary<string, object>())'),
    ],
)
def test_core_version_other_languages(
    core_only: ApiDescription, language: Language, path: str, method: str, call: str
) -> None:
    (file,) = generate(core_only, language)

    assert file.path == path
    assert method in file.content
    assert call in file.content
    assert "This file was automatically generated." in file.content


def test_generated_python_client_converts_results(sample_description: ApiDescription) -> None:
    files = {f.path: f for f in generate(sample_description, Language.PYTHON)}
    assert sorted(files) == ["core.py", "spider.py"]

    transport = FakeTransport(
        {
            ("Core", "urls"): {"urls": ["http://a", "http://b"]},
            ("spider", "scan"): {"scan": "7"},
            ("spider", "fullResults"): {"fullResults": {"inScope": {"count": 2}}},
        }
    )
    core = _load_python(files["core.py"])["Core"](transport)
    spider = _load_python(files["spider.py"])["Spider"](transport)

    assert core.urls() == ["http://a", "http://b"]
    assert spider.scan("http://target", "ctx", recurse=True) == 7
    assert spider.full_results(3) == {"count": 2}

    assert transport.calls[0] == ("Core", "urls", {})
    assert transport.calls[1] == ("spider", "scan", {"url": "http://target", "contextName": "ctx", "recurse": True})
    assert transport.calls[2] == ("spider", "fullResults", {"scanId": 3})


def test_python_signature_puts_required_parameters_first(sample_description: ApiDescription) -> None:
    files = {f.path: f for f in generate(sample_description, Language.PYTHON)}

    assert (
        "def scan(self, url: str, context_name: str, max_children: int | None = None, "
        "recurse: bool | None = None) -> int:"
    ) in files["spider.py"].content
    assert '"""Starts a spider scan."""' in files["spider.py"].content


def test_list_and_optional_spellings(sample_description: ApiDescription) -> None:
    java = {f.path: f.content for f in generate(sample_description, Language.JAVA)}
    go = generate(sample_description, Language.GO)

    assert "public List<String> urls(String baseurl) throws ApiTransportException" in java["Core.java"]
    assert "public int scan(String url, String contextName, Integer maxChildren, Boolean recurse)" in java["Spider.java"]
    assert "if (recurse != null) {" in java["Spider.java"]

    assert [f.path for f in go] == ["api_gen.go"]
    assert "func (c *Spider) Scan(url string, contextName string, maxChildren *int, recurse *bool) (int, error) {" in go[0].content
    assert 'params["recurse"] = *recurse' in go[0].content


def test_generation_is_deterministic(sample_description: ApiDescription) -> None:
    for language in Language:
        assert generate(sample_description, language) == generate(sample_description, language)


def test_namespace_override(core_only: ApiDescription) -> None:
    (java,) = generate(core_only, Language.JAVA)
    (custom,) = generate(core_only, Language.JAVA, namespace="org.example.gen")

    assert "package org.zaproxy.clientapi.gen;" in java.content
    assert "package org.example.gen;" in custom.content


def test_sanitized_action_names_conflict() -> None:
    description = parse_description(
        {"components": [{"name": "Core", "actions": [{"name": "Get-Value"}, {"name": "GetValue"}]}]}
    )

    for language in Language:
        with pytest.raises(NamingConflictError) as exc:
            generate(description, language)
        assert {exc.value.first, exc.value.second} == {"Get-Value", "GetValue"}


def test_component_and_parameter_conflicts() -> None:
    components = parse_description({"components": [{"name": "ajax_spider"}, {"name": "ajaxSpider"}]})
    params = parse_description(
        {"components": [{"name": "Core", "actions": [{"name": "a", "parameters": [{"name": "class"}, {"name": "class_"}]}]}]}
    )

    with pytest.raises(NamingConflictError):
        generate(components, Language.PYTHON)
    with pytest.raises(NamingConflictError):
        generate(params, Language.PYTHON)


def test_reserved_names_are_escaped() -> None:
    description = parse_description(
        {"components": [{"name": "Core", "actions": [{"name": "import", "parameters": [{"name": "from", "required": True}]}]}]}
    )

    (file,) = generate(description, Language.PYTHON)

    assert "def import_(self, from_: str) -> str:" in file.content
    assert '"from": from_,' in file.content


def test_unmapped_return_type_fails_without_output() -> None:
    description = parse_description(
        {"components": [{"name": "Core", "actions": [{"name": "version"}, {"name": "alerts", "returns": "list<Alert>"}]}]}
    )

    with pytest.raises(GenerationError, match="Core.alerts"):
        generate(description, Language.PYTHON)
    with pytest.raises(GenerationError):
        generate_all(description, [Language.PYTHON, Language.JAVA])


def test_unmapped_parameter_type_fails() -> None:
    description = parse_description(
        {"components": [{"name": "Core", "actions": [{"name": "a", "parameters": [{"name": "p", "type": "date"}]}]}]}
    )

    with pytest.raises(GenerationError, match="parameter 'p'"):
        generate(description, Language.RUST)


def test_invalid_result_key_fails() -> None:
    description = parse_description(
        {"components": [{"name": "Core", "actions": [{"name": "a", "returns": {"type": "string", "key": 'x"y'}}]}]}
    )

    with pytest.raises(GenerationError):
        generate(description, Language.JAVA)


def test_generate_all_by_name(core_only: ApiDescription) -> None:
    results = generate_all(core_only, ["python", "go"])

    assert list(results) == [Language.PYTHON, Language.GO]
    assert [f.path for f in results[Language.GO]] == ["api_gen.go"]


def test_python_docstrings_keep_backslashes_and_quotes() -> None:
    description = parse_description(
        {
            "components": [
                {
                    "name": "Core",
                    "description": 'Paths such as C:\\Users\\zap and "quoted" text',
                    "actions": [{"name": "version", "description": 'Returns "value" or a \\N{name}'}],
                }
            ]
        }
    )

    (file,) = generate(description, Language.PYTHON)
    module = _load_python(file)

    assert module["__doc__"] == 'Paths such as C:\\Users\\zap and "quoted" text'
    assert module["Core"].version.__doc__ == 'Returns "value" or a \\N{name}'


@pytest.mark.parametrize(
    ("language", "component", "declaration"),
    [
        (Language.JAVA, "map", "public class Map_ {"),
        (Language.JAVA, "collectors", "public class Collectors_ {"),
        (Language.RUST, "value", "pub struct Value_<'a> {"),
        (Language.DOTNET, "dictionary", "public class Dictionary_"),
        (Language.PHP, "apiTransport", "class ApiTransport_"),
    ],
)
def test_component_names_do_not_shadow_imported_types(language: Language, component: str, declaration: str) -> None:
    description = parse_description({"components": [{"name": component, "actions": [{"name": "view"}]}]})

    (file,) = generate(description, language)

    assert declaration in file.content


def test_dotnet_method_named_like_its_class_is_escaped() -> None:
    description = parse_description({"components": [{"name": "stats", "actions": [{"name": "stats"}, {"name": "clear"}]}]})

    (file,) = generate(description, Language.DOTNET)

    assert "public class Stats" in file.content
    assert "public string Stats_()" in file.content
    assert "public string Clear()" in file.content
    assert "public string Stats()" not in file.content


def test_same_names_are_kept_where_the_language_allows_it() -> None:
    description = parse_description({"components": [{"name": "stats", "actions": [{"name": "stats"}]}]})

    (file,) = generate(description, Language.JAVA)

    assert "public class Stats {" in file.content
    assert "public String stats()" in file.content


def test_rust_literals_keep_non_ascii_text() -> None:
    description = parse_description(
        {
            "components": [
                {
                    "name": "Überblick",
                    "actions": [{"name": "größe", "parameters": [{"name": "straße", "required": True}]}],
                }
            ]
        }
    )

    (file,) = generate(description, Language.RUST)

    assert '"Überblick"' in file.content
    assert '"größe"' in file.content
    assert 'params.insert("straße".to_string()' in file.content
    assert "\\u00" not in file.content
