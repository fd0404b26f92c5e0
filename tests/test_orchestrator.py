"""End-to-end tests for the docs-check pipeline."""

from __future__ import annotations

from doccheck.orchestrator import Orchestrator
from doccheck.reporting import render_json, render_text
from tests._fixtures.repo_builder import RepoBuilder

_UNDOCUMENTED_FOO = {"lib/a.js": "export function foo() {}\n"}
_BUFFER_READER = {
    "lib/a.js": """
        /**
         * Reads a {@link Buffer}.
         */
        export function read() {}
        """,
}


def _records(result) -> list[dict[str, object]]:
    return [violation.to_record() for violation in result.coverage]


def test_undocumented_export_fails_the_run(repo_builder: RepoBuilder) -> None:
    repo_builder.write(_UNDOCUMENTED_FOO)
    config = repo_builder.config({"entryPoints": ["./lib/a.*"]})

    result = Orchestrator().run(config)

    assert _records(result) == [{"symbol": "foo", "reason": "MissingDocumentation"}]
    assert result.exit_code == 1


def test_exempt_export_passes(repo_builder: RepoBuilder) -> None:
    repo_builder.write(_UNDOCUMENTED_FOO)
    config = repo_builder.config({"entryPoints": ["./lib/a.*"], "intentionallyNotDocumented": ["foo"]})

    result = Orchestrator().run(config)

    assert _records(result) == []
    assert result.stale_exemptions == ()
    assert result.exit_code == 0


def test_mapped_reference_resolves(repo_builder: RepoBuilder) -> None:
    repo_builder.write(_BUFFER_READER)
    config = repo_builder.config(
        {
            "entryPoints": ["lib/a.js"],
            "externalSymbolLinkMappings": {"Buffer": "https://example.org/Buffer"},
        }
    )

    result = Orchestrator().run(config)

    assert [entry.to_record() for entry in result.links] == [
        {"reference": "Buffer", "resolvedURL": "https://example.org/Buffer"}
    ]
    assert result.exit_code == 0


def test_unmapped_reference_warns_or_fails_when_strict(repo_builder: RepoBuilder) -> None:
    repo_builder.write(_BUFFER_READER)
    config = repo_builder.config({"entryPoints": ["lib/a.js"], "externalSymbolLinkMappings": {}})

    result = Orchestrator().run(config)
    strict_result = Orchestrator().run(config.with_overrides(strict=True))

    assert [entry.to_record() for entry in result.links] == [{"reference": "Buffer", "resolvedURL": None}]
    assert result.exit_code == 0
    assert "Unresolved external link: Buffer" in result.warnings()
    assert strict_result.exit_code == 1


def test_stale_exemption_is_a_warning_unless_strict(repo_builder: RepoBuilder) -> None:
    repo_builder.write({"lib/a.js": "/** Documented. */\nexport function foo() {}\n"})
    config = repo_builder.config({"entryPoints": ["lib/a.js"], "intentionallyNotDocumented": ["bar"]})

    result = Orchestrator().run(config)

    assert result.stale_exemptions == ("bar",)
    assert result.exit_code == 0
    assert any("bar" in message for message in result.warnings())
    assert Orchestrator().run(config.with_overrides(strict=True)).exit_code == 1


def test_parse_errors_only_fail_strict_runs(repo_builder: RepoBuilder) -> None:
    repo_builder.write({"lib/good.js": "/** Fine. */\nexport const ok = 1;\n", "lib/bad.js": "export const = ;\n"})
    config = repo_builder.config({"entryPoints": ["lib/*.js"]})

    result = Orchestrator().run(config)

    assert [failure.path for failure in result.parse_errors] == ["lib/bad.js"]
    assert result.exit_code == 0
    assert Orchestrator().run(config.with_overrides(strict=True)).exit_code == 1


def test_run_path_accepts_directory_and_overrides(repo_builder: RepoBuilder) -> None:
    repo_builder.write(_UNDOCUMENTED_FOO)
    repo_builder.write_config({"entryPoints": ["lib/a.js"]})

    result = Orchestrator().run_path(repo_builder.path(), strict=True, jobs=2)

    assert result.strict is True
    assert result.symbol_count == 1


def test_pipeline_is_idempotent(repo_builder: RepoBuilder) -> None:
    repo_builder.write(
        {
            "src/a.ts": "/** {@link Promise} */\nexport function a() {}\nexport class B { run() {} }\n",
            "src/b.py": "def helper():\n    pass\n",
        }
    )
    config = repo_builder.config({"entryPoints": ["src/*"], "externalSymbolLinkMappings": {"*": "https://x.dev/{name}"}})
    orchestrator = Orchestrator()

    first = orchestrator.run(config)
    second = orchestrator.run(config)

    assert render_text(first) == render_text(second)
    assert render_json(first) == render_json(second)


def test_default_export_alias_is_not_a_second_symbol(repo_builder: RepoBuilder) -> None:
    repo_builder.write({"lib/model.js": "/** A model. */\nexport class Model {}\nexport default Model;\n"})
    config = repo_builder.config({"entryPoints": ["lib/model.js"]})

    result = Orchestrator().run(config)

    assert result.symbol_count == 1
    assert result.coverage == ()
    assert result.exit_code == 0


def test_typedef_and_module_block_references_reach_the_link_report(repo_builder: RepoBuilder) -> None:
    repo_builder.write(
        {
            "lib/thing.js": """
                /**
                 * @module thing
                 * Uses {@link Stream}.
                 */

                /** @typedef {Buffer} Raw */
                """,
        }
    )
    config = repo_builder.config({"entryPoints": ["lib/thing.js"], "intentionallyNotDocumented": ["Raw"]})

    result = Orchestrator().run(config)

    assert [entry.to_record() for entry in result.links] == [
        {"reference": "Stream", "resolvedURL": None},
        {"reference": "Buffer", "resolvedURL": None},
    ]


def test_platform_names_resolve_without_a_mapping(repo_builder: RepoBuilder) -> None:
    repo_builder.write(
        {
            "lib/a.js": """
                /**
                 * Reads every chunk.
                 * @returns {Promise<Array<Buffer>>} the chunks
                 */
                export function readAll() {}
                """,
        }
    )
    config = repo_builder.config(
        {"entryPoints": ["lib/a.js"], "externalSymbolLinkMappings": {"Buffer": "https://nodejs.org/api/buffer.html"}}
    )

    result = Orchestrator().run(config)

    assert [entry.to_record() for entry in result.links] == [
        {
            "reference": "Promise",
            "resolvedURL": "https://developer.mozilla.org/en-US/docs/Web/JavaScript/Reference/Global_Objects/Promise",
        },
        {
            "reference": "Array",
            "resolvedURL": "https://developer.mozilla.org/en-US/docs/Web/JavaScript/Reference/Global_Objects/Array",
        },
        {"reference": "Buffer", "resolvedURL": "https://nodejs.org/api/buffer.html"},
    ]
