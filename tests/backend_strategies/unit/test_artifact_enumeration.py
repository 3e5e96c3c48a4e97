"""Tests for the generated-artifact naming rules shared by all backends."""

from __future__ import annotations

from grammar_runtime_tester.backend_strategies import (
    ArtifactSuffixes,
    BackendStrategy,
    GoBackend,
    JavaBackend,
    Python3Backend,
)
from grammar_runtime_tester.pipeline_execution import GeneratedArtifact, RunOptions


class _XBackend(BackendStrategy):
    identifier = "X"

    def artifact_suffixes(self) -> ArtifactSuffixes:
        return ArtifactSuffixes(base_listener=None, base_visitor=None)


def _options(**overrides) -> RunOptions:
    values = {
        "grammar_file_name": "G.g4",
        "grammar_text": "grammar G;",
        "grammar_name": "G",
        "lexer_name": "GLexer",
        "parser_name": "GParser",
    }
    values.update(overrides)
    return RunOptions(**values)


def _names(backend: BackendStrategy, options: RunOptions) -> list[tuple[str, bool]]:
    return [
        (artifact.file_name, artifact.is_parser)
        for artifact in backend.enumerate_generated_artifacts(options)
    ]


def test_combined_grammar_with_listener_and_no_base_listener() -> None:
    artifacts = list(_XBackend().enumerate_generated_artifacts(_options(use_listener=True)))

    assert artifacts == [
        GeneratedArtifact("GLexer.x", is_parser=False),
        GeneratedArtifact("GParser.x", is_parser=True),
        GeneratedArtifact("GListener.x", is_parser=True),
    ]


def test_combined_grammar_with_all_generated_helpers() -> None:
    names = _names(JavaBackend(), _options(use_listener=True, use_visitor=True))

    assert names == [
        ("GLexer.java", False),
        ("GParser.java", True),
        ("GListener.java", True),
        ("GBaseListener.java", True),
        ("GVisitor.java", True),
        ("GBaseVisitor.java", True),
    ]


def test_lexer_only_grammar_is_not_split() -> None:
    options = _options(grammar_name="L", lexer_name="L", parser_name=None, use_listener=True)

    assert _names(_XBackend(), options) == [("L.x", False)]


def test_parser_only_grammar_is_not_split() -> None:
    options = _options(grammar_name="P", lexer_name=None, parser_name="P", use_visitor=True)

    assert _names(Python3Backend(), options) == [("P.py", True), ("PVisitor.py", True)]


def test_always_split_backend_uses_lowercase_file_names() -> None:
    options = _options(grammar_name="T", lexer_name="TLexer", parser_name="TParser")

    assert _names(GoBackend(), _options(grammar_name="T", use_listener=True)) == [
        ("t_lexer.go", False),
        ("t_parser.go", True),
        ("t_listener.go", True),
        ("t_base_listener.go", True),
    ]
    assert _names(GoBackend(), options) == [("t_lexer.go", False), ("t_parser.go", True)]


def test_always_split_backend_splits_lexer_grammars() -> None:
    options = _options(grammar_name="L", lexer_name="L", parser_name=None)

    assert _names(GoBackend(), options) == [("l_lexer.go", False)]


def test_enumeration_is_restartable() -> None:
    backend = _XBackend()
    options = _options(use_listener=True)

    assert list(backend.enumerate_generated_artifacts(options)) == list(
        backend.enumerate_generated_artifacts(options)
    )


def test_backend_without_visitor_support_omits_visitor_files() -> None:
    class _NoVisitorBackend(_XBackend):
        def artifact_suffixes(self) -> ArtifactSuffixes:
            return ArtifactSuffixes(base_visitor=None, visitor=None)

    names = _names(_NoVisitorBackend(), _options(use_visitor=True))

    assert names == [("GLexer.x", False), ("GParser.x", True)]


def test_default_naming_capabilities() -> None:
    backend = _XBackend()

    assert backend.title_name == "X"
    assert backend.file_extension() == "x"
    assert backend.scaffold_file_name() == "Test.x"
    assert backend.exec_file_name() == "Test.x"
    assert backend.runtime_tool_name() == "x"
    assert backend.start_rule_to_entry_point("expr") == "expr"


def test_go_entry_point_is_capitalised() -> None:
    backend = GoBackend()

    assert backend.start_rule_to_entry_point("expr") == "Expr"
    assert backend.start_rule_to_entry_point(None) is None
