"""Tests for the generate/compile/execute pipeline orchestrator."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

import pytest
from grammar_runtime_tester.artifact_generation import (
    ErrorQueue,
    GenerationMessage,
    MessageSeverity,
)
from grammar_runtime_tester.backend_strategies import ArtifactSuffixes, BackendStrategy
from grammar_runtime_tester.pipeline_execution import (
    CompiledState,
    ExecutedState,
    GeneratedArtifact,
    GeneratedState,
    RunOptions,
    RuntimeNotInitializedError,
    RuntimeRunner,
    Stage,
)
from grammar_runtime_tester.process_running import ProcessResult, ProcessRunError, ProcessRunner
from grammar_runtime_tester.runtime_initialization import InitializationCache
from grammar_runtime_tester.scaffold_rendering import ScaffoldRenderer
from grammar_runtime_tester.test_workspace import HarnessPaths, TestDirectory
from jinja2 import DictLoader


class _FakeGenerator:
    def __init__(self, messages: Sequence[GenerationMessage] = (), error: Exception | None = None):
        self.messages = tuple(messages)
        self.error = error
        self.calls: list[dict] = []

    def generate(
        self,
        work_dir: Path,
        backend_id: str,
        grammar_file_name: str,
        grammar_text: str,
        generate_only: bool,
        extra_options: Sequence[str],
    ) -> ErrorQueue:
        self.calls.append(
            {
                "work_dir": work_dir,
                "backend_id": backend_id,
                "grammar_file_name": grammar_file_name,
                "generate_only": generate_only,
                "extra_options": tuple(extra_options),
            }
        )
        if self.error is not None:
            raise self.error
        work_dir.mkdir(parents=True, exist_ok=True)
        (work_dir / grammar_file_name).write_text(grammar_text, encoding="utf-8")
        return ErrorQueue.of(self.messages)


class _RecordingProcessRunner(ProcessRunner):
    def __init__(self, result: ProcessResult | None = None, error: Exception | None = None):
        super().__init__()
        self.result = result or ProcessResult(output="ok\n", errors="", exit_code=0)
        self.error = error
        self.calls: list[tuple[tuple[str, ...], Path, dict | None]] = []

    def run(self, args, work_dir, environment=None) -> ProcessResult:
        self.calls.append((tuple(args), Path(work_dir), environment))
        if self.error is not None:
            raise self.error
        return self.result


class _XBackend(BackendStrategy):
    identifier = "X"

    def __init__(self, init_error: Exception | None = None) -> None:
        self.init_error = init_error
        self.init_calls = 0

    def artifact_suffixes(self) -> ArtifactSuffixes:
        return ArtifactSuffixes(base_listener=None, base_visitor=None)

    def perform_one_time_initialization(self, paths, process_runner) -> None:
        self.init_calls += 1
        if self.init_error is not None:
            raise self.init_error


def _renderer() -> ScaffoldRenderer:
    return ScaffoldRenderer(
        loader=DictLoader(
            {"X/Test.x.j2": "grammar={{ grammarName }} start={{ parserStartRuleName }}\n"}
        )
    )


def _options(**overrides) -> RunOptions:
    values = {
        "grammar_file_name": "G.g4",
        "grammar_text": "grammar G;\ns : 'a' ;\n",
        "grammar_name": "G",
        "lexer_name": "GLexer",
        "parser_name": "GParser",
        "start_rule_name": "s",
        "input": "a",
        "use_listener": True,
        "use_visitor": False,
    }
    values.update(overrides)
    return RunOptions(**values)


def _runner(
    tmp_path: Path,
    backend: BackendStrategy,
    *,
    generator: _FakeGenerator | None = None,
    process_runner: ProcessRunner | None = None,
    cache: InitializationCache | None = None,
    name: str = "run",
) -> RuntimeRunner:
    return RuntimeRunner(
        backend,
        generator=generator or _FakeGenerator(),
        process_runner=process_runner or _RecordingProcessRunner(),
        scaffold_renderer=_renderer(),
        paths=HarnessPaths(
            temp_root=tmp_path,
            cache_root=tmp_path / "cache",
            build_output_root=tmp_path / "build",
        ),
        initialization_cache=cache or InitializationCache(),
        test_directory=TestDirectory(tmp_path / name, save_test_dir=True),
    )


def test_generate_end_stage_returns_predicted_artifacts_in_order(tmp_path: Path) -> None:
    runner = _runner(tmp_path, _XBackend())

    state = runner.run(_options(end_stage=Stage.GENERATE))

    assert type(state) is GeneratedState
    assert not state.contains_errors()
    assert state.artifacts == (
        GeneratedArtifact("GLexer.x", is_parser=False),
        GeneratedArtifact("GParser.x", is_parser=True),
        GeneratedArtifact("GListener.x", is_parser=True),
    )


def test_generation_errors_stop_pipeline_before_scaffold_and_input(tmp_path: Path) -> None:
    generator = _FakeGenerator(
        messages=[GenerationMessage(MessageSeverity.ERROR, 50, "syntax error")]
    )
    backend = _XBackend()
    runner = _runner(tmp_path, backend, generator=generator)

    state = runner.run(_options())

    assert type(state) is GeneratedState
    assert state.contains_errors()
    assert "error(50): syntax error" in state.error_message()
    assert not (runner.test_directory.path / "Test.x").exists()
    assert not (runner.test_directory.path / "input").exists()
    assert backend.init_calls == 0


def test_generation_warnings_do_not_stop_pipeline(tmp_path: Path) -> None:
    generator = _FakeGenerator(
        messages=[GenerationMessage(MessageSeverity.WARNING, 125, "implicit token")]
    )
    runner = _runner(tmp_path, _XBackend(), generator=generator)

    state = runner.run(_options(end_stage=Stage.COMPILE))

    assert type(state) is CompiledState
    assert not state.contains_errors()


def test_generator_exception_is_captured_in_generated_state(tmp_path: Path) -> None:
    failure = OSError("disk full")
    runner = _runner(tmp_path, _XBackend(), generator=_FakeGenerator(error=failure))

    state = runner.run(_options())

    assert type(state) is GeneratedState
    assert state.exception is failure
    assert state.contains_errors()


def test_generator_receives_visitor_and_super_class_options(tmp_path: Path) -> None:
    generator = _FakeGenerator()
    runner = _runner(tmp_path, _XBackend(), generator=generator)

    runner.run(_options(use_visitor=True, super_class="MyBase", end_stage=Stage.GENERATE))

    call = generator.calls[0]
    assert call["backend_id"] == "X"
    assert call["grammar_file_name"] == "G.g4"
    assert call["generate_only"] is False
    assert call["extra_options"] == ("-visitor", "-DsuperClass=MyBase")
    assert call["work_dir"] == runner.test_directory.path


def test_default_compile_is_error_free_pass_through(tmp_path: Path) -> None:
    runner = _runner(tmp_path, _XBackend())

    state = runner.run(_options(grammar_text="anything at all", end_stage=Stage.COMPILE))

    assert type(state) is CompiledState
    assert state.exception is None
    assert not state.contains_errors()
    assert isinstance(state.previous_state, GeneratedState)
    scaffold = (runner.test_directory.path / "Test.x").read_text(encoding="utf-8")
    assert scaffold == "grammar=G start=s\n"


def test_initialization_failure_is_reported_once_and_never_retried(tmp_path: Path) -> None:
    failure = RuntimeError("toolchain missing")
    backend = _XBackend(init_error=failure)
    cache = InitializationCache()

    states = [
        _runner(tmp_path, backend, cache=cache, name=f"run-{index}").run(_options())
        for index in range(3)
    ]

    assert backend.init_calls == 1
    for state in states:
        assert type(state) is CompiledState
        assert isinstance(state.exception, RuntimeNotInitializedError)
        assert str(state.exception) == "X runtime is not initialized"
        assert state.exception.__cause__ is failure
        assert state.contains_errors()


def test_full_run_executes_program_and_wraps_output(tmp_path: Path) -> None:
    process_runner = _RecordingProcessRunner(
        result=ProcessResult(output="(s a)\n", errors="line 1:1 oops\n", exit_code=0)
    )
    runner = _runner(tmp_path, _XBackend(), process_runner=process_runner)

    state = runner.run(_options())

    assert type(state) is ExecutedState
    assert state.output == "(s a)\n"
    assert state.errors == "line 1:1 oops\n"
    assert not state.contains_errors()
    assert [type(item) for item in state.chain()] == [GeneratedState, CompiledState, ExecutedState]
    args, work_dir, environment = process_runner.calls[0]
    assert args == ("x", "Test.x", "input")
    assert work_dir == runner.test_directory.path
    assert environment is None


def test_input_file_matches_run_options_byte_for_byte(tmp_path: Path) -> None:
    text = "first line\r\nzweite Zeile: äöü\n\tlast"
    runner = _runner(tmp_path, _XBackend())

    runner.run(_options(input=text))

    assert (runner.test_directory.path / "input").read_bytes() == text.encode("utf-8")


def test_process_failure_is_captured_in_executed_state(tmp_path: Path) -> None:
    failure = ProcessRunError("Command not found: x Test.x input")
    runner = _runner(tmp_path, _XBackend(), process_runner=_RecordingProcessRunner(error=failure))

    state = runner.run(_options())

    assert type(state) is ExecutedState
    assert state.exception is failure
    assert state.output is None
    assert state.contains_errors()
    assert not state.previous_state.contains_errors()


def test_compile_failure_stops_before_execution(tmp_path: Path) -> None:
    class _FailingCompileBackend(_XBackend):
        def compile(self, options, generated_state, context):
            return CompiledState(generated_state, RuntimeError("does not compile"))

    process_runner = _RecordingProcessRunner()
    runner = _runner(tmp_path, _FailingCompileBackend(), process_runner=process_runner)

    state = runner.run(_options())

    assert type(state) is CompiledState
    assert "compile: does not compile" in state.error_message()
    assert process_runner.calls == []
    assert not (runner.test_directory.path / "input").exists()


def test_missing_scaffold_template_is_reported_as_compile_error(tmp_path: Path) -> None:
    class _YBackend(_XBackend):
        identifier = "Y"

    runner = _runner(tmp_path, _YBackend())

    state = runner.run(_options())

    assert type(state) is CompiledState
    assert "Scaffold template not found: Y/Test.y.j2" in str(state.exception)


@pytest.mark.parametrize("save_test_dir", [False, True])
def test_closing_runner_removes_directory_unless_saved(tmp_path: Path, save_test_dir: bool) -> None:
    runner = RuntimeRunner(
        _XBackend(),
        generator=_FakeGenerator(),
        process_runner=_RecordingProcessRunner(),
        scaffold_renderer=_renderer(),
        paths=HarnessPaths(temp_root=tmp_path),
        initialization_cache=InitializationCache(),
        save_test_dir=save_test_dir,
    )
    with runner:
        runner.run(_options(end_stage=Stage.GENERATE))
        work_dir = runner.test_directory.path
        assert work_dir.parent == tmp_path
        assert work_dir.name.startswith("_XBackend-")
        assert work_dir.exists()

    assert work_dir.exists() is save_test_dir
