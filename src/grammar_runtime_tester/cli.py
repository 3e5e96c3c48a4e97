"""Command line interface entry point."""

from __future__ import annotations

import logging
import sys

import click

from grammar_runtime_tester.backend_strategies import default_registry
from grammar_runtime_tester.configuration import (
    DEFAULT_CONFIG_FILENAME,
    write_placeholder_configuration,
)
from grammar_runtime_tester.run_execution import (
    SuiteExecutionError,
    SuiteRunRequest,
    execute_suite,
)
from grammar_runtime_tester.suite_execution import OutcomeStatus

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


class CliError(Exception):
    """Custom CLI error."""


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="grammar-runtime-tester")
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default="WARNING",
    show_default=True,
    help="Logging threshold for harness diagnostics on stderr.",
)
def cli(log_level: str) -> None:
    """Multi-backend grammar runtime test harness."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@cli.command(name="generate-config")
@click.option(
    "--output",
    "output_path",
    required=False,
    default=DEFAULT_CONFIG_FILENAME,
    show_default=True,
    type=click.Path(path_type=str),
    help="Path to the YAML harness configuration template to write",
)
def generate_config(output_path: str) -> None:
    """Generate a placeholder YAML harness configuration with guidance comments."""
    try:
        resolved_output = write_placeholder_configuration(output_path)
    except (FileExistsError, OSError) as exc:
        raise CliError(str(exc)) from exc
    click.echo(str(resolved_output))


@cli.command(name="backends")
def list_backends() -> None:
    """List the registered backend identifiers."""
    for identifier in default_registry().identifiers():
        click.echo(identifier)


@cli.command(name="run")
@click.option(
    "--config",
    "config_path",
    required=True,
    type=click.Path(path_type=str),
    help="Path to the YAML harness configuration file",
)
@click.option(
    "--suite",
    "suite_path",
    required=True,
    type=click.Path(path_type=str),
    help="Path to the YAML test suite file",
)
@click.option(
    "--output-dir",
    "output_dir",
    required=False,
    type=click.Path(path_type=str),
    help="Optional directory for storing the results workbook",
)
@click.option(
    "--backend",
    "backends",
    multiple=True,
    help="Only run tests for this backend; repeat for several backends.",
)
@click.option(
    "--save-test-dirs",
    is_flag=True,
    default=False,
    help="Keep every per-test working directory for inspection.",
)
def run_tests(
    config_path: str,
    suite_path: str,
    output_dir: str | None,
    backends: tuple[str, ...],
    save_test_dirs: bool,
) -> None:
    """Execute the suite's tests and write a results workbook."""
    try:
        outcome = execute_suite(
            SuiteRunRequest(
                config_path=config_path,
                suite_path=suite_path,
                output_dir=output_dir,
                backends=backends,
                save_test_dirs=save_test_dirs,
            )
        )
    except (SuiteExecutionError, OSError) as exc:
        raise CliError(str(exc)) from exc
    click.echo(str(outcome.output_path))
    summary = ", ".join(
        f"{status.value.lower()}={outcome.count(status)}" for status in OutcomeStatus
    )
    click.echo(summary)
    if not outcome.succeeded:
        raise CliError("Some tests did not pass.")


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for console_scripts wiring."""
    argv = argv if argv is not None else sys.argv[1:]
    try:
        cli.main(args=list(argv), standalone_mode=False)
    except CliError as exc:
        click.echo(str(exc), err=True)
        return 1
    except click.ClickException as exc:
        exc.show()
        return exc.exit_code
    except click.Abort:
        click.echo("Aborted.", err=True)
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
