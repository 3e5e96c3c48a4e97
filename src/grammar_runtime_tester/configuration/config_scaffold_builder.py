"""Configuration scaffold generation helpers."""

from __future__ import annotations

from pathlib import Path

DEFAULT_CONFIG_FILENAME = "harness.yaml"

_CONFIG_SCAFFOLD_TEMPLATE = """# Harness configuration for grammar-runtime-tester.
# Replace every <REQUIRED> placeholder before running tests.
# Remove or fill <OPTIONAL> entries; unset entries fall back to defaults.

generator:
  # Grammar tool command line, as a list or a single shell-style string.
  command:
    - "<REQUIRED>"

paths:
  # Relative paths resolve against this file's directory.
  temp_root: "<OPTIONAL>"          # default: system temp directory
  cache_root: "<OPTIONAL>"         # default: <system temp>/grammar-runtime-tester-cache
  build_output_root: "<OPTIONAL>"  # default: ./target/classes

process:
  timeout_seconds: 300

execution:
  parallelism: 4
  # Keep per-test directories for inspection after the run.
  save_test_dir: false
"""


def build_placeholder_configuration() -> str:
    """Build a YAML harness configuration template with placeholders and inline guidance."""
    return _CONFIG_SCAFFOLD_TEMPLATE


def write_placeholder_configuration(output_path: Path | str) -> Path:
    """Write the placeholder harness configuration to the requested output path.

    Args:
      output_path: Destination file path for the scaffold.

    Returns:
      The resolved destination path.

    Raises:
      FileExistsError: If the destination file already exists.
      OSError: If writing the scaffold fails.
    """
    destination = Path(output_path)
    if destination.exists():
        raise FileExistsError(f"Configuration file already exists: {destination.resolve()}")
    destination.write_text(build_placeholder_configuration(), encoding="utf-8")
    return destination.resolve()
