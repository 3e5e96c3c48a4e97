"""Process running exports."""

from .process_runner import ProcessResult, ProcessRunError, ProcessRunner

__all__ = ["ProcessResult", "ProcessRunError", "ProcessRunner"]
