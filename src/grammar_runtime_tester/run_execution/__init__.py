"""Run execution domain exports."""

from .run_contracts import SuiteRunOutcome, SuiteRunRequest
from .suite_run_use_case import SuiteExecutionError, execute_suite

__all__ = [
    "SuiteRunRequest",
    "SuiteRunOutcome",
    "SuiteExecutionError",
    "execute_suite",
]
