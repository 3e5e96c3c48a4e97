"""Suite execution domain exports."""

from .outcome_evaluation import evaluate_state
from .suite_models import OutcomeStatus, RuntimeTestDescriptor, TestOutcome
from .suite_reader import SuiteValidationError, parse_descriptor, read_suite

__all__ = [
    "OutcomeStatus",
    "RuntimeTestDescriptor",
    "SuiteValidationError",
    "TestOutcome",
    "evaluate_state",
    "parse_descriptor",
    "read_suite",
]
