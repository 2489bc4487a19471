"""Quote validation, assembly and submission."""

from .errors import QuotePersistenceError, QuoteValidationError
from .orchestrator import QuoteSubmissionService, SubmissionResult
from .session import QuoteSession
from .validation import QuoteSubmission, is_submission_valid, submission_errors, validate_submission

__all__ = [
    "QuotePersistenceError",
    "QuoteValidationError",
    "QuoteSubmissionService",
    "SubmissionResult",
    "QuoteSession",
    "QuoteSubmission",
    "is_submission_valid",
    "submission_errors",
    "validate_submission",
]
