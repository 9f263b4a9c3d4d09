"""Export helpers for study submissions."""

from .submission import SUBMISSION_MIME_TYPE, serialize_submission, submission_filename, write_submission

__all__ = ["SUBMISSION_MIME_TYPE", "serialize_submission", "submission_filename", "write_submission"]
