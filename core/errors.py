"""Custom exception types for the study wizard."""

from __future__ import annotations


class StudyWizardError(Exception):
    """Base exception for study wizard failures."""


class FormDocumentError(StudyWizardError):
    """Raised when a form description cannot be loaded or validated."""


class SnapshotError(StudyWizardError):
    """Raised when a persisted snapshot is malformed.

    The resume loader treats this as "no snapshot" after discarding the
    stored entry.
    """


class FormsExportError(StudyWizardError):
    """Raised when a form definition cannot be fetched from the forms service."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
