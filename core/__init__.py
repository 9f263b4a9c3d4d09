"""Core package for shared study wizard primitives."""

from .errors import FormDocumentError, FormsExportError, SnapshotError, StudyWizardError

__all__ = ["FormDocumentError", "FormsExportError", "SnapshotError", "StudyWizardError"]
