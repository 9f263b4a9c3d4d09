"""Study wizard runtime: element tree, validation, navigation and persistence."""

from __future__ import annotations

from .dom import RenderedForm, build_rendered_form, load_rendered_form, parse_rendered_form
from .runtime import StudyWizard, SubmissionResult

__all__ = [
    "RenderedForm",
    "StudyWizard",
    "SubmissionResult",
    "build_rendered_form",
    "load_rendered_form",
    "parse_rendered_form",
]
