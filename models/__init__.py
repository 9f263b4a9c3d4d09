"""Pydantic models for form descriptions and persisted study records."""

from .form import FormDocument, Option, Page, Question, QuestionType, Scale, load_form_document, parse_form_document
from .records import AnswerValue, CompletionRecord, PersistedSnapshot, SubmissionDocument, utc_timestamp

__all__ = [
    "AnswerValue",
    "CompletionRecord",
    "FormDocument",
    "Option",
    "Page",
    "PersistedSnapshot",
    "Question",
    "QuestionType",
    "Scale",
    "SubmissionDocument",
    "load_form_document",
    "parse_form_document",
    "utc_timestamp",
]
