"""Pydantic models for the form description document."""

from __future__ import annotations

import json
from enum import StrEnum
from pathlib import Path
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from core.errors import FormDocumentError


class QuestionType(StrEnum):
    """Question types emitted by the forms exporter."""

    TEXT = "text"
    TEXTAREA = "textarea"
    CHECKBOX = "checkbox"
    RADIO = "radio"
    DROPDOWN = "dropdown"
    SCALE = "scale"
    RADIO_GRID = "radio_grid"
    CHECKBOX_GRID = "checkbox_grid"
    DATE = "date"
    TIME = "time"
    FILE = "file"
    SECTION_HEADER = "section_header"
    IMAGE = "image"
    VIDEO = "video"


class _DocumentModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    def to_payload(self) -> dict[str, Any]:
        """Return the JSON-serialisable wire representation."""

        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class Option(_DocumentModel):
    value: str = ""
    is_other: Optional[bool] = Field(default=None, alias="isOther")
    go_to_page: Optional[str] = Field(default=None, alias="goToPage")

    @field_validator("value", mode="before")
    @classmethod
    def _stringify_value(cls, value: object) -> str:
        if value is None:
            return ""
        return str(value)


class Scale(_DocumentModel):
    lower_bound: int = Field(default=1, alias="lowerBound")
    upper_bound: int = Field(default=5, alias="upperBound")
    lower_label: str = Field(default="", alias="lowerLabel")
    upper_label: str = Field(default="", alias="upperLabel")

    @model_validator(mode="after")
    def _check_bounds(self) -> "Scale":
        if self.upper_bound < self.lower_bound:
            raise ValueError("scale upperBound must not be smaller than lowerBound")
        return self


class Media(_DocumentModel):
    """Image or video attachment of a question."""

    url: Optional[str] = None
    alt_text: Optional[str] = Field(default=None, alias="altText")
    width: Optional[int] = None
    alignment: Optional[str] = None


class ValidationRule(_DocumentModel):
    type: str
    values: List[Any] = Field(default_factory=list)


class Question(_DocumentModel):
    id: str
    title: str = ""
    description: Optional[str] = None
    required: bool = False
    type: str
    options: List[Option] = Field(default_factory=list)
    has_other: Optional[bool] = Field(default=None, alias="hasOther")
    scale: Optional[Scale] = None
    image: Optional[Media] = None
    video: Optional[Media] = None
    validation: Optional[ValidationRule] = None
    rows: Optional[List[str]] = None
    columns: Optional[List[str]] = None
    require_response_in_each_row: Optional[bool] = Field(default=None, alias="requireResponseInEachRow")
    include_time: Optional[bool] = Field(default=None, alias="includeTime")
    include_year: Optional[bool] = Field(default=None, alias="includeYear")
    include_duration: Optional[bool] = Field(default=None, alias="includeDuration")
    file_types: Optional[List[str]] = Field(default=None, alias="fileTypes")
    max_files: Optional[int] = Field(default=None, alias="maxFiles")
    max_size: Optional[int] = Field(default=None, alias="maxSize")

    @field_validator("id", mode="before")
    @classmethod
    def _stringify_id(cls, value: object) -> object:
        # Apps Script exports numeric item ids.
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    @property
    def question_type(self) -> QuestionType | None:
        """Return the known :class:`QuestionType` or ``None`` for unknown types."""

        try:
            return QuestionType(self.type)
        except ValueError:
            return None


class Page(_DocumentModel):
    page_number: int = Field(alias="pageNumber")
    title: str = ""
    description: str = ""
    questions: List[Question] = Field(default_factory=list)

    @field_validator("description", mode="before")
    @classmethod
    def _none_to_empty(cls, value: object) -> object:
        return "" if value is None else value


class FormSettings(_DocumentModel):
    requires_login: Optional[bool] = Field(default=None, alias="requiresLogin")
    allow_response_edits: Optional[bool] = Field(default=None, alias="allowResponseEdits")
    collect_email: Optional[bool] = Field(default=None, alias="collectEmail")
    confirmation_message: Optional[str] = Field(default=None, alias="confirmationMessage")
    is_quiz: Optional[bool] = Field(default=None, alias="isQuiz")


class FormDocument(_DocumentModel):
    """The complete multi-page form description."""

    title: str = ""
    description: str = ""
    pages: List[Page] = Field(default_factory=list)
    settings: Optional[FormSettings] = None

    @field_validator("description", mode="before")
    @classmethod
    def _none_to_empty(cls, value: object) -> object:
        return "" if value is None else value

    @model_validator(mode="after")
    def _check_page_numbers(self) -> "FormDocument":
        if not self.pages:
            raise ValueError("a form needs at least one page")
        numbers = [page.page_number for page in self.pages]
        expected = list(range(1, len(numbers) + 1))
        if sorted(numbers) != expected:
            raise ValueError(f"page numbers must be contiguous from 1, got {numbers}")
        self.pages.sort(key=lambda page: page.page_number)
        return self

    @property
    def total_pages(self) -> int:
        return len(self.pages)

    @property
    def question_count(self) -> int:
        return sum(len(page.questions) for page in self.pages)

    def page(self, page_number: int) -> Page | None:
        for page in self.pages:
            if page.page_number == page_number:
                return page
        return None


def parse_form_document(payload: Any) -> FormDocument:
    """Validate ``payload`` and return a :class:`FormDocument`.

    Raises:
        FormDocumentError: If the payload does not describe a valid form.
    """

    try:
        return FormDocument.model_validate(payload)
    except ValidationError as exc:
        raise FormDocumentError(f"Invalid form description: {exc}") from exc


def load_form_document(path: str | Path) -> FormDocument:
    """Read and validate the form description stored at ``path``."""

    source = Path(path)
    try:
        raw = source.read_text(encoding="utf-8")
    except OSError as exc:
        raise FormDocumentError(f"Cannot read form description {source}: {exc}") from exc
    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise FormDocumentError(f"Form description {source} is not valid JSON: {exc}") from exc
    return parse_form_document(payload)


__all__ = [
    "FormDocument",
    "FormSettings",
    "Media",
    "Option",
    "Page",
    "Question",
    "QuestionType",
    "Scale",
    "ValidationRule",
    "load_form_document",
    "parse_form_document",
]
