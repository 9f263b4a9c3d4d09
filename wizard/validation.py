"""Per-page validation gating forward navigation."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Collection, Mapping

from constants.keys import ElementNames
from config import StudySettings
from models.form import FormDocument, QuestionType
from wizard.dom import GroupKind, InputElement, InputType, RenderedForm

logger = logging.getLogger(__name__)

CONSENT_PAGE = 1

_SELECTABLE_QUESTION_TYPES = (QuestionType.RADIO, QuestionType.SCALE, QuestionType.CHECKBOX)


def _selectable_pages(
    pages: Collection[int],
    candidates: Mapping[int, Collection[str]],
    names: Collection[str],
    suffixes: Collection[str],
) -> frozenset[int]:
    """Keep the evaluation pages that carry at least one selection input."""

    kept: set[int] = set()
    for page in sorted(pages):
        if any(name in names or name.endswith(tuple(suffixes)) for name in candidates.get(page, ())):
            kept.add(page)
        else:
            logger.warning("Evaluation page %s has no selection inputs; leaving it ungated.", page)
    return frozenset(kept)


@dataclass(frozen=True)
class ValidationPolicy:
    """Which pages block forward navigation and on what.

    Page 1 requires the consent checkbox. Evaluation pages require at least
    one checked input of their selection group. Every other page is optional,
    whatever ``required`` flags its questions carry.
    """

    consent_element_id: str | None = None
    evaluation_pages: frozenset[int] = field(default_factory=frozenset)
    selection_names: frozenset[str] = field(default_factory=frozenset)
    selection_suffixes: tuple[str, ...] = ()

    @classmethod
    def from_document(
        cls,
        document: FormDocument,
        *,
        consent_element_id: str | None = None,
        evaluation_pages: Collection[int] | None = None,
        selection_suffixes: Collection[str] = (),
    ) -> "ValidationPolicy":
        """Derive the policy from ``document``; explicit arguments win.

        The consent gate is the first required checkbox question on page 1.
        Evaluation pages are pages after the first that carry a required
        radio question, whose groups become the selection inputs.
        """

        consent = consent_element_id
        if consent is None:
            first_page = document.page(CONSENT_PAGE)
            for question in first_page.questions if first_page else ():
                if question.question_type is QuestionType.CHECKBOX and question.required and question.options:
                    consent = ElementNames.checkbox(question.id, 0, len(question.options))
                    break

        derived_pages: set[int] = set()
        names: set[str] = set()
        for page in document.pages:
            if page.page_number == CONSENT_PAGE:
                continue
            for question in page.questions:
                if question.question_type is QuestionType.RADIO and question.required:
                    derived_pages.add(page.page_number)
                    names.add(ElementNames.question(question.id))

        suffixes = tuple(selection_suffixes)
        pages = set(evaluation_pages) if evaluation_pages is not None else derived_pages
        pages.discard(CONSENT_PAGE)
        if evaluation_pages is not None and not suffixes:
            # Pinned pages without suffixes select on their radio groups.
            for number in pages:
                page = document.page(number)
                for question in page.questions if page else ():
                    if question.question_type is QuestionType.RADIO:
                        names.add(ElementNames.question(question.id))

        candidates = {
            page.page_number: {
                ElementNames.question(question.id)
                for question in page.questions
                if question.question_type in _SELECTABLE_QUESTION_TYPES
            }
            for page in document.pages
        }
        return cls(
            consent_element_id=consent,
            evaluation_pages=_selectable_pages(pages, candidates, names, suffixes),
            selection_names=frozenset(names),
            selection_suffixes=suffixes,
        )

    @classmethod
    def from_form(
        cls,
        form: RenderedForm,
        *,
        consent_element_id: str | None = None,
        evaluation_pages: Collection[int] | None = None,
        selection_suffixes: Collection[str] = (),
    ) -> "ValidationPolicy":
        """Derive the policy from freshly parsed markup; explicit arguments win.

        Must run before any validation touches the tree: the generator writes
        gated next controls as ``disabled`` and those flags are the source.
        The consent gate is the first ``q_`` checkbox of a gated page 1.
        Evaluation pages are the later gated pages, selecting on their radio
        groups unless selection suffixes are given.
        """

        first_page = form.page(CONSENT_PAGE)
        consent = consent_element_id
        if consent is None and first_page is not None and first_page.has_next_control and not first_page.next_enabled:
            consent = next(
                (
                    element.element_id
                    for element in first_page.inputs
                    if element.type is InputType.CHECKBOX
                    and element.element_id
                    and element.element_id.startswith(ElementNames.PREFIX)
                ),
                None,
            )

        if evaluation_pages is None:
            pages = {
                page.page_number
                for page in form.pages
                if page.page_number != CONSENT_PAGE and page.has_next_control and not page.next_enabled
            }
        else:
            pages = set(evaluation_pages)
        pages.discard(CONSENT_PAGE)

        suffixes = tuple(selection_suffixes)
        names: set[str] = set()
        candidates: dict[int, set[str]] = {}
        for page in form.pages:
            candidates[page.page_number] = {
                element.name
                for element in page.inputs
                if element.is_toggle
                and element.name
                and element.name.startswith(ElementNames.PREFIX)
                and not element.is_other_input
            }
            if page.page_number in pages and not suffixes:
                names.update(
                    group.name for group in page.groups if group.kind is GroupKind.RADIO and group.name is not None
                )

        return cls(
            consent_element_id=consent,
            evaluation_pages=_selectable_pages(pages, candidates, names, suffixes),
            selection_names=frozenset(names),
            selection_suffixes=suffixes,
        )

    @classmethod
    def from_settings(cls, document: FormDocument, settings: StudySettings) -> "ValidationPolicy":
        return cls.from_document(
            document,
            consent_element_id=settings.consent_element_id,
            evaluation_pages=settings.evaluation_pages,
            selection_suffixes=settings.selection_suffixes,
        )

    @classmethod
    def from_form_settings(cls, form: RenderedForm, settings: StudySettings) -> "ValidationPolicy":
        return cls.from_form(
            form,
            consent_element_id=settings.consent_element_id,
            evaluation_pages=settings.evaluation_pages,
            selection_suffixes=settings.selection_suffixes,
        )

    def gated_pages(self, total_pages: int) -> frozenset[int]:
        """Pages whose next control can ever be disabled."""

        gated = {page for page in self.evaluation_pages if 1 <= page <= total_pages}
        if self.consent_element_id is not None and total_pages >= CONSENT_PAGE:
            gated.add(CONSENT_PAGE)
        return frozenset(gated)

    def is_selection_input(self, element: InputElement) -> bool:
        name = element.name
        if not name or not name.startswith(ElementNames.PREFIX):
            return False
        if name in self.selection_names:
            return True
        return any(name.endswith(suffix) for suffix in self.selection_suffixes)


def is_page_valid(form: RenderedForm, page_number: int, policy: ValidationPolicy) -> bool:
    """Return whether ``page_number`` currently allows forward navigation."""

    if page_number == CONSENT_PAGE:
        if policy.consent_element_id is None:
            return True
        consent = form.element_by_id(policy.consent_element_id)
        return consent is not None and consent.checked

    if page_number in policy.evaluation_pages:
        page = form.page(page_number)
        if page is None:
            return False
        return any(element.checked for element in page.inputs if policy.is_selection_input(element))

    return True


def validate_page(form: RenderedForm, page_number: int, policy: ValidationPolicy) -> bool | None:
    """Re-evaluate ``page_number`` and update its next control.

    Returns the validity, or ``None`` when the page or its next control does
    not exist.
    """

    page = form.page(page_number)
    if page is None or not page.has_next_control:
        return None
    valid = is_page_valid(form, page_number, policy)
    page.next_enabled = valid
    return valid


def validate_all(form: RenderedForm, policy: ValidationPolicy) -> dict[int, bool | None]:
    return {page.page_number: validate_page(form, page.page_number, policy) for page in form.pages}


__all__ = ["CONSENT_PAGE", "ValidationPolicy", "is_page_valid", "validate_all", "validate_page"]
