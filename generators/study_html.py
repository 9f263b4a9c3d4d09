"""Static markup generation for the study wizard."""

from __future__ import annotations

import html
import logging
from typing import Collection

from constants.keys import ElementNames
from models.form import FormDocument, Page, Question, QuestionType

logger = logging.getLogger(__name__)

__all__ = ["render_question", "render_study_html"]

DEFAULT_STYLESHEET = "forms_styles.css"
DEFAULT_SCRIPT = "forms_script.js"
DEFAULT_IMAGE_SOURCE = "park.jpg"


def _esc(value: object) -> str:
    return html.escape("" if value is None else str(value), quote=True)


def _paragraphs(text: str) -> str:
    parts = [para.strip() for para in text.split("\n\n")]
    body = "".join(f"<p>{_esc(para)}</p>" for para in parts if para)
    return f'<div class="description">{body}</div>'


def _question_description(question: Question) -> str:
    if not question.description:
        return ""
    return f'<p class="question-description">{_esc(question.description)}</p>'


def _required_attr(question: Question) -> str:
    return " required" if question.required else ""


def _render_checkbox(question: Question) -> str:
    option_count = len(question.options)
    rows = []
    for index, option in enumerate(question.options):
        element_id = ElementNames.checkbox(question.id, index, option_count)
        rows.append(
            f"""
                        <label class="checkbox-container">
                            <input type="checkbox" id="{_esc(element_id)}" name="{_esc(ElementNames.question(question.id))}" value="{_esc(option.value)}">
                            <span class="checkmark"></span>
                            {_esc(option.value)}
                        </label>"""
        )
    return f"""
                <div class="form-group">
                    <label>{_esc(question.title)}</label>
                    {_question_description(question)}
                    <div class="checkbox-group">{"".join(rows)}
                    </div>
                </div>"""


def _render_radio(question: Question) -> str:
    name = _esc(ElementNames.question(question.id))
    rows = []
    for option in question.options:
        if option.is_other:
            continue
        rows.append(
            f"""
                        <label class="radio-container">
                            <input type="radio" name="{name}" value="{_esc(option.value)}"{_required_attr(question)}>
                            <span class="radio-checkmark"></span>
                            {_esc(option.value)}
                        </label>"""
        )
    if question.has_other:
        rows.append(
            f"""
                        <label class="radio-container">
                            <input type="radio" name="{name}" value="{ElementNames.OTHER_VALUE}">
                            <span class="radio-checkmark"></span>
                            Other: <input type="text" class="{ElementNames.OTHER_INPUT_CLASS}" placeholder="Please specify">
                        </label>"""
        )
    return f"""
                <div class="form-group">
                    <label>{_esc(question.title)}</label>
                    {_question_description(question)}
                    <div class="radio-group">{"".join(rows)}
                    </div>
                </div>"""


def _render_text(question: Question) -> str:
    element_id = _esc(ElementNames.question(question.id))
    return f"""
                <div class="form-group">
                    <label for="{element_id}">{_esc(question.title)}</label>
                    {_question_description(question)}
                    <input type="text" id="{element_id}"{_required_attr(question)} placeholder="{_esc(question.title)}">
                </div>"""


def _render_scale(question: Question) -> str:
    scale = question.scale
    if scale is None:
        logger.warning("Scale question %s has no scale definition; skipping.", question.id)
        return ""
    name = _esc(ElementNames.question(question.id))
    options = "".join(
        f"""
                            <label class="scale-option">
                                <input type="radio" name="{name}" value="{step}"{_required_attr(question)}>
                                <span class="scale-number">{step}</span>
                            </label>"""
        for step in range(scale.lower_bound, scale.upper_bound + 1)
    )
    return f"""
                <div class="form-group">
                    <label>{_esc(question.title)}</label>
                    {_question_description(question)}
                    <div class="likert-scale">
                        <div class="scale-labels">
                            <span>{_esc(scale.lower_label)}</span>
                            <span>{_esc(scale.upper_label)}</span>
                        </div>
                        <div class="scale-options">{options}
                        </div>
                    </div>
                </div>"""


def _render_section_header(question: Question) -> str:
    description = f"<p>{_esc(question.description)}</p>" if question.description else ""
    return f"""
                <div class="section-header">
                    <h3>{_esc(question.title)}</h3>
                    {description}
                </div>"""


def _render_image(question: Question, image_source: str) -> str:
    media = question.image
    width = f"{media.width}px" if media and media.width else "auto"
    source = (media.url if media and media.url else None) or image_source
    alt = (media.alt_text if media and media.alt_text else None) or question.title
    return f"""
                <div class="form-group">
                    <div class="image-placeholder">
                        <p><strong>{_esc(question.title)}</strong></p>
                        <div class="image-container">
                            <img src="{_esc(source)}" alt="{_esc(alt)}" style="width: {width}; max-width: 100%; height: auto;">
                        </div>
                    </div>
                </div>"""


def render_question(question: Question, *, image_source: str = DEFAULT_IMAGE_SOURCE) -> str:
    """Return the markup for ``question``; unsupported types yield ``""``."""

    kind = question.question_type
    if kind is QuestionType.CHECKBOX:
        return _render_checkbox(question)
    if kind is QuestionType.RADIO:
        return _render_radio(question)
    if kind is QuestionType.TEXT:
        return _render_text(question)
    if kind is QuestionType.SCALE:
        return _render_scale(question)
    if kind is QuestionType.SECTION_HEADER:
        return _render_section_header(question)
    if kind is QuestionType.IMAGE:
        return _render_image(question, image_source)
    logger.warning("Unsupported question type: %s (question %s)", question.type, question.id)
    return ""


def _render_buttons(page: Page, *, is_first: bool, is_last: bool, gated: bool) -> str:
    disabled = " disabled" if gated else ""
    next_id = ElementNames.next_button(page.page_number)
    back = "" if is_first else '<button class="back-btn" onclick="prevPage()">Back</button>'
    if is_last:
        forward = f"""
                <div>
                    <button class="next-btn" id="{next_id}"{disabled} onclick="submitForm()">Submit Study</button>
                    <button class="reset-btn" onclick="resetStudy()">Reset Study</button>
                </div>"""
    else:
        forward = f'<button class="next-btn" id="{next_id}"{disabled} onclick="nextPage()">Next</button>'
    single = " single-button" if is_first else ""
    return f"""
            <div class="button-container{single}">{back}{forward}
            </div>"""


def _render_page(
    document: FormDocument,
    page: Page,
    *,
    is_first: bool,
    is_last: bool,
    gated: bool,
    image_source: str,
) -> str:
    hidden = "" if is_first else " hidden"
    parts = [
        f"""
        <!-- Page {page.page_number}: {_esc(page.title)} -->
        <div class="page{hidden}" id="{ElementNames.page(page.page_number)}">
            <div class="content">"""
    ]
    if not is_first and page.title and page.title != f"Page {page.page_number}":
        parts.append(f"<h2>{_esc(page.title)}</h2>")
    if page.description:
        parts.append(_paragraphs(page.description))
    if is_first and document.description:
        parts.append(_paragraphs(document.description))
    parts.extend(render_question(question, image_source=image_source) for question in page.questions)
    parts.append(
        """
            </div>"""
    )
    parts.append(_render_buttons(page, is_first=is_first, is_last=is_last, gated=gated))
    parts.append(
        """
        </div>"""
    )
    return "".join(parts)


def render_study_html(
    document: FormDocument,
    *,
    gated_pages: Collection[int] | None = None,
    stylesheet: str = DEFAULT_STYLESHEET,
    script: str | None = DEFAULT_SCRIPT,
    image_source: str = DEFAULT_IMAGE_SOURCE,
) -> str:
    """Return the complete wizard markup for ``document``.

    Args:
        document: Validated form description.
        gated_pages: Pages whose next control starts disabled. Defaults to the
            pages gated by :meth:`ValidationPolicy.from_document`.
        stylesheet: Stylesheet href placed in ``<head>``.
        script: Script src appended to ``<body>``; ``None`` omits the tag.
        image_source: Fallback ``src`` for image items without a URL.
    """

    if gated_pages is None:
        from wizard.validation import ValidationPolicy

        gated_pages = ValidationPolicy.from_document(document).gated_pages(document.total_pages)
    gated = set(gated_pages)

    title = _esc(document.title)
    parts = [
        f"""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{title}</title>
    <link rel="stylesheet" href="{_esc(stylesheet)}">
</head>
<body>
    <div class="container">
        <header>
            <h1>{title}</h1>
        </header>

        <div class="progress-bar">
            <div class="progress" id="progress"></div>
        </div>
"""
    ]
    last_index = len(document.pages) - 1
    for index, page in enumerate(document.pages):
        parts.append(
            _render_page(
                document,
                page,
                is_first=index == 0,
                is_last=index == last_index,
                gated=page.page_number in gated,
                image_source=image_source,
            )
        )
    script_tag = f'\n    <script src="{_esc(script)}"></script>' if script else ""
    parts.append(
        f"""
    </div>{script_tag}
</body>
</html>"""
    )
    return "".join(parts)
