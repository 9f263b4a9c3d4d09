"""Convert Google Forms definitions into the study form description.

The adapter works on the ``Form`` resource returned by the Google Forms API
(``GET https://forms.googleapis.com/v1/forms/{formId}``). Page breaks split the
item list into pages; unsupported items are logged and skipped.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Sequence

import requests

from core.errors import FormsExportError
from models.form import FormDocument, parse_form_document

logger = logging.getLogger(__name__)

FORMS_API_URL = "https://forms.googleapis.com/v1/forms/{form_id}"
_USER_AGENT = "StudyWizard/1.0"

_NAVIGATION_ACTIONS = {"NEXT_SECTION", "RESTART_FORM", "SUBMIT_FORM", "GO_TO_ACTION_UNSPECIFIED"}


def fetch_form(form_id: str, *, access_token: str, timeout: float = 15.0) -> dict[str, Any]:
    """Download the raw form resource for ``form_id``.

    Raises:
        FormsExportError: If the request fails or the body is not a JSON object.
    """

    cleaned_id = (form_id or "").strip()
    if not cleaned_id:
        raise FormsExportError("A form id is required.")
    if not access_token:
        raise FormsExportError("An access token is required to read the form.")
    try:
        response = requests.get(
            FORMS_API_URL.format(form_id=cleaned_id),
            timeout=timeout,
            headers={"Authorization": f"Bearer {access_token}", "User-Agent": _USER_AGENT},
        )
        response.raise_for_status()
    except requests.HTTPError as exc:
        status = exc.response.status_code if exc.response is not None else None
        raise FormsExportError(f"Cannot access form {cleaned_id}: HTTP {status}", status_code=status) from exc
    except requests.RequestException as exc:
        raise FormsExportError(f"Cannot access form {cleaned_id}: {exc}") from exc
    try:
        payload = response.json()
    except ValueError as exc:
        raise FormsExportError("Forms API returned a non-JSON body.") from exc
    if not isinstance(payload, dict):
        raise FormsExportError("Forms API returned a non-object payload.")
    return payload


def _as_mapping(value: object) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {}


def _as_list(value: object) -> Sequence[Any]:
    return value if isinstance(value, list) else []


def _section_titles(items: Sequence[Any]) -> dict[str, str]:
    """Map page-break item ids to the page titles they open."""

    titles: dict[str, str] = {}
    page_number = 1
    for item in items:
        item = _as_mapping(item)
        if "pageBreakItem" in item:
            page_number += 1
            titles[str(item.get("itemId", ""))] = item.get("title") or f"Page {page_number}"
    return titles


def _convert_choices(choice: Mapping[str, Any], sections: Mapping[str, str]) -> tuple[list[dict[str, Any]], bool]:
    options: list[dict[str, Any]] = []
    has_other = False
    for raw in _as_list(choice.get("options")):
        raw = _as_mapping(raw)
        if raw.get("isOther"):
            has_other = True
            continue
        option: dict[str, Any] = {"value": raw.get("value", ""), "isOther": False}
        target = raw.get("goToSectionId")
        if target:
            option["goToPage"] = sections.get(str(target))
        elif raw.get("goToAction") and raw.get("goToAction") not in _NAVIGATION_ACTIONS:
            logger.debug("Unknown goToAction %s", raw.get("goToAction"))
        options.append(option)
    return options, has_other


def _convert_question(question: Mapping[str, Any], base: dict[str, Any], sections: Mapping[str, str]) -> bool:
    base["required"] = bool(question.get("required"))
    if "textQuestion" in question:
        paragraph = _as_mapping(question.get("textQuestion")).get("paragraph")
        base["type"] = "textarea" if paragraph else "text"
    elif "choiceQuestion" in question:
        choice = _as_mapping(question.get("choiceQuestion"))
        kind = choice.get("type")
        options, has_other = _convert_choices(choice, sections)
        base["options"] = options
        if kind == "RADIO":
            base["type"] = "radio"
            base["hasOther"] = has_other
        elif kind == "CHECKBOX":
            base["type"] = "checkbox"
            base["hasOther"] = has_other
        elif kind == "DROP_DOWN":
            base["type"] = "dropdown"
        else:
            logger.warning("Unsupported choice type: %s", kind)
            return False
    elif "scaleQuestion" in question:
        scale = _as_mapping(question.get("scaleQuestion"))
        base["type"] = "scale"
        base["scale"] = {
            "lowerBound": scale.get("low", 1),
            "upperBound": scale.get("high", 5),
            "lowerLabel": scale.get("lowLabel", ""),
            "upperLabel": scale.get("highLabel", ""),
        }
    elif "dateQuestion" in question:
        date = _as_mapping(question.get("dateQuestion"))
        base["type"] = "date"
        base["includeTime"] = bool(date.get("includeTime"))
        base["includeYear"] = bool(date.get("includeYear"))
    elif "timeQuestion" in question:
        base["type"] = "time"
        base["includeDuration"] = bool(_as_mapping(question.get("timeQuestion")).get("duration"))
    elif "fileUploadQuestion" in question:
        upload = _as_mapping(question.get("fileUploadQuestion"))
        base["type"] = "file"
        base["fileTypes"] = list(_as_list(upload.get("types")))
        base["maxFiles"] = upload.get("maxFiles")
        max_size = upload.get("maxFileSize")
        base["maxSize"] = int(max_size) if max_size is not None else None
    else:
        logger.warning("Unsupported question kind in item %s", base.get("id"))
        return False
    return True


def _convert_grid(group: Mapping[str, Any], base: dict[str, Any]) -> bool:
    grid = _as_mapping(group.get("grid"))
    columns = _as_mapping(grid.get("columns"))
    kind = columns.get("type")
    if kind == "RADIO":
        base["type"] = "radio_grid"
    elif kind == "CHECKBOX":
        base["type"] = "checkbox_grid"
    else:
        logger.warning("Unsupported grid type: %s", kind)
        return False
    questions = [_as_mapping(q) for q in _as_list(group.get("questions"))]
    base["rows"] = [_as_mapping(q.get("rowQuestion")).get("title", "") for q in questions]
    base["columns"] = [_as_mapping(o).get("value", "") for o in _as_list(columns.get("options"))]
    required = any(bool(q.get("required")) for q in questions)
    base["required"] = required
    base["requireResponseInEachRow"] = required
    return True


def _convert_media(media: Mapping[str, Any], uri_key: str) -> dict[str, Any]:
    properties = _as_mapping(media.get("properties"))
    converted: dict[str, Any] = {
        "url": media.get(uri_key),
        "altText": media.get("altText"),
        "width": properties.get("width"),
        "alignment": properties.get("alignment"),
    }
    return {key: value for key, value in converted.items() if value is not None}


def convert_item(item: Mapping[str, Any], sections: Mapping[str, str] | None = None) -> dict[str, Any] | None:
    """Convert one non-page-break item into a question payload."""

    sections = sections or {}
    base: dict[str, Any] = {
        "id": str(item.get("itemId", "")),
        "title": item.get("title", ""),
        "description": item.get("description"),
        "required": False,
        "type": None,
        "options": [],
    }
    if "questionItem" in item:
        question_item = _as_mapping(item.get("questionItem"))
        converted = _convert_question(_as_mapping(question_item.get("question")), base, sections)
        if converted and question_item.get("image"):
            base["image"] = _convert_media(_as_mapping(question_item.get("image")), "contentUri")
    elif "questionGroupItem" in item:
        converted = _convert_grid(_as_mapping(item.get("questionGroupItem")), base)
    elif "textItem" in item:
        base["type"] = "section_header"
        converted = True
    elif "imageItem" in item:
        base["type"] = "image"
        base["image"] = _convert_media(_as_mapping(_as_mapping(item.get("imageItem")).get("image")), "contentUri")
        converted = True
    elif "videoItem" in item:
        base["type"] = "video"
        base["video"] = _convert_media(_as_mapping(_as_mapping(item.get("videoItem")).get("video")), "youtubeUri")
        converted = True
    else:
        logger.warning("Unsupported item type for item %s", base["id"])
        converted = False
    if not converted:
        return None
    return base


def _convert_settings(resource: Mapping[str, Any]) -> dict[str, Any]:
    settings = _as_mapping(resource.get("settings"))
    collection = settings.get("emailCollectionType")
    converted: dict[str, Any] = {
        "isQuiz": bool(_as_mapping(settings.get("quizSettings")).get("isQuiz")),
    }
    if collection is not None:
        converted["collectEmail"] = collection not in ("DO_NOT_COLLECT", "EMAIL_COLLECTION_TYPE_UNSPECIFIED")
    return converted


def convert_form(resource: Mapping[str, Any]) -> FormDocument:
    """Convert a Forms API ``Form`` resource into a :class:`FormDocument`.

    Pages are numbered contiguously from 1; a page break directly following
    an empty page replaces it rather than leaving a gap.
    """

    if not isinstance(resource, Mapping):
        raise FormsExportError("A form resource must be a JSON object.")
    info = _as_mapping(resource.get("info"))
    items = [_as_mapping(item) for item in _as_list(resource.get("items"))]
    sections = _section_titles(items)

    pages: list[dict[str, Any]] = []
    current: dict[str, Any] = {"title": "Page 1", "description": "", "questions": []}
    for item in items:
        if "pageBreakItem" in item:
            if current["questions"]:
                pages.append(current)
            current = {
                "title": item.get("title") or "",
                "description": item.get("description") or "",
                "questions": [],
            }
            continue
        question = convert_item(item, sections)
        if question is not None:
            current["questions"].append(question)
    if current["questions"] or not pages:
        pages.append(current)

    for number, page in enumerate(pages, start=1):
        page["pageNumber"] = number
        if not page["title"]:
            page["title"] = f"Page {number}"

    payload = {
        "title": info.get("title") or info.get("documentTitle") or "",
        "description": info.get("description") or "",
        "pages": pages,
        "settings": _convert_settings(resource),
    }
    return parse_form_document(payload)


__all__ = ["FORMS_API_URL", "convert_form", "convert_item", "fetch_form"]
