"""Element tree of the rendered wizard markup.

The wizard runtime never reads the form description directly; it works on
the generated markup, parsed once into a :class:`RenderedForm`. The tree keeps
the mutable widget state (text values, checked flags), page visibility and
the next-control enablement, i.e. everything a browser DOM would hold.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path
from typing import Collection, Iterator

from bs4 import BeautifulSoup
from bs4.element import Tag

from constants.keys import ElementNames
from models.form import FormDocument

logger = logging.getLogger(__name__)

_PAGE_ID = re.compile(r"^page(\d+)$")


class InputType(StrEnum):
    TEXT = "text"
    CHECKBOX = "checkbox"
    RADIO = "radio"


class GroupKind(StrEnum):
    TEXT = "text"
    CHECKBOX = "checkbox"
    RADIO = "radio"
    SCALE = "scale"


class BlockKind(StrEnum):
    PARAGRAPH = "paragraph"
    HEADER = "header"
    IMAGE = "image"


@dataclass(eq=False)
class InputElement:
    """A single answer widget."""

    uid: str
    type: InputType
    page_number: int
    element_id: str | None = None
    name: str | None = None
    value: str = ""
    checked: bool = False
    classes: tuple[str, ...] = ()
    label: str = ""
    placeholder: str = ""
    group: FormGroup | None = field(default=None, repr=False)
    companion: InputElement | None = field(default=None, repr=False)

    @property
    def key(self) -> str | None:
        return self.element_id or self.name

    @property
    def is_other_input(self) -> bool:
        return ElementNames.OTHER_INPUT_CLASS in self.classes

    @property
    def is_toggle(self) -> bool:
        return self.type in (InputType.CHECKBOX, InputType.RADIO)

    def clear(self) -> None:
        if self.is_toggle:
            self.checked = False
        else:
            self.value = ""


@dataclass(eq=False)
class FormGroup:
    """A labelled question container (``.form-group``)."""

    kind: GroupKind
    label: str | None = None
    description: str = ""
    lower_label: str = ""
    upper_label: str = ""
    inputs: list[InputElement] = field(default_factory=list)

    @property
    def name(self) -> str | None:
        for element in self.inputs:
            if element.name and not element.is_other_input:
                return element.name
        return None


@dataclass(frozen=True)
class ContentBlock:
    """Static, non-answer content (description paragraphs, headers, images)."""

    kind: BlockKind
    text: str = ""
    detail: str = ""
    source: str | None = None


Block = FormGroup | ContentBlock


@dataclass(eq=False)
class RenderedPage:
    page_number: int
    title: str
    hidden: bool = True
    next_enabled: bool = True
    has_next_control: bool = False
    is_last: bool = False
    blocks: list[Block] = field(default_factory=list)
    inputs: list[InputElement] = field(default_factory=list)

    @property
    def groups(self) -> list[FormGroup]:
        return [block for block in self.blocks if isinstance(block, FormGroup)]


@dataclass(eq=False)
class RenderedForm:
    """The whole wizard: pages plus the progress indicator state."""

    title: str
    pages: list[RenderedPage] = field(default_factory=list)
    progress_percent: float = 0.0
    indicator_text: str = ""
    scroll_requests: int = 0

    @property
    def total_pages(self) -> int:
        return len(self.pages)

    def page(self, page_number: int) -> RenderedPage | None:
        for page in self.pages:
            if page.page_number == page_number:
                return page
        return None

    def iter_inputs(self, input_type: InputType | None = None) -> Iterator[InputElement]:
        """Yield every input across all pages in document order."""

        for page in self.pages:
            for element in page.inputs:
                if input_type is None or element.type is input_type:
                    yield element

    def input(self, uid: str) -> InputElement | None:
        for element in self.iter_inputs():
            if element.uid == uid:
                return element
        return None

    def element_by_id(self, element_id: str) -> InputElement | None:
        for element in self.iter_inputs():
            if element.element_id == element_id:
                return element
        return None

    def elements_named(self, name: str) -> list[InputElement]:
        return [element for element in self.iter_inputs() if element.name == name]

    def radio_option(self, name: str, value: str) -> InputElement | None:
        for element in self.iter_inputs(InputType.RADIO):
            if element.name == name and element.value == value:
                return element
        return None

    def visible_pages(self) -> list[int]:
        return [page.page_number for page in self.pages if not page.hidden]

    def show_only(self, page_number: int) -> bool:
        """Make ``page_number`` the only visible page; unknown pages are a no-op."""

        if self.page(page_number) is None:
            return False
        for page in self.pages:
            page.hidden = page.page_number != page_number
        return True

    def check(self, element: InputElement, checked: bool = True) -> None:
        """Set a toggle's checked state with radio-group exclusivity."""

        if element.type is InputType.RADIO and checked and element.name:
            for sibling in self.elements_named(element.name):
                if sibling.type is InputType.RADIO:
                    sibling.checked = False
        element.checked = checked

    def clear_inputs(self) -> None:
        for element in self.iter_inputs():
            element.clear()


def _text(tag: Tag | None) -> str:
    if tag is None:
        return ""
    return tag.get_text().strip()


def _classes(tag: Tag) -> tuple[str, ...]:
    raw = tag.get("class") or ()
    if isinstance(raw, str):
        return tuple(raw.split())
    return tuple(raw)


def _group_kind(tag: Tag) -> GroupKind:
    if tag.select_one(".likert-scale"):
        return GroupKind.SCALE
    if tag.select_one(".checkbox-group"):
        return GroupKind.CHECKBOX
    if tag.select_one(".radio-group"):
        return GroupKind.RADIO
    return GroupKind.TEXT


def _parse_group(tag: Tag) -> FormGroup:
    kind = _group_kind(tag)
    label = _text(tag.find("label")) or None
    group = FormGroup(kind=kind, label=label, description=_text(tag.select_one("p.question-description")))
    if kind is GroupKind.SCALE:
        spans = tag.select(".scale-labels span")
        if spans:
            group.lower_label = _text(spans[0])
            group.upper_label = _text(spans[-1]) if len(spans) > 1 else ""
    return group


def _parse_blocks(page_tag: Tag) -> tuple[str | None, list[Block], dict[int, FormGroup]]:
    content = page_tag.select_one(".content") or page_tag
    title: str | None = None
    blocks: list[Block] = []
    groups_by_tag: dict[int, FormGroup] = {}
    for child in content.find_all(recursive=False):
        classes = _classes(child)
        if child.name == "h2":
            title = _text(child)
        elif "description" in classes:
            for para in child.find_all("p"):
                blocks.append(ContentBlock(kind=BlockKind.PARAGRAPH, text=_text(para)))
        elif "section-header" in classes:
            blocks.append(
                ContentBlock(kind=BlockKind.HEADER, text=_text(child.find("h3")), detail=_text(child.find("p")))
            )
        elif "form-group" in classes:
            image = child.find("img")
            if image is not None and child.find("input") is None:
                blocks.append(
                    ContentBlock(
                        kind=BlockKind.IMAGE,
                        text=_text(child.find("strong")) or str(image.get("alt") or ""),
                        source=str(image.get("src") or "") or None,
                    )
                )
                continue
            group = _parse_group(child)
            groups_by_tag[id(child)] = group
            blocks.append(group)
    return title, blocks, groups_by_tag


def _option_label(tag: Tag) -> str:
    parent = tag.parent
    if parent is None or parent.name != "label":
        return ""
    return " ".join(parent.stripped_strings)


def _parse_inputs(page_tag: Tag, page_number: int, groups_by_tag: dict[int, FormGroup]) -> list[InputElement]:
    elements: list[InputElement] = []
    by_tag: dict[int, InputElement] = {}
    for index, tag in enumerate(page_tag.find_all("input")):
        raw_type = str(tag.get("type") or "text").lower()
        try:
            input_type = InputType(raw_type)
        except ValueError:
            logger.debug("Skipping unsupported input type %s on page %s", raw_type, page_number)
            continue
        default_value = "on" if input_type is not InputType.TEXT else ""
        element = InputElement(
            uid=f"p{page_number}-i{index}",
            type=input_type,
            page_number=page_number,
            element_id=str(tag.get("id")) if tag.get("id") else None,
            name=str(tag.get("name")) if tag.get("name") else None,
            value=str(tag.get("value", default_value)),
            checked=tag.has_attr("checked"),
            classes=_classes(tag),
            label=_option_label(tag) if input_type is not InputType.TEXT else "",
            placeholder=str(tag.get("placeholder") or ""),
        )
        container = tag.find_parent(class_="form-group")
        if container is not None:
            group = groups_by_tag.get(id(container))
            if group is not None:
                element.group = group
                group.inputs.append(element)
        by_tag[id(tag)] = element
        elements.append(element)

    # The free-text field of an "other" option lives in the same container.
    for tag in page_tag.find_all("input"):
        element = by_tag.get(id(tag))
        if element is None or element.type is not InputType.RADIO or tag.parent is None:
            continue
        companion_tag = tag.parent.select_one(f"input.{ElementNames.OTHER_INPUT_CLASS}")
        if companion_tag is not None:
            element.companion = by_tag.get(id(companion_tag))
    return elements


def parse_rendered_form(markup: str) -> RenderedForm:
    """Parse generated wizard markup into a :class:`RenderedForm`."""

    soup = BeautifulSoup(markup, "html.parser")
    heading = soup.find("h1") or soup.find("title")
    form = RenderedForm(title=_text(heading))
    page_tags: list[tuple[int, Tag]] = []
    for tag in soup.select("div.page"):
        match = _PAGE_ID.match(str(tag.get("id") or ""))
        if match is None:
            continue
        page_tags.append((int(match.group(1)), tag))
    page_tags.sort(key=lambda item: item[0])

    for position, (page_number, tag) in enumerate(page_tags):
        title, blocks, groups_by_tag = _parse_blocks(tag)
        next_button = tag.select_one(f"#{ElementNames.next_button(page_number)}") or tag.select_one(".next-btn")
        page = RenderedPage(
            page_number=page_number,
            title=title or f"Page {page_number}",
            hidden="hidden" in _classes(tag),
            next_enabled=next_button is None or not next_button.has_attr("disabled"),
            has_next_control=next_button is not None,
            is_last=position == len(page_tags) - 1,
            blocks=blocks,
            inputs=_parse_inputs(tag, page_number, groups_by_tag),
        )
        form.pages.append(page)
    return form


def build_rendered_form(document: FormDocument, *, gated_pages: Collection[int] | None = None) -> RenderedForm:
    """Generate the markup for ``document`` and parse it into a tree."""

    from generators.study_html import render_study_html

    return parse_rendered_form(render_study_html(document, gated_pages=gated_pages))


def load_rendered_form(path: str | Path) -> RenderedForm:
    """Parse pre-generated wizard markup from ``path``."""

    return parse_rendered_form(Path(path).read_text(encoding="utf-8"))


__all__ = [
    "Block",
    "BlockKind",
    "ContentBlock",
    "FormGroup",
    "GroupKind",
    "InputElement",
    "InputType",
    "RenderedForm",
    "RenderedPage",
    "build_rendered_form",
    "load_rendered_form",
    "parse_rendered_form",
]
