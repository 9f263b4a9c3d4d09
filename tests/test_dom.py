from pathlib import Path

from generators.study_html import render_study_html
from models.form import FormDocument
from wizard.dom import (
    BlockKind,
    ContentBlock,
    GroupKind,
    InputType,
    RenderedForm,
    load_rendered_form,
    parse_rendered_form,
)


def test_pages_and_controls(rendered_form: RenderedForm) -> None:
    assert rendered_form.title == "Park Study"
    assert rendered_form.total_pages == 3
    assert rendered_form.visible_pages() == [1]

    first, second, last = rendered_form.pages
    assert first.title == "Page 1"
    assert second.title == "Favourite places"
    assert first.next_enabled is False
    assert second.next_enabled is False
    assert last.next_enabled is True
    assert last.is_last and last.has_next_control
    assert not first.is_last


def test_inputs_are_parsed(rendered_form: RenderedForm) -> None:
    consent = rendered_form.element_by_id("q_100")
    assert consent is not None
    assert consent.type is InputType.CHECKBOX
    assert consent.label == "Yes"
    assert consent.group is not None and consent.group.label == "I consent to take part"

    name = rendered_form.element_by_id("q_101")
    assert name is not None and name.placeholder == "Your name"

    other = rendered_form.radio_option("q_200", "other")
    assert other is not None
    assert other.companion is not None
    assert other.companion.is_other_input
    assert rendered_form.radio_option("q_200", "North Park").companion is None  # type: ignore[union-attr]

    assert len(list(rendered_form.iter_inputs(InputType.RADIO))) == 3 + 5
    assert [element.value for element in rendered_form.elements_named("q_300")] == ["Benches", "Trails"]


def test_groups_and_blocks(rendered_form: RenderedForm) -> None:
    first = rendered_form.page(1)
    assert first is not None
    assert first.blocks[:2] == [
        ContentBlock(kind=BlockKind.PARAGRAPH, text="Please read the consent form."),
        ContentBlock(kind=BlockKind.PARAGRAPH, text="Thank you for taking part."),
    ]

    second = rendered_form.page(2)
    assert second is not None
    kinds = [group.kind for group in second.groups]
    assert kinds == [GroupKind.RADIO, GroupKind.SCALE]
    scale = second.groups[1]
    assert (scale.lower_label, scale.upper_label) == ("Not at all", "A lot")
    assert scale.name == "q_201"

    last = rendered_form.page(3)
    assert last is not None
    headers = [block for block in last.blocks if isinstance(block, ContentBlock)]
    assert headers == [ContentBlock(kind=BlockKind.HEADER, text="Almost done", detail="A final question.")]


def test_radio_exclusivity_and_clearing(rendered_form: RenderedForm) -> None:
    north = rendered_form.radio_option("q_200", "North Park")
    south = rendered_form.radio_option("q_200", "South Park")
    assert north is not None and south is not None

    rendered_form.check(north)
    rendered_form.check(south)
    assert (north.checked, south.checked) == (False, True)

    name = rendered_form.element_by_id("q_101")
    assert name is not None
    name.value = "Ada"
    rendered_form.clear_inputs()
    assert not south.checked
    assert name.value == ""


def test_show_only(rendered_form: RenderedForm) -> None:
    assert rendered_form.show_only(3) is True
    assert rendered_form.visible_pages() == [3]
    assert rendered_form.show_only(99) is False
    assert rendered_form.visible_pages() == [3]


def test_load_rendered_form_from_file(tmp_path: Path, sample_document: FormDocument) -> None:
    path = tmp_path / "user_study_complete.html"
    path.write_text(render_study_html(sample_document), encoding="utf-8")

    form = load_rendered_form(path)

    assert form.total_pages == 3
    assert form.element_by_id("q_302") is not None


def test_ignores_unrelated_markup() -> None:
    form = parse_rendered_form(
        """
        <h1>Mini</h1>
        <div class="page" id="intro"></div>
        <div class="page" id="page1"><div class="content">
            <div class="form-group"><label>Pick</label>
                <input type="range" name="q_9">
                <input type="text" id="q_1">
            </div>
        </div></div>
        """
    )

    assert form.total_pages == 1
    page = form.page(1)
    assert page is not None
    assert page.has_next_control is False
    assert [element.element_id for element in page.inputs] == ["q_1"]
