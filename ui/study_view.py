"""Streamlit rendering adapter for the study wizard.

The adapter only translates between widgets and :class:`StudyWizard`: widget
callbacks forward edits, navigation buttons call the runtime, and the runtime's
element tree decides what is shown and which controls are enabled.
"""

from __future__ import annotations

import html
import logging

import streamlit as st

from config import StudySettings, get_settings
from constants.keys import ElementNames, StateKeys
from core.errors import FormDocumentError
from exports.submission import SUBMISSION_MIME_TYPE
from models.form import load_form_document
from state.store import create_store
from wizard.dom import BlockKind, ContentBlock, FormGroup, GroupKind, InputType, RenderedPage, load_rendered_form
from wizard.runtime import COMPLETION_PROMPT, StudyWizard, SubmissionResult
from wizard.validation import ValidationPolicy

logger = logging.getLogger(__name__)

_OTHER_LABEL = "Other"


def _queue_message(message: str) -> None:
    messages = st.session_state.setdefault(StateKeys.FLASH_MESSAGE, [])
    messages.append(message)


def _build_wizard(settings: StudySettings) -> StudyWizard:
    store = create_store(settings)
    if settings.markup_path:
        form = load_rendered_form(settings.markup_path)
        return StudyWizard(
            form,
            store,
            policy=ValidationPolicy.from_form_settings(form, settings),
            autosave_interval=settings.autosave_interval,
            export_dir=settings.export_dir,
            notify=_queue_message,
        )
    document = load_form_document(settings.form_path)
    return StudyWizard.from_document(document, store, settings=settings, notify=_queue_message)


def get_wizard(settings: StudySettings | None = None) -> StudyWizard:
    """Return the session's wizard, creating and starting it on first use."""

    wizard = st.session_state.get(StateKeys.RUNTIME)
    if isinstance(wizard, StudyWizard):
        return wizard
    wizard = _build_wizard(settings or get_settings())
    wizard.start()
    st.session_state[StateKeys.RUNTIME] = wizard
    st.session_state.setdefault(StateKeys.WIDGET_GENERATION, 0)
    return wizard


def _widget_key(uid: str) -> str:
    generation = st.session_state.get(StateKeys.WIDGET_GENERATION, 0)
    return f"study.w{generation}.{uid}"


def _bump_widget_generation() -> None:
    st.session_state[StateKeys.WIDGET_GENERATION] = st.session_state.get(StateKeys.WIDGET_GENERATION, 0) + 1


def _on_text_change(wizard: StudyWizard, uid: str, key: str) -> None:
    wizard.set_text(uid, str(st.session_state.get(key) or ""))


def _on_checkbox_change(wizard: StudyWizard, uid: str, key: str) -> None:
    wizard.set_checked(uid, bool(st.session_state.get(key)))


def _on_radio_change(wizard: StudyWizard, name: str, key: str) -> None:
    selected = st.session_state.get(key)
    wizard.select_radio(name, str(selected) if selected is not None else None)


def _render_flash_messages() -> None:
    for message in st.session_state.pop(StateKeys.FLASH_MESSAGE, []):
        st.info(message)


def _render_content(block: ContentBlock) -> None:
    if block.kind is BlockKind.PARAGRAPH:
        st.write(block.text)
    elif block.kind is BlockKind.HEADER:
        st.subheader(block.text)
        if block.detail:
            st.caption(block.detail)
    elif block.kind is BlockKind.IMAGE:
        if block.source and block.source.startswith(("http://", "https://")):
            st.image(block.source, caption=block.text or None)
        else:
            st.markdown(f"**{html.escape(block.text)}**")


def _render_text_group(wizard: StudyWizard, group: FormGroup) -> None:
    for element in group.inputs:
        if element.type is not InputType.TEXT:
            continue
        key = _widget_key(element.uid)
        st.text_input(
            group.label or element.key or "",
            value=element.value,
            placeholder=element.placeholder or None,
            key=key,
            on_change=_on_text_change,
            args=(wizard, element.uid, key),
        )


def _render_checkbox_group(wizard: StudyWizard, group: FormGroup) -> None:
    if group.label:
        st.markdown(f"**{html.escape(group.label)}**")
    for element in group.inputs:
        if element.type is not InputType.CHECKBOX:
            continue
        key = _widget_key(element.uid)
        st.checkbox(
            element.label or element.value,
            value=element.checked,
            key=key,
            on_change=_on_checkbox_change,
            args=(wizard, element.uid, key),
        )


def _render_radio_group(wizard: StudyWizard, group: FormGroup) -> None:
    name = group.name
    if name is None:
        return
    radios = [element for element in group.inputs if element.type is InputType.RADIO]
    values = [element.value for element in radios]
    labels = {
        element.value: (_OTHER_LABEL if element.value == ElementNames.OTHER_VALUE else element.label or element.value)
        for element in radios
    }
    selected = next((index for index, element in enumerate(radios) if element.checked), None)
    key = _widget_key(f"{name}.radio")
    label = group.label or name
    if group.kind is GroupKind.SCALE and (group.lower_label or group.upper_label):
        label = f"{label} ({group.lower_label} … {group.upper_label})"
    st.radio(
        label,
        values,
        index=selected,
        format_func=lambda value: labels.get(value, value),
        horizontal=group.kind is GroupKind.SCALE,
        key=key,
        on_change=_on_radio_change,
        args=(wizard, name, key),
    )
    for element in radios:
        if element.value != ElementNames.OTHER_VALUE or element.companion is None:
            continue
        if not element.checked:
            continue
        companion = element.companion
        companion_key = _widget_key(companion.uid)
        st.text_input(
            "Please specify",
            value=companion.value,
            key=companion_key,
            on_change=_on_text_change,
            args=(wizard, companion.uid, companion_key),
        )


def _render_group(wizard: StudyWizard, group: FormGroup) -> None:
    if group.kind is GroupKind.TEXT:
        _render_text_group(wizard, group)
    elif group.kind is GroupKind.CHECKBOX:
        _render_checkbox_group(wizard, group)
    else:
        _render_radio_group(wizard, group)
    if group.description:
        st.caption(group.description)


def _render_page(wizard: StudyWizard, page: RenderedPage) -> None:
    if page.page_number > 1 and page.title != f"Page {page.page_number}":
        st.header(page.title)
    for block in page.blocks:
        if isinstance(block, FormGroup):
            _render_group(wizard, block)
        else:
            _render_content(block)


def _submit(wizard: StudyWizard) -> None:
    result = wizard.submit()
    st.session_state[StateKeys.SUBMISSION] = result


def _reset(wizard: StudyWizard) -> None:
    wizard.reset()
    st.session_state.pop(StateKeys.SUBMISSION, None)
    _bump_widget_generation()


def _render_navigation(wizard: StudyWizard, page: RenderedPage) -> None:
    back_col, next_col = st.columns(2)
    if page.page_number > 1:
        back_col.button("Back", key=f"study.back.{page.page_number}", on_click=wizard.prev_page)
    blocked = page.has_next_control and not page.next_enabled
    if page.is_last:
        next_col.button(
            "Submit Study",
            key="study.submit",
            type="primary",
            disabled=blocked,
            on_click=_submit,
            args=(wizard,),
        )
        next_col.button("Reset Study", key="study.reset", on_click=_reset, args=(wizard,))
    else:
        next_col.button(
            "Next",
            key=f"study.next.{page.page_number}",
            type="primary",
            disabled=blocked,
            on_click=wizard.next_page,
        )


def _render_submission(wizard: StudyWizard, result: SubmissionResult) -> None:
    st.success(COMPLETION_PROMPT.split("\n\n", 1)[0])
    st.download_button(
        "Download responses",
        data=result.payload,
        file_name=result.filename,
        mime=SUBMISSION_MIME_TYPE,
        key="study.download",
    )
    if result.saved_path is not None:
        st.caption(f"A copy was saved to {result.saved_path}")
    st.button(
        "Reset the form for a new participant",
        key="study.reset_after_submit",
        on_click=_reset,
        args=(wizard,),
    )


def maybe_scroll_to_top(wizard: StudyWizard) -> None:
    seen = st.session_state.get(StateKeys.SCROLL_TO_TOP, 0)
    if wizard.form.scroll_requests == seen:
        return
    st.session_state[StateKeys.SCROLL_TO_TOP] = wizard.form.scroll_requests
    st.markdown(
        """
        <script>
        (function() {
            const root = window;
            const target = root.document.querySelector('section.main');
            if (!target) {
                root.scrollTo({ top: 0, behavior: 'smooth' });
                return;
            }
            target.scrollIntoView({ behavior: 'smooth', block: 'start' });
        })();
        </script>
        """,
        unsafe_allow_html=True,
    )


def render_study(settings: StudySettings | None = None) -> None:
    """Render the wizard for the current Streamlit session."""

    try:
        wizard = get_wizard(settings)
    except (FormDocumentError, OSError) as exc:
        logger.error("Unable to load the study: %s", exc)
        st.error(f"The study could not be loaded: {exc}")
        st.stop()
        return

    wizard.autosave.tick()
    form = wizard.form
    st.title(form.title)
    _render_flash_messages()

    submission = st.session_state.get(StateKeys.SUBMISSION)
    if isinstance(submission, SubmissionResult):
        _render_submission(wizard, submission)
        return

    st.progress(min(form.progress_percent / 100, 1.0), text=form.indicator_text)
    maybe_scroll_to_top(wizard)
    page = form.page(wizard.current_page)
    if page is None:
        return
    _render_page(wizard, page)
    _render_navigation(wizard, page)


__all__ = ["get_wizard", "maybe_scroll_to_top", "render_study"]
