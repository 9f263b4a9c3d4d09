"""Page state machine for the study wizard."""

from __future__ import annotations

import logging
from typing import Callable

from wizard.dom import RenderedForm
from wizard.navigation.state import WizardState

logger = logging.getLogger(__name__)


class Navigator:
    """Move between pages and keep the rendered form in sync.

    Transitions are unconditional: gating forward navigation is the job of
    the next control's enabled flag, not of :meth:`advance`.
    """

    def __init__(
        self,
        form: RenderedForm,
        *,
        state: WizardState | None = None,
        on_transition: Callable[[WizardState], None] | None = None,
    ) -> None:
        self._form = form
        self._state = state or WizardState(total_pages=max(form.total_pages, 1))
        self._on_transition = on_transition

    @property
    def state(self) -> WizardState:
        return self._state

    @property
    def current_page(self) -> int:
        return self._state.current_page

    @property
    def total_pages(self) -> int:
        return self._state.total_pages

    def advance(self) -> bool:
        if self._state.current_page >= self._state.total_pages:
            return False
        self._move_to(self._state.current_page + 1)
        self._form.scroll_requests += 1
        self._notify()
        return True

    def retreat(self) -> bool:
        if self._state.current_page <= 1:
            return False
        self._move_to(self._state.current_page - 1)
        self._form.scroll_requests += 1
        self._notify()
        return True

    def jump_to(self, page_number: object) -> bool:
        """Restore a saved page; only ``1 < n <= total`` is honoured."""

        if isinstance(page_number, bool) or not isinstance(page_number, int):
            return False
        if not 1 < page_number <= self._state.total_pages:
            return False
        self._move_to(page_number)
        return True

    def reset(self) -> None:
        self._move_to(1)

    def refresh_indicator(self) -> None:
        self._form.progress_percent = self._state.progress_percent
        self._form.indicator_text = self._state.indicator_text

    def _move_to(self, page_number: int) -> None:
        if not self._form.show_only(page_number):
            logger.debug("Page %s missing from rendered form", page_number)
        self._state.current_page = page_number
        self.refresh_indicator()

    def _notify(self) -> None:
        if self._on_transition is not None:
            self._on_transition(self._state)


__all__ = ["Navigator"]
