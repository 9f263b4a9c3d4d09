"""Navigation state owned by the page navigator."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class WizardState:
    """Current position inside the wizard."""

    total_pages: int
    current_page: int = 1

    def __post_init__(self) -> None:
        if self.total_pages < 1:
            raise ValueError("a wizard needs at least one page")
        if not 1 <= self.current_page <= self.total_pages:
            raise ValueError(f"current_page {self.current_page} outside 1..{self.total_pages}")

    @property
    def is_first(self) -> bool:
        return self.current_page == 1

    @property
    def is_last(self) -> bool:
        return self.current_page == self.total_pages

    @property
    def progress_percent(self) -> float:
        return self.current_page / self.total_pages * 100

    @property
    def indicator_text(self) -> str:
        return f"Page {self.current_page} of {self.total_pages}"


__all__ = ["WizardState"]
