"""Question title index built from the rendered wizard."""

from __future__ import annotations

from types import MappingProxyType
from typing import Iterator, Mapping

from constants.keys import ElementNames
from wizard.dom import RenderedForm


class QuestionTitleIndex(Mapping[str, str]):
    """Read-only ``element key -> label`` lookup.

    Keys are element ids for text and checkbox inputs and group names for
    radios. Labels come from the first ``label`` of the enclosing form group.
    """

    def __init__(self, titles: Mapping[str, str]) -> None:
        self._titles: Mapping[str, str] = MappingProxyType(dict(titles))

    @classmethod
    def from_form(cls, form: RenderedForm) -> "QuestionTitleIndex":
        titles: dict[str, str] = {}
        for element in form.iter_inputs():
            key = element.key
            if not key or not key.startswith(ElementNames.PREFIX):
                continue
            label = element.group.label if element.group is not None else None
            if label:
                titles[key] = label.strip()
        return cls(titles)

    def title_for(self, key: str) -> str:
        """Return the label for ``key``, falling back to ``key`` itself."""

        return self._titles.get(key) or key

    def export_key(self, key: str) -> str:
        return f"{key}_{self.title_for(key)}"

    def __getitem__(self, key: str) -> str:
        return self._titles[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._titles)

    def __len__(self) -> int:
        return len(self._titles)


__all__ = ["QuestionTitleIndex"]
