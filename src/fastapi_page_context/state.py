"""PageState enum — ordered page lifecycle."""

from __future__ import annotations

from enum import Enum


class PageState(Enum):
    """Page output states, moving strictly forward one step at a time."""

    BEFORE_HEADER = "before_header"
    PRINTING_HEADER = "printing_header"
    IN_BODY = "in_body"
    DONE = "done"

    @property
    def order(self) -> int:
        _ORDER = {
            "before_header": 0,
            "printing_header": 1,
            "in_body": 2,
            "done": 3,
        }
        return _ORDER[self.value]

    @property
    def successor(self) -> PageState | None:
        for state in PageState:
            if state.order == self.order + 1:
                return state
        return None

    def __str__(self) -> str:
        return self.value
