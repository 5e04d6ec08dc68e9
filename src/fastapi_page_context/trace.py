"""LifecycleTrace and TraceEntry — debug recording of page transitions."""

from __future__ import annotations

from dataclasses import dataclass, field

from fastapi_page_context.state import PageState


@dataclass(frozen=True)
class TraceEntry:
    """Single lifecycle transition."""

    previous: PageState
    current: PageState
    elapsed_ms: float


@dataclass
class LifecycleTrace:
    """Transitions of one page, with time since the page was created."""

    entries: list[TraceEntry] = field(default_factory=list)

    @property
    def states(self) -> list[PageState]:
        return [entry.current for entry in self.entries]


@dataclass(frozen=True)
class ThemeInitialisation:
    """Where the theme got locked in: page state, course and layout at the time."""

    theme: str
    state: PageState
    course_id: int
    page_layout: str
    elapsed_ms: float

    def __str__(self) -> str:
        return (
            f"theme {self.theme!r} initialised in state {self.state}"
            f" for course {self.course_id}, layout {self.page_layout!r}"
            f" after {self.elapsed_ms:.1f} ms"
        )
