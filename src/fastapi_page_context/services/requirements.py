"""RequirementsCollector — JS/CSS assets a page asks the renderer to emit."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class RequirementsCollector:
    """Collects page assets in request order, ignoring duplicates."""

    fragment: bool = False
    js_urls: list[str] = field(default_factory=list)
    css_urls: list[str] = field(default_factory=list)
    js_calls: list[tuple[str, tuple[Any, ...]]] = field(default_factory=list)

    def require_js(self, url: str) -> None:
        if url not in self.js_urls:
            self.js_urls.append(url)

    def require_css(self, url: str) -> None:
        if url not in self.css_urls:
            self.css_urls.append(url)

    def js_call(self, function: str, *args: Any) -> None:
        self.js_calls.append((function, args))
