"""Block manager contract and a minimal default implementation."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from fastapi_page_context.context import RequestPageContext

logger = logging.getLogger(__name__)


@runtime_checkable
class BlockManager(Protocol):
    def add_regions(self, regions: Iterable[str], custom: bool = True) -> None: ...
    def set_default_region(self, region: str) -> None: ...
    def is_known_region(self, region: str) -> bool: ...
    def load_blocks(self) -> None: ...
    def process_url_actions(self, page: RequestPageContext) -> bool: ...
    def create_all_instances(self) -> None: ...


@runtime_checkable
class BlockManagerFactory(Protocol):
    def create(self, page: RequestPageContext) -> BlockManager: ...


class DefaultBlockManager:
    """Tracks regions and records which lifecycle calls were made.

    Places no blocks itself.
    """

    def __init__(self, page: RequestPageContext) -> None:
        self._page = page
        self.regions: list[str] = []
        self.custom_regions: list[str] = []
        self.default_region: str | None = None
        self.loaded = False
        self.instances_created = False
        self.url_actions_processed = 0

    def add_regions(self, regions: Iterable[str], custom: bool = True) -> None:
        for region in regions:
            if region not in self.regions:
                self.regions.append(region)
            if custom and region not in self.custom_regions:
                self.custom_regions.append(region)

    def set_default_region(self, region: str) -> None:
        if region not in self.regions:
            logger.warning("Default region %s is not one of %s", region, self.regions)
        self.default_region = region

    def is_known_region(self, region: str) -> bool:
        return region in self.regions

    def load_blocks(self) -> None:
        logger.debug(
            "Loading blocks for layout %s in scope %s",
            self._page.page_layout,
            self._page.context.id,
        )
        self.loaded = True

    def process_url_actions(self, page: RequestPageContext) -> bool:
        self.url_actions_processed += 1
        return False

    def create_all_instances(self) -> None:
        self.instances_created = True


class DefaultBlockManagerFactory:
    def create(self, page: RequestPageContext) -> BlockManager:
        return DefaultBlockManager(page)
