from __future__ import annotations

from typing import Protocol

from domain.layout_config import LayoutConfig
from domain.models import Architecture, PageLayout
from domain.services.cell_registry import PageState


class LayoutEngine(Protocol):
    config: LayoutConfig

    def place_page(self, architecture: Architecture, state: PageState, top: float) -> PageLayout:
        ...
