from __future__ import annotations

import html
import math

from domain.labels import xml_text
from domain.layout_config import LayoutConfig
from domain.models import Point, Size
from domain.services.cell_registry import CellKind, PageState

TITLE_STYLE = (
    "text;html=1;align=left;verticalAlign=top;whiteSpace=wrap;overflow=hidden;"
    "fontSize=14;fontColor=#333333;"
)


class DiagramTitleBuilder:
    def __init__(self, config: LayoutConfig | None = None) -> None:
        self.config = config or LayoutConfig()

    def height(self, description: str | None) -> int:
        cfg = self.config
        if not description:
            return cfg.title_base_height
        lines = math.ceil(len(description) / cfg.title_chars_per_line)
        return max(cfg.title_min_height, cfg.title_base_height + lines * cfg.title_line_height)

    def title_offset(self, description: str | None) -> int:
        """Vertical space the title block reserves above the content."""
        return self.height(description) + self.config.title_gap

    def add_title(self, title: str, description: str | None, state: PageState) -> int:
        cfg = self.config
        state.registry.add(
            state.ids.next_id(),
            state.layer_id,
            CellKind.TEXT,
            Point(cfg.page_margin, cfg.title_gap),
            Size(cfg.title_width, self.height(description)),
            value=self.markup(title, description),
            style=TITLE_STYLE,
        )
        return self.title_offset(description)

    @staticmethod
    def markup(title: str, description: str | None) -> str:
        value = f'<b style="font-size:16px">{html.escape(xml_text(title))}</b>'
        if description:
            value += f'<br><span style="font-size:12px;color:#666666">{html.escape(xml_text(description))}</span>'
        return value
