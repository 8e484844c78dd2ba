from __future__ import annotations

from dataclasses import dataclass

from domain.catalog import CONNECTION_STYLES, CONTAINER_STYLES, ResourceDefinition, resource_definition
from domain.labels import html_label
from domain.layout_config import LayoutConfig
from domain.models import ConnectionStyle, PageLayout, Point, Size
from domain.services.cell_registry import CellKind, PageState, PlacedCell, PlacedEdge

LEGEND_ICON_STYLE = "aspect=fixed;html=1;points=[];align=center;image;image={icon};"
LEGEND_TEXT_STYLE = "text;html=1;align=left;verticalAlign=middle;fontSize=11;fontStyle=0;"
LEGEND_HEADER_STYLE = "text;html=1;align=left;verticalAlign=middle;fontSize=11;"
LEGEND_ICON_SIZE = Size(20, 20)
LEGEND_INSET = 8
LEGEND_LABEL_X = 34
LEGEND_LABEL_WIDTH = 170
LEGEND_SAMPLE_LENGTH = 22
LEGEND_SAMPLE_WIDTH = 40


@dataclass(frozen=True)
class LegendContent:
    resources: tuple[tuple[str, ResourceDefinition], ...]
    connections: tuple[ConnectionStyle, ...]

    @property
    def is_empty(self) -> bool:
        return not self.resources and not self.connections


class DiagramLegendBuilder:
    """Legend listing what a page actually shows, plus the page canvas size."""

    def __init__(self, config: LayoutConfig | None = None) -> None:
        self.config = config or LayoutConfig()

    def collect(self, state: PageState) -> LegendContent:
        resources = []
        for resource_type in state.used_resource_types:
            definition = resource_definition(resource_type)
            if definition is not None:
                resources.append((resource_type, definition))
        resources.sort(key=lambda item: (item[1].display_name.lower(), item[0]))
        connections = tuple(
            style for style in CONNECTION_STYLES if style in state.used_connection_styles
        )
        return LegendContent(resources=tuple(resources), connections=connections)

    def size(self, content: LegendContent) -> Size | None:
        if content.is_empty:
            return None
        cfg = self.config
        height = cfg.legend_header + len(content.resources) * cfg.legend_item_height + 10
        if content.connections:
            height += cfg.legend_section_gap + len(content.connections) * cfg.legend_item_height
        return Size(cfg.legend_width, height)

    def canvas_size(self, layout: PageLayout, legend: Size | None, title_offset: float) -> Size:
        cfg = self.config
        width = float(cfg.min_page_width)
        height = float(cfg.min_page_height)
        content_right = cfg.page_margin
        if layout.content is not None:
            content_right = layout.content.right
            height = max(height, layout.content.bottom + cfg.page_bottom_padding)
        if legend is not None:
            width = max(width, content_right + cfg.legend_gap + cfg.legend_offset)
            legend_bottom = self.anchor_y(title_offset) + legend.height
            height = max(height, legend_bottom + cfg.page_margin)
        elif layout.content is not None:
            width = max(width, content_right + cfg.page_margin)
        return Size(width, height)

    def anchor_y(self, title_offset: float) -> float:
        return self.config.page_margin + title_offset

    def add_legend(
        self, content: LegendContent, state: PageState, page_width: float, title_offset: float
    ) -> PlacedCell | None:
        size = self.size(content)
        if size is None:
            return None
        cfg = self.config
        registry = state.registry
        legend = registry.add(
            state.ids.next_id(),
            state.layer_id,
            CellKind.LEGEND,
            Point(page_width - cfg.legend_offset, self.anchor_y(title_offset)),
            size,
            value="Legend",
            style=CONTAINER_STYLES["legend"],
        )

        y = cfg.legend_header
        for _, definition in content.resources:
            registry.add(
                state.ids.next_id(),
                legend.cell_id,
                CellKind.ICON,
                Point(LEGEND_INSET, y),
                LEGEND_ICON_SIZE,
                style=LEGEND_ICON_STYLE.format(icon=definition.icon),
            )
            self._add_label(state, legend.cell_id, y, html_label(definition.display_name))
            y += cfg.legend_item_height

        if content.connections:
            y += 10
            registry.add(
                state.ids.next_id(),
                legend.cell_id,
                CellKind.TEXT,
                Point(LEGEND_INSET, y - 5),
                Size(190, 15),
                value="<b>Connections</b>",
                style=LEGEND_HEADER_STYLE,
            )
            y += 18
            for style in content.connections:
                convention = CONNECTION_STYLES[style]
                sample_style = (
                    f"endArrow=classic;html=1;strokeColor={convention.color};strokeWidth=2;"
                )
                if convention.dashed:
                    sample_style += "dashed=1;"
                registry.add_edge(
                    PlacedEdge(
                        cell_id=state.ids.next_id(),
                        parent_id=legend.cell_id,
                        style=sample_style,
                        source_point=Point(LEGEND_INSET, y + 10),
                        target_point=Point(LEGEND_INSET + LEGEND_SAMPLE_LENGTH, y + 10),
                        width=LEGEND_SAMPLE_WIDTH,
                    )
                )
                self._add_label(state, legend.cell_id, y, html_label(convention.legend_label))
                y += cfg.legend_item_height
        return legend

    def _add_label(self, state: PageState, parent_id: str, y: float, text: str) -> None:
        state.registry.add(
            state.ids.next_id(),
            parent_id,
            CellKind.TEXT,
            Point(LEGEND_LABEL_X, y),
            Size(LEGEND_LABEL_WIDTH, LEGEND_ICON_SIZE.height),
            value=text,
            style=LEGEND_TEXT_STYLE,
        )
