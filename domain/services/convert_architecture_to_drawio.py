from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from dataclasses import dataclass

from domain.labels import format_scalar, sanitize_attribute_name, xml_text
from domain.models import DEFAULT_TITLE, Architecture, Point
from domain.ports.layout import LayoutEngine
from domain.services.cell_registry import PageState, PlacedCell, PlacedEdge
from domain.services.connection_routing import ConnectionRouter
from domain.services.diagram_legend import DiagramLegendBuilder
from domain.services.diagram_title import DiagramTitleBuilder

logger = logging.getLogger(__name__)

GRAPH_MODEL_ATTRIBUTES: dict[str, str] = {
    "dx": "1426",
    "dy": "798",
    "grid": "1",
    "gridSize": "10",
    "guides": "1",
    "tooltips": "1",
    "connect": "1",
    "arrows": "1",
    "fold": "1",
    "page": "1",
    "pageScale": "1",
    "math": "0",
    "shadow": "0",
}


@dataclass(frozen=True)
class DocumentOptions:
    host: str = "app.diagrams.net"
    agent: str = "az-arch-gen"
    version: str = "24.7.17"
    default_title: str = DEFAULT_TITLE
    pretty_print: bool = False


@dataclass(frozen=True)
class DrawioPage:
    name: str
    diagram_id: str
    root_id: str
    layer_id: str
    width: float
    height: float
    entries: tuple[PlacedCell | PlacedEdge, ...]


@dataclass(frozen=True)
class DrawioDocument:
    pages: tuple[DrawioPage, ...]
    options: DocumentOptions = DocumentOptions()

    def to_element(self) -> ET.Element:
        mxfile = ET.Element(
            "mxfile",
            {
                "host": self.options.host,
                "agent": self.options.agent,
                "version": self.options.version,
                "type": "device",
            },
        )
        for page in self.pages:
            _page_element(mxfile, page)
        return mxfile

    def to_xml(self) -> str:
        root = self.to_element()
        if self.options.pretty_print:
            ET.indent(root, space="  ")
        return ET.tostring(root, encoding="unicode")


class ArchitectureToDrawioConverter:
    def __init__(self, layout_engine: LayoutEngine, options: DocumentOptions | None = None) -> None:
        self.layout_engine = layout_engine
        self.options = options or DocumentOptions()
        self.title_builder = DiagramTitleBuilder(layout_engine.config)
        self.legend_builder = DiagramLegendBuilder(layout_engine.config)
        self.router = ConnectionRouter()

    def convert(self, architecture: Architecture) -> DrawioDocument:
        pages = tuple(
            self.convert_page(page, index)
            for index, page in enumerate(architecture.page_architectures())
        )
        return DrawioDocument(pages=pages, options=self.options)

    def convert_page(self, architecture: Architecture, page_index: int) -> DrawioPage:
        state = PageState(page_index)
        title = xml_text(architecture.title).strip() or self.options.default_title

        title_offset = self.title_builder.add_title(title, architecture.description, state)
        layout = self.layout_engine.place_page(architecture, state, title_offset)
        edges = self.router.route(architecture.connections, state)

        legend = self.legend_builder.collect(state)
        legend_size = self.legend_builder.size(legend)
        canvas = self.legend_builder.canvas_size(layout, legend_size, title_offset)
        self.legend_builder.add_legend(legend, state, canvas.width, title_offset)

        logger.debug(
            "Page %d %r: %d cells, %d of %d connections drawn",
            page_index,
            title,
            len(state.registry),
            len(edges),
            len(architecture.connections),
        )
        return DrawioPage(
            name=title,
            diagram_id=state.ids.diagram_id,
            root_id=state.ids.root_id,
            layer_id=state.layer_id,
            width=canvas.width,
            height=canvas.height,
            entries=tuple(state.registry.entries()),
        )


def _page_element(mxfile: ET.Element, page: DrawioPage) -> None:
    diagram = ET.SubElement(mxfile, "diagram", {"id": page.diagram_id, "name": page.name})
    model = ET.SubElement(
        diagram,
        "mxGraphModel",
        {
            **GRAPH_MODEL_ATTRIBUTES,
            "pageWidth": _number(page.width),
            "pageHeight": _number(page.height),
        },
    )
    root = ET.SubElement(model, "root")
    ET.SubElement(root, "mxCell", {"id": page.root_id})
    ET.SubElement(root, "mxCell", {"id": page.layer_id, "parent": page.root_id})
    for entry in page.entries:
        if isinstance(entry, PlacedEdge):
            _edge_element(root, entry)
        elif entry.resource is not None:
            _resource_element(root, entry)
        else:
            _vertex_element(root, entry, {"id": entry.cell_id, "value": entry.value})


def _vertex_element(parent: ET.Element, cell: PlacedCell, attributes: dict[str, str]) -> None:
    element = ET.SubElement(
        parent,
        "mxCell",
        {**attributes, "style": cell.style, "vertex": "1", "parent": cell.parent_id},
    )
    ET.SubElement(
        element,
        "mxGeometry",
        {
            "x": _number(cell.position.x),
            "y": _number(cell.position.y),
            "width": _number(cell.size.width),
            "height": _number(cell.size.height),
            "as": "geometry",
        },
    )


def _resource_element(parent: ET.Element, cell: PlacedCell) -> None:
    attributes = {"label": cell.value, "id": cell.cell_id}
    if cell.resource is not None:
        for key, value in cell.resource.properties.items():
            if value is None:
                continue
            name = sanitize_attribute_name(key)
            if name is None or name in attributes:
                continue
            attributes[name] = format_scalar(value)
    wrapper = ET.SubElement(parent, "object", attributes)
    _vertex_element(wrapper, cell, {})


def _edge_element(parent: ET.Element, edge: PlacedEdge) -> None:
    attributes = {
        "id": edge.cell_id,
        "value": edge.value,
        "style": edge.style,
        "edge": "1",
        "parent": edge.parent_id,
    }
    if edge.source_id is not None:
        attributes["source"] = edge.source_id
    if edge.target_id is not None:
        attributes["target"] = edge.target_id
    element = ET.SubElement(parent, "mxCell", attributes)

    geometry_attributes = {"relative": "1", "as": "geometry"}
    if edge.width is not None:
        geometry_attributes = {"width": _number(edge.width), "height": "0", **geometry_attributes}
    geometry = ET.SubElement(element, "mxGeometry", geometry_attributes)
    if edge.source_point is not None:
        _point_element(geometry, edge.source_point, "sourcePoint")
    if edge.target_point is not None:
        _point_element(geometry, edge.target_point, "targetPoint")
    if edge.waypoints:
        points = ET.SubElement(geometry, "Array", {"as": "points"})
        for waypoint in edge.waypoints:
            _point_element(points, waypoint)


def _point_element(parent: ET.Element, point: Point, role: str | None = None) -> None:
    attributes = {"x": _number(point.x), "y": _number(point.y)}
    if role is not None:
        attributes["as"] = role
    ET.SubElement(parent, "mxPoint", attributes)


def _number(value: float) -> str:
    return format_scalar(value)
