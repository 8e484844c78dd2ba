from __future__ import annotations

import logging
from collections.abc import Sequence

from domain.catalog import edge_style
from domain.labels import html_label
from domain.models import Bounds, Connection, Point
from domain.services.cell_registry import PageState, PlacedCell, PlacedEdge

logger = logging.getLogger(__name__)

SEPARATION_THRESHOLD = 100.0
CORRIDOR_MARGIN = 50.0
DETOUR_CLEARANCE = 40.0
DETOUR_STYLE = "exitX=1;exitY=0.5;exitDx=0;exitDy=0;entryX=1;entryY=0.5;entryDx=0;entryDy=0;"


class ConnectionRouter:
    """Resolves symbolic connections against the page registry and emits edges.

    Edges between vertically distant endpoints detour around any container in
    the straight corridor between them by leaving and entering on the right
    edge, beyond the rightmost obstruction.
    """

    def route(self, connections: Sequence[Connection], state: PageState) -> list[PlacedEdge]:
        edges: list[PlacedEdge] = []
        for connection in connections:
            edge = self.route_one(connection, state)
            if edge is not None:
                edges.append(edge)
        return edges

    def route_one(self, connection: Connection, state: PageState) -> PlacedEdge | None:
        registry = state.registry
        source = registry.resolve(connection.from_)
        target = registry.resolve(connection.to)
        if source is None or target is None:
            logger.warning(
                "Skipping connection %r -> %r: unresolved endpoint %r",
                connection.from_,
                connection.to,
                connection.from_ if source is None else connection.to,
            )
            return None

        style = edge_style(connection.style)
        waypoints: tuple[Point, ...] = ()
        obstructions = self.find_obstructions(source, target, state)
        if obstructions:
            style += DETOUR_STYLE
            waypoints = self._detour(source.bounds, target.bounds, obstructions)

        edge = registry.add_edge(
            PlacedEdge(
                cell_id=state.ids.next_id(),
                parent_id=state.layer_id,
                style=style,
                value=html_label(connection.label) if connection.label else "",
                source_id=source.cell_id,
                target_id=target.cell_id,
                waypoints=waypoints,
            )
        )
        if connection.style is not None:
            state.used_connection_styles.add(connection.style)
        return edge

    def find_obstructions(
        self, source: PlacedCell, target: PlacedCell, state: PageState
    ) -> list[PlacedCell]:
        src_center = source.bounds.center
        tgt_center = target.bounds.center
        if abs(src_center.y - tgt_center.y) < SEPARATION_THRESHOLD:
            return []

        registry = state.registry
        excluded = registry.ancestor_ids(source.cell_id) | registry.ancestor_ids(target.cell_id)
        top, bottom = sorted((src_center.y, tgt_center.y))
        corridor_left = min(src_center.x, tgt_center.x) - CORRIDOR_MARGIN
        corridor_right = max(src_center.x, tgt_center.x) + CORRIDOR_MARGIN

        obstructions: list[PlacedCell] = []
        for container in registry.containers():
            if container.cell_id in excluded:
                continue
            bounds = container.bounds
            if source.bounds.contains(bounds) or target.bounds.contains(bounds):
                continue
            if not top < bounds.center.y < bottom:
                continue
            if bounds.right < corridor_left or bounds.x > corridor_right:
                continue
            obstructions.append(container)
        return obstructions

    def _detour(
        self, source: Bounds, target: Bounds, obstructions: Sequence[PlacedCell]
    ) -> tuple[Point, Point]:
        rightmost = max(
            source.right,
            target.right,
            *(cell.bounds.right for cell in obstructions),
        )
        x = rightmost + DETOUR_CLEARANCE
        return Point(x, source.center.y), Point(x, target.center.y)
