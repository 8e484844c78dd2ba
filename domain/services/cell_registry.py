from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum

from domain.errors import StructuralError
from domain.models import Bounds, ConnectionStyle, Point, Resource, Size

MAX_DEPTH = 64


class CellKind(str, Enum):
    SUBSCRIPTION = "subscription"
    REGION = "region"
    RESOURCE_GROUP = "resource_group"
    VNET = "vnet"
    SUBNET = "subnet"
    AVAILABILITY_ZONE = "availability_zone"
    ON_PREMISES = "on_premises"
    LEGEND = "legend"
    RESOURCE = "resource"
    ICON = "icon"
    TEXT = "text"


CONTAINER_KINDS = frozenset(
    {
        CellKind.SUBSCRIPTION,
        CellKind.REGION,
        CellKind.RESOURCE_GROUP,
        CellKind.VNET,
        CellKind.SUBNET,
        CellKind.AVAILABILITY_ZONE,
        CellKind.ON_PREMISES,
        CellKind.LEGEND,
    }
)


@dataclass(frozen=True)
class PlacedCell:
    cell_id: str
    parent_id: str
    kind: CellKind
    position: Point
    size: Size
    bounds: Bounds
    value: str = ""
    style: str = ""
    resource: Resource | None = None

    @property
    def is_container(self) -> bool:
        return self.kind in CONTAINER_KINDS


@dataclass(frozen=True)
class PlacedEdge:
    cell_id: str
    parent_id: str
    style: str
    value: str = ""
    source_id: str | None = None
    target_id: str | None = None
    waypoints: tuple[Point, ...] = ()
    source_point: Point | None = None
    target_point: Point | None = None
    width: float | None = None


class CellIdGenerator:
    def __init__(self, prefix: str) -> None:
        self.prefix = prefix
        self._counter = 0

    @property
    def root_id(self) -> str:
        return f"{self.prefix}-root"

    @property
    def layer_id(self) -> str:
        return f"{self.prefix}-layer"

    @property
    def diagram_id(self) -> str:
        return f"{self.prefix}-diagram"

    def next_id(self) -> str:
        self._counter += 1
        return f"{self.prefix}-cell-{self._counter}"


class CellRegistry:
    """Arena of placed cells for one page, indexed by id and by name.

    Parents must be registered before their children, which keeps the
    registry order valid for serialization and lets absolute bounds be
    computed from the parent's cached bounds.
    """

    def __init__(self, layer_id: str) -> None:
        self.layer_id = layer_id
        self._cells: dict[str, PlacedCell] = {}
        self._names: dict[str, str] = {}
        self._entries: list[PlacedCell | PlacedEdge] = []

    def __len__(self) -> int:
        return len(self._cells)

    def __contains__(self, cell_id: object) -> bool:
        return cell_id in self._cells

    def origin_of(self, cell_id: str) -> Point:
        if cell_id == self.layer_id:
            return Point(0.0, 0.0)
        cell = self._cells.get(cell_id)
        if cell is None:
            raise StructuralError(f"Parent cell {cell_id!r} is not registered")
        return Point(cell.bounds.x, cell.bounds.y)

    def add(
        self,
        cell_id: str,
        parent_id: str,
        kind: CellKind,
        position: Point,
        size: Size,
        *,
        value: str = "",
        style: str = "",
        resource: Resource | None = None,
    ) -> PlacedCell:
        if cell_id == parent_id:
            raise StructuralError(f"Cell {cell_id!r} cannot be its own parent")
        if cell_id in self._cells or cell_id == self.layer_id:
            raise StructuralError(f"Cell id {cell_id!r} is already registered")
        origin = self.origin_of(parent_id)
        cell = PlacedCell(
            cell_id=cell_id,
            parent_id=parent_id,
            kind=kind,
            position=position,
            size=size,
            bounds=Bounds(origin.x + position.x, origin.y + position.y, size.width, size.height),
            value=value,
            style=style,
            resource=resource,
        )
        self._cells[cell_id] = cell
        self._entries.append(cell)
        return cell

    def add_edge(self, edge: PlacedEdge) -> PlacedEdge:
        if edge.cell_id in self._cells or edge.cell_id == self.layer_id:
            raise StructuralError(f"Cell id {edge.cell_id!r} is already registered")
        self.origin_of(edge.parent_id)
        for endpoint in (edge.source_id, edge.target_id):
            if endpoint is not None and endpoint not in self._cells:
                raise StructuralError(f"Edge {edge.cell_id!r} references unknown cell {endpoint!r}")
        self._entries.append(edge)
        return edge

    def entries(self) -> Iterator[PlacedCell | PlacedEdge]:
        yield from self._entries

    def edges(self) -> Iterator[PlacedEdge]:
        return (entry for entry in self._entries if isinstance(entry, PlacedEdge))

    def register_name(self, name: str, cell_id: str) -> None:
        if cell_id not in self._cells:
            raise StructuralError(f"Cannot name unknown cell {cell_id!r}")
        self._names[name] = cell_id

    def get(self, cell_id: str) -> PlacedCell:
        return self._cells[cell_id]

    def cells(self) -> Iterator[PlacedCell]:
        yield from self._cells.values()

    def containers(self) -> Iterator[PlacedCell]:
        return (cell for cell in self._cells.values() if cell.is_container)

    def names(self) -> Iterator[tuple[str, PlacedCell]]:
        for name, cell_id in self._names.items():
            yield name, self._cells[cell_id]

    def ancestor_ids(self, cell_id: str) -> set[str]:
        """Ids of the cell and every container above it."""
        ids = {cell_id}
        current = self._cells[cell_id]
        for _ in range(MAX_DEPTH):
            parent_id = current.parent_id
            if parent_id == self.layer_id:
                return ids
            if parent_id in ids:
                raise StructuralError(f"Containment cycle detected at {parent_id!r}")
            ids.add(parent_id)
            current = self._cells[parent_id]
        raise StructuralError(f"Cell {cell_id!r} is nested deeper than {MAX_DEPTH} levels")

    def resolve(self, name: str) -> PlacedCell | None:
        """Find a named cell: exact, then case-insensitive, then substring match."""
        if not name:
            return None
        cell_id = self._names.get(name)
        if cell_id is not None:
            return self._cells[cell_id]

        lowered = name.lower()
        for key, candidate in self._names.items():
            if key.lower() == lowered:
                return self._cells[candidate]

        # e.g. "On-Premises" matches "On-Premises Datacenter"
        for key, candidate in self._names.items():
            key_lowered = key.lower()
            if key_lowered and (lowered in key_lowered or key_lowered in lowered):
                return self._cells[candidate]
        return None


@dataclass
class PageState:
    page_index: int
    ids: CellIdGenerator = field(init=False)
    registry: CellRegistry = field(init=False)
    used_resource_types: set[str] = field(default_factory=set)
    used_connection_styles: set[ConnectionStyle] = field(default_factory=set)

    def __post_init__(self) -> None:
        self.ids = CellIdGenerator(f"p{self.page_index}")
        self.registry = CellRegistry(self.ids.layer_id)

    @property
    def layer_id(self) -> str:
        return self.ids.layer_id
