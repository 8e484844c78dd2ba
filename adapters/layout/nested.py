from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from adapters.layout.sizing import SizeEstimator
from domain.catalog import CONTAINER_STYLES, resource_definition
from domain.labels import html_label, resource_label
from domain.layout_config import LayoutConfig
from domain.models import (
    Architecture,
    AvailabilityZoneGroup,
    Bounds,
    OnPremises,
    PageLayout,
    Point,
    Region,
    Resource,
    ResourceGroup,
    Size,
    Subnet,
    Subscription,
    VNet,
    VNetKind,
)
from domain.ports.layout import LayoutEngine
from domain.services.cell_registry import CellKind, PageState, PlacedCell

logger = logging.getLogger(__name__)

SUBSCRIPTION_ICON = (Point(10, 30), Size(44, 71))
ON_PREMISES_ICON = (Point(20, 40), Size(80, 138))
VNET_ICON_SIZE = Size(67, 40)
VNET_ICON_INSET = Point(80, 5)

RESOURCE_STYLE = (
    "aspect=fixed;html=1;points=[];align=center;image;fontSize=11;imageAlign=center;"
    "verticalLabelPosition=bottom;verticalAlign=top;image={icon};"
)
ICON_STYLE = "aspect=fixed;html=1;points=[];align=center;image;fontSize=12;image={icon};"


class NestedLayoutEngine(LayoutEngine):
    """Places the fixed containment tree top-down.

    Sizes come from :class:`SizeEstimator`; every placement is written to the
    page registry, which resolves absolute bounds from the parent's cached
    bounds.
    """

    def __init__(self, config: LayoutConfig | None = None) -> None:
        self.config = config or LayoutConfig()
        self.estimator = SizeEstimator(self.config)

    def place_page(self, architecture: Architecture, state: PageState, top: float) -> PageLayout:
        cfg = self.config
        placed: list[PlacedCell | None] = []

        cloud_top = cfg.page_margin + top
        if architecture.global_resources:
            placed.extend(
                self._place_global_resources(
                    architecture.global_resources, state, cfg.title_gap + top
                )
            )
            cloud_top += cfg.global_band_height

        roots = self._place_cloud_roots(architecture, state, Point(cfg.page_margin, cloud_top))
        placed.extend(roots)

        if architecture.on_premises:
            cloud_right = max((cell.bounds.right for cell in roots), default=cfg.page_margin)
            cloud_bottom = max((cell.bounds.bottom for cell in roots), default=cloud_top)
            placed.extend(
                self._place_on_premises_row(
                    architecture.on_premises,
                    state,
                    cloud_left=cfg.page_margin,
                    cloud_right=cloud_right,
                    y=cloud_bottom + cfg.on_premises_gap,
                )
            )

        return PageLayout(content=_union(cell.bounds for cell in placed if cell is not None))

    def _place_cloud_roots(
        self, architecture: Architecture, state: PageState, origin: Point
    ) -> list[PlacedCell]:
        cfg = self.config
        roots: list[PlacedCell] = []
        x = origin.x
        if architecture.regions:
            for region in architecture.regions:
                cell = self._place_region(region, state.layer_id, Point(x, origin.y), state)
                roots.append(cell)
                x += cell.size.width + cfg.root_gap
        elif architecture.subscription is not None:
            roots.append(
                self._place_subscription(architecture.subscription, Point(x, origin.y), state)
            )
        else:
            for subscription in architecture.subscriptions:
                cell = self._place_subscription(subscription, Point(x, origin.y), state)
                roots.append(cell)
                x += cell.size.width + cfg.root_gap
        return roots

    def _place_subscription(
        self, subscription: Subscription, position: Point, state: PageState
    ) -> PlacedCell:
        cfg = self.config
        cell = self._add_container(
            state,
            state.layer_id,
            CellKind.SUBSCRIPTION,
            position,
            self.estimator.subscription_size(subscription),
            label=subscription.name,
            style=CONTAINER_STYLES["subscription"],
        )
        self._add_icon(state, cell.cell_id, "subscription", *SUBSCRIPTION_ICON)

        x = cfg.subscription_origin_x
        y = cfg.subscription_origin_y
        if subscription.regions:
            for region in subscription.regions:
                placed = self._place_region(region, cell.cell_id, Point(x, y), state)
                x += placed.size.width + cfg.subscription_region_gap
        else:
            for group in subscription.resource_groups:
                placed = self._place_resource_group(group, cell.cell_id, Point(x, y), state)
                x += placed.size.width + cfg.subscription_group_gap
        return cell

    def _place_region(
        self, region: Region, parent_id: str, position: Point, state: PageState
    ) -> PlacedCell:
        cfg = self.config
        cell = self._add_container(
            state,
            parent_id,
            CellKind.REGION,
            position,
            self.estimator.region_size(region),
            label=region.label(),
            style=CONTAINER_STYLES["region"],
            name=region.name,
        )
        y = cfg.region_origin_y
        for group in region.resource_groups:
            placed = self._place_resource_group(
                group, cell.cell_id, Point(cfg.region_origin_x, y), state
            )
            y += placed.size.height + cfg.region_group_gap
        self._place_grid(
            region.resources,
            cell.cell_id,
            Point(cfg.region_origin_x, y),
            cfg.resource_group_cols,
            state,
        )
        return cell

    def _place_resource_group(
        self, group: ResourceGroup, parent_id: str, position: Point, state: PageState
    ) -> PlacedCell:
        cfg = self.config
        cell = self._add_container(
            state,
            parent_id,
            CellKind.RESOURCE_GROUP,
            position,
            self.estimator.resource_group_size(group),
            label=group.name,
            style=CONTAINER_STYLES["resourceGroup"],
        )
        vnets = group.vnets()
        y = cfg.resource_group_vnet_y
        for vnet in vnets:
            placed = self._place_vnet(vnet, cell.cell_id, Point(cfg.resource_group_vnet_x, y), state)
            y += placed.size.height + cfg.resource_group_vnet_gap

        grid_x = (
            self.estimator.vnet_column_width(group) + cfg.resource_group_grid_gap
            if vnets
            else cfg.resource_group_vnet_x
        )
        self._place_grid(
            group.other_resources(),
            cell.cell_id,
            Point(grid_x, cfg.resource_group_grid_y),
            cfg.resource_group_cols,
            state,
        )
        return cell

    def _place_vnet(self, vnet: VNet, parent_id: str, position: Point, state: PageState) -> PlacedCell:
        cfg = self.config
        size = self.estimator.vnet_size(vnet)
        is_hub = vnet.kind is VNetKind.HUB
        address_space = vnet.display_address_space()
        cell = self._add_container(
            state,
            parent_id,
            CellKind.VNET,
            position,
            size,
            label=f"{vnet.name}\n({address_space})" if address_space else vnet.name,
            style=CONTAINER_STYLES["vnetHub" if is_hub else "vnet"],
            name=vnet.name,
        )
        self._add_icon(
            state,
            cell.cell_id,
            "vnet",
            Point(size.width - VNET_ICON_INSET.x, VNET_ICON_INSET.y),
            VNET_ICON_SIZE,
        )

        x = cfg.vnet_origin_x
        y = cfg.vnet_origin_y
        for subnet in vnet.subnets:
            placed = self._place_subnet(subnet, cell.cell_id, Point(x, y), state)
            if is_hub:
                x += placed.size.width + cfg.subnet_gap
            else:
                y += placed.size.height + cfg.subnet_gap
        return cell

    def _place_subnet(
        self, subnet: Subnet, parent_id: str, position: Point, state: PageState
    ) -> PlacedCell:
        cfg = self.config
        size = self.estimator.subnet_size(subnet)
        prefix = subnet.display_prefix()
        cell = self._add_container(
            state,
            parent_id,
            CellKind.SUBNET,
            position,
            size,
            label=f"{subnet.name}\n({prefix})" if prefix else subnet.name,
            style=CONTAINER_STYLES["subnet"],
            name=subnet.name,
        )

        x = cfg.subnet_inset
        for group in subnet.availability_zones:
            placed = self._place_zone_group(group, subnet, cell.cell_id, Point(x, cfg.subnet_grid_y), state)
            x += placed.size.width + cfg.zone_gap

        grid_y = (
            self.estimator.zone_section_height(subnet) + cfg.zone_section_gap
            if subnet.availability_zones
            else cfg.subnet_grid_y
        )
        self._place_grid(
            subnet.resources,
            cell.cell_id,
            Point(cfg.subnet_inset, grid_y),
            self._fitting_columns(size.width),
            state,
        )
        return cell

    def _place_zone_group(
        self,
        group: AvailabilityZoneGroup,
        subnet: Subnet,
        parent_id: str,
        position: Point,
        state: PageState,
    ) -> PlacedCell:
        cfg = self.config
        size = self.estimator.zone_group_size(group)
        cell = self._add_container(
            state,
            parent_id,
            CellKind.AVAILABILITY_ZONE,
            position,
            size,
            label=f"Availability Zone {group.zone}",
            style=CONTAINER_STYLES["availabilityZone"],
            name=f"AZ-{group.zone}-{subnet.name}",
        )
        self._place_grid(
            group.resources,
            cell.cell_id,
            Point(cfg.subnet_inset, cfg.zone_grid_y),
            self._fitting_columns(size.width),
            state,
        )
        return cell

    def _place_on_premises_row(
        self,
        blocks: Sequence[OnPremises],
        state: PageState,
        *,
        cloud_left: float,
        cloud_right: float,
        y: float,
    ) -> list[PlacedCell]:
        cfg = self.config
        row_width = (len(blocks) - 1) * cfg.on_premises_pitch + cfg.on_premises_width
        x = max(cfg.page_margin, cloud_left + (cloud_right - cloud_left - row_width) // 2)
        placed: list[PlacedCell] = []
        for block in blocks:
            placed.append(self._place_on_premises(block, Point(x, y), state))
            x += cfg.on_premises_pitch
        return placed

    def _place_on_premises(self, block: OnPremises, position: Point, state: PageState) -> PlacedCell:
        cfg = self.config
        cell = self._add_container(
            state,
            state.layer_id,
            CellKind.ON_PREMISES,
            position,
            self.estimator.on_premises_size(block),
            label=block.name,
            style=CONTAINER_STYLES["onPremises"],
        )
        self._add_icon(state, cell.cell_id, "onPremises", *ON_PREMISES_ICON)
        for idx, resource in enumerate(block.resources):
            self._place_resource(
                resource,
                cell.cell_id,
                Point(
                    cfg.on_premises_resource_x,
                    cfg.on_premises_resource_y + idx * cfg.on_premises_resource_step,
                ),
                state,
            )
        return cell

    def _place_global_resources(
        self, resources: Sequence[Resource], state: PageState, y: float
    ) -> list[PlacedCell | None]:
        cfg = self.config
        return [
            self._place_resource(
                resource,
                state.layer_id,
                Point(cfg.page_margin + idx * cfg.global_resource_step, y),
                state,
            )
            for idx, resource in enumerate(resources)
        ]

    def _place_grid(
        self,
        resources: Sequence[Resource],
        parent_id: str,
        origin: Point,
        max_cols: int,
        state: PageState,
    ) -> None:
        cfg = self.config
        # Skipped resources keep their slot so the estimated size still holds.
        for idx, resource in enumerate(resources):
            row, col = divmod(idx, max_cols)
            self._place_resource(
                resource,
                parent_id,
                Point(origin.x + col * cfg.col_width, origin.y + row * cfg.row_height),
                state,
            )

    def _fitting_columns(self, width: float) -> int:
        cfg = self.config
        return max(cfg.subnet_cols, int((width - cfg.grid_padding) // cfg.col_width))

    def _place_resource(
        self, resource: Resource, parent_id: str, position: Point, state: PageState
    ) -> PlacedCell | None:
        definition = resource_definition(resource.type)
        if definition is None:
            logger.warning("Unknown resource type %r for %r, skipping", resource.type, resource.name)
            return None
        state.used_resource_types.add(resource.type)
        cell = state.registry.add(
            state.ids.next_id(),
            parent_id,
            CellKind.RESOURCE,
            position,
            Size(definition.width, definition.height),
            value=resource_label(resource.name, resource.properties),
            style=RESOURCE_STYLE.format(icon=definition.icon),
            resource=resource,
        )
        state.registry.register_name(resource.name, cell.cell_id)
        return cell

    def _add_container(
        self,
        state: PageState,
        parent_id: str,
        kind: CellKind,
        position: Point,
        size: Size,
        *,
        label: str,
        style: str,
        name: str | None = None,
    ) -> PlacedCell:
        cell = state.registry.add(
            state.ids.next_id(),
            parent_id,
            kind,
            position,
            size,
            value=html_label(label),
            style=style,
        )
        state.registry.register_name(name if name is not None else label, cell.cell_id)
        return cell

    def _add_icon(
        self, state: PageState, parent_id: str, icon_type: str, position: Point, size: Size
    ) -> PlacedCell | None:
        definition = resource_definition(icon_type)
        if definition is None:
            return None
        return state.registry.add(
            state.ids.next_id(),
            parent_id,
            CellKind.ICON,
            position,
            size,
            style=ICON_STYLE.format(icon=definition.icon),
        )


def _union(bounds: Iterable[Bounds]) -> Bounds | None:
    items = list(bounds)
    if not items:
        return None
    left = min(item.x for item in items)
    top = min(item.y for item in items)
    right = max(item.right for item in items)
    bottom = max(item.bottom for item in items)
    return Bounds(left, top, right - left, bottom - top)
