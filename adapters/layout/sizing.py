from __future__ import annotations

import math
from collections.abc import Sequence

from domain.layout_config import LayoutConfig
from domain.models import (
    AvailabilityZoneGroup,
    OnPremises,
    Region,
    Resource,
    ResourceGroup,
    Size,
    Subnet,
    Subscription,
    VNet,
    VNetKind,
)


class SizeEstimator:
    """Bottom-up container sizes.

    Every size is derived only from the children's sizes and fixed paddings,
    so sizes never shrink when a child is added.
    """

    def __init__(self, config: LayoutConfig | None = None) -> None:
        self.config = config or LayoutConfig()

    def size_of(
        self,
        node: Subscription | Region | ResourceGroup | VNet | Subnet | AvailabilityZoneGroup | OnPremises,
    ) -> Size:
        if isinstance(node, Subscription):
            return self.subscription_size(node)
        if isinstance(node, Region):
            return self.region_size(node)
        if isinstance(node, ResourceGroup):
            return self.resource_group_size(node)
        if isinstance(node, VNet):
            return self.vnet_size(node)
        if isinstance(node, Subnet):
            return self.subnet_size(node)
        if isinstance(node, AvailabilityZoneGroup):
            return self.zone_group_size(node)
        if isinstance(node, OnPremises):
            return self.on_premises_size(node)
        raise TypeError(f"Unsupported container: {type(node).__name__}")

    def grid_shape(self, count: int, max_cols: int) -> tuple[int, int]:
        return min(count, max_cols), math.ceil(count / max_cols)

    def resource_grid_size(self, resources: Sequence[Resource], max_cols: int) -> Size:
        cols, rows = self.grid_shape(len(resources), max_cols)
        return Size(cols * self.config.col_width, rows * self.config.row_height)

    def zone_group_size(self, group: AvailabilityZoneGroup) -> Size:
        cfg = self.config
        cols, rows = self.grid_shape(len(group.resources), cfg.subnet_cols)
        return Size(
            max(cfg.zone_floor.width, cols * cfg.col_width + cfg.grid_padding),
            max(cfg.zone_floor.height, rows * cfg.row_height + cfg.grid_header),
        )

    def zone_section_height(self, subnet: Subnet) -> float:
        return max(
            (self.zone_group_size(group).height for group in subnet.availability_zones),
            default=0,
        )

    def subnet_size(self, subnet: Subnet) -> Size:
        cfg = self.config
        count = len(subnet.resources)
        cols, rows = self.grid_shape(count, cfg.subnet_cols)
        width = max(cfg.subnet_floor.width, cols * cfg.col_width + cfg.grid_padding)
        if not subnet.availability_zones:
            base_rows = math.ceil(max(1, count) / cfg.subnet_cols)
            height = max(cfg.subnet_floor.height, base_rows * cfg.row_height + cfg.grid_header)
            return Size(width, height)

        zones_width = cfg.subnet_inset + sum(
            self.zone_group_size(group).width + cfg.zone_gap for group in subnet.availability_zones
        )
        width = max(width, zones_width + cfg.subnet_inset)
        loose_height = rows * cfg.row_height + 20 if count else 0
        height = self.zone_section_height(subnet) + loose_height + cfg.zone_header
        return Size(width, max(cfg.subnet_floor.height, height))

    def vnet_size(self, vnet: VNet) -> Size:
        cfg = self.config
        subnet_sizes = [self.subnet_size(subnet) for subnet in vnet.subnets]
        if vnet.kind is VNetKind.HUB:
            width = 2 * cfg.vnet_origin_x + sum(size.width + cfg.subnet_gap for size in subnet_sizes)
            tallest = max((size.height for size in subnet_sizes), default=0)
            return Size(
                max(cfg.hub_vnet_floor.width, width),
                max(cfg.hub_vnet_floor.height, tallest) + cfg.hub_vnet_header,
            )
        widest = max((size.width + 2 * cfg.vnet_origin_x for size in subnet_sizes), default=0)
        height = cfg.vnet_header + sum(size.height + cfg.subnet_gap for size in subnet_sizes)
        return Size(max(cfg.vnet_floor.width, widest), max(cfg.vnet_floor.height, height))

    def vnet_column_width(self, group: ResourceGroup) -> float:
        return max((self.vnet_size(vnet).width for vnet in group.vnets()), default=0)

    def resource_group_size(self, group: ResourceGroup) -> Size:
        cfg = self.config
        others = group.other_resources()
        vnet_width = self.vnet_column_width(group)
        vnet_stack = sum(
            self.vnet_size(vnet).height + cfg.resource_group_vnet_gap for vnet in group.vnets()
        )
        grid = self.resource_grid_size(others, cfg.resource_group_cols)
        other_width = grid.width + 40 if others else 0
        other_height = grid.height + cfg.grid_header + 40
        return Size(
            max(cfg.resource_group_floor.width, vnet_width + other_width + cfg.resource_group_padding_x),
            max(cfg.resource_group_floor.height, vnet_stack + 60, other_height),
        )

    def region_size(self, region: Region) -> Size:
        cfg = self.config
        group_sizes = [self.resource_group_size(group) for group in region.resource_groups]
        direct = self.resource_grid_size(region.resources, cfg.resource_group_cols)
        width = max(
            cfg.region_floor.width,
            max((size.width + cfg.region_padding_x for size in group_sizes), default=0),
            direct.width + cfg.region_padding_x if region.resources else 0,
        )
        height = (
            cfg.region_header
            + sum(size.height + cfg.region_group_gap for size in group_sizes)
            + direct.height
        )
        return Size(width, max(cfg.region_floor.height, height))

    def subscription_size(self, subscription: Subscription) -> Size:
        cfg = self.config
        if subscription.regions:
            sizes = [self.region_size(region) for region in subscription.regions]
            gap = cfg.subscription_region_gap
        else:
            sizes = [self.resource_group_size(group) for group in subscription.resource_groups]
            gap = cfg.subscription_group_gap
        width = cfg.subscription_padding_x + sum(size.width + gap for size in sizes)
        tallest = max((size.height + cfg.subscription_padding_y for size in sizes), default=0)
        return Size(
            max(cfg.subscription_floor.width, width),
            max(cfg.subscription_floor.height, tallest),
        )

    def on_premises_size(self, on_premises: OnPremises) -> Size:
        cfg = self.config
        height = len(on_premises.resources) * cfg.on_premises_row + cfg.on_premises_header
        return Size(cfg.on_premises_width, max(cfg.on_premises_min_height, height))
