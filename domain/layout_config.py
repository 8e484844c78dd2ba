from __future__ import annotations

from dataclasses import dataclass

from domain.models import Size


@dataclass(frozen=True)
class LayoutConfig:
    col_width: int = 130
    row_height: int = 110
    resource_group_cols: int = 4
    subnet_cols: int = 2

    page_margin: int = 50
    min_page_width: int = 1500
    min_page_height: int = 800
    page_bottom_padding: int = 100
    root_gap: int = 80

    title_width: int = 800
    title_chars_per_line: int = 100
    title_line_height: int = 18
    title_base_height: int = 30
    title_min_height: int = 60
    title_gap: int = 10

    global_resource_step: int = 100
    global_band_height: int = 110

    subscription_floor: Size = Size(400, 200)
    subscription_padding_x: int = 100
    subscription_padding_y: int = 100
    subscription_origin_x: int = 70
    subscription_origin_y: int = 50
    subscription_group_gap: int = 40
    subscription_region_gap: int = 60

    region_floor: Size = Size(400, 400)
    region_padding_x: int = 60
    region_header: int = 80
    region_origin_x: int = 30
    region_origin_y: int = 50
    region_group_gap: int = 40

    resource_group_floor: Size = Size(300, 200)
    resource_group_padding_x: int = 80
    resource_group_vnet_x: int = 20
    resource_group_vnet_y: int = 40
    resource_group_vnet_gap: int = 30
    resource_group_grid_gap: int = 50
    resource_group_grid_y: int = 50

    hub_vnet_floor: Size = Size(400, 100)
    vnet_floor: Size = Size(300, 150)
    vnet_header: int = 60
    hub_vnet_header: int = 70
    vnet_origin_x: int = 20
    vnet_origin_y: int = 50
    subnet_gap: int = 20

    subnet_floor: Size = Size(150, 100)
    subnet_inset: int = 15
    subnet_grid_y: int = 45
    zone_floor: Size = Size(150, 110)
    zone_gap: int = 15
    zone_grid_y: int = 40
    zone_section_gap: int = 55
    zone_header: int = 60

    grid_padding: int = 30
    grid_header: int = 50

    on_premises_width: int = 350
    on_premises_pitch: int = 400
    on_premises_min_height: int = 200
    on_premises_row: int = 90
    on_premises_header: int = 80
    on_premises_gap: int = 60
    on_premises_resource_x: int = 120
    on_premises_resource_y: int = 50
    on_premises_resource_step: int = 85

    legend_width: int = 210
    legend_offset: int = 230
    legend_header: int = 30
    legend_item_height: int = 28
    legend_section_gap: int = 20
    legend_gap: int = 40
