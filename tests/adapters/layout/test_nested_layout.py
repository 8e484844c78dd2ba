from __future__ import annotations

import logging

import pytest

from adapters.layout.nested import NestedLayoutEngine
from domain.models import Architecture, Bounds, Point
from domain.services.cell_registry import CellKind, PageState, PlacedCell
from tests.helpers.architecture_fixtures import place


def _cell(state: PageState, name: str) -> PlacedCell:
    cell = state.registry.resolve(name)
    assert cell is not None, name
    return cell


def test_every_cell_lies_inside_its_parent(hub_spoke: Architecture) -> None:
    state = place(hub_spoke)
    for cell in state.registry.cells():
        if cell.parent_id == state.layer_id:
            continue
        parent = state.registry.get(cell.parent_id)
        assert parent.bounds.contains(cell.bounds), (cell.cell_id, cell.kind, parent.kind)


def test_three_tier_containment_chain(three_tier: Architecture) -> None:
    state = place(three_tier)
    registry = state.registry

    agw = _cell(state, "agw-web")
    subnet = _cell(state, "subnet-web")
    vnet = _cell(state, "vnet-main")
    group = _cell(state, "rg-production")
    subscription = _cell(state, "Production Subscription")

    assert agw.parent_id == subnet.cell_id
    assert subnet.parent_id == vnet.cell_id
    assert vnet.parent_id == group.cell_id
    assert group.parent_id == subscription.cell_id
    assert subscription.parent_id == state.layer_id
    assert registry.ancestor_ids(agw.cell_id) == {
        agw.cell_id,
        subnet.cell_id,
        vnet.cell_id,
        group.cell_id,
        subscription.cell_id,
    }


def test_root_placed_below_title_offset(three_tier: Architecture) -> None:
    state = place(three_tier, top=40)
    subscription = _cell(state, "Production Subscription")
    assert subscription.position == Point(50, 90)


def test_resource_group_grid_starts_after_vnet_column(three_tier: Architecture) -> None:
    engine = NestedLayoutEngine()
    state = PageState(0)
    engine.place_page(three_tier, state, 40)

    group_model = three_tier.subscription.resource_groups[0]
    column = engine.estimator.vnet_column_width(group_model)
    vnet = _cell(state, "vnet-main")
    storage = _cell(state, "stproddata01")
    kv = _cell(state, "kv-prod-secrets")
    acr = _cell(state, "acrprod")

    assert vnet.position == Point(20, 40)
    assert storage.position == Point(column + 50, 50)
    assert kv.position == Point(column + 50 + 3 * 130, 50)
    assert acr.position == Point(column + 50, 50 + 110)


def test_standard_vnet_stacks_subnets_vertically(three_tier: Architecture) -> None:
    state = place(three_tier)
    web = _cell(state, "subnet-web")
    app = _cell(state, "subnet-app")
    assert web.position == Point(20, 50)
    assert app.position.x == 20
    assert app.position.y == 50 + web.size.height + 20


def test_hub_vnet_places_subnets_left_to_right(hub_spoke: Architecture) -> None:
    state = place(hub_spoke)
    gateway = _cell(state, "GatewaySubnet-weu")
    firewall = _cell(state, "AzureFirewallSubnet-weu")
    assert gateway.position == Point(20, 50)
    assert firewall.position == Point(20 + gateway.size.width + 20, 50)


def test_vnet_label_and_icon(three_tier: Architecture) -> None:
    state = place(three_tier)
    vnet = _cell(state, "vnet-main")
    assert vnet.value == "vnet-main<br>(10.0.0.0/16)"
    icons = [
        cell
        for cell in state.registry.cells()
        if cell.parent_id == vnet.cell_id and cell.kind is CellKind.ICON
    ]
    assert len(icons) == 1
    assert icons[0].position == Point(vnet.size.width - 80, 5)


def test_availability_zone_groups_are_named_per_subnet(hub_spoke: Architecture) -> None:
    state = place(hub_spoke)
    subnet = _cell(state, "subnet-app-weu")
    zone_one = _cell(state, "AZ-1-subnet-app-weu")
    zone_two = _cell(state, "AZ-2-subnet-app-weu")

    assert zone_one.kind is CellKind.AVAILABILITY_ZONE
    assert zone_one.parent_id == subnet.cell_id
    assert zone_one.value == "Availability Zone 1"
    assert zone_one.position == Point(15, 45)
    assert zone_two.position == Point(15 + zone_one.size.width + 15, 45)
    assert _cell(state, "vm-weu-02").parent_id == zone_two.cell_id
    assert _cell(state, "vm-weu-02").position == Point(15, 40)


def test_region_label_marks_primary(hub_spoke: Architecture) -> None:
    state = place(hub_spoke)
    region = _cell(state, "West Europe")
    assert region.kind is CellKind.REGION
    assert region.value == "West Europe (Primary)"
    groups = [cell for cell in state.registry.cells() if cell.parent_id == region.cell_id]
    assert groups[0].position == Point(30, 50)


def test_on_premises_below_cloud_content(hub_spoke: Architecture) -> None:
    state = place(hub_spoke)
    region = _cell(state, "West Europe")
    on_prem = _cell(state, "On-Premises Datacenter")
    assert on_prem.kind is CellKind.ON_PREMISES
    assert on_prem.position.y == region.bounds.bottom + 60
    assert on_prem.position.x >= 50
    server = _cell(state, "dc-app-01")
    assert server.position == Point(120, 50)


def test_global_resources_precede_cloud_content() -> None:
    architecture = Architecture.model_validate(
        {
            "globalResources": [
                {"type": "frontDoor", "name": "afd-global"},
                {"type": "trafficManager", "name": "tm-global"},
            ],
            "regions": [{"name": "North Europe"}],
        }
    )
    state = place(architecture, top=40)
    front_door = _cell(state, "afd-global")
    traffic = _cell(state, "tm-global")
    region = _cell(state, "North Europe")

    assert front_door.position == Point(50, 50)
    assert traffic.position == Point(150, 50)
    assert region.position == Point(50, 50 + 40 + 110)
    assert front_door.cell_id == "p0-cell-1"


def test_regions_are_laid_out_left_to_right() -> None:
    architecture = Architecture.model_validate(
        {"regions": [{"name": "West Europe"}, {"name": "North Europe"}]}
    )
    state = place(architecture)
    west = _cell(state, "West Europe")
    north = _cell(state, "North Europe")
    assert north.position.x == west.bounds.right + 80
    assert north.position.y == west.position.y


def test_unknown_resource_type_is_skipped(caplog: pytest.LogCaptureFixture) -> None:
    architecture = Architecture.model_validate(
        {
            "subscription": {
                "resourceGroups": [
                    {
                        "name": "rg",
                        "resources": [
                            {"type": "quantumComputer", "name": "qpu"},
                            {"type": "vm", "name": "vm-after"},
                        ],
                    }
                ]
            }
        }
    )
    with caplog.at_level(logging.WARNING):
        state = place(architecture)

    assert state.registry.resolve("qpu") is None
    assert "quantumComputer" in caplog.text
    assert state.used_resource_types == {"vm"}
    # the unknown resource still occupies its grid slot
    assert _cell(state, "vm-after").position == Point(20 + 130, 50)


def test_empty_architecture_places_nothing() -> None:
    state = place(Architecture())
    layout = NestedLayoutEngine().place_page(Architecture(), PageState(1), 40)
    assert len(state.registry) == 0
    assert layout.content is None


def test_page_layout_reports_content_bounds(three_tier: Architecture) -> None:
    state = PageState(0)
    layout = NestedLayoutEngine().place_page(three_tier, state, 40)
    subscription = _cell(state, "Production Subscription")
    assert layout.content == subscription.bounds
    assert isinstance(layout.content, Bounds)
