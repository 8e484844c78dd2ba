from __future__ import annotations

import pytest

from adapters.layout.sizing import SizeEstimator
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
)


def _resources(count: int, prefix: str = "vm") -> list[Resource]:
    return [Resource(type="vm", name=f"{prefix}-{idx}") for idx in range(count)]


@pytest.fixture
def estimator() -> SizeEstimator:
    return SizeEstimator()


def test_empty_containers_use_floors(estimator: SizeEstimator) -> None:
    cfg = LayoutConfig()
    assert estimator.subnet_size(Subnet(name="empty")) == Size(150, 160)
    assert estimator.vnet_size(VNet(name="v")) == cfg.vnet_floor
    assert estimator.vnet_size(VNet(type="hubVnet", name="h")) == Size(400, 170)
    assert estimator.resource_group_size(ResourceGroup(name="rg")) == cfg.resource_group_floor
    assert estimator.region_size(Region(name="r")) == cfg.region_floor
    assert estimator.subscription_size(Subscription()) == cfg.subscription_floor
    assert estimator.on_premises_size(OnPremises()) == Size(350, 200)


def test_resource_grid_shape(estimator: SizeEstimator) -> None:
    assert estimator.grid_shape(0, 4) == (0, 0)
    assert estimator.grid_shape(3, 4) == (3, 1)
    assert estimator.grid_shape(9, 4) == (4, 3)
    assert estimator.resource_grid_size(_resources(5), 4) == Size(520, 220)


def test_subnet_grows_with_resources(estimator: SizeEstimator) -> None:
    assert estimator.subnet_size(Subnet(name="s", resources=_resources(1))) == Size(160, 160)
    assert estimator.subnet_size(Subnet(name="s", resources=_resources(3))) == Size(290, 270)


def test_subnet_with_zones_is_widened(estimator: SizeEstimator) -> None:
    subnet = Subnet(
        name="app",
        availability_zones=[
            AvailabilityZoneGroup(zone="1", resources=_resources(1, "a")),
            AvailabilityZoneGroup(zone="2", resources=_resources(3, "b")),
        ],
    )
    zone_one = estimator.zone_group_size(subnet.availability_zones[0])
    zone_two = estimator.zone_group_size(subnet.availability_zones[1])
    assert zone_one == Size(160, 160)
    assert zone_two == Size(290, 270)

    size = estimator.subnet_size(subnet)
    assert size.width == 15 + (160 + 15) + (290 + 15) + 15
    assert size.height == 270 + 60


def test_subnet_with_zones_adds_loose_resource_rows(estimator: SizeEstimator) -> None:
    subnet = Subnet(
        name="app",
        availability_zones=[AvailabilityZoneGroup(zone=1, resources=_resources(1))],
        resources=_resources(3, "loose"),
    )
    assert estimator.subnet_size(subnet).height == 160 + (2 * 110 + 20) + 60


def test_hub_vnet_lays_subnets_side_by_side(estimator: SizeEstimator) -> None:
    subnets = [Subnet(name=f"s{idx}", resources=_resources(1, f"s{idx}")) for idx in range(3)]
    hub = VNet(type="hubVnet", name="hub", subnets=subnets)
    spoke = VNet(name="spoke", subnets=subnets)

    assert estimator.vnet_size(hub) == Size(40 + 3 * (160 + 20), 160 + 70)
    assert estimator.vnet_size(spoke) == Size(300, 60 + 3 * (160 + 20))


def test_resource_group_reserves_vnet_column(estimator: SizeEstimator) -> None:
    vnet = VNet(name="v", subnets=[Subnet(name="s", resources=_resources(2))])
    group = ResourceGroup(name="rg", resources=[vnet, *_resources(5, "x")])

    vnet_size = estimator.vnet_size(vnet)
    size = estimator.resource_group_size(group)

    assert size.width == vnet_size.width + (4 * 130 + 40) + 80
    assert size.height == max(200, vnet_size.height + 30 + 60, 2 * 110 + 90)


def test_region_counts_direct_resources(estimator: SizeEstimator) -> None:
    groups = [ResourceGroup(name="rg", resources=_resources(2))]
    without = estimator.region_size(Region(name="r", resource_groups=groups))
    with_direct = estimator.region_size(
        Region(name="r", resource_groups=groups, resources=_resources(9, "d"))
    )
    assert without == Size(440, 400)
    assert with_direct == Size(4 * 130 + 60, 80 + (200 + 40) + 3 * 110)


def test_subscription_prefers_regions(estimator: SizeEstimator) -> None:
    group = ResourceGroup(name="rg", resources=_resources(4))
    region = Region(name="r", resource_groups=[group])
    subscription = Subscription(resource_groups=[group], regions=[region])

    region_size = estimator.region_size(region)
    size = estimator.subscription_size(subscription)
    assert size == Size(100 + region_size.width + 60, region_size.height + 100)


def test_on_premises_height_follows_resources(estimator: SizeEstimator) -> None:
    assert estimator.on_premises_size(OnPremises(resources=_resources(3))) == Size(350, 350)


def test_size_of_dispatches_on_node_type(estimator: SizeEstimator) -> None:
    subnet = Subnet(name="s", resources=_resources(2))
    assert estimator.size_of(subnet) == estimator.subnet_size(subnet)
    assert estimator.size_of(OnPremises()) == estimator.on_premises_size(OnPremises())
    with pytest.raises(TypeError):
        estimator.size_of(Resource(type="vm", name="vm"))  # type: ignore[arg-type]


@pytest.mark.parametrize("extra", [1, 2, 5])
def test_adding_children_never_shrinks(estimator: SizeEstimator, extra: int) -> None:
    base_subnet = Subnet(name="s", resources=_resources(1))
    grown_subnet = Subnet(name="s", resources=_resources(1 + extra))
    base_vnet = VNet(name="v", subnets=[base_subnet])
    grown_vnet = VNet(name="v", subnets=[base_subnet, *[grown_subnet] * extra])
    base_group = ResourceGroup(name="rg", resources=[base_vnet])
    grown_group = ResourceGroup(name="rg", resources=[grown_vnet, *_resources(extra, "x")])
    base_region = Region(name="r", resource_groups=[base_group])
    grown_region = Region(
        name="r", resource_groups=[grown_group, base_group], resources=_resources(extra, "d")
    )

    pairs = [
        (estimator.subnet_size(base_subnet), estimator.subnet_size(grown_subnet)),
        (estimator.vnet_size(base_vnet), estimator.vnet_size(grown_vnet)),
        (estimator.resource_group_size(base_group), estimator.resource_group_size(grown_group)),
        (estimator.region_size(base_region), estimator.region_size(grown_region)),
        (
            estimator.subscription_size(Subscription(regions=[base_region])),
            estimator.subscription_size(Subscription(regions=[base_region, grown_region])),
        ),
    ]
    for before, after in pairs:
        assert after.width >= before.width
        assert after.height >= before.height
