from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Discriminator,
    Field,
    Tag,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

DEFAULT_TITLE = "Azure Architecture"
DEFAULT_SUBSCRIPTION_NAME = "Azure Subscription"
VNET_TYPES = frozenset({"vnet", "hubVnet"})

Scalar = str | bool | int | float | None
Properties = dict[str, Scalar]


class ConnectionStyle(str, Enum):
    PLAIN = "plain"
    DASHED = "dashed"
    EXPRESSROUTE = "expressroute"
    VPN = "vpn"
    PEERING = "peering"


class VNetKind(str, Enum):
    STANDARD = "standard"
    HUB = "hub"


class SchemaModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )


class Resource(SchemaModel):
    type: str = Field(..., min_length=1)
    name: str
    properties: Properties = Field(default_factory=dict)


class AvailabilityZoneGroup(SchemaModel):
    zone: str
    resources: list[Resource] = Field(default_factory=list)

    @field_validator("zone", mode="before")
    @classmethod
    def coerce_zone(cls, value: object) -> str:
        return str(value)


class Subnet(SchemaModel):
    name: str
    address_prefix: str | None = None
    availability_zones: list[AvailabilityZoneGroup] = Field(default_factory=list)
    resources: list[Resource] = Field(default_factory=list)
    properties: Properties = Field(default_factory=dict)

    def display_prefix(self) -> str | None:
        if self.address_prefix:
            return self.address_prefix
        raw = self.properties.get("addressPrefix")
        return str(raw) if raw else None


class VNet(SchemaModel):
    type: Literal["vnet", "hubVnet"] = "vnet"
    name: str
    address_space: str | None = None
    subnets: list[Subnet] = Field(default_factory=list)
    properties: Properties = Field(default_factory=dict)

    @property
    def kind(self) -> VNetKind:
        return VNetKind.HUB if self.type == "hubVnet" else VNetKind.STANDARD

    def display_address_space(self) -> str | None:
        if self.address_space:
            return self.address_space
        raw = self.properties.get("addressSpace")
        return str(raw) if raw else None


def _group_member_tag(value: Any) -> str:
    kind = value.get("type") if isinstance(value, dict) else getattr(value, "type", None)
    return "vnet" if kind in VNET_TYPES else "resource"


GroupMember = Annotated[
    Union[Annotated[VNet, Tag("vnet")], Annotated[Resource, Tag("resource")]],
    Discriminator(_group_member_tag),
]


class ResourceGroup(SchemaModel):
    name: str = "Resource Group"
    resources: list[GroupMember] = Field(default_factory=list)

    def vnets(self) -> list[VNet]:
        return [member for member in self.resources if isinstance(member, VNet)]

    def other_resources(self) -> list[Resource]:
        return [member for member in self.resources if isinstance(member, Resource)]


class Region(SchemaModel):
    name: str
    is_primary: bool = False
    resource_groups: list[ResourceGroup] = Field(default_factory=list)
    resources: list[Resource] = Field(default_factory=list)

    def label(self) -> str:
        return f"{self.name} (Primary)" if self.is_primary else self.name


class Subscription(SchemaModel):
    name: str = "Subscription"
    resource_groups: list[ResourceGroup] = Field(default_factory=list)
    regions: list[Region] = Field(default_factory=list)


class Connection(SchemaModel):
    from_: str = Field(..., alias="from")
    to: str
    style: ConnectionStyle | None = None
    label: str | None = None


class OnPremises(SchemaModel):
    name: str = "On-Premises"
    resources: list[Resource] = Field(default_factory=list)


class _CloudRoots(SchemaModel):
    subscription: Subscription | None = None
    subscriptions: list[Subscription] = Field(default_factory=list)
    regions: list[Region] = Field(default_factory=list)
    connections: list[Connection] = Field(default_factory=list)
    global_resources: list[Resource] = Field(default_factory=list)
    on_premises: list[OnPremises] = Field(default_factory=list)

    @model_validator(mode="after")
    def ensure_single_cloud_root(self) -> _CloudRoots:
        roots = [
            name
            for name, present in (
                ("subscription", self.subscription is not None),
                ("subscriptions", bool(self.subscriptions)),
                ("regions", bool(self.regions)),
            )
            if present
        ]
        if len(roots) > 1:
            msg = f"Only one of subscription/subscriptions/regions may be set, got: {roots}"
            raise ValueError(msg)
        return self


class DiagramPage(_CloudRoots):
    name: str
    description: str | None = None
    resource_groups: list[ResourceGroup] = Field(default_factory=list)

    @model_validator(mode="after")
    def ensure_resource_groups_stand_alone(self) -> DiagramPage:
        if self.resource_groups and (
            self.subscription is not None or self.subscriptions or self.regions
        ):
            msg = f"Page {self.name!r}: resourceGroups cannot be combined with another cloud root"
            raise ValueError(msg)
        return self

    def to_architecture(self) -> Architecture:
        subscription = self.subscription
        if self.resource_groups:
            subscription = Subscription(
                name=DEFAULT_SUBSCRIPTION_NAME,
                resource_groups=list(self.resource_groups),
            )
        return Architecture(
            title=self.name,
            description=self.description,
            subscription=subscription,
            subscriptions=self.subscriptions,
            regions=self.regions,
            connections=self.connections,
            global_resources=self.global_resources,
            on_premises=self.on_premises,
        )


class Architecture(_CloudRoots):
    title: str = DEFAULT_TITLE
    description: str | None = None
    pages: list[DiagramPage] = Field(default_factory=list)

    def page_architectures(self) -> list[Architecture]:
        if not self.pages:
            return [self]
        return [page.to_architecture() for page in self.pages]


@dataclass(frozen=True)
class Point:
    x: float
    y: float


@dataclass(frozen=True)
class Size:
    width: float
    height: float


@dataclass(frozen=True)
class Bounds:
    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def center(self) -> Point:
        return Point(self.x + self.width / 2, self.y + self.height / 2)

    def contains(self, other: Bounds) -> bool:
        return (
            other.x >= self.x
            and other.y >= self.y
            and other.right <= self.right
            and other.bottom <= self.bottom
        )


@dataclass(frozen=True)
class PageLayout:
    content: Bounds | None
