"""Pydantic schemas for resource declarations."""

from __future__ import annotations

from enum import Enum
from typing import Any, ClassVar, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from shipyard.core.errors import (
    ConfigLoadError,
    MalformedAddressError,
    UnknownResourceTypeError,
)
from shipyard.core.status import Status

ADDRESS_SEPARATOR = "."

# The name comes from the block label and every resource starts pending creation
RESERVED_ATTRIBUTES = ("name", "status")


class ResourceType(str, Enum):
    """Resource variant tags, used as the type segment of an address."""

    NETWORK = "network"
    CLUSTER = "cluster"
    CONTAINER = "container"
    HELM = "helm"
    K8S_CONFIG = "k8s_config"
    INGRESS = "ingress"
    DOCS = "docs"
    EXEC_LOCAL = "exec_local"
    EXEC_REMOTE = "exec_remote"


def parse_address(raw: str) -> tuple[str, str]:
    """
    Split an address into its (type, name) pair.

    The address must contain exactly one separator with a non-empty
    segment on each side.

    Raises:
        MalformedAddressError: for anything else
    """
    if not isinstance(raw, str):
        raise MalformedAddressError(repr(raw))
    parts = raw.split(ADDRESS_SEPARATOR)
    if len(parts) != 2 or not parts[0] or not parts[1]:
        raise MalformedAddressError(raw)
    return parts[0], parts[1]


def format_address(resource_type: ResourceType | str, name: str) -> str:
    """Build a ``type.name`` address."""
    if isinstance(resource_type, ResourceType):
        resource_type = resource_type.value
    return f"{resource_type}{ADDRESS_SEPARATOR}{name}"


class Volume(BaseModel):
    """A host path mounted into a container."""

    source: str
    destination: str


class Port(BaseModel):
    """A port exposed by an ingress or container."""

    local: int
    remote: int | None = None
    host: int | None = None
    protocol: Literal["tcp", "udp"] = "tcp"


class Resource(BaseModel):
    """
    Common identity of every resource variant.

    Only these fields are read by the registry, resolver and graph builder;
    variant attributes are opaque to them. ``status`` is the one field the
    apply engine mutates after loading.
    """

    model_config = ConfigDict(extra="forbid", validate_assignment=True)

    # Attributes holding paths that the loader makes absolute
    path_fields: ClassVar[tuple[str, ...]] = ()
    # Attributes holding addresses of other resources
    reference_fields: ClassVar[tuple[str, ...]] = ()

    name: str = Field(min_length=1, frozen=True)
    type: ResourceType = Field(frozen=True)
    status: Status = Status.PENDING_CREATION
    depends_on: list[str] = Field(default_factory=list)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Names can not contain the address separator."""
        if ADDRESS_SEPARATOR in v:
            raise ValueError(f"Resource name can not contain '{ADDRESS_SEPARATOR}': {v}")
        return v

    @property
    def address(self) -> str:
        return format_address(self.type, self.name)

    def references(self) -> dict[str, str]:
        """Reference attributes that are set, as field -> address."""
        refs = {}
        for field in self.reference_fields:
            value = getattr(self, field)
            if value:
                refs[field] = value
        return refs

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.address}, status={self.status.value})"


class Network(Resource):
    type: Literal[ResourceType.NETWORK] = Field(default=ResourceType.NETWORK, frozen=True)
    subnet: str | None = None


class Cluster(Resource):
    """A Kubernetes cluster running in Docker."""

    reference_fields: ClassVar[tuple[str, ...]] = ("network",)

    type: Literal[ResourceType.CLUSTER] = Field(default=ResourceType.CLUSTER, frozen=True)
    driver: Literal["k3s"] = "k3s"
    version: str | None = None
    nodes: int = Field(default=1, ge=1)
    network: str | None = None
    image: str | None = None
    volumes: list[Volume] = Field(default_factory=list)
    environment: dict[str, str] = Field(default_factory=dict)


class Container(Resource):
    reference_fields: ClassVar[tuple[str, ...]] = ("network",)

    type: Literal[ResourceType.CONTAINER] = Field(default=ResourceType.CONTAINER, frozen=True)
    image: str
    command: list[str] = Field(default_factory=list)
    network: str | None = None
    ip_address: str | None = None
    volumes: list[Volume] = Field(default_factory=list)
    ports: list[Port] = Field(default_factory=list)
    environment: dict[str, str] = Field(default_factory=dict)


class Helm(Resource):
    """A helm chart release installed into a cluster."""

    path_fields: ClassVar[tuple[str, ...]] = ("chart", "values")
    reference_fields: ClassVar[tuple[str, ...]] = ("cluster",)

    type: Literal[ResourceType.HELM] = Field(default=ResourceType.HELM, frozen=True)
    cluster: str | None = None
    chart: str = ""
    values: str = ""


class K8sConfig(Resource):
    """Kubernetes manifests applied to a cluster."""

    path_fields: ClassVar[tuple[str, ...]] = ("paths",)
    reference_fields: ClassVar[tuple[str, ...]] = ("cluster",)

    type: Literal[ResourceType.K8S_CONFIG] = Field(default=ResourceType.K8S_CONFIG, frozen=True)
    cluster: str | None = None
    paths: list[str] = Field(default_factory=list)
    wait_until_ready: bool = True


class Ingress(Resource):
    """Exposes a service of a cluster or container on the local machine."""

    reference_fields: ClassVar[tuple[str, ...]] = ("target", "network")

    type: Literal[ResourceType.INGRESS] = Field(default=ResourceType.INGRESS, frozen=True)
    target: str | None = None
    service: str | None = None
    network: str | None = None
    ip_address: str | None = None
    ports: list[Port] = Field(default_factory=list)


class Docs(Resource):
    """A documentation site served from a local folder."""

    path_fields: ClassVar[tuple[str, ...]] = ("path",)
    reference_fields: ClassVar[tuple[str, ...]] = ("network",)

    type: Literal[ResourceType.DOCS] = Field(default=ResourceType.DOCS, frozen=True)
    path: str = ""
    port: int = 80
    network: str | None = None
    image: str | None = None


class ExecLocal(Resource):
    """A script run on the local machine."""

    path_fields: ClassVar[tuple[str, ...]] = ("script",)

    type: Literal[ResourceType.EXEC_LOCAL] = Field(default=ResourceType.EXEC_LOCAL, frozen=True)
    script: str = ""
    arguments: list[str] = Field(default_factory=list)
    environment: dict[str, str] = Field(default_factory=dict)


class ExecRemote(Resource):
    """A script run inside a container attached to a target or network."""

    path_fields: ClassVar[tuple[str, ...]] = ("script",)
    reference_fields: ClassVar[tuple[str, ...]] = ("target", "network")

    type: Literal[ResourceType.EXEC_REMOTE] = Field(default=ResourceType.EXEC_REMOTE, frozen=True)
    target: str | None = None
    network: str | None = None
    image: str | None = None
    script: str = ""
    arguments: list[str] = Field(default_factory=list)
    volumes: list[Volume] = Field(default_factory=list)
    environment: dict[str, str] = Field(default_factory=dict)


RESOURCE_TYPES: dict[ResourceType, type[Resource]] = {
    ResourceType.NETWORK: Network,
    ResourceType.CLUSTER: Cluster,
    ResourceType.CONTAINER: Container,
    ResourceType.HELM: Helm,
    ResourceType.K8S_CONFIG: K8sConfig,
    ResourceType.INGRESS: Ingress,
    ResourceType.DOCS: Docs,
    ResourceType.EXEC_LOCAL: ExecLocal,
    ResourceType.EXEC_REMOTE: ExecRemote,
}


def resource_class(resource_type: ResourceType | str) -> type[Resource]:
    """Look up the variant class registered for a type tag."""
    try:
        return RESOURCE_TYPES[ResourceType(resource_type)]
    except ValueError:
        raise UnknownResourceTypeError(str(resource_type)) from None


def new_resource(resource_type: ResourceType | str, name: str, **attributes: Any) -> Resource:
    """
    Construct a resource variant from its type tag, name and attributes.

    Raises:
        ConfigLoadError: if the attributes try to set the name or status
        UnknownResourceTypeError: for an unknown type tag
    """
    cls = resource_class(resource_type)
    for key in RESERVED_ATTRIBUTES:
        if key in attributes:
            raise ConfigLoadError(
                f"Block {format_address(resource_type, name)} can not declare '{key}'"
            )
    attributes.pop("type", None)
    return cls(name=name, **attributes)


class Blueprint(BaseModel):
    """Descriptive metadata for a set of resources."""

    title: str | None = None
    author: str | None = None
    slug: str | None = None
    intro: str | None = None
    browser_windows: list[str] = Field(default_factory=list)
    environment: dict[str, str] = Field(default_factory=dict)
