"""Types describing services, their ports and override configuration."""

from __future__ import annotations

import copy
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from operkit.overrides import EmbeddedLabelsAnnotations, merge_maps

ANNOTATION_INGRESS_CREATE_KEY = "core.openstack.org/ingress_create"
ANNOTATION_INGRESS_TARGET_PORT_NAME_KEY = "core.openstack.org/ingress_target_port_name"
ANNOTATION_ENDPOINT_KEY = "endpoint"
ANNOTATION_HOSTNAME_KEY = "dnsmasq.network.openstack.org/hostname"

METALLB_ADDRESS_POOL_ANNOTATION = "metallb.universe.tf/address-pool"
METALLB_ALLOW_SHARED_IP_ANNOTATION = "metallb.universe.tf/allow-shared-ip"
METALLB_LOADBALANCER_IPS = "metallb.universe.tf/loadBalancerIPs"


class Endpoint(str, Enum):
    """Kind of API endpoint a service is exposed as."""

    ADMIN = "admin"
    INTERNAL = "internal"
    PUBLIC = "public"

    def __str__(self) -> str:
        return self.value


class Protocol(str, Enum):
    """Protocol of an endpoint; ``NONE`` means no scheme at all."""

    HTTP = "http"
    HTTPS = "https"
    NONE = ""

    def __str__(self) -> str:
        return self.value


@dataclass
class GenericServicePort:
    """A single named service port (superseded by a list of port documents)."""

    name: str = ""
    port: int = 0
    protocol: str = ""


@dataclass
class GenericServiceDetails:
    """Inputs for building a ClusterIP service."""

    name: str
    namespace: str
    labels: dict[str, str] | None = None
    selector: dict[str, str] | None = None
    port: GenericServicePort = field(default_factory=GenericServicePort)
    ports: list[dict[str, Any]] = field(default_factory=list)
    cluster_ip: str = ""
    publish_not_ready_addresses: bool = False


@dataclass
class MetalLBServiceDetails:
    """Inputs for building a LoadBalancer service announced by MetalLB."""

    name: str
    namespace: str
    annotations: dict[str, str] | None = None
    labels: dict[str, str] | None = None
    selector: dict[str, str] | None = None
    port: GenericServicePort = field(default_factory=GenericServicePort)
    ports: list[dict[str, Any]] = field(default_factory=list)


# (attribute, serialised key, whether the empty string counts as unset)
_OVERRIDE_FIELDS: tuple[tuple[str, str, bool], ...] = (
    ("type", "type", True),
    ("session_affinity", "sessionAffinity", True),
    ("load_balancer_source_ranges", "loadBalancerSourceRanges", True),
    ("external_name", "externalName", True),
    ("external_traffic_policy", "externalTrafficPolicy", True),
    ("session_affinity_config", "sessionAffinityConfig", False),
    ("ip_family_policy", "ipFamilyPolicy", False),
    ("load_balancer_class", "loadBalancerClass", False),
    ("internal_traffic_policy", "internalTrafficPolicy", False),
)


@dataclass
class OverrideServiceSpec:
    """The subset of a service spec that may be overridden."""

    type: str = ""
    session_affinity: str = ""
    load_balancer_source_ranges: list[str] = field(default_factory=list)
    external_name: str = ""
    external_traffic_policy: str = ""
    session_affinity_config: dict[str, Any] | None = None
    ip_family_policy: str | None = None
    load_balancer_class: str | None = None
    internal_traffic_policy: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Return the serialised form, leaving out unset fields."""
        data: dict[str, Any] = {}
        for attr, key, empty_is_unset in _OVERRIDE_FIELDS:
            value = getattr(self, attr)
            if value is None or (empty_is_unset and not value):
                continue
            data[key] = copy.deepcopy(value)
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> OverrideServiceSpec:
        """Build from a spec document, ignoring fields outside the subset."""
        if not isinstance(data, Mapping):
            raise TypeError(f"data must be a mapping, not {type(data).__name__}")
        kwargs = {
            attr: copy.deepcopy(data[key])
            for attr, key, _ in _OVERRIDE_FIELDS
            if data.get(key) is not None
        }
        return cls(**kwargs)


@dataclass
class OverrideSpec:
    """Override configuration for a generated service."""

    metadata: EmbeddedLabelsAnnotations | None = None
    spec: OverrideServiceSpec | None = None

    def add_annotation(self, annotations: dict[str, str]) -> None:
        """Add annotations; existing keys keep their values."""
        if self.metadata is None:
            self.metadata = EmbeddedLabelsAnnotations()
        self.metadata.annotations = merge_maps(self.metadata.annotations, annotations)

    def add_label(self, labels: dict[str, str]) -> None:
        """Add labels; existing keys keep their values."""
        if self.metadata is None:
            self.metadata = EmbeddedLabelsAnnotations()
        self.metadata.labels = merge_maps(self.metadata.labels, labels)

    @property
    def labels(self) -> dict[str, str] | None:
        """Override labels, if any."""
        return self.metadata.labels if self.metadata is not None else None

    @property
    def annotations(self) -> dict[str, str] | None:
        """Override annotations, if any."""
        return self.metadata.annotations if self.metadata is not None else None

    def to_dict(self) -> dict[str, Any]:
        """Return the serialised form, leaving out unset parts."""
        data: dict[str, Any] = {}
        if self.metadata is not None:
            data["metadata"] = self.metadata.to_dict()
        if self.spec is not None:
            data["spec"] = self.spec.to_dict()
        return data


@dataclass
class RoutedOverrideSpec(OverrideSpec):
    """Service override that may also fix the endpoint URL explicitly."""

    endpoint_url: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Return the serialised form, leaving out unset parts."""
        data = super().to_dict()
        if self.endpoint_url is not None:
            data["endpointURL"] = self.endpoint_url
        return data