"""Services: building service documents and deriving endpoints from them."""

from __future__ import annotations

import copy
from datetime import timedelta
from typing import Any
from urllib.parse import urlsplit, urlunsplit

from operkit.overrides import merge_maps, strategic_merge
from operkit.service_types import (
    GenericServiceDetails,
    MetalLBServiceDetails,
    OverrideServiceSpec,
    OverrideSpec,
    Protocol,
)

SERVICE_TYPE_CLUSTER_IP = "ClusterIP"
SERVICE_TYPE_LOAD_BALANCER = "LoadBalancer"


def _parse_url(raw: str) -> str:
    """Parse and normalise a URL, raising ValueError if it is malformed."""
    try:
        parts = urlsplit(raw)
        # Accessing the port validates it.
        parts.port
    except ValueError as exc:
        raise ValueError(f"invalid URL {raw!r}: {exc}") from exc
    return urlunsplit(parts)


class Service:
    """A service document together with its requeue timeout."""

    def __init__(
        self,
        service: dict[str, Any],
        timeout: timedelta | float,
        override: OverrideSpec | None = None,
    ) -> None:
        self._service = service
        self._timeout = timeout if isinstance(timeout, timedelta) else timedelta(seconds=timeout)
        meta = service.get("metadata", {})
        self._service_hostname = f"{meta.get('name', '')}.{meta.get('namespace', '')}.svc"

        if override is None:
            return
        if override.metadata is not None:
            if override.metadata.labels is not None:
                self._metadata()["labels"] = merge_maps(override.metadata.labels, self.labels)
            if override.metadata.annotations is not None:
                self._metadata()["annotations"] = merge_maps(
                    override.metadata.annotations, self.annotations
                )
        if override.spec is not None:
            self._service["spec"] = strategic_merge(
                self._service.get("spec"), override.spec.to_dict()
            )

    def _metadata(self) -> dict[str, Any]:
        return self._service.setdefault("metadata", {})

    @property
    def timeout(self) -> timedelta:
        """Delay before a reconcile is retried."""
        return self._timeout

    @property
    def service_hostname(self) -> str:
        """Cluster-internal hostname of the service."""
        return self._service_hostname

    @property
    def service_hostname_port(self) -> tuple[str, str]:
        """Hostname and the port named like the service, or an empty port."""
        name = self._service.get("metadata", {}).get("name", "")
        port = services_port_details(self._service, name)
        if port is not None:
            return self._service_hostname, str(port.get("port", 0))
        return self._service_hostname, ""

    @property
    def labels(self) -> dict[str, str] | None:
        """Labels of the service."""
        return self._service.get("metadata", {}).get("labels")

    @property
    def annotations(self) -> dict[str, str] | None:
        """Annotations of the service."""
        return self._service.get("metadata", {}).get("annotations")

    @property
    def spec(self) -> dict[str, Any]:
        """A copy of the service spec."""
        return copy.deepcopy(self._service.get("spec", {}))

    @property
    def service_type(self) -> str:
        """Type of the service spec."""
        return self._service.get("spec", {}).get("type", "")

    def add_annotation(self, annotations: dict[str, str]) -> None:
        """Add annotations; existing keys keep their values."""
        self._metadata()["annotations"] = merge_maps(self.annotations, annotations)

    def api_endpoint(
        self,
        endpoint_url: str | None,
        protocol: Protocol | str | None,
        path: str = "",
    ) -> str:
        """Return the API endpoint URL of the service with ``path`` appended.

        An explicit ``endpoint_url`` wins; otherwise the URL is built from the
        service hostname and port, leaving out the default port of the protocol.
        """
        if endpoint_url is not None:
            return _parse_url(endpoint_url) + path

        proto = Protocol(protocol) if protocol is not None else None
        hostname, port = self.service_hostname_port
        if (proto is Protocol.HTTP and port == "80") or (
            proto is Protocol.HTTPS and port == "443"
        ):
            url = f"{endpoint_protocol(proto)}{hostname}"
        else:
            url = f"{endpoint_protocol(proto)}{hostname}:{port}"
        # The path is appended unparsed: placeholders such as %(project_id)s
        # must stay unencoded.
        return _parse_url(url) + path

    def to_override_service_spec(self) -> OverrideServiceSpec:
        """Return the overridable subset of the service spec."""
        return OverrideServiceSpec.from_dict(self.spec)


def _ports(details: GenericServiceDetails | MetalLBServiceDetails) -> list[dict[str, Any]]:
    if details.ports:
        return [dict(p) for p in details.ports]
    return [
        {
            "name": details.port.name,
            "port": details.port.port,
            "protocol": details.port.protocol,
        }
    ]


def generic_service(details: GenericServiceDetails) -> dict[str, Any]:
    """Build a ClusterIP service document."""
    metadata: dict[str, Any] = {"name": details.name, "namespace": details.namespace}
    if details.labels is not None:
        metadata["labels"] = details.labels
    spec: dict[str, Any] = {"ports": _ports(details), "type": SERVICE_TYPE_CLUSTER_IP}
    if details.selector is not None:
        spec["selector"] = details.selector
    if details.cluster_ip:
        spec["clusterIP"] = details.cluster_ip
    if details.publish_not_ready_addresses:
        spec["publishNotReadyAddresses"] = True
    return {"metadata": metadata, "spec": spec}


def metallb_service(details: MetalLBServiceDetails) -> dict[str, Any]:
    """Build a LoadBalancer service document."""
    metadata: dict[str, Any] = {"name": details.name, "namespace": details.namespace}
    if details.annotations is not None:
        metadata["annotations"] = details.annotations
    if details.labels is not None:
        metadata["labels"] = details.labels
    spec: dict[str, Any] = {"ports": _ports(details), "type": SERVICE_TYPE_LOAD_BALANCER}
    if details.selector is not None:
        spec["selector"] = details.selector
    return {"metadata": metadata, "spec": spec}


def services_port_details(service: dict[str, Any], port_name: str) -> dict[str, Any] | None:
    """Return a copy of the service port called ``port_name``, or None."""
    for port in service.get("spec", {}).get("ports") or ():
        if port.get("name") == port_name:
            return dict(port)
    return None


def endpoint_protocol(protocol: Protocol | str | None) -> str:
    """Return the URL scheme prefix for ``protocol``; None means http."""
    if protocol is None:
        return f"{Protocol.HTTP.value}://"
    proto = Protocol(protocol)
    if proto is Protocol.NONE:
        return ""
    return f"{proto.value}://"