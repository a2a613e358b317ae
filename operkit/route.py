"""Routes exposing a Service, with label, annotation and spec overrides."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta
from typing import Any, Iterable

from operkit.overrides import EmbeddedLabelsAnnotations, merge_maps, strategic_merge


@dataclass
class TargetReference:
    """A backend a route points to; only the ``Service`` kind is allowed."""

    kind: str = ""
    name: str = ""
    weight: int | None = None

    def to_dict(self) -> dict[str, Any]:
        """Return the serialised form, leaving out empty fields."""
        data: dict[str, Any] = {}
        if self.kind:
            data["kind"] = self.kind
        if self.name:
            data["name"] = self.name
        if self.weight is not None:
            data["weight"] = self.weight
        return data


@dataclass
class RouteSpecOverride:
    """Route spec fields that may override the generated spec; all optional."""

    host: str = ""
    subdomain: str = ""
    path: str = ""
    to: TargetReference | None = None
    alternate_backends: list[TargetReference] = field(default_factory=list)
    port: dict[str, Any] | None = None
    tls: dict[str, Any] | None = None
    wildcard_policy: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Return the serialised form, leaving out empty fields."""
        data: dict[str, Any] = {}
        if self.host:
            data["host"] = self.host
        if self.subdomain:
            data["subdomain"] = self.subdomain
        if self.path:
            data["path"] = self.path
        if self.to is not None:
            data["to"] = self.to.to_dict()
        if self.alternate_backends:
            data["alternateBackends"] = [b.to_dict() for b in self.alternate_backends]
        if self.port is not None:
            data["port"] = dict(self.port)
        if self.tls is not None:
            data["tls"] = dict(self.tls)
        if self.wildcard_policy:
            data["wildcardPolicy"] = self.wildcard_policy
        return data


@dataclass
class OverrideSpec:
    """Override configuration for a generated route."""

    metadata: EmbeddedLabelsAnnotations | None = None
    spec: RouteSpecOverride | None = None

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


@dataclass
class GenericRouteDetails:
    """Inputs for :func:`generic_route`."""

    name: str
    namespace: str
    service_name: str
    target_port_name: str
    labels: dict[str, str] | None = None
    fqdn: str = ""


class Route:
    """A route document together with its requeue timeout."""

    def __init__(
        self,
        route: dict[str, Any],
        timeout: timedelta | float,
        overrides: Iterable[OverrideSpec] | None = None,
    ) -> None:
        self._route = route
        self._timeout = timeout if isinstance(timeout, timedelta) else timedelta(seconds=timeout)
        self._hostname = ""

        for override in overrides or ():
            meta = override.metadata
            if meta is not None:
                if meta.labels is not None:
                    self._metadata()["labels"] = merge_maps(meta.labels, self.labels)
                if meta.annotations is not None:
                    self._metadata()["annotations"] = merge_maps(
                        meta.annotations, self.annotations
                    )
            if override.spec is not None:
                self._route["spec"] = strategic_merge(
                    self._route.get("spec"), override.spec.to_dict()
                )

    def _metadata(self) -> dict[str, Any]:
        return self._route.setdefault("metadata", {})

    @property
    def hostname(self) -> str:
        """Hostname assigned to the route once it has been reconciled."""
        return self._hostname

    @property
    def route(self) -> dict[str, Any]:
        """The route document."""
        return self._route

    @property
    def timeout(self) -> timedelta:
        """Delay before a reconcile is retried."""
        return self._timeout

    @property
    def labels(self) -> dict[str, str] | None:
        """Labels of the route."""
        return self._route.get("metadata", {}).get("labels")

    @property
    def annotations(self) -> dict[str, str] | None:
        """Annotations of the route."""
        return self._route.get("metadata", {}).get("annotations")

    def add_annotation(self, annotations: dict[str, str]) -> None:
        """Add annotations; existing keys keep their values."""
        self._metadata()["annotations"] = merge_maps(self.annotations, annotations)

    def add_label(self, labels: dict[str, str]) -> None:
        """Add labels; existing keys keep their values."""
        self._metadata()["labels"] = merge_maps(self.labels, labels)


def generic_route(details: GenericRouteDetails) -> dict[str, Any]:
    """Build a route document that targets a Service port by name."""
    metadata: dict[str, Any] = {"name": details.name, "namespace": details.namespace}
    if details.labels is not None:
        metadata["labels"] = details.labels
    spec: dict[str, Any] = {
        "to": {"kind": "Service", "name": details.service_name},
        "port": {"targetPort": details.target_port_name},
    }
    if details.fqdn:
        spec["host"] = details.fqdn
    return {"metadata": metadata, "spec": spec}