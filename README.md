# operkit

Small helpers for operators that build Kubernetes `Service` and OpenShift
`Route` manifests. Manifests are plain dictionaries in the same shape as the
Kubernetes API objects. You can dump them to YAML or JSON, or pass them to any
cluster client.

## Installation

```
pip install operkit
```

## Services

```python
from operkit.service import Service, generic_service
from operkit.service_types import (
    GenericServiceDetails,
    OverrideServiceSpec,
    OverrideSpec,
    Protocol,
)

manifest = generic_service(
    GenericServiceDetails(
        name="api",
        namespace="openstack",
        labels={"app": "api"},
        selector={"app": "api"},
        ports=[{"name": "api", "port": 8080, "protocol": "TCP"}],
    )
)

override = OverrideSpec(spec=OverrideServiceSpec(type="LoadBalancer"))
svc = Service(manifest, timeout=5.0, override=override)

svc.service_type                   # "LoadBalancer"
svc.service_hostname               # "api.openstack.svc"
svc.service_hostname_port          # ("api.openstack.svc", "8080")
svc.api_endpoint(None, Protocol.HTTP, "/v3")
# "http://api.openstack.svc:8080/v3"
```

`Service` takes a manifest, a timeout and an optional `OverrideSpec`. The
timeout can be a `timedelta` or a number of seconds, and the `timeout`
property always returns a `timedelta`.

When the override has labels or annotations, they are merged into the
manifest's metadata. A key present in both takes the override's value. The
override's `spec` is applied to the service spec with `strategic_merge`.

`OverrideSpec.add_annotation` and `OverrideSpec.add_label` add entries to the
override and leave keys that are already set alone. `Service.add_annotation`
does the same on the manifest itself.

The port reported by `service_hostname_port` comes from the port named like
the service. If no port has that name, the port is `""`.

`api_endpoint(endpoint_url, protocol, path)` works as follows:

- If `endpoint_url` is given, it is returned with `path` appended.
- Otherwise the URL is built from the hostname and port. The port is left out
  for HTTP on 80 and HTTPS on 443.
- `Protocol.NONE` produces no scheme at all, and `None` means HTTP.
- `path` is appended as is, so placeholders such as `%(project_id)s` stay
  unencoded.

`to_override_service_spec()` returns the overridable subset of the spec as an
`OverrideServiceSpec`. `OverrideServiceSpec.to_dict` and `from_dict` convert
that subset to and from its serialised form.

Other service helpers:

- `metallb_service(MetalLBServiceDetails(...))` builds a `LoadBalancer`
  service.
- `services_port_details(manifest, name)` returns a copy of the named port, or
  `None` if there is no such port.
- `endpoint_protocol(protocol)` returns the scheme prefix, such as `"https://"`.

`operkit.service_types` also defines:

- `Endpoint`, with the values `admin`, `internal` and `public`.
- `RoutedOverrideSpec`, an `OverrideSpec` with an optional `endpoint_url`.
- Constants for the ingress, hostname and MetalLB annotation keys.

## Routes

```python
from operkit.route import (
    GenericRouteDetails,
    OverrideSpec,
    Route,
    RouteSpecOverride,
    generic_route,
)

manifest = generic_route(
    GenericRouteDetails(
        name="api",
        namespace="openstack",
        service_name="api",
        target_port_name="api",
        labels={"app": "api"},
        fqdn="api.apps.example.com",
    )
)
override = OverrideSpec(spec=RouteSpecOverride(path="/v3"))
override.add_label({"tier": "public"})

route = Route(manifest, timeout=5.0, overrides=[override])
route.labels                       # {"tier": "public", "app": "api"}
route.route["spec"]["path"]        # "/v3"
```

`Route` applies each override in turn, in the same way `Service` does.

`RouteSpecOverride` and `TargetReference` serialise only the fields that are
set. `Route.add_annotation` and `Route.add_label` merge into the manifest and
keep any keys it already has.

## Helpers

`operkit.overrides` provides:

- `merge_maps(first, *others)` merges dictionaries into a new one. The first
  mapping to hold a key wins, and `None` counts as empty.
- `strategic_merge(original, patch)` returns a merged copy of the two:
  - nested mappings are merged;
  - a `None` value in the patch removes the key;
  - any other value, lists included, replaces the original one.
- `EmbeddedLabelsAnnotations`, the labels and annotations part of an override.

## What it does not do

operkit only builds and edits manifests in memory. It does not talk to a
cluster: it cannot create, patch, list or delete services or routes. For that
reason `Route.hostname` stays empty unless you set it yourself.

## Running the tests

```
pip install -e ".[test]"
pytest
```