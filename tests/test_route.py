from datetime import timedelta

import pytest

from operkit.overrides import EmbeddedLabelsAnnotations
from operkit.route import (
    GenericRouteDetails,
    OverrideSpec,
    Route,
    RouteSpecOverride,
    TargetReference,
    generic_route,
)

TIMEOUT = timedelta(seconds=5)


def make_route():
    return {
        "metadata": {"name": "foo", "namespace": "namespace", "labels": {"foo": "bar"}},
        "spec": {"port": {"targetPort": 80}},
    }


def test_new_route_no_override():
    route = Route(make_route(), TIMEOUT, None)
    assert route.timeout == TIMEOUT
    assert route.labels == {"foo": "bar"}
    route.add_annotation({"foo": "bar"})
    assert route.annotations == {"foo": "bar"}
    assert route.route["spec"]["port"] == {"targetPort": 80}
    assert route.hostname == ""


def test_timeout_from_seconds():
    assert Route(make_route(), 5, None).timeout == TIMEOUT


@pytest.mark.parametrize(
    "override, annotation, want",
    [
        (OverrideSpec(), {}, {}),
        (
            OverrideSpec(metadata=EmbeddedLabelsAnnotations(annotations={"key": "val"})),
            {},
            {"key": "val"},
        ),
        (
            OverrideSpec(metadata=EmbeddedLabelsAnnotations(annotations={"key": "val"})),
            {"custom": "val"},
            {"key": "val", "custom": "val"},
        ),
        (
            OverrideSpec(metadata=EmbeddedLabelsAnnotations(annotations={"key": "val"})),
            {"key": "custom"},
            {"key": "val"},
        ),
    ],
    ids=[
        "no override, no custom annotation",
        "override, no custom annotation",
        "override, additional custom annotation",
        "override, additional custom same annotation",
    ],
)
def test_override_spec_add_annotation(override, annotation, want):
    override.add_annotation(annotation)
    assert override.metadata.annotations == want


def test_override_spec_add_label():
    override = OverrideSpec()
    override.add_label({"a": "b"})
    override.add_label({"a": "c", "d": "e"})
    assert override.metadata.labels == {"a": "b", "d": "e"}


def test_route_add_label_keeps_existing():
    route = Route(make_route(), TIMEOUT, None)
    route.add_label({"foo": "other", "new": "x"})
    assert route.labels == {"foo": "bar", "new": "x"}


def test_override_labels_win():
    override = OverrideSpec(
        metadata=EmbeddedLabelsAnnotations(labels={"foo": "baz", "new": "x"})
    )
    route = Route(make_route(), TIMEOUT, [override])
    assert route.labels == {"foo": "baz", "new": "x"}


def test_override_annotations_on_route_without_annotations():
    override = OverrideSpec(metadata=EmbeddedLabelsAnnotations(annotations={"a": "1"}))
    route = Route(make_route(), TIMEOUT, [override])
    assert route.annotations == {"a": "1"}
    assert route.labels == {"foo": "bar"}


def test_override_spec_patches_route_spec():
    override = OverrideSpec(spec=RouteSpecOverride(host="custom.example.com"))
    route = Route(make_route(), TIMEOUT, [override])
    assert route.route["spec"] == {
        "port": {"targetPort": 80},
        "host": "custom.example.com",
    }


def test_override_spec_merges_target_reference():
    doc = make_route()
    doc["spec"]["to"] = {"kind": "Service", "name": "svc"}
    override = OverrideSpec(spec=RouteSpecOverride(to=TargetReference(weight=50)))
    route = Route(doc, TIMEOUT, [override])
    assert route.route["spec"]["to"] == {"kind": "Service", "name": "svc", "weight": 50}


def test_overrides_applied_in_order():
    first = OverrideSpec(spec=RouteSpecOverride(host="one.example.com"))
    second = OverrideSpec(spec=RouteSpecOverride(host="two.example.com"))
    route = Route(make_route(), TIMEOUT, [first, second])
    assert route.route["spec"]["host"] == "two.example.com"


def test_route_spec_override_to_dict():
    spec = RouteSpecOverride(
        path="/api",
        alternate_backends=[TargetReference(kind="Service", name="b", weight=0)],
        tls={"termination": "edge"},
        wildcard_policy="None",
    )
    assert spec.to_dict() == {
        "path": "/api",
        "alternateBackends": [{"kind": "Service", "name": "b", "weight": 0}],
        "tls": {"termination": "edge"},
        "wildcardPolicy": "None",
    }
    assert RouteSpecOverride().to_dict() == {}


def test_generic_route_without_fqdn():
    details = GenericRouteDetails(
        name="foo",
        namespace="namespace",
        labels={"foo": "bar"},
        service_name="svc",
        target_port_name="http",
    )
    assert generic_route(details) == {
        "metadata": {"name": "foo", "namespace": "namespace", "labels": {"foo": "bar"}},
        "spec": {
            "to": {"kind": "Service", "name": "svc"},
            "port": {"targetPort": "http"},
        },
    }


def test_generic_route_with_fqdn():
    details = GenericRouteDetails(
        name="foo",
        namespace="namespace",
        service_name="svc",
        target_port_name="http",
        fqdn="foo.example.com",
    )
    result = generic_route(details)
    assert result["spec"]["host"] == "foo.example.com"
    assert "labels" not in result["metadata"]
    assert Route(result, TIMEOUT, None).route["spec"]["to"]["kind"] == "Service"