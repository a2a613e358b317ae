"""Builders for Kubernetes Service and OpenShift Route manifests with override support."""

__version__ = "0.1.0"

__all__ = ["overrides", "route", "service", "service_types"]