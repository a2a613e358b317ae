[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "operkit"
version = "0.1.0"
description = "Helpers for building Kubernetes Service and OpenShift Route manifests with label, annotation and spec overrides"
requires-python = ">=3.10"
dependencies = []
keywords = ["kubernetes", "openshift", "operator", "service", "route", "manifest"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["operkit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
