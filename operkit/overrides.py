"""Label/annotation overrides and the map merging helpers they rely on."""

from __future__ import annotations

import copy
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any


def merge_maps(first: Mapping | None, *args: Mapping | None) -> dict:
    """Merge maps into a new dict; a key already present is never overwritten.

    Keys from ``first`` take precedence over keys from later maps, and earlier
    maps in ``args`` take precedence over later ones. ``None`` counts as empty.
    """
    result = dict(first or {})
    for other in args:
        for key, value in (other or {}).items():
            result.setdefault(key, value)
    return result


def strategic_merge(original: Mapping | None, patch: Mapping) -> dict:
    """Apply ``patch`` to ``original`` and return the merged document.

    Nested mappings are merged recursively, a ``None`` value in the patch
    removes the key, and any other value (including lists) replaces the
    original one. Neither argument is modified.
    """
    if original is not None and not isinstance(original, Mapping):
        raise TypeError(f"original must be a mapping, not {type(original).__name__}")
    if not isinstance(patch, Mapping):
        raise TypeError(f"patch must be a mapping, not {type(patch).__name__}")

    result = copy.deepcopy(dict(original or {}))
    for key, value in patch.items():
        if value is None:
            result.pop(key, None)
        elif isinstance(value, Mapping):
            existing = result.get(key)
            base = existing if isinstance(existing, Mapping) else None
            result[key] = strategic_merge(base, value)
        else:
            result[key] = copy.deepcopy(value)
    return result


@dataclass
class EmbeddedLabelsAnnotations:
    """The labels and annotations subset of object metadata.

    Values given here replace labels or annotations of the same key set by
    the operator.
    """

    labels: dict[str, str] | None = None
    annotations: dict[str, str] | None = None

    def to_dict(self) -> dict[str, Any]:
        """Return the serialised form, leaving out empty fields."""
        data: dict[str, Any] = {}
        if self.labels:
            data["labels"] = dict(self.labels)
        if self.annotations:
            data["annotations"] = dict(self.annotations)
        return data