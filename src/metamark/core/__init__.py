"""Marker declaration substrate.

``markers`` defines the ``Marker`` base class and attachment; the
``definitional`` module holds the reserved markers that describe other
markers.  Submodules in core/ must not import from lookup/, graph/ or cli/.
"""
from __future__ import annotations

from metamark.core.definitional import Documented, Inherited, Target
from metamark.core.errors import (
    DuplicateMarkerError,
    MarkerAttachError,
    MarkerError,
    MarkerTargetError,
)
from metamark.core.markers import (
    ElementKind,
    Marker,
    attach,
    declared_markers,
    element_kind,
    marker_attributes,
)

__all__ = [
    "Documented",
    "DuplicateMarkerError",
    "ElementKind",
    "Inherited",
    "Marker",
    "MarkerAttachError",
    "MarkerError",
    "MarkerTargetError",
    "Target",
    "attach",
    "declared_markers",
    "element_kind",
    "marker_attributes",
]
