"""Error types raised while declaring markers.

Lookups never raise; these errors only surface from ``attach`` (and the
marker decorators built on it) so that a bad declaration fails at import
time of the module that declares it.
"""
from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from metamark.core.markers import ElementKind


class MarkerError(Exception):
    """Base class of every error raised by the marker substrate."""


class MarkerAttachError(MarkerError, TypeError):
    """Raised when a marker cannot be attached to an element.

    Parameters
    ----------
    element:
        The element the marker was being attached to.
    reason:
        Human-readable explanation.
    """

    def __init__(self, element: object, reason: str) -> None:
        self.element = element
        self.reason = reason
        super().__init__(f"Cannot attach marker to {element!r}: {reason}")


class MarkerTargetError(MarkerAttachError):
    """Raised when a marker type's ``Target`` forbids the element kind."""

    def __init__(
        self,
        element: object,
        marker_type: type,
        kind: "ElementKind",
        allowed: tuple["ElementKind", ...],
    ) -> None:
        self.marker_type = marker_type
        self.kind = kind
        self.allowed = allowed
        allowed_names = ", ".join(k.name for k in allowed) or "nothing"
        super().__init__(
            element,
            f"{marker_type.__qualname__} may only be attached to {allowed_names}, "
            f"not to a {kind.name}",
        )


class DuplicateMarkerError(MarkerAttachError):
    """Raised when an element already declares a marker of the same type."""

    def __init__(self, element: object, marker_type: type) -> None:
        self.marker_type = marker_type
        super().__init__(
            element,
            f"a {marker_type.__qualname__} marker is already declared "
            "(markers are not repeatable)",
        )
