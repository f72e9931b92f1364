"""Definitional markers: markers that describe how other markers are used.

Everything declared in this module belongs to the reserved definitional
namespace.  These markers sit on nearly every marker type and never carry
domain markers, so the default exclusion policy skips them during
meta-marker traversal.  They can still be found when declared directly.
"""
from __future__ import annotations

from metamark.core.markers import ElementKind, Marker


class Target(Marker):
    """Restrict the element kinds a marker type may be attached to.

    Example
    -------
    ::

        @Target(ElementKind.FUNCTION)
        class Route(Marker):
            def __init__(self, path: str) -> None:
                self.path = path
    """

    def __init__(self, *kinds: ElementKind) -> None:
        self.kinds: tuple[ElementKind, ...] = kinds


class Documented(Marker):
    """Mark a marker type as part of the documented surface of its element."""


class Inherited(Marker):
    """Declare that a class-level marker is meant to apply to subclasses.

    Purely declarative: lookups read directly declared markers only.
    """


# Self-describing: the definitional markers target marker types only.
Target(ElementKind.MARKER_TYPE)(Documented)
Target(ElementKind.MARKER_TYPE)(Inherited)
Documented()(Target)
Target(ElementKind.MARKER_TYPE)(Target)
