"""metamark: declare markers on Python elements and find them through meta-markers.

Public API
----------
The stable public surface is everything exported from this module.
Anything inside submodules not re-exported here is considered private
and may change without notice.

Example
-------
::

    import metamark
    from metamark import Marker

    class Bar(Marker):
        pass

    @Bar()
    class Foo(Marker):
        pass

    @Foo()
    class C:
        pass

    metamark.find_marker(C, Foo)      # the @Foo() declared on C
    metamark.find_marker(C, Bar)      # the @Bar() declared on Foo
    metamark.has_marker(C, Bar)       # True
    metamark.find_first_of(C, [Bar, Foo])  # @Bar(): earlier targets win

    metamark.__version__
    '0.1.0'
"""
from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, TypeVar

from metamark.core import (
    Documented,
    DuplicateMarkerError,
    ElementKind,
    Inherited,
    Marker,
    MarkerAttachError,
    MarkerError,
    MarkerTargetError,
    Target,
    attach,
    declared_markers,
)
from metamark.lookup import (
    AnnotationLookup,
    AnyOfPolicy,
    ExclusionPolicy,
    MetadataSource,
    NamespacePolicy,
    NoExclusionPolicy,
    PredicatePolicy,
)

if TYPE_CHECKING:
    from metamark.graph.tree import MarkerTree

__version__: str = "0.1.0"

M = TypeVar("M")


def has_marker(element: object, target: type | None) -> bool:
    """Return ``True`` if ``element`` carries ``target`` directly or through meta-markers.

    Returns ``False`` (never raises) when either argument is ``None``.
    """
    from metamark.lookup.lookup import has_marker as _has_marker

    return _has_marker(element, target)


def find_marker(element: object, target: "type[M] | None") -> "M | None":
    """Find the ``target`` marker on ``element`` or on its meta-markers.

    Parameters
    ----------
    element:
        Class, function, property, module or marker type to search.
    target:
        The marker type to look for (compared by identity).

    Returns
    -------
    M | None
        The first match: a direct declaration on ``element`` if there is
        one, otherwise the first reached depth-first in declaration order.
    """
    from metamark.lookup.lookup import find_marker as _find_marker

    return _find_marker(element, target)


def find_first_of(element: object, targets: "Sequence[type] | None") -> object | None:
    """Find a marker for the first of ``targets``, tried in order.

    Returns ``None`` when ``element`` is ``None``, ``targets`` is empty,
    or no target is reachable.
    """
    from metamark.lookup.lookup import find_first_of as _find_first_of

    return _find_first_of(element, targets)


def marker_tree(element: object) -> "MarkerTree":
    """Return the full marker graph of ``element`` as a ``MarkerTree``."""
    from metamark.graph.tree import build_tree

    return build_tree(element)


__all__ = [
    "__version__",
    "AnnotationLookup",
    "AnyOfPolicy",
    "Documented",
    "DuplicateMarkerError",
    "ElementKind",
    "ExclusionPolicy",
    "Inherited",
    "Marker",
    "MarkerAttachError",
    "MarkerError",
    "MarkerTargetError",
    "MetadataSource",
    "NamespacePolicy",
    "NoExclusionPolicy",
    "PredicatePolicy",
    "Target",
    "attach",
    "declared_markers",
    "find_first_of",
    "find_marker",
    "has_marker",
    "marker_tree",
]
