"""Marker declaration for Python elements.

A *marker type* is a subclass of ``Marker``; a *marker* is an instance
of one.  Markers are attached to classes, functions, properties,
modules, and to other marker types, which is what makes meta-markers
possible::

    from metamark import Marker

    class Service(Marker):
        pass

    @Service()
    class Component(Marker):
        pass

    @Component()
    class UserRepository:
        ...

``UserRepository`` directly declares ``Component`` and, through it,
carries ``Service`` as a meta-marker.

Markers live in a ``__markers__`` tuple stored on the element itself, so
a subclass never sees its parent's markers as its own.
"""
from __future__ import annotations

import inspect
import logging
import types
from enum import Enum, auto
from typing import TypeVar

from metamark.core.errors import (
    DuplicateMarkerError,
    MarkerAttachError,
    MarkerTargetError,
)

logger = logging.getLogger(__name__)

E = TypeVar("E")

MARKERS_ATTRIBUTE = "__markers__"


class ElementKind(Enum):
    """Kinds of element a marker can be attached to."""

    MARKER_TYPE = auto()
    CLASS = auto()
    FUNCTION = auto()
    PROPERTY = auto()
    MODULE = auto()
    OTHER = auto()


class Marker:
    """Base class for marker types.

    Instances are decorators: ``@MyMarker()`` attaches the new instance to
    the decorated element and hands the element back unchanged.  Subclasses
    are free to take constructor arguments or to be dataclasses; the lookup
    only relies on the instance identity and its type.
    """

    def __call__(self, element: E) -> E:
        attach(element, self)
        return element

    def __repr__(self) -> str:
        attributes = marker_attributes(self)
        if not attributes:
            return f"@{type(self).__qualname__}()"
        rendered = ", ".join(f"{key}={value!r}" for key, value in attributes.items())
        return f"@{type(self).__qualname__}({rendered})"


def marker_attributes(marker: Marker) -> dict[str, object]:
    """Return the public attribute values of ``marker``.

    Dataclass markers report their fields in declaration order; other
    markers report the public entries of their instance ``__dict__``.
    """
    fields = getattr(marker, "__dataclass_fields__", None)
    if fields is not None:
        return {name: getattr(marker, name) for name in fields}
    return {
        key: value
        for key, value in getattr(marker, "__dict__", {}).items()
        if not key.startswith("_")
    }


def element_kind(element: object) -> ElementKind:
    """Classify ``element`` for ``Target`` checks and reporting."""
    if isinstance(element, property):
        return ElementKind.PROPERTY
    if isinstance(element, type):
        if issubclass(element, Marker):
            return ElementKind.MARKER_TYPE
        return ElementKind.CLASS
    if isinstance(element, types.ModuleType):
        return ElementKind.MODULE
    if isinstance(element, (classmethod, staticmethod)) or inspect.isroutine(element):
        return ElementKind.FUNCTION
    return ElementKind.OTHER


def _holder(element: object) -> object:
    """Return the object that actually stores markers for ``element``."""
    if isinstance(element, property):
        return element.fget
    if inspect.ismethod(element) or isinstance(element, (classmethod, staticmethod)):
        return element.__func__
    return element


def declared_markers(element: object) -> tuple[Marker, ...]:
    """Return the markers declared directly on ``element``, in declaration order.

    Markers inherited by subclassing are not included.  Elements that
    cannot carry markers (builtins, ``None``) yield an empty tuple, as do
    elements whose own ``__markers__`` is something other than a tuple.
    """
    holder = _holder(element)
    try:
        namespace = vars(holder)
    except TypeError:
        return ()
    markers = namespace.get(MARKERS_ATTRIBUTE, ())
    if not isinstance(markers, tuple):
        return ()
    return markers


def attach(element: E, marker: Marker) -> E:
    """Attach ``marker`` to ``element`` and return ``element``.

    Parameters
    ----------
    element:
        The class, function, property, module or marker type to annotate.
    marker:
        The marker instance.  It becomes the first declared marker of
        ``element``: decorators run bottom-up, so prepending keeps the
        stored order equal to the source order.

    Returns
    -------
    E
        ``element``, unchanged.

    Raises
    ------
    MarkerAttachError
        If ``marker`` is not a ``Marker`` or ``element`` cannot hold
        attributes.
    MarkerTargetError
        If the marker type's ``Target`` does not allow the element kind.
    DuplicateMarkerError
        If ``element`` already declares a marker of the same type.
    """
    if not isinstance(marker, Marker):
        raise MarkerAttachError(element, f"{marker!r} is not a Marker instance")

    marker_type = type(marker)
    kind = element_kind(element)
    _check_target(element, marker_type, kind)

    existing = declared_markers(element)
    if any(type(m) is marker_type for m in existing):
        raise DuplicateMarkerError(element, marker_type)

    holder = _holder(element)
    try:
        setattr(holder, MARKERS_ATTRIBUTE, (marker, *existing))
    except (AttributeError, TypeError) as exc:
        raise MarkerAttachError(element, str(exc)) from exc

    logger.debug(
        "Attached %s to %s %r",
        marker_type.__qualname__,
        kind.name.lower(),
        getattr(element, "__qualname__", element),
    )
    return element


def _check_target(element: object, marker_type: type, kind: ElementKind) -> None:
    from metamark.core.definitional import Target

    for declared in declared_markers(marker_type):
        if type(declared) is not Target:
            continue
        allowed = declared.kinds
        if kind in allowed:
            return
        if kind is ElementKind.MARKER_TYPE and ElementKind.CLASS in allowed:
            return
        raise MarkerTargetError(element, marker_type, kind, allowed)
