"""Metadata sources: where the lookup reads markers from.

The lookup only needs two capabilities from its host: listing the markers
declared directly on an element, and naming a marker's type.  Hosts with
their own metadata system (a decorator registry, attribute tables,
``typing.Annotated`` extras) implement ``MetadataSource`` and pass it to
``AnnotationLookup``.
"""
from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from metamark.core.markers import declared_markers


@runtime_checkable
class MetadataSource(Protocol):
    """Read-only view of a host's marker metadata.

    Implementations must return the *same* marker instances on every
    call: the lookup tracks visited markers by identity, and fresh
    instances would defeat cycle detection.
    """

    def declared_markers(self, element: object) -> Sequence[object]:
        """Return the markers declared directly on ``element`` in a stable order."""
        ...

    def marker_type(self, marker: object) -> type:
        """Return the declaring type of ``marker``."""
        ...


class DecoratorMetadataSource:
    """``MetadataSource`` over markers attached with ``metamark.attach``."""

    def declared_markers(self, element: object) -> Sequence[object]:
        return declared_markers(element)

    def marker_type(self, marker: object) -> type:
        return type(marker)

    def __repr__(self) -> str:
        return "DecoratorMetadataSource()"
