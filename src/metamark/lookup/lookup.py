"""Meta-marker lookup.

``AnnotationLookup`` answers "does this element carry marker ``T``?",
looking through markers attached to the types of the element's markers
(and so on, recursively).  This lets a framework accept a composite
marker wherever it expects the marker the composite is built from::

    class Transactional(Marker):
        pass

    @Transactional()
    class Command(Marker):
        pass

    @Command()
    def rename_user(...): ...

    find_marker(rename_user, Transactional)   # the @Transactional on Command

Search rules
------------
* A marker of the target type declared directly on the element always
  wins, whatever deeper matches exist.
* Otherwise the element's markers are explored depth-first in declaration
  order and the first match is returned.
* Each marker instance is expanded at most once per call, so cyclic
  marker graphs terminate.
* Marker types excluded by the policy (the definitional markers by
  default) are never expanded.
* The walk keeps its own stack, so the depth of a marker chain is not
  bounded by the interpreter's recursion limit.

Lookups never raise: a missing argument and a missing marker both give
``None`` (or ``False``).
"""
from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from typing import TypeVar

from metamark.lookup.policy import ExclusionPolicy, as_policy
from metamark.lookup.source import DecoratorMetadataSource, MetadataSource

logger = logging.getLogger(__name__)

M = TypeVar("M")


class AnnotationLookup:
    """Meta-marker aware lookup over a ``MetadataSource``.

    Parameters
    ----------
    source:
        Where declared markers are read from.  Defaults to the markers
        attached with ``metamark.attach``.
    policy:
        Which marker types are never traversed into.  Accepts an
        ``ExclusionPolicy`` or a plain ``Callable[[type], bool]``;
        defaults to skipping the definitional namespace.
    """

    def __init__(
        self,
        source: MetadataSource | None = None,
        policy: ExclusionPolicy | Callable[[type], bool] | None = None,
    ) -> None:
        self._source: MetadataSource = source if source is not None else DecoratorMetadataSource()
        self._policy: ExclusionPolicy = as_policy(policy)

    @property
    def source(self) -> MetadataSource:
        return self._source

    @property
    def policy(self) -> ExclusionPolicy:
        return self._policy

    def __repr__(self) -> str:
        return f"AnnotationLookup(source={self._source!r}, policy={self._policy!r})"

    # ------------------------------------------------------------------
    # Public operations
    # ------------------------------------------------------------------

    def has_marker(self, element: object, target: type | None) -> bool:
        """Return ``True`` if ``element`` carries ``target``, directly or as a meta-marker."""
        if element is None or target is None:
            return False
        return self.find_marker(element, target) is not None

    def find_marker(self, element: object, target: type[M] | None) -> M | None:
        """Return the first ``target`` marker reachable from ``element``.

        Parameters
        ----------
        element:
            The declaration point to search.
        target:
            The marker type to find, compared by identity.

        Returns
        -------
        M | None
            The matching marker instance (as declared on the element, or on
            whichever marker type carries it), or ``None``.
        """
        if element is None or target is None:
            return None
        found = self._find(element, target, {})
        logger.debug(
            "find_marker(%r, %s) -> %r",
            element,
            getattr(target, "__qualname__", target),
            found,
        )
        return found

    def find_first_of(
        self, element: object, targets: Sequence[type] | None
    ) -> object | None:
        """Return a marker for the first of ``targets`` reachable from ``element``.

        Each target gets its own full search, in the order given, so an
        earlier target wins even when a later one sits closer to
        ``element``.
        """
        if element is None or not targets:
            return None
        for target in targets:
            if target is None:
                continue
            found = self._find(element, target, {})
            if found is not None:
                logger.debug(
                    "find_first_of(%r) matched %s",
                    element,
                    getattr(target, "__qualname__", target),
                )
                return found
        return None

    # ------------------------------------------------------------------
    # Traversal
    # ------------------------------------------------------------------

    def _find(
        self, element: object, target: type, visited: dict[int, object]
    ) -> object | None:
        # visited maps id -> marker so the instance stays alive and its id unique
        markers = tuple(self._source.declared_markers(element))
        found = self._direct(markers, target)
        if found is not None:
            return found

        # One iterator per element being explored; the top one is the
        # deepest, which keeps the walk depth-first in declaration order.
        stack = [iter(markers)]
        while stack:
            marker = next(stack[-1], _EXHAUSTED)
            if marker is _EXHAUSTED:
                stack.pop()
                continue
            marker_type = self._source.marker_type(marker)
            if id(marker) in visited or self._policy.excludes(marker_type):
                continue
            visited[id(marker)] = marker
            meta = tuple(self._source.declared_markers(marker_type))
            found = self._direct(meta, target)
            if found is not None:
                return found
            stack.append(iter(meta))
        return None

    def _direct(self, markers: tuple[object, ...], target: type) -> object | None:
        for marker in markers:
            if self._source.marker_type(marker) is target:
                return marker
        return None


_EXHAUSTED = object()


_default_lookup = AnnotationLookup()


def default_lookup() -> AnnotationLookup:
    """Return the shared lookup used by the module-level functions."""
    return _default_lookup


def has_marker(element: object, target: type | None) -> bool:
    """``AnnotationLookup().has_marker`` with the default source and policy."""
    return _default_lookup.has_marker(element, target)


def find_marker(element: object, target: type[M] | None) -> M | None:
    """``AnnotationLookup().find_marker`` with the default source and policy."""
    return _default_lookup.find_marker(element, target)


def find_first_of(element: object, targets: Sequence[type] | None) -> object | None:
    """``AnnotationLookup().find_first_of`` with the default source and policy."""
    return _default_lookup.find_first_of(element, targets)
