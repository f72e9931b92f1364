"""Snapshot of the meta-marker graph reachable from an element.

Where the lookup stops at the first match, ``build_tree`` expands the
whole graph, using the same rules: markers whose type is excluded by the
policy are listed but not expanded, and a marker already expanded earlier
in the walk is listed again as *revisited* without children.  The result
is always finite, even for cyclic graphs.
"""
from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field, replace

from metamark.core.definitional import Documented
from metamark.core.markers import ElementKind, Marker, element_kind, marker_attributes
from metamark.lookup.lookup import AnnotationLookup, default_lookup


@dataclass(frozen=True)
class MarkerNode:
    """One declared marker in the graph.

    Parameters
    ----------
    marker:
        The marker instance.
    marker_type:
        Its declaring type.
    attributes:
        Public attribute values of the marker.
    excluded:
        The policy excludes ``marker_type``; it was not expanded.
    revisited:
        The marker was already expanded elsewhere in this walk.
    documented:
        ``marker_type`` directly declares ``Documented``.
    children:
        Nodes for the markers declared on ``marker_type``.
    """

    marker: object
    marker_type: type
    attributes: dict[str, object] = field(default_factory=dict)
    excluded: bool = False
    revisited: bool = False
    documented: bool = False
    children: tuple["MarkerNode", ...] = ()

    @property
    def type_name(self) -> str:
        return f"{self.marker_type.__module__}.{self.marker_type.__qualname__}"


@dataclass(frozen=True)
class MarkerTree:
    """The marker graph of ``element`` as a tree of ``MarkerNode``."""

    element: object
    kind: ElementKind
    roots: tuple[MarkerNode, ...]

    @property
    def element_name(self) -> str:
        if self.kind is ElementKind.MODULE:
            return self.element.__name__  # type: ignore[attr-defined]
        module = getattr(self.element, "__module__", None)
        qualname = getattr(self.element, "__qualname__", None) or getattr(
            self.element, "__name__", None
        )
        if qualname is None:
            return repr(self.element)
        return f"{module}.{qualname}" if module else qualname

    def walk(self) -> Iterator[tuple[int, MarkerNode]]:
        """Yield ``(depth, node)`` pairs in depth-first, declaration order."""
        stack = [(0, node) for node in reversed(self.roots)]
        while stack:
            depth, node = stack.pop()
            yield depth, node
            stack.extend((depth + 1, child) for child in reversed(node.children))

    def __len__(self) -> int:
        return sum(1 for _ in self.walk())


def build_tree(element: object, lookup: AnnotationLookup | None = None) -> MarkerTree:
    """Expand the full marker graph of ``element``.

    Parameters
    ----------
    element:
        The declaration point to describe.
    lookup:
        Supplies the metadata source and exclusion policy.  Defaults to the
        shared lookup used by ``metamark.find_marker``.
    """
    lookup = lookup if lookup is not None else default_lookup()
    visited: dict[int, object] = {}
    return MarkerTree(
        element=element,
        kind=element_kind(element),
        roots=_expand(element, lookup, visited),
    )


@dataclass
class _Frame:
    """A marker type being expanded: its remaining markers and finished child nodes."""

    markers: Iterator[object]
    node: MarkerNode | None = None
    children: list[MarkerNode] = field(default_factory=list)


_EXHAUSTED = object()


def _expand(
    element: object, lookup: AnnotationLookup, visited: dict[int, object]
) -> tuple[MarkerNode, ...]:
    source = lookup.source
    root = _Frame(iter(tuple(source.declared_markers(element))))
    stack = [root]
    while stack:
        frame = stack[-1]
        marker = next(frame.markers, _EXHAUSTED)
        if marker is _EXHAUSTED:
            stack.pop()
            if frame.node is not None:
                stack[-1].children.append(replace(frame.node, children=tuple(frame.children)))
            continue

        marker_type = source.marker_type(marker)
        meta = tuple(source.declared_markers(marker_type))
        node = MarkerNode(
            marker,
            marker_type,
            marker_attributes(marker) if isinstance(marker, Marker) else {},
            documented=any(source.marker_type(m) is Documented for m in meta),
        )

        if lookup.policy.excludes(marker_type):
            frame.children.append(replace(node, excluded=True))
        elif id(marker) in visited:
            frame.children.append(replace(node, revisited=True))
        else:
            visited[id(marker)] = marker
            stack.append(_Frame(iter(meta), node))
    return tuple(root.children)
