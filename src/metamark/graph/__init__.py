"""Marker graph snapshots and their serialized forms."""
from __future__ import annotations

from metamark.graph.serializer import MarkerGraphSerializer
from metamark.graph.tree import MarkerNode, MarkerTree, build_tree

__all__ = ["MarkerGraphSerializer", "MarkerNode", "MarkerTree", "build_tree"]
