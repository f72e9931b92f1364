"""Export of ``MarkerTree`` snapshots to plain dicts, JSON and YAML.

Usage
-----
::

    from metamark.graph import MarkerGraphSerializer, build_tree

    serializer = MarkerGraphSerializer()
    data = serializer.to_dict(build_tree(UserRepository))
    yaml_text = serializer.to_yaml(build_tree(UserRepository))

Export is one-way: marker instances are live Python objects and cannot
be rebuilt from their serialized attributes.
"""
from __future__ import annotations

import json
from enum import Enum

import yaml

from metamark.graph.tree import MarkerNode, MarkerTree

_SCALARS = (str, int, float, bool, type(None))


class MarkerGraphSerializer:
    """Converts ``MarkerTree`` objects to JSON-compatible structures."""

    # ------------------------------------------------------------------
    # Serialization (tree → dict)
    # ------------------------------------------------------------------

    def to_dict(self, tree: MarkerTree) -> dict[str, object]:
        """Serialize ``tree`` to a JSON-compatible dict."""
        return {
            "element": tree.element_name,
            "kind": tree.kind.name,
            "markers": [self._node_to_dict(n) for n in tree.roots],
        }

    def _node_to_dict(self, node: MarkerNode) -> dict[str, object]:
        return {
            "type": node.type_name,
            "attributes": {k: self._value(v) for k, v in node.attributes.items()},
            "excluded": node.excluded,
            "revisited": node.revisited,
            "documented": node.documented,
            "markers": [self._node_to_dict(c) for c in node.children],
        }

    def _value(self, value: object) -> object:
        if isinstance(value, _SCALARS):
            return value
        if isinstance(value, Enum):
            return value.name
        if isinstance(value, type):
            return f"{value.__module__}.{value.__qualname__}"
        if isinstance(value, (list, tuple, set, frozenset)):
            return [self._value(v) for v in value]
        if isinstance(value, dict):
            return {str(k): self._value(v) for k, v in value.items()}
        return repr(value)

    # ------------------------------------------------------------------
    # JSON / YAML helpers
    # ------------------------------------------------------------------

    def to_json(self, tree: MarkerTree, indent: int = 2) -> str:
        """Serialize ``tree`` to a JSON string."""
        return json.dumps(self.to_dict(tree), indent=indent, ensure_ascii=False)

    def to_yaml(self, tree: MarkerTree) -> str:
        """Serialize ``tree`` to a YAML string."""
        return yaml.safe_dump(
            self.to_dict(tree), default_flow_style=False, allow_unicode=True, sort_keys=False
        )
