"""Plugin subsystem for metamark.

Exclusion policies are published through a ``PluginRegistry``; installed
packages extend it with entry-points under the "metamark.policies" group.
"""
from __future__ import annotations

from metamark.plugins.registry import (
    PluginAlreadyRegisteredError,
    PluginNotFoundError,
    PluginRegistry,
)

__all__ = ["PluginAlreadyRegisteredError", "PluginNotFoundError", "PluginRegistry"]
