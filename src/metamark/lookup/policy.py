"""Exclusion policies for meta-marker traversal.

A policy decides which marker types the lookup refuses to traverse into.
The default, ``NamespacePolicy``, skips the definitional markers in
``metamark.core.definitional``; hosts can widen it with ``AnyOfPolicy``,
replace it with a ``PredicatePolicy``, or disable exclusion altogether
with ``NoExclusionPolicy``.

Excluded markers are still matched when declared directly on the element
being searched; exclusion only stops the descent into their types.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable

from metamark.plugins.registry import PluginRegistry

DEFINITIONAL_NAMESPACES: tuple[str, ...] = ("metamark.core.definitional",)


class ExclusionPolicy(ABC):
    """Decides whether a marker type is skipped during traversal."""

    @abstractmethod
    def excludes(self, marker_type: type) -> bool:
        """Return ``True`` if markers of ``marker_type`` must not be traversed."""

    def __call__(self, marker_type: type) -> bool:
        return self.excludes(marker_type)


class NamespacePolicy(ExclusionPolicy):
    """Exclude marker types declared in (or below) the given module namespaces.

    Parameters
    ----------
    namespaces:
        Dotted module names.  A type is excluded when its ``__module__``
        equals one of them or is a submodule of one.
    """

    def __init__(self, namespaces: Iterable[str] = DEFINITIONAL_NAMESPACES) -> None:
        self.namespaces: tuple[str, ...] = tuple(namespaces)

    def excludes(self, marker_type: type) -> bool:
        module = getattr(marker_type, "__module__", None) or ""
        return any(
            module == namespace or module.startswith(namespace + ".")
            for namespace in self.namespaces
        )

    def __repr__(self) -> str:
        return f"NamespacePolicy({list(self.namespaces)!r})"


class PredicatePolicy(ExclusionPolicy):
    """Adapt a plain ``Callable[[type], bool]`` into a policy."""

    def __init__(self, predicate: Callable[[type], bool]) -> None:
        self.predicate = predicate

    def excludes(self, marker_type: type) -> bool:
        return bool(self.predicate(marker_type))

    def __repr__(self) -> str:
        return f"PredicatePolicy({self.predicate!r})"


class AnyOfPolicy(ExclusionPolicy):
    """Exclude a type when any member policy excludes it."""

    def __init__(self, *policies: ExclusionPolicy | Callable[[type], bool]) -> None:
        self.policies: tuple[ExclusionPolicy, ...] = tuple(
            as_policy(p) for p in policies
        )

    def excludes(self, marker_type: type) -> bool:
        return any(policy.excludes(marker_type) for policy in self.policies)

    def __repr__(self) -> str:
        return f"AnyOfPolicy{self.policies!r}"


class NoExclusionPolicy(ExclusionPolicy):
    """Traverse every marker type, definitional ones included."""

    def excludes(self, marker_type: type) -> bool:
        return False

    def __repr__(self) -> str:
        return "NoExclusionPolicy()"


def as_policy(policy: ExclusionPolicy | Callable[[type], bool] | None) -> ExclusionPolicy:
    """Coerce ``policy`` into an ``ExclusionPolicy``.

    ``None`` selects ``DEFAULT_POLICY``; plain callables are wrapped in a
    ``PredicatePolicy``.
    """
    if policy is None:
        return DEFAULT_POLICY
    if isinstance(policy, ExclusionPolicy):
        return policy
    if callable(policy):
        return PredicatePolicy(policy)
    raise TypeError(f"Expected an ExclusionPolicy or a callable, got {policy!r}")


DEFAULT_POLICY: ExclusionPolicy = NamespacePolicy()

POLICY_ENTRYPOINT_GROUP = "metamark.policies"

policy_registry: PluginRegistry[ExclusionPolicy] = PluginRegistry(
    ExclusionPolicy, "policies"
)
policy_registry.register_class("definitional", NamespacePolicy)
policy_registry.register_class("none", NoExclusionPolicy)
