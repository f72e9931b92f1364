"""Meta-marker lookup: sources, exclusion policies and the search itself."""
from __future__ import annotations

from metamark.lookup.lookup import (
    AnnotationLookup,
    default_lookup,
    find_first_of,
    find_marker,
    has_marker,
)
from metamark.lookup.policy import (
    DEFAULT_POLICY,
    DEFINITIONAL_NAMESPACES,
    POLICY_ENTRYPOINT_GROUP,
    AnyOfPolicy,
    ExclusionPolicy,
    NamespacePolicy,
    NoExclusionPolicy,
    PredicatePolicy,
    as_policy,
    policy_registry,
)
from metamark.lookup.source import DecoratorMetadataSource, MetadataSource

__all__ = [
    "DEFAULT_POLICY",
    "DEFINITIONAL_NAMESPACES",
    "POLICY_ENTRYPOINT_GROUP",
    "AnnotationLookup",
    "AnyOfPolicy",
    "DecoratorMetadataSource",
    "ExclusionPolicy",
    "MetadataSource",
    "NamespacePolicy",
    "NoExclusionPolicy",
    "PredicatePolicy",
    "as_policy",
    "default_lookup",
    "find_first_of",
    "find_marker",
    "has_marker",
    "policy_registry",
]
