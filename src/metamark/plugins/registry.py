"""Named class registry with entry-point discovery.

Used to publish exclusion policies under short names so that the CLI
and host applications can select them by name.  Third-party packages
contribute entries by declaring entry-points in their own
``pyproject.toml``::

    [project.entry-points."metamark.policies"]
    private = "my_package.policies:PrivateNamespacePolicy"

Example
-------
::

    from metamark.lookup.policy import ExclusionPolicy
    from metamark.plugins.registry import PluginRegistry

    registry: PluginRegistry[ExclusionPolicy] = PluginRegistry(
        ExclusionPolicy, "policies"
    )

    @registry.register("private")
    class PrivateNamespacePolicy(ExclusionPolicy):
        def excludes(self, marker_type: type) -> bool:
            return marker_type.__module__.startswith("_")

    policy = registry.get("private")()
"""
from __future__ import annotations

import importlib.metadata
import logging
from abc import ABC
from collections.abc import Callable
from typing import Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=ABC)


class PluginNotFoundError(KeyError):
    """Raised when a requested name is not in the registry."""

    def __init__(self, name: str, registry_name: str, available: list[str]) -> None:
        self.plugin_name = name
        self.registry_name = registry_name
        self.available = available
        super().__init__(
            f"{name!r} is not registered in the {registry_name!r} registry. "
            f"Available: {', '.join(available) or '(none)'}."
        )


class PluginAlreadyRegisteredError(ValueError):
    """Raised when attempting to register a name that already exists."""

    def __init__(self, name: str, registry_name: str) -> None:
        self.plugin_name = name
        self.registry_name = registry_name
        super().__init__(
            f"{name!r} is already registered in the {registry_name!r} registry. "
            "Deregister the existing entry first or pick another name."
        )


class PluginRegistry(Generic[T]):
    """Type-checked mapping of names to subclasses of ``base_class``.

    Parameters
    ----------
    base_class:
        The abstract base class every entry must subclass.
    name:
        A human-readable name for this registry, used in error messages.
    """

    def __init__(self, base_class: type[T], name: str) -> None:
        self._base_class = base_class
        self._name = name
        self._plugins: dict[str, type[T]] = {}

    @property
    def name(self) -> str:
        return self._name

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def register(self, name: str) -> Callable[[type[T]], type[T]]:
        """Return a class decorator that registers the class under ``name``.

        Raises
        ------
        PluginAlreadyRegisteredError
            If ``name`` is already in use.
        TypeError
            If the decorated class does not subclass ``base_class``.
        """

        def decorator(cls: type[T]) -> type[T]:
            self.register_class(name, cls)
            return cls

        return decorator

    def register_class(self, name: str, cls: type[T]) -> None:
        """Register ``cls`` under ``name`` without decorator syntax."""
        if name in self._plugins:
            raise PluginAlreadyRegisteredError(name, self._name)
        if not (isinstance(cls, type) and issubclass(cls, self._base_class)):
            raise TypeError(
                f"Cannot register {cls!r} under {name!r}: "
                f"it must be a subclass of {self._base_class.__name__}."
            )
        self._plugins[name] = cls
        logger.debug(
            "Registered %r -> %s in registry %r", name, cls.__qualname__, self._name
        )

    def deregister(self, name: str) -> None:
        """Remove ``name`` from the registry.

        Raises
        ------
        PluginNotFoundError
            If ``name`` is not registered.
        """
        if name not in self._plugins:
            raise PluginNotFoundError(name, self._name, self.list_plugins())
        del self._plugins[name]
        logger.debug("Deregistered %r from registry %r", name, self._name)

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def get(self, name: str) -> type[T]:
        """Return the class registered under ``name``.

        Raises
        ------
        PluginNotFoundError
            If nothing is registered under ``name``.
        """
        try:
            return self._plugins[name]
        except KeyError:
            raise PluginNotFoundError(name, self._name, self.list_plugins()) from None

    def list_plugins(self) -> list[str]:
        """Return all registered names in alphabetical order."""
        return sorted(self._plugins)

    def items(self) -> list[tuple[str, type[T]]]:
        """Return ``(name, class)`` pairs in alphabetical order of name."""
        return [(name, self._plugins[name]) for name in self.list_plugins()]

    def __contains__(self, name: object) -> bool:
        return name in self._plugins

    def __len__(self) -> int:
        return len(self._plugins)

    def __repr__(self) -> str:
        return (
            f"PluginRegistry(name={self._name!r}, "
            f"base_class={self._base_class.__name__}, "
            f"plugins={self.list_plugins()})"
        )

    # ------------------------------------------------------------------
    # Entry-point loading
    # ------------------------------------------------------------------

    def load_entrypoints(self, group: str) -> int:
        """Import and register every entry-point declared in ``group``.

        Names that are already registered are skipped, so repeated calls
        are idempotent.  Entry-points that fail to import or that do not
        subclass ``base_class`` are logged and skipped.

        Returns
        -------
        int
            The number of newly registered entries.
        """
        loaded = 0
        for ep in importlib.metadata.entry_points(group=group):
            if ep.name in self._plugins:
                logger.debug(
                    "Entry-point %r already registered in %r; skipping.",
                    ep.name,
                    self._name,
                )
                continue
            try:
                cls = ep.load()
            except Exception:
                logger.exception(
                    "Failed to load entry-point %r from group %r; skipping.",
                    ep.name,
                    group,
                )
                continue
            try:
                self.register_class(ep.name, cls)
            except (PluginAlreadyRegisteredError, TypeError):
                logger.warning(
                    "Entry-point %r loaded but could not be registered "
                    "in registry %r; skipping.",
                    ep.name,
                    self._name,
                )
                continue
            loaded += 1
        return loaded
