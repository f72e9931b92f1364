"""Resolution of ``package.module:Qual.Name`` paths to live objects."""
from __future__ import annotations

import importlib
import logging

logger = logging.getLogger(__name__)


class ElementResolutionError(LookupError):
    """Raised when a dotted element path cannot be imported or resolved.

    Parameters
    ----------
    path:
        The path as given on the command line.
    reason:
        What went wrong.
    """

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot resolve {path!r}: {reason}")


def resolve_element(path: str) -> object:
    """Import the object named by ``path``.

    ``path`` is ``module`` or ``module:attribute.chain``; the attribute
    chain is followed with ``getattr``, so ``pkg.mod:Service.handle``
    names the ``handle`` function of class ``Service``.
    """
    module_name, _, qualname = path.partition(":")
    if not module_name:
        raise ElementResolutionError(path, "missing module name")
    try:
        obj: object = importlib.import_module(module_name)
    except ImportError as exc:
        raise ElementResolutionError(path, f"cannot import {module_name!r} ({exc})") from exc
    except Exception as exc:
        # Marker declaration errors surface here, while the module body runs.
        raise ElementResolutionError(
            path, f"importing {module_name!r} failed: {type(exc).__name__}: {exc}"
        ) from exc

    if not qualname:
        return obj
    for attribute in qualname.split("."):
        try:
            obj = getattr(obj, attribute)
        except AttributeError:
            raise ElementResolutionError(
                path, f"{attribute!r} not found on {obj!r}"
            ) from None
    logger.debug("Resolved %r -> %r", path, obj)
    return obj
