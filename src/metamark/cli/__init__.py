"""CLI package.

The ``cli`` sub-package contains the Click application and the helpers
that turn command-line paths into live Python objects.
"""
from __future__ import annotations
