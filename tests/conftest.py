"""Shared test fixtures for metamark.

Fixtures defined here are available to all tests in the suite without
needing an explicit import. Keep marker graphs that only one module
needs next to the tests that use them.
"""
from __future__ import annotations

import pytest

from metamark.lookup import AnnotationLookup


@pytest.fixture()
def package_name() -> str:
    """Return the importable package name for assertions."""
    return "metamark"


@pytest.fixture()
def expected_version() -> str:
    """Return the current expected version string.

    Update this fixture when cutting a release so that the version
    test immediately catches stale ``__version__`` values.
    """
    return "0.1.0"


@pytest.fixture()
def lookup() -> AnnotationLookup:
    """A lookup with the default source and definitional exclusion policy."""
    return AnnotationLookup()
