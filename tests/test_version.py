"""Tests for package metadata and exports."""

import re
import tomllib
from pathlib import Path

import pyicbridge

PYPROJECT = Path(__file__).parent.parent / "pyproject.toml"


class TestVersion:
    """Tests for the package version."""

    def test_version_matches_pyproject(self):
        """__version__ is the version declared in pyproject.toml."""
        with PYPROJECT.open("rb") as f:
            declared = tomllib.load(f)["project"]["version"]
        assert pyicbridge.__version__ == declared

    def test_version_is_semver(self):
        """The version looks like X.Y.Z with an optional pre-release suffix."""
        assert re.fullmatch(r"\d+\.\d+\.\d+([-.]?(a|b|rc)\d*)?", pyicbridge.__version__)


class TestExports:
    """Tests for the public names of the package."""

    def test_all_names_resolve(self):
        """Every name in __all__ is importable from the package."""
        missing = [name for name in pyicbridge.__all__ if not hasattr(pyicbridge, name)]
        assert missing == []

    def test_no_duplicates(self):
        """__all__ lists each name once."""
        assert len(pyicbridge.__all__) == len(set(pyicbridge.__all__))
