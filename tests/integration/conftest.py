"""Fixtures for integration tests."""

import sys
from pathlib import Path

import pytest

from ci_navigator.testing.gitlab.executable import FakeGlab


@pytest.fixture
def fake_glab(tmp_path: Path) -> FakeGlab:
    """Install a fake glab executable in a temporary directory."""
    if sys.platform == "win32":
        pytest.skip("Fake executables require a POSIX shebang")
    return FakeGlab.install(tmp_path)
