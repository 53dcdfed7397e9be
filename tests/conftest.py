"""
Pytest configuration and shared fixtures for xdgkit tests.
"""

import os
import stat
from pathlib import Path

import pytest

from xdgkit.config.parser import XdgKitConfig
from xdgkit.core.locator import ResourceLocator
from xdgkit.core.resources import ResourceBundle

IS_POSIX = os.name == "posix"
IS_ROOT = IS_POSIX and os.geteuid() == 0

posix_only = pytest.mark.skipif(not IS_POSIX, reason="requires a POSIX shell")
not_root = pytest.mark.skipif(
    IS_ROOT, reason="root bypasses file permission checks"
)

HELLO_SCRIPT = "#!/bin/sh\necho hello\n"

# Echoes each argument on its own line in brackets, then exits with $XDG_EXIT.
ECHO_ARGS_SCRIPT = """#!/bin/sh
for arg in "$@"; do
    echo "[$arg]"
done
exit ${XDG_EXIT:-0}
"""

FAIL_SCRIPT = "#!/bin/sh\necho 'cannot open'\nexit 4\n"


def write_executable(path: Path, content: str) -> Path:
    """Write a script and mark it executable."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return path


@pytest.fixture
def scripts_dir(tmp_path) -> Path:
    """
    Create a directory standing in for the bundled scripts.

    Contains:
        - xdg-open: prints 'hello'
        - xdg-mime: echoes its arguments
        - xdg-email: prints a message and exits with ACTION_FAILED
    """
    directory = tmp_path / "bundled"
    directory.mkdir()
    (directory / "xdg-open").write_text(HELLO_SCRIPT)
    (directory / "xdg-mime").write_text(ECHO_ARGS_SCRIPT)
    (directory / "xdg-email").write_text(FAIL_SCRIPT)
    (directory / "README.md").write_text("not a script\n")
    return directory


@pytest.fixture
def bundle(scripts_dir) -> ResourceBundle:
    return ResourceBundle(scripts_dir, version="1.1.3")


@pytest.fixture
def cache_config(tmp_path) -> XdgKitConfig:
    """Configuration whose cache tiers all live under tmp_path."""
    return XdgKitConfig(
        temp_dir=tmp_path / "systemp",
        home_dir=tmp_path / "home",
        working_dir=tmp_path / "work",
        user="tester",
        search_path=[],
        lock_timeout=5,
    )


@pytest.fixture
def temp_tier_dir(tmp_path) -> Path:
    """Directory of the temp cache tier for cache_config."""
    return tmp_path / "systemp" / "xdgkit" / "tester" / "1.1.3"


@pytest.fixture
def home_tier_dir(tmp_path) -> Path:
    """Directory of the home cache tier for cache_config."""
    return tmp_path / "home" / ".xdgkit" / "1.1.3"


@pytest.fixture
def locator(cache_config, bundle) -> ResourceLocator:
    return ResourceLocator(cache_config, bundle=bundle)


@pytest.fixture
def isolated_home(tmp_path, monkeypatch) -> Path:
    """Create isolated home directory for tests."""
    fake_home = tmp_path / "fake-home"
    fake_home.mkdir()

    monkeypatch.setenv("HOME", str(fake_home))
    monkeypatch.setenv("USERPROFILE", str(fake_home))

    return fake_home
