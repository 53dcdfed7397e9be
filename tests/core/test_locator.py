"""
Unit tests for ResourceLocator.

Tests cover:
- First-time extraction into the highest-priority usable tier
- Idempotent resolution (no rewrite on the second call)
- Staleness repair after the extracted copy drifts
- Tier fallback when a location does not validate
- Override directory handling
- Search path fallback and the unavailable error
- Concurrent resolution from a cold cache
"""

import os
import threading
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from xdgkit.config.parser import XdgKitConfig
from xdgkit.core.exceptions import (
    ExtractionError,
    ResourceNotFoundError,
    ToolUnavailableError,
)
from xdgkit.core.locator import ResourceLocator
from xdgkit.core.permissions import PROBE_PREFIX, PermissionValidator
from xdgkit.core.verification import compute_file_hash


class RefusingValidator(PermissionValidator):
    """Validator that rejects every path under the given directories."""

    def __init__(self, *refused: Path):
        self.refused = [Path(p) for p in refused]
        self.checked = []

    def is_usable(self, path) -> bool:
        path = Path(path)
        self.checked.append(path)
        if any(parent in path.parents for parent in self.refused):
            return False
        return super().is_usable(path)


def _write_tool(directory: Path, name: str = "xdg-open") -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    tool = directory / name
    tool.write_text("#!/bin/sh\necho preinstalled\n")
    tool.chmod(0o755)
    return tool


class TestResolveExtraction:
    """Tests for resolution through the cache tiers."""

    def test_extracts_to_temp_tier(self, locator, bundle, temp_tier_dir):
        path = locator.resolve("xdg-open")

        assert path == temp_tier_dir / "xdg-open"
        assert compute_file_hash(path) == bundle.digest("xdg-open")
        assert os.access(path, os.X_OK)

    def test_idempotent(self, locator):
        """Test a second resolve returns the same path without rewriting."""
        first = locator.resolve("xdg-open")
        mtime = first.stat().st_mtime_ns
        inode = first.stat().st_ino

        with patch("xdgkit.core.extraction.write_stream") as mock_write:
            second = locator.resolve("xdg-open")

        assert second == first
        mock_write.assert_not_called()
        assert first.stat().st_mtime_ns == mtime
        assert first.stat().st_ino == inode

    def test_repairs_stale_copy(self, locator, bundle):
        """Test a drifted copy is restored to the embedded content."""
        path = locator.resolve("xdg-open")
        path.write_text("#!/bin/sh\necho tampered\n")
        assert compute_file_hash(path) != bundle.digest("xdg-open")

        assert locator.resolve("xdg-open") == path
        assert compute_file_hash(path) == bundle.digest("xdg-open")

    def test_repairs_truncated_copy(self, locator, bundle):
        path = locator.resolve("xdg-mime")
        path.write_bytes(b"")

        locator.resolve("xdg-mime")
        assert compute_file_hash(path) == bundle.digest("xdg-mime")

    def test_falls_back_to_home_tier(self, cache_config, bundle, tmp_path, home_tier_dir):
        validator = RefusingValidator(tmp_path / "systemp")
        locator = ResourceLocator(cache_config, bundle=bundle, validator=validator)

        path = locator.resolve("xdg-open")

        assert path == home_tier_dir / "xdg-open"
        assert not (tmp_path / "systemp" / "xdgkit" / "tester" / "1.1.3" / "xdg-open").exists()

    def test_falls_back_to_working_tier(self, cache_config, bundle, tmp_path):
        validator = RefusingValidator(tmp_path / "systemp", tmp_path / "home")
        locator = ResourceLocator(cache_config, bundle=bundle, validator=validator)

        path = locator.resolve("xdg-open")

        assert path == tmp_path / "work" / ".tmp" / "xdgkit" / "1.1.3" / "xdg-open"

    def test_stale_copy_revalidated_before_overwrite(self, cache_config, bundle, temp_tier_dir, home_tier_dir):
        """Test a stale copy that no longer validates is left alone."""
        stale = temp_tier_dir / "xdg-open"
        stale.parent.mkdir(parents=True)
        stale.write_text("#!/bin/sh\necho stale\n")
        home_tier_dir.mkdir(parents=True)

        validator = MagicMock(spec=PermissionValidator)
        # Tier check passes, the re-check before overwrite fails, home passes.
        validator.is_usable.side_effect = [True, False, True]
        locator = ResourceLocator(cache_config, bundle=bundle, validator=validator)

        path = locator.resolve("xdg-open")

        assert path == home_tier_dir / "xdg-open"
        assert stale.read_text() == "#!/bin/sh\necho stale\n"

    def test_unknown_tool(self, locator):
        """Test a tool that is not bundled fails loudly."""
        with pytest.raises(ResourceNotFoundError, match="xdg-settings"):
            locator.resolve("xdg-settings")

    def test_unknown_tool_ignores_search_path(self, cache_config, bundle, tmp_path):
        _write_tool(tmp_path / "bin", "xdg-settings")
        cache_config.search_path = [str(tmp_path / "bin")]
        locator = ResourceLocator(cache_config, bundle=bundle)

        with pytest.raises(ResourceNotFoundError):
            locator.resolve("xdg-settings")

    def test_extraction_error_propagates(self, locator):
        with patch(
            "xdgkit.core.extraction.write_stream",
            side_effect=ExtractionError(Path("x"), "disk full"),
        ):
            with pytest.raises(ExtractionError, match="disk full"):
                locator.resolve("xdg-open")

    def test_no_probe_leftovers(self, locator, temp_tier_dir):
        locator.resolve("xdg-open")
        leftovers = [p for p in temp_tier_dir.iterdir() if p.name.startswith(PROBE_PREFIX)]
        assert leftovers == []

    def test_preload(self, locator, temp_tier_dir):
        paths = locator.preload()

        assert sorted(paths) == ["xdg-email", "xdg-mime", "xdg-open"]
        for name, path in paths.items():
            assert path == temp_tier_dir / name
            assert path.is_file()

    def test_preload_selected(self, locator):
        assert list(locator.preload(["xdg-mime"])) == ["xdg-mime"]


class TestResolveFallbacks:
    """Tests for override, search path and unavailable handling."""

    def test_all_tiers_refused_uses_search_path(self, cache_config, bundle, tmp_path):
        preinstalled = _write_tool(tmp_path / "bin")
        cache_config.search_path = [str(tmp_path / "empty"), str(tmp_path / "bin")]
        validator = MagicMock(spec=PermissionValidator)
        validator.is_usable.return_value = False
        locator = ResourceLocator(cache_config, bundle=bundle, validator=validator)

        with patch("xdgkit.core.extraction.write_stream") as mock_write:
            assert locator.resolve("xdg-open") == preinstalled

        mock_write.assert_not_called()
        assert preinstalled.read_text() == "#!/bin/sh\necho preinstalled\n"

    def test_all_tiers_refused_raises(self, cache_config, bundle):
        """Test no usable location and no pre-installed copy is an error."""
        validator = MagicMock(spec=PermissionValidator)
        validator.is_usable.return_value = False
        locator = ResourceLocator(cache_config, bundle=bundle, validator=validator)

        with pytest.raises(ToolUnavailableError) as exc_info:
            locator.resolve("xdg-open")

        assert exc_info.value.tool == "xdg-open"
        assert len(exc_info.value.tried) == 3

    def test_override_used_as_is(self, cache_config, bundle, tmp_path, temp_tier_dir):
        """Test the override copy is returned without digest checks."""
        override_tool = _write_tool(tmp_path / "override")
        cache_config.script_dir = tmp_path / "override"
        locator = ResourceLocator(cache_config, bundle=bundle)

        assert locator.resolve("xdg-open") == override_tool
        assert override_tool.read_text() == "#!/bin/sh\necho preinstalled\n"
        assert not (temp_tier_dir / "xdg-open").exists()

    def test_override_skips_bundle(self, cache_config, bundle, tmp_path):
        """Test the override serves tools the bundle does not carry."""
        override_tool = _write_tool(tmp_path / "override", "xdg-settings")
        cache_config.script_dir = tmp_path / "override"
        locator = ResourceLocator(cache_config, bundle=bundle)

        assert locator.resolve("xdg-settings") == override_tool

    def test_override_missing_tool_falls_back_to_search_path(self, cache_config, bundle, tmp_path):
        (tmp_path / "override").mkdir()
        preinstalled = _write_tool(tmp_path / "bin")
        cache_config.script_dir = tmp_path / "override"
        cache_config.search_path = [str(tmp_path / "bin")]
        locator = ResourceLocator(cache_config, bundle=bundle)

        assert locator.resolve("xdg-open") == preinstalled

    def test_override_missing_tool_raises(self, cache_config, bundle, tmp_path):
        cache_config.script_dir = tmp_path / "override"
        locator = ResourceLocator(cache_config, bundle=bundle)

        with pytest.raises(ToolUnavailableError) as exc_info:
            locator.resolve("xdg-open")

        assert exc_info.value.tried == [tmp_path / "override" / "xdg-open"]

    def test_missing_override_dir_not_created(self, cache_config, bundle, tmp_path):
        """Test a mistyped override directory is left uncreated."""
        typo = tmp_path / "typo" / "deep" / "dir"
        cache_config.script_dir = typo
        locator = ResourceLocator(cache_config, bundle=bundle)

        with pytest.raises(ToolUnavailableError):
            locator.resolve("xdg-open")

        assert not (tmp_path / "typo").exists()

    def test_default_collaborators(self):
        locator = ResourceLocator(XdgKitConfig(lock_timeout=7))
        assert locator.extractor.lock_timeout == 7
        assert locator.bundle.version == locator.config.script_version


class TestConcurrentResolve:
    """Tests for concurrent resolution from a cold cache."""

    def test_threads_share_one_extraction(self, cache_config, bundle, temp_tier_dir):
        locator = ResourceLocator(cache_config, bundle=bundle)
        results = []
        errors = []
        barrier = threading.Barrier(8)

        def worker():
            try:
                barrier.wait()
                results.append(locator.resolve("xdg-open"))
            except Exception as e:
                errors.append(e)

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert errors == []
        assert set(results) == {temp_tier_dir / "xdg-open"}
        assert compute_file_hash(temp_tier_dir / "xdg-open") == bundle.digest("xdg-open")

        leftovers = [
            p.name
            for p in temp_tier_dir.iterdir()
            if p.name.endswith(".tmp") or p.name.startswith(PROBE_PREFIX)
        ]
        assert leftovers == []

    def test_separate_locators(self, cache_config, bundle, temp_tier_dir):
        """Test independent locator instances racing on one target."""
        results = []

        def worker():
            results.append(ResourceLocator(cache_config, bundle=bundle).resolve("xdg-mime"))

        threads = [threading.Thread(target=worker) for _ in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert results == [temp_tier_dir / "xdg-mime"] * 4
        assert compute_file_hash(temp_tier_dir / "xdg-mime") == bundle.digest("xdg-mime")


@pytest.mark.skipif(
    os.name != "posix" or os.geteuid() == 0,
    reason="needs POSIX permissions enforced for a non-root user",
)
def test_read_only_bases_raise_unavailable(cache_config, bundle, tmp_path):
    """Test real read-only cache directories lead to ToolUnavailableError."""
    bases = [tmp_path / "systemp", tmp_path / "home", tmp_path / "work"]
    for base in bases:
        base.mkdir()
        base.chmod(0o555)

    locator = ResourceLocator(cache_config, bundle=bundle)
    try:
        with pytest.raises(ToolUnavailableError):
            locator.resolve("xdg-open")
    finally:
        for base in bases:
            base.chmod(0o755)

    for base in bases:
        assert list(base.iterdir()) == []
