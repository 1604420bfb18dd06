"""Tests for store identity and directory resolution."""

import sys
from pathlib import Path
from tempfile import TemporaryDirectory

import pytest
from scoped_config import ConfigStore
from scoped_config import DirectoryError
from scoped_config import FixedRootResolver
from scoped_config import InvalidNameError
from scoped_config import PlatformRootResolver
from scoped_config import StoreLocation
from scoped_config.paths import resolve_store_dir


class TestStoreLocation:
    """Test StoreLocation dataclass."""

    def test_relative_path_without_scope(self):
        """Test relative path is <app_id>/v<version>."""
        assert StoreLocation("org.example.Demo", 1).relative_path == Path("org.example.Demo") / "v1"

    def test_relative_path_with_scope(self):
        """Test scope adds a trailing segment."""
        location = StoreLocation("org.example.Demo", 2, "appearance")
        assert location.relative_path == Path("org.example.Demo") / "v2" / "appearance"

    def test_frozen(self):
        """Test StoreLocation is immutable."""
        location = StoreLocation("org.example.Demo", 1)
        with pytest.raises(AttributeError):
            location.version = 2  # type: ignore[misc]

    def test_invalid_name_is_value_error(self):
        """Test InvalidNameError can be caught as ValueError."""
        with pytest.raises(ValueError):
            StoreLocation("a/b", 1)

    def test_rejects_nul(self):
        """Test NUL bytes are rejected."""
        with pytest.raises(InvalidNameError):
            StoreLocation("demo\0", 1)


class TestResolveStoreDir:
    """Test directory resolution and creation."""

    @pytest.fixture
    def root(self):
        """Create a temporary configuration root."""
        with TemporaryDirectory() as tmpdir:
            yield Path(tmpdir)

    def test_creates_missing_segments(self, root):
        """Test every missing segment is created."""
        path = resolve_store_dir(StoreLocation("org.example.Demo", 1, "appearance"), FixedRootResolver(root))
        assert path == root / "org.example.Demo" / "v1" / "appearance"
        assert path.is_dir()

    def test_idempotent(self, root):
        """Test resolving twice returns the same existing path."""
        location = StoreLocation("org.example.Demo", 1)
        first = resolve_store_dir(location, FixedRootResolver(root))
        second = resolve_store_dir(location, FixedRootResolver(root))
        assert first == second
        assert first.is_dir()

    def test_missing_root_is_created(self, root):
        """Test a root that does not exist yet is created."""
        config_root = root / "home" / ".config"
        path = resolve_store_dir(StoreLocation("demo", 1), FixedRootResolver(config_root))
        assert path.is_dir()

    def test_none_root(self):
        """Test a resolver returning None raises DirectoryError."""

        class Unknown:
            def config_root(self):
                return None

        with pytest.raises(DirectoryError):
            resolve_store_dir(StoreLocation("demo", 1), Unknown())

    def test_scope_isolation(self, root):
        """Test scoped and unscoped stores use different directories."""
        resolver = FixedRootResolver(root)
        scoped = ConfigStore("org.example.Demo", 1, "appearance", resolver=resolver)
        unscoped = ConfigStore("org.example.Demo", 1, resolver=resolver)

        scoped.set_json("colors", {"accent": "#7a7af9"})

        assert scoped.directory != unscoped.directory
        assert scoped.get_json("colors") == {"accent": "#7a7af9"}
        assert not unscoped.has_json("colors")

    def test_version_isolation(self, root):
        """Test different versions use different directories."""
        resolver = FixedRootResolver(root)
        v1 = ConfigStore("org.example.Demo", 1, resolver=resolver)
        v2 = ConfigStore("org.example.Demo", 2, resolver=resolver)

        v1.set_json("colors", {"accent": "#7a7af9"})

        assert not v2.has_json("colors")


@pytest.mark.skipif(not sys.platform.startswith("linux"), reason="XDG layout applies to Linux")
class TestPlatformRootResolver:
    """Test the platformdirs-backed resolver on Linux."""

    def test_xdg_config_home(self, monkeypatch):
        """Test $XDG_CONFIG_HOME is honored."""
        with TemporaryDirectory() as tmpdir:
            monkeypatch.setenv("XDG_CONFIG_HOME", tmpdir)
            assert PlatformRootResolver().config_root() == Path(tmpdir)

    def test_default_under_home(self, monkeypatch):
        """Test the default store lands in $HOME/.config/<app_id>/v<version>."""
        with TemporaryDirectory() as tmpdir:
            monkeypatch.setenv("HOME", tmpdir)
            monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)

            store = ConfigStore("org.example.Demo", 1)
            store.set_json("colors", {"accent": "#7a7af9"})

            expected = Path(tmpdir) / ".config" / "org.example.Demo" / "v1"
            assert store.directory == expected
            assert (expected / "colors.json").exists()
            assert store.get_json("colors")["accent"] == "#7a7af9"
