"""Resolution of the OS configuration root and store directories."""

import logging
from pathlib import Path
from typing import Protocol

from platformdirs import user_config_dir

from .exceptions import DirectoryError
from .models import StoreLocation

logger = logging.getLogger(__name__)


class RootResolver(Protocol):
    """Answers where the OS keeps per-user configuration."""

    def config_root(self) -> Path: ...


class PlatformRootResolver:
    """OS configuration root as reported by platformdirs.

    - Linux/BSD: $XDG_CONFIG_HOME, falling back to ~/.config
    - macOS: ~/Library/Application Support
    - Windows: the roaming AppData folder
    """

    def config_root(self) -> Path:
        return Path(user_config_dir(roaming=True))


class FixedRootResolver:
    """Configuration root pinned to a given directory.

    Used to keep stores out of real user directories (tests, portable
    installs).

    Args:
        root: Directory to use as the configuration root
    """

    def __init__(self, root: Path | str):
        self.root = Path(root)

    def config_root(self) -> Path:
        return self.root


def resolve_store_dir(location: StoreLocation, resolver: RootResolver) -> Path:
    """Compute and create the directory for a store.

    The directory is ``<root>/<app_id>/v<version>[/<scope>]``. Missing
    segments are created; existing ones are left alone, so calling this
    repeatedly with the same arguments is safe.

    Args:
        location: Store identity
        resolver: Source of the OS configuration root

    Returns:
        Absolute path of the existing store directory

    Raises:
        DirectoryError: If the root cannot be determined or the directory
            cannot be created
    """
    try:
        root = resolver.config_root()
    except (OSError, RuntimeError, KeyError) as e:
        raise DirectoryError(f"Config directory not found: {e}") from e

    if root is None or not Path(root).is_absolute():
        raise DirectoryError(f"Config directory not found: resolved root {root!r} is not an absolute path")

    path = Path(root) / location.relative_path

    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise DirectoryError(f"Failed to create configuration directory {path}: {e}") from e

    logger.debug(f"Resolved configuration directory {path}")
    return path
