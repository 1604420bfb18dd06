"""Utility functions for scoped-config."""

import logging
import os
import tempfile
from pathlib import Path
from typing import Any

from .exceptions import ConfigFileError
from .exceptions import InvalidNameError

logger = logging.getLogger(__name__)

_SEPARATORS = {"/", "\\", os.sep} | ({os.altsep} if os.altsep else set())

_WINDOWS = os.name == "nt"
_WINDOWS_RESERVED_CHARS = set('<>:"|?*')
_WINDOWS_RESERVED_NAMES = {"CON", "PRN", "AUX", "NUL"} | {f"{dev}{n}" for dev in ("COM", "LPT") for n in range(1, 10)}


def validate_name(name: str, kind: str = "name") -> str:
    """Check that a name can be used as a single path segment.

    Rejects empty names, "." and "..", names holding a path separator or a
    NUL byte, and anything that is not a string. On Windows, reserved
    characters, device names (CON, NUL, COM1 ...) and a trailing dot or
    space are rejected as well.

    Args:
        name: Candidate directory or file name
        kind: What the name is, used in the error message

    Returns:
        The name, unchanged

    Raises:
        InvalidNameError: If the name is not a safe path segment

    Examples:
        >>> validate_name("org.example.Demo")
        'org.example.Demo'
    """
    if not isinstance(name, str) or not name:
        raise InvalidNameError(f"Invalid {kind} {name!r}: must be a non-empty string")
    if name in (".", "..") or "\0" in name or any(sep in name for sep in _SEPARATORS):
        raise InvalidNameError(f"Invalid {kind} {name!r}: avoid path separators, '.' and '..'")
    if _WINDOWS:
        _validate_windows_name(name, kind)
    return name


def _validate_windows_name(name: str, kind: str) -> None:
    if any(ch in _WINDOWS_RESERVED_CHARS or ord(ch) < 32 for ch in name):
        raise InvalidNameError(f"Invalid {kind} {name!r}: contains a character Windows does not allow")
    if name[-1] in ". ":
        raise InvalidNameError(f"Invalid {kind} {name!r}: Windows drops a trailing dot or space")
    if name.split(".")[0].rstrip(" ").upper() in _WINDOWS_RESERVED_NAMES:
        raise InvalidNameError(f"Invalid {kind} {name!r}: reserved device name on Windows")


def validate_version(version: int) -> int:
    """Check that a configuration version is a positive integer.

    Raises:
        InvalidNameError: If version is not an int >= 1
    """
    if isinstance(version, bool) or not isinstance(version, int) or version < 1:
        raise InvalidNameError(f"Invalid version {version!r}: must be an integer >= 1")
    return version


def atomic_write(path: Path, data: bytes) -> Path:
    """Write bytes to a file so readers see either old or new content.

    The data goes to a temporary file in the target's directory, is flushed
    and fsynced, then renamed over the target with os.replace. If anything
    fails before the rename the target is untouched and the temporary file
    is removed.

    Args:
        path: Destination file (its directory must exist)
        data: Full new content

    Returns:
        The destination path

    Raises:
        ConfigFileError: If writing or renaming fails
    """
    target = Path(path)
    tmp_path: Path | None = None
    try:
        with tempfile.NamedTemporaryFile(
            delete=False, dir=str(target.parent), prefix=f".{target.name}.", suffix=".tmp"
        ) as tmp:
            tmp_path = Path(tmp.name)
            tmp.write(data)
            tmp.flush()
            os.fsync(tmp.fileno())
        _atomic_replace(tmp_path, target)
    except OSError as e:
        if tmp_path is not None:
            _discard(tmp_path)
        raise ConfigFileError(f"Failed to write configuration to {target}: {e}") from e
    return target


def _atomic_replace(src: Path, dest: Path) -> None:
    os.replace(src, dest)


def _discard(path: Path) -> None:
    try:
        path.unlink(missing_ok=True)
    except OSError as e:
        logger.warning(f"Failed to remove temporary file {path}: {e}")


def deep_merge(base: dict[str, Any], overlay: dict[str, Any]) -> dict[str, Any]:
    """Deep merge two dictionaries with overlay precedence.

    Recursively merges nested dictionaries. Non-dict values in overlay
    completely replace corresponding values in base.

    Args:
        base: Base dictionary
        overlay: Overlay dictionary (takes precedence)

    Returns:
        New merged dictionary (base and overlay are not modified)

    Examples:
        >>> deep_merge({"accent": "#7a7af9", "font": {"size": 10}}, {"font": {"size": 12}})
        {'accent': '#7a7af9', 'font': {'size': 12}}
    """
    result = base.copy()

    for key, value in overlay.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value

    return result
