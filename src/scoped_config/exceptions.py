"""Exceptions for scoped-config."""


class ConfigError(Exception):
    """Base exception for configuration errors."""

    pass


class DirectoryError(ConfigError):
    """Configuration directory cannot be resolved or created."""

    pass


class InvalidNameError(ConfigError, ValueError):
    """Application id, scope or item name is not a safe file name."""

    pass


class UnsupportedFormatError(ConfigError):
    """Format has no usable codec (library not installed)."""

    pass


class ConfigFileError(ConfigError):
    """Error reading or writing configuration file."""

    pass


class ItemNotFoundError(ConfigFileError, FileNotFoundError):
    """Requested configuration item does not exist."""

    pass


class SerializationError(ConfigError):
    """Value cannot be encoded to the target format."""

    pass


class DeserializationError(ConfigError):
    """File content cannot be decoded to the requested type."""

    pass
