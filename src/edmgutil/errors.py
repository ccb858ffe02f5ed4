"""Exceptions raised by edmgutil."""


class EdmgError(Exception):
    """Base error for all edmgutil failures."""
    pass


class ToolNotFoundError(EdmgError):
    """A required external tool is not installed."""

    def __init__(self, tool: str):
        self.tool = tool
        super().__init__(f"{tool} is not available")


class SourceArchiveError(EdmgError):
    """The source archive is missing or not a regular file."""
    pass


class InvalidPasswordError(EdmgError):
    """The password does not unlock the source archive."""

    def __init__(self, message: str = "invalid password"):
        super().__init__(message)


class VolumeNotMountedError(EdmgError):
    """An explicitly requested volume is not mounted."""

    def __init__(self, message: str = "volume was not mounted"):
        super().__init__(message)


class DiskImageError(EdmgError):
    """The disk image manager produced output that could not be understood."""
    pass


class MountError(DiskImageError):
    """The disk image was attached but no mount point was reported."""
    pass


class ArchiveError(EdmgError):
    """The archive tool produced output that could not be understood."""
    pass


class ConfigError(EdmgError):
    """Configuration file could not be loaded."""
    pass
