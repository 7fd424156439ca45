"""Exception types raised by mygit core operations."""


class MygitError(Exception):
    """Base class for all mygit errors."""


class NotARepository(MygitError):
    """No .mygit directory was found, or its layout is unusable."""


class RepositoryExists(MygitError):
    """A repository already exists at the requested location."""


class PathNotFound(MygitError):
    """A path passed to add or hash-object does not exist."""

    def __init__(self, path):
        super().__init__(f"Path not found: {path}")
        self.path = str(path)


class ObjectNotFound(MygitError):
    """No stored object exists for a digest."""

    def __init__(self, obj_hash, reason: str = 'not found'):
        super().__init__(f"Object {obj_hash} {reason}")
        self.hash = obj_hash


class CorruptObject(MygitError):
    """Stored bytes could not be decompressed or decoded."""


class CorruptIndex(MygitError):
    """The staging index file contains a malformed line."""


class InvalidCommit(MygitError):
    """A checkout target does not resolve to a readable commit and tree."""

    def __init__(self, obj_hash, reason: str):
        super().__init__(f"Invalid commit {obj_hash}: {reason}")
        self.hash = obj_hash


class StorageIO(MygitError):
    """An underlying filesystem read, write or delete failed."""


class ConfigError(MygitError):
    """A config file cannot be parsed or a value cannot be stored."""
