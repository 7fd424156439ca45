"""Repository management for mygit."""

import contextlib
import logging
import os
from pathlib import Path
from typing import Optional, Tuple

from .errors import (CorruptObject, NotARepository, ObjectNotFound, PathNotFound,
                     RepositoryExists, StorageIO)
from .hash import compress, decompress, hash_object
from .objects import (HEX_DIGEST, Blob, MygitObject, Tree, decode_object,
                      encode_object, parse_object)

logger = logging.getLogger(__name__)

REPO_DIR = '.mygit'
DEFAULT_BRANCH = 'master'
MIN_PREFIX_LENGTH = 4


class Repository:
    """
    Represents a mygit repository.

    A repository is an explicit handle on one work tree and its .mygit
    directory. Every operation takes the handle, so several repositories
    can be used side by side in one process.
    """

    def __init__(self, path='.'):
        """
        Initialize repository.

        Args:
            path: Path to repository root (defaults to current directory)
        """
        self.work_tree = Path(path).resolve()
        self.mygit_dir = self.work_tree / REPO_DIR
        self.objects_dir = self.mygit_dir / 'objects'
        self.refs_dir = self.mygit_dir / 'refs'
        self.heads_dir = self.refs_dir / 'heads'
        self.logs_dir = self.mygit_dir / 'logs'
        self.head_file = self.mygit_dir / 'HEAD'
        self.index_file = self.mygit_dir / 'index'
        self.config_file = self.mygit_dir / 'config'
        self.history_file = self.logs_dir / 'HEAD'

        # Lazy loading to avoid circular imports
        self._ref_manager = None
        self._config = None

    @property
    def refs(self):
        """Get RefManager instance."""
        if self._ref_manager is None:
            from .refs import RefManager
            self._ref_manager = RefManager(self)
        return self._ref_manager

    @property
    def config(self):
        """Get Config instance bound to this repository."""
        if self._config is None:
            from .config import Config
            self._config = Config(self.config_file)
        return self._config

    def init(self) -> 'Repository':
        """
        Initialize a new repository.

        Creates the .mygit directory structure:
        .mygit/
        ├── objects/        # Object database
        ├── refs/heads/     # Branch file
        ├── logs/HEAD       # Commit history (created on first commit)
        ├── HEAD            # Symbolic pointer to the branch
        ├── index           # Staging area
        └── config          # Repository configuration

        Returns:
            Repository: self for method chaining

        Raises:
            RepositoryExists: If repository already exists
        """
        if self.mygit_dir.exists():
            raise RepositoryExists(f"Repository already exists at {self.mygit_dir}")

        try:
            self.objects_dir.mkdir(parents=True)
            self.heads_dir.mkdir(parents=True)
            self.logs_dir.mkdir()

            self.head_file.write_text(f'ref: refs/heads/{DEFAULT_BRANCH}\n')
            self.index_file.write_text('')
            self.config_file.write_text('[core]\n\trepositoryformatversion = 0\n')
        except OSError as e:
            raise StorageIO(f"Cannot create repository at {self.mygit_dir}: {e}") from e

        logger.debug("Initialized repository in %s", self.mygit_dir)
        return self

    @classmethod
    def find_repository(cls, path: str = '.') -> Optional['Repository']:
        """
        Find repository by searching up the directory tree.

        Args:
            path: Starting path for search

        Returns:
            Repository if found, None otherwise
        """
        current = Path(path).resolve()

        while True:
            if (current / REPO_DIR).is_dir():
                return cls(str(current))

            # Reached filesystem root
            if current == current.parent:
                return None

            current = current.parent

    def require(self) -> 'Repository':
        """Raise NotARepository unless the .mygit directory exists."""
        if not self.mygit_dir.is_dir():
            raise NotARepository(f"Not a mygit repository: {self.work_tree}")
        return self

    def object_path(self, obj_hash: str) -> Path:
        """
        Get filesystem path for an object.

        Objects are sharded by the first 2 characters of the hash, with
        the remaining 38 characters as the filename.

        Args:
            obj_hash: 40-character SHA-1 hash

        Returns:
            Path: Full path to object file
        """
        return self.objects_dir / obj_hash[:2] / obj_hash[2:]

    def write_raw(self, obj_type: str, payload: bytes) -> str:
        """
        Store an object body under its content hash.

        The hash covers the full encoded form (header included). Objects
        are compressed with zlib and written through a temporary file, so
        a file under the final name is always complete. Writing an object
        that is already stored is a no-op.

        Args:
            obj_type: Object type (blob, tree, commit)
            payload: Serialized object body

        Returns:
            str: SHA-1 hash of the object
        """
        content = encode_object(obj_type, payload)
        obj_hash = hash_object(content)
        path = self.object_path(obj_hash)

        if path.exists():
            logger.debug("Object %s already stored, skipped", obj_hash[:7])
            return obj_hash

        tmp_path = path.parent / f'.{path.name}.tmp'
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_bytes(compress(content))
            os.replace(tmp_path, path)
        except OSError as e:
            with contextlib.suppress(OSError):
                tmp_path.unlink(missing_ok=True)
            raise StorageIO(f"Cannot write object {obj_hash}: {e}") from e

        logger.debug("Stored %s %s (%d bytes)", obj_type, obj_hash[:7], len(payload))
        return obj_hash

    def write_object(self, obj: MygitObject) -> str:
        """
        Write object to repository.

        Args:
            obj: mygit object to write

        Returns:
            str: SHA-1 hash of the object
        """
        return self.write_raw(obj.type, obj.serialize())

    def read_raw(self, obj_hash: str) -> Tuple[str, bytes]:
        """
        Read an object's type and body.

        Args:
            obj_hash: 40-character SHA-1 hash

        Returns:
            Tuple of (object type, payload)

        Raises:
            ObjectNotFound: If no object is stored under the hash
            CorruptObject: If the stored bytes cannot be decoded
            StorageIO: If the object file cannot be read
        """
        if not obj_hash or not HEX_DIGEST.fullmatch(obj_hash):
            raise ObjectNotFound(obj_hash, 'is not a valid object name')

        path = self.object_path(obj_hash)
        if not path.is_file():
            raise ObjectNotFound(obj_hash)

        try:
            compressed = path.read_bytes()
        except OSError as e:
            raise StorageIO(f"Cannot read object {obj_hash}: {e}") from e

        try:
            content = decompress(compressed)
            if hash_object(content) != obj_hash:
                raise CorruptObject("content does not match its hash")
            return decode_object(content)
        except CorruptObject as e:
            raise CorruptObject(f"Object {obj_hash}: {e}") from e

    def read_object(self, obj_hash: str) -> MygitObject:
        """
        Read object from repository.

        Args:
            obj_hash: 40-character SHA-1 hash

        Returns:
            MygitObject: Deserialized object (Blob, Tree, or Commit)
        """
        obj_type, payload = self.read_raw(obj_hash)
        try:
            return parse_object(obj_type, payload)
        except CorruptObject as e:
            raise CorruptObject(f"Object {obj_hash}: {e}") from e

    def object_exists(self, obj_hash: str) -> bool:
        """Check if object exists in repository."""
        return bool(HEX_DIGEST.fullmatch(obj_hash or '')) and self.object_path(obj_hash).is_file()

    def expand_hash(self, prefix: str) -> str:
        """
        Resolve an abbreviated hash to a full one.

        Args:
            prefix: At least 4 hex characters of a hash

        Returns:
            str: The single stored hash starting with prefix

        Raises:
            ObjectNotFound: If nothing or more than one object matches
        """
        prefix = prefix.strip().lower()
        if HEX_DIGEST.fullmatch(prefix):
            return prefix

        if len(prefix) < MIN_PREFIX_LENGTH or not all(c in '0123456789abcdef' for c in prefix):
            raise ObjectNotFound(prefix, 'is not a valid object name')

        shard = self.objects_dir / prefix[:2]
        matches = []
        if shard.is_dir():
            for obj_file in shard.iterdir():
                full_hash = prefix[:2] + obj_file.name
                if obj_file.is_file() and full_hash.startswith(prefix):
                    matches.append(full_hash)

        if not matches:
            raise ObjectNotFound(prefix)
        if len(matches) > 1:
            raise ObjectNotFound(prefix, f'is ambiguous ({len(matches)} matches)')
        return matches[0]

    def hash_file(self, filepath, write: bool = False) -> str:
        """
        Compute the blob hash of a file, optionally storing the blob.

        Args:
            filepath: Path to file
            write: Store the blob in the object database

        Returns:
            str: SHA-1 hash of the blob
        """
        path = Path(filepath)
        if not path.is_file():
            raise PathNotFound(filepath)

        try:
            blob = Blob.from_file(path)
        except OSError as e:
            raise StorageIO(f"Cannot read {filepath}: {e}") from e

        if write:
            return self.write_object(blob)
        return blob.hash

    def write_tree(self) -> str:
        """
        Snapshot the whole work tree into tree objects.

        Returns:
            str: Hash of the root tree
        """
        try:
            tree = Tree.from_directory(self, self.work_tree)
        except OSError as e:
            raise StorageIO(f"Cannot read work tree: {e}") from e
        return self.write_object(tree)

    def load_index(self):
        """Read the staging index from disk."""
        from .index import Index
        index = Index()
        index.read(self.index_file)
        return index

    def __repr__(self) -> str:
        return f"Repository(path={self.work_tree})"
