"""mygit objects and their on-disk encoding."""

import logging
import re
import stat
import time
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Iterable, Optional, Tuple

from .errors import CorruptObject, MygitError
from .hash import hash_object

logger = logging.getLogger(__name__)

HEX_DIGEST = re.compile(r'[0-9a-f]{40}')

MODE_TREE = '040000'
MODE_EXECUTABLE = '100755'
MODE_FILE = '100644'
TREE_MODES = (MODE_TREE, MODE_EXECUTABLE, MODE_FILE)

OBJECT_TYPES = ('blob', 'tree', 'commit')


def encode_object(obj_type: str, payload: bytes) -> bytes:
    """
    Build the stored form of an object.

    Format: <type> <size>\\0<payload>

    Args:
        obj_type: Object type (blob, tree, commit)
        payload: Serialized object body

    Returns:
        bytes: Header followed by payload
    """
    return f"{obj_type} {len(payload)}\0".encode() + payload


def decode_object(data: bytes) -> Tuple[str, bytes]:
    """
    Split stored object bytes into type and payload.

    Args:
        data: Decompressed object bytes

    Returns:
        Tuple of (object type, payload)

    Raises:
        CorruptObject: If the header is malformed or the size does not match
    """
    null_idx = data.find(b'\0')
    if null_idx == -1:
        raise CorruptObject("Object header is missing its NUL delimiter")

    header = data[:null_idx]
    payload = data[null_idx + 1:]

    parts = header.split(b' ')
    if len(parts) != 2 or not parts[1].isdigit():
        raise CorruptObject(f"Invalid object header: {header!r}")

    obj_type = parts[0].decode('ascii', errors='replace')
    if obj_type not in OBJECT_TYPES:
        raise CorruptObject(f"Unknown object type: {obj_type}")

    size = int(parts[1])
    if size != len(payload):
        raise CorruptObject(f"Object size mismatch: expected {size}, got {len(payload)}")

    return obj_type, payload


def mode_for_path(path: Path) -> str:
    """Return the tree mode for a file or directory on disk."""
    st = path.stat()
    if stat.S_ISDIR(st.st_mode):
        return MODE_TREE
    return MODE_EXECUTABLE if st.st_mode & stat.S_IXUSR else MODE_FILE


class MygitObject(ABC):
    """Base class for all mygit objects."""

    def __init__(self):
        self._hash: Optional[str] = None

    @abstractmethod
    def serialize(self) -> bytes:
        """
        Serialize object to bytes.

        Returns:
            bytes: Serialized object data
        """

    @abstractmethod
    def deserialize(self, data: bytes) -> None:
        """
        Deserialize object from bytes.

        Args:
            data: Serialized object data

        Raises:
            CorruptObject: If data is not a valid encoding
        """

    @property
    def type(self) -> str:
        """Object type name (blob, tree, commit)."""
        return self.__class__.__name__.lower()

    def compute_hash(self) -> str:
        """
        Compute and cache object hash.

        The hash covers the header as well as the payload.

        Returns:
            str: 40-character SHA-1 hash
        """
        if self._hash is None:
            self._hash = hash_object(encode_object(self.type, self.serialize()))
        return self._hash

    @property
    def hash(self) -> str:
        """40-character SHA-1 hash of the object."""
        return self.compute_hash()


class Blob(MygitObject):
    """
    Represents file content.

    A blob stores the raw content of a file without any metadata
    like filename or permissions.
    """

    def __init__(self, data: Optional[bytes] = None):
        super().__init__()
        self.data = data or b''

    def serialize(self) -> bytes:
        return self.data

    def deserialize(self, data: bytes) -> None:
        self.data = data
        self._hash = None

    @classmethod
    def from_file(cls, filepath) -> 'Blob':
        """
        Create blob from file.

        Args:
            filepath: Path to file

        Returns:
            Blob: New blob containing file content
        """
        with open(filepath, 'rb') as f:
            return cls(f.read())

    def __repr__(self) -> str:
        return f"Blob(hash={self.hash[:7]}, size={len(self.data)})"


class TreeEntry:
    """
    A single entry in a tree.

    Each entry contains:
    - mode: '040000' for a directory, '100755' executable, '100644' regular file
    - type: 'tree' or 'blob', derived from mode
    - hash: SHA-1 hash of the child object
    - name: Single path segment
    """

    def __init__(self, mode: str, obj_type: str, obj_hash: str, name: str):
        self.mode = mode
        self.type = obj_type
        self.hash = obj_hash
        self.name = name

    @property
    def is_tree(self) -> bool:
        return self.type == 'tree'

    def __eq__(self, other) -> bool:
        if not isinstance(other, TreeEntry):
            return NotImplemented
        return (self.mode, self.type, self.hash, self.name) == \
            (other.mode, other.type, other.hash, other.name)

    def __lt__(self, other: 'TreeEntry') -> bool:
        """Sort entries by name for consistent ordering."""
        return self.name < other.name

    def __repr__(self) -> str:
        return f"TreeEntry({self.mode} {self.type} {self.hash[:7]} {self.name})"


def check_encodable(name: str) -> None:
    """Raise MygitError if a file name has no UTF-8 form (undecodable on disk)."""
    try:
        name.encode('utf-8')
    except UnicodeEncodeError:
        raise MygitError(f"File name is not valid UTF-8: {name!r}") from None


def _check_entry_name(name: str) -> None:
    if not name or name in ('.', '..') or '/' in name:
        raise CorruptObject(f"Invalid tree entry name: {name!r}")


class Tree(MygitObject):
    """
    Represents directory structure.

    A tree contains entries pointing to blobs (files) and other trees
    (subdirectories), always kept sorted by name so that the encoding
    depends only on the directory contents.
    """

    def __init__(self):
        super().__init__()
        self.entries: list[TreeEntry] = []

    def add_entry(self, mode: str, obj_type: str, obj_hash: str, name: str) -> None:
        """
        Add entry to tree.

        Args:
            mode: File mode
            obj_type: Object type ('blob' or 'tree')
            obj_hash: Object hash
            name: Entry name
        """
        self.entries.append(TreeEntry(mode, obj_type, obj_hash, name))
        self.entries.sort()
        self._hash = None

    def serialize(self) -> bytes:
        """
        Serialize tree.

        Format: <mode> <name>\\0<40-char hex hash>, repeated with no separator.
        The fixed hash width is what delimits consecutive records.

        Returns:
            bytes: Serialized tree data
        """
        return b''.join(
            f"{entry.mode} {entry.name}\0{entry.hash}".encode()
            for entry in sorted(self.entries)
        )

    def deserialize(self, data: bytes) -> None:
        """
        Deserialize tree records, keeping their stored order.

        Raises:
            CorruptObject: On a truncated record, missing delimiter,
                unknown mode, bad name or malformed hash
        """
        entries = []
        pos = 0

        while pos < len(data):
            space_pos = data.find(b' ', pos)
            if space_pos == -1:
                raise CorruptObject(f"Tree record at offset {pos} has no mode delimiter")

            mode = data[pos:space_pos].decode('ascii', errors='replace')
            if mode not in TREE_MODES:
                raise CorruptObject(f"Tree record at offset {pos} has invalid mode {mode!r}")

            null_pos = data.find(b'\0', space_pos + 1)
            if null_pos == -1:
                raise CorruptObject(f"Tree record at offset {pos} has no name delimiter")

            try:
                name = data[space_pos + 1:null_pos].decode()
            except UnicodeDecodeError as e:
                raise CorruptObject(f"Tree record at offset {pos} has undecodable name") from e
            _check_entry_name(name)

            hash_text = data[null_pos + 1:null_pos + 41].decode('ascii', errors='replace')
            if not HEX_DIGEST.fullmatch(hash_text):
                raise CorruptObject(f"Tree entry {name!r} has malformed hash {hash_text!r}")

            obj_type = 'tree' if mode == MODE_TREE else 'blob'
            entries.append(TreeEntry(mode, obj_type, hash_text, name))
            pos = null_pos + 41

        self.entries = entries
        self._hash = None

    @classmethod
    def from_directory(cls, repo, directory) -> 'Tree':
        """
        Build tree from directory contents.

        Writes a blob for every regular file and a tree for every
        subdirectory, depth first. The repository metadata directory,
        symbolic links and special files are skipped.

        Args:
            repo: Repository instance
            directory: Path to directory

        Returns:
            Tree: New tree object (not yet written)

        Raises:
            MygitError: If a name below directory is not valid UTF-8
        """
        tree = cls()

        for item in Path(directory).iterdir():
            if item.name == repo.mygit_dir.name:
                continue

            if item.is_symlink():
                logger.debug("Skipping symbolic link %s", item)
                continue

            check_encodable(item.name)

            if item.is_dir():
                subtree = Tree.from_directory(repo, item)
                obj_hash = repo.write_object(subtree)
                tree.add_entry(MODE_TREE, 'tree', obj_hash, item.name)

            elif item.is_file():
                obj_hash = repo.write_object(Blob.from_file(item))
                tree.add_entry(mode_for_path(item), 'blob', obj_hash, item.name)

        return tree

    @classmethod
    def from_index(cls, entries: Iterable) -> Optional['Tree']:
        """
        Build a single flat tree from staged index entries.

        Only the last path segment is used as the entry name; paths that
        share a directory are not nested into subtrees.

        Args:
            entries: Index entries (objects with path, sha1 and mode)

        Returns:
            Tree, or None if there are no entries
        """
        tree = cls()

        for entry in entries:
            name = entry.path.rsplit('/', 1)[-1]
            tree.entries.append(TreeEntry(entry.mode, 'blob', entry.sha1, name))

        if not tree.entries:
            return None

        tree.entries.sort()
        return tree

    def __repr__(self) -> str:
        return f"Tree(entries={len(self.entries)})"


def _parse_signature(key: str, value: str) -> Tuple[str, int, str]:
    parts = value.rsplit(' ', 2)
    if len(parts) != 3 or not parts[1].isdigit():
        raise CorruptObject(f"Malformed {key} line: {value!r}")
    return parts[0], int(parts[1]), parts[2]


class Commit(MygitObject):
    """
    Represents a commit with metadata.

    A commit captures:
    - Snapshot of project (tree hash)
    - At most one parent commit
    - Author and committer info
    - Timestamp
    - Commit message
    """

    def __init__(self):
        super().__init__()
        self.tree: str = ''
        self.parent: Optional[str] = None
        self.author: str = ''
        self.author_time: int = 0
        self.author_timezone: str = '+0000'
        self.committer: str = ''
        self.committer_time: int = 0
        self.committer_timezone: str = '+0000'
        self.message: str = ''

    @property
    def timestamp(self) -> int:
        return self.committer_time

    def serialize(self) -> bytes:
        """
        Serialize commit.

        Format:
        tree <tree-hash>
        parent <parent-hash>  (root commits have none)
        author Name <email> <timestamp> <timezone>
        committer Name <email> <timestamp> <timezone>

        <commit message>

        Returns:
            bytes: Serialized commit data
        """
        lines = [f'tree {self.tree}']

        if self.parent:
            lines.append(f'parent {self.parent}')

        lines.append(f'author {self.author} {self.author_time} {self.author_timezone}')
        lines.append(f'committer {self.committer} {self.committer_time} {self.committer_timezone}')
        lines.append('')
        lines.append(self.message)

        return ('\n'.join(lines) + '\n').encode()

    def deserialize(self, data: bytes) -> None:
        try:
            content = data.decode()
        except UnicodeDecodeError as e:
            raise CorruptObject("Commit is not valid UTF-8") from e

        header, separator, body = content.partition('\n\n')
        if not separator:
            raise CorruptObject("Commit has no blank line before its message")

        seen = {}
        for line in header.split('\n'):
            key, _, value = line.partition(' ')
            if key not in ('tree', 'parent', 'author', 'committer'):
                raise CorruptObject(f"Unknown commit header: {line!r}")
            if key in seen:
                raise CorruptObject(f"Duplicate commit header: {key}")
            seen[key] = value

        for key in ('tree', 'author', 'committer'):
            if key not in seen:
                raise CorruptObject(f"Commit is missing its {key} header")

        for key in ('tree', 'parent'):
            if key in seen and not HEX_DIGEST.fullmatch(seen[key]):
                raise CorruptObject(f"Commit {key} has malformed hash {seen[key]!r}")

        self.tree = seen['tree']
        self.parent = seen.get('parent')
        self.author, self.author_time, self.author_timezone = \
            _parse_signature('author', seen['author'])
        self.committer, self.committer_time, self.committer_timezone = \
            _parse_signature('committer', seen['committer'])
        self.message = body[:-1] if body.endswith('\n') else body
        self._hash = None

    @classmethod
    def create(
        cls,
        tree_hash: str,
        parent_hash: Optional[str],
        author: str,
        committer: str,
        message: str,
        timestamp: Optional[int] = None,
        timezone: str = '+0000'
    ) -> 'Commit':
        """
        Create a new commit.

        Args:
            tree_hash: Hash of tree object
            parent_hash: Hash of the parent commit, None for a root commit
            author: Author name and email (e.g., "Name <email>")
            committer: Committer name and email
            message: Commit message
            timestamp: Unix timestamp (defaults to current time)
            timezone: Timezone offset (e.g., "+0000", "-0500")

        Returns:
            Commit: New commit object
        """
        commit = cls()
        commit.tree = tree_hash
        commit.parent = parent_hash or None
        commit.author = author
        commit.committer = committer
        commit.message = message

        if timestamp is None:
            timestamp = int(time.time())

        commit.author_time = timestamp
        commit.committer_time = timestamp
        commit.author_timezone = timezone
        commit.committer_timezone = timezone

        return commit

    def __repr__(self) -> str:
        parent_info = f", parent={self.parent[:7]}" if self.parent else ""
        msg_preview = self.message.split('\n')[0][:50]
        return f"Commit(hash={self.hash[:7]}{parent_info}, msg='{msg_preview}')"


def parse_object(obj_type: str, payload: bytes) -> MygitObject:
    """
    Build the object class matching a decoded type.

    Raises:
        CorruptObject: If the type is unknown or the payload is malformed
    """
    if obj_type == 'blob':
        obj = Blob()
    elif obj_type == 'tree':
        obj = Tree()
    elif obj_type == 'commit':
        obj = Commit()
    else:
        raise CorruptObject(f"Unknown object type: {obj_type}")

    obj.deserialize(payload)
    return obj
