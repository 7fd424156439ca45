"""Index (staging area) implementation."""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from .errors import CorruptIndex, MygitError, PathNotFound, StorageIO
from .objects import HEX_DIGEST, MODE_EXECUTABLE, MODE_FILE, Blob, check_encodable, mode_for_path

logger = logging.getLogger(__name__)


@dataclass
class IndexEntry:
    """A staged file: its path, blob hash and mode."""
    path: str           # Path relative to the work tree, '/' separated
    sha1: str           # SHA-1 hash of content
    mode: str           # '100644' or '100755'

    def __repr__(self) -> str:
        return f"IndexEntry({self.mode} {self.sha1[:7]} {self.path})"


@dataclass
class StageResult:
    """Outcome of staging a path: files added and per-file failures."""
    added: List[str] = field(default_factory=list)
    failed: List[Tuple[str, str]] = field(default_factory=list)


class Index:
    """
    mygit index (staging area) implementation.

    The index lists the files to be included in the next commit. It is
    stored as plain text, one 'mode sha1 path' line per entry, in the
    order the entries were staged.
    """

    def __init__(self):
        """Initialize empty index."""
        self.entries: Dict[str, IndexEntry] = {}

    def add_entry(self, path: str, sha1: str, mode: str) -> None:
        """
        Add or replace the entry for a path.

        A replaced entry moves to the end, as if removed and re-appended.

        Args:
            path: File path relative to repository root
            sha1: SHA-1 hash of file content
            mode: File mode
        """
        self.entries.pop(path, None)
        self.entries[path] = IndexEntry(path=path, sha1=sha1, mode=mode)

    def add_file(self, repo, filepath) -> str:
        """
        Stage a file for commit.

        Args:
            repo: Repository instance
            filepath: Path to file (absolute or relative to the work tree)

        Returns:
            str: SHA-1 hash of staged content
        """
        file_path = Path(filepath)

        if not file_path.is_absolute():
            file_path = repo.work_tree / file_path

        if not file_path.exists():
            raise PathNotFound(filepath)

        if not file_path.is_file():
            raise MygitError(f"Not a regular file: {filepath}")

        try:
            rel_path = file_path.relative_to(repo.work_tree)
        except ValueError:
            try:
                rel_path = file_path.resolve().relative_to(repo.work_tree)
            except ValueError:
                raise MygitError(f"Path is outside repository: {filepath}") from None

        rel_name = rel_path.as_posix()
        # The index is one entry per line
        if '\n' in rel_name or '\r' in rel_name:
            raise MygitError(f"File name contains a line break: {rel_name!r}")
        check_encodable(rel_name)

        try:
            blob = Blob.from_file(file_path)
            mode = mode_for_path(file_path)
        except OSError as e:
            raise StorageIO(f"Cannot read {filepath}: {e}") from e

        sha1 = repo.write_object(blob)
        self.add_entry(rel_name, sha1, mode)

        # Auto-persist to disk
        self.write(repo.index_file)

        return sha1

    def add_path(self, repo, path) -> StageResult:
        """
        Stage a file, or every file below a directory.

        Directories are walked through their direct children, skipping the
        repository metadata directory. A file that fails to stage is
        recorded in the result and the walk carries on.

        Args:
            repo: Repository instance
            path: File or directory (absolute or relative to the work tree)

        Returns:
            StageResult: Added paths and (path, reason) failures

        Raises:
            PathNotFound: If path does not exist
        """
        target = Path(path)
        if not target.is_absolute():
            target = repo.work_tree / target

        if not target.exists():
            raise PathNotFound(path)

        result = StageResult()
        self._stage(repo, target, result)
        return result

    def _stage(self, repo, target: Path, result: StageResult) -> None:
        if target.is_symlink():
            logger.debug("Skipping symbolic link %s", target)
            return

        if target.is_dir():
            try:
                children = sorted(target.iterdir())
            except OSError as e:
                logger.warning("Cannot list %s: %s", target, e)
                result.failed.append((str(target), str(e)))
                return

            for child in children:
                if child.name == repo.mygit_dir.name:
                    continue
                self._stage(repo, child, result)
            return

        try:
            self.add_file(repo, target)
        except MygitError as e:
            logger.warning("Cannot stage %s: %s", target, e)
            result.failed.append((str(target), str(e)))
            return

        result.added.append(self._relative(repo, target))

    @staticmethod
    def _relative(repo, target: Path) -> str:
        try:
            return target.relative_to(repo.work_tree).as_posix()
        except ValueError:
            return target.resolve().relative_to(repo.work_tree).as_posix()

    def remove_entry(self, path: str, repo=None) -> None:
        """
        Remove entry from index.

        Args:
            path: Path to remove
            repo: Optional repository instance for auto-persistence
        """
        if path in self.entries:
            del self.entries[path]

            if repo is not None:
                self.write(repo.index_file)

    def get_entry(self, path: str) -> Optional[IndexEntry]:
        """Get entry by path."""
        return self.entries.get(path)

    def snapshot(self) -> List[IndexEntry]:
        """Return the current entries in staging order."""
        return list(self.entries.values())

    def clear(self) -> None:
        """Clear all entries from index."""
        self.entries.clear()

    def write(self, index_path) -> None:
        """
        Write index to disk.

        Args:
            index_path: Path to index file
        """
        content = ''.join(
            f"{entry.mode} {entry.sha1} {entry.path}\n"
            for entry in self.entries.values()
        )
        try:
            Path(index_path).write_bytes(content.encode('utf-8'))
        except OSError as e:
            raise StorageIO(f"Cannot write index {index_path}: {e}") from e

    def read(self, index_path) -> None:
        """
        Read index from disk. A missing file is an empty index.

        Args:
            index_path: Path to index file

        Raises:
            CorruptIndex: If a line is not 'mode sha1 path'
        """
        self.entries.clear()
        index_path = Path(index_path)

        if not index_path.exists():
            return

        try:
            text = index_path.read_bytes().decode('utf-8')
        except UnicodeDecodeError as e:
            raise CorruptIndex(f"Index {index_path} is not valid UTF-8") from e
        except OSError as e:
            raise StorageIO(f"Cannot read index {index_path}: {e}") from e

        for lineno, line in enumerate(text.split('\n'), 1):
            if not line:
                continue

            parts = line.split(' ', 2)
            if (len(parts) != 3 or parts[0] not in (MODE_FILE, MODE_EXECUTABLE)
                    or not HEX_DIGEST.fullmatch(parts[1]) or not parts[2]):
                raise CorruptIndex(f"Malformed index line {lineno}: {line!r}")

            mode, sha1, path = parts
            self.add_entry(path, sha1, mode)

    def __len__(self) -> int:
        """Number of entries in index."""
        return len(self.entries)

    def __repr__(self) -> str:
        return f"Index(entries={len(self.entries)})"
