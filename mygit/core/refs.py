"""Reference management for mygit."""

import logging
import time
from dataclasses import dataclass
from typing import List, Optional

from .errors import NotARepository, StorageIO
from .objects import HEX_DIGEST

logger = logging.getLogger(__name__)

SYMBOLIC_PREFIX = 'ref: '
RECORD_END = '---'


@dataclass
class HistoryRecord:
    """One entry of the commit history log."""
    commit: str
    parent: Optional[str]
    message: str
    timestamp: int


class RefManager:
    """
    Manages HEAD, the branch it points to, and the history log.

    HEAD is always symbolic ('ref: refs/heads/master'). Updates are
    written through to the branch file; HEAD itself is never rewritten.
    """

    def __init__(self, repo):
        """
        Initialize reference manager.

        Args:
            repo: Repository instance
        """
        self.repo = repo
        self.mygit_dir = repo.mygit_dir
        self.head_file = repo.head_file
        self.history_file = repo.history_file

    def head_target(self) -> str:
        """
        Return the reference HEAD points to (e.g. 'refs/heads/master').

        Raises:
            NotARepository: If HEAD is missing or not symbolic
        """
        try:
            content = self.head_file.read_text().strip()
        except FileNotFoundError:
            raise NotARepository(f"HEAD not found in {self.mygit_dir}") from None
        except OSError as e:
            raise StorageIO(f"Cannot read HEAD: {e}") from e

        if not content.startswith(SYMBOLIC_PREFIX):
            raise NotARepository(f"HEAD is not a symbolic reference: {content!r}")

        return content[len(SYMBOLIC_PREFIX):].strip()

    def read_ref(self, ref_name: str) -> Optional[str]:
        """
        Read a reference and return its commit hash.

        Args:
            ref_name: Reference name (e.g., 'refs/heads/master')

        Returns:
            Commit hash or None if the reference has no value yet
        """
        ref_path = self.mygit_dir / ref_name
        if not ref_path.is_file():
            return None

        try:
            content = ref_path.read_text().strip()
        except OSError as e:
            raise StorageIO(f"Cannot read {ref_name}: {e}") from e

        return content or None

    def resolve_head(self) -> Optional[str]:
        """
        Resolve HEAD to a commit hash.

        Returns:
            Commit hash or None if nothing has been committed yet
        """
        if not self.head_file.exists():
            return None
        return self.read_ref(self.head_target())

    def get_current_branch(self) -> Optional[str]:
        """Get the current branch name."""
        target = self.head_target()
        if target.startswith('refs/heads/'):
            return target[len('refs/heads/'):]
        return None

    def update_head(self, commit_hash: str) -> None:
        """
        Point the branch named by HEAD at a commit.

        Args:
            commit_hash: Commit hash to record
        """
        target = self.head_target()
        ref_path = self.mygit_dir / target

        try:
            ref_path.parent.mkdir(parents=True, exist_ok=True)
            ref_path.write_text(commit_hash + '\n')
        except OSError as e:
            raise StorageIO(f"Cannot update {target}: {e}") from e

        logger.debug("Updated %s to %s", target, commit_hash[:7])

    def append_history(
        self,
        commit_hash: str,
        parent_hash: Optional[str],
        message: str,
        timestamp: Optional[int] = None
    ) -> None:
        """
        Append one record to the history log.

        Record format:
        commit <hash>
        parent <hash>      (omitted for root commits)
        message <line>     (one per message line)
        timestamp <unix>
        ---

        Args:
            commit_hash: New commit hash
            parent_hash: Previous head, or None
            message: Commit message
            timestamp: Unix timestamp (defaults to current time)
        """
        if timestamp is None:
            timestamp = int(time.time())

        lines = [f'commit {commit_hash}']
        if parent_hash:
            lines.append(f'parent {parent_hash}')
        lines.extend(f'message {line}' for line in message.split('\n'))
        lines.append(f'timestamp {timestamp}')
        lines.append(RECORD_END)

        try:
            self.history_file.parent.mkdir(parents=True, exist_ok=True)
            with open(self.history_file, 'a', encoding='utf-8') as f:
                f.write('\n'.join(lines) + '\n')
        except OSError as e:
            raise StorageIO(f"Cannot append to history log: {e}") from e

    def read_history(self) -> List[HistoryRecord]:
        """
        Read the history log.

        Returns:
            Records in the order they were appended (oldest first)
        """
        if not self.history_file.exists():
            return []

        try:
            text = self.history_file.read_text(encoding='utf-8')
        except OSError as e:
            raise StorageIO(f"Cannot read history log: {e}") from e

        records = []
        current = {}
        messages = []

        for line in text.split('\n'):
            if line == RECORD_END:
                if current.get('commit'):
                    records.append(HistoryRecord(
                        commit=current['commit'],
                        parent=current.get('parent'),
                        message='\n'.join(messages),
                        timestamp=int(current.get('timestamp') or 0),
                    ))
                current = {}
                messages = []
                continue

            key, _, value = line.partition(' ')
            if key == 'message':
                messages.append(value)
            elif key in ('commit', 'parent') and HEX_DIGEST.fullmatch(value):
                current[key] = value
            elif key == 'timestamp' and value.isdigit():
                current[key] = value
            elif line:
                logger.warning("Ignoring malformed history line: %r", line)

        return records
