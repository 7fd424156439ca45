"""Checkout: reconcile the work tree with a stored commit."""

import logging
import shutil
import stat
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Iterable, List, Optional

from mygit.core.errors import InvalidCommit, MygitError
from mygit.core.objects import MODE_EXECUTABLE, Blob, Commit, Tree

logger = logging.getLogger(__name__)


class CheckoutState(Enum):
    IDLE = 'idle'
    VALIDATING = 'validating'
    PURGING = 'purging'
    RESTORING = 'restoring'
    UPDATED = 'updated'
    FAILED = 'failed'


@dataclass
class ItemOutcome:
    """Result of removing or restoring one path."""
    path: str
    action: str                 # 'remove', 'mkdir' or 'write'
    ok: bool = True
    error: Optional[str] = None


@dataclass
class CheckoutResult:
    """Everything a checkout did, including per-item failures."""
    commit: str
    tree: Optional[str] = None
    state: CheckoutState = CheckoutState.IDLE
    outcomes: List[ItemOutcome] = field(default_factory=list)

    @property
    def removed(self) -> List[str]:
        return [o.path for o in self.outcomes if o.action == 'remove' and o.ok]

    @property
    def restored(self) -> List[str]:
        return [o.path for o in self.outcomes if o.action == 'write' and o.ok]

    @property
    def failures(self) -> List[ItemOutcome]:
        return [o for o in self.outcomes if not o.ok]

    @property
    def warnings(self) -> List[str]:
        return [f"{o.action} {o.path}: {o.error}" for o in self.failures]


class CheckoutEngine:
    """
    Replaces the work tree with the snapshot of a commit.

    The target is validated before anything is touched: a commit that
    cannot be read never costs the user their working files. After
    that, every top-level entry except the metadata directory and the
    preserved names is deleted, the commit's tree is written out, and
    only then is HEAD's branch moved.

    Purge and restore are best-effort; each path's outcome is recorded
    in the result instead of aborting the checkout.
    """

    def __init__(self, repo, preserve: Optional[Iterable[str]] = None):
        """
        Args:
            repo: Repository instance
            preserve: Extra top-level names the purge must not delete.
                Names from config 'core.preserve' are always added.
        """
        self.repo = repo
        self.preserve = {repo.mygit_dir.name}
        self.preserve.update(repo.config.get_list('core', 'preserve'))
        if preserve:
            self.preserve.update(preserve)
        self.state = CheckoutState.IDLE

    def checkout(self, commit_hash: str) -> CheckoutResult:
        """
        Check out a commit.

        Args:
            commit_hash: Full hash of the target commit

        Returns:
            CheckoutResult with state UPDATED

        Raises:
            InvalidCommit: If the commit or its root tree cannot be read;
                the work tree is left untouched
        """
        result = CheckoutResult(commit=commit_hash)

        self._enter(CheckoutState.VALIDATING, result)
        try:
            result.tree = self._validate(commit_hash)
        except InvalidCommit:
            self._enter(CheckoutState.FAILED, result)
            raise

        self._enter(CheckoutState.PURGING, result)
        self._purge(result)

        self._enter(CheckoutState.RESTORING, result)
        self._restore(result.tree, self.repo.work_tree, result)

        self.repo.refs.update_head(commit_hash)
        self._enter(CheckoutState.UPDATED, result)

        if result.failures:
            logger.warning("Checkout of %s finished with %d warning(s)",
                           commit_hash[:7], len(result.failures))
        return result

    def _enter(self, state: CheckoutState, result: CheckoutResult) -> None:
        logger.debug("Checkout %s: %s -> %s", result.commit[:7], self.state.value, state.value)
        self.state = state
        result.state = state

    def _validate(self, commit_hash: str) -> str:
        try:
            commit = self.repo.read_object(commit_hash)
        except MygitError as e:
            raise InvalidCommit(commit_hash, str(e)) from e

        if not isinstance(commit, Commit):
            raise InvalidCommit(commit_hash, f"object is a {commit.type}, not a commit")

        try:
            tree = self.repo.read_object(commit.tree)
        except MygitError as e:
            raise InvalidCommit(commit_hash, f"tree {commit.tree}: {e}") from e

        if not isinstance(tree, Tree):
            raise InvalidCommit(commit_hash, f"tree {commit.tree} is a {tree.type}")

        return commit.tree

    def _purge(self, result: CheckoutResult) -> None:
        work_tree = self.repo.work_tree

        try:
            items = sorted(work_tree.iterdir())
        except OSError as e:
            logger.warning("Cannot list %s for purge: %s", work_tree, e)
            result.outcomes.append(ItemOutcome(str(work_tree), 'remove', False, str(e)))
            return

        for item in items:
            if item.name in self.preserve:
                continue

            outcome = ItemOutcome(item.name, 'remove')
            try:
                if item.is_dir() and not item.is_symlink():
                    shutil.rmtree(item)
                else:
                    item.unlink()
            except OSError as e:
                logger.warning("Could not remove %s during checkout: %s", item.name, e)
                outcome.ok = False
                outcome.error = str(e)

            result.outcomes.append(outcome)

    def _restore(self, tree_hash: str, directory: Path, result: CheckoutResult) -> None:
        try:
            tree = self.repo.read_object(tree_hash)
            if not isinstance(tree, Tree):
                raise MygitError(f"{tree_hash} is a {tree.type}, not a tree")
        except MygitError as e:
            logger.warning("Cannot read tree for %s: %s", self._relative(directory), e)
            result.outcomes.append(ItemOutcome(self._relative(directory), 'mkdir', False, str(e)))
            return

        for entry in tree.entries:
            path = directory / entry.name
            rel_path = self._relative(path)

            if entry.is_tree:
                try:
                    path.mkdir(parents=True, exist_ok=True)
                except OSError as e:
                    logger.warning("Error creating directory %s: %s", rel_path, e)
                    result.outcomes.append(ItemOutcome(rel_path, 'mkdir', False, str(e)))
                    continue
                result.outcomes.append(ItemOutcome(rel_path, 'mkdir'))
                self._restore(entry.hash, path, result)
                continue

            outcome = ItemOutcome(rel_path, 'write')
            try:
                self._write_blob(entry.hash, entry.mode, path)
            except (MygitError, OSError) as e:
                logger.warning("Error restoring file %s: %s", rel_path, e)
                outcome.ok = False
                outcome.error = str(e)
            else:
                logger.debug("Restored %s", rel_path)
            result.outcomes.append(outcome)

    def _write_blob(self, blob_hash: str, mode: str, path: Path) -> None:
        blob = self.repo.read_object(blob_hash)
        if not isinstance(blob, Blob):
            raise MygitError(f"{blob_hash} is a {blob.type}, not a blob")

        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(blob.data)

        if mode == MODE_EXECUTABLE:
            current = path.stat().st_mode
            path.chmod(current | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)

    def _relative(self, path: Path) -> str:
        return path.relative_to(self.repo.work_tree).as_posix()


def checkout(repo, commit_hash: str, preserve: Optional[Iterable[str]] = None) -> CheckoutResult:
    """Check out a commit into the work tree of repo."""
    return CheckoutEngine(repo, preserve=preserve).checkout(commit_hash)
