"""Commit creation from the staging index."""

import logging
import os
from typing import Optional

from mygit.core.objects import Commit, Tree

logger = logging.getLogger(__name__)

DEFAULT_NAME = 'User'
DEFAULT_EMAIL = 'user@example.com'


def get_author_info(repo) -> str:
    """Get author identity from environment, config, or the default.

    Priority order (highest to lowest):
    1. Environment variables (MYGIT_AUTHOR_NAME/EMAIL)
    2. Config user.name/user.email (MYGIT_USER_*, repository, global)
    3. 'User <user@example.com>'
    """
    config_name, config_email = repo.config.get_user_identity()
    name = os.environ.get('MYGIT_AUTHOR_NAME') or config_name or DEFAULT_NAME
    email = os.environ.get('MYGIT_AUTHOR_EMAIL') or config_email or DEFAULT_EMAIL
    return f"{name} <{email}>"


def create_commit(repo, message: str, author: Optional[str] = None,
                  timestamp: Optional[int] = None) -> Optional[str]:
    """
    Record the staged files as a new commit.

    Builds one flat tree from the index, writes a commit whose parent is
    the current head, moves the head, appends to the history log and
    clears the index.

    Args:
        repo: Repository instance
        message: Commit message
        author: "Name <email>" (defaults to get_author_info)
        timestamp: Unix timestamp (defaults to current time)

    Returns:
        str: New commit hash, or None if there was nothing to commit
    """
    index = repo.load_index()

    tree = Tree.from_index(index.snapshot())
    if tree is None:
        logger.debug("Index is empty, nothing to commit")
        return None

    tree_hash = repo.write_object(tree)
    parent = repo.refs.resolve_head()

    if author is None:
        author = get_author_info(repo)

    commit = Commit.create(
        tree_hash=tree_hash,
        parent_hash=parent,
        author=author,
        committer=author,
        message=message,
        timestamp=timestamp,
    )
    commit_hash = repo.write_object(commit)

    repo.refs.update_head(commit_hash)
    repo.refs.append_history(commit_hash, parent, message, commit.timestamp)

    index.clear()
    index.write(repo.index_file)

    logger.debug("Created commit %s (tree %s, %d file(s))",
                 commit_hash[:7], tree_hash[:7], len(tree.entries))
    return commit_hash
