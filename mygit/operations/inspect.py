"""Read-only views of stored objects and history."""

from typing import List

from mygit.core.errors import MygitError
from mygit.core.objects import Commit, Tree

CAT_MODES = ('content', 'size', 'type')


def cat_file(repo, obj_hash: str, mode: str = 'content') -> bytes:
    """
    Show an object's payload, payload size, or type.

    Args:
        repo: Repository instance
        obj_hash: Full object hash
        mode: 'content', 'size' or 'type'

    Returns:
        bytes: Raw payload, or the size/type as ASCII
    """
    if mode not in CAT_MODES:
        raise ValueError(f"Unknown cat-file mode: {mode}")

    obj_type, payload = repo.read_raw(obj_hash)

    if mode == 'type':
        return obj_type.encode()
    if mode == 'size':
        return str(len(payload)).encode()
    return payload


def list_tree(repo, obj_hash: str, name_only: bool = False) -> List[str]:
    """
    List the entries of a tree, or of a commit's root tree.

    Rows are '<mode> <type> <hash>\\t<name>', or just the names.
    """
    obj = repo.read_object(obj_hash)

    if isinstance(obj, Commit):
        obj = repo.read_object(obj.tree)

    if not isinstance(obj, Tree):
        raise MygitError(f"{obj_hash} is a {obj.type}, not a tree")

    if name_only:
        return [entry.name for entry in obj.entries]
    return [f"{entry.mode} {entry.type} {entry.hash}\t{entry.name}" for entry in obj.entries]


def log(repo):
    """Return history records, newest first."""
    return list(reversed(repo.refs.read_history()))
