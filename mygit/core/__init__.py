"""Core functionality for mygit.

This module contains the core data structures:
- mygit objects (Blob, Tree, Commit) and their encoding
- Repository management and the object store
- Index/staging area
- Reference management and history log
- Configuration management
- Hashing and compression utilities

For commit, checkout and inspection, see mygit.operations
"""

from mygit.core.errors import (MygitError, PathNotFound, ObjectNotFound, CorruptObject,
                               CorruptIndex, InvalidCommit, StorageIO, NotARepository,
                               RepositoryExists, ConfigError)
from mygit.core.objects import MygitObject, Blob, Tree, TreeEntry, Commit
from mygit.core.repository import Repository
from mygit.core.hash import hash_object, hash_file, compress, decompress
from mygit.core.index import Index, IndexEntry, StageResult
from mygit.core.refs import RefManager, HistoryRecord
from mygit.core.config import Config

__all__ = [
    'MygitError',
    'PathNotFound',
    'ObjectNotFound',
    'CorruptObject',
    'CorruptIndex',
    'InvalidCommit',
    'StorageIO',
    'NotARepository',
    'RepositoryExists',
    'ConfigError',
    'MygitObject',
    'Blob',
    'Tree',
    'TreeEntry',
    'Commit',
    'Repository',
    'Index',
    'IndexEntry',
    'StageResult',
    'RefManager',
    'HistoryRecord',
    'Config',
    'hash_object',
    'hash_file',
    'compress',
    'decompress',
]
