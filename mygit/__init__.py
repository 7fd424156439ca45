"""mygit - a content-addressed object store and snapshot engine in the style of Git."""

__version__ = '0.1.0'

from mygit.core.repository import Repository
from mygit.core.objects import MygitObject, Blob, Tree, Commit

__all__ = [
    'Repository',
    'MygitObject',
    'Blob',
    'Tree',
    'Commit',
]
