"""Operations module for high-level mygit operations.

This module contains the logic that drives the core objects:
- Commit creation from the index
- Checkout of a commit into the work tree
- Read-only inspection (cat-file, ls-tree, log)
"""

from mygit.operations.checkout import (CheckoutEngine, CheckoutResult, CheckoutState,
                                       ItemOutcome, checkout)
from mygit.operations.commit import create_commit, get_author_info
from mygit.operations.inspect import cat_file, list_tree, log

__all__ = [
    'CheckoutEngine', 'CheckoutResult', 'CheckoutState', 'ItemOutcome', 'checkout',
    'create_commit', 'get_author_info',
    'cat_file', 'list_tree', 'log',
]
