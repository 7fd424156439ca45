"""Integration tests for committing and checking out snapshots."""

import pytest
from mygit.core.errors import InvalidCommit
from mygit.operations.checkout import CheckoutState, checkout
from mygit.operations.inspect import log


def test_checkout_round_trip(repo, commit_files, snapshot):
    """Going back to an older commit and forward again restores each snapshot."""
    first = commit_files({'a.txt': b'X'}, 'first')
    first_snapshot = snapshot(repo.work_tree)

    second = commit_files({'a.txt': b'Y', 'b.txt': b'B'}, 'second')
    second_snapshot = snapshot(repo.work_tree)

    checkout(repo, first)
    assert snapshot(repo.work_tree) == first_snapshot == {'a.txt': b'X'}
    assert repo.refs.resolve_head() == first

    checkout(repo, second)
    assert snapshot(repo.work_tree) == second_snapshot == {'a.txt': b'Y', 'b.txt': b'B'}
    assert repo.refs.resolve_head() == second


def test_commit_after_checkout_parents_checked_out_commit(repo, commit_files):
    first = commit_files({'a.txt': b'X'}, 'first')
    commit_files({'a.txt': b'Y'}, 'second')

    checkout(repo, first)
    third = commit_files({'c.txt': b'C'}, 'third')

    assert repo.read_object(third).parent == first
    assert [r.message for r in log(repo)] == ['third', 'second', 'first']


def test_failed_checkout_keeps_everything(repo, commit_files, snapshot):
    commit_files({'a.txt': b'X'}, 'first')
    (repo.work_tree / 'work-in-progress.txt').write_text('unsaved')
    before = snapshot(repo.work_tree)
    head = repo.refs.resolve_head()

    with pytest.raises(InvalidCommit):
        checkout(repo, '0' * 40)

    assert snapshot(repo.work_tree) == before
    assert repo.refs.resolve_head() == head


def test_checkout_nested_paths_restore_flat(repo, commit_files, snapshot):
    """Staged paths in subdirectories are stored under their last segment."""
    commit_hash = commit_files({'docs/guide.md': b'guide', 'top.txt': b'top'})

    result = checkout(repo, commit_hash)

    assert result.state == CheckoutState.UPDATED
    assert snapshot(repo.work_tree) == {'guide.md': b'guide', 'top.txt': b'top'}


def test_checkout_write_tree_commit(repo, snapshot):
    """A commit over a write-tree snapshot reproduces the whole directory."""
    from mygit.core.objects import Commit

    (repo.work_tree / 'a' / 'b').mkdir(parents=True)
    (repo.work_tree / 'a' / 'b' / 'c.txt').write_bytes(b'deep')
    (repo.work_tree / 'a' / 'x.txt').write_bytes(b'x')
    (repo.work_tree / 'root.bin').write_bytes(bytes(range(256)))
    expected = snapshot(repo.work_tree)

    tree_hash = repo.write_tree()
    commit = Commit.create(tree_hash, None, 'A <a@example.com>', 'A <a@example.com>', 'snap',
                           timestamp=10)
    commit_hash = repo.write_object(commit)

    (repo.work_tree / 'root.bin').unlink()
    (repo.work_tree / 'new.txt').write_text('new')

    checkout(repo, commit_hash)
    assert snapshot(repo.work_tree) == expected
