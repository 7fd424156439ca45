"""Repository and object store tests."""

import os
import pytest
import tempfile
import shutil
import zlib
from pathlib import Path
from mygit.core.repository import Repository
from mygit.core.objects import Blob, Tree, Commit
from mygit.core.errors import (CorruptObject, ObjectNotFound, PathNotFound,
                               RepositoryExists, NotARepository, StorageIO)


@pytest.fixture
def temp_repo():
    """Create temporary repository for testing."""
    temp_dir = tempfile.mkdtemp()
    repo = Repository(temp_dir)
    yield repo
    shutil.rmtree(temp_dir)


def test_repository_init(temp_repo):
    """Test repository initialization creates structure."""
    temp_repo.init()
    assert temp_repo.mygit_dir.name == '.mygit'
    assert temp_repo.objects_dir.is_dir()
    assert temp_repo.heads_dir.is_dir()
    assert temp_repo.logs_dir.is_dir()
    assert temp_repo.head_file.exists()
    assert temp_repo.index_file.read_text() == ''
    assert temp_repo.config_file.exists()


def test_repository_head_content(temp_repo):
    """Test HEAD points to the master branch."""
    temp_repo.init()
    assert temp_repo.head_file.read_text() == 'ref: refs/heads/master\n'


def test_repository_already_exists(temp_repo):
    """Test duplicate init raises error."""
    temp_repo.init()
    with pytest.raises(RepositoryExists, match="already exists"):
        temp_repo.init()


def test_require(temp_repo):
    with pytest.raises(NotARepository):
        temp_repo.require()
    temp_repo.init()
    assert temp_repo.require() is temp_repo


def test_write_and_read_blob(temp_repo):
    """Test blob storage and retrieval."""
    temp_repo.init()
    hash_value = temp_repo.write_object(Blob(b'test data'))

    read_blob = temp_repo.read_object(hash_value)
    assert isinstance(read_blob, Blob)
    assert read_blob.data == b'test data'


def test_write_raw_and_read_raw(repo):
    obj_hash = repo.write_raw('blob', b'raw payload')
    assert repo.read_raw(obj_hash) == ('blob', b'raw payload')
    assert obj_hash == Blob(b'raw payload').hash


def test_write_blob_creates_subdirectory(repo):
    """Test object stored in a two-character shard directory."""
    hash_value = repo.write_object(Blob(b'test'))

    obj_path = repo.object_path(hash_value)
    assert obj_path.exists()
    assert obj_path.parent.name == hash_value[:2]
    assert obj_path.name == hash_value[2:]


def test_stored_bytes_are_compressed(repo):
    hash_value = repo.write_object(Blob(b'content'))
    stored = repo.object_path(hash_value).read_bytes()
    assert zlib.decompress(stored) == b'blob 7\0content'


def test_write_is_idempotent(repo):
    """Writing the same content twice stores exactly one object."""
    first = repo.write_object(Blob(b'same'))
    mtime = repo.object_path(first).stat().st_mtime_ns
    second = repo.write_object(Blob(b'same'))

    assert first == second
    shard = repo.objects_dir / first[:2]
    assert [p.name for p in shard.iterdir()] == [first[2:]]
    assert repo.object_path(first).stat().st_mtime_ns == mtime


def test_read_missing_object(repo):
    with pytest.raises(ObjectNotFound) as exc_info:
        repo.read_object('a' * 40)
    assert 'a' * 40 in str(exc_info.value)


def test_read_invalid_hash(repo):
    with pytest.raises(ObjectNotFound):
        repo.read_object('not-a-hash')


def test_read_corrupt_compression(repo):
    obj_hash = repo.write_object(Blob(b'data'))
    repo.object_path(obj_hash).write_bytes(b'garbage')

    with pytest.raises(CorruptObject, match=obj_hash):
        repo.read_object(obj_hash)


def test_read_bad_length_header(repo):
    content = b'blob 10\0short'
    obj_hash = Blob(b'whatever').hash
    path = repo.object_path(obj_hash)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(zlib.compress(content))

    with pytest.raises(CorruptObject):
        repo.read_object(obj_hash)


def test_read_content_hash_mismatch(repo):
    obj_hash = repo.write_object(Blob(b'original'))
    repo.object_path(obj_hash).write_bytes(zlib.compress(b'blob 8\0modified'))

    with pytest.raises(CorruptObject, match='does not match'):
        repo.read_object(obj_hash)


def test_object_exists(repo):
    obj_hash = repo.write_object(Blob(b'x'))
    assert repo.object_exists(obj_hash)
    assert not repo.object_exists('b' * 40)
    assert not repo.object_exists('xyz')


def test_expand_hash(repo):
    obj_hash = repo.write_object(Blob(b'expand me'))
    assert repo.expand_hash(obj_hash[:8]) == obj_hash
    assert repo.expand_hash(obj_hash.upper()) == obj_hash


def test_expand_hash_too_short(repo):
    obj_hash = repo.write_object(Blob(b'expand me'))
    with pytest.raises(ObjectNotFound):
        repo.expand_hash(obj_hash[:3])


def test_expand_hash_no_match(repo):
    with pytest.raises(ObjectNotFound):
        repo.expand_hash('0000000')


def test_expand_hash_ambiguous(repo):
    shard = repo.objects_dir / 'ab'
    shard.mkdir()
    (shard / ('cd' + '0' * 36)).write_bytes(b'')
    (shard / ('cd' + '1' * 36)).write_bytes(b'')

    with pytest.raises(ObjectNotFound, match='ambiguous'):
        repo.expand_hash('abcd')


def test_hash_file_without_write(repo):
    path = repo.work_tree / 'a.txt'
    path.write_bytes(b'hello\n')

    obj_hash = repo.hash_file(path)
    assert obj_hash == 'ce013625030ba8dba906f756967f9e9ca394464a'
    assert not repo.object_exists(obj_hash)


def test_hash_file_with_write(repo):
    path = repo.work_tree / 'a.txt'
    path.write_bytes(b'hello\n')

    obj_hash = repo.hash_file(path, write=True)
    assert repo.read_object(obj_hash).data == b'hello\n'


def test_hash_file_missing(repo):
    with pytest.raises(PathNotFound):
        repo.hash_file(repo.work_tree / 'missing.txt')


def test_write_tree(repo, working_files):
    tree_hash = repo.write_tree()
    tree = repo.read_object(tree_hash)

    assert isinstance(tree, Tree)
    assert [e.name for e in tree.entries] == ['subdir', 'test1.txt', 'test2.txt']
    assert '.mygit' not in [e.name for e in tree.entries]


def test_find_repository_in_subdirectory(repo):
    """Test finding repo from nested directory."""
    subdir = repo.work_tree / 'subdir' / 'nested'
    subdir.mkdir(parents=True)

    found_repo = Repository.find_repository(str(subdir))
    assert found_repo is not None
    assert found_repo.work_tree == repo.work_tree


def test_find_repository_none():
    """Test no repo found returns None."""
    with tempfile.TemporaryDirectory() as temp_dir:
        assert Repository.find_repository(temp_dir) is None


def test_two_repositories_side_by_side(tmp_path):
    """Handles are independent; nothing is global."""
    (tmp_path / 'one').mkdir()
    (tmp_path / 'two').mkdir()
    first = Repository(tmp_path / 'one').init()
    second = Repository(tmp_path / 'two').init()

    obj_hash = first.write_object(Blob(b'only in first'))
    assert first.object_exists(obj_hash)
    assert not second.object_exists(obj_hash)


def test_failed_write_leaves_no_temp_file(repo, monkeypatch):
    """A failed rename removes the temporary file and stores nothing."""
    def failing_replace(src, dst):
        raise OSError("disk full")

    monkeypatch.setattr(os, 'replace', failing_replace)

    with pytest.raises(StorageIO, match='disk full'):
        repo.write_object(Blob(b'never stored'))

    obj_hash = Blob(b'never stored').hash
    assert not repo.object_exists(obj_hash)
    assert list(repo.object_path(obj_hash).parent.iterdir()) == []
