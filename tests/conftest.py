"""Shared pytest fixtures for mygit tests."""

import pytest
import tempfile
import shutil
from pathlib import Path
from mygit.core.config import Config
from mygit.core.repository import Repository
from mygit.core.objects import Blob, Tree, Commit
from mygit.operations.commit import create_commit

AUTHOR = "Test User <test@example.com>"


@pytest.fixture(autouse=True)
def isolated_config(tmp_path_factory, monkeypatch):
    """Keep tests away from the user's global config and environment."""
    home = tmp_path_factory.mktemp('home')
    monkeypatch.setattr(Config, 'GLOBAL_CONFIG_PATH', home / '.mygitconfig')
    for name in ('MYGIT_AUTHOR_NAME', 'MYGIT_AUTHOR_EMAIL', 'MYGIT_USER_NAME',
                 'MYGIT_USER_EMAIL', 'MYGIT_CORE_PRESERVE'):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    tmpdir = tempfile.mkdtemp()
    yield Path(tmpdir).resolve()
    shutil.rmtree(tmpdir, ignore_errors=True)


@pytest.fixture
def repo(temp_dir):
    """Create an initialized repository."""
    repo = Repository(str(temp_dir))
    repo.init()
    return repo


@pytest.fixture
def repo_with_config(repo):
    """Create a repository with user identity set."""
    repo.config_file.write_text("""[user]
\tname = Test User
\temail = test@example.com
""")
    return repo


@pytest.fixture
def sample_blob():
    """Create a sample blob object."""
    return Blob(b"Hello, World!\n")


@pytest.fixture
def sample_tree(repo, sample_blob):
    """Create a sample tree with one blob."""
    blob_hash = repo.write_object(sample_blob)
    tree = Tree()
    tree.add_entry('100644', 'blob', blob_hash, 'test.txt')
    return tree


@pytest.fixture
def sample_commit(sample_tree, repo):
    """Sample root commit object (not written)."""
    tree_hash = repo.write_object(sample_tree)
    return Commit.create(
        tree_hash=tree_hash,
        parent_hash=None,
        author=AUTHOR,
        committer=AUTHOR,
        message="Test commit",
        timestamp=1698660000,
    )


@pytest.fixture
def working_files(repo):
    """Create sample file structure in repository."""
    file1 = repo.work_tree / "test1.txt"
    file2 = repo.work_tree / "test2.txt"

    (repo.work_tree / "subdir").mkdir()
    file3 = repo.work_tree / "subdir" / "test3.txt"

    file1.write_text("Content 1")
    file2.write_text("Content 2")
    file3.write_text("Content 3")

    return {
        'file1': file1,
        'file2': file2,
        'file3': file3
    }


@pytest.fixture
def commit_files(repo):
    """
    Return a helper that writes files, stages them and commits.

    Usage: commit_files({'a.txt': b'X'}, message='First') -> commit hash
    """
    def _commit(files, message="Test commit"):
        index = repo.load_index()
        for name, content in files.items():
            path = repo.work_tree / name
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(content)
            index.add_file(repo, path)
        return create_commit(repo, message, author=AUTHOR)

    return _commit


def snapshot_dir(root: Path) -> dict:
    """Map every path under root (metadata dir excluded) to its bytes or None for dirs."""
    result = {}
    for path in sorted(root.rglob('*')):
        rel = path.relative_to(root)
        if rel.parts[0] == '.mygit':
            continue
        result[rel.as_posix()] = None if path.is_dir() else path.read_bytes()
    return result


@pytest.fixture
def snapshot():
    """Expose snapshot_dir to tests."""
    return snapshot_dir
