"""Hash and compression tests."""

import os
import zlib
import pytest
from mygit.core.hash import hash_object, hash_file, compress, decompress
from mygit.core.errors import CorruptObject


def test_hash_object_empty():
    """Test hashing empty bytes."""
    result = hash_object(b'')
    assert result == 'da39a3ee5e6b4b0d3255bfef95601890afd80709'


def test_hash_object_deterministic():
    """Test hash consistency for same input."""
    data = b'hello world'
    assert hash_object(data) == hash_object(data)


def test_hash_object_known_value():
    """Digests match plain SHA-1, so they are stable across runs."""
    assert hash_object(b'blob 0\0') == 'e69de29bb2d1d6434b8b29ae775ad8c2e48c5391'


def test_hash_object_different_data():
    """Test different data produces different hashes."""
    assert hash_object(b'hello') != hash_object(b'world')


def test_hash_file(tmp_path):
    """Test hashing file contents."""
    path = tmp_path / 'data.bin'
    path.write_bytes(b'test content')
    assert hash_file(str(path)) == hash_object(b'test content')


@pytest.mark.parametrize('data', [
    b'',
    b'a',
    b'hello world\n' * 1000,
    bytes(range(256)) * 64,
    b'\0' * 500000,
])
def test_compress_roundtrip(data):
    """decompress(compress(x)) == x, including empty input."""
    assert decompress(compress(data)) == data


def test_decompress_high_expansion_ratio():
    """Highly compressible data needs several buffer doublings."""
    data = b'x' * (5 * 1024 * 1024)
    compressed = compress(data)
    assert len(compressed) * 10 < len(data)
    assert decompress(compressed) == data


def test_decompress_random_data():
    """Incompressible data round-trips too."""
    data = os.urandom(20000)
    assert decompress(compress(data)) == data


def test_decompress_garbage_raises():
    with pytest.raises(CorruptObject):
        decompress(b'this is not zlib data')


def test_decompress_empty_input_raises():
    with pytest.raises(CorruptObject):
        decompress(b'')


def test_decompress_truncated_raises():
    compressed = compress(b'some content that will be cut short' * 10)
    with pytest.raises(CorruptObject, match='truncated'):
        decompress(compressed[:len(compressed) // 2])


def test_decompress_trailing_data_raises():
    with pytest.raises(CorruptObject, match='trailing'):
        decompress(compress(b'abc') + b'junk')


def test_compress_is_zlib():
    """Stored bytes are plain zlib streams."""
    assert zlib.decompress(compress(b'payload')) == b'payload'
