"""Hash and compression utilities for mygit."""

import hashlib
import zlib

from .errors import CorruptObject


def hash_object(data: bytes) -> str:
    """
    Compute SHA-1 hash of data.
    
    Args:
        data: Bytes to hash
        
    Returns:
        40-character hex string
    """
    return hashlib.sha1(data).hexdigest()


def hash_file(filepath: str) -> str:
    """
    Compute SHA-1 hash of file.
    
    Args:
        filepath: Path to file
        
    Returns:
        40-character hex string
    """
    with open(filepath, 'rb') as f:
        return hash_object(f.read())


def compress(data: bytes) -> bytes:
    """Compress bytes with zlib."""
    return zlib.compress(data)


def decompress(data: bytes) -> bytes:
    """
    Inflate a zlib stream whose expanded size is not known in advance.
    
    Starts with an output limit of ten times the input size and doubles
    it until the whole stream fits.
    
    Args:
        data: Compressed bytes
        
    Returns:
        bytes: Decompressed data
        
    Raises:
        CorruptObject: If the stream is invalid, truncated or has trailing data
    """
    limit = max(len(data) * 10, 64)
    
    while True:
        inflater = zlib.decompressobj()
        try:
            result = inflater.decompress(data, limit)
        except zlib.error as e:
            raise CorruptObject(f"Decompression failed: {e}") from e
        
        # Output limit reached before the stream ended
        if inflater.unconsumed_tail or (not inflater.eof and len(result) >= limit):
            limit *= 2
            continue
        
        if not inflater.eof:
            raise CorruptObject("Decompression failed: truncated stream")
        if inflater.unused_data:
            raise CorruptObject("Decompression failed: trailing data after stream")
        
        return result
