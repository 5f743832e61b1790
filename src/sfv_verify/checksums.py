"""Checksum utilities for file integrity verification."""

import zlib
from pathlib import Path

# Constants for checksum calculation
CRC32_CHUNK_SIZE = 65536  # 64 KB chunks
CRC32_MASK = 0xFFFFFFFF


def compute_crc32_bytes(data: bytes) -> int:
    """
    Compute CRC32 checksum of an in-memory buffer.
    
    Args:
        data: Bytes to checksum
        
    Returns:
        CRC32 checksum as unsigned 32-bit integer
    """
    return zlib.crc32(data) & CRC32_MASK


def compute_crc32(file_path: Path, chunk_size: int = CRC32_CHUNK_SIZE) -> int:
    """
    Compute CRC32 checksum of entire file.
    
    The file is read in chunks; the running value is fed back into
    zlib.crc32 so the result equals the checksum of the whole content.
    
    Args:
        file_path: Path to the file
        chunk_size: Read size in bytes
        
    Returns:
        CRC32 checksum as unsigned 32-bit integer
        
    Raises:
        OSError: If file cannot be read
    """
    crc = 0
    
    with open(file_path, 'rb') as f:
        while chunk := f.read(chunk_size):
            crc = zlib.crc32(chunk, crc)
    
    # Return as unsigned 32-bit integer
    return crc & CRC32_MASK


def format_crc32(value: int) -> str:
    """Render a checksum the way SFV files store it: 8 uppercase hex digits."""
    return f"{value & CRC32_MASK:08X}"
