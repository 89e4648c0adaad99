"""
Compression utilities for regpkg

Auto-detects the compression of a registry file:
- zstd
- gzip
- xz/lzma
- bzip2
- plain (uncompressed plist)
"""

from pathlib import Path
from typing import Union

# Magic bytes for format detection
MAGIC_ZSTD = b'\x28\xb5\x2f\xfd'
MAGIC_GZIP = b'\x1f\x8b'
MAGIC_XZ = b'\xfd7zXZ\x00'
MAGIC_BZ2 = b'BZh'


def detect_format(data: bytes) -> str:
    """Detect compression format from magic bytes.

    Args:
        data: First 8+ bytes of the file

    Returns:
        Format name: 'zstd', 'gzip', 'xz', 'bzip2', or 'plain'
    """
    if data[:4] == MAGIC_ZSTD:
        return 'zstd'
    elif data[:2] == MAGIC_GZIP:
        return 'gzip'
    elif data[:6] == MAGIC_XZ:
        return 'xz'
    elif data[:3] == MAGIC_BZ2:
        return 'bzip2'
    else:
        return 'plain'


def decompress_bytes(data: bytes) -> bytes:
    """Decompress bytes, auto-detecting format.

    Args:
        data: Compressed data

    Returns:
        Decompressed bytes

    Raises:
        ImportError: If zstandard module is not installed (for zstd files)
        ValueError: If decompression fails
    """
    fmt = detect_format(data)

    if fmt == 'zstd':
        try:
            import zstandard as zstd
        except ImportError:
            raise ImportError(
                "Module 'zstandard' required for zstd decompression. "
                "Install with: pip install zstandard"
            )
        dctx = zstd.ZstdDecompressor()
        try:
            # Frames written in streaming mode carry no content size
            with dctx.stream_reader(data) as reader:
                return reader.read()
        except zstd.ZstdError as e:
            raise ValueError(f"zstd decompression failed: {e}")

    elif fmt == 'gzip':
        import gzip
        try:
            return gzip.decompress(data)
        except (OSError, EOFError) as e:
            raise ValueError(f"gzip decompression failed: {e}")

    elif fmt == 'xz':
        import lzma
        try:
            return lzma.decompress(data)
        except lzma.LZMAError as e:
            raise ValueError(f"xz decompression failed: {e}")

    elif fmt == 'bzip2':
        import bz2
        try:
            return bz2.decompress(data)
        except (OSError, EOFError) as e:
            raise ValueError(f"bzip2 decompression failed: {e}")

    else:
        # Plain/uncompressed
        return data


def read_file(filename: Union[str, Path]) -> bytes:
    """Read a possibly compressed file and return its decompressed content.

    Args:
        filename: Path to the file

    Returns:
        Decompressed content as bytes
    """
    path = Path(filename)
    with open(path, 'rb') as f:
        return decompress_bytes(f.read())
