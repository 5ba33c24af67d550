"""
File content checksums.

Checksums are SHA-256 digests over the full byte stream, hex-encoded. Files
are read in chunks so multi-gigabyte data files never need to fit in memory.
"""

import hashlib
from pathlib import Path

CHUNK_SIZE = 1024 * 1024


def compute_checksum(path: Path | str) -> str:
    """
    Return the hex SHA-256 digest of a file's contents.

    Raises:
        OSError: If the file can't be opened or read.
    """
    digest = hashlib.sha256()
    with open(path, "rb") as handle:
        for chunk in iter(lambda: handle.read(CHUNK_SIZE), b""):
            digest.update(chunk)
    return digest.hexdigest()
