"""
File utilities (hashing, remote path joins)
"""
import hashlib
from pathlib import Path, PurePosixPath
from typing import Union

CHUNK_SIZE = 65536


def sha256_file(path: Union[str, Path]) -> str:
    """Compute the SHA-256 hex digest of a local file"""
    h = hashlib.sha256()
    with open(path, "rb") as f:
        for chunk in iter(lambda: f.read(CHUNK_SIZE), b""):
            h.update(chunk)
    return h.hexdigest()


def remote_join(root: str, rel: str) -> str:
    """Join a remote root and a relative path with forward slashes."""
    return str(PurePosixPath(root) / rel.lstrip("/"))
