"""
Change detection against the deploy cache
"""
from typing import NamedTuple
from .collector import FileEntry
from ..utils.file_utils import sha256_file
from ..utils.logging import vlog


class ChangeSet(NamedTuple):
    changed: list[FileEntry]
    unchanged: int
    new_hashes: dict[str, str]


def detect_changes(entries: list[FileEntry], cache: dict[str, str]) -> ChangeSet:
    """
    Hash every entry and split the list into changed / unchanged.
    *cache* is only read; new_hashes is the candidate cache for a successful run.
    """
    changed: list[FileEntry] = []
    new_hashes: dict[str, str] = {}
    unchanged = 0

    for entry in entries:
        digest = sha256_file(entry.local_path)
        new_hashes[entry.relative_path] = digest
        if cache.get(entry.relative_path) != digest:
            changed.append(entry)
        else:
            unchanged += 1
            vlog(f"  [SAME] {entry.relative_path}")

    return ChangeSet(changed, unchanged, new_hashes)
