"""
Local file collection (build folder + extra folders)
"""
import os
from pathlib import Path, PurePosixPath
from typing import Iterable, Iterator, NamedTuple
from ..errors import ConfigError
from ..utils.exclude_patterns import ExclusionRule, is_excluded
from ..utils.logging import log, vlog, warn


class FileEntry(NamedTuple):
    local_path: Path
    relative_path: str


def _iter_files(root: Path, rules: list[ExclusionRule], skip: frozenset) -> Iterator[FileEntry]:
    for dirpath, dirnames, filenames in os.walk(root, topdown=True, followlinks=False):
        current = Path(dirpath)
        rel_dir = current.relative_to(root).as_posix()
        prefix = "" if rel_dir == "." else rel_dir + "/"

        # Filter directories in-place to control recursion
        kept = []
        for d in dirnames:
            rel = prefix + d
            if is_excluded(d, rel, rules):
                vlog(f"  [EXCLUDE] {rel}/")
            elif (current / d).is_symlink():
                # Not followed: a link back up the tree would never terminate.
                vlog(f"  [SKIP-LINK] {rel}/")
            else:
                kept.append(d)
        dirnames[:] = kept

        for name in filenames:
            rel = prefix + name
            if is_excluded(name, rel, rules):
                vlog(f"  [EXCLUDE] {rel}")
                continue
            path = (current / name).absolute()
            if not path.is_file() or path.resolve() in skip:
                continue
            yield FileEntry(path, rel)


def collect_files(root: Path, rules: list[ExclusionRule],
                  skip: Iterable[Path] = ()) -> list[FileEntry]:
    """
    Returns every regular file below *root* as FileEntry, rel paths always
    with forward slashes. Excluded directories are pruned, not walked.
    A missing root yields [] — callers decide whether that is fatal.
    *skip* holds absolute paths that are never collected (the cache file).
    """
    root = Path(root)
    if not root.is_dir():
        return []
    skip_set = frozenset(Path(p).resolve() for p in skip)
    return list(_iter_files(root, rules, skip_set))


def _resolve_extra(item, base_dir: Path) -> tuple[Path, str]:
    """(local folder, remote base) for one extraFolders entry."""
    if isinstance(item, str) and item.strip():
        local = (base_dir / Path(item).expanduser()).resolve()
        return local, local.name
    if isinstance(item, dict) and item.get("from"):
        local = (base_dir / Path(str(item["from"])).expanduser()).resolve()
        remote_base = str(item.get("to") or "").replace("\\", "/").strip("/")
        return local, remote_base
    raise ConfigError(
        f"Invalid extraFolders entry: {item!r}. "
        'Use "./folder" or {"from": "./folder", "to": "remote/path"}'
    )


def expand_extra_sources(items: list, base_dir: Path, rules: list[ExclusionRule],
                         skip: Iterable[Path] = ()) -> list[FileEntry]:
    """
    Expand extraFolders entries into FileEntry values whose rel paths are
    prefixed with the entry's remote base. Missing folders are skipped.
    """
    skip = list(skip)
    # Validate everything up front so a bad entry fails before any walking.
    resolved = [(item, *_resolve_extra(item, base_dir)) for item in items]
    result: list[FileEntry] = []
    for item, local, remote_base in resolved:
        if not local.is_dir():
            warn(f"Skip: {local} not found")
            continue
        extra = collect_files(local, rules, skip)
        for e in extra:
            rel = PurePosixPath(remote_base, e.relative_path).as_posix() if remote_base else e.relative_path
            result.append(FileEntry(e.local_path, rel))
        label = item["from"] if isinstance(item, dict) else item
        log(f"[extra] Added {len(extra)} file(s) from {label}")
    return result


def merge_entries(primary: list[FileEntry], extra: list[FileEntry]) -> list[FileEntry]:
    """Concatenate, keeping the first entry for any repeated rel path."""
    seen: set[str] = set()
    merged: list[FileEntry] = []
    for e in [*primary, *extra]:
        if e.relative_path in seen:
            warn(f"Duplicate remote path {e.relative_path} from {e.local_path} — skipped")
            continue
        seen.add(e.relative_path)
        merged.append(e)
    return merged
