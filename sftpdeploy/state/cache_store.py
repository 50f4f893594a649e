"""
Deploy cache (relative path → SHA-256 of what was last deployed)
"""
import json
import os
import tempfile
from pathlib import Path


def load_cache(path: Path) -> dict[str, str]:
    """
    Format: {"assets/app.js": "<sha256 hex>", ...}
    A missing, unreadable or malformed file means "no prior deploy".
    """
    if not path.exists():
        return {}
    try:
        data = json.loads(path.read_text("utf-8"))
    except (OSError, ValueError):
        return {}
    if not isinstance(data, dict):
        return {}
    if not all(isinstance(k, str) and isinstance(v, str) for k, v in data.items()):
        return {}
    return data


def save_cache(path: Path, cache: dict[str, str]):
    """
    Replace the cache file with *cache*.
    Written to a sibling temp file first, then renamed over the target.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=path.name + ".", suffix=".tmp", dir=str(path.parent))
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(dict(sorted(cache.items())), f, indent=2)
            f.write("\n")
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
