"""
Remote clean (wipe everything under the deployment root)
"""
from ..core.session import RemoteSession
from ..utils.file_utils import remote_join
from ..utils.logging import vlog


def clean_remote_directory(session: RemoteSession, remote_path: str) -> int:
    """
    Depth-first delete of everything below *remote_path*; the root itself stays.
    A path that does not exist is already clean, both for the root and for
    anything that disappears while we walk.
    Returns the number of files removed.
    """
    try:
        listing = session.list_dir(remote_path)
    except FileNotFoundError:
        vlog(f"  [CLEAN] {remote_path} does not exist — nothing to delete")
        return 0

    removed = 0
    for item in listing:
        if item.name in (".", ".."):
            continue
        item_path = remote_join(remote_path, item.name)
        try:
            if item.is_directory:
                removed += clean_remote_directory(session, item_path)
                session.remove_directory(item_path)
                vlog(f"  [RMDIR ✓] {item_path}")
            else:
                session.remove(item_path)
                removed += 1
                vlog(f"  [DEL ✓] {item_path}")
        except FileNotFoundError:
            vlog(f"  [CLEAN] {item_path} already gone")
    return removed
