"""
Deployment planner: connect → clean? → discover existing → confirm? → upload → close
"""
from typing import Callable
from ..config import Target
from ..errors import DeployCancelled
from ..operations.clean import clean_remote_directory
from ..operations.collector import FileEntry
from ..operations.transfer import UploadResult, upload_files
from ..utils.file_utils import remote_join
from ..utils.logging import log, vlog, warn
from ..utils.prompt import confirm as _confirm
from .session import RemoteSession

SHOW_MAX = 20  # existing files listed before the "... and N more" line


class SyncPlanner:
    """
    Drives one deployment against one remote session.

    States, in order:
      Connecting        session_factory(target)
      CleanDestination  only with clean=True
      DiscoverExisting  skipped right after a clean
      ConfirmOverwrite  only when something exists and unattended=False
      Uploading         upload_files()
      Finalizing        session.close(), always
    Declining a prompt raises DeployCancelled before anything is transferred.
    """

    def __init__(self, target: Target,
                 session_factory: Callable[[Target], RemoteSession],
                 unattended: bool = False,
                 clean: bool = False,
                 confirm: Callable[[str], bool] = _confirm):
        self.target = target
        self.session_factory = session_factory
        self.unattended = unattended
        self.clean = clean
        self.confirm = confirm

    def run(self, entries: list[FileEntry]) -> UploadResult:
        session = self.session_factory(self.target)
        try:
            cleaned = False
            if self.clean:
                self.clean_destination(session)
                cleaned = True

            existing = [] if cleaned else self.discover_existing(session, entries)
            if existing:
                self.confirm_overwrite(existing)

            log("[upload] Uploading …")
            return upload_files(session, self.target.remote_path, entries)
        finally:
            session.close()

    # ── states ──────────────────────────────────────────────────────────────

    def clean_destination(self, session: RemoteSession):
        root = self.target.remote_path
        if not self.unattended:
            print()
            warn(f"This will DELETE all files in {root}")
            log("(This is relative to your SFTP user's root directory)")
            if not self.confirm("Continue? (y/n): "):
                raise DeployCancelled("remote clean declined")
            print()
        log("[clean] Cleaning remote directory …")
        removed = clean_remote_directory(session, root)
        log(f"[clean] Remote directory cleaned ({removed} file(s) removed)")

    def discover_existing(self, session: RemoteSession,
                          entries: list[FileEntry]) -> list[str]:
        """Rel paths of entries that already exist on the remote."""
        log("[check] Checking existing files …")
        existing: list[str] = []
        for entry in entries:
            remote_path = remote_join(self.target.remote_path, entry.relative_path)
            if session.exists(remote_path):
                vlog(f"  [EXISTS] {entry.relative_path}")
                existing.append(entry.relative_path)
        return existing

    def confirm_overwrite(self, existing: list[str]):
        if self.unattended:
            log(f"[check] Overwriting {len(existing)} existing file(s) (--unattended mode)")
            return

        print()
        warn(f"{len(existing)} file(s) will be overwritten:")
        print()
        for rel in existing[:SHOW_MAX]:
            print(f"  → {rel}")
        if len(existing) > SHOW_MAX:
            print(f"  ... and {len(existing) - SHOW_MAX} more")
        print()

        if not self.confirm("Overwrite these files? (y/n): "):
            raise DeployCancelled("overwrite declined")
        print()
