"""
Sequential upload of planned files
"""
from dataclasses import dataclass, field
from pathlib import PurePosixPath
from ..core.session import RemoteSession
from ..errors import DeployConnectionError
from .collector import FileEntry
from ..utils.file_utils import remote_join
from ..utils.logging import log, vlog, warn

CONNECTION_ERRORS = (DeployConnectionError, EOFError)


@dataclass
class UploadResult:
    uploaded: int = 0
    failed: int = 0
    failed_paths: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.failed == 0


def upload_files(session: RemoteSession, remote_root: str,
                 entries: list[FileEntry]) -> UploadResult:
    """
    Upload *entries* one at a time, in order.
    A failing file is logged and counted; the rest of the queue still runs.
    A lost connection is not a per-file failure: it ends the whole upload.
    """
    result = UploadResult()
    total = len(entries)
    known_dirs: set[str] = set()

    for i, entry in enumerate(entries, 1):
        remote_path = remote_join(remote_root, entry.relative_path)
        parent = str(PurePosixPath(remote_path).parent)

        if parent not in known_dirs:
            try:
                session.ensure_directory(parent)
                known_dirs.add(parent)
            except CONNECTION_ERRORS:
                raise
            except Exception as exc:
                # the transfer below reports anything that actually matters
                vlog(f"  mkdir {parent} failed: {exc}")

        try:
            session.transfer(str(entry.local_path), remote_path)
        except CONNECTION_ERRORS:
            raise
        except Exception as exc:
            result.failed += 1
            result.failed_paths.append(entry.relative_path)
            warn(f"  [FAILED] {entry.relative_path}: {exc}")
            continue

        result.uploaded += 1
        log(f"  [PUT ✓] ({i}/{total}) {entry.relative_path}")

    return result
