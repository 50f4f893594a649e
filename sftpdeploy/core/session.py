"""
Remote session contract used by the planner, the cleaner and the uploader.

Any object with these methods works; SFTPSession is the real one and the
tests use an in-memory fake.
"""
from typing import NamedTuple, Protocol, Sequence


class RemoteEntry(NamedTuple):
    name: str
    is_directory: bool


class RemoteSession(Protocol):

    def exists(self, path: str) -> bool:
        """True if a file or directory is present at *path*."""
        ...

    def ensure_directory(self, path: str) -> None:
        """Create *path* and missing ancestors; no-op if it already exists."""
        ...

    def list_dir(self, path: str) -> Sequence[RemoteEntry]:
        """List *path*. Raises FileNotFoundError if it does not exist."""
        ...

    def remove(self, path: str) -> None:
        ...

    def remove_directory(self, path: str) -> None:
        """Remove an empty directory."""
        ...

    def transfer(self, local_path: str, remote_path: str) -> None:
        """Copy a local file to *remote_path*, overwriting what is there."""
        ...

    def close(self) -> None:
        ...
