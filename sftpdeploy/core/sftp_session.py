"""
SFTP session over paramiko
"""
import socket
import stat
from contextlib import contextmanager
from pathlib import PurePosixPath
from typing import Optional
import paramiko
from .. import config as _cfg
from ..config import Target
from ..errors import DeployConnectionError
from ..utils.logging import log, vlog
from ..utils.retry import retried
from .session import RemoteEntry


class SFTPSession:
    """
    Wraps paramiko SSHClient + SFTPClient.
    Every remote call goes through the retry decorator. A missing path is
    reported as FileNotFoundError, a dropped transport as
    DeployConnectionError; neither is retried.
    """

    def __init__(self, ssh: paramiko.SSHClient, sftp: paramiko.SFTPClient):
        self._ssh: Optional[paramiko.SSHClient] = ssh
        self._sftp: Optional[paramiko.SFTPClient] = sftp

    # ── connection ─────────────────────────────────────────────────────────

    @classmethod
    def connect(cls, target: Target) -> "SFTPSession":
        log(f"[SSH] connecting to {target.username}@{target.host}:{target.port} …")
        client = paramiko.SSHClient()
        client.set_missing_host_key_policy(paramiko.AutoAddPolicy())
        kw: dict = dict(hostname=target.host, port=target.port, username=target.username,
                        timeout=_cfg.CONNECT_TIMEOUT, banner_timeout=30, auth_timeout=30)
        if target.key_path:
            kw["key_filename"] = target.key_path
        if target.password:
            kw["password"] = target.password

        try:
            client.connect(**kw)
            # Keep-alive: send a NOP every 30s
            client.get_transport().set_keepalive(30)
            sftp = client.open_sftp()
        except (paramiko.SSHException, socket.error) as exc:
            client.close()
            raise DeployConnectionError(
                f"Could not connect to {target.host}:{target.port}: {exc}"
            ) from exc

        log("[SSH] connected ✓")
        return cls(client, sftp)

    def close(self):
        if self._sftp is None and self._ssh is None:
            return
        try:
            if self._sftp:
                self._sftp.close()
        finally:
            if self._ssh:
                self._ssh.close()
            self._ssh = None
            self._sftp = None
            log("[SSH] disconnected.")

    # ── sftp ops ────────────────────────────────────────────────────────────

    def _connected(self) -> bool:
        transport = self._ssh.get_transport() if self._ssh else None
        return transport is not None and transport.is_active()

    @contextmanager
    def _link(self):
        """
        Yields the SFTP client. A protocol error, an EOF, or a socket error on
        a dead transport becomes DeployConnectionError; everything else
        (a permission error, a missing path) is left to the caller.
        """
        if self._sftp is None or not self._connected():
            raise DeployConnectionError("SSH connection lost")
        try:
            yield self._sftp
        except (paramiko.SSHException, EOFError) as exc:
            raise DeployConnectionError(f"SSH connection lost: {exc}") from exc
        except socket.error as exc:
            if self._connected():
                raise
            raise DeployConnectionError(f"SSH connection lost: {exc}") from exc

    @retried
    def _stat(self, remote: str):
        with self._link() as sftp:
            return sftp.stat(remote)

    def exists(self, path: str) -> bool:
        try:
            self._stat(path)
            return True
        except FileNotFoundError:
            return False

    def ensure_directory(self, path: str):
        """mkdir -p; existing components are left alone."""
        p = PurePosixPath(path)
        for current in [*reversed(p.parents), p]:
            current_s = str(current)
            if current_s in ("", ".", "/"):
                continue
            if self.exists(current_s):
                continue
            vlog(f"  [MKDIR] {current_s}")
            self._mkdir(current_s)

    @retried
    def _mkdir(self, remote: str):
        with self._link() as sftp:
            try:
                sftp.mkdir(remote)
            except IOError:
                # raced with another mkdir, or it really failed: let stat decide
                if not stat.S_ISDIR(sftp.stat(remote).st_mode or 0):
                    raise

    @retried
    def list_dir(self, path: str) -> list[RemoteEntry]:
        with self._link() as sftp:
            return [
                RemoteEntry(a.filename, stat.S_ISDIR(a.st_mode or 0))
                for a in sftp.listdir_attr(path)
            ]

    @retried
    def remove(self, path: str):
        with self._link() as sftp:
            sftp.remove(path)

    @retried
    def remove_directory(self, path: str):
        with self._link() as sftp:
            sftp.rmdir(path)

    @retried
    def transfer(self, local_path: str, remote_path: str):
        with self._link() as sftp:
            sftp.put(local_path, remote_path)
