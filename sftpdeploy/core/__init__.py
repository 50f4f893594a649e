"""Core functionality (remote session, planner, deploy engine)"""
from .session import RemoteEntry, RemoteSession
from .sftp_session import SFTPSession

__all__ = ["RemoteEntry", "RemoteSession", "SFTPSession"]
