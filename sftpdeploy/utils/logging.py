"""
Console output for sftpdeploy: one "[HH:MM:SS] msg" line per event.
Warnings stay on stdout next to the per-file lines; errors go to stderr.
"""
import sys
from datetime import datetime

_verbose = False


def set_verbose(verbose: bool):
    global _verbose
    _verbose = verbose


def _line(msg: str, stream=None):
    ts = datetime.now().strftime("%H:%M:%S")
    print(f"[{ts}] {msg}", file=stream or sys.stdout, flush=True)


def log(msg: str):
    _line(msg)


def vlog(msg: str):
    """Only printed with -v."""
    if _verbose:
        _line(msg)


def warn(msg: str):
    _line(f"⚠  {msg}")


def error(msg: str):
    _line(f"✗  {msg}", sys.stderr)
