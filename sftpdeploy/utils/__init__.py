"""Utilities (logging, retry, exclusion rules, file utilities)"""
from .logging import log, vlog, warn, error, set_verbose
from .retry import retried
from .exclude_patterns import ExclusionRule, parse_exclusions, is_excluded
from .file_utils import sha256_file, remote_join
from .prompt import confirm

__all__ = [
    "log", "vlog", "warn", "error", "set_verbose",
    "retried",
    "ExclusionRule", "parse_exclusions", "is_excluded",
    "sha256_file", "remote_join",
    "confirm",
]
