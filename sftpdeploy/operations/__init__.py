"""Operations (collect, detect changes, clean, transfer)"""
from .collector import FileEntry, collect_files, expand_extra_sources, merge_entries
from .changes import ChangeSet, detect_changes
from .clean import clean_remote_directory
from .transfer import UploadResult, upload_files

__all__ = [
    "FileEntry", "collect_files", "expand_extra_sources", "merge_entries",
    "ChangeSet", "detect_changes",
    "clean_remote_directory",
    "UploadResult", "upload_files",
]
