"""
Deploy engine - collection, change detection and orchestration
"""
import traceback
from typing import Callable, Optional
from ..config import DeployConfig, Target
from ..errors import DeployCancelled, LocalSourceError
from ..operations.changes import detect_changes
from ..operations.collector import FileEntry, collect_files, expand_extra_sources, merge_entries
from ..operations.transfer import UploadResult
from ..state.cache_store import load_cache, save_cache
from ..utils.exclude_patterns import parse_exclusions
from ..utils.logging import error, log, set_verbose, vlog, warn
from ..utils.prompt import confirm as _confirm
from .planner import SyncPlanner
from .session import RemoteSession
from .sftp_session import SFTPSession

EXIT_OK = 0
EXIT_FAILURE = 1


def gather_files(cfg: DeployConfig) -> list[FileEntry]:
    """Build folder + extraFolders, minus exclusions and the cache file."""
    if not cfg.local_path.is_dir():
        raise LocalSourceError(
            f"Build folder not found: {cfg.local_path}. "
            f"Run your build command first (e.g. npm run build)."
        )

    rules = parse_exclusions(cfg.exclude)
    skip = [cfg.cache_file]
    files = collect_files(cfg.local_path, rules, skip)
    log(f"[scan] {len(files)} file(s) in {cfg.local_path}")

    if cfg.extra_folders:
        log("[extra] Processing extra folders …")
        extra = expand_extra_sources(cfg.extra_folders, cfg.config_dir, rules, skip)
        files = merge_entries(files, extra)
    return files


def run_deploy(cfg: DeployConfig, *,
               unattended: bool = False,
               incremental: bool = False,
               clean: bool = False,
               dry_run: bool = False,
               verbose: bool = False,
               session_factory: Callable[[Target], RemoteSession] = SFTPSession.connect,
               confirm: Callable[[str], bool] = _confirm) -> int:
    """
    One deployment run. Returns the process exit code:
      0  uploaded (even with per-file failures), nothing to do, or cancelled
      1  local source missing, bad configuration, connection failure or
         a connection lost mid-run
    """
    set_verbose(verbose)

    print(f"\n{'=' * 64}")
    print(f"  Deploy  {cfg.local_path}")
    print(f"    →     {cfg.target.describe()}")
    print(f"{'=' * 64}")
    if dry_run:
        print("  *** DRY-RUN — nothing will be uploaded ***")
    print()

    try:
        files = gather_files(cfg)

        new_hashes: Optional[dict[str, str]] = None
        if incremental:
            log("[incremental] Checking for changes …")
            cache = load_cache(cfg.cache_file)
            vlog(f"  {len(cache)} cached hash(es) loaded from {cfg.cache_file.name}")
            changes = detect_changes(files, cache)
            new_hashes = changes.new_hashes
            if clean:
                # the remote root is emptied first, so nothing unchanged survives there
                log(f"[incremental] --clean given, uploading all {len(files)} file(s)")
            else:
                files = changes.changed
                if changes.unchanged:
                    log(f"[incremental] Skipped {changes.unchanged} unchanged file(s)")
                if not files:
                    log("[incremental] No changes detected. Nothing to upload ✓")
                    return EXIT_OK
                log(f"[incremental] {len(files)} file(s) have changed")
        else:
            log(f"[plan] Found {len(files)} file(s) to upload")

        if not files and not clean:
            log("[plan] Nothing to upload ✓")
            return EXIT_OK

        log(f"[plan] Target: {cfg.target.host}:{cfg.target.remote_path}")

        if dry_run:
            if clean:
                log(f"  [CLEAN-DRY] everything in {cfg.target.remote_path} would be deleted")
            for entry in files:
                log(f"  [PUT-DRY] {entry.relative_path}")
            return EXIT_OK

        if not unattended and not confirm("Connect and check server? (y/n): "):
            raise DeployCancelled("connect declined")
        print()

        planner = SyncPlanner(cfg.target, session_factory,
                              unattended=unattended, clean=clean, confirm=confirm)
        result = planner.run(files)

    except DeployCancelled:
        warn("Cancelled — nothing was changed.")
        return EXIT_OK
    except Exception as exc:
        error(f"Deploy failed: {exc}")
        if verbose:
            traceback.print_exc()
        return EXIT_FAILURE

    _summarize(result)

    # A partially failed run must not mark unsent files as deployed.
    if incremental and new_hashes is not None and result.failed == 0:
        try:
            save_cache(cfg.cache_file, new_hashes)
            log("[cache] Deploy cache updated")
        except OSError as exc:
            warn(f"Failed to save deploy cache: {exc}")
    elif incremental and result.failed:
        warn("Deploy cache not updated — some files failed.")

    return EXIT_OK


def _summarize(result: UploadResult):
    print()
    print(f"{'─' * 64}")
    print(" SUMMARY")
    print(f"  Uploaded : {result.uploaded}")
    print(f"  Failed   : {result.failed}")
    print(f"{'─' * 64}")
    if result.failed:
        print()
        print("⚠  FAILED FILES:")
        for rel in result.failed_paths:
            print(f"   {rel}")
