#!/usr/bin/env python3
"""
sftpdeploy  —  Upload a build folder to a server over SFTP
=========================================================

Subcommands:
  deploy    Upload the build folder using the nearest sftp.config.* / .env.
  init      Create sftp.config.yaml and .env.example in the current directory.
  status    Show the resolved target and the deploy cache, without connecting.

Run 'sftpdeploy <subcommand> --help' for more details.
"""
import sys
import argparse
from pathlib import Path

OPTIONS_TEMPLATE = """\
# sftp.config.yaml — sftpdeploy project options
#
# localPath:    build folder to upload (relative to this file)
# exclude:      "*.ext" matches a suffix; anything else matches a file or
#               folder name, or any part of the relative path
# extraFolders: "./folder" uploads to <remote>/folder;
#               {from: ./folder, to: remote/sub} uploads to <remote>/remote/sub
localPath: {local_path}
exclude:
  - "*.map"
  - .DS_Store
extraFolders: []
"""

ENV_TEMPLATE = """\
# Copy to .env and fill in. Never commit the real .env.
SFTP_HOST=example.com
SFTP_PORT=22
SFTP_USER=deploy
SFTP_PASS=
# SFTP_KEY=~/.ssh/id_ed25519
SFTP_PATH=/var/www/html
"""


# ── init ─────────────────────────────────────────────────────────────────────

def cmd_init(args):
    """Create sftp.config.yaml and .env.example in the current directory."""
    cwd = Path.cwd()
    targets = {
        cwd / "sftp.config.yaml": OPTIONS_TEMPLATE.replace("{local_path}", _yq(args.local)),
        cwd / ".env.example": ENV_TEMPLATE,
    }

    existing = [p for p in targets if p.exists()]
    if existing and not args.force:
        for p in existing:
            print(f"error: {p.name} already exists in {cwd}", file=sys.stderr)
        print("Use --force to overwrite.", file=sys.stderr)
        sys.exit(1)

    for path, content in targets.items():
        if args.dry_run:
            print(f"[dry-run] Would write {path}:")
            print(content)
            continue
        path.write_text(content, encoding="utf-8")
        print(f"Created {path}")
        if args.verbose:
            print(content)


def _yq(value: str) -> str:
    """Wrap a string in YAML single quotes, escaping embedded single quotes."""
    return "'" + value.replace("\\", "/").replace("'", "''") + "'"


# ── deploy ───────────────────────────────────────────────────────────────────

def cmd_deploy(args):
    """Run a deployment using the nearest configuration."""
    from sftpdeploy.config import resolve_config
    from sftpdeploy.core.deploy_engine import run_deploy
    from sftpdeploy.errors import ConfigError
    from sftpdeploy.utils.logging import error

    try:
        cfg = resolve_config()
    except ConfigError as exc:
        error(str(exc))
        sys.exit(1)

    if args.verbose:
        print(f"[config] Using {cfg.config_dir}")

    code = run_deploy(
        cfg,
        unattended=args.unattended,
        incremental=args.incremental,
        clean=args.clean,
        dry_run=args.dry_run,
        verbose=args.verbose,
    )
    sys.exit(code)


# ── status ────────────────────────────────────────────────────────────────────

def cmd_status(args):
    """Show the resolved configuration and the deploy cache."""
    from sftpdeploy.config import resolve_config
    from sftpdeploy.errors import ConfigError
    from sftpdeploy.state.cache_store import load_cache
    from sftpdeploy.utils.logging import error

    try:
        cfg = resolve_config()
    except ConfigError as exc:
        error(str(exc))
        sys.exit(1)

    cache = load_cache(cfg.cache_file)

    print(f"\nConfig  : {cfg.config_dir}")
    print(f"Local   : {cfg.local_path}{'' if cfg.local_path.is_dir() else '  (missing)'}")
    print(f"Remote  : {cfg.target.describe()}")
    print(f"Exclude : {len(cfg.exclude)} pattern(s)")
    print(f"Extra   : {len(cfg.extra_folders)} folder(s)")
    print(f"Tracked : {len(cache)} file(s) in {cfg.cache_file.name}")
    if args.verbose:
        for rel in sorted(cache):
            print(f"  {cache[rel][:12]}  {rel}")


# ── main ──────────────────────────────────────────────────────────────────────

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sftpdeploy",
        description="Upload a build folder to a server over SFTP",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")

    # ── deploy ────────────────────────────────────────────────────────────────
    deploy_p = subparsers.add_parser(
        "deploy",
        help="Upload the build folder to the configured server",
        description="Upload the build folder using sftp.config.* and .env.",
    )
    deploy_p.add_argument("-y", "--unattended", action="store_true",
                          help="Skip every confirmation prompt")
    deploy_p.add_argument("-i", "--incremental", action="store_true",
                          help="Only upload files whose content changed since the last deploy")
    deploy_p.add_argument("--clean", action="store_true",
                          help="Delete everything in the remote path before uploading")
    deploy_p.add_argument("-n", "--dry-run", action="store_true",
                          help="List what would be uploaded without connecting")
    deploy_p.add_argument("-v", "--verbose", action="store_true",
                          help="Show every file, not just actions")

    # ── init ──────────────────────────────────────────────────────────────────
    init_p = subparsers.add_parser(
        "init",
        help="Create sftp.config.yaml and .env.example in the current directory",
        description="Create starter configuration files for this project.",
    )
    init_p.add_argument("--local", metavar="PATH", default="./dist",
                        help="Build folder to upload (default: ./dist)")
    init_p.add_argument("--force", action="store_true",
                        help="Overwrite existing files")
    init_p.add_argument("-n", "--dry-run", action="store_true",
                        help="Preview without writing files")
    init_p.add_argument("-v", "--verbose", action="store_true",
                        help="Show extra output")

    # ── status ────────────────────────────────────────────────────────────────
    status_p = subparsers.add_parser(
        "status",
        help="Show the resolved target and deploy cache",
        description="Show configuration and cache state without connecting.",
    )
    status_p.add_argument("-v", "--verbose", action="store_true",
                          help="List every cached file")

    return parser


def main(argv=None):
    """CLI entry point for sftpdeploy"""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "deploy":
        cmd_deploy(args)
    elif args.command == "init":
        cmd_init(args)
    elif args.command == "status":
        cmd_status(args)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
