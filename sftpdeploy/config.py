"""
Configuration for sftpdeploy

Layers, lowest precedence first:
  1. DEFAULTS below
  2. project options file   sftp.config.yaml / .yml / .json
  3. .env file next to it   (credentials only)
  4. process environment    (credentials only)
"""
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional

import yaml

from .errors import ConfigError

# ══════════════════════════════════════════════════════════════════════════════
#  DEFAULTS
# ══════════════════════════════════════════════════════════════════════════════

DEFAULT_LOCAL_PATH = "./dist"
DEFAULT_PORT = 22

OPTIONS_FILES = ("sftp.config.yaml", "sftp.config.yml", "sftp.config.json")
ENV_FILE = ".env"
CACHE_FILE = ".sftp-deploy-cache.json"

# Retry settings
RETRY_MAX = 3
RETRY_BASE_DELAY = 2.0  # seconds; doubles each attempt

CONNECT_TIMEOUT = 20

ENV_HOST = "SFTP_HOST"
ENV_PORT = "SFTP_PORT"
ENV_USER = "SFTP_USER"
ENV_PASS = "SFTP_PASS"
ENV_PATH = "SFTP_PATH"
ENV_KEY = "SFTP_KEY"


@dataclass
class Target:
    """Where to connect and where to put files."""
    host: str
    username: str
    remote_path: str
    port: int = DEFAULT_PORT
    password: Optional[str] = None
    key_path: Optional[str] = None

    def describe(self) -> str:
        return f"{self.username}@{self.host}:{self.port}:{self.remote_path}"


@dataclass
class DeployConfig:
    """Fully resolved and validated configuration handed to the engine."""
    target: Target
    config_dir: Path
    local_path: Path
    exclude: list = field(default_factory=list)
    extra_folders: list = field(default_factory=list)

    @property
    def cache_file(self) -> Path:
        return self.config_dir / CACHE_FILE


# ══════════════════════════════════════════════════════════════════════════════
#  CONFIG DIRECTORY  ── searched upward
# ══════════════════════════════════════════════════════════════════════════════

def _has_config(directory: Path) -> bool:
    if (directory / ENV_FILE).is_file():
        return True
    return any((directory / name).is_file() for name in OPTIONS_FILES)


def find_config_dir(start: Optional[Path] = None) -> Path:
    """
    Search upward from *start* (default: cwd) for a directory holding a
    .env or sftp.config.* file. Falls back to *start* itself.
    """
    origin = (start or Path.cwd()).resolve()
    current = origin
    while True:
        if _has_config(current):
            return current
        parent = current.parent
        if parent == current:
            return origin
        current = parent


def find_options_file(config_dir: Path) -> Optional[Path]:
    for name in OPTIONS_FILES:
        candidate = config_dir / name
        if candidate.is_file():
            return candidate
    return None


def load_options_file(path: Path) -> dict:
    """Parse the project options file. JSON files go through the YAML parser too."""
    try:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid syntax in {path.name}: {exc}") from exc
    except OSError as exc:
        raise ConfigError(f"Cannot read {path}: {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"{path.name} must contain a mapping at the top level")
    return data


def parse_env_file(path: Path) -> dict:
    """
    Read KEY=VALUE lines. Blank lines and '#' comments are skipped,
    matching single or double quotes around a value are stripped.
    """
    values: dict = {}
    if not path.is_file():
        return values
    for line in path.read_text(encoding="utf-8").splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        if line.startswith("export "):
            line = line[len("export "):].lstrip()
        key, sep, value = line.partition("=")
        key = key.strip()
        if not sep or not key:
            continue
        value = value.strip()
        if len(value) >= 2 and value[0] == value[-1] and value[0] in "'\"":
            value = value[1:-1]
        values[key] = value
    return values


def _option(options: dict, *names, default=None):
    for name in names:
        if name in options and options[name] is not None:
            return options[name]
    return default


# ══════════════════════════════════════════════════════════════════════════════
#  RESOLVE
# ══════════════════════════════════════════════════════════════════════════════

def resolve_target(env: Mapping[str, str]) -> Target:
    """Build the connection target from merged credentials, or raise ConfigError."""
    def _get(key: str) -> str:
        return (env.get(key) or "").strip()

    missing = [k for k in (ENV_HOST, ENV_USER, ENV_PATH) if not _get(k)]
    if not _get(ENV_PASS) and not _get(ENV_KEY):
        missing.append(ENV_PASS)
    if missing:
        raise ConfigError(
            f"Missing or empty: {', '.join(missing)}. "
            f"Check your {ENV_FILE} file has all required values "
            f"(see .env.example for reference)."
        )

    port_raw = _get(ENV_PORT)
    try:
        port = int(port_raw) if port_raw else DEFAULT_PORT
    except ValueError:
        raise ConfigError(f"{ENV_PORT} must be a number, got {port_raw!r}")

    return Target(
        host=_get(ENV_HOST),
        port=port,
        username=_get(ENV_USER),
        password=_get(ENV_PASS) or None,
        key_path=_get(ENV_KEY) or None,
        remote_path=_get(ENV_PATH),
    )


def resolve_config(start: Optional[Path] = None,
                   environ: Optional[Mapping[str, str]] = None) -> DeployConfig:
    """
    Resolve every layer into a DeployConfig.
    Raises ConfigError before anything touches the network.
    """
    config_dir = find_config_dir(start)

    options_path = find_options_file(config_dir)
    options = load_options_file(options_path) if options_path else {}

    env = parse_env_file(config_dir / ENV_FILE)
    env.update(os.environ if environ is None else environ)

    target = resolve_target(env)

    local_raw = _option(options, "localPath", "local_path", default=DEFAULT_LOCAL_PATH)
    local_path = Path(str(local_raw)).expanduser()
    if not local_path.is_absolute():
        local_path = config_dir / local_path

    exclude = _option(options, "exclude", default=[])
    extra = _option(options, "extraFolders", "extra_folders", default=[])
    if not isinstance(exclude, list):
        raise ConfigError("'exclude' must be a list")
    if not isinstance(extra, list):
        raise ConfigError("'extraFolders' must be a list")

    return DeployConfig(
        target=target,
        config_dir=config_dir,
        local_path=local_path.resolve(),
        exclude=exclude,
        extra_folders=extra,
    )
