"""Config loading for http-curl.

Reads `.httpcurl/config.yaml` (or `~/.httpcurl/config.yaml`).
Raises SystemExit on parse errors or missing `version` field.
If no config file is found, returns default values (safe to run without config).

Config search order:
  1. `config_path` argument (if provided — for testing or explicit override)
  2. HTTPCURL_CONFIG environment variable (if set)
  3. `.httpcurl/config.yaml` (working directory — for development)
  4. `~/.httpcurl/config.yaml` (home directory — for production deployments)

Environment variable overrides (applied after the file):
  PORT              — overrides server.port
  HIDE_CURL_OPTIONS — "true" disables logging of curl argument vectors

The loaded Config is stored once on ``app.state.config`` at startup and is only
read afterwards; request handlers never mutate it.
"""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field
from typing import Optional

import yaml

from httpcurl.constants import CURL_BINARY, DEFAULT_CURL_TIMEOUT_S
from httpcurl.utils.logger import get_logger

logger = get_logger(__name__)

# ─── Version constants ────────────────────────────────────────────────────────

SUPPORTED_CONFIG_VERSION = 1

SUPPORTED_VERSIONS: frozenset[int] = frozenset({1})

# Default config search paths (HTTPCURL_CONFIG env var prepended at runtime)
DEFAULT_CONFIG_PATHS = [
    ".httpcurl/config.yaml",
    os.path.expanduser("~/.httpcurl/config.yaml"),
]


# ─── Dataclasses ─────────────────────────────────────────────────────────────


@dataclass
class ServerConfig:
    """HTTP binding and uvicorn limits."""

    host: str = "0.0.0.0"
    port: int = 8080
    limit_concurrency: int = 100  # uvicorn returns 503 beyond this


@dataclass
class CurlConfig:
    """Curl execution settings.

    binary:            Path or name of the curl executable.
    default_timeout_s: Deadline used when a request carries no ?timeout=.
    print_args:        Log every sanitized argument vector (HIDE_CURL_OPTIONS=true disables).
    """

    binary: str = CURL_BINARY
    default_timeout_s: float = DEFAULT_CURL_TIMEOUT_S
    print_args: bool = True


@dataclass
class Config:
    """Root configuration object populated from .httpcurl/config.yaml.

    All fields have safe defaults; http-curl can start without any config file.
    """

    version: int = SUPPORTED_CONFIG_VERSION
    server: ServerConfig = field(default_factory=ServerConfig)
    curl: CurlConfig = field(default_factory=CurlConfig)
    path: Optional[str] = None  # Path to the loaded config file

    @classmethod
    def defaults(cls) -> "Config":
        """Return a fully-default Config (no file required)."""
        return cls()

    @classmethod
    def from_dict(cls, raw: dict, path: Optional[str] = None) -> "Config":
        """Construct Config from a parsed YAML dict.

        Merges user-supplied values onto defaults; unknown keys are silently ignored.

        Raises:
            SystemExit(1): On a non-positive curl.default_timeout_s.
        """
        server_raw = raw.get("server") or {}
        server = ServerConfig(
            host=server_raw.get("host", "0.0.0.0"),
            port=server_raw.get("port", 8080),
            limit_concurrency=server_raw.get("limit_concurrency", 100),
        )

        curl_raw = raw.get("curl") or {}
        default_timeout_s = curl_raw.get("default_timeout_s", DEFAULT_CURL_TIMEOUT_S)
        if not isinstance(default_timeout_s, (int, float)) or default_timeout_s <= 0:
            msg = (
                f"CONFIG ERROR: Invalid curl.default_timeout_s: {default_timeout_s!r}. "
                "Must be a positive number of seconds."
            )
            print(msg, file=sys.stderr)
            raise SystemExit(1)
        curl = CurlConfig(
            binary=curl_raw.get("binary", CURL_BINARY),
            default_timeout_s=float(default_timeout_s),
            print_args=curl_raw.get("print_args", True),
        )

        return cls(
            version=raw.get("version", SUPPORTED_CONFIG_VERSION),
            server=server,
            curl=curl,
            path=path,
        )


# ─── Config loading ───────────────────────────────────────────────────────────


def load_config(config_path: Optional[str] = None) -> Config:
    """Load and validate http-curl configuration.

    If no file is found at any search path, returns default Config (not an error).
    If a file is found but invalid, writes error to stderr and raises SystemExit(1).
    Environment overrides are applied in both cases.

    Raises:
        SystemExit(1): On YAML parse error, missing or unsupported ``version``,
                       invalid ``curl.default_timeout_s``, or invalid ``PORT``.
    """
    search_paths: list[str] = []
    if config_path:
        search_paths.append(config_path)
    env_config = os.environ.get("HTTPCURL_CONFIG")
    if env_config:
        search_paths.append(env_config)
    search_paths.extend(DEFAULT_CONFIG_PATHS)

    found_path: Optional[str] = None
    for candidate in search_paths:
        expanded = os.path.expanduser(candidate)
        if os.path.isfile(expanded):
            found_path = expanded
            break

    if found_path is None:
        logger.info("No config file found, using defaults", searched=search_paths)
        config = Config.defaults()
        _apply_env_overrides(config)
        return config

    logger.info("Loading config", path=found_path)

    try:
        with open(found_path) as fh:
            raw = yaml.safe_load(fh)
    except yaml.YAMLError as exc:
        msg = (
            f"CONFIG ERROR: Failed to parse {found_path}: {exc}\n"
            "http-curl refuses to start with an invalid config. "
            "Check the YAML syntax and try again."
        )
        print(msg, file=sys.stderr)
        raise SystemExit(1)
    except OSError as exc:
        msg = f"CONFIG ERROR: Could not read {found_path}: {exc}"
        print(msg, file=sys.stderr)
        raise SystemExit(1)

    if not isinstance(raw, dict):
        if raw is None:
            msg = (
                f"CONFIG ERROR: {found_path} is missing the required 'version' field.\n"
                "Add 'version: 1' to the top of your config file."
            )
        else:
            msg = (
                f"CONFIG ERROR: {found_path} is not a valid YAML mapping.\n"
                "The config file must be a YAML dictionary at the top level."
            )
        print(msg, file=sys.stderr)
        raise SystemExit(1)

    version = raw.get("version")
    if version is None:
        msg = (
            f"CONFIG ERROR: {found_path} is missing the required 'version' field.\n"
            "Add 'version: 1' to the top of your config file."
        )
        print(msg, file=sys.stderr)
        raise SystemExit(1)

    if version not in SUPPORTED_VERSIONS:
        msg = (
            f"CONFIG ERROR: Unsupported config version: {version}. "
            f"Supported versions: {sorted(SUPPORTED_VERSIONS)}."
        )
        print(msg, file=sys.stderr)
        raise SystemExit(1)

    config = Config.from_dict(raw, path=found_path)
    _apply_env_overrides(config)

    logger.info(
        "Config loaded",
        path=found_path,
        version=config.version,
        curl_binary=config.curl.binary,
        default_timeout_s=config.curl.default_timeout_s,
    )
    return config


def _apply_env_overrides(config: Config) -> None:
    """Apply environment variable overrides to a Config object in-place.

    Handles:
      PORT              — overrides config.server.port (SystemExit(1) if not an integer)
      HIDE_CURL_OPTIONS — "true" sets config.curl.print_args to False
    """
    env_port = os.environ.get("PORT")
    if env_port:
        try:
            config.server.port = int(env_port)
        except ValueError:
            msg = f"CONFIG ERROR: PORT environment variable is not a valid integer: '{env_port}'"
            print(msg, file=sys.stderr)
            raise SystemExit(1)

    if os.environ.get("HIDE_CURL_OPTIONS") == "true":
        config.curl.print_args = False
