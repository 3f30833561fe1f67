"""User config for the envctl CLI.

The config file is optional. It is read from $ENVCTL_CONFIG_FILE, falling back
to ~/.config/envctl/config.toml:

    [defaults]              # default values for CLI options
    file = ".env.local"
    write = false
    print = true
    json = false

    [parser]
    separator = "="
    split_n = 1

Precedence for each CLI option, lowest first: built-in default, [defaults],
ENVCTL_ALWAYS_* environment variables, the command line itself.
"""

from __future__ import annotations

import os
import tomllib
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from envctl.environ import Environ

CONFIG_FILE_ENV = "ENVCTL_CONFIG_FILE"
_DEFAULT_CONFIG_PATH = Path(".config") / "envctl" / "config.toml"

# Probed in order when no --file is given.
ENV_FILE_CANDIDATES = (".env", ".env.local", ".env.development", ".env.production")

# ENVCTL_ALWAYS_* variables and the CLI option each one defaults.
ALWAYS_FLAGS = {
    "ENVCTL_ALWAYS_WRITE": "write",
    "ENVCTL_ALWAYS_PRINT": "print_",
    "ENVCTL_ALWAYS_USE_JSON": "json_",
    "ENVCTL_ALWAYS_USE_YAML": "yaml_",
    "ENVCTL_ALWAYS_USE_XML": "xml_",
    "ENVCTL_ALWAYS_USE_TOML": "toml_",
    "ENVCTL_ALWAYS_USE_INI": "ini_",
}

# [defaults] keys as written in the file -> click parameter names.
_DEFAULT_KEYS = {
    "file": "file",
    "env": "env",
    "value": "value",
    "add": "add",
    "rm": "rm",
    "has": "has",
    "is": "is_",
    "not": "not_",
    "write": "write",
    "init": "init",
    "print": "print_",
    "verbose": "verbose",
    "prod": "prod",
    "mkall": "mkall",
    "cleanall": "cleanall",
    "json": "json_",
    "yaml": "yaml_",
    "xml": "xml_",
    "toml": "toml_",
    "ini": "ini_",
}


@dataclass
class CLIConfig:
    """Parsed config file."""

    path: Path | None = None               # None when no file was found
    defaults: dict[str, Any] = field(default_factory=dict)
    parser: dict[str, Any] = field(default_factory=dict)


def config_path(environ: Mapping[str, str] | None = None) -> Path:
    env = os.environ if environ is None else environ
    explicit = env.get(CONFIG_FILE_ENV)
    if explicit:
        return Path(explicit).expanduser()
    return Path.home() / _DEFAULT_CONFIG_PATH


def load_config(path: Path | str | None = None, environ: Mapping[str, str] | None = None) -> CLIConfig:
    """Load the TOML config file. A missing file yields an empty CLIConfig."""
    cfg_path = Path(path) if path else config_path(environ)
    if not cfg_path.is_file():
        return CLIConfig()

    with cfg_path.open("rb") as f:
        raw: dict[str, Any] = tomllib.load(f)

    defaults: dict[str, Any] = {}
    for key, value in raw.get("defaults", {}).items():
        param = _DEFAULT_KEYS.get(key)
        if param is None:
            msg = f"unknown option {key!r} in [defaults] of {cfg_path}"
            raise ValueError(msg)
        defaults[param] = value

    return CLIConfig(path=cfg_path, defaults=defaults, parser=dict(raw.get("parser", {})))


def option_defaults(cfg: CLIConfig, environ: Mapping[str, str] | None = None) -> dict[str, Any]:
    """Merge [defaults] with ENVCTL_ALWAYS_* into a click default_map."""
    env = Environ(os.environ if environ is None else environ)
    merged = dict(cfg.defaults)
    for var, param in ALWAYS_FLAGS.items():
        if env.exists(var):
            merged[param] = env.bool(var, bool(merged.get(param, False)))
    return merged


def discover_env_file(root: Path | str | None = None) -> str:
    """Return the first existing conventional env file under root, or ""."""
    base = Path(root) if root else Path(".")
    for name in ENV_FILE_CANDIDATES:
        candidate = base / name
        if candidate.is_file():
            return str(candidate)
    return ""
