"""Settings: the immutable configuration shared by the engine and accessors.

Built once at process start with Settings.from_environment() and passed
explicitly to everything that needs it. Nothing in envctl reconfigures itself
on import.

Environment variables (all optional):

    ENVCTL_MAP_ITEM_SEPARATOR       key/value separator          "="
    ENVCTL_MAP_SPLIT_N              max splits per line          1
    ENVCTL_MAP_SEPARATOR            map item separator           ","
    ENVCTL_LIST_SEPARATOR           list item separator          ","
    ENVCTL_INT64_BASE               int64 parse base             10
    ENVCTL_INT64_BIT_SIZE           int64 range check            64
    ENVCTL_FLOAT32_BIT_SIZE         float32 precision            32
    ENVCTL_FLOAT64_BIT_SIZE         float64 precision            64
    ENVCTL_DURATION_BASE            nanosecond parse base        10
    ENVCTL_DURATION_BIT_SIZE        nanosecond range check       64
    ENVCTL_UNIT_DURATION_BASE       unit count parse base        10
    ENVCTL_UNIT_DURATION_BIT_SIZE   unit count range check       64
    ENVCTL_ALWAYS_ALLOW_PANIC       allow raising in user()      true
    ENVCTL_PANIC_NO_USER            raise when no user found     allow_panic
    ENVCTL_ALWAYS_PRINT_ERRORS      log accessor parse errors    false
    ENVCTL_ENABLE_VERBOSE_LOGGING   log accessor lookups         false
    ENVCTL_NEVER_WRITE_PRODUCTION   production write guard       (per file)
    ENVCTL_NEVER_DELETE             clean-all delete guard       (per run)
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, replace
from typing import Any

logger = logging.getLogger("envctl.settings")

MAP_ITEM_SEPARATOR = "ENVCTL_MAP_ITEM_SEPARATOR"
MAP_SPLIT_N = "ENVCTL_MAP_SPLIT_N"
MAP_SEPARATOR = "ENVCTL_MAP_SEPARATOR"
LIST_SEPARATOR = "ENVCTL_LIST_SEPARATOR"
INT64_BASE = "ENVCTL_INT64_BASE"
INT64_BIT_SIZE = "ENVCTL_INT64_BIT_SIZE"
FLOAT32_BIT_SIZE = "ENVCTL_FLOAT32_BIT_SIZE"
FLOAT64_BIT_SIZE = "ENVCTL_FLOAT64_BIT_SIZE"
DURATION_BASE = "ENVCTL_DURATION_BASE"
DURATION_BIT_SIZE = "ENVCTL_DURATION_BIT_SIZE"
UNIT_DURATION_BASE = "ENVCTL_UNIT_DURATION_BASE"
UNIT_DURATION_BIT_SIZE = "ENVCTL_UNIT_DURATION_BIT_SIZE"
ALWAYS_ALLOW_PANIC = "ENVCTL_ALWAYS_ALLOW_PANIC"
PANIC_NO_USER = "ENVCTL_PANIC_NO_USER"
ALWAYS_PRINT_ERRORS = "ENVCTL_ALWAYS_PRINT_ERRORS"
ENABLE_VERBOSE_LOGGING = "ENVCTL_ENABLE_VERBOSE_LOGGING"
NEVER_WRITE_PRODUCTION = "ENVCTL_NEVER_WRITE_PRODUCTION"
NEVER_DELETE = "ENVCTL_NEVER_DELETE"


def _separator(value: str, source: str, fallback: str) -> str:
    """str.split rejects an empty separator; keep the fallback instead."""
    if value:
        return value
    logger.warning("%s is empty, using %r", source, fallback)
    return fallback


@dataclass(frozen=True)
class Settings:
    """Resolved parsing and guard configuration."""

    separator: str = "="
    split_n: int = 1                        # str.split maxsplit; <= 0 means unbounded
    map_separator: str = ","
    list_separator: str = ","

    int64_base: int = 10
    int64_bit_size: int = 64
    float32_bit_size: int = 32
    float64_bit_size: int = 64
    duration_base: int = 10
    duration_bit_size: int = 64
    unit_duration_base: int = 10
    unit_duration_bit_size: int = 64

    allow_panic: bool = True
    panic_no_user: bool = True
    print_errors: bool = False
    verbose: bool = False

    # None means "use the context default" (production file / write flags)
    never_write_production: bool | None = None
    never_delete: bool | None = None

    @classmethod
    def from_environment(cls, environ: Mapping[str, str] | None = None) -> Settings:
        """Read every ENVCTL_* knob from environ (default: os.environ)."""
        from envctl.environ import Environ

        env = Environ(os.environ if environ is None else environ, cls())
        allow_panic = env.bool(ALWAYS_ALLOW_PANIC, True)
        return cls(
            separator=_separator(env.string(MAP_ITEM_SEPARATOR, "="), MAP_ITEM_SEPARATOR, "="),
            split_n=env.int(MAP_SPLIT_N, 1),
            map_separator=_separator(env.string(MAP_SEPARATOR, ","), MAP_SEPARATOR, ","),
            list_separator=_separator(env.string(LIST_SEPARATOR, ","), LIST_SEPARATOR, ","),
            int64_base=env.int(INT64_BASE, 10),
            int64_bit_size=env.int(INT64_BIT_SIZE, 64),
            float32_bit_size=env.int(FLOAT32_BIT_SIZE, 32),
            float64_bit_size=env.int(FLOAT64_BIT_SIZE, 64),
            duration_base=env.int(DURATION_BASE, 10),
            duration_bit_size=env.int(DURATION_BIT_SIZE, 64),
            unit_duration_base=env.int(UNIT_DURATION_BASE, 10),
            unit_duration_bit_size=env.int(UNIT_DURATION_BIT_SIZE, 64),
            allow_panic=allow_panic,
            panic_no_user=env.bool(PANIC_NO_USER, allow_panic),
            print_errors=env.bool(ALWAYS_PRINT_ERRORS, False),
            verbose=env.bool(ENABLE_VERBOSE_LOGGING, False),
            never_write_production=env.optional_bool(NEVER_WRITE_PRODUCTION),
            never_delete=env.optional_bool(NEVER_DELETE),
        )

    def with_parser(self, overrides: Mapping[str, Any], environ: Mapping[str, str] | None = None) -> Settings:
        """Apply a config-file [parser] table for values the environment left unset."""
        env = os.environ if environ is None else environ
        changes: dict[str, Any] = {}
        if "separator" in overrides and MAP_ITEM_SEPARATOR not in env:
            changes["separator"] = _separator(str(overrides["separator"]), "[parser] separator", self.separator)
        if "split_n" in overrides and MAP_SPLIT_N not in env:
            try:
                changes["split_n"] = int(overrides["split_n"])
            except (TypeError, ValueError):
                logger.warning("[parser] split_n %r is not an integer, using %d", overrides["split_n"], self.split_n)
        return replace(self, **changes) if changes else self
