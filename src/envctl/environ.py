"""Typed accessors over environment variables.

    env = Environ()                       # os.environ + Settings()
    port = env.int("PORT", 8080)
    hosts = env.list("HOSTS", [])
    timeout = env.duration("TIMEOUT", timedelta(seconds=5))

Every getter returns its fallback when the variable is unset or does not
parse. Parse failures are logged when Settings.print_errors is on. Separators,
bases and bit sizes come from the Settings value, never from module state.
"""

from __future__ import annotations

import logging
import os
import re
import struct
import tempfile
from collections.abc import Mapping, MutableMapping
from dataclasses import dataclass
from datetime import timedelta

from envctl.errors import MissingVariableError
from envctl.settings import Settings

logger = logging.getLogger("envctl.environ")

_TRUE = frozenset({"1", "t", "T", "TRUE", "true", "True"})
_FALSE = frozenset({"0", "f", "F", "FALSE", "false", "False"})

# Nanoseconds per unit, Go time.ParseDuration units.
_UNITS_NS = {
    "ns": 1,
    "us": 1_000,
    "µs": 1_000,
    "μs": 1_000,
    "ms": 1_000_000,
    "s": 1_000_000_000,
    "m": 60 * 1_000_000_000,
    "h": 3600 * 1_000_000_000,
}
_DURATION_PART = re.compile(r"(\d+\.?\d*|\.\d+)(ns|us|µs|μs|ms|s|m|h)")


def parse_bool(text: str) -> bool:
    """Parse a boolean the way strconv.ParseBool does."""
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    msg = f"invalid boolean: {text!r}"
    raise ValueError(msg)


def parse_int(text: str, base: int, bit_size: int) -> int:
    """Parse a signed integer and check it fits in bit_size bits."""
    value = int(text, base)
    limit = 1 << (bit_size - 1)
    if not -limit <= value < limit:
        msg = f"value {text!r} out of range for {bit_size}-bit integer"
        raise ValueError(msg)
    return value


def parse_duration(text: str) -> timedelta:
    """Parse a duration string such as "300ms", "-1.5h" or "2h45m"."""
    s = text
    sign = 1
    if s[:1] in ("+", "-"):
        sign = -1 if s[0] == "-" else 1
        s = s[1:]
    if s == "0":
        return timedelta(0)
    if not s:
        msg = f"invalid duration: {text!r}"
        raise ValueError(msg)

    total_ns = 0.0
    pos = 0
    while pos < len(s):
        m = _DURATION_PART.match(s, pos)
        if m is None:
            msg = f"invalid duration: {text!r}"
            raise ValueError(msg)
        total_ns += float(m.group(1)) * _UNITS_NS[m.group(2)]
        pos = m.end()
    return timedelta(microseconds=sign * total_ns / 1_000)


@dataclass(frozen=True)
class UserInfo:
    username: str
    name: str
    uid: str
    gid: str
    home_dir: str


class Environ:
    """Typed view over a mapping of environment variables."""

    def __init__(
        self,
        environ: MutableMapping[str, str] | Mapping[str, str] | None = None,
        settings: Settings | None = None,
    ) -> None:
        self.environ = os.environ if environ is None else environ
        self.settings = settings or Settings()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _lookup(self, name: str) -> str | None:
        return self.environ.get(name)

    def _log_error(self, name: str, exc: Exception) -> None:
        if self.settings.print_errors:
            logger.error("Error processing env var '%s': %s", name, exc)

    def _verbose(self, msg: str, *args: object) -> None:
        if self.settings.verbose:
            logger.info(msg, *args)

    # ------------------------------------------------------------------
    # Existence
    # ------------------------------------------------------------------

    def exists(self, name: str) -> bool:
        ok = name in self.environ
        if not ok:
            self._verbose("exists(%s) = %s", name, ok)
        return ok

    def must_exist(self, name: str) -> None:
        """Raise MissingVariableError unless name is set."""
        if name not in self.environ:
            msg = f"required environment variable '{name}' is not set"
            self._log_error(name, MissingVariableError(msg))
            raise MissingVariableError(msg)
        self._verbose("must_exist() confirmed %s exists", name)

    # ------------------------------------------------------------------
    # Truthy
    # ------------------------------------------------------------------

    def is_true(self, name: str) -> bool:
        """True only when name is set to a true value."""
        ok = self.bool(name, False)
        self._verbose("is_true(%s) = %s", name, ok)
        return ok

    def is_false(self, name: str) -> bool:
        """True when name is false, unset or unparseable."""
        ok = not self.bool(name, False)
        self._verbose("is_false(%s) = %s", name, ok)
        return ok

    def are_true(self, *names: str) -> bool:
        for name in names:
            if not self.is_true(name):
                self._verbose("are_true(%s) = False (failed on %s)", ", ".join(names), name)
                return False
        return True

    def are_false(self, *names: str) -> bool:
        for name in names:
            if not self.is_false(name):
                self._verbose("are_false(%s) = False (failed on %s)", ", ".join(names), name)
                return False
        return True

    def bool(self, name: str, fallback: bool) -> bool:
        raw = self._lookup(name)
        if raw is None:
            return fallback
        try:
            return parse_bool(raw)
        except ValueError as exc:
            self._log_error(name, exc)
            return fallback

    def optional_bool(self, name: str) -> bool | None:
        """Like bool() but None when unset or invalid, so callers can pick a default later."""
        raw = self._lookup(name)
        if raw is None:
            return None
        try:
            return parse_bool(raw)
        except ValueError as exc:
            self._log_error(name, exc)
            return None

    # ------------------------------------------------------------------
    # Types
    # ------------------------------------------------------------------

    def string(self, name: str, fallback: str) -> str:
        raw = self._lookup(name)
        return fallback if raw is None else raw

    def int(self, name: str, fallback: int) -> int:
        raw = self._lookup(name)
        if raw is None:
            return fallback
        try:
            return int(raw, 10)
        except ValueError as exc:
            self._log_error(name, exc)
            return fallback

    def int64(self, name: str, fallback: int) -> int:
        raw = self._lookup(name)
        if raw is None:
            return fallback
        try:
            return parse_int(raw, self.settings.int64_base, self.settings.int64_bit_size)
        except ValueError as exc:
            self._log_error(name, exc)
            return fallback

    def float32(self, name: str, fallback: float) -> float:
        value = self._float(name, fallback, self.settings.float32_bit_size)
        # Round to single precision so callers see what a float32 would hold.
        return struct.unpack("f", struct.pack("f", value))[0]

    def float64(self, name: str, fallback: float) -> float:
        return self._float(name, fallback, self.settings.float64_bit_size)

    def _float(self, name: str, fallback: float, bit_size: int) -> float:
        raw = self._lookup(name)
        if raw is None:
            return fallback
        try:
            value = float(raw)
            if bit_size == 32:
                value = struct.unpack("f", struct.pack("f", value))[0]
        except (ValueError, OverflowError) as exc:
            self._log_error(name, exc)
            return fallback
        return value

    def duration(self, name: str, fallback: timedelta) -> timedelta:
        """Parse "10s"-style strings, or an integer count of nanoseconds."""
        raw = self._lookup(name)
        if raw is None:
            return fallback
        try:
            return parse_duration(raw)
        except ValueError:
            pass
        try:
            ns = parse_int(raw, self.settings.duration_base, self.settings.duration_bit_size)
        except ValueError as exc:
            self._log_error(name, exc)
            return fallback
        return timedelta(microseconds=ns / 1_000)

    def unit_duration(self, name: str, fallback: float, unit: timedelta) -> timedelta:
        """Parse a count of unit. A full duration string ("1h30m") ignores unit.

        The fallback is a count too: unit_duration("TIMEOUT", 5, timedelta(seconds=1))
        gives five seconds when TIMEOUT is unset.
        """
        raw = self._lookup(name)
        if raw is None:
            return fallback * unit
        try:
            return parse_duration(raw)
        except ValueError:
            pass
        try:
            count = parse_int(raw, self.settings.unit_duration_base, self.settings.unit_duration_bit_size)
        except ValueError as exc:
            self._log_error(name, exc)
            return fallback * unit
        return count * unit

    def list(self, name: str, fallback: list[str]) -> list[str]:
        raw = self._lookup(name)
        if raw is None:
            return fallback
        parts = raw.split(self.settings.list_separator)
        items = [p.strip() for p in parts if p.strip()]
        if not items:
            self._verbose("list(%s) parsed %d parts but found 0 non-empty items", name, len(parts))
        return items

    def map(self, name: str, fallback: dict[str, str]) -> dict[str, str]:
        raw = self._lookup(name)
        if raw is None:
            return fallback
        parts = raw.split(self.settings.map_separator)
        maxsplit = self.settings.split_n if self.settings.split_n > 0 else -1
        result: dict[str, str] = {}
        for part in parts:
            pieces = part.strip().split(self.settings.separator, maxsplit)
            if len(pieces) != 2:
                continue
            key, value = pieces[0].strip(), pieces[1].strip()
            if key:
                result[key] = value
        if not result:
            self._verbose("map(%s) parsed %d parts but found 0 valid key-value pairs", name, len(parts))
        return result

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def list_contains(self, name: str, fallback: list[str], item: str) -> bool:
        """Case-insensitive membership test on list()."""
        wanted = item.casefold()
        ok = any(entry.casefold() == wanted for entry in self.list(name, fallback))
        if not ok:
            self._verbose("list_contains(%s): '%s' not found", name, item)
        return ok

    def list_length(self, name: str, fallback: list[str]) -> int:
        return len(self.list(name, fallback))

    def list_is_length(self, name: str, fallback: list[str], length: int) -> bool:
        got = self.list_length(name, fallback)
        if got != length:
            self._verbose("list_is_length(%s) got %d, want %d", name, got, length)
        return got == length

    def map_has_key(self, name: str, fallback: dict[str, str], key: str) -> bool:
        ok = key in self.map(name, fallback)
        if not ok:
            self._verbose("map_has_key(%s)[%s] = %s", name, key, ok)
        return ok

    def map_has_keys(self, name: str, fallback: dict[str, str], *keys: str) -> bool:
        parsed = self.map(name, fallback)
        ok = all(k in parsed for k in keys)
        if not ok:
            self._verbose("map_has_keys(%s)[%s] = %s", name, ",".join(keys), ok)
        return ok

    def int64_less_than(self, name: str, fallback: int, less_than: int) -> bool:
        return self.int64(name, fallback) < less_than

    def int64_greater_than(self, name: str, fallback: int, greater_than: int) -> bool:
        return self.int64(name, fallback) > greater_than

    def int64_in_range(self, name: str, fallback: int, low: int, high: int) -> bool:
        value = self.int64(name, fallback)
        ok = low <= value <= high
        if not ok:
            self._verbose("int64_in_range(%s): %d is not in range [%d, %d]", name, value, low, high)
        return ok

    def int_less_than(self, name: str, fallback: int, less_than: int) -> bool:
        return self.int(name, fallback) < less_than

    def int_greater_than(self, name: str, fallback: int, greater_than: int) -> bool:
        return self.int(name, fallback) > greater_than

    def int_in_range(self, name: str, fallback: int, low: int, high: int) -> bool:
        value = self.int(name, fallback)
        ok = low <= value <= high
        if not ok:
            self._verbose("int_in_range(%s): %d is not in range [%d, %d]", name, value, low, high)
        return ok

    # ------------------------------------------------------------------
    # System
    # ------------------------------------------------------------------

    def user(self) -> UserInfo:
        """Current user. Falls back to an "unknown" user unless panicking is allowed."""
        import pwd

        try:
            entry = pwd.getpwuid(os.getuid())
        except (KeyError, OSError) as exc:
            if self.settings.allow_panic and self.settings.panic_no_user:
                raise
            self._log_error("user()", exc)
            return UserInfo(
                username="unknown",
                name="Unknown",
                uid="-1",
                gid="-1",
                home_dir=tempfile.gettempdir(),
            )
        info = UserInfo(
            username=entry.pw_name,
            name=entry.pw_gecos.split(",")[0],
            uid=str(entry.pw_uid),
            gid=str(entry.pw_gid),
            home_dir=entry.pw_dir,
        )
        self._verbose("user() = %s (uid=%s, home=%s)", info.username, info.uid, info.home_dir)
        return info

    def set(self, name: str, value: str) -> None:
        self.environ[name] = value  # type: ignore[index]
        self._verbose("set(%s) to value '%s'", name, value)

    def unset(self, name: str) -> None:
        self.environ.pop(name, None)  # type: ignore[union-attr]
        self._verbose("unset(%s) successful", name)

    def was_set(self, name: str, value: str) -> bool:
        """Set name and confirm the mapping now holds value."""
        try:
            self.set(name, value)
        except (OSError, ValueError, TypeError) as exc:
            self._log_error(name, exc)
            return False
        if self._lookup(name) != value:
            self._log_error(name, ValueError(f"was_set({name}) failed verification after setting"))
            return False
        return True

    def was_unset(self, name: str) -> bool:
        try:
            self.unset(name)
        except (OSError, TypeError) as exc:
            self._log_error(name, exc)
            return False
        return name not in self.environ
