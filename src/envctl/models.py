"""Data models for the env-file engine."""

from __future__ import annotations

import os
import stat
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import StrEnum

RecordStore = dict[str, str]


class QueryMode(StrEnum):
    NONE = "none"
    HAS = "has"
    IS = "is"


class MutationOp(StrEnum):
    NONE = "none"
    ADD = "add"
    REMOVE = "remove"


class ExportFormat(StrEnum):
    """Non-plain output formats, in the order they are rendered."""

    JSON = "json"
    INI = "ini"
    YAML = "yaml"
    TOML = "toml"
    XML = "xml"

    @property
    def extension(self) -> str:
        return f".{self.value}"


@dataclass(frozen=True)
class QuerySpec:
    """A has/is query against the file being scanned."""

    key: str = ""
    value: str = ""
    mode: QueryMode = QueryMode.NONE
    negate: bool = False
    printed: bool = False          # print YES/NO as well as setting the exit code

    @property
    def active(self) -> bool:
        return self.mode is not QueryMode.NONE


@dataclass(frozen=True)
class MutationSpec:
    key: str = ""
    value: str = ""
    op: MutationOp = MutationOp.NONE

    @property
    def removes_by_key(self) -> bool:
        return self.op is MutationOp.REMOVE and bool(self.key.strip())

    @property
    def removes_by_value(self) -> bool:
        return self.op is MutationOp.REMOVE and bool(self.value.strip())


@dataclass(frozen=True)
class ExportSpec:
    formats: tuple[ExportFormat, ...] = ()
    build_all: bool = False
    write: bool = False

    def selected(self) -> tuple[ExportFormat, ...]:
        """Formats to render: all of them under build_all, else the requested ones."""
        if self.build_all:
            return tuple(ExportFormat)
        return self.formats


@dataclass(frozen=True)
class FileDescriptor:
    """Snapshot of the env file taken once before processing."""

    path: str
    exists: bool = False
    size: int = 0
    mode: int = 0
    mod_time: datetime | None = None
    is_dir: bool = False

    @classmethod
    def snapshot(cls, path: str) -> FileDescriptor:
        try:
            st = os.stat(path)
        except (FileNotFoundError, NotADirectoryError):
            return cls(path=path)
        except PermissionError:
            # The entry may exist but cannot be inspected; the read reports it.
            return cls(path=path, exists=True)
        return cls(
            path=path,
            exists=True,
            size=st.st_size,
            mode=stat.S_IMODE(st.st_mode),
            mod_time=datetime.fromtimestamp(st.st_mtime, UTC),
            is_dir=stat.S_ISDIR(st.st_mode),
        )


@dataclass
class Options:
    """Resolved caller options, one field per CLI flag."""

    path: str = ""
    key: str = ""
    value: str = ""

    add: bool = False
    remove: bool = False
    has: bool = False
    is_: bool = False
    negate: bool = False
    write: bool = False
    init: bool = False
    print_: bool = False
    verbose: bool = False
    prod: bool = False
    build_all: bool = False
    clean_all: bool = False

    formats: tuple[ExportFormat, ...] = field(default_factory=tuple)

    @property
    def query(self) -> QuerySpec:
        if self.has:
            mode = QueryMode.HAS
        elif self.is_:
            mode = QueryMode.IS
        else:
            mode = QueryMode.NONE
        return QuerySpec(
            key=self.key, value=self.value, mode=mode, negate=self.negate, printed=self.print_
        )

    @property
    def mutation(self) -> MutationSpec:
        if self.add:
            op = MutationOp.ADD
        elif self.remove:
            op = MutationOp.REMOVE
        else:
            op = MutationOp.NONE
        return MutationSpec(key=self.key, value=self.value, op=op)

    @property
    def export(self) -> ExportSpec:
        return ExportSpec(formats=self.formats, build_all=self.build_all, write=self.write)
