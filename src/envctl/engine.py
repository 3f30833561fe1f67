"""Engine: one invocation of envctl against one env file.

    engine = Engine(options, settings)
    code = engine.run()          # exit code; raises EnvctlError on failure
    print("\\n".join(engine.output))

The engine never exits the process. Stdout lines are collected on
engine.output, diagnostics go through logging, and fatal problems are raised
as EnvctlError subclasses carrying their exit code.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from envctl import export, parser
from envctl.errors import (
    EnvFileAccessError,
    EnvFileEmptyError,
    EnvFileNotFoundError,
    SanityError,
)
from envctl.guard import PRODUCTION_MARKER, ProductionGuard
from envctl.models import FileDescriptor, Options, RecordStore
from envctl.mutation import apply_add
from envctl.query import QueryDecision, decide, recheck

if TYPE_CHECKING:
    from envctl.settings import Settings

logger = logging.getLogger("envctl.engine")

DEFAULT_ENV_FILE = ".env"


def check_state(options: Options | None, settings: Settings | None) -> None:
    if options is None or settings is None:
        msg = "engine called with missing options or settings"
        raise SanityError(msg)


def resolve_path(options: Options) -> str:
    """Pick the default file when no path was given but the run may create one."""
    if options.path or not (options.write or options.init):
        return options.path
    return PRODUCTION_MARKER if options.prod else DEFAULT_ENV_FILE


class Engine:
    """Parse, query, mutate, guard and export a single env file."""

    def __init__(self, options: Options, settings: Settings) -> None:
        check_state(options, settings)
        self.options = options
        self.settings = settings
        self.output: list[str] = []
        self.path = resolve_path(options)
        self.descriptor = FileDescriptor(path=self.path)
        self.guard = ProductionGuard(path=self.path)

    # ------------------------------------------------------------------
    # Output helpers
    # ------------------------------------------------------------------

    def _emit(self, text: str) -> None:
        self.output.append(text.rstrip("\n"))

    def _report(self, decision: QueryDecision) -> int:
        if self.options.print_:
            self._emit(decision.text)
        return decision.code

    def _write(self, target: str, text: str) -> None:
        self.guard.ensure_writable(target)
        export.write_document(target, text)

    # ------------------------------------------------------------------
    # Run
    # ------------------------------------------------------------------

    def run(self) -> int:
        opts = self.options
        self.descriptor = FileDescriptor.snapshot(self.path)
        if not self.descriptor.exists and not (opts.init or opts.write):
            raise EnvFileNotFoundError(f"{self.path} does not exist, use --write to create")

        self.guard = ProductionGuard.for_path(
            self.path,
            explicit=opts.prod,
            never_write_production=self.settings.never_write_production,
        )
        if self.guard.is_production:
            self._emit("Using PRODUCTION environment file")
        else:
            logger.info("Using %s environment file", self.path)

        if opts.clean_all:
            return self._clean_all()

        export.check_exclusive(opts.export.selected(), self.path, build_all=opts.build_all)

        if not self.descriptor.exists:
            if opts.init:
                self._write(self.path, "")
                return 0
            # --write: seed the file with the requested pair, then process it normally
            self._write(self.path, f"{opts.key}{self.settings.separator}{opts.value}\n")

        content = self._read()
        return self._process(content)

    def _clean_all(self) -> int:
        opts = self.options
        allowed = opts.write or opts.remove
        never_delete = self.settings.never_delete
        if never_delete is None:
            never_delete = not allowed
        report = export.clean_all(self.path, never_delete)
        if not allowed:
            for target in report.found:
                self._emit(f"The --write flag can be used to remove {target}")
        return 0

    def _read(self) -> str:
        path = Path(self.path)
        if path.is_dir():
            raise EnvFileAccessError(f"Error: {self.path} is a directory")
        try:
            content = path.read_text(encoding="utf-8", errors="replace")
        except PermissionError as exc:
            raise EnvFileAccessError("Error: permission denied") from exc
        except OSError as exc:
            raise EnvFileAccessError(f"Error: reading {self.path} returned {exc}") from exc

        opts = self.options
        if not content and not (opts.init or opts.write or opts.add):
            raise EnvFileEmptyError(f"Error: {self.path} 0 bytes")
        return content

    def _process(self, content: str) -> int:
        opts = self.options
        query = opts.query

        result = parser.scan(content, self.settings, query=query, mutation=opts.mutation)
        if result.found:
            return self._report(decide(True, query))

        records = result.records
        added = apply_add(records, opts.mutation)

        code = 0
        if query.active:
            if not added:
                return self._report(decide(False, query))
            # The key did not exist during the scan; answer against the final store.
            code = self._report(recheck(records, query))

        self._export(records)
        return code

    def _export(self, records: RecordStore) -> None:
        opts = self.options
        spec = opts.export

        for fmt in spec.selected():
            document = export.render(fmt, records)
            if spec.write:
                self._write(export.export_path(self.path, fmt), document)
            else:
                self._emit(document)
            if not spec.build_all:
                return

        if spec.write:
            self._write(self.path, export.render_plain(records, self.settings.separator))
        elif opts.print_:
            self._emit(export.render_plain(records, self.settings.separator))
        logger.info("Finished executing!")


def run(options: Options, settings: Settings) -> tuple[int, list[str]]:
    """Convenience wrapper: run an Engine and return (exit code, output lines)."""
    engine = Engine(options, settings)
    return engine.run(), engine.output


