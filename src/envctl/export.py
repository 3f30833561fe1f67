"""Render a RecordStore into output formats and manage <path>.<ext> exports.

    json   indented (2 spaces) key -> value object
    ini    [default] section, "key = value" lines
    yaml   "---" marker, 'key: "value"' lines
    toml   'key: "value"' lines (same line shape as yaml, no marker)
    xml    <env> root with one <key>value</key> child per entry, unescaped
    plain  key=value lines, used for the env file itself

All renderers follow the store's insertion order.
"""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from pathlib import Path

from envctl.errors import EnvFileWriteError, FormatConflictError
from envctl.models import ExportFormat, RecordStore

logger = logging.getLogger("envctl.export")

_XML_INDENT = "   "

# Clean-all visits exports in this order.
CLEAN_ORDER = (
    ExportFormat.JSON,
    ExportFormat.YAML,
    ExportFormat.TOML,
    ExportFormat.XML,
    ExportFormat.INI,
)


def _pairs(records: RecordStore) -> Iterable[tuple[str, str]]:
    for k, v in records.items():
        yield k.strip(), v.strip()


def render_json(records: RecordStore) -> str:
    return json.dumps(dict(_pairs(records)), indent=2, ensure_ascii=False)


def render_ini(records: RecordStore) -> str:
    lines = ["[default]"]
    lines.extend(f"{k} = {v}" for k, v in _pairs(records))
    return "\n".join(lines) + "\n"


def render_yaml(records: RecordStore) -> str:
    lines = ["---"]
    lines.extend(f'{k}: "{v}"' for k, v in _pairs(records))
    return "\n".join(lines) + "\n"


def render_toml(records: RecordStore) -> str:
    # Colon separator, not TOML's "=": same line shape as yaml.
    return "".join(f'{k}: "{v}"\n' for k, v in _pairs(records))


def render_xml(records: RecordStore) -> str:
    lines = ['<?xml version="1.0" encoding="UTF-8"?>', "<env>"]
    lines.extend(f"{_XML_INDENT}<{k}>{v}</{k}>" for k, v in _pairs(records))
    lines.append("</env>")
    return "\n".join(lines) + "\n"


def render_plain(records: RecordStore, separator: str = "=") -> str:
    return "".join(f"{k}{separator}{v}\n" for k, v in _pairs(records))


RENDERERS: dict[ExportFormat, Callable[[RecordStore], str]] = {
    ExportFormat.JSON: render_json,
    ExportFormat.INI: render_ini,
    ExportFormat.YAML: render_yaml,
    ExportFormat.TOML: render_toml,
    ExportFormat.XML: render_xml,
}


def render(fmt: ExportFormat, records: RecordStore) -> str:
    return RENDERERS[fmt](records)


def export_path(path: str, fmt: ExportFormat) -> str:
    return f"{path}{fmt.extension}"


def check_exclusive(formats: Iterable[ExportFormat], path: str, build_all: bool = False) -> ExportFormat | None:
    """Validate that at most one non-plain format was requested.

    Returns the single selected format (or None). Raises FormatConflictError
    on a second one unless build_all is set.
    """
    using: ExportFormat | None = None
    for fmt in formats:
        logger.info("Using %s environment file", fmt.value.upper())
        if build_all:
            continue
        if using is not None:
            msg = (
                f"using {using.value} write to {export_path(path, using)}. "
                "ERROR CANNOT COMBINE --json --ini --yaml --xml --toml"
            )
            raise FormatConflictError(msg)
        using = fmt
    if using is None and not build_all:
        logger.info("Not exporting the environment to a new file")
    return using


def write_document(path: str, text: str) -> None:
    """Write a whole rendered document in one call."""
    try:
        Path(path).write_text(text, encoding="utf-8")
    except OSError as exc:
        raise EnvFileWriteError(f"Error writing file {path}: {exc}") from exc
    logger.info("Writing file %s", path)


@dataclass
class CleanReport:
    found: list[str] = field(default_factory=list)         # every export that existed
    removed: list[str] = field(default_factory=list)
    kept: list[str] = field(default_factory=list)          # existed, delete not allowed
    skipped: list[str] = field(default_factory=list)       # permission or stat problems


def clean_all(path: str, never_delete: bool) -> CleanReport:
    """Delete every <path>.<ext> export that exists, unless never_delete.

    Permission problems on one file are logged and skipped; the rest of the
    exports are still visited.
    """
    report = CleanReport()
    for fmt in CLEAN_ORDER:
        target = export_path(path, fmt)
        try:
            os.stat(target)
        except FileNotFoundError:
            continue
        except PermissionError as exc:
            logger.warning("%s is not writable: %s", target, exc)
            report.skipped.append(target)
            continue
        except OSError as exc:
            logger.warning("path %s err = %s", target, exc)
            report.skipped.append(target)
            continue

        report.found.append(target)
        if never_delete:
            report.kept.append(target)
            continue
        try:
            os.remove(target)
        except PermissionError as exc:
            logger.warning("%s is not writable: %s", target, exc)
            report.skipped.append(target)
            continue
        except OSError as exc:
            raise EnvFileWriteError(f"{target} could not be removed: {exc}") from exc
        logger.info("Removed %s", target)
        report.removed.append(target)
    return report
