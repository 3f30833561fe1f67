"""envctl: query, edit and convert .env files.

Engine pipeline for one invocation:
    parse (envctl.parser)      file content -> ordered RecordStore
    query (envctl.query)       --has / --is decisions, YES/NO + exit code
    mutate (envctl.mutation)   --add / --rm
    guard (envctl.guard)       refuse writes to protected production files
    export (envctl.export)     plain, json, ini, yaml, toml, xml

envctl.environ holds the typed environment accessors; envctl.settings the
immutable configuration both sides share.
"""

from envctl.engine import Engine
from envctl.environ import Environ
from envctl.errors import EnvctlError
from envctl.models import ExportFormat, Options, RecordStore
from envctl.settings import Settings

__all__ = ["Engine", "Environ", "EnvctlError", "ExportFormat", "Options", "RecordStore", "Settings"]
