"""Production guard: refuse writes to production env files unless unlocked.

A file is production when its path contains ".env.production" or --prod was
given. Production files are protected unless ENVCTL_NEVER_WRITE_PRODUCTION is
explicitly set false.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from envctl.errors import ProductionProtectedError

logger = logging.getLogger("envctl.guard")

PRODUCTION_MARKER = ".env.production"
HALT_MESSAGE = "HALT: PRODUCTION IS PROTECTED! WRITE OPERATION CANCELED."


def is_production_path(path: str, explicit: bool = False) -> bool:
    return explicit or PRODUCTION_MARKER in path


@dataclass(frozen=True)
class ProductionGuard:
    path: str
    is_production: bool = False
    protected: bool = False

    @classmethod
    def for_path(cls, path: str, explicit: bool = False, never_write_production: bool | None = None) -> ProductionGuard:
        production = is_production_path(path, explicit)
        if not production:
            return cls(path=path)
        protected = True if never_write_production is None else never_write_production
        return cls(path=path, is_production=True, protected=protected)

    def ensure_writable(self, target: str | None = None) -> None:
        """Raise ProductionProtectedError before any write when protected."""
        if self.protected:
            logger.info("refusing to write %s", target or self.path)
            raise ProductionProtectedError(HALT_MESSAGE)
