"""
Domain models — Pydantic types for a restore run.

All models are re-exported here for convenient access:

    from src.core.models import RestoreRequest, LocatedBinary, RestoreOutcome
"""

from src.core.models.restore import (
    AttemptResult,
    BinarySource,
    LocatedBinary,
    RestoreOutcome,
    RestoreRequest,
)

__all__ = [
    "AttemptResult",
    "BinarySource",
    "LocatedBinary",
    "RestoreOutcome",
    "RestoreRequest",
]
