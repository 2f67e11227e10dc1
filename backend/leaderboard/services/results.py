from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


class ErrorKind(str, Enum):
    REJECTED = 'rejected'    # payload failed validation or a domain rule
    CONFLICT = 'conflict'    # a concurrent write won the compare-and-swap
    STORAGE = 'storage'      # the database raised


@dataclass(frozen=True)
class Outcome:
    """Result of a domain operation run behind the auth pipeline."""

    ok: bool
    value: Any = None
    error: Optional[ErrorKind] = None

    @classmethod
    def success(cls, value: Any = True) -> 'Outcome':
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, error: ErrorKind) -> 'Outcome':
        return cls(ok=False, error=error)
