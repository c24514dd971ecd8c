from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Generic, Optional, TypeVar


T = TypeVar("T")


class Severity(str, Enum):
    INFO = "INFO"
    WARN = "WARN"
    ERROR = "ERROR"
    FATAL = "FATAL"


@dataclass(frozen=True)
class ActionError:
    """Structured error attached to an outcome, safe for UI and logs.

    `code` is category-prefixed (`GIT-`, `SSH-`, `CFG-`, `FS-`).
    `detail` usually carries captured stderr or the offending path.
    """

    code: str
    severity: Severity
    message: str
    detail: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "severity": Severity(self.severity).value,
            "message": self.message,
            "detail": self.detail,
        }


@dataclass(frozen=True)
class Result(Generic[T]):
    ok: bool
    value: Optional[T] = None
    error: Optional[ActionError] = None

    @staticmethod
    def success(value: T) -> "Result[T]":
        return Result(ok=True, value=value, error=None)

    @staticmethod
    def failure(error: ActionError) -> "Result[T]":
        return Result(ok=False, value=None, error=error)

    def unwrap_or(self, default: T) -> T:
        return self.value if self.ok and self.value is not None else default
