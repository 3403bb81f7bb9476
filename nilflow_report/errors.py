# nilflow_report/errors.py
"""
Error types for the loading and command-line layer.

The grouping core never raises for well-formed input; everything here
belongs to the code around it (reading dumps, parsing configuration).

Error Hierarchy:
────────────────
  NilflowError (base)
  ├── ConfigError      - Invalid configuration values
  └── DumpFormatError  - Malformed conflict dump documents

Error Codes:
────────────
Each error carries a code of the form NFR-XXXX:
  - 1000-1999: Configuration errors
  - 2000-2999: Dump format errors
"""

from __future__ import annotations

from enum import Enum, unique
from typing import Any, Dict, Optional


@unique
class ErrorCode(Enum):
    """Stable error codes, exposed in JSON output and log lines."""

    INVALID_CONFIG_VALUE = "NFR-1001"
    UNKNOWN_CONFIG_KEY = "NFR-1002"

    UNREADABLE_DUMP = "NFR-2001"
    INVALID_JSON = "NFR-2002"
    MISSING_FIELD = "NFR-2003"
    INVALID_FIELD = "NFR-2004"

    @property
    def code(self) -> str:
        return self.value


class NilflowError(Exception):
    """
    Base class for all nilflow-report errors.

    Attributes
    ----------
    code   : ErrorCode
    detail : Human-readable description
    where  : Optional location of the problem (config key, JSON path)
    """

    default_code: ErrorCode = ErrorCode.INVALID_CONFIG_VALUE

    def __init__(
        self,
        detail: str,
        *,
        code: Optional[ErrorCode] = None,
        where: Optional[str] = None,
    ) -> None:
        self.code = code or self.default_code
        self.detail = detail
        self.where = where
        super().__init__(str(self))

    def __str__(self) -> str:
        loc = f" (at {self.where})" if self.where else ""
        return f"[{self.code.code}] {self.detail}{loc}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code.code,
            "detail": self.detail,
            "where": self.where,
        }


class ConfigError(NilflowError):
    """Raised when a configuration value has the wrong shape."""

    default_code = ErrorCode.INVALID_CONFIG_VALUE


class DumpFormatError(NilflowError):
    """Raised when a conflict dump cannot be decoded."""

    default_code = ErrorCode.INVALID_FIELD


__all__ = [
    "ErrorCode",
    "NilflowError",
    "ConfigError",
    "DumpFormatError",
]
