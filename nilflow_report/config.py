"""
nilflow_report/config.py
════════════════════════

Analysis scope configuration.

Decides which source files take part in the analysis (and therefore in
function-scope disambiguation) and which conflict positions are reported.

Sources
───────
  1. Keyword arguments            ``Config(include_pkgs=("example.com/app",))``
  2. A mapping (JSON / TOML data) ``Config.from_dict({...})``
  3. Command-line flags           built in :mod:`nilflow_report.main`

Path filters are prefix matches, with fnmatch-style patterns accepted as
well (``"vendor/*"``).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields
from fnmatch import fnmatch
from typing import Any, Mapping, Tuple

from nilflow_report.errors import ConfigError, ErrorCode
from nilflow_report.flow import SourceLocation
from nilflow_report.program import SourceFile

logger = logging.getLogger(__name__)

_DEFAULT_EXCLUDED_DOCSTRINGS: Tuple[str, ...] = ("@generated", "Code generated by")


def _matches(path: str, pattern: str) -> bool:
    return path == pattern or path.startswith(pattern) or fnmatch(path, pattern)


@dataclass(frozen=True)
class Config:
    """
    Scope and reporting options.

    Attributes
    ----------
    include_pkgs             : Package prefixes to analyze (empty = all)
    exclude_pkgs             : Package prefixes to skip
    exclude_file_docstrings  : File header substrings marking a file out of scope
    include_errors_in_files  : Path prefixes whose conflicts are reported (empty = all)
    exclude_errors_in_files  : Path prefixes whose conflicts are dropped
    group_error_messages     : Merge conflicts sharing a nil source
    pretty_print             : Colorize terminal output
    """
    include_pkgs: Tuple[str, ...] = ()
    exclude_pkgs: Tuple[str, ...] = ()
    exclude_file_docstrings: Tuple[str, ...] = _DEFAULT_EXCLUDED_DOCSTRINGS
    include_errors_in_files: Tuple[str, ...] = ()
    exclude_errors_in_files: Tuple[str, ...] = ()
    group_error_messages: bool = True
    pretty_print: bool = False

    def is_pkg_in_scope(self, pkg: str) -> bool:
        if any(_matches(pkg, p) for p in self.exclude_pkgs):
            return False
        if not self.include_pkgs:
            return True
        return any(_matches(pkg, p) for p in self.include_pkgs)

    def is_file_in_scope(self, source_file: SourceFile) -> bool:
        """True if *source_file* belongs to the analyzed set."""
        if source_file.package and not self.is_pkg_in_scope(source_file.package):
            return False
        doc = source_file.docstring
        if doc and any(marker in doc for marker in self.exclude_file_docstrings):
            return False
        return True

    def is_reported(self, position: SourceLocation) -> bool:
        """True if a conflict at *position* should reach the report."""
        path = position.file
        if any(_matches(path, p) for p in self.exclude_errors_in_files):
            return False
        if not self.include_errors_in_files:
            return True
        return any(_matches(path, p) for p in self.include_errors_in_files)

    # ── construction ─────────────────────────────────────────────────

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Config":
        """
        Build a Config from a mapping with the field names as keys.

        Dashed keys (``include-pkgs``) are accepted as well; list values
        may also be given as a comma-separated string.
        """
        known = {f.name: f for f in fields(cls)}
        kwargs = {}
        for raw_key, value in data.items():
            key = raw_key.replace("-", "_")
            if key not in known:
                raise ConfigError(
                    f"unknown configuration key {raw_key!r}",
                    code=ErrorCode.UNKNOWN_CONFIG_KEY,
                    where=raw_key,
                )
            if isinstance(known[key].default, bool):
                if not isinstance(value, bool):
                    raise ConfigError(
                        f"expected a boolean, got {type(value).__name__}",
                        where=raw_key,
                    )
                kwargs[key] = value
            else:
                kwargs[key] = _as_str_tuple(value, raw_key)
        config = cls(**kwargs)
        logger.debug("Loaded configuration: %s", config)
        return config


def _as_str_tuple(value: Any, key: str) -> Tuple[str, ...]:
    if isinstance(value, str):
        return tuple(v.strip() for v in value.split(",") if v.strip())
    if isinstance(value, (list, tuple)) and all(isinstance(v, str) for v in value):
        return tuple(value)
    raise ConfigError(
        f"expected a string or a list of strings, got {type(value).__name__}",
        where=key,
    )


__all__ = ["Config"]
