from __future__ import annotations

"""
Domain Error Taxonomy.

Every failure in discovery, parsing, catalog aggregation and history
persistence is local to one candidate (one directory, one descriptor, one
catalog source, one cache file). Batch operations catch these, log them and
carry on with fewer results.
"""

from typing import Optional


class MvnExplorerError(Exception):
    """Base class for all mvnexplorer errors."""


class ScanError(MvnExplorerError):
    """A directory could not be enumerated and was skipped."""

    def __init__(self, directory: str, reason: str) -> None:
        self.directory = directory
        self.reason = reason
        super().__init__(f"Cannot scan '{directory}': {reason}")


class ParseError(MvnExplorerError):
    """
    Malformed XML in a descriptor or catalog.

    Attributes:
        source: File path or label of the offending document.
        line: 1-based line of the syntax error, when known.
        column: 0-based column of the syntax error, when known.
        detail: Parser diagnostic.
    """

    def __init__(
            self,
            detail: str,
            source: str = "<string>",
            line: Optional[int] = None,
            column: Optional[int] = None,
    ) -> None:
        self.detail = detail
        self.source = source
        self.line = line
        self.column = column
        location = source
        if line is not None:
            location = f"{source}:{line}:{column if column is not None else 0}"
        super().__init__(f"{location}: {detail}")


class DanglingModuleReference(MvnExplorerError):
    """A declared submodule path has no descriptor file."""

    def __init__(self, module: str, descriptor_path: str) -> None:
        self.module = module
        self.descriptor_path = descriptor_path
        super().__init__(f"Module '{module}' has no descriptor at '{descriptor_path}'")


class CatalogFetchError(MvnExplorerError):
    """A catalog source was unreachable or unusable."""

    def __init__(self, source: str, reason: str) -> None:
        self.source = source
        self.reason = reason
        super().__init__(f"Catalog source '{source}' skipped: {reason}")


class CacheIOError(MvnExplorerError):
    """A command-history cache file could not be read or written."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"History cache '{path}' unavailable: {reason}")
