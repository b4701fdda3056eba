"""
Error taxonomy for depsplit.

Every fatal condition of a split run is raised as a subclass of SplitterError
and carries an ErrorCategory so the CLI can report it uniformly. Wrong argument
counts are not errors at all; the CLI handles them before a run starts.
"""

from __future__ import annotations

from enum import Enum, auto
from pathlib import Path
from typing import List, Optional, Sequence

__all__ = [
    "ErrorCategory",
    "SplitterError",
    "InputError",
    "ParseError",
    "ReparseError",
    "NamingCollisionError",
    "FormatterError",
    "OutputWriteError",
]


class ErrorCategory(Enum):
    """Categories of split errors."""

    INPUT = auto()
    PARSE = auto()
    REPARSE = auto()
    NAMING = auto()
    FORMATTER = auto()
    OUTPUT = auto()
    CONFIGURATION = auto()


class SplitterError(Exception):
    """Base class for all fatal split errors."""

    category: ErrorCategory = ErrorCategory.INPUT

    def __init__(self, message: str, file_path: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.file_path = file_path


class InputError(SplitterError):
    """The input compilation unit could not be read."""

    category = ErrorCategory.INPUT


class ParseError(SplitterError):
    """The input compilation unit is not valid Python."""

    category = ErrorCategory.PARSE

    def __init__(
        self,
        message: str,
        file_path: Optional[str] = None,
        line_number: Optional[int] = None,
    ):
        super().__init__(message, file_path)
        self.line_number = line_number


class ReparseError(SplitterError):
    """A function, once isolated from its file, does not parse on its own."""

    category = ErrorCategory.REPARSE

    def __init__(self, function_name: str, message: str):
        super().__init__(f"Function {function_name!r} does not parse standalone: {message}")
        self.function_name = function_name


class NamingCollisionError(SplitterError):
    """Two distinct groups sanitize to the same module identifier."""

    category = ErrorCategory.NAMING

    def __init__(self, identifier: str, keys: Sequence[str]):
        joined = ", ".join(repr(k) for k in keys)
        super().__init__(f"Group keys {joined} all map to module identifier {identifier!r}")
        self.identifier = identifier
        self.keys = list(keys)


class _PartialWriteError(SplitterError):
    """Errors raised after some output files may already be on disk."""

    def __init__(self, message: str, file_path: Optional[str] = None):
        super().__init__(message, file_path)
        self.written_files: List[Path] = []

    def __str__(self) -> str:
        if not self.written_files:
            return self.message
        written = ", ".join(str(p) for p in self.written_files)
        return f"{self.message} (already written, left on disk: {written})"


class FormatterError(_PartialWriteError):
    """The external formatter is missing, timed out, or failed."""

    category = ErrorCategory.FORMATTER


class OutputWriteError(_PartialWriteError):
    """An output file could not be written."""

    category = ErrorCategory.OUTPUT
