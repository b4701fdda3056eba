"""File operations for split runs.

Reads the input compilation unit and writes generated files next to it,
remembering what has been written so a fatal error can report it.
"""
import logging
from pathlib import Path
from typing import List

from ..errors import InputError, OutputWriteError


class FileOperations:
    """Manages file I/O for one split run."""

    def __init__(self, output_dir: Path, encoding: str = "utf-8", logger: logging.Logger = None):
        """Initialize file operations manager.

        Args:
            output_dir: Directory generated files are written to
            encoding: Encoding used for reading and writing
            logger: Logger instance for operation logging
        """
        self.output_dir = Path(output_dir)
        self.encoding = encoding
        self.logger = logger or logging.getLogger(__name__)
        self.written: List[Path] = []

    @staticmethod
    def read_source(path: Path, encoding: str = "utf-8") -> str:
        """Read the input compilation unit.

        Args:
            path: Path to the input file

        Returns:
            File content as string

        Raises:
            InputError: If the file does not exist or cannot be read
        """
        path = Path(path)
        if not path.is_file():
            raise InputError(f"Input file not found: {path}", file_path=str(path))
        try:
            return path.read_text(encoding=encoding)
        except (OSError, UnicodeDecodeError) as e:
            raise InputError(f"Failed to read {path}: {e}", file_path=str(path)) from e

    def output_path(self, file_name: str) -> Path:
        return self.output_dir / file_name

    def write_text(self, file_name: str, content: str) -> Path:
        """Write one generated file.

        Args:
            file_name: File name inside the output directory
            content: Content to write

        Returns:
            Path of the written file

        Raises:
            OutputWriteError: If the write fails
        """
        path = self.output_path(file_name)
        try:
            path.write_text(content, encoding=self.encoding)
        except OSError as e:
            error = OutputWriteError(f"Failed to write {path}: {e}", file_path=str(path))
            error.written_files = list(self.written)
            raise error from e
        self.written.append(path)
        self.logger.info(f"Wrote {path}")
        return path
