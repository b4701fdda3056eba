"""
Pretty-printer interface.

Generated text is piped through an external formatter process (``black -q -``
by default) and its stdout is taken as the final file content.
"""

from __future__ import annotations

import logging
import subprocess
from typing import List, Optional, Sequence

from ..errors import FormatterError

logger = logging.getLogger(__name__)


class CodeFormatter:
    """
    Runs a formatter command that reads source on stdin and writes it to stdout.

    Args:
        command: Command line of the formatter
        timeout: Seconds to wait for each invocation, None waits forever
        enabled: When False, text is returned unchanged
    """

    def __init__(
        self,
        command: Sequence[str] = ("black", "-q", "-"),
        timeout: Optional[float] = None,
        enabled: bool = True,
    ):
        self.command: List[str] = list(command)
        self.timeout = timeout
        self.enabled = enabled

    def format(self, code: str, file_name: str = "<generated>") -> str:
        """
        Format one generated file.

        Raises:
            FormatterError: If the formatter is missing, times out or exits non-zero.
        """
        if not self.enabled:
            return code

        logger.debug(f"Formatting {file_name} with {' '.join(self.command)}")
        try:
            result = subprocess.run(
                self.command,
                input=code,
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except FileNotFoundError as e:
            raise FormatterError(
                f"Formatter not found: {self.command[0]!r}", file_path=file_name
            ) from e
        except subprocess.TimeoutExpired as e:
            raise FormatterError(
                f"Formatter timed out after {self.timeout}s on {file_name}", file_path=file_name
            ) from e
        except (subprocess.SubprocessError, OSError) as e:
            raise FormatterError(f"Failed to run formatter: {e}", file_path=file_name) from e

        if result.returncode != 0:
            stderr = result.stderr.strip()
            raise FormatterError(
                f"Formatter exited with status {result.returncode} on {file_name}"
                + (f": {stderr}" if stderr else ""),
                file_path=file_name,
            )
        return result.stdout
