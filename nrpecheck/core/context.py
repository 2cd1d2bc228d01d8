"""Execution context for testability."""

import os
import subprocess
from collections.abc import Iterator
from pathlib import Path


class Context:
    """
    Wraps external calls for testability.

    In production: spawns real processes and touches the real filesystem
    In tests: can be replaced with MockContext
    """

    def stream(self, cmd: list[str]) -> Iterator[str]:
        """
        Run a command and yield its merged stdout/stderr line by line.

        Lines are yielded without their trailing newline but otherwise
        untouched. Closing the generator before the output is exhausted
        terminates the child process.

        Args:
            cmd: Command and arguments as list

        Yields:
            Output lines as they become available

        Raises:
            OSError: If the command cannot be executed
        """
        proc = subprocess.Popen(
            cmd,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            stdin=subprocess.DEVNULL,
            text=True,
            errors="replace",
        )
        try:
            for line in proc.stdout:
                yield line.rstrip("\r\n")
        finally:
            if proc.poll() is None:
                proc.terminate()
            proc.stdout.close()
            proc.wait()

    def is_privileged(self) -> bool:
        """Check if running with super-user privilege."""
        return os.getuid() == 0 or os.geteuid() == 0

    def read_file(self, path: str) -> str:
        """Read file contents."""
        return Path(path).read_text()

    def file_exists(self, path: str) -> bool:
        """Check if file exists."""
        return Path(path).exists()

    def get_env(self, key: str, default: str | None = None) -> str | None:
        """Get environment variable."""
        return os.environ.get(key, default)
