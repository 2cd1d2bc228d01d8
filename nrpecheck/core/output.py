"""Status line reporting."""

import json
import sys
from typing import TextIO

from nrpecheck.core.status import CheckResult


FORMATS = ("plain", "json")


class Output:
    """
    Reports the result of a check.

    A check reports exactly once: the status line is written and the
    matching exit code returned. A second report is a programming error.
    """

    def __init__(self, format: str = "plain", stream: TextIO | None = None):
        if format not in FORMATS:
            raise ValueError(f"Unknown output format: {format}")
        self.format = format
        self.stream = stream
        self.result: CheckResult | None = None

    @property
    def reported(self) -> bool:
        """True once a result has been reported."""
        return self.result is not None

    def to_plain(self) -> str:
        """Render the reported result as 'LEVEL: message'."""
        return self.result.line if self.result else ""

    def to_json(self) -> str:
        """Render the reported result as a single-line JSON object."""
        if self.result is None:
            return "{}"
        return json.dumps({
            "status": self.result.status.name,
            "code": self.result.exit_code,
            "message": self.result.message,
        })

    def report(self, result: CheckResult) -> int:
        """
        Write the status line and return the exit code.

        Args:
            result: Final result of the check

        Returns:
            Exit code for the process

        Raises:
            RuntimeError: If a result was already reported
        """
        if self.result is not None:
            raise RuntimeError(f"Result already reported: {self.result.line}")

        self.result = result
        stream = self.stream or sys.stdout
        rendered = self.to_json() if self.format == "json" else self.to_plain()
        print(rendered, file=stream, flush=True)
        return result.exit_code
