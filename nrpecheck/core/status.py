"""NRPE status levels and check results."""

from dataclasses import dataclass
from enum import IntEnum


# Exit codes for usage handling, distinct from NRPE statuses
EXIT_SUCCESS = 0
EXIT_FAILURE = 1


class Status(IntEnum):
    """
    Plugin return codes (https://nagios-plugins.org/doc/guidelines.html).

    The integer value of each member is the process exit code.
    """

    OK = 0
    WARNING = 1
    CRITICAL = 2
    UNKNOWN = 3


@dataclass(frozen=True)
class CheckResult:
    """Final outcome of a single check run."""

    status: Status
    message: str

    @property
    def exit_code(self) -> int:
        """Exit code matching the status."""
        return int(self.status)

    @property
    def line(self) -> str:
        """Status line in the form 'LEVEL: message'."""
        return f"{self.status.name}: {self.message}"

    @classmethod
    def ok(cls, message: str) -> "CheckResult":
        return cls(Status.OK, message)

    @classmethod
    def warning(cls, message: str) -> "CheckResult":
        return cls(Status.WARNING, message)

    @classmethod
    def critical(cls, message: str) -> "CheckResult":
        return cls(Status.CRITICAL, message)

    @classmethod
    def unknown(cls, message: str) -> "CheckResult":
        return cls(Status.UNKNOWN, message)
