"""Preconditions checked before a check does any work."""

from typing import TYPE_CHECKING

from nrpecheck.core.status import CheckResult, Status

if TYPE_CHECKING:
    from nrpecheck.core.context import Context


class PreconditionError(Exception):
    """A precondition of the check is not met."""

    def __init__(self, status: Status, message: str):
        super().__init__(message)
        self.status = status
        self.message = message

    @property
    def result(self) -> CheckResult:
        return CheckResult(self.status, self.message)


def require_privilege(context: "Context") -> None:
    """
    Require super-user privilege.

    Raises:
        PreconditionError: WARNING when neither uid nor euid is root
    """
    if not context.is_privileged():
        raise PreconditionError(
            Status.WARNING, "You have to be a super-user to run this script."
        )


def require_binary(path: str, tool: str, context: "Context") -> None:
    """
    Require an external binary to exist.

    Raises:
        PreconditionError: UNKNOWN when the binary is missing
    """
    if not context.file_exists(path):
        raise PreconditionError(
            Status.UNKNOWN, f"Unable to locate {tool} binary at {path}."
        )
