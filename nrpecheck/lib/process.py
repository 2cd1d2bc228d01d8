"""Process utilities for checks."""

from collections.abc import Iterator
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from nrpecheck.core.context import Context


class CommandError(Exception):
    """Error running a command."""

    pass


def output_lines(
    cmd: list[str],
    context: "Context | None" = None,
) -> Iterator[str]:
    """
    Run a command and lazily yield its merged output lines.

    Close the returned generator (e.g. with contextlib.closing) to stop
    the command once enough output was read.

    Args:
        cmd: Command and arguments
        context: Execution context (for testing)

    Yields:
        Output lines without trailing newline

    Raises:
        CommandError: If the command cannot be executed
    """
    if context is None:
        from nrpecheck.core.context import Context
        context = Context()

    try:
        yield from context.stream(cmd)
    except OSError as e:
        raise CommandError(f"Command failed: {' '.join(cmd)}: {e.strerror or e}") from e
