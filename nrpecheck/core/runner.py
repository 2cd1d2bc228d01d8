"""Check execution."""

from typing import TYPE_CHECKING

from nrpecheck.core.output import Output

if TYPE_CHECKING:
    from nrpecheck.core.context import Context
    from nrpecheck.core.registry import Check


def run_check(
    check: "Check",
    args: list[str] | None = None,
    context: "Context | None" = None,
    output: Output | None = None,
) -> int:
    """
    Run a check in-process.

    Args:
        check: Check to run
        args: Arguments to pass to the check
        context: Execution context (default: real system)
        output: Output helper (default: plain status line on stdout)

    Returns:
        Exit code of the check
    """
    if context is None:
        from nrpecheck.core.context import Context
        context = Context()

    module = check.load()
    return module.run(list(args or []), output or Output(), context)
