#!/usr/bin/env python3
"""
Check whether the conntrackd daemon is running and processing events.

conntrackd talks to the kernel connection tracking subsystem over Netlink
and now and then stops responding altogether. When that happens nothing can
query it any more (statistics gathering, log rotation, ...) and the daemon
has to be killed. This check asks the daemon for its cache statistics with
`conntrackd -s cache` and verifies that both the internal and the external
cache are reported.

Reading the kernel conntrack tables requires super-user privilege.

Exit codes:
    0 - Both caches reported, daemon is processing
    1 - Not run as super-user, or usage error
    2 - Daemon cannot open its configuration or cannot be reached
    3 - Binary missing, or unknown/erroneous output
"""

import dataclasses
import sys
from contextlib import closing
from dataclasses import dataclass

from nrpecheck.core.classifier import Classification, Classifier, Rule, decide
from nrpecheck.core.config import DEFAULT_BINARIES, ConfigError, load_settings
from nrpecheck.core.context import Context
from nrpecheck.core.guard import PreconditionError, require_binary, require_privilege
from nrpecheck.core.logging import CheckLogger
from nrpecheck.core.output import Output
from nrpecheck.core.status import EXIT_SUCCESS, EXIT_FAILURE, CheckResult
from nrpecheck.lib.arguments import CheckArgumentParser, UsageError, non_empty_path
from nrpecheck.lib.process import CommandError, output_lines


CHECK_NAME = "conntrackd"

FAILURE_PREFIX = "Unable to process conntrackd output."

RULES = [
    # Statistics detail lines are indented below their cache heading
    Rule.compile("ignored", r"^(\s|$)", raw=True),
    Rule.compile("config_error", r"^can't open config"),
    Rule.compile("connect_error", r"^can't connect:"),
    Rule.compile("internal", r"cache:internal.+objects:\s*(\d+)"),
    Rule.compile("external", r"cache:external.+objects:\s*(\d+)"),
]

CLASSIFIER = Classifier(RULES, fallback="other")


@dataclass(frozen=True)
class CacheState:
    """Running totals of the conntrackd cache statistics."""

    internal: int = 0
    external: int = 0
    seen_internal: bool = False
    seen_external: bool = False
    seen_output: bool = False
    verdict: CheckResult | None = None

    @property
    def complete(self) -> bool:
        return self.seen_internal and self.seen_external


def reduce_line(state: CacheState, classification: Classification) -> CacheState:
    """Fold one classified line into the cache state."""
    category = classification.category

    if category == "config_error":
        return dataclasses.replace(state, verdict=CheckResult.critical(
            f"{FAILURE_PREFIX}  The conntrackd daemon cannot open its configuration file."
        ))
    if category == "connect_error":
        return dataclasses.replace(state, verdict=CheckResult.critical(
            f"{FAILURE_PREFIX}  The conntrackd daemon might be in a broken state."
        ))
    if category == "internal":
        return dataclasses.replace(
            state,
            internal=state.internal + int(classification.match.group(1)),
            seen_internal=True,
        )
    if category == "external":
        return dataclasses.replace(
            state,
            external=state.external + int(classification.match.group(1)),
            seen_external=True,
        )
    if category == "other":
        return dataclasses.replace(state, seen_output=True)

    return state


def finalize(state: CacheState) -> CheckResult:
    """Decide the result once the output is exhausted or both caches were seen."""
    if state.seen_internal and state.seen_external:
        return CheckResult.ok(
            f"conntrackd is processing.  Active objects: "
            f"(internal: {state.internal}) (external: {state.external})."
        )
    if state.seen_output:
        return CheckResult.unknown(
            f"{FAILURE_PREFIX}  Unknown or erroneous output was given."
        )
    return CheckResult.unknown(f"{FAILURE_PREFIX}  No output was given.")


def classify_output(lines, logger: CheckLogger | None = None) -> CheckResult:
    """
    Classify `conntrackd -s cache` output.

    Args:
        lines: Output lines, consumed lazily
        logger: Optional logger receiving one entry per classified line

    Returns:
        Final CheckResult
    """
    on_line = None
    if logger is not None:
        def on_line(line, classification):
            logger.debug("classified line", line=line, category=classification.category)

    return decide(lines, CLASSIFIER, reduce_line, CacheState(), finalize, on_line=on_line)


def create_parser() -> CheckArgumentParser:
    parser = CheckArgumentParser(
        prog="check_conntrackd",
        description="Check whether the conntrackd daemon is running and processing events correctly.",
        epilog="Note: You have to be a super-user in order to run this check.",
    )
    parser.add_argument(
        "-b", "--conntrackd-binary",
        type=non_empty_path,
        metavar="BINARY",
        help=(
            "Location of the conntrackd user-space binary "
            f"(default: {DEFAULT_BINARIES['conntrackd']}, or as configured)"
        ),
    )
    return parser


def run(args: list[str], output: Output, context: Context) -> int:
    """
    Main entry point.

    Args:
        args: Command-line arguments
        output: Output helper
        context: Execution context

    Returns:
        NRPE status code, or 0/1 for help and usage errors
    """
    parser = create_parser()
    try:
        opts = parser.parse_args(args)
    except UsageError as e:
        parser.print_usage_error(e)
        return EXIT_FAILURE

    if opts.help:
        parser.print_help()
        return EXIT_SUCCESS

    if opts.format:
        output.format = opts.format

    try:
        settings = load_settings(context)
    except ConfigError as e:
        return output.report(CheckResult.unknown(f"Invalid configuration: {e}"))

    binary = opts.conntrackd_binary or settings.binary("conntrackd")

    with CheckLogger.for_directory(CHECK_NAME, settings.log_dir) as logger:
        try:
            require_privilege(context)
            require_binary(binary, "conntrackd", context)
        except PreconditionError as e:
            logger.warning("precondition failed", status=e.status.name, reason=e.message)
            logger.result(e.result)
            return output.report(e.result)

        cmd = [binary, "-s", "cache"]
        logger.info("running command", command=cmd)
        try:
            with closing(output_lines(cmd, context)) as lines:
                result = classify_output(lines, logger)
        except CommandError as e:
            logger.error("command failed", command=cmd, error=str(e))
            result = CheckResult.unknown(f"Unable to run conntrackd: {e}")

        logger.result(result)
        return output.report(result)


def main() -> int:
    return run(sys.argv[1:], Output(), Context())


if __name__ == "__main__":
    sys.exit(main())
