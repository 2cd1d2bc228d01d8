#!/usr/bin/env python3
"""
Check whether domain name resolution is functioning for a given host name.

named from BIND does not cope well with network failures when it forwards
queries to remote servers: after a connectivity problem (e.g. a VPN tunnel
going down) queries involving forwarders may keep failing long after the
problem is gone, until named is restarted. This check resolves a host name
with `host -t A` and reports how resolution went. The point is to check
named as a resolver, caching server or forwarder rather than the process
itself.

Exit codes:
    0 - At least one address was returned
    1 - Timed out, NXDOMAIN, or usage error
    2 - SERVFAIL or REFUSED
    3 - Binary missing, or unknown/erroneous output
"""

import dataclasses
import sys
from contextlib import closing
from dataclasses import dataclass

from nrpecheck.core.classifier import Classification, Classifier, Rule, decide
from nrpecheck.core.config import DEFAULT_BINARIES, ConfigError, load_settings
from nrpecheck.core.context import Context
from nrpecheck.core.guard import PreconditionError, require_binary
from nrpecheck.core.logging import CheckLogger
from nrpecheck.core.output import Output
from nrpecheck.core.status import EXIT_SUCCESS, EXIT_FAILURE, CheckResult, Status
from nrpecheck.lib.arguments import CheckArgumentParser, UsageError, non_empty_path
from nrpecheck.lib.process import CommandError, output_lines


CHECK_NAME = "named"

RULES = [
    Rule.compile("timeout", r"connection timed out.+no"),
    Rule.compile("servfail", r"^Host\s.+\snot found:\s2\(SERVFAIL\)$"),
    Rule.compile("nxdomain", r"^Host\s.+\snot found:\s3\(NXDOMAIN\)$"),
    Rule.compile("refused", r"^Host\s.+\snot found:\s5\(REFUSED\)$"),
    Rule.compile("address", r"^.+\shas\saddress\s(.+)$"),
]

CLASSIFIER = Classifier(RULES, fallback="other")

# Terminal failures reported as soon as they are seen
FAILURES = {
    "timeout": (
        Status.WARNING,
        "Connection timed out and no servers could be reached.",
    ),
    "servfail": (
        Status.CRITICAL,
        "Authoritative name servers are not answering (SERVFAIL).",
    ),
    "nxdomain": (
        Status.WARNING,
        "Given domain name does not exist or is on-hold (NXDOMAIN).",
    ),
    "refused": (
        Status.CRITICAL,
        "Name servers refused the query (REFUSED).",
    ),
}


@dataclass(frozen=True)
class ResolutionState:
    """What has been learned about the resolution so far."""

    host_name: str
    address: str = ""
    seen_address: bool = False
    verdict: CheckResult | None = None

    @property
    def complete(self) -> bool:
        # Any single A record proves resolution works
        return self.seen_address


def reduce_line(state: ResolutionState, classification: Classification) -> ResolutionState:
    """Fold one classified line into the resolution state."""
    category = classification.category

    if category in FAILURES:
        status, reason = FAILURES[category]
        message = f"Resolution of '{state.host_name}' has failed.  {reason}"
        return dataclasses.replace(state, verdict=CheckResult(status, message))
    if category == "address":
        return dataclasses.replace(
            state,
            address=classification.match.group(1).strip(),
            seen_address=True,
        )

    return state


def finalize(state: ResolutionState) -> CheckResult:
    """Decide the result once the output is exhausted or an address was seen."""
    if state.seen_address and state.address:
        return CheckResult.ok(
            f"Resolution of '{state.host_name}' was successful (IP: {state.address})."
        )
    return CheckResult.unknown(
        "Unable to process host output.  Unknown or erroneous output was given."
    )


def classify_output(lines, host_name: str, logger: CheckLogger | None = None) -> CheckResult:
    """
    Classify `host -t A` output.

    Args:
        lines: Output lines, consumed lazily
        host_name: Host name that was queried
        logger: Optional logger receiving one entry per classified line

    Returns:
        Final CheckResult
    """
    on_line = None
    if logger is not None:
        def on_line(line, classification):
            logger.debug("classified line", line=line, category=classification.category)

    return decide(
        lines, CLASSIFIER, reduce_line, ResolutionState(host_name), finalize, on_line=on_line
    )


def create_parser() -> CheckArgumentParser:
    # -h is taken by --host-name
    parser = CheckArgumentParser(
        prog="check_named",
        description="Check whether a domain name resolution is functioning correctly for a given host.",
        epilog=(
            "Note: The idea is to check whether named is functioning correctly as resolver, "
            "caching server or forwarder rather than checking the named daemon per se. "
            'Resolution is done via querying for the "A" type RR only.'
        ),
        help_flags=("-?", "--help"),
    )
    parser.add_argument(
        "-h", "--host-name",
        default="",
        metavar="HOST_NAME",
        help="Required. Host name to resolve into an IP address",
    )
    parser.add_argument(
        "-b", "--host-binary",
        type=non_empty_path,
        metavar="BINARY",
        help=(
            "Location of the host utility binary "
            f"(default: {DEFAULT_BINARIES['host']}, or as configured)"
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
        if opts.help:
            parser.print_help()
            return EXIT_SUCCESS
        host_name = opts.host_name.strip()
        if not host_name:
            raise UsageError("the following arguments are required: -h/--host-name")
    except UsageError as e:
        parser.print_usage_error(e)
        return EXIT_FAILURE

    if opts.format:
        output.format = opts.format

    try:
        settings = load_settings(context)
    except ConfigError as e:
        return output.report(CheckResult.unknown(f"Invalid configuration: {e}"))

    binary = opts.host_binary or settings.binary("host")

    with CheckLogger.for_directory(CHECK_NAME, settings.log_dir) as logger:
        try:
            require_binary(binary, "host", context)
        except PreconditionError as e:
            logger.warning("precondition failed", status=e.status.name, reason=e.message)
            logger.result(e.result)
            return output.report(e.result)

        cmd = [binary, "-t", "A", host_name]
        logger.info("running command", command=cmd)
        try:
            with closing(output_lines(cmd, context)) as lines:
                result = classify_output(lines, host_name, logger)
        except CommandError as e:
            logger.error("command failed", command=cmd, error=str(e))
            result = CheckResult.unknown(f"Unable to run host: {e}")

        logger.result(result)
        return output.report(result)


def main() -> int:
    return run(sys.argv[1:], Output(), Context())


if __name__ == "__main__":
    sys.exit(main())
