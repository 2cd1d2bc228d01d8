"""Argument parsing for checks."""

import argparse
import sys

from nrpecheck.core.output import FORMATS


class UsageError(Exception):
    """Malformed or missing command-line arguments."""

    pass


def non_empty_path(value: str) -> str:
    """argparse type for binary locations; rejects blank paths."""
    value = value.strip()
    if not value:
        raise argparse.ArgumentTypeError("expected a non-empty path")
    return value


class CheckArgumentParser(argparse.ArgumentParser):
    """
    ArgumentParser that raises instead of exiting.

    Help is an ordinary flag (checks pick their own short option for it)
    so the caller decides how to exit.
    """

    def __init__(self, *args, help_flags: tuple[str, ...] = ("-h", "--help"), **kwargs):
        kwargs["add_help"] = False
        super().__init__(*args, **kwargs)
        self.add_argument(
            *help_flags,
            dest="help",
            action="store_true",
            help="Show this help message and exit",
        )
        self.add_argument(
            "--format",
            choices=FORMATS,
            default=None,
            help="Status line format (default: plain)",
        )

    def error(self, message: str):
        raise UsageError(message)

    def print_usage_error(self, error: UsageError) -> None:
        """Print usage and the error to stderr."""
        self.print_usage(sys.stderr)
        print(f"{self.prog}: error: {error}", file=sys.stderr)
        print(f"Please refer to `{self.prog} --help' for more details.", file=sys.stderr)
