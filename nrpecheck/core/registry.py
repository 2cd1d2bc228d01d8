"""The checks shipped with nrpecheck."""

import importlib
from dataclasses import dataclass
from types import ModuleType


CHECKS_PACKAGE = "nrpecheck.checks"


@dataclass(frozen=True)
class Check:
    """A shipped check and the external tool it drives."""

    name: str
    brief: str
    tool: str
    privilege: str = "user"
    tags: tuple[str, ...] = ()

    @property
    def module_name(self) -> str:
        return f"{CHECKS_PACKAGE}.{self.name}"

    @property
    def command(self) -> str:
        """Name of the installed console script."""
        return f"check_{self.name}"

    def load(self) -> ModuleType:
        """Import the check module."""
        return importlib.import_module(self.module_name)


CHECKS = (
    Check(
        name="conntrackd",
        brief="Check whether conntrackd is running and processing events",
        tool="conntrackd",
        privilege="root",
        tags=("conntrack", "netfilter", "daemon"),
    ),
    Check(
        name="named",
        brief="Check whether domain name resolution works for a given host",
        tool="host",
        tags=("dns", "named", "resolver"),
    ),
)


def find_check(name: str) -> Check | None:
    """
    Find a check by name.

    Accepts the check name (conntrackd) or the command name
    (check_conntrackd).
    """
    for check in CHECKS:
        if name in (check.name, check.command):
            return check
    return None


def filter_checks(tags: list[str] | None = None) -> list[Check]:
    """Checks carrying all of the given tags."""
    wanted = set(tags or ())
    return [check for check in CHECKS if wanted <= set(check.tags)]
