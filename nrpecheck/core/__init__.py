"""Core nrpecheck functionality."""

from nrpecheck.core.classifier import Classification, Classifier, LineEvent, Rule, decide, fold
from nrpecheck.core.config import ConfigError, Settings, load_settings
from nrpecheck.core.context import Context
from nrpecheck.core.guard import PreconditionError, require_binary, require_privilege
from nrpecheck.core.output import Output
from nrpecheck.core.registry import CHECKS, Check, filter_checks, find_check
from nrpecheck.core.runner import run_check
from nrpecheck.core.status import CheckResult, Status

__all__ = [
    "CHECKS",
    "Check",
    "CheckResult",
    "Classification",
    "Classifier",
    "ConfigError",
    "Context",
    "LineEvent",
    "Output",
    "PreconditionError",
    "Rule",
    "Settings",
    "Status",
    "decide",
    "filter_checks",
    "find_check",
    "fold",
    "load_settings",
    "require_binary",
    "require_privilege",
    "run_check",
]
