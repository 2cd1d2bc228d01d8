"""Line classification for external tool output.

A check describes the output it understands as an ordered table of rules.
Each output line is classified by the first rule whose pattern matches, and a
pure reducer folds the classified lines into the check's accumulator. Once the
accumulator holds a terminal verdict, or reports that it has seen enough, no
further lines are read.
"""

import re
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from typing import Any, Protocol, TypeVar

from nrpecheck.core.status import CheckResult


@dataclass(frozen=True)
class LineEvent:
    """A single line of captured output."""

    raw: str

    @property
    def text(self) -> str:
        """Line with surrounding whitespace removed."""
        return self.raw.strip()


@dataclass(frozen=True)
class Rule:
    """
    Maps lines matching a pattern to a category.

    Patterns are searched in the trimmed line text unless raw is set, in
    which case the untouched line is used (needed to spot indentation).
    """

    category: str
    pattern: re.Pattern
    raw: bool = False

    @classmethod
    def compile(cls, category: str, pattern: str, raw: bool = False) -> "Rule":
        return cls(category, re.compile(pattern), raw)

    def match(self, event: LineEvent) -> re.Match | None:
        subject = event.raw if self.raw else event.text
        return self.pattern.search(subject)


@dataclass(frozen=True)
class Classification:
    """Category assigned to a line, with the match that selected it."""

    category: str
    match: re.Match | None = None


class Classifier:
    """Ordered rule table; the first matching rule wins."""

    def __init__(self, rules: Sequence[Rule], fallback: str = "other"):
        """
        Initialize classifier.

        Args:
            rules: Rules in evaluation order
            fallback: Category for lines no rule matches
        """
        self.rules = tuple(rules)
        self.fallback = fallback

    @property
    def categories(self) -> list[str]:
        """All categories this classifier can produce, in order."""
        return [rule.category for rule in self.rules] + [self.fallback]

    def classify(self, line: str) -> Classification:
        """Classify one raw output line."""
        event = LineEvent(line)
        for rule in self.rules:
            match = rule.match(event)
            if match is not None:
                return Classification(rule.category, match)
        return Classification(self.fallback)


class Accumulator(Protocol):
    """State folded over classified lines."""

    @property
    def verdict(self) -> CheckResult | None: ...

    @property
    def complete(self) -> bool: ...


StateT = TypeVar("StateT", bound=Accumulator)


def fold(
    lines: Iterable[str],
    classifier: Classifier,
    reducer: Callable[[StateT, Classification], StateT],
    state: StateT,
    on_line: Callable[[str, Classification], Any] | None = None,
) -> StateT:
    """
    Fold output lines into an accumulator.

    Stops at the first terminal verdict or once the accumulator is
    complete, leaving the remaining lines unread.

    Args:
        lines: Output lines (lazily consumed)
        classifier: Rule table to classify each line with
        reducer: Pure function (state, classification) -> new state
        state: Initial accumulator
        on_line: Optional callback invoked for every classified line

    Returns:
        The last accumulator
    """
    if state.verdict is not None or state.complete:
        return state

    for line in lines:
        classification = classifier.classify(line)
        if on_line is not None:
            on_line(line, classification)
        state = reducer(state, classification)
        if state.verdict is not None or state.complete:
            break

    return state


def decide(
    lines: Iterable[str],
    classifier: Classifier,
    reducer: Callable[[StateT, Classification], StateT],
    state: StateT,
    finalize: Callable[[StateT], CheckResult],
    on_line: Callable[[str, Classification], Any] | None = None,
) -> CheckResult:
    """
    Classify output lines and produce exactly one result.

    Returns the terminal verdict if one was reached, otherwise the result of
    finalize applied to the accumulator.
    """
    state = fold(lines, classifier, reducer, state, on_line=on_line)
    if state.verdict is not None:
        return state.verdict
    return finalize(state)
