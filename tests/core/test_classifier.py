"""Tests for the line classifier."""

import dataclasses
from dataclasses import dataclass

import pytest

from nrpecheck.core.classifier import (
    Classification,
    Classifier,
    LineEvent,
    Rule,
    decide,
    fold,
)
from nrpecheck.core.status import CheckResult, Status


@dataclass(frozen=True)
class CountState:
    """Counts 'tick' lines, stops after a limit, fails on 'boom'."""

    ticks: int = 0
    others: int = 0
    limit: int = 3
    verdict: CheckResult | None = None

    @property
    def complete(self) -> bool:
        return self.ticks >= self.limit


def count_reducer(state: CountState, classification: Classification) -> CountState:
    if classification.category == "boom":
        return dataclasses.replace(state, verdict=CheckResult.critical("boom"))
    if classification.category == "tick":
        return dataclasses.replace(state, ticks=state.ticks + 1)
    if classification.category == "other":
        return dataclasses.replace(state, others=state.others + 1)
    return state


def count_finalize(state: CountState) -> CheckResult:
    return CheckResult.ok(f"{state.ticks} ticks, {state.others} others")


CLASSIFIER = Classifier(
    [
        Rule.compile("blank", r"^(\s|$)", raw=True),
        Rule.compile("boom", r"^boom"),
        Rule.compile("tick", r"^tick(?: (\d+))?$"),
    ]
)


class TestLineEvent:
    """Tests for LineEvent."""

    def test_text_is_trimmed(self):
        """text strips surrounding whitespace."""
        assert LineEvent("  hello \t").text == "hello"

    def test_raw_is_untouched(self):
        """raw keeps indentation."""
        assert LineEvent("\tindented").raw == "\tindented"


class TestRule:
    """Tests for Rule matching."""

    def test_matches_trimmed_text_by_default(self):
        """Anchored patterns match after trimming."""
        rule = Rule.compile("tick", r"^tick$")
        assert rule.match(LineEvent("   tick  ")) is not None

    def test_raw_rule_sees_indentation(self):
        """Raw rules match against the untouched line."""
        rule = Rule.compile("indented", r"^\s", raw=True)
        assert rule.match(LineEvent("\tdetail")) is not None
        assert rule.match(LineEvent("heading")) is None

    def test_match_exposes_groups(self):
        """Captured groups are available on the match."""
        rule = Rule.compile("value", r"objects:\s*(\d+)")
        match = rule.match(LineEvent("active objects:   42"))
        assert match.group(1) == "42"


class TestClassifier:
    """Tests for Classifier."""

    def test_first_match_wins(self):
        """Earlier rules take precedence over later ones."""
        classifier = Classifier([
            Rule.compile("first", r"abc"),
            Rule.compile("second", r"abc"),
        ])
        assert classifier.classify("abc").category == "first"

    def test_fallback_category(self):
        """Unmatched lines get the fallback category."""
        classification = CLASSIFIER.classify("something else")
        assert classification.category == "other"
        assert classification.match is None

    def test_blank_line_is_classified(self):
        """Empty and whitespace-only lines match the raw rule."""
        assert CLASSIFIER.classify("").category == "blank"
        assert CLASSIFIER.classify("   ").category == "blank"

    def test_categories_in_order(self):
        """categories lists rules in order followed by the fallback."""
        assert CLASSIFIER.categories == ["blank", "boom", "tick", "other"]


class TestFold:
    """Tests for fold."""

    def test_reduces_every_line(self):
        """All lines are folded when nothing stops early."""
        state = fold(["tick", "noise", ""], CLASSIFIER, count_reducer, CountState())
        assert state.ticks == 1
        assert state.others == 1

    def test_stops_when_complete(self):
        """No line is read after the accumulator reports completion."""
        consumed = []

        def lines():
            for line in ["tick", "tick", "tick", "boom", "tick"]:
                consumed.append(line)
                yield line

        state = fold(lines(), CLASSIFIER, count_reducer, CountState())

        assert state.ticks == 3
        assert state.verdict is None
        assert consumed == ["tick", "tick", "tick"]

    def test_stops_at_terminal_verdict(self):
        """A terminal verdict ends classification immediately."""
        consumed = []

        def lines():
            for line in ["tick", "boom", "tick", "tick"]:
                consumed.append(line)
                yield line

        state = fold(lines(), CLASSIFIER, count_reducer, CountState())

        assert state.verdict == CheckResult.critical("boom")
        assert consumed == ["tick", "boom"]

    def test_on_line_called_per_classified_line(self):
        """The callback receives each line with its classification."""
        seen = []
        fold(
            ["tick", "x"],
            CLASSIFIER,
            count_reducer,
            CountState(),
            on_line=lambda line, c: seen.append((line, c.category)),
        )
        assert seen == [("tick", "tick"), ("x", "other")]

    def test_empty_input_returns_initial_state(self):
        """No lines leave the accumulator untouched."""
        assert fold([], CLASSIFIER, count_reducer, CountState()) == CountState()


class TestDecide:
    """Tests for decide."""

    def test_terminal_verdict_wins(self):
        """The terminal verdict is returned without finalizing."""
        result = decide(["boom"], CLASSIFIER, count_reducer, CountState(), count_finalize)
        assert result.status == Status.CRITICAL

    def test_finalize_after_exhaustion(self):
        """finalize decides when no terminal line was seen."""
        result = decide(["tick", "x"], CLASSIFIER, count_reducer, CountState(), count_finalize)
        assert result == CheckResult.ok("1 ticks, 1 others")

    @pytest.mark.parametrize("lines", [[], ["  "], ["tick"] * 5])
    def test_always_produces_a_result(self, lines):
        """Exactly one result is produced for any input."""
        result = decide(lines, CLASSIFIER, count_reducer, CountState(), count_finalize)
        assert isinstance(result, CheckResult)
