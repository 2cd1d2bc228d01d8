"""Tests for Output and CheckResult."""

import io
import json

import pytest

from nrpecheck.core.output import Output
from nrpecheck.core.status import CheckResult, Status


class TestCheckResult:
    """Tests for CheckResult."""

    @pytest.mark.parametrize("status,code", [
        (Status.OK, 0),
        (Status.WARNING, 1),
        (Status.CRITICAL, 2),
        (Status.UNKNOWN, 3),
    ])
    def test_exit_codes(self, status, code):
        """Each status maps to its fixed NRPE exit code."""
        assert CheckResult(status, "msg").exit_code == code

    def test_line_format(self):
        """line renders 'LEVEL: message'."""
        assert CheckResult.warning("disk degraded").line == "WARNING: disk degraded"

    def test_constructors(self):
        """Named constructors set the status."""
        assert CheckResult.ok("x").status == Status.OK
        assert CheckResult.critical("x").status == Status.CRITICAL
        assert CheckResult.unknown("x").status == Status.UNKNOWN


class TestOutput:
    """Tests for the status reporter."""

    def test_report_writes_single_line(self):
        """report() writes exactly one status line."""
        stream = io.StringIO()
        output = Output(stream=stream)

        code = output.report(CheckResult.critical("daemon broken"))

        assert code == 2
        assert stream.getvalue() == "CRITICAL: daemon broken\n"

    def test_report_defaults_to_stdout(self, capsys):
        """Without a stream the line goes to stdout."""
        Output().report(CheckResult.ok("fine"))
        assert capsys.readouterr().out == "OK: fine\n"

    def test_report_only_once(self):
        """A second report is rejected."""
        output = Output(stream=io.StringIO())
        output.report(CheckResult.ok("fine"))

        with pytest.raises(RuntimeError, match="already reported"):
            output.report(CheckResult.critical("late"))

        assert output.result == CheckResult.ok("fine")

    def test_json_format(self):
        """JSON format writes one JSON object."""
        stream = io.StringIO()
        Output(format="json", stream=stream).report(CheckResult.unknown("odd output"))

        lines = stream.getvalue().splitlines()
        assert len(lines) == 1
        parsed = json.loads(lines[0])
        assert parsed == {"status": "UNKNOWN", "code": 3, "message": "odd output"}

    def test_unknown_format_rejected(self):
        """Only plain and json are accepted."""
        with pytest.raises(ValueError):
            Output(format="table")

    def test_reported_flag(self):
        """reported reflects whether a result was written."""
        output = Output(stream=io.StringIO())
        assert output.reported is False
        output.report(CheckResult.ok("fine"))
        assert output.reported is True
