"""Tests for the check registry."""

from nrpecheck.core.registry import CHECKS, filter_checks, find_check


class TestFindCheck:
    """Tests for find_check."""

    def test_by_name(self):
        """Checks are found by their name."""
        assert find_check("conntrackd").tool == "conntrackd"

    def test_by_command(self):
        """Checks are found by their console script name."""
        assert find_check("check_named").name == "named"

    def test_unknown(self):
        """Unknown names return None."""
        assert find_check("ntp") is None


class TestCheck:
    """Tests for Check."""

    def test_privilege(self):
        """Only conntrackd needs root."""
        assert {c.name: c.privilege for c in CHECKS} == {
            "conntrackd": "root",
            "named": "user",
        }

    def test_load(self):
        """load imports a module exposing run and main."""
        module = find_check("named").load()

        assert callable(module.run)
        assert callable(module.main)


class TestFilterChecks:
    """Tests for filter_checks."""

    def test_no_tags_returns_all(self):
        """Without tags every check is returned."""
        assert [c.name for c in filter_checks()] == ["conntrackd", "named"]

    def test_all_tags_must_match(self):
        """Checks must carry every given tag."""
        assert [c.name for c in filter_checks(["dns"])] == ["named"]
        assert filter_checks(["dns", "daemon"]) == []
