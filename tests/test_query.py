"""Tests for envctl.query."""

import pytest

from envctl.models import QueryMode, QuerySpec
from envctl.query import QueryDecision, decide, recheck


class TestQueryDecision:
    @pytest.mark.parametrize(
        ("found", "negate", "code", "text"),
        [
            (True, False, 0, "YES"),
            (True, True, 1, "NO"),
            (False, False, 1, "NO"),
            (False, True, 0, "YES"),
        ],
    )
    def test_code_and_text(self, found, negate, code, text):
        decision = QueryDecision(found=found, negate=negate)
        assert decision.code == code
        assert decision.text == text

    def test_decide_takes_negate_from_query(self):
        query = QuerySpec(key="FOO", mode=QueryMode.HAS, negate=True)
        assert decide(True, query).code == 1


class TestRecheck:
    def test_has_finds_key_case_insensitively(self):
        query = QuerySpec(key="foo", mode=QueryMode.HAS)
        assert recheck({"FOO": "bar"}, query).found is True

    def test_is_finds_value(self):
        query = QuerySpec(value="BAR", mode=QueryMode.IS)
        assert recheck({"FOO": "bar"}, query).found is True

    def test_is_misses_value(self):
        query = QuerySpec(value="baz", mode=QueryMode.IS)
        assert recheck({"FOO": "bar"}, query).code == 1

    def test_inactive_query_is_not_found(self):
        assert recheck({"FOO": "bar"}, QuerySpec()).found is False
