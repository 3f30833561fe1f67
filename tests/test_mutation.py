"""Tests for envctl.mutation."""

from envctl.models import MutationOp, MutationSpec
from envctl.mutation import apply_add, drops_key, drops_value, key_matches, value_matches


class TestMatching:
    def test_key_match_folds_case_and_trims(self):
        assert key_matches(" Foo ", "FOO")
        assert not key_matches("FOO", "FOOBAR")

    def test_value_match_folds_case(self):
        assert value_matches("Secret", "secret")

    def test_remove_predicates_need_a_target(self):
        remove_key = MutationSpec(key="A", op=MutationOp.REMOVE)
        assert drops_key("a", remove_key)
        assert not drops_value("", remove_key)

    def test_predicates_inactive_without_remove(self):
        spec = MutationSpec(key="A", value="1", op=MutationOp.ADD)
        assert not drops_key("A", spec)
        assert not drops_value("1", spec)


class TestApplyAdd:
    def test_inserts_missing_key(self):
        records = {"A": "1"}
        assert apply_add(records, MutationSpec(key=" B ", value=" 2 ", op=MutationOp.ADD))
        assert records == {"A": "1", "B": "2"}
        assert list(records) == ["A", "B"]

    def test_existing_key_is_left_alone(self):
        records = {"A": "1"}
        assert not apply_add(records, MutationSpec(key="A", value="changed", op=MutationOp.ADD))
        assert records == {"A": "1"}

    def test_adding_twice_is_idempotent(self):
        records = {}
        spec = MutationSpec(key="A", value="1", op=MutationOp.ADD)
        apply_add(records, spec)
        snapshot = dict(records)
        apply_add(records, spec)
        assert records == snapshot

    def test_storage_lookup_is_case_sensitive(self):
        records = {"FOO": "1"}
        assert apply_add(records, MutationSpec(key="foo", value="2", op=MutationOp.ADD))
        assert records == {"FOO": "1", "foo": "2"}

    def test_blank_key_is_not_inserted(self):
        records = {"A": "1"}
        assert not apply_add(records, MutationSpec(key="  ", value="x", op=MutationOp.ADD))
        assert records == {"A": "1"}

    def test_other_ops_do_nothing(self):
        records = {}
        assert not apply_add(records, MutationSpec(key="A", value="1", op=MutationOp.REMOVE))
        assert records == {}
