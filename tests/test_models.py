"""Tests for the LogMessage value type."""

import dataclasses

import pytest

from src.models import LogMessage, MissingField


class TestFormatted:
    def test_format(self):
        assert LogMessage("alice", "hello").formatted() == "client alice: hello"

    def test_body_kept_verbatim(self):
        msg = LogMessage("bob", "disk: 91% full")
        assert msg.formatted() == "client bob: disk: 91% full"

    def test_frozen(self):
        msg = LogMessage("alice", "hello")
        with pytest.raises(dataclasses.FrozenInstanceError):
            msg.body = "changed"

    def test_equality_by_content(self):
        assert LogMessage("a", "b") == LogMessage("a", "b")


class TestFromForm:
    def test_valid(self):
        msg = LogMessage.from_form({"id": ["alice"], "msg": ["hello"]})
        assert msg == LogMessage(client_id="alice", body="hello")

    def test_first_value_wins(self):
        msg = LogMessage.from_form({"id": ["a", "b"], "msg": ["x", "y"]})
        assert msg.formatted() == "client a: x"

    def test_missing_id(self):
        with pytest.raises(MissingField) as exc_info:
            LogMessage.from_form({"msg": ["hello"]})
        assert exc_info.value.field == "id"
        assert str(exc_info.value) == "id missing"

    def test_empty_id(self):
        with pytest.raises(MissingField) as exc_info:
            LogMessage.from_form({"id": [""], "msg": ["hi"]})
        assert exc_info.value.field == "id"

    def test_id_checked_before_msg(self):
        with pytest.raises(MissingField) as exc_info:
            LogMessage.from_form({})
        assert exc_info.value.field == "id"

    def test_missing_msg(self):
        with pytest.raises(MissingField) as exc_info:
            LogMessage.from_form({"id": ["alice"], "msg": [""]})
        assert exc_info.value.field == "msg"
        assert str(exc_info.value) == "msg missing"
