# -*- coding: utf-8 -*-

"""
Unit tests for the validation error taxonomy.
Tests ChatRequestError subclasses, to_dict() and to_openai_error().
"""

import pytest

from relay.errors import (
    ChatRequestError,
    InvalidMessageError,
    MalformedBodyError,
    MissingMessagesError,
    RangeViolationError,
    TypeMismatchError,
    ValidationErrorKind,
    json_type_name,
)


class TestErrorKinds:
    """Tests for kind assignment and hierarchy."""

    @pytest.mark.parametrize(
        "error,kind",
        [
            (MalformedBodyError(), ValidationErrorKind.MALFORMED_BODY),
            (MissingMessagesError(), ValidationErrorKind.MISSING_MESSAGES),
            (InvalidMessageError(2, "{}"), ValidationErrorKind.INVALID_MESSAGE),
            (TypeMismatchError("stream", "boolean", "x"), ValidationErrorKind.TYPE_MISMATCH),
            (RangeViolationError("top_p", 0, 1, 2), ValidationErrorKind.RANGE_VIOLATION),
        ],
    )
    def test_each_error_has_its_kind(self, error, kind):
        """
        What it does: Verifies every subclass reports its own kind.
        Purpose: Kind is the stable machine-readable code.
        """
        print(f"Checking {type(error).__name__} -> {kind}")
        assert error.kind == kind
        assert isinstance(error, ChatRequestError)
        assert isinstance(error, ValueError)

    def test_kind_values_are_strings(self):
        assert ValidationErrorKind.RANGE_VIOLATION.value == "range_violation"
        assert ValidationErrorKind.INVALID_MESSAGE == "invalid_message"


class TestInvalidMessageError:
    """Tests for InvalidMessageError details."""

    def test_message_contains_index_and_echo(self):
        """
        What it does: Verifies the message names the index and echoes the value.
        Purpose: Debugging aid for clients.
        """
        error = InvalidMessageError(3, '{"role":"bot"}', reason="role must be one of system|user|assistant")

        print(f"Message: {error}")
        assert str(error) == (
            "Message at index 3 is invalid: must have valid role "
            '(system|user|assistant) and non-empty content. Received: {"role":"bot"}'
        )
        assert error.param == "messages[3]"

    def test_to_dict_has_details(self):
        error = InvalidMessageError(0, "null", reason="message must be an object")

        data = error.to_dict()

        print(f"to_dict: {data}")
        assert data["kind"] == "invalid_message"
        assert data["index"] == 0
        assert data["received"] == "null"
        assert data["reason"] == "message must be an object"
        assert "role_constraint" in data
        assert "content_constraint" in data


class TestTypeMismatchError:
    """Tests for TypeMismatchError messages."""

    @pytest.mark.parametrize(
        "expected,message",
        [
            ("boolean", "stream must be a boolean"),
            ("number", "stream must be a number"),
            ("string", "stream must be a string"),
            ("array", "stream must be an array"),
        ],
    )
    def test_message_article(self, expected, message):
        assert str(TypeMismatchError("stream", expected)) == message

    def test_details(self):
        error = TypeMismatchError("temperature", "number", actual=[1])

        assert error.to_dict()["expected"] == "number"
        assert error.to_dict()["actual_type"] == "array"


class TestRangeViolationError:
    """Tests for RangeViolationError messages."""

    def test_below_minimum(self):
        error = RangeViolationError("temperature", 0, 2, -1)

        assert str(error) == "temperature must be >= 0"

    def test_above_maximum(self):
        error = RangeViolationError("presence_penalty", -2, 2, 3)

        assert str(error) == "presence_penalty must be <= 2"
        assert error.to_dict() == {
            "kind": "range_violation",
            "message": "presence_penalty must be <= 2",
            "param": "presence_penalty",
            "minimum": -2,
            "maximum": 2,
            "actual": 3,
        }


class TestOpenAIErrorBody:
    """Tests for to_openai_error()."""

    def test_shape(self):
        """
        What it does: Verifies the OpenAI-style error body.
        Purpose: Clients of OpenAI SDKs parse error.message / error.type.
        """
        body = MissingMessagesError().to_openai_error()

        print(f"Body: {body}")
        assert body == {
            "error": {
                "message": "messages must be a non-empty array",
                "type": "invalid_request_error",
                "param": "messages",
                "code": "missing_messages",
            }
        }

    def test_malformed_body_has_no_param(self):
        assert MalformedBodyError().to_openai_error()["error"]["param"] is None


class TestJsonTypeName:
    """Tests for json_type_name()."""

    @pytest.mark.parametrize(
        "value,name",
        [
            (None, "null"),
            (True, "boolean"),
            (1, "number"),
            (1.5, "number"),
            ("s", "string"),
            ([], "array"),
            ({}, "object"),
        ],
    )
    def test_names(self, value, name):
        assert json_type_name(value) == name
