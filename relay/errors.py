# -*- coding: utf-8 -*-

# Relay Gateway
# Copyright (C) 2025 Jwadow
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE. See the
# GNU Affero General Public License for more details.
#
# You should have received a copy of the GNU Affero General Public License
# along with this program. If not, see <https://www.gnu.org/licenses/>.

"""
Chat request validation errors.

Every way an inbound chat request can be rejected maps to one exception class.
All of them derive from ChatRequestError, so the routing layer needs a single
handler to turn any rejection into an HTTP 400 response.

Architecture:
- ValidationErrorKind: Enum of rejection kinds (stable machine-readable codes)
- ChatRequestError: Base exception carrying kind, message and offending param
- MalformedBodyError / MissingMessagesError / InvalidMessageError /
  TypeMismatchError / RangeViolationError: one subclass per kind

Example:
    >>> try:
    ...     raise TypeMismatchError("stream", "boolean", actual="yes")
    ... except ChatRequestError as e:
    ...     print(e.to_openai_error()["error"]["code"])
    type_mismatch
"""

from enum import Enum
from typing import Any, Dict, Optional


class ValidationErrorKind(str, Enum):
    """Machine-readable rejection kinds."""

    MALFORMED_BODY = "malformed_body"
    MISSING_MESSAGES = "missing_messages"
    INVALID_MESSAGE = "invalid_message"
    TYPE_MISMATCH = "type_mismatch"
    RANGE_VIOLATION = "range_violation"


def json_type_name(value: Any) -> str:
    """
    Returns the JSON type name of a parsed JSON value.

    Used in error details so clients see "string", not Python's "str".
    """
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__


class ChatRequestError(ValueError):
    """
    Base class for all chat request rejections.

    Attributes:
        kind: Rejection kind
        message: Human-readable description of the violation
        param: Name of the offending top-level field, if any
    """

    kind: ValidationErrorKind = ValidationErrorKind.MALFORMED_BODY

    def __init__(self, message: str, param: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.param = param

    def details(self) -> Dict[str, Any]:
        """Kind-specific structured details. Overridden by subclasses."""
        return {}

    def to_dict(self) -> Dict[str, Any]:
        """Structured representation of the error (kind, message, param, details)."""
        return {
            "kind": self.kind.value,
            "message": self.message,
            "param": self.param,
            **self.details(),
        }

    def to_openai_error(self) -> Dict[str, Any]:
        """
        Renders the error as an OpenAI-style error body.

        Returns:
            {"error": {"message": ..., "type": "invalid_request_error", "param": ..., "code": ...}}
        """
        return {
            "error": {
                "message": self.message,
                "type": "invalid_request_error",
                "param": self.param,
                "code": self.kind.value,
            }
        }


class MalformedBodyError(ChatRequestError):
    """Request body is not a JSON object."""

    kind = ValidationErrorKind.MALFORMED_BODY

    def __init__(self, message: str = "Request body must be a JSON object"):
        super().__init__(message)


class MissingMessagesError(ChatRequestError):
    """The messages field is absent, not an array, or empty."""

    kind = ValidationErrorKind.MISSING_MESSAGES

    def __init__(self, message: str = "messages must be a non-empty array"):
        super().__init__(message, param="messages")


ROLE_CONSTRAINT = "role must be one of system|user|assistant"
CONTENT_CONSTRAINT = (
    "content must be a non-empty string or a non-empty array of valid content items"
)


class InvalidMessageError(ChatRequestError):
    """
    A single message failed validation.

    Only the first invalid message is reported.

    Attributes:
        index: 0-based position of the message in the messages array
        received: Compact JSON rendering of the offending message
        reason: Which rule the message broke (for logs and debugging)
        role_constraint: Rule the role must satisfy
        content_constraint: Rule the content must satisfy
    """

    kind = ValidationErrorKind.INVALID_MESSAGE

    def __init__(self, index: int, received: str, reason: str = ""):
        self.index = index
        self.received = received
        self.reason = reason
        self.role_constraint = ROLE_CONSTRAINT
        self.content_constraint = CONTENT_CONSTRAINT
        message = (
            f"Message at index {index} is invalid: must have valid role "
            f"(system|user|assistant) and non-empty content. Received: {received}"
        )
        super().__init__(message, param=f"messages[{index}]")

    def details(self) -> Dict[str, Any]:
        return {
            "index": self.index,
            "received": self.received,
            "reason": self.reason,
            "role_constraint": self.role_constraint,
            "content_constraint": self.content_constraint,
        }


class TypeMismatchError(ChatRequestError):
    """
    An optional field has the wrong JSON type.

    Attributes:
        expected: Expected JSON type ("boolean", "number", "string")
        actual_type: JSON type actually received
    """

    kind = ValidationErrorKind.TYPE_MISMATCH

    def __init__(self, field: str, expected: str, actual: Any = None):
        self.expected = expected
        self.actual_type = json_type_name(actual)
        article = "an" if expected[0] in "aeiou" else "a"
        super().__init__(f"{field} must be {article} {expected}", param=field)

    def details(self) -> Dict[str, Any]:
        return {"expected": self.expected, "actual_type": self.actual_type}


class RangeViolationError(ChatRequestError):
    """
    A numeric field lies outside its inclusive range.

    Attributes:
        minimum: Inclusive lower bound, or None when unbounded
        maximum: Inclusive upper bound, or None when unbounded
        actual: The rejected value
    """

    kind = ValidationErrorKind.RANGE_VIOLATION

    def __init__(
        self,
        field: str,
        minimum: Optional[float],
        maximum: Optional[float],
        actual: float,
    ):
        self.minimum = minimum
        self.maximum = maximum
        self.actual = actual
        if minimum is not None and actual < minimum:
            message = f"{field} must be >= {minimum}"
        else:
            message = f"{field} must be <= {maximum}"
        super().__init__(message, param=field)

    def details(self) -> Dict[str, Any]:
        return {"minimum": self.minimum, "maximum": self.maximum, "actual": self.actual}
