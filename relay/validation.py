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
Chat request validator.

Narrows an untyped, already-parsed JSON value into a ValidatedChatRequest,
or raises a ChatRequestError subclass describing the first violation.

Checks run in a fixed order, each a precondition for the next:
  1. Body must be a JSON object
  2. messages must be a non-empty array
  3. Every message must be valid (fail-fast on the first invalid index)
  4. Optional fields: stream, sampling parameters, seed, model

Only three roles and two content shapes are accepted. Content items of an
unknown type are let through untouched so new content kinds do not need a
gateway release.

This module is pure: no logging, no I/O, the input is never mutated.
"""

import json
import math
from typing import Any, Dict, List, Optional, Tuple

from relay.errors import (
    InvalidMessageError,
    MalformedBodyError,
    MissingMessagesError,
    RangeViolationError,
    TypeMismatchError,
)
from relay.models import (
    ContentItem,
    ImageUrl,
    ImageUrlContent,
    Message,
    OtherContent,
    TextContent,
    ValidatedChatRequest,
)

ALLOWED_ROLES: Tuple[str, ...] = ("system", "user", "assistant")

# Inclusive (min, max) per numeric field; None = unbounded on that side.
# seed is deliberately unbounded.
NUMERIC_FIELD_RANGES: Dict[str, Tuple[Optional[float], Optional[float]]] = {
    "temperature": (0, 2),
    "top_p": (0, 1),
    "max_tokens": (1, None),
    "presence_penalty": (-2, 2),
    "frequency_penalty": (-2, 2),
    "seed": (None, None),
}


# ==================================================================================================
# Type Guards
# ==================================================================================================


def is_object(value: Any) -> bool:
    """True for a JSON object (dict). Arrays and null are not objects."""
    return isinstance(value, dict)


def is_number(value: Any) -> bool:
    """
    True for a finite JSON number.

    bool is excluded although it subclasses int. NaN and Infinity (which
    Python's json module accepts) are excluded.
    """
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    return isinstance(value, float) and math.isfinite(value)


def is_non_blank_string(value: Any) -> bool:
    """True for a string with at least one non-whitespace character."""
    return isinstance(value, str) and len(value.strip()) > 0


def is_valid_content_item(item: Any) -> bool:
    """
    Checks a single content item of an array-content message.

    - {"type": "text", "text": <non-blank string>}
    - {"type": "image_url", "image_url": {"url": ...}}
    - any other string type is accepted as-is
    """
    if not is_object(item):
        return False
    item_type = item.get("type")
    if not isinstance(item_type, str):
        return False

    if item_type == "text":
        return is_non_blank_string(item.get("text"))

    if item_type == "image_url":
        image_url = item.get("image_url")
        return is_object(image_url) and "url" in image_url

    return True


def message_violation(value: Any) -> Optional[str]:
    """
    Describes why a message is invalid.

    Args:
        value: One element of the messages array

    Returns:
        None if the message is valid, otherwise a short reason
    """
    if not is_object(value):
        return "message must be an object"
    if "role" not in value or "content" not in value:
        return "message must have role and content"

    role = value["role"]
    if not isinstance(role, str) or role not in ALLOWED_ROLES:
        return "role must be one of system|user|assistant"

    content = value["content"]
    if isinstance(content, str):
        if not content.strip():
            return "content string must not be blank"
        return None
    if isinstance(content, list):
        if not content:
            return "content array must not be empty"
        for position, item in enumerate(content):
            if not is_valid_content_item(item):
                return f"content item {position} is invalid"
        return None

    return "content must be a string or an array"


def is_valid_message(value: Any) -> bool:
    """True if value is a valid message."""
    return message_violation(value) is None


# ==================================================================================================
# Builders (input already checked)
# ==================================================================================================


def _build_content_item(item: Dict[str, Any]) -> ContentItem:
    item_type = item["type"]
    if item_type == "text":
        return TextContent(text=item["text"])
    if item_type == "image_url":
        return ImageUrlContent(image_url=ImageUrl.model_validate(item["image_url"]))
    return OtherContent(type=item_type, payload=dict(item))


def _build_message(value: Dict[str, Any]) -> Message:
    content = value["content"]
    if isinstance(content, list):
        content = tuple(_build_content_item(item) for item in content)
    return Message(role=value["role"], content=content)


def render_json(value: Any) -> str:
    """Compact JSON rendering used to echo offending values in errors."""
    return json.dumps(value, ensure_ascii=False, separators=(",", ":"), default=str)


# ==================================================================================================
# Field Validators
# ==================================================================================================


def _validate_messages(raw_messages: Any) -> List[Message]:
    if not isinstance(raw_messages, list) or len(raw_messages) == 0:
        raise MissingMessagesError()

    messages: List[Message] = []
    for index, raw_message in enumerate(raw_messages):
        reason = message_violation(raw_message)
        if reason is not None:
            raise InvalidMessageError(index, render_json(raw_message), reason)
        messages.append(_build_message(raw_message))
    return messages


def validate_optional_boolean(body: Dict[str, Any], field: str) -> Optional[bool]:
    """
    Returns body[field] if it is a boolean, None if the key is absent.

    Raises:
        TypeMismatchError: Key present with a non-boolean value (including null)
    """
    if field not in body:
        return None
    value = body[field]
    if not isinstance(value, bool):
        raise TypeMismatchError(field, "boolean", actual=value)
    return value


def validate_optional_number(
    body: Dict[str, Any],
    field: str,
    minimum: Optional[float] = None,
    maximum: Optional[float] = None,
) -> Optional[float]:
    """
    Returns body[field] if it is a number inside [minimum, maximum].

    Args:
        body: Request body
        field: Field name
        minimum: Inclusive lower bound (None = unbounded)
        maximum: Inclusive upper bound (None = unbounded)

    Returns:
        The value unchanged (int stays int), or None if the key is absent

    Raises:
        TypeMismatchError: Value is not a finite number
        RangeViolationError: Value is outside the range
    """
    if field not in body:
        return None
    value = body[field]
    if not is_number(value):
        raise TypeMismatchError(field, "number", actual=value)
    if minimum is not None and value < minimum:
        raise RangeViolationError(field, minimum, maximum, value)
    if maximum is not None and value > maximum:
        raise RangeViolationError(field, minimum, maximum, value)
    return value


def validate_optional_string(body: Dict[str, Any], field: str) -> Optional[str]:
    """
    Returns body[field] if it is a string, None if the key is absent.

    Raises:
        TypeMismatchError: Key present with a non-string value
    """
    if field not in body:
        return None
    value = body[field]
    if not isinstance(value, str):
        raise TypeMismatchError(field, "string", actual=value)
    return value


# ==================================================================================================
# Entry Point
# ==================================================================================================


def validate_chat_request(body: Any) -> ValidatedChatRequest:
    """
    Validates a parsed chat completions request body.

    Args:
        body: Parsed JSON of any shape (object, array, primitive)

    Returns:
        ValidatedChatRequest with only the optional fields the client sent

    Raises:
        MalformedBodyError: body is not a JSON object
        MissingMessagesError: messages absent, not an array, or empty
        InvalidMessageError: first invalid message (index + JSON echo)
        TypeMismatchError: optional field of the wrong type
        RangeViolationError: numeric field outside its range

    Example:
        >>> req = validate_chat_request({"messages": [{"role": "user", "content": "Hi"}], "temperature": 0.7})
        >>> req.temperature, req.is_set("top_p")
        (0.7, False)
    """
    if not is_object(body):
        raise MalformedBodyError()

    messages = _validate_messages(body.get("messages"))

    fields: Dict[str, Any] = {"messages": tuple(messages)}

    stream = validate_optional_boolean(body, "stream")
    if stream is not None:
        fields["stream"] = stream

    for field, (minimum, maximum) in NUMERIC_FIELD_RANGES.items():
        value = validate_optional_number(body, field, minimum, maximum)
        if value is not None:
            fields[field] = value

    model = validate_optional_string(body, "model")
    if model is not None:
        fields["model"] = model

    return ValidatedChatRequest(**fields)
